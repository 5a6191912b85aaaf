"""Profile of the authenticated user, including the billing details needed before checkout."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.models import Gebruiker
from ouderschaps_api.models.columns import utcnow
from ouderschaps_api.schemas.user import BillingProfileIn, UserProfileOut
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)


def _blank_to_none(value):
    return None if value == "" else value


class UserService:
    def __init__(self, registry: StoreRegistry = stores):
        self.users = registry.users

    async def get_profile(self, user: Gebruiker) -> UserProfileOut:
        return UserProfileOut.model_validate(user)

    async def update_profile(self, db: AsyncSession, user: Gebruiker, body: BillingProfileIn) -> UserProfileOut:
        """Store the billing profile and mark it complete. Company fields are cleared for particulieren."""
        zakelijk = body.klant_type == "zakelijk"
        values = {
            "klant_type": body.klant_type,
            "telefoon": _blank_to_none(body.telefoon),
            "straat": body.straat,
            "huisnummer": body.huisnummer,
            "postcode": body.postcode.upper(),
            "plaats": body.plaats,
            "land": body.land,
            "bedrijfsnaam": _blank_to_none(body.bedrijfsnaam) if zakelijk else None,
            "btw_nummer": _blank_to_none(body.btw_nummer) if zakelijk else None,
            "kvk_nummer": _blank_to_none(body.kvk_nummer) if zakelijk else None,
            "is_zakelijk": zakelijk,
            "profiel_compleet": True,
            "profiel_ingevuld_op": utcnow(),
        }
        user = await self.users.update(db, user, values)
        logger.info("Billing profile of user %d updated (%s)", user.id, body.klant_type)
        return UserProfileOut.model_validate(user)


# Module-level singleton
user_service = UserService()
