"""
Ouderschaps API: Persoon Service
==================================

What:  People owned by a user: parents, children and caretakers share one
       shape and are told apart only by the links attached to them.
How:   Personen created by a user carry that user's id (`gebruiker_id`) and
       are visible to that user only. The partij, kind and ouder services
       create or update people inline through `save_inline`.

Email addresses are unique across personen (case-insensitive); a clash is a
409 "Email address already exists". A persoon still referenced from a dossier,
kind relation, omgang slot, plan or alimentatie row cannot be deleted (409).
"""

import logging
from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import AccessDeniedError, ConflictError, NotFoundError
from ouderschaps_api.models import Persoon
from ouderschaps_api.schemas.persoon import (
    PersoonCreate,
    PersoonDependenciesOut,
    PersoonDependencyCounts,
    PersoonDetailOut,
    PersoonInline,
    PersoonUpdate,
)
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)

# (count key, singular, plural) in message order
_DEPENDENCY_LABELS = (
    ("dossiers_partijen", "dossier als partij", "dossiers als partij"),
    ("dossiers_kinderen", "dossier als kind", "dossiers als kind"),
    ("kinderen_ouders_als_kind", "ouder relatie", "ouder relaties"),
    ("kinderen_ouders_als_ouder", "kind relatie", "kind relaties"),
    ("omgang", "omgang regeling", "omgang regelingen"),
    ("ouderschapsplan", "ouderschapsplan", "ouderschapsplannen"),
    ("financiele_afspraken", "financiele afspraak", "financiele afspraken"),
    ("bijdragen_kosten", "bijdrage", "bijdragen"),
)


def dependency_message(counts: Dict[str, int]) -> str:
    counts = dict(counts)
    counts["ouderschapsplan"] = counts.get("ouderschapsplan_partij_1", 0) + counts.get(
        "ouderschapsplan_partij_2", 0
    )
    parts = [
        f"{counts[key]} {singular if counts[key] == 1 else plural}"
        for key, singular, plural in _DEPENDENCY_LABELS
        if counts.get(key, 0) > 0
    ]
    if not parts:
        return "Deze persoon kan veilig worden verwijderd."
    return (
        "Deze persoon kan niet worden verwijderd omdat deze nog is gekoppeld aan: "
        f"{', '.join(parts)}. Verwijder eerst deze koppelingen."
    )


class PersoonService:
    def __init__(self, registry: StoreRegistry = stores):
        self.personen = registry.personen

    async def _ensure_email_free(self, db: AsyncSession, email, exclude_id=None) -> None:
        if email and await self.personen.email_exists(db, str(email), exclude_id=exclude_id):
            raise ConflictError("Email address already exists")

    async def _owned(self, db: AsyncSession, persoon_id: int, user_id: int) -> Persoon:
        persoon = await self.personen.get(db, persoon_id)
        if persoon is None:
            raise NotFoundError("Persoon", persoon_id)
        if persoon.gebruiker_id != user_id:
            raise AccessDeniedError()
        return persoon

    async def list_personen(self, db: AsyncSession, user_id: int) -> List[PersoonDetailOut]:
        personen = await self.personen.list_for_user(db, user_id)
        return [PersoonDetailOut.model_validate(p) for p in personen]

    async def get_persoon(self, db: AsyncSession, persoon_id: int, user_id: int) -> PersoonDetailOut:
        return PersoonDetailOut.model_validate(await self._owned(db, persoon_id, user_id))

    async def create_persoon(self, db: AsyncSession, data: PersoonCreate, user_id: int) -> PersoonDetailOut:
        await self._ensure_email_free(db, data.email)
        persoon = await self.personen.create(db, data.model_dump(exclude_unset=True), gebruiker_id=user_id)
        logger.info("Persoon %d created by user %d", persoon.id, user_id)
        return PersoonDetailOut.model_validate(persoon)

    async def update_persoon(
        self, db: AsyncSession, persoon_id: int, data: PersoonUpdate, user_id: int
    ) -> PersoonDetailOut:
        persoon = await self._owned(db, persoon_id, user_id)
        values = data.model_dump(exclude_unset=True)
        await self._ensure_email_free(db, values.get("email"), exclude_id=persoon_id)
        persoon = await self.personen.update(db, persoon, values)
        return PersoonDetailOut.model_validate(persoon)

    async def dependencies(self, db: AsyncSession, persoon_id: int, user_id: int) -> PersoonDependenciesOut:
        await self._owned(db, persoon_id, user_id)
        counts = await self.personen.dependencies(db, persoon_id)
        return PersoonDependenciesOut(
            has_dependencies=any(counts.values()),
            message=dependency_message(counts),
            dependencies=PersoonDependencyCounts(**counts),
        )

    async def delete_persoon(self, db: AsyncSession, persoon_id: int, user_id: int) -> None:
        persoon = await self._owned(db, persoon_id, user_id)
        counts = await self.personen.dependencies(db, persoon_id)
        if any(counts.values()):
            raise ConflictError(dependency_message(counts))
        await self.personen.delete(db, persoon)
        logger.info("Persoon %d deleted by user %d", persoon_id, user_id)

    async def save_inline(self, db: AsyncSession, data: PersoonInline, user_id: int) -> Persoon:
        """Create the persoon, or update it when the inline data names one of the user's own personen."""
        values = data.model_dump(exclude_unset=True, exclude={"id"})
        if data.id is None:
            await self._ensure_email_free(db, values.get("email"))
            return await self.personen.create(db, values, gebruiker_id=user_id)

        persoon = await self._owned(db, data.id, user_id)
        await self._ensure_email_free(db, values.get("email"), exclude_id=data.id)
        return await self.personen.update(db, persoon, values)


# Module-level singleton
persoon_service = PersoonService()
