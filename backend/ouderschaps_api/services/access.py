"""
Ouderschaps API: Dossier Access Authorization
===============================================

There is one rule: a user may read and write a resource when they own the
dossier it belongs to. Every resource (partij, kind, omgang, zorg, plan info,
alimentatie) is first resolved to its dossier, then checked here.

`authorize_dossier` distinguishes a missing dossier (404) from one owned by
somebody else (403). Deleting a dossier and changing its status use
`is_owner`; everything else uses `check_access`. Both are the same ownership
predicate today; they are kept apart so a sharing model can widen access
without widening ownership.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import AccessDeniedError, NotFoundError
from ouderschaps_api.models import Dossier
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)


class AccessService:
    def __init__(self, registry: StoreRegistry = stores):
        self.dossiers = registry.dossiers
        self.personen = registry.personen
        self.kinderen = registry.kinderen

    async def check_access(self, db: AsyncSession, dossier_id: int, user_id: int) -> bool:
        return await self.dossiers.is_owned_by(db, dossier_id, user_id)

    async def is_owner(self, db: AsyncSession, dossier_id: int, user_id: int) -> bool:
        return await self.dossiers.is_owned_by(db, dossier_id, user_id)

    async def authorize_dossier(
        self,
        db: AsyncSession,
        dossier_id: int,
        user_id: int,
        require_owner: bool = False,
        denied_message: Optional[str] = None,
    ) -> Dossier:
        """
        Return the dossier when the user may use it.

        Raises:
            NotFoundError: no dossier with this id
            AccessDeniedError: the dossier belongs to another user
        """
        dossier = await self.dossiers.get(db, dossier_id)
        if dossier is None:
            raise NotFoundError("Dossier", dossier_id)

        check = self.is_owner if require_owner else self.check_access
        if not await check(db, dossier_id, user_id):
            logger.warning("User %d denied access to dossier %d", user_id, dossier_id)
            if denied_message:
                raise AccessDeniedError(denied_message)
            raise AccessDeniedError()
        return dossier

    async def can_access_kind(self, db: AsyncSession, kind_id: int, user_id: int) -> bool:
        """A kind is reachable through an owned dossier or as a persoon owned by the user."""
        for dossier_id in await self.kinderen.dossier_ids_for_kind(db, kind_id):
            if await self.check_access(db, dossier_id, user_id):
                return True
        persoon = await self.personen.get(db, kind_id)
        return persoon is not None and persoon.gebruiker_id == user_id


# Module-level singleton
access_service = AccessService()
