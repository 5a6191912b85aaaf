"""Communicatie afspraken: one row per dossier with the plan wizard's communication choices."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import ConflictError, NotFoundError
from ouderschaps_api.models import CommunicatieAfspraken
from ouderschaps_api.schemas.planning import (
    CommunicatieAfsprakenCreate,
    CommunicatieAfsprakenOut,
    CommunicatieAfsprakenUpdate,
)
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Communicatie afspraken not found"
EXISTS_MESSAGE = "Communicatie afspraken already exists for this dossier. Use PUT to update."


class CommunicatieService:
    def __init__(self, registry: StoreRegistry = stores, access: AccessService = access_service):
        self.communicatie = registry.communicatie
        self.access = access

    async def _authorized(self, db: AsyncSession, afspraken_id: int, user_id: int) -> CommunicatieAfspraken:
        afspraken = await self.communicatie.get(db, afspraken_id)
        if afspraken is None:
            raise NotFoundError("Communicatie afspraken", message=NOT_FOUND_MESSAGE)
        await self.access.authorize_dossier(db, afspraken.dossier_id, user_id)
        return afspraken

    async def get_for_dossier(self, db: AsyncSession, dossier_id: int, user_id: int) -> CommunicatieAfsprakenOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        afspraken = await self.communicatie.get_for_dossier(db, dossier_id)
        if afspraken is None:
            raise NotFoundError("Communicatie afspraken", message=NOT_FOUND_MESSAGE)
        return CommunicatieAfsprakenOut.model_validate(afspraken)

    async def create(
        self, db: AsyncSession, body: CommunicatieAfsprakenCreate, user_id: int
    ) -> CommunicatieAfsprakenOut:
        await self.access.authorize_dossier(db, body.dossier_id, user_id)
        if await self.communicatie.get_for_dossier(db, body.dossier_id) is not None:
            raise ConflictError(EXISTS_MESSAGE)
        values = body.model_dump(exclude_unset=True, exclude={"dossier_id"})
        afspraken = await self.communicatie.create(db, body.dossier_id, values)
        logger.info("Communicatie afspraken %d created for dossier %d", afspraken.id, body.dossier_id)
        return CommunicatieAfsprakenOut.model_validate(afspraken)

    async def update(
        self, db: AsyncSession, afspraken_id: int, body: CommunicatieAfsprakenUpdate, user_id: int
    ) -> CommunicatieAfsprakenOut:
        afspraken = await self._authorized(db, afspraken_id, user_id)
        afspraken = await self.communicatie.update(db, afspraken, body.model_dump(exclude_unset=True))
        return CommunicatieAfsprakenOut.model_validate(afspraken)

    async def delete(self, db: AsyncSession, afspraken_id: int, user_id: int) -> None:
        afspraken = await self._authorized(db, afspraken_id, user_id)
        await self.communicatie.delete(db, afspraken)
        logger.info("Communicatie afspraken %d deleted", afspraken_id)


# Module-level singleton
communicatie_service = CommunicatieService()
