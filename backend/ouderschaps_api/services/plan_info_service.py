"""Ouderschapsplan info: one settings row per dossier, written by upsert."""

import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import NotFoundError
from ouderschaps_api.schemas.planning import OuderschapsplanInfoIn, OuderschapsplanInfoOut
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Ouderschapsplan info not found for this dossier"


class PlanInfoService:
    def __init__(self, registry: StoreRegistry = stores, access: AccessService = access_service):
        self.plan_info = registry.plan_info
        self.access = access

    async def get_info(self, db: AsyncSession, dossier_id: int, user_id: int) -> OuderschapsplanInfoOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        info = await self.plan_info.get_for_dossier(db, dossier_id)
        if info is None:
            raise NotFoundError("Ouderschapsplan info", message=NOT_FOUND_MESSAGE)
        return OuderschapsplanInfoOut.model_validate(info)

    async def upsert_info(
        self, db: AsyncSession, dossier_id: int, body: OuderschapsplanInfoIn, user_id: int
    ) -> Tuple[OuderschapsplanInfoOut, bool]:
        """Update the dossier's row in place, or insert it. Returns (info, created)."""
        await self.access.authorize_dossier(db, dossier_id, user_id)
        values = body.model_dump(exclude_unset=True)
        if body.bankrekeningnummers_op_naam_van_kind is not None:
            # Stored in wire form so the JSON column reads back unchanged
            values["bankrekeningnummers_op_naam_van_kind"] = [
                rekening.model_dump(by_alias=True) for rekening in body.bankrekeningnummers_op_naam_van_kind
            ]

        existing = await self.plan_info.get_for_dossier(db, dossier_id)
        if existing is not None:
            info = await self.plan_info.update(db, existing, values)
            logger.info("Ouderschapsplan info %d of dossier %d updated", info.id, dossier_id)
            return OuderschapsplanInfoOut.model_validate(info), False

        info = await self.plan_info.create(db, dossier_id, values)
        logger.info("Ouderschapsplan info %d of dossier %d created", info.id, dossier_id)
        return OuderschapsplanInfoOut.model_validate(info), True

    async def delete_info(self, db: AsyncSession, dossier_id: int, user_id: int) -> None:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        info = await self.plan_info.get_for_dossier(db, dossier_id)
        if info is None:
            raise NotFoundError("Ouderschapsplan info", message=NOT_FOUND_MESSAGE)
        await self.plan_info.delete(db, info)


# Module-level singleton
plan_info_service = PlanInfoService()
