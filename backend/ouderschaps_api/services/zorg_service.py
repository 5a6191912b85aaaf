"""Zorg agreements of a dossier, with the acting user recorded as author or editor."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import NotFoundError
from ouderschaps_api.schemas.lookup import NamedOut
from ouderschaps_api.schemas.planning import (
    ZorgCategoryDeleteOut,
    ZorgCreate,
    ZorgOut,
    ZorgUpdate,
    ZorgUpsertIn,
)
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)


def zorg_out(row) -> ZorgOut:
    zorg, categorie, situatie = row
    return ZorgOut(
        id=zorg.id,
        dossier_id=zorg.dossier_id,
        zorg_categorie=NamedOut.model_validate(categorie),
        zorg_situatie=NamedOut.model_validate(situatie),
        overeenkomst=zorg.overeenkomst,
        situatie_anders=zorg.situatie_anders,
        aangemaakt_op=zorg.aangemaakt_op,
        aangemaakt_door=zorg.aangemaakt_door,
        gewijzigd_op=zorg.gewijzigd_op,
        gewijzigd_door=zorg.gewijzigd_door,
    )


class ZorgService:
    def __init__(self, registry: StoreRegistry = stores, access: AccessService = access_service):
        self.zorg = registry.zorg
        self.access = access

    async def _in_dossier(self, db: AsyncSession, dossier_id: int, zorg_id: int):
        zorg = await self.zorg.get(db, zorg_id)
        if zorg is None or zorg.dossier_id != dossier_id:
            raise NotFoundError("Zorg", zorg_id)
        return zorg

    async def list_zorg(
        self, db: AsyncSession, dossier_id: int, user_id: int, categorie_id: Optional[int] = None
    ) -> List[ZorgOut]:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        return [zorg_out(row) for row in await self.zorg.list_for_dossier(db, dossier_id, categorie_id)]

    async def create_zorg(self, db: AsyncSession, dossier_id: int, body: ZorgCreate, user_id: int) -> ZorgOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        values = body.model_dump()
        values.update(dossier_id=dossier_id, aangemaakt_door=user_id)
        zorg = await self.zorg.create(db, values)
        logger.info("Zorg %d created in dossier %d by user %d", zorg.id, dossier_id, user_id)
        return zorg_out(await self.zorg.get_row(db, zorg.id))

    async def update_zorg(
        self, db: AsyncSession, dossier_id: int, zorg_id: int, body: ZorgUpdate, user_id: int
    ) -> ZorgOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        zorg = await self._in_dossier(db, dossier_id, zorg_id)
        values = body.model_dump(exclude_unset=True)
        values["gewijzigd_door"] = user_id
        await self.zorg.update(db, zorg, values)
        return zorg_out(await self.zorg.get_row(db, zorg_id))

    async def upsert_many(
        self, db: AsyncSession, dossier_id: int, body: ZorgUpsertIn, user_id: int
    ) -> List[ZorgOut]:
        """Update items whose id is a zorg row of this dossier, create the rest."""
        await self.access.authorize_dossier(db, dossier_id, user_id)
        created = updated = 0
        for item in body.zorgregelingen:
            values = item.model_dump(exclude={"id"})
            zorg = await self.zorg.get(db, item.id) if item.id is not None else None
            if zorg is not None and zorg.dossier_id == dossier_id:
                values["gewijzigd_door"] = user_id
                await self.zorg.update(db, zorg, values)
                updated += 1
            else:
                values.update(dossier_id=dossier_id, aangemaakt_door=user_id)
                await self.zorg.create(db, values)
                created += 1
        logger.info("Zorg upsert in dossier %d: %d created, %d updated", dossier_id, created, updated)
        return [zorg_out(row) for row in await self.zorg.list_for_dossier(db, dossier_id)]

    async def delete_by_categorie(
        self, db: AsyncSession, dossier_id: int, categorie_id: int, user_id: int
    ) -> ZorgCategoryDeleteOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        deleted = await self.zorg.delete_by_categorie(db, dossier_id, categorie_id)
        if deleted == 0:
            message = "No zorg records found for this category"
        else:
            noun = "record" if deleted == 1 else "records"
            message = f"Successfully deleted {deleted} zorg {noun}"
        logger.info("Deleted %d zorg rows of categorie %d from dossier %d", deleted, categorie_id, dossier_id)
        return ZorgCategoryDeleteOut(
            deleted=deleted, message=message, category_id=categorie_id, dossier_id=dossier_id
        )

    async def delete_zorg(self, db: AsyncSession, dossier_id: int, zorg_id: int, user_id: int) -> None:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        zorg = await self._in_dossier(db, dossier_id, zorg_id)
        await self.zorg.delete(db, zorg)
        logger.info("Zorg %d deleted from dossier %d", zorg_id, dossier_id)


# Module-level singleton
zorg_service = ZorgService()
