"""Partijen: the people who take part in a dossier, each under a rol."""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import ConflictError, NotFoundError
from ouderschaps_api.schemas.dossier import AddPartijIn, PartijOut
from ouderschaps_api.schemas.lookup import NamedOut
from ouderschaps_api.schemas.persoon import PersoonOut
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.services.persoon_service import PersoonService, persoon_service
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)


def partij_out(row) -> PartijOut:
    partij, persoon, rol = row
    return PartijOut(
        id=partij.id,
        persoon=PersoonOut.model_validate(persoon),
        rol=NamedOut.model_validate(rol),
    )


class PartijService:
    def __init__(
        self,
        registry: StoreRegistry = stores,
        access: AccessService = access_service,
        personen: PersoonService = persoon_service,
    ):
        self.partijen = registry.partijen
        self.persoon_store = registry.personen
        self.access = access
        self.personen = personen

    async def rows_for_dossier(self, db: AsyncSession, dossier_id: int) -> List[PartijOut]:
        return [partij_out(row) for row in await self.partijen.list_for_dossier(db, dossier_id)]

    async def list_partijen(self, db: AsyncSession, dossier_id: int, user_id: int) -> List[PartijOut]:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        return await self.rows_for_dossier(db, dossier_id)

    async def add_partij(self, db: AsyncSession, dossier_id: int, body: AddPartijIn, user_id: int) -> PartijOut:
        """
        Link an existing persoon (`persoonId`) or inline data (`persoonData`)
        to the dossier under `rolId`.

        Raises:
            NotFoundError: persoonId does not exist (404 "Persoon not found")
            ConflictError: email taken, or the persoon already has this rol here
        """
        await self.access.authorize_dossier(db, dossier_id, user_id)

        if body.persoon_id is not None:
            persoon = await self.persoon_store.get(db, body.persoon_id)
            if persoon is None:
                raise NotFoundError("Persoon", body.persoon_id)
        else:
            persoon = await self.personen.save_inline(db, body.persoon_data, user_id)

        if await self.partijen.role_taken(db, dossier_id, persoon.id, body.rol_id):
            raise ConflictError("This person already has this role in this dossier")

        partij = await self.partijen.add(db, dossier_id, persoon.id, body.rol_id)
        logger.info("Persoon %d added to dossier %d as rol %d", persoon.id, dossier_id, body.rol_id)
        return partij_out(await self.partijen.get_row(db, partij.id))

    async def update_rol(
        self, db: AsyncSession, dossier_id: int, partij_id: int, rol_id: int, user_id: int
    ) -> PartijOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        partij = await self.partijen.get_in_dossier(db, dossier_id, partij_id)
        if partij is None:
            raise NotFoundError("Partij", partij_id, message="Partij not found in this dossier")
        if partij.rol_id != rol_id and await self.partijen.role_taken(db, dossier_id, partij.persoon_id, rol_id):
            raise ConflictError("This person already has this role in this dossier")
        await self.partijen.update_rol(db, partij, rol_id)
        return partij_out(await self.partijen.get_row(db, partij.id))

    async def remove_partij(self, db: AsyncSession, dossier_id: int, partij_id: int, user_id: int) -> None:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        partij = await self.partijen.get_in_dossier(db, dossier_id, partij_id)
        if partij is None:
            raise NotFoundError("Partij", partij_id, message="Partij not found in this dossier")
        await self.partijen.remove(db, partij)
        logger.info("Partij %d removed from dossier %d", partij_id, dossier_id)


# Module-level singleton
partij_service = PartijService()
