"""
Ouderschaps API: Alimentatie Service
======================================

What:  Alimony data of a dossier and its line items.
How:   The main row is written by update-or-insert on the dossier id. Line
       items are always replaced as a whole set; the delete and the inserts
       run on the request session and commit together.
Who:   routes/alimentatie.py.

Access to an alimentatie id is resolved through its dossier. Repeated
`personenId` values in a bijdragen body are skipped after the first.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import NotFoundError
from ouderschaps_api.models import Alimentatie
from ouderschaps_api.schemas.alimentatie import (
    AlimentatieIn,
    AlimentatieOut,
    BijdrageKostenIn,
    BijdrageKostenOut,
    CompleteAlimentatieOut,
    FinancieleAfspraakIn,
    FinancieleAfspraakOut,
)
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)


def _column_values(body: AlimentatieIn) -> dict:
    values = body.model_dump(exclude_unset=True)
    if "bijdrage_template_id" in values:
        values["bijdrage_template"] = values.pop("bijdrage_template_id")
    return values


class AlimentatieService:
    def __init__(self, registry: StoreRegistry = stores, access: AccessService = access_service):
        self.alimentatie = registry.alimentatie
        self.access = access

    async def _complete(self, db: AsyncSession, alimentatie: Alimentatie) -> CompleteAlimentatieOut:
        bijdragen = await self.alimentatie.list_bijdragen(db, alimentatie.id)
        afspraken = await self.alimentatie.list_afspraken(db, alimentatie.id)
        return CompleteAlimentatieOut(
            alimentatie=AlimentatieOut.model_validate(alimentatie),
            bijdragen_kosten_kinderen=[BijdrageKostenOut.model_validate(b) for b in bijdragen],
            financiele_afspraken_kinderen=[FinancieleAfspraakOut.model_validate(a) for a in afspraken],
        )

    async def _authorized(self, db: AsyncSession, alimentatie_id: int, user_id: int) -> Alimentatie:
        alimentatie = await self.alimentatie.get(db, alimentatie_id)
        if alimentatie is None:
            raise NotFoundError("Alimentatie", alimentatie_id)
        await self.access.authorize_dossier(db, alimentatie.dossier_id, user_id)
        return alimentatie

    async def get_for_dossier(
        self, db: AsyncSession, dossier_id: int, user_id: int
    ) -> Optional[CompleteAlimentatieOut]:
        """None when the dossier has no alimentatie yet."""
        await self.access.authorize_dossier(db, dossier_id, user_id)
        alimentatie = await self.alimentatie.get_for_dossier(db, dossier_id)
        if alimentatie is None:
            return None
        return await self._complete(db, alimentatie)

    async def upsert(
        self, db: AsyncSession, dossier_id: int, body: AlimentatieIn, user_id: int
    ) -> CompleteAlimentatieOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        values = _column_values(body)
        alimentatie = await self.alimentatie.get_for_dossier(db, dossier_id)
        if alimentatie is None:
            alimentatie = await self.alimentatie.create(db, dossier_id, values)
            logger.info("Alimentatie %d created for dossier %d", alimentatie.id, dossier_id)
        else:
            alimentatie = await self.alimentatie.update(db, alimentatie, values)
        return await self._complete(db, alimentatie)

    async def replace_bijdragen(
        self, db: AsyncSession, alimentatie_id: int, items: List[BijdrageKostenIn], user_id: int
    ) -> List[BijdrageKostenOut]:
        alimentatie = await self._authorized(db, alimentatie_id, user_id)
        rows, seen = [], set()
        for item in items:
            if item.personen_id in seen:
                logger.info("Skipping duplicate personenId %d for alimentatie %d", item.personen_id, alimentatie_id)
                continue
            seen.add(item.personen_id)
            rows.append(item.model_dump())
        created = await self.alimentatie.replace_bijdragen(db, alimentatie, rows)
        return [BijdrageKostenOut.model_validate(b) for b in created]

    async def replace_afspraken(
        self, db: AsyncSession, alimentatie_id: int, items: List[FinancieleAfspraakIn], user_id: int
    ) -> List[FinancieleAfspraakOut]:
        await self._authorized(db, alimentatie_id, user_id)
        created = await self.alimentatie.replace_afspraken(db, alimentatie_id, [i.model_dump() for i in items])
        return [FinancieleAfspraakOut.model_validate(a) for a in created]


# Module-level singleton
alimentatie_service = AlimentatieService()
