"""
Ouderschaps API: Complete Plan Service
========================================

What:  A single read of everything a dossier's ouderschapsplan consists of,
       and the completeness check the frontend shows before export.
How:   Reuses the per-section services and stores on the request session,
       one read after the other. Nothing is written.
Who:   routes/plan.py.

Completeness:
    partijen >= 2, kinderen >= 1, omgang >= 1 and zorg >= 1 are the four
    counted sections. `heeftAlimentatie` is true when an alimentatie row
    exists and is reported alongside, but does not count.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.schemas.dossier import DossierOut
from ouderschaps_api.schemas.plan import (
    CompletePlanOut,
    PlanMetadataOut,
    PlanOmgangOut,
    PlanVolledigheidOut,
)
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.services.alimentatie_service import AlimentatieService, alimentatie_service
from ouderschaps_api.services.kind_service import KindService, kind_service
from ouderschaps_api.services.omgang_service import omgang_out, schedule_grid
from ouderschaps_api.services.partij_service import PartijService, partij_service
from ouderschaps_api.services.zorg_service import zorg_out
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)

COUNTED_SECTIONS = 4
TOTAAL_SECTIES = 5


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def latest(values: Iterable[Optional[datetime]]) -> Optional[datetime]:
    present = [_as_utc(v) for v in values if v is not None]
    return max(present) if present else None


def volledigheid(
    partijen: int,
    kinderen: int,
    omgang: int,
    zorg: int,
    heeft_alimentatie: bool,
    laatst_gewijzigd: Optional[datetime] = None,
) -> PlanVolledigheidOut:
    checks = [partijen >= 2, kinderen >= 1, omgang >= 1, zorg >= 1]
    complete = sum(checks)
    return PlanVolledigheidOut(
        heeft_partijen=checks[0],
        heeft_kinderen=checks[1],
        heeft_omgang=checks[2],
        heeft_zorg=checks[3],
        heeft_alimentatie=heeft_alimentatie,
        is_compleet=complete == COUNTED_SECTIONS,
        percentage_compleet=round(complete / COUNTED_SECTIONS * 100),
        laatst_gewijzigd=laatst_gewijzigd,
    )


class PlanService:
    def __init__(
        self,
        registry: StoreRegistry = stores,
        access: AccessService = access_service,
        partijen: PartijService = partij_service,
        kinderen: KindService = kind_service,
        alimentatie: AlimentatieService = alimentatie_service,
    ):
        self.omgang = registry.omgang
        self.zorg = registry.zorg
        self.access = access
        self.partijen = partijen
        self.kinderen = kinderen
        self.alimentatie = alimentatie

    async def complete_plan(self, db: AsyncSession, dossier_id: int, user_id: int) -> CompletePlanOut:
        dossier = await self.access.authorize_dossier(db, dossier_id, user_id)
        partijen = await self.partijen.rows_for_dossier(db, dossier_id)
        kinderen = await self.kinderen.rows_for_dossier(db, dossier_id)
        omgang_rows = await self.omgang.list_for_dossier(db, dossier_id)
        zorg_rows = await self.zorg.list_for_dossier(db, dossier_id)
        alimentatie = await self.alimentatie.get_for_dossier(db, dossier_id, user_id)

        laatst_gewijzigd = latest(
            [dossier.gewijzigd_op]
            + [row[0].gewijzigd_op for row in omgang_rows]
            + [row[0].gewijzigd_op for row in zorg_rows]
        )
        status = volledigheid(
            len(partijen),
            len(kinderen),
            len(omgang_rows),
            len(zorg_rows),
            alimentatie is not None,
            laatst_gewijzigd,
        )
        compleet = sum([status.heeft_partijen, status.heeft_kinderen, status.heeft_omgang, status.heeft_zorg])
        return CompletePlanOut(
            dossier=DossierOut.model_validate(dossier),
            partijen=partijen,
            kinderen=kinderen,
            omgang=PlanOmgangOut(
                schedule=schedule_grid(omgang_rows),
                entries=[omgang_out(row) for row in omgang_rows],
            ),
            zorg=[zorg_out(row) for row in zorg_rows],
            alimentatie=alimentatie,
            metadata=PlanMetadataOut(
                volledigheid=status,
                laatst_gewijzigd=laatst_gewijzigd,
                aantal_secties_compleet=compleet,
                totaal_secties=TOTAAL_SECTIES,
            ),
        )

    async def validate_plan(self, db: AsyncSession, dossier_id: int, user_id: int) -> PlanVolledigheidOut:
        plan = await self.complete_plan(db, dossier_id, user_id)
        logger.info(
            "Plan of dossier %d is %d%% complete", dossier_id, plan.metadata.volledigheid.percentage_compleet
        )
        return plan.metadata.volledigheid


# Module-level singleton
plan_service = PlanService()
