"""
Ouderschaps API: Omgang Service
=================================

What:  The visitation schedule of a dossier: which verzorger has the
       children on which dag and dagdeel, per week regeling.
How:   Single slots and batches are created and updated with a pre-write overlap check on
       (dossier, dag, dagdeel, week regeling); the row being updated is
       excluded from that check. A whole week is replaced by deleting every
       slot of the week regeling and inserting the new ones on the same
       session, so the request transaction covers both.
Who:   routes/omgang.py.

Verzorger:
    Must be a partij of the dossier (400 "Verzorger must be a partij in the dossier").
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import ConflictError, NotFoundError, ValidationError
from ouderschaps_api.schemas.lookup import NamedOut, WeekRegelingOut
from ouderschaps_api.schemas.persoon import PersoonOut
from ouderschaps_api.schemas.planning import (
    OmgangBatchIn,
    OmgangCreate,
    OmgangOut,
    OmgangScheduleOut,
    OmgangUpdate,
    OmgangWeekIn,
    ScheduleGrid,
    ScheduleSlotOut,
)
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)

SLOT_CONFLICT_MESSAGE = "Schedule conflict: This time slot is already assigned"


def schedule_grid(rows) -> ScheduleGrid:
    """Slots grouped by dag naam, then dagdeel naam."""
    grouped: ScheduleGrid = {}
    for omgang, dag, dagdeel, verzorger, week_regeling in rows:
        grouped.setdefault(dag.naam, {})[dagdeel.naam] = ScheduleSlotOut(
            verzorger=PersoonOut.model_validate(verzorger),
            wissel_tijd=omgang.wissel_tijd,
            week_regeling=week_regeling.omschrijving,
        )
    return grouped


def omgang_out(row) -> OmgangOut:
    omgang, dag, dagdeel, verzorger, week_regeling = row
    return OmgangOut(
        id=omgang.id,
        dossier_id=omgang.dossier_id,
        dag=NamedOut.model_validate(dag),
        dagdeel=NamedOut.model_validate(dagdeel),
        verzorger=PersoonOut.model_validate(verzorger),
        wissel_tijd=omgang.wissel_tijd,
        week_regeling=WeekRegelingOut.model_validate(week_regeling),
        week_regeling_anders=omgang.week_regeling_anders,
        aangemaakt_op=omgang.aangemaakt_op,
        gewijzigd_op=omgang.gewijzigd_op,
    )


class OmgangService:
    def __init__(self, registry: StoreRegistry = stores, access: AccessService = access_service):
        self.omgang = registry.omgang
        self.partijen = registry.partijen
        self.access = access

    async def _ensure_verzorger(self, db: AsyncSession, dossier_id: int, verzorger_id: int) -> None:
        if not await self.partijen.is_partij(db, dossier_id, verzorger_id):
            raise ValidationError("Verzorger must be a partij in the dossier", field="verzorgerId")

    async def _row(self, db: AsyncSession, omgang_id: int) -> OmgangOut:
        row = await self.omgang.get_row(db, omgang_id)
        if row is None:
            raise NotFoundError("Omgang record", omgang_id)
        return omgang_out(row)

    async def create_omgang(self, db: AsyncSession, body: OmgangCreate, user_id: int) -> OmgangOut:
        await self.access.authorize_dossier(db, body.dossier_id, user_id)
        await self._ensure_verzorger(db, body.dossier_id, body.verzorger_id)
        if await self.omgang.slot_taken(
            db, body.dossier_id, body.dag_id, body.dagdeel_id, body.week_regeling_id
        ):
            raise ConflictError(SLOT_CONFLICT_MESSAGE)

        omgang = await self.omgang.create(db, body.model_dump())
        logger.info(
            "Omgang %d created in dossier %d (dag %d, dagdeel %d, week %d)",
            omgang.id,
            body.dossier_id,
            body.dag_id,
            body.dagdeel_id,
            body.week_regeling_id,
        )
        return await self._row(db, omgang.id)

    async def update_omgang(self, db: AsyncSession, omgang_id: int, body: OmgangUpdate, user_id: int) -> OmgangOut:
        omgang = await self.omgang.get(db, omgang_id)
        if omgang is None:
            raise NotFoundError("Omgang record", omgang_id)
        await self.access.authorize_dossier(db, omgang.dossier_id, user_id)

        values = body.model_dump(exclude_unset=True)
        if "verzorger_id" in values:
            await self._ensure_verzorger(db, omgang.dossier_id, values["verzorger_id"])

        slot = (
            values.get("dag_id", omgang.dag_id),
            values.get("dagdeel_id", omgang.dagdeel_id),
            values.get("week_regeling_id", omgang.week_regeling_id),
        )
        if await self.omgang.slot_taken(db, omgang.dossier_id, *slot, exclude_id=omgang.id):
            raise ConflictError(SLOT_CONFLICT_MESSAGE)

        await self.omgang.update(db, omgang, values)
        return await self._row(db, omgang_id)

    async def create_batch(
        self, db: AsyncSession, dossier_id: int, body: OmgangBatchIn, user_id: int
    ) -> List[OmgangOut]:
        """All entries are checked before any is written; a taken slot fails the whole batch."""
        await self.access.authorize_dossier(db, dossier_id, user_id)
        for verzorger_id in sorted({entry.verzorger_id for entry in body.entries}):
            await self._ensure_verzorger(db, dossier_id, verzorger_id)
        for entry in body.entries:
            if await self.omgang.slot_taken(
                db, dossier_id, entry.dag_id, entry.dagdeel_id, entry.week_regeling_id
            ):
                raise ConflictError(SLOT_CONFLICT_MESSAGE)

        rows = [dict(entry.model_dump(), dossier_id=dossier_id) for entry in body.entries]
        created = await self.omgang.create_many(db, rows)
        logger.info("Omgang batch of %d created in dossier %d", len(created), dossier_id)
        return [await self._row(db, omgang.id) for omgang in created]

    async def list_omgang(self, db: AsyncSession, dossier_id: int, user_id: int) -> List[OmgangOut]:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        return [omgang_out(row) for row in await self.omgang.list_for_dossier(db, dossier_id)]

    async def schedule(self, db: AsyncSession, dossier_id: int, user_id: int) -> OmgangScheduleOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        rows = await self.omgang.list_for_dossier(db, dossier_id)
        return OmgangScheduleOut(dossier_id=dossier_id, schedule=schedule_grid(rows))

    async def get_week(
        self, db: AsyncSession, dossier_id: int, week_regeling_id: int, user_id: int
    ) -> List[OmgangOut]:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        rows = await self.omgang.list_for_dossier(db, dossier_id, week_regeling_id=week_regeling_id)
        return [omgang_out(row) for row in rows]

    async def upsert_week(self, db: AsyncSession, dossier_id: int, body: OmgangWeekIn, user_id: int) -> List[OmgangOut]:
        await self.access.authorize_dossier(db, dossier_id, user_id)

        rows = []
        for day in body.days:
            for deel in day.dagdelen:
                rows.append(
                    {
                        "dag_id": day.dag_id,
                        "dagdeel_id": deel.dagdeel_id,
                        "verzorger_id": deel.verzorger_id,
                        "wissel_tijd": day.wissel_tijd,
                        "week_regeling_anders": body.week_regeling_anders,
                    }
                )
        for verzorger_id in sorted({row["verzorger_id"] for row in rows}):
            await self._ensure_verzorger(db, dossier_id, verzorger_id)

        await self.omgang.replace_week(db, dossier_id, body.week_regeling_id, rows)
        return await self.get_week(db, dossier_id, body.week_regeling_id, user_id)

    async def delete_omgang(self, db: AsyncSession, dossier_id: int, omgang_id: int, user_id: int) -> None:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        omgang = await self.omgang.get(db, omgang_id)
        if omgang is None or omgang.dossier_id != dossier_id:
            raise NotFoundError("Omgang record", omgang_id)
        await self.omgang.delete(db, omgang)
        logger.info("Omgang %d deleted from dossier %d", omgang_id, dossier_id)


# Module-level singleton
omgang_service = OmgangService()
