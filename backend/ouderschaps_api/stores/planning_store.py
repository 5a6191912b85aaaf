"""
Ouderschaps API: Plan Content Stores
======================================

What:  Data access for omgang (visitation slots), zorg (care agreements),
       ouderschapsplan info, communicatie afspraken and alimentatie with its
       sub-items.
How:   Abstract interfaces with SQLAlchemy implementations on the request
       session. Multi-row writers (week replacement, sub-item replacement)
       issue all their statements on that session, so they commit or roll
       back together with the request.
Who:   The omgang, zorg, plan-info, communicatie and alimentatie services;
       stores/legacy.py subclasses SqlOmgangStore.

Omgang slot:
    (dossier_id, dag_id, dagdeel_id, week_regeling_id) identifies one slot.
    Uniqueness is checked by `slot_taken` before writes; the database only
    carries a non-unique index on it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.models import (
    Alimentatie,
    BijdrageKostenKinderen,
    CommunicatieAfspraken,
    Dag,
    Dagdeel,
    FinancieleAfsprakenKinderen,
    Omgang,
    OuderschapsplanInfo,
    Persoon,
    WeekRegeling,
    Zorg,
    ZorgCategorie,
    ZorgSituatie,
)

logger = logging.getLogger(__name__)

OmgangRow = Tuple[Omgang, Dag, Dagdeel, Persoon, WeekRegeling]
ZorgRow = Tuple[Zorg, ZorgCategorie, ZorgSituatie]


# ══════════════════════════════════════════════════════════════════════════
# Omgang
# ══════════════════════════════════════════════════════════════════════════


class OmgangStore(ABC):
    @abstractmethod
    async def get(self, db: AsyncSession, omgang_id: int) -> Optional[Omgang]: ...

    @abstractmethod
    async def get_row(self, db: AsyncSession, omgang_id: int) -> Optional[OmgangRow]: ...

    @abstractmethod
    async def list_for_dossier(
        self, db: AsyncSession, dossier_id: int, week_regeling_id: Optional[int] = None
    ) -> List[OmgangRow]: ...

    @abstractmethod
    async def slot_taken(
        self,
        db: AsyncSession,
        dossier_id: int,
        dag_id: int,
        dagdeel_id: int,
        week_regeling_id: int,
        exclude_id: Optional[int] = None,
    ) -> bool: ...

    @abstractmethod
    async def create(self, db: AsyncSession, values: Dict[str, Any]) -> Omgang: ...

    @abstractmethod
    async def create_many(self, db: AsyncSession, rows: Sequence[Dict[str, Any]]) -> List[Omgang]: ...

    @abstractmethod
    async def update(self, db: AsyncSession, omgang: Omgang, values: Dict[str, Any]) -> Omgang: ...

    @abstractmethod
    async def delete(self, db: AsyncSession, omgang: Omgang) -> None: ...

    @abstractmethod
    async def replace_week(
        self,
        db: AsyncSession,
        dossier_id: int,
        week_regeling_id: int,
        rows: Sequence[Dict[str, Any]],
    ) -> int: ...


class SqlOmgangStore(OmgangStore):
    def _joined(self):
        return (
            select(Omgang, Dag, Dagdeel, Persoon, WeekRegeling)
            .join(Dag, Dag.id == Omgang.dag_id)
            .join(Dagdeel, Dagdeel.id == Omgang.dagdeel_id)
            .join(Persoon, Persoon.id == Omgang.verzorger_id)
            .join(WeekRegeling, WeekRegeling.id == Omgang.week_regeling_id)
        )

    async def get(self, db: AsyncSession, omgang_id: int) -> Optional[Omgang]:
        return await db.get(Omgang, omgang_id)

    async def get_row(self, db: AsyncSession, omgang_id: int) -> Optional[OmgangRow]:
        row = (await db.execute(self._joined().where(Omgang.id == omgang_id))).first()
        return tuple(row) if row else None

    async def list_for_dossier(
        self, db: AsyncSession, dossier_id: int, week_regeling_id: Optional[int] = None
    ) -> List[OmgangRow]:
        query = self._joined().where(Omgang.dossier_id == dossier_id)
        if week_regeling_id is not None:
            query = query.where(Omgang.week_regeling_id == week_regeling_id)
        result = await db.execute(query.order_by(Omgang.dag_id, Omgang.dagdeel_id, Omgang.id))
        return [tuple(row) for row in result.all()]

    async def slot_taken(
        self,
        db: AsyncSession,
        dossier_id: int,
        dag_id: int,
        dagdeel_id: int,
        week_regeling_id: int,
        exclude_id: Optional[int] = None,
    ) -> bool:
        query = select(Omgang.id).where(
            Omgang.dossier_id == dossier_id,
            Omgang.dag_id == dag_id,
            Omgang.dagdeel_id == dagdeel_id,
            Omgang.week_regeling_id == week_regeling_id,
        )
        if exclude_id is not None:
            query = query.where(Omgang.id != exclude_id)
        return (await db.execute(query.limit(1))).first() is not None

    async def create(self, db: AsyncSession, values: Dict[str, Any]) -> Omgang:
        omgang = Omgang(**values)
        db.add(omgang)
        await db.flush()
        return omgang

    async def create_many(self, db: AsyncSession, rows: Sequence[Dict[str, Any]]) -> List[Omgang]:
        created = [Omgang(**row) for row in rows]
        db.add_all(created)
        await db.flush()
        return created

    async def update(self, db: AsyncSession, omgang: Omgang, values: Dict[str, Any]) -> Omgang:
        for name, value in values.items():
            setattr(omgang, name, value)
        await db.flush()
        return omgang

    async def delete(self, db: AsyncSession, omgang: Omgang) -> None:
        await db.delete(omgang)
        await db.flush()

    async def replace_week(
        self,
        db: AsyncSession,
        dossier_id: int,
        week_regeling_id: int,
        rows: Sequence[Dict[str, Any]],
    ) -> int:
        """Delete every slot of the week regeling, then insert `rows`."""
        deleted = await db.execute(
            delete(Omgang).where(
                Omgang.dossier_id == dossier_id,
                Omgang.week_regeling_id == week_regeling_id,
            )
        )
        logger.info(
            "Omgang week %s of dossier %s: %d slots removed, %d inserted",
            week_regeling_id,
            dossier_id,
            deleted.rowcount,
            len(rows),
        )
        db.add_all(
            Omgang(dossier_id=dossier_id, week_regeling_id=week_regeling_id, **row) for row in rows
        )
        await db.flush()
        return len(rows)


# ══════════════════════════════════════════════════════════════════════════
# Zorg
# ══════════════════════════════════════════════════════════════════════════


class ZorgStore(ABC):
    @abstractmethod
    async def get(self, db: AsyncSession, zorg_id: int) -> Optional[Zorg]: ...

    @abstractmethod
    async def get_row(self, db: AsyncSession, zorg_id: int) -> Optional[ZorgRow]: ...

    @abstractmethod
    async def list_for_dossier(
        self, db: AsyncSession, dossier_id: int, categorie_id: Optional[int] = None
    ) -> List[ZorgRow]: ...

    @abstractmethod
    async def create(self, db: AsyncSession, values: Dict[str, Any]) -> Zorg: ...

    @abstractmethod
    async def update(self, db: AsyncSession, zorg: Zorg, values: Dict[str, Any]) -> Zorg: ...

    @abstractmethod
    async def delete(self, db: AsyncSession, zorg: Zorg) -> None: ...

    @abstractmethod
    async def delete_by_categorie(self, db: AsyncSession, dossier_id: int, categorie_id: int) -> int: ...


class SqlZorgStore(ZorgStore):
    def _joined(self):
        return (
            select(Zorg, ZorgCategorie, ZorgSituatie)
            .join(ZorgCategorie, ZorgCategorie.id == Zorg.zorg_categorie_id)
            .join(ZorgSituatie, ZorgSituatie.id == Zorg.zorg_situatie_id)
        )

    async def get(self, db: AsyncSession, zorg_id: int) -> Optional[Zorg]:
        return await db.get(Zorg, zorg_id)

    async def get_row(self, db: AsyncSession, zorg_id: int) -> Optional[ZorgRow]:
        row = (await db.execute(self._joined().where(Zorg.id == zorg_id))).first()
        return tuple(row) if row else None

    async def list_for_dossier(
        self, db: AsyncSession, dossier_id: int, categorie_id: Optional[int] = None
    ) -> List[ZorgRow]:
        query = self._joined().where(Zorg.dossier_id == dossier_id)
        if categorie_id is not None:
            query = query.where(Zorg.zorg_categorie_id == categorie_id)
        result = await db.execute(query.order_by(Zorg.zorg_categorie_id, Zorg.id))
        return [tuple(row) for row in result.all()]

    async def create(self, db: AsyncSession, values: Dict[str, Any]) -> Zorg:
        zorg = Zorg(**values)
        db.add(zorg)
        await db.flush()
        return zorg

    async def update(self, db: AsyncSession, zorg: Zorg, values: Dict[str, Any]) -> Zorg:
        for name, value in values.items():
            setattr(zorg, name, value)
        await db.flush()
        return zorg

    async def delete(self, db: AsyncSession, zorg: Zorg) -> None:
        await db.delete(zorg)
        await db.flush()

    async def delete_by_categorie(self, db: AsyncSession, dossier_id: int, categorie_id: int) -> int:
        result = await db.execute(
            delete(Zorg).where(Zorg.dossier_id == dossier_id, Zorg.zorg_categorie_id == categorie_id)
        )
        return result.rowcount


# ══════════════════════════════════════════════════════════════════════════
# Ouderschapsplan info
# ══════════════════════════════════════════════════════════════════════════


class PlanInfoStore(ABC):
    @abstractmethod
    async def get_for_dossier(self, db: AsyncSession, dossier_id: int) -> Optional[OuderschapsplanInfo]: ...

    @abstractmethod
    async def create(self, db: AsyncSession, dossier_id: int, values: Dict[str, Any]) -> OuderschapsplanInfo: ...

    @abstractmethod
    async def update(
        self, db: AsyncSession, info: OuderschapsplanInfo, values: Dict[str, Any]
    ) -> OuderschapsplanInfo: ...

    @abstractmethod
    async def delete(self, db: AsyncSession, info: OuderschapsplanInfo) -> None: ...


class SqlPlanInfoStore(PlanInfoStore):
    async def get_for_dossier(self, db: AsyncSession, dossier_id: int) -> Optional[OuderschapsplanInfo]:
        result = await db.execute(
            select(OuderschapsplanInfo).where(OuderschapsplanInfo.dossier_id == dossier_id)
        )
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, dossier_id: int, values: Dict[str, Any]) -> OuderschapsplanInfo:
        info = OuderschapsplanInfo(dossier_id=dossier_id, **values)
        db.add(info)
        await db.flush()
        return info

    async def update(
        self, db: AsyncSession, info: OuderschapsplanInfo, values: Dict[str, Any]
    ) -> OuderschapsplanInfo:
        for name, value in values.items():
            setattr(info, name, value)
        await db.flush()
        return info

    async def delete(self, db: AsyncSession, info: OuderschapsplanInfo) -> None:
        await db.delete(info)
        await db.flush()


# ══════════════════════════════════════════════════════════════════════════
# Communicatie afspraken
# ══════════════════════════════════════════════════════════════════════════


class CommunicatieStore(ABC):
    @abstractmethod
    async def get(self, db: AsyncSession, afspraken_id: int) -> Optional[CommunicatieAfspraken]: ...

    @abstractmethod
    async def get_for_dossier(self, db: AsyncSession, dossier_id: int) -> Optional[CommunicatieAfspraken]: ...

    @abstractmethod
    async def create(self, db: AsyncSession, dossier_id: int, values: Dict[str, Any]) -> CommunicatieAfspraken: ...

    @abstractmethod
    async def update(
        self, db: AsyncSession, afspraken: CommunicatieAfspraken, values: Dict[str, Any]
    ) -> CommunicatieAfspraken: ...

    @abstractmethod
    async def delete(self, db: AsyncSession, afspraken: CommunicatieAfspraken) -> None: ...


class SqlCommunicatieStore(CommunicatieStore):
    async def get(self, db: AsyncSession, afspraken_id: int) -> Optional[CommunicatieAfspraken]:
        return await db.get(CommunicatieAfspraken, afspraken_id)

    async def get_for_dossier(self, db: AsyncSession, dossier_id: int) -> Optional[CommunicatieAfspraken]:
        result = await db.execute(
            select(CommunicatieAfspraken).where(CommunicatieAfspraken.dossier_id == dossier_id)
        )
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, dossier_id: int, values: Dict[str, Any]) -> CommunicatieAfspraken:
        afspraken = CommunicatieAfspraken(dossier_id=dossier_id, **values)
        db.add(afspraken)
        await db.flush()
        return afspraken

    async def update(
        self, db: AsyncSession, afspraken: CommunicatieAfspraken, values: Dict[str, Any]
    ) -> CommunicatieAfspraken:
        for name, value in values.items():
            setattr(afspraken, name, value)
        await db.flush()
        return afspraken

    async def delete(self, db: AsyncSession, afspraken: CommunicatieAfspraken) -> None:
        await db.delete(afspraken)
        await db.flush()


# ══════════════════════════════════════════════════════════════════════════
# Alimentatie
# ══════════════════════════════════════════════════════════════════════════


class AlimentatieStore(ABC):
    @abstractmethod
    async def get(self, db: AsyncSession, alimentatie_id: int) -> Optional[Alimentatie]: ...

    @abstractmethod
    async def get_for_dossier(self, db: AsyncSession, dossier_id: int) -> Optional[Alimentatie]: ...

    @abstractmethod
    async def create(self, db: AsyncSession, dossier_id: int, values: Dict[str, Any]) -> Alimentatie: ...

    @abstractmethod
    async def update(self, db: AsyncSession, alimentatie: Alimentatie, values: Dict[str, Any]) -> Alimentatie: ...

    @abstractmethod
    async def list_bijdragen(self, db: AsyncSession, alimentatie_id: int) -> List[BijdrageKostenKinderen]: ...

    @abstractmethod
    async def list_afspraken(self, db: AsyncSession, alimentatie_id: int) -> List[FinancieleAfsprakenKinderen]: ...

    @abstractmethod
    async def replace_bijdragen(
        self, db: AsyncSession, alimentatie: Alimentatie, rows: Sequence[Dict[str, Any]]
    ) -> List[BijdrageKostenKinderen]: ...

    @abstractmethod
    async def replace_afspraken(
        self, db: AsyncSession, alimentatie_id: int, rows: Sequence[Dict[str, Any]]
    ) -> List[FinancieleAfsprakenKinderen]: ...


class SqlAlimentatieStore(AlimentatieStore):
    async def get(self, db: AsyncSession, alimentatie_id: int) -> Optional[Alimentatie]:
        return await db.get(Alimentatie, alimentatie_id)

    async def get_for_dossier(self, db: AsyncSession, dossier_id: int) -> Optional[Alimentatie]:
        result = await db.execute(
            select(Alimentatie).where(Alimentatie.dossier_id == dossier_id).order_by(Alimentatie.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, dossier_id: int, values: Dict[str, Any]) -> Alimentatie:
        alimentatie = Alimentatie(dossier_id=dossier_id, **values)
        db.add(alimentatie)
        await db.flush()
        return alimentatie

    async def update(self, db: AsyncSession, alimentatie: Alimentatie, values: Dict[str, Any]) -> Alimentatie:
        for name, value in values.items():
            setattr(alimentatie, name, value)
        await db.flush()
        return alimentatie

    async def list_bijdragen(self, db: AsyncSession, alimentatie_id: int) -> List[BijdrageKostenKinderen]:
        result = await db.execute(
            select(BijdrageKostenKinderen)
            .where(BijdrageKostenKinderen.alimentatie_id == alimentatie_id)
            .order_by(BijdrageKostenKinderen.id)
        )
        return list(result.scalars().all())

    async def list_afspraken(self, db: AsyncSession, alimentatie_id: int) -> List[FinancieleAfsprakenKinderen]:
        result = await db.execute(
            select(FinancieleAfsprakenKinderen)
            .where(FinancieleAfsprakenKinderen.alimentatie_id == alimentatie_id)
            .order_by(FinancieleAfsprakenKinderen.id)
        )
        return list(result.scalars().all())

    async def replace_bijdragen(
        self, db: AsyncSession, alimentatie: Alimentatie, rows: Sequence[Dict[str, Any]]
    ) -> List[BijdrageKostenKinderen]:
        """
        The alimentatie row points back at one of its bijdragen; that pointer
        is cleared before the old rows go and set to the first new row after.
        """
        alimentatie.bijdrage_kosten_kinderen = None
        await db.flush()
        await db.execute(
            delete(BijdrageKostenKinderen).where(BijdrageKostenKinderen.alimentatie_id == alimentatie.id)
        )
        created = [BijdrageKostenKinderen(alimentatie_id=alimentatie.id, **row) for row in rows]
        db.add_all(created)
        await db.flush()
        if created:
            alimentatie.bijdrage_kosten_kinderen = created[0].id
            await db.flush()
        return created

    async def replace_afspraken(
        self, db: AsyncSession, alimentatie_id: int, rows: Sequence[Dict[str, Any]]
    ) -> List[FinancieleAfsprakenKinderen]:
        await db.execute(
            delete(FinancieleAfsprakenKinderen).where(FinancieleAfsprakenKinderen.alimentatie_id == alimentatie_id)
        )
        created = [FinancieleAfsprakenKinderen(alimentatie_id=alimentatie_id, **row) for row in rows]
        db.add_all(created)
        await db.flush()
        return created
