"""
Ouderschaps API: Dossier and People Stores
============================================

What:  Data access for dossiers, personen, partijen (dossier ↔ persoon ↔ rol),
       dossier-kind links and kind-ouder relations.
How:   One abstract interface per entity with a SQLAlchemy implementation.
       Methods take the request session and flush, never commit.
Who:   services/access.py and the dossier/partij/kind/persoon services.

Joined reads return tuples of ORM rows, e.g. `(DossierPartij, Persoon, Rol)`;
the services shape them into response models.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.models import (
    BijdrageKostenKinderen,
    Dossier,
    DossierKind,
    DossierPartij,
    FinancieleAfsprakenKinderen,
    KindOuder,
    Omgang,
    OuderschapsplanInfo,
    Persoon,
    RelatieType,
    Rol,
)

logger = logging.getLogger(__name__)

FIRST_DOSSIER_NUMMER = 1000


# ══════════════════════════════════════════════════════════════════════════
# Dossiers
# ══════════════════════════════════════════════════════════════════════════


class DossierStore(ABC):
    @abstractmethod
    async def get(self, db: AsyncSession, dossier_id: int) -> Optional[Dossier]: ...

    @abstractmethod
    async def is_owned_by(self, db: AsyncSession, dossier_id: int, user_id: int) -> bool: ...

    @abstractmethod
    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: int,
        include_inactive: bool,
        only_inactive: bool,
        limit: int,
        offset: int,
    ) -> Tuple[List[Dossier], int]: ...

    @abstractmethod
    async def create(self, db: AsyncSession, user_id: int) -> Dossier: ...

    @abstractmethod
    async def update(self, db: AsyncSession, dossier: Dossier, values: Dict[str, Any]) -> Dossier: ...


class SqlDossierStore(DossierStore):
    async def get(self, db: AsyncSession, dossier_id: int) -> Optional[Dossier]:
        return await db.get(Dossier, dossier_id)

    async def is_owned_by(self, db: AsyncSession, dossier_id: int, user_id: int) -> bool:
        result = await db.execute(
            select(Dossier.id).where(Dossier.id == dossier_id, Dossier.gebruiker_id == user_id)
        )
        return result.first() is not None

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: int,
        include_inactive: bool,
        only_inactive: bool,
        limit: int,
        offset: int,
    ) -> Tuple[List[Dossier], int]:
        """
        `status` true marks a dossier inactive (completed). By default only
        active dossiers are listed; `only_inactive` wins over `include_inactive`.
        """
        conditions = [Dossier.gebruiker_id == user_id]
        if only_inactive:
            conditions.append(Dossier.status.is_(True))
        elif not include_inactive:
            conditions.append(Dossier.status.is_(False))

        total = (
            await db.execute(select(func.count()).select_from(Dossier).where(*conditions))
        ).scalar_one()
        result = await db.execute(
            select(Dossier)
            .where(*conditions)
            .order_by(desc(Dossier.gewijzigd_op), desc(Dossier.id))
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total

    async def _next_dossier_nummer(self, db: AsyncSession) -> str:
        # Numbers are stored as strings; non-numeric legacy numbers are ignored.
        rows = (await db.execute(select(Dossier.dossier_nummer))).scalars().all()
        highest = max((int(n) for n in rows if n.isdigit()), default=FIRST_DOSSIER_NUMMER - 1)
        return str(highest + 1)

    async def create(self, db: AsyncSession, user_id: int) -> Dossier:
        dossier = Dossier(
            dossier_nummer=await self._next_dossier_nummer(db),
            gebruiker_id=user_id,
            status=False,
        )
        db.add(dossier)
        await db.flush()
        return dossier

    async def update(self, db: AsyncSession, dossier: Dossier, values: Dict[str, Any]) -> Dossier:
        for name, value in values.items():
            setattr(dossier, name, value)
        await db.flush()
        return dossier


# ══════════════════════════════════════════════════════════════════════════
# Personen
# ══════════════════════════════════════════════════════════════════════════


class PersoonStore(ABC):
    @abstractmethod
    async def get(self, db: AsyncSession, persoon_id: int) -> Optional[Persoon]: ...

    @abstractmethod
    async def list_for_user(self, db: AsyncSession, user_id: int) -> List[Persoon]: ...

    @abstractmethod
    async def create(self, db: AsyncSession, values: Dict[str, Any], gebruiker_id: Optional[int]) -> Persoon: ...

    @abstractmethod
    async def update(self, db: AsyncSession, persoon: Persoon, values: Dict[str, Any]) -> Persoon: ...

    @abstractmethod
    async def delete(self, db: AsyncSession, persoon: Persoon) -> None: ...

    @abstractmethod
    async def email_exists(self, db: AsyncSession, email: str, exclude_id: Optional[int] = None) -> bool: ...

    @abstractmethod
    async def dependencies(self, db: AsyncSession, persoon_id: int) -> Dict[str, int]: ...


class SqlPersoonStore(PersoonStore):
    async def get(self, db: AsyncSession, persoon_id: int) -> Optional[Persoon]:
        return await db.get(Persoon, persoon_id)

    async def list_for_user(self, db: AsyncSession, user_id: int) -> List[Persoon]:
        result = await db.execute(
            select(Persoon)
            .where(Persoon.gebruiker_id == user_id)
            .order_by(Persoon.achternaam, Persoon.voornamen, Persoon.id)
        )
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, values: Dict[str, Any], gebruiker_id: Optional[int]) -> Persoon:
        persoon = Persoon(gebruiker_id=gebruiker_id, **values)
        db.add(persoon)
        await db.flush()
        return persoon

    async def update(self, db: AsyncSession, persoon: Persoon, values: Dict[str, Any]) -> Persoon:
        for name, value in values.items():
            setattr(persoon, name, value)
        await db.flush()
        return persoon

    async def delete(self, db: AsyncSession, persoon: Persoon) -> None:
        await db.delete(persoon)
        await db.flush()

    async def email_exists(self, db: AsyncSession, email: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Persoon.id).where(func.lower(Persoon.email) == email.lower())
        if exclude_id is not None:
            query = query.where(Persoon.id != exclude_id)
        return (await db.execute(query.limit(1))).first() is not None

    async def dependencies(self, db: AsyncSession, persoon_id: int) -> Dict[str, int]:
        """Rows in other tables that point at the persoon, counted per kind of link."""
        queries = {
            "dossiers_partijen": select(func.count()).select_from(DossierPartij).where(
                DossierPartij.persoon_id == persoon_id
            ),
            "dossiers_kinderen": select(func.count()).select_from(DossierKind).where(
                DossierKind.kind_id == persoon_id
            ),
            "kinderen_ouders_als_kind": select(func.count()).select_from(KindOuder).where(
                KindOuder.kind_id == persoon_id
            ),
            "kinderen_ouders_als_ouder": select(func.count()).select_from(KindOuder).where(
                KindOuder.ouder_id == persoon_id
            ),
            "omgang": select(func.count()).select_from(Omgang).where(Omgang.verzorger_id == persoon_id),
            "ouderschapsplan_partij_1": select(func.count()).select_from(OuderschapsplanInfo).where(
                OuderschapsplanInfo.partij_1_persoon_id == persoon_id
            ),
            "ouderschapsplan_partij_2": select(func.count()).select_from(OuderschapsplanInfo).where(
                OuderschapsplanInfo.partij_2_persoon_id == persoon_id
            ),
            "financiele_afspraken": select(func.count()).select_from(FinancieleAfsprakenKinderen).where(
                FinancieleAfsprakenKinderen.kind_id == persoon_id
            ),
            "bijdragen_kosten": select(func.count()).select_from(BijdrageKostenKinderen).where(
                BijdrageKostenKinderen.personen_id == persoon_id
            ),
        }
        return {name: (await db.execute(query)).scalar_one() for name, query in queries.items()}


# ══════════════════════════════════════════════════════════════════════════
# Partijen
# ══════════════════════════════════════════════════════════════════════════

PartijRow = Tuple[DossierPartij, Persoon, Rol]


class PartijStore(ABC):
    @abstractmethod
    async def list_for_dossier(self, db: AsyncSession, dossier_id: int) -> List[PartijRow]: ...

    @abstractmethod
    async def get_row(self, db: AsyncSession, partij_id: int) -> Optional[PartijRow]: ...

    @abstractmethod
    async def get_in_dossier(self, db: AsyncSession, dossier_id: int, partij_id: int) -> Optional[DossierPartij]: ...

    @abstractmethod
    async def role_taken(self, db: AsyncSession, dossier_id: int, persoon_id: int, rol_id: int) -> bool: ...

    @abstractmethod
    async def is_partij(self, db: AsyncSession, dossier_id: int, persoon_id: int) -> bool: ...

    @abstractmethod
    async def add(self, db: AsyncSession, dossier_id: int, persoon_id: int, rol_id: int) -> DossierPartij: ...

    @abstractmethod
    async def update_rol(self, db: AsyncSession, partij: DossierPartij, rol_id: int) -> DossierPartij: ...

    @abstractmethod
    async def remove(self, db: AsyncSession, partij: DossierPartij) -> None: ...


class SqlPartijStore(PartijStore):
    def _joined(self):
        return (
            select(DossierPartij, Persoon, Rol)
            .join(Persoon, Persoon.id == DossierPartij.persoon_id)
            .join(Rol, Rol.id == DossierPartij.rol_id)
        )

    async def list_for_dossier(self, db: AsyncSession, dossier_id: int) -> List[PartijRow]:
        result = await db.execute(
            self._joined().where(DossierPartij.dossier_id == dossier_id).order_by(DossierPartij.rol_id, DossierPartij.id)
        )
        return [tuple(row) for row in result.all()]

    async def get_row(self, db: AsyncSession, partij_id: int) -> Optional[PartijRow]:
        result = await db.execute(self._joined().where(DossierPartij.id == partij_id))
        row = result.first()
        return tuple(row) if row else None

    async def get_in_dossier(self, db: AsyncSession, dossier_id: int, partij_id: int) -> Optional[DossierPartij]:
        result = await db.execute(
            select(DossierPartij).where(DossierPartij.id == partij_id, DossierPartij.dossier_id == dossier_id)
        )
        return result.scalar_one_or_none()

    async def role_taken(self, db: AsyncSession, dossier_id: int, persoon_id: int, rol_id: int) -> bool:
        result = await db.execute(
            select(DossierPartij.id).where(
                DossierPartij.dossier_id == dossier_id,
                DossierPartij.persoon_id == persoon_id,
                DossierPartij.rol_id == rol_id,
            )
        )
        return result.first() is not None

    async def is_partij(self, db: AsyncSession, dossier_id: int, persoon_id: int) -> bool:
        result = await db.execute(
            select(DossierPartij.id).where(
                DossierPartij.dossier_id == dossier_id, DossierPartij.persoon_id == persoon_id
            )
        )
        return result.first() is not None

    async def add(self, db: AsyncSession, dossier_id: int, persoon_id: int, rol_id: int) -> DossierPartij:
        partij = DossierPartij(dossier_id=dossier_id, persoon_id=persoon_id, rol_id=rol_id)
        db.add(partij)
        await db.flush()
        return partij

    async def update_rol(self, db: AsyncSession, partij: DossierPartij, rol_id: int) -> DossierPartij:
        partij.rol_id = rol_id
        await db.flush()
        return partij

    async def remove(self, db: AsyncSession, partij: DossierPartij) -> None:
        await db.delete(partij)
        await db.flush()


# ══════════════════════════════════════════════════════════════════════════
# Kinderen and ouders
# ══════════════════════════════════════════════════════════════════════════

KindRow = Tuple[DossierKind, Persoon]
OuderRow = Tuple[KindOuder, Persoon, RelatieType]


class KindStore(ABC):
    @abstractmethod
    async def list_for_dossier(self, db: AsyncSession, dossier_id: int) -> List[KindRow]: ...

    @abstractmethod
    async def ouders_of(self, db: AsyncSession, kind_ids: Sequence[int]) -> List[OuderRow]: ...

    @abstractmethod
    async def is_linked(self, db: AsyncSession, dossier_id: int, kind_id: int) -> bool: ...

    @abstractmethod
    async def get_link(self, db: AsyncSession, dossier_id: int, dossier_kind_id: int) -> Optional[DossierKind]: ...

    @abstractmethod
    async def add_link(self, db: AsyncSession, dossier_id: int, kind_id: int) -> DossierKind: ...

    @abstractmethod
    async def remove_link(self, db: AsyncSession, link: DossierKind) -> None: ...

    @abstractmethod
    async def dossier_ids_for_kind(self, db: AsyncSession, kind_id: int) -> List[int]: ...

    @abstractmethod
    async def get_relation(self, db: AsyncSession, kind_id: int, ouder_id: int) -> Optional[KindOuder]: ...

    @abstractmethod
    async def add_relation(self, db: AsyncSession, kind_id: int, ouder_id: int, relatie_type_id: int) -> KindOuder: ...

    @abstractmethod
    async def update_relation(self, db: AsyncSession, relation: KindOuder, relatie_type_id: int) -> KindOuder: ...

    @abstractmethod
    async def remove_relation(self, db: AsyncSession, relation: KindOuder) -> None: ...


class SqlKindStore(KindStore):
    async def list_for_dossier(self, db: AsyncSession, dossier_id: int) -> List[KindRow]:
        result = await db.execute(
            select(DossierKind, Persoon)
            .join(Persoon, Persoon.id == DossierKind.kind_id)
            .where(DossierKind.dossier_id == dossier_id)
            .order_by(Persoon.geboorte_datum, DossierKind.id)
        )
        return [tuple(row) for row in result.all()]

    async def ouders_of(self, db: AsyncSession, kind_ids: Sequence[int]) -> List[OuderRow]:
        if not kind_ids:
            return []
        result = await db.execute(
            select(KindOuder, Persoon, RelatieType)
            .join(Persoon, Persoon.id == KindOuder.ouder_id)
            .join(RelatieType, RelatieType.id == KindOuder.relatie_type_id)
            .where(KindOuder.kind_id.in_(list(kind_ids)))
            .order_by(KindOuder.kind_id, KindOuder.id)
        )
        return [tuple(row) for row in result.all()]

    async def is_linked(self, db: AsyncSession, dossier_id: int, kind_id: int) -> bool:
        result = await db.execute(
            select(DossierKind.id).where(DossierKind.dossier_id == dossier_id, DossierKind.kind_id == kind_id)
        )
        return result.first() is not None

    async def get_link(self, db: AsyncSession, dossier_id: int, dossier_kind_id: int) -> Optional[DossierKind]:
        result = await db.execute(
            select(DossierKind).where(DossierKind.id == dossier_kind_id, DossierKind.dossier_id == dossier_id)
        )
        return result.scalar_one_or_none()

    async def add_link(self, db: AsyncSession, dossier_id: int, kind_id: int) -> DossierKind:
        link = DossierKind(dossier_id=dossier_id, kind_id=kind_id)
        db.add(link)
        await db.flush()
        return link

    async def remove_link(self, db: AsyncSession, link: DossierKind) -> None:
        await db.delete(link)
        await db.flush()

    async def dossier_ids_for_kind(self, db: AsyncSession, kind_id: int) -> List[int]:
        result = await db.execute(select(DossierKind.dossier_id).where(DossierKind.kind_id == kind_id))
        return list(result.scalars().all())

    async def get_relation(self, db: AsyncSession, kind_id: int, ouder_id: int) -> Optional[KindOuder]:
        result = await db.execute(
            select(KindOuder).where(KindOuder.kind_id == kind_id, KindOuder.ouder_id == ouder_id)
        )
        return result.scalar_one_or_none()

    async def add_relation(self, db: AsyncSession, kind_id: int, ouder_id: int, relatie_type_id: int) -> KindOuder:
        relation = KindOuder(kind_id=kind_id, ouder_id=ouder_id, relatie_type_id=relatie_type_id)
        db.add(relation)
        await db.flush()
        return relation

    async def update_relation(self, db: AsyncSession, relation: KindOuder, relatie_type_id: int) -> KindOuder:
        relation.relatie_type_id = relatie_type_id
        await db.flush()
        return relation

    async def remove_relation(self, db: AsyncSession, relation: KindOuder) -> None:
        await db.delete(relation)
        await db.flush()
