"""Read-only access to the reference tables served by the lookup endpoints."""

from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.models import (
    Dag,
    Dagdeel,
    RegelingTemplate,
    RelatieType,
    Rol,
    Schoolvakantie,
    WeekRegeling,
    ZorgCategorie,
    ZorgSituatie,
)


class LookupStore(ABC):
    @abstractmethod
    async def rollen(self, db: AsyncSession) -> List[Rol]: ...

    @abstractmethod
    async def relatie_types(self, db: AsyncSession) -> List[RelatieType]: ...

    @abstractmethod
    async def dagen(self, db: AsyncSession) -> List[Dag]: ...

    @abstractmethod
    async def dagdelen(self, db: AsyncSession) -> List[Dagdeel]: ...

    @abstractmethod
    async def week_regelingen(self, db: AsyncSession) -> List[WeekRegeling]: ...

    @abstractmethod
    async def zorg_categorieen(self, db: AsyncSession) -> List[ZorgCategorie]: ...

    @abstractmethod
    async def zorg_situaties(self, db: AsyncSession, categorie_id: Optional[int] = None) -> List[ZorgSituatie]: ...

    @abstractmethod
    async def schoolvakanties(self, db: AsyncSession) -> List[Schoolvakantie]: ...

    @abstractmethod
    async def regelingen_templates(
        self,
        db: AsyncSession,
        type: Optional[str] = None,
        meervoud_kinderen: Optional[bool] = None,
    ) -> List[RegelingTemplate]: ...


class SqlLookupStore(LookupStore):
    async def _all(self, db: AsyncSession, model) -> list:
        result = await db.execute(select(model).order_by(model.id))
        return list(result.scalars().all())

    async def rollen(self, db: AsyncSession) -> List[Rol]:
        return await self._all(db, Rol)

    async def relatie_types(self, db: AsyncSession) -> List[RelatieType]:
        return await self._all(db, RelatieType)

    async def dagen(self, db: AsyncSession) -> List[Dag]:
        return await self._all(db, Dag)

    async def dagdelen(self, db: AsyncSession) -> List[Dagdeel]:
        return await self._all(db, Dagdeel)

    async def week_regelingen(self, db: AsyncSession) -> List[WeekRegeling]:
        return await self._all(db, WeekRegeling)

    async def zorg_categorieen(self, db: AsyncSession) -> List[ZorgCategorie]:
        return await self._all(db, ZorgCategorie)

    async def zorg_situaties(self, db: AsyncSession, categorie_id: Optional[int] = None) -> List[ZorgSituatie]:
        query = select(ZorgSituatie)
        if categorie_id is not None:
            query = query.where(ZorgSituatie.zorg_categorie_id == categorie_id)
        result = await db.execute(query.order_by(ZorgSituatie.id))
        return list(result.scalars().all())

    async def schoolvakanties(self, db: AsyncSession) -> List[Schoolvakantie]:
        return await self._all(db, Schoolvakantie)

    async def regelingen_templates(
        self,
        db: AsyncSession,
        type: Optional[str] = None,
        meervoud_kinderen: Optional[bool] = None,
    ) -> List[RegelingTemplate]:
        query = select(RegelingTemplate)
        if type is not None:
            query = query.where(RegelingTemplate.type == type)
        if meervoud_kinderen is not None:
            query = query.where(RegelingTemplate.meervoud_kinderen.is_(meervoud_kinderen))
        result = await db.execute(query.order_by(RegelingTemplate.type, RegelingTemplate.id))
        return list(result.scalars().all())
