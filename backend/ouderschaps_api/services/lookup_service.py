"""
Ouderschaps API: Lookup Service
=================================

What:  Serves the reference tables through the lookup cache.
How:   get-or-fetch per lookup kind. An entry is fresh while
       `now - stored_at < ttl`; a stale or missing entry is fetched from the
       LookupStore once and stored again. Parameterized lookups add their
       filters to the cache key, so `regelingen-templates?type=a` and
       `?type=b` never share an entry.

TTL:
    rollen          ROLES_CACHE_TTL   (30 minutes)
    everything else LOOKUP_CACHE_TTL  (5 minutes)
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.config import Settings, settings
from ouderschaps_api.schemas.lookup import (
    NamedOut,
    RegelingTemplateOut,
    WeekRegelingOut,
    ZorgSituatieOut,
)
from ouderschaps_api.services.lookup_cache import LookupCache
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)


def cache_key(kind: str, filters: Optional[Dict[str, Any]] = None) -> str:
    """`kind` plus the non-empty filters in sorted order, e.g. `templates|type=omgang`."""
    if not filters:
        return kind
    parts = [f"{name}={value}" for name, value in sorted(filters.items()) if value is not None]
    return "|".join([kind, *parts])


class LookupService:
    def __init__(self, registry: StoreRegistry = stores, config: Settings = settings):
        self.store = registry.lookups
        self.config = config

    async def get_or_fetch(
        self,
        cache: LookupCache,
        key: str,
        ttl: int,
        fetch: Callable[[], Awaitable[List[Any]]],
    ) -> List[Any]:
        entry = cache.get(key)
        if entry is not None:
            value, stored_at = entry
            if cache.now() - stored_at < ttl:
                return value

        value = await fetch()
        cache.set(key, value)
        logger.debug("Lookup cache refreshed: %s (%d items)", key, len(value))
        return value

    async def _cached(self, cache, db, kind, schema, loader, ttl=None, **filters):
        async def fetch():
            rows = await loader(db, **filters)
            return [schema.model_validate(row) for row in rows]

        return await self.get_or_fetch(
            cache,
            cache_key(kind, filters),
            self.config.lookup_cache_ttl if ttl is None else ttl,
            fetch,
        )

    async def rollen(self, db: AsyncSession, cache: LookupCache) -> List[NamedOut]:
        return await self._cached(cache, db, "rollen", NamedOut, self.store.rollen, ttl=self.config.roles_cache_ttl)

    async def relatie_types(self, db: AsyncSession, cache: LookupCache) -> List[NamedOut]:
        return await self._cached(cache, db, "relatie_types", NamedOut, self.store.relatie_types)

    async def dagen(self, db: AsyncSession, cache: LookupCache) -> List[NamedOut]:
        return await self._cached(cache, db, "dagen", NamedOut, self.store.dagen)

    async def dagdelen(self, db: AsyncSession, cache: LookupCache) -> List[NamedOut]:
        return await self._cached(cache, db, "dagdelen", NamedOut, self.store.dagdelen)

    async def week_regelingen(self, db: AsyncSession, cache: LookupCache) -> List[WeekRegelingOut]:
        return await self._cached(cache, db, "week_regelingen", WeekRegelingOut, self.store.week_regelingen)

    async def zorg_categorieen(self, db: AsyncSession, cache: LookupCache) -> List[NamedOut]:
        return await self._cached(cache, db, "zorg_categorieen", NamedOut, self.store.zorg_categorieen)

    async def zorg_situaties(
        self, db: AsyncSession, cache: LookupCache, categorie_id: Optional[int] = None
    ) -> List[ZorgSituatieOut]:
        return await self._cached(
            cache, db, "zorg_situaties", ZorgSituatieOut, self.store.zorg_situaties, categorie_id=categorie_id
        )

    async def schoolvakanties(self, db: AsyncSession, cache: LookupCache) -> List[NamedOut]:
        return await self._cached(cache, db, "schoolvakanties", NamedOut, self.store.schoolvakanties)

    async def regelingen_templates(
        self,
        db: AsyncSession,
        cache: LookupCache,
        type: Optional[str] = None,
        meervoud_kinderen: Optional[bool] = None,
    ) -> List[RegelingTemplateOut]:
        return await self._cached(
            cache,
            db,
            "regelingen_templates",
            RegelingTemplateOut,
            self.store.regelingen_templates,
            type=type,
            meervoud_kinderen=meervoud_kinderen,
        )


# Module-level singleton
lookup_service = LookupService()
