"""
Ouderschaps API — Lookup Tests
================================

What:  Tests for the read-through lookup cache and the public lookup endpoints.
How:   A fake clock drives cache expiry; the endpoints are called without
       credentials because reference data is public.
"""

from unittest.mock import AsyncMock

import pytest

from ouderschaps_api.config import Settings
from ouderschaps_api.models import Dag
from ouderschaps_api.services.lookup_cache import InMemoryLookupCache
from ouderschaps_api.services.lookup_service import LookupService, cache_key
from ouderschaps_api.stores import build_store_registry


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return InMemoryLookupCache(clock=clock)


@pytest.fixture
def service():
    config = Settings(lookup_cache_ttl=300, roles_cache_ttl=1800)
    return LookupService(build_store_registry(config), config)


class TestCacheKey:

    def test_plain_kind(self):
        assert cache_key("dagen") == "dagen"

    def test_filters_are_sorted_and_none_dropped(self):
        key = cache_key("regelingen_templates", {"type": "omgang", "meervoud_kinderen": None})

        assert key == "regelingen_templates|type=omgang"

    def test_different_filters_have_different_keys(self):
        assert cache_key("zorg_situaties", {"categorie_id": 1}) != cache_key("zorg_situaties", {"categorie_id": 2})


class TestGetOrFetch:

    @pytest.mark.asyncio
    async def test_hit_within_ttl(self, service, cache, clock):
        fetch = AsyncMock(return_value=["a"])

        await service.get_or_fetch(cache, "k", 300, fetch)
        clock.now = 299.9
        value = await service.get_or_fetch(cache, "k", 300, fetch)

        assert value == ["a"]
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_refetch_at_ttl(self, service, cache, clock):
        fetch = AsyncMock(side_effect=[["old"], ["new"]])

        await service.get_or_fetch(cache, "k", 300, fetch)
        clock.now = 300
        value = await service.get_or_fetch(cache, "k", 300, fetch)

        assert value == ["new"]
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_ttl_never_caches(self, service, cache):
        fetch = AsyncMock(return_value=[])

        await service.get_or_fetch(cache, "k", 0, fetch)
        await service.get_or_fetch(cache, "k", 0, fetch)

        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_fetch_error_is_not_cached(self, service, cache):
        fetch = AsyncMock(side_effect=[RuntimeError("db down"), ["ok"]])

        with pytest.raises(RuntimeError):
            await service.get_or_fetch(cache, "k", 300, fetch)
        assert len(cache) == 0
        assert await service.get_or_fetch(cache, "k", 300, fetch) == ["ok"]


class TestLookupServiceWithDatabase:

    @pytest.mark.asyncio
    async def test_dagen_served_from_cache_until_expiry(self, service, cache, clock, db_session):
        first = await service.dagen(db_session, cache)
        (await db_session.get(Dag, 1)).naam = "Maandag (gewijzigd)"
        await db_session.flush()

        cached = await service.dagen(db_session, cache)
        clock.now = 301
        refreshed = await service.dagen(db_session, cache)

        assert first[0].naam == "Maandag"
        assert cached[0].naam == "Maandag"
        assert refreshed[0].naam == "Maandag (gewijzigd)"

    @pytest.mark.asyncio
    async def test_rollen_use_their_own_ttl(self, service, cache, clock, db_session):
        await service.rollen(db_session, cache)
        clock.now = 1000
        await service.rollen(db_session, cache)

        _, stored_at = cache.get("rollen")
        assert stored_at == 0.0


class TestLookupEndpoints:

    @pytest.mark.asyncio
    async def test_public_without_credentials(self, client):
        response = await client.get("/api/lookups/dagen")

        assert response.status_code == 200
        assert [d["naam"] for d in response.json()["data"]][:2] == ["Maandag", "Dinsdag"]

    @pytest.mark.asyncio
    async def test_rollen(self, client):
        response = await client.get("/api/rollen")

        assert response.json() == {
            "success": True,
            "data": [{"id": 1, "naam": "Partij 1"}, {"id": 2, "naam": "Partij 2"}],
        }

    @pytest.mark.asyncio
    async def test_zorg_situaties_filter(self, client):
        matching = await client.get("/api/lookups/zorg-situaties?categorieId=1")
        empty = await client.get("/api/lookups/zorg-situaties?categorieId=2")

        assert [s["naam"] for s in matching.json()["data"]] == ["Huisarts"]
        assert empty.json()["data"] == []

    @pytest.mark.asyncio
    async def test_week_regelingen(self, client):
        response = await client.get("/api/lookups/week-regelingen")

        assert response.json()["data"][0] == {"id": 1, "omschrijving": "Elke week"}
