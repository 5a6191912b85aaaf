"""
Ouderschaps API — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool
       so all sessions share one connection), seeded with the lookup tables
       and two users. API tests talk to the real app through an HTTPX
       AsyncClient with `get_db_session` overridden onto that database.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine: In-memory database with every table created
    ├── session_factory: async_sessionmaker bound to db_engine
    ├── seeded: Lookup rows plus gebruikers 42 and 99
    ├── db_session: One AsyncSession for service-level tests
    └── client: HTTPX AsyncClient against the app (x-user-id auth)
"""

import os
from typing import AsyncGenerator

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SKIP_AUTH"] = "false"
os.environ["AUTH0_DOMAIN"] = "ouderschaps-test.eu.auth0.com"
os.environ["AUTH0_AUDIENCE"] = "https://api.ouderschaps.test"
os.environ["MOLLIE_API_KEY"] = "test_mollie_key"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import ouderschaps_api.models  # noqa: F401
from ouderschaps_api.database import Base, get_db_session
from ouderschaps_api.main import app
from ouderschaps_api.models import (
    Dag,
    Dagdeel,
    Gebruiker,
    RelatieType,
    Rol,
    WeekRegeling,
    ZorgCategorie,
    ZorgSituatie,
)
from ouderschaps_api.services.lookup_cache import lookup_cache

OWNER_ID = 42
OTHER_USER_ID = 99

DAGEN = ["Maandag", "Dinsdag", "Woensdag", "Donderdag", "Vrijdag", "Zaterdag", "Zondag"]
DAGDELEN = ["Ochtend", "Middag", "Avond", "Nacht"]
WEEK_REGELINGEN = ["Elke week", "Even weken", "Oneven weken"]


def auth_headers(user_id: int = OWNER_ID) -> dict:
    """Legacy x-user-id credentials, accepted while SKIP_AUTH is off."""
    return {"x-user-id": str(user_id)}


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with the full schema.

    StaticPool keeps a single connection, so the in-memory database survives
    across the sessions opened by one test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Reference data every dossier feature relies on, plus two users."""
    async with session_factory() as session:
        session.add_all([Dag(id=i, naam=naam) for i, naam in enumerate(DAGEN, start=1)])
        session.add_all([Dagdeel(id=i, naam=naam) for i, naam in enumerate(DAGDELEN, start=1)])
        session.add_all([WeekRegeling(id=i, omschrijving=o) for i, o in enumerate(WEEK_REGELINGEN, start=1)])
        session.add_all([Rol(id=1, naam="Partij 1"), Rol(id=2, naam="Partij 2")])
        session.add_all([RelatieType(id=1, naam="Biologisch"), RelatieType(id=2, naam="Adoptief")])
        session.add_all([ZorgCategorie(id=1, naam="Medisch"), ZorgCategorie(id=2, naam="Onderwijs")])
        session.add(ZorgSituatie(id=1, naam="Huisarts", zorg_categorie_id=1))
        session.add_all(
            [
                Gebruiker(id=OWNER_ID, email="eigenaar@example.nl", naam="Eigenaar"),
                Gebruiker(id=OTHER_USER_ID, email="ander@example.nl", naam="Ander"),
            ]
        )
        await session.commit()
    return session_factory


@pytest_asyncio.fixture
async def db_session(seeded) -> AsyncGenerator[AsyncSession, None]:
    """A session on the seeded database for calling services directly."""
    async with seeded() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def client(seeded) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient for the FastAPI app.

    The request session commits on success and rolls back on error, exactly
    like the production dependency, but against the test database.
    """

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with seeded() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    lookup_cache.clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    lookup_cache.clear()


@pytest.fixture
def owner_headers() -> dict:
    return auth_headers(OWNER_ID)


@pytest.fixture
def other_headers() -> dict:
    return auth_headers(OTHER_USER_ID)


# ══════════════════════════════════════════════════════════════════════════
# API Helpers
# ══════════════════════════════════════════════════════════════════════════

async def create_dossier(client: AsyncClient, headers: dict) -> dict:
    response = await client.post("/api/dossiers", headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def add_partij(client: AsyncClient, dossier_id: int, headers: dict, achternaam: str, rol_id: int = 1) -> dict:
    response = await client.post(
        f"/api/dossiers/{dossier_id}/partijen",
        json={"persoonData": {"achternaam": achternaam}, "rolId": rol_id},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
