"""
Ouderschaps API — Credential Resolver Tests
=============================================

What:  Tests for turning request headers into an authenticated Gebruiker.
How:   The token validator is replaced by an AsyncMock; the user directory
       and stores run against the seeded in-memory database.

Credential order under test:
    SKIP_AUTH → bearer token → legacy x-user-id → "No authorization header"
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from ouderschaps_api.config import Settings
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.services.credential_resolver import CredentialResolver
from ouderschaps_api.services.token_validator import TokenResult
from ouderschaps_api.services.user_directory import UserDirectory, normalize_email_and_name
from ouderschaps_api.stores import build_store_registry

from conftest import OTHER_USER_ID, OWNER_ID


def make_resolver(validator=None, **settings_overrides) -> CredentialResolver:
    config = Settings(**settings_overrides)
    registry = build_store_registry(config)
    return CredentialResolver(
        config=config,
        validator=validator or AsyncMock(),
        directory=UserDirectory(registry),
        registry=registry,
    )


def valid_token(**claims) -> AsyncMock:
    validator = AsyncMock()
    validator.validate.return_value = TokenResult(valid=True, claims=claims)
    return validator


# ══════════════════════════════════════════════════════════════════════════
# Development bypass
# ══════════════════════════════════════════════════════════════════════════

class TestDevelopmentUser:

    @pytest.mark.asyncio
    async def test_skip_auth_uses_dev_user(self, db_session):
        resolver = make_resolver(skip_auth=True, dev_user_id=OWNER_ID)

        result = await resolver.resolve(db_session, {})

        assert result.authenticated is True
        assert result.development is True
        assert result.user_id == OWNER_ID

    @pytest.mark.asyncio
    async def test_skip_auth_ignores_headers(self, db_session):
        resolver = make_resolver(skip_auth=True, dev_user_id=OWNER_ID)

        result = await resolver.resolve(db_session, {"x-user-id": str(OTHER_USER_ID)})

        assert result.user_id == OWNER_ID

    @pytest.mark.asyncio
    async def test_missing_dev_user(self, db_session):
        resolver = make_resolver(skip_auth=True, dev_user_id=5000)

        result = await resolver.resolve(db_session, {})

        assert result.authenticated is False
        assert result.error == "Development user 5000 not found"


# ══════════════════════════════════════════════════════════════════════════
# Bearer tokens
# ══════════════════════════════════════════════════════════════════════════

class TestBearerToken:

    @pytest.mark.asyncio
    async def test_first_login_creates_user(self, db_session):
        resolver = make_resolver(valid_token(sub="auth0|new", email="nieuw@example.nl", name="Nieuwe Ouder"))

        result = await resolver.resolve(db_session, {"authorization": "Bearer abc.def.ghi"})

        assert result.authenticated is True
        assert result.auth0_id == "auth0|new"
        assert result.user.email == "nieuw@example.nl"
        assert result.user.naam == "Nieuwe Ouder"
        resolver.validator.validate.assert_awaited_once_with("abc.def.ghi")

    @pytest.mark.asyncio
    async def test_repeat_login_reuses_user(self, db_session):
        resolver = make_resolver(valid_token(sub="auth0|repeat", email="herhaal@example.nl"))
        headers = {"authorization": "Bearer token"}

        first = await resolver.resolve(db_session, headers)
        second = await resolver.resolve(db_session, headers)

        assert first.user_id == second.user_id
        assert second.user.laatste_login is not None

    @pytest.mark.asyncio
    async def test_existing_email_is_linked(self, db_session):
        resolver = make_resolver(valid_token(sub="auth0|owner", email="eigenaar@example.nl"))

        result = await resolver.resolve(db_session, {"authorization": "Bearer token"})

        assert result.user_id == OWNER_ID
        assert result.auth0_id == "auth0|owner"
        count = len((await db_session.execute(select(Gebruiker))).scalars().all())
        assert count == 2

    @pytest.mark.asyncio
    async def test_bearer_wins_over_legacy_header(self, db_session):
        resolver = make_resolver(valid_token(sub="auth0|both", email="beide@example.nl"))

        result = await resolver.resolve(
            db_session, {"authorization": "Bearer token", "x-user-id": str(OTHER_USER_ID)}
        )

        assert result.user_id != OTHER_USER_ID
        assert result.auth0_id == "auth0|both"

    @pytest.mark.asyncio
    async def test_wrong_scheme(self, db_session):
        resolver = make_resolver()

        result = await resolver.resolve(db_session, {"authorization": "Basic dXNlcjpwYXNz"})

        assert result.error == "Invalid authorization format"
        resolver.validator.validate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_bearer(self, db_session):
        result = await make_resolver().resolve(db_session, {"authorization": "Bearer  "})

        assert result.error == "Invalid authorization format"

    @pytest.mark.asyncio
    async def test_validator_error_is_passed_through(self, db_session):
        validator = AsyncMock()
        validator.validate.return_value = TokenResult(valid=False, error="Token expired")

        result = await make_resolver(validator).resolve(db_session, {"authorization": "Bearer t"})

        assert result.authenticated is False
        assert result.error == "Token expired"

    @pytest.mark.asyncio
    async def test_missing_subject_claim(self, db_session):
        resolver = make_resolver(valid_token(email="geen-sub@example.nl"))

        result = await resolver.resolve(db_session, {"authorization": "Bearer t"})

        assert result.error == "Invalid token: missing subject claim"

    @pytest.mark.asyncio
    async def test_directory_failure_hides_details(self, db_session):
        resolver = make_resolver(valid_token(sub="auth0|boom", email="boom@example.nl"))
        resolver.directory.resolve = AsyncMock(
            side_effect=RuntimeError("duplicate key value violates unique constraint \"gebruikers_email_key\"")
        )

        result = await resolver.resolve(db_session, {"authorization": "Bearer t"})

        assert result.authenticated is False
        assert result.error == "Failed to find or create user"


# ══════════════════════════════════════════════════════════════════════════
# Legacy x-user-id header
# ══════════════════════════════════════════════════════════════════════════

class TestLegacyHeader:

    @pytest.mark.asyncio
    async def test_known_user(self, db_session):
        result = await make_resolver().resolve(db_session, {"x-user-id": str(OWNER_ID)})

        assert result.authenticated is True
        assert result.user_id == OWNER_ID
        assert result.development is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["abc", "0", "-3", "4.2"])
    async def test_malformed_id(self, db_session, raw):
        result = await make_resolver().resolve(db_session, {"x-user-id": raw})

        assert result.error == "Invalid user id format"

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        result = await make_resolver().resolve(db_session, {"x-user-id": "12345"})

        assert result.error == "User not found"

    @pytest.mark.asyncio
    async def test_no_credentials(self, db_session):
        result = await make_resolver().resolve(db_session, {})

        assert result.authenticated is False
        assert result.error == "No authorization header"


# ══════════════════════════════════════════════════════════════════════════
# Claim normalization
# ══════════════════════════════════════════════════════════════════════════

class TestNormalizeEmailAndName:

    def test_email_in_name_becomes_email(self):
        assert normalize_email_and_name(None, "ouder@example.nl") == ("ouder@example.nl", None)

    def test_real_email_wins_and_name_is_dropped(self):
        assert normalize_email_and_name("a@example.nl", "b@example.nl") == ("a@example.nl", None)

    def test_plain_name_is_kept(self):
        assert normalize_email_and_name("a@example.nl", "Jan Jansen") == ("a@example.nl", "Jan Jansen")
