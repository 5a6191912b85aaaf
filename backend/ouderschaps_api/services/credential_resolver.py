"""
Ouderschaps API: Credential Resolver
======================================

What:  Turns the auth material on a request into a user of this API.
How:   Checked in order, first match wins:
           1. SKIP_AUTH           → the configured DEV_USER_ID (must exist)
           2. Authorization       → "Bearer <jwt>", verified by TokenValidator,
                                    then mapped through the UserDirectory
           3. x-user-id (legacy)  → numeric id of an existing user
       Nothing present → "No authorization header".
Who:   dependencies.current_user.

Failures are values, not exceptions: `resolve()` always returns an
AuthResult and the HTTP layer decides what a failed result means.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.config import Settings, settings
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.services.token_validator import TokenValidator, token_validator
from ouderschaps_api.services.user_directory import IdentityClaims, UserDirectory, user_directory
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    authenticated: bool
    user: Optional[Gebruiker] = None
    error: Optional[str] = None
    development: bool = False

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id if self.user is not None else None

    @property
    def auth0_id(self) -> Optional[str]:
        return self.user.auth0_id if self.user is not None else None

    @classmethod
    def failed(cls, error: str) -> "AuthResult":
        return cls(authenticated=False, error=error)


class CredentialResolver:
    def __init__(
        self,
        config: Settings = settings,
        validator: TokenValidator = token_validator,
        directory: UserDirectory = user_directory,
        registry: StoreRegistry = stores,
    ):
        self.config = config
        self.validator = validator
        self.directory = directory
        self.users = registry.users

    async def resolve(self, db: AsyncSession, headers: Mapping[str, str]) -> AuthResult:
        if self.config.skip_auth:
            return await self._development_user(db)

        authorization = headers.get("authorization")
        if authorization:
            return await self._bearer(db, authorization)

        legacy_user_id = headers.get("x-user-id")
        if legacy_user_id:
            return await self._legacy_header(db, legacy_user_id)

        return AuthResult.failed("No authorization header")

    async def _development_user(self, db: AsyncSession) -> AuthResult:
        user = await self.users.get(db, self.config.dev_user_id)
        if user is None:
            return AuthResult.failed(f"Development user {self.config.dev_user_id} not found")
        return AuthResult(authenticated=True, user=user, development=True)

    async def _bearer(self, db: AsyncSession, authorization: str) -> AuthResult:
        scheme, _, token = authorization.partition(" ")
        if scheme != "Bearer" or not token.strip():
            return AuthResult.failed("Invalid authorization format")

        result = await self.validator.validate(token.strip())
        if not result.valid:
            return AuthResult.failed(result.error)
        if not result.claims.get("sub"):
            return AuthResult.failed("Invalid token: missing subject claim")

        claims = IdentityClaims(
            sub=result.claims["sub"],
            email=result.claims.get("email"),
            name=result.claims.get("name"),
        )
        try:
            user = await self.directory.resolve(db, claims)
        except Exception as e:
            logger.error("Failed to find or create user for %s: %s", claims.sub, e, exc_info=True)
            return AuthResult.failed("Failed to find or create user")
        return AuthResult(authenticated=True, user=user)

    async def _legacy_header(self, db: AsyncSession, raw_user_id: str) -> AuthResult:
        logger.warning("x-user-id header used for authentication; this path is deprecated, send a bearer token")
        try:
            user_id = int(raw_user_id.strip())
        except ValueError:
            return AuthResult.failed("Invalid user id format")
        if user_id < 1:
            return AuthResult.failed("Invalid user id format")

        user = await self.users.get(db, user_id)
        if user is None:
            return AuthResult.failed("User not found")
        return AuthResult(authenticated=True, user=user)


# Module-level singleton
credential_resolver = CredentialResolver()
