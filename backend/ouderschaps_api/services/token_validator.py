"""
Ouderschaps API: Bearer Token Validation
==========================================

What:  Verifies RS256 access tokens issued by the identity tenant.
How:   The token header names a key id (`kid`). Signing keys come from the
       tenant's JWKS endpoint, fetched with httpx and cached for
       JWKS_CACHE_TTL seconds. An unknown kid forces one refresh (key
       rotation). Signature, audience, issuer and expiry are checked by PyJWT.
Who:   services/credential_resolver.py.

Outcomes:
    validate() never raises. It returns a TokenResult whose `error` is one of
        "Invalid token format"          header unreadable or without kid
        "Token expired"
        "Invalid audience"
        "Invalid token: <detail>"       signature, issuer, unknown kid, ...
        "Token validation failed: <detail>"   key set unreachable, breaker open
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
import jwt
from tenacity import retry

from ouderschaps_api.config import Settings, settings
from ouderschaps_api.services.resilience import CircuitBreaker, retry_policy

logger = logging.getLogger(__name__)

JwksFetcher = Callable[[], Awaitable[Dict[str, Any]]]


@dataclass
class TokenResult:
    valid: bool
    claims: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


class TokenValidator:
    def __init__(
        self,
        config: Settings = settings,
        fetcher: Optional[JwksFetcher] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._fetcher = fetcher or self._download_jwks
        self._clock = clock
        self._keys: Dict[str, Any] = {}
        self._fetched_at: Optional[float] = None
        self.circuit_breaker = CircuitBreaker(
            name="identity provider",
            failure_threshold=config.cb_failure_threshold,
            recovery_timeout=config.cb_recovery_timeout,
        )

    # ── Key set ───────────────────────────────────────────────────────────

    @retry(**retry_policy(logger, (httpx.TransportError,)))
    async def _download_jwks(self) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(self.config.jwks_uri)
            response.raise_for_status()
            return response.json()

    def _cache_is_fresh(self) -> bool:
        if self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self.config.jwks_cache_ttl

    async def _refresh_keys(self) -> None:
        self.circuit_breaker.can_execute()
        try:
            jwks = await self._fetcher()
        except Exception:
            self.circuit_breaker.record_failure()
            raise
        self.circuit_breaker.record_success()

        keys: Dict[str, Any] = {}
        for jwk in jwks.get("keys", []):
            kid = jwk.get("kid")
            if not kid:
                continue
            try:
                keys[kid] = jwt.PyJWK(jwk).key
            except jwt.PyJWKError as e:
                logger.warning("Skipping unusable signing key %s: %s", kid, e)
        self._keys = keys
        self._fetched_at = self._clock()
        logger.info("Signing key set refreshed (%d keys)", len(keys))

    async def get_signing_key(self, kid: str) -> Any:
        """Key for `kid`; refreshes the key set when stale or when kid is unknown."""
        if not self._cache_is_fresh():
            await self._refresh_keys()
        elif kid not in self._keys:
            logger.info("Unknown key id %s, refreshing signing key set", kid)
            await self._refresh_keys()

        key = self._keys.get(kid)
        if key is None:
            raise jwt.InvalidTokenError(f"Unable to find signing key for kid {kid}")
        return key

    def clear_cache(self) -> None:
        self._keys = {}
        self._fetched_at = None

    # ── Validation ────────────────────────────────────────────────────────

    async def validate(self, token: str) -> TokenResult:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.DecodeError:
            return TokenResult(valid=False, error="Invalid token format")
        kid = header.get("kid")
        if not kid:
            return TokenResult(valid=False, error="Invalid token format")

        try:
            key = await self.get_signing_key(kid)
            claims = jwt.decode(
                token,
                key,
                algorithms=["RS256"],
                audience=self.config.auth0_audience,
                issuer=self.config.issuer,
            )
        except jwt.ExpiredSignatureError:
            return TokenResult(valid=False, error="Token expired")
        except jwt.InvalidAudienceError:
            return TokenResult(valid=False, error="Invalid audience")
        except jwt.InvalidTokenError as e:
            return TokenResult(valid=False, error=f"Invalid token: {e}")
        except Exception as e:
            logger.error("Token validation failed: %s", e, exc_info=True)
            return TokenResult(valid=False, error="Token validation failed")

        return TokenResult(valid=True, claims=claims)


# Module-level singleton
token_validator = TokenValidator()
