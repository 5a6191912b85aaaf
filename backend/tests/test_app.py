"""
Ouderschaps API — Application Tests
=====================================

What:  Tests for the cross-cutting parts of the app: health check, request
       ids, the access log, rate limiting and the error envelope.
"""

import logging
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from ouderschaps_api.main import register_exception_handlers
from ouderschaps_api.middleware.rate_limit import RateLimitMiddleware
from ouderschaps_api.services.resilience import CircuitBreaker


def breakers(state: str) -> dict:
    return {
        "identity provider": {"state": CircuitBreaker.CLOSED, "failure_count": 0, "failure_threshold": 5},
        "payment provider": {"state": state, "failure_count": 0, "failure_threshold": 5},
    }


# ══════════════════════════════════════════════════════════════════════════
# Health
# ══════════════════════════════════════════════════════════════════════════

class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, client):
        with patch("ouderschaps_api.routes.health.breaker_states", return_value=breakers(CircuitBreaker.CLOSED)):
            response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"] == "1.0.0"
        assert set(body["circuit_breakers"]) == {"identity provider", "payment provider"}

    @pytest.mark.asyncio
    async def test_open_breaker_is_degraded(self, client):
        with patch("ouderschaps_api.routes.health.breaker_states", return_value=breakers(CircuitBreaker.OPEN)):
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_health_needs_no_credentials(self, client):
        response = await client.get("/health")

        assert response.status_code == 200


# ══════════════════════════════════════════════════════════════════════════
# Request ids and the error envelope
# ══════════════════════════════════════════════════════════════════════════

class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, client):
        response = await client.get("/api/lookups/dagen")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_echoed_when_given(self, client):
        response = await client.get("/api/lookups/dagen", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_resolved_user_is_logged(self, client, owner_headers, caplog):
        with caplog.at_level(logging.INFO, logger="ouderschaps_api.access"):
            await client.get("/api/personen", headers=owner_headers)

        record = next(r for r in caplog.records if r.name == "ouderschaps_api.access")
        assert record.user_id == 42
        assert record.path == "/api/personen"
        assert "user=42" in record.getMessage()

    @pytest.mark.asyncio
    async def test_unauthenticated_request_has_no_user(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="ouderschaps_api.access"):
            await client.get("/api/personen")

        record = next(r for r in caplog.records if r.name == "ouderschaps_api.access")
        assert record.user_id is None
        assert record.status == 401
        assert record.levelno == logging.WARNING
        assert "user=-" in record.getMessage()


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/bestaat-niet")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}

    @pytest.mark.asyncio
    async def test_invalid_path_parameter(self, client, owner_headers):
        response = await client.get("/api/dossiers/0", headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Validation failed: dossier_id")

    @pytest.mark.asyncio
    async def test_validation_lists_every_field(self, client, owner_headers):
        response = await client.post("/api/personen", json={"postcode": "12", "email": "nope"}, headers=owner_headers)

        error = response.json()["error"]
        assert response.status_code == 400
        assert "achternaam" in error
        assert "postcode" in error
        assert "email" in error


# ══════════════════════════════════════════════════════════════════════════
# Rate limiting
# ══════════════════════════════════════════════════════════════════════════

def limited_app(max_requests: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window=60)
    register_exception_handlers(app)

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_requests_over_limit_are_rejected(self):
        transport = ASGITransport(app=limited_app(3))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            statuses = [(await ac.get("/ping")).status_code for _ in range(4)]
            rejected = await ac.get("/ping")

        assert statuses == [200, 200, 200, 429]
        assert rejected.json()["success"] is False
        assert rejected.json()["error"].startswith("Too many requests. Please wait ")
        assert 1 <= int(rejected.headers["Retry-After"]) <= 61

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self):
        transport = ASGITransport(app=limited_app(1))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            statuses = [(await ac.get("/health")).status_code for _ in range(5)]

        assert statuses == [200] * 5
