"""
Ouderschaps API — Mollie Client Tests
=======================================

What:  Tests for how provider responses map onto PaymentProviderError and the
       payment-provider circuit breaker.
How:   httpx.MockTransport answers in-process; no network access.
"""

import httpx
import pytest

from ouderschaps_api.config import Settings
from ouderschaps_api.exceptions import CircuitBreakerOpenError, PaymentProviderError
from ouderschaps_api.services.mollie_client import MollieClient


def client_answering(status: int, body: dict = None, threshold: int = 2) -> MollieClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body if body is not None else {})

    config = Settings(mollie_api_key="test_key", cb_failure_threshold=threshold)
    return MollieClient(config=config, transport=httpx.MockTransport(handler))


class TestMollieClient:

    @pytest.mark.asyncio
    async def test_success_returns_json(self):
        client = client_answering(200, {"id": "cst_1"})

        assert await client.get_customer("cst_1") == {"id": "cst_1"}
        assert client.circuit_breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_client_error_does_not_trip_breaker(self):
        client = client_answering(404, {"detail": "The customer could not be found"})

        with pytest.raises(PaymentProviderError, match="could not be found"):
            await client.get_customer("cst_gone")
        assert client.circuit_breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_server_errors_open_breaker(self):
        client = client_answering(503, {"detail": "Service unavailable"})

        for _ in range(2):
            with pytest.raises(PaymentProviderError):
                await client.get_payment("tr_1")

        with pytest.raises(CircuitBreakerOpenError):
            await client.get_payment("tr_1")

    @pytest.mark.asyncio
    async def test_empty_body_is_empty_dict(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(204)

        client = MollieClient(config=Settings(mollie_api_key="k"), transport=httpx.MockTransport(handler))

        assert await client.cancel_subscription("cst_1", "sub_1") == {}
