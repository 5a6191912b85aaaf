"""
Ouderschaps API: Mollie Payment Client
========================================

What:  The calls the subscription flow makes to the Mollie v2 REST API:
       customers, first payments (which establish a mandate), mandates,
       recurring subscriptions and payment lookups.
How:   httpx AsyncClient with the API key as bearer token. Connection
       failures are retried with the shared tenacity policy; the whole
       logical call is guarded by the "payment provider" circuit breaker.
       Provider error responses become PaymentProviderError carrying the
       provider's `detail` text.
Who:   services/subscription_service.py.

Amounts:
    Mollie expects `{"currency": "EUR", "value": "19.99"}`: a string with two
    decimals, never a float.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry

from ouderschaps_api.config import Settings, settings
from ouderschaps_api.exceptions import PaymentProviderError
from ouderschaps_api.services.resilience import CircuitBreaker, retry_policy

logger = logging.getLogger(__name__)


def mollie_amount(value: float, currency: str = "EUR") -> Dict[str, str]:
    return {"currency": currency, "value": f"{value:.2f}"}


def checkout_url(payment: Dict[str, Any]) -> Optional[str]:
    return payment.get("_links", {}).get("checkout", {}).get("href")


class MollieClient:
    def __init__(self, config: Settings = settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport
        self.circuit_breaker = CircuitBreaker(
            name="payment provider",
            failure_threshold=config.cb_failure_threshold,
            recovery_timeout=config.cb_recovery_timeout,
        )

    # ── Transport ─────────────────────────────────────────────────────────

    @retry(**retry_policy(logger, (httpx.TransportError,)))
    async def _send(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.config.mollie_api_base,
            headers={"Authorization": f"Bearer {self.config.mollie_api_key}"},
            timeout=15.0,
            transport=self._transport,
        ) as client:
            return await client.request(method, path, json=payload)

    async def _call(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self.circuit_breaker.can_execute()
        try:
            response = await self._send(method, path, payload)
        except httpx.TransportError as e:
            self.circuit_breaker.record_failure()
            logger.error("Mollie %s %s unreachable: %s", method, path, e)
            raise PaymentProviderError(
                f"Payment provider unreachable: {e}", context={"method": method, "path": path}
            ) from e

        if response.status_code >= 500:
            self.circuit_breaker.record_failure()
        else:
            self.circuit_breaker.record_success()

        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            logger.error("Mollie %s %s failed with %d: %s", method, path, response.status_code, detail)
            raise PaymentProviderError(
                f"Mollie API error: {detail}",
                context={"method": method, "path": path, "status": response.status_code},
            )

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    # ── Customers ─────────────────────────────────────────────────────────

    async def get_customer(self, customer_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"/customers/{customer_id}")

    async def create_customer(self, name: str, email: Optional[str], locale: str = "nl_NL") -> Dict[str, Any]:
        customer = await self._call("POST", "/customers", {"name": name, "email": email, "locale": locale})
        logger.info("Mollie customer %s created", customer.get("id"))
        return customer

    # ── Payments & mandates ───────────────────────────────────────────────

    async def create_first_payment(
        self,
        customer_id: str,
        amount: float,
        description: str,
        redirect_url: str,
        webhook_url: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """`sequenceType: first` makes the payment establish a mandate for later recurring charges."""
        payment = await self._call(
            "POST",
            "/payments",
            {
                "customerId": customer_id,
                "amount": mollie_amount(amount),
                "description": description,
                "redirectUrl": redirect_url,
                "webhookUrl": webhook_url,
                "sequenceType": "first",
                "method": "ideal",
                "metadata": metadata or {},
            },
        )
        logger.info("Mollie first payment %s created for customer %s", payment.get("id"), customer_id)
        return payment

    async def get_payment(self, payment_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"/payments/{payment_id}")

    async def list_mandates(self, customer_id: str) -> List[Dict[str, Any]]:
        page = await self._call("GET", f"/customers/{customer_id}/mandates")
        return page.get("_embedded", {}).get("mandates", [])

    # ── Subscriptions ─────────────────────────────────────────────────────

    async def create_subscription(
        self,
        customer_id: str,
        amount: float,
        interval: str,
        description: str,
        webhook_url: str,
        mandate_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "amount": mollie_amount(amount),
            "interval": interval,
            "description": description,
            "webhookUrl": webhook_url,
            "metadata": metadata or {},
        }
        if mandate_id:
            payload["mandateId"] = mandate_id
        subscription = await self._call("POST", f"/customers/{customer_id}/subscriptions", payload)
        logger.info("Mollie subscription %s created for customer %s", subscription.get("id"), customer_id)
        return subscription

    async def cancel_subscription(self, customer_id: str, subscription_id: str) -> Dict[str, Any]:
        result = await self._call("DELETE", f"/customers/{customer_id}/subscriptions/{subscription_id}")
        logger.info("Mollie subscription %s canceled", subscription_id)
        return result


# Module-level singleton
mollie_client = MollieClient()
