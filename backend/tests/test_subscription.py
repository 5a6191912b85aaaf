"""
Ouderschaps API — Subscription Tests
======================================

What:  Tests for sign-up, payment webhooks and cancellation.
How:   Mollie is replaced by an AsyncMock so no network calls are made; the
       subscription rows live in the seeded in-memory database.

Test Categories:
    1. add_months date arithmetic
    2. Sign-up, activation through the webhook, cancellation, retry
    3. Webhook edge cases (missing id, unknown payment, provider failure)
"""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

from ouderschaps_api.config import Settings
from ouderschaps_api.exceptions import NotFoundError, PaymentProviderError, ValidationError
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.services.subscription_service import SubscriptionService, add_months, subscription_service
from ouderschaps_api.stores import build_store_registry

from conftest import OWNER_ID


def mollie_mock() -> AsyncMock:
    mollie = AsyncMock()
    mollie.create_customer.return_value = {"id": "cst_1"}
    mollie.create_first_payment.side_effect = [
        {"id": f"tr_{n}", "_links": {"checkout": {"href": f"https://www.mollie.com/checkout/tr_{n}"}}}
        for n in range(1, 5)
    ]
    mollie.list_mandates.return_value = [{"id": "mdt_1", "status": "valid"}]
    mollie.create_subscription.return_value = {"id": "sub_1"}
    mollie.cancel_subscription.return_value = {"id": "sub_1", "status": "canceled"}
    return mollie


def paid(payment_id: str = "tr_1") -> dict:
    return {
        "id": payment_id,
        "status": "paid",
        "customerId": "cst_1",
        "metadata": {"type": "first_payment", "userId": str(OWNER_ID)},
    }


@pytest.fixture
def mollie():
    return mollie_mock()


@pytest.fixture
def service(mollie):
    config = Settings(trial_days=7, subscription_price=19.99)
    return SubscriptionService(config=config, registry=build_store_registry(config), mollie=mollie)


@pytest_asyncio.fixture
async def owner(db_session):
    return await db_session.get(Gebruiker, OWNER_ID)


class TestAddMonths:

    def test_same_day_next_month(self):
        assert add_months(date(2024, 3, 15), 1) == date(2024, 4, 15)

    def test_clamps_to_month_end(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_rolls_over_year(self):
        assert add_months(date(2024, 12, 5), 1) == date(2025, 1, 5)


class TestSubscriptionLifecycle:

    @pytest.mark.asyncio
    async def test_first_sign_up_gets_trial(self, service, mollie, db_session, owner):
        result = await service.create_subscription(db_session, owner)

        assert result.created is True
        checkout = result.checkout
        assert checkout.checkout_url == "https://www.mollie.com/checkout/tr_1"
        assert checkout.customer_id == "cst_1"
        assert checkout.trial_info.has_trial is True
        assert checkout.trial_info.message == "U krijgt 7 dagen gratis proefperiode."
        assert owner.trial_gebruikt is True
        assert owner.mollie_customer_id == "cst_1"
        metadata = mollie.create_first_payment.await_args.kwargs["metadata"]
        assert metadata["type"] == "first_payment"
        assert metadata["hasTrial"] == "true"

    @pytest.mark.asyncio
    async def test_used_trial_is_not_repeated(self, service, db_session, owner):
        owner.trial_gebruikt = True

        result = await service.create_subscription(db_session, owner)

        assert result.checkout.trial_info.has_trial is False
        assert result.checkout.trial_info.trial_end_date is None

    @pytest.mark.asyncio
    async def test_webhook_activates_and_cancel_ends(self, service, mollie, db_session, owner):
        created = await service.create_subscription(db_session, owner)
        mollie.get_payment.return_value = paid("tr_1")

        message = await service.handle_webhook(db_session, "tr_1")

        assert message == "Webhook processed"
        mollie.create_subscription.assert_awaited_once()
        assert mollie.create_subscription.await_args.kwargs["mandate_id"] == "mdt_1"
        status = await service.status(db_session, OWNER_ID)
        assert status.has_active_subscription is True
        assert status.subscription.id == created.checkout.subscription_id
        assert status.recent_payments[0].status == "paid"
        await db_session.refresh(owner)
        assert owner.has_active_subscription is True

        with pytest.raises(ValidationError, match="U heeft al een actief abonnement"):
            await service.create_subscription(db_session, owner)

        canceled = await service.cancel(db_session, OWNER_ID)

        assert canceled.message == "Abonnement succesvol geannuleerd"
        mollie.cancel_subscription.assert_awaited_once_with("cst_1", "sub_1")
        await db_session.refresh(owner)
        assert owner.has_active_subscription is False

    @pytest.mark.asyncio
    async def test_sign_up_after_cancel_is_a_retry(self, service, mollie, db_session, owner):
        await service.create_subscription(db_session, owner)
        mollie.get_payment.return_value = paid("tr_1")
        await service.handle_webhook(db_session, "tr_1")
        await service.cancel(db_session, OWNER_ID)

        result = await service.create_subscription(db_session, owner)

        assert result.created is False
        assert result.checkout.is_retry is True
        assert result.checkout.previous_status == "canceled"
        assert result.checkout.trial_info.message == "Uw abonnement wordt opnieuw geactiveerd na betaling."

    @pytest.mark.asyncio
    async def test_failed_payment_suspends(self, service, mollie, db_session, owner):
        await service.create_subscription(db_session, owner)
        mollie.get_payment.return_value = {"id": "tr_1", "status": "failed"}

        await service.handle_webhook(db_session, "tr_1")

        status = await service.status(db_session, OWNER_ID)
        assert status.subscription.status == "suspended"
        assert status.has_active_subscription is False

    @pytest.mark.asyncio
    async def test_cancel_without_subscription(self, service, db_session):
        with pytest.raises(NotFoundError, match="Geen actief abonnement gevonden"):
            await service.cancel(db_session, OWNER_ID)

    @pytest.mark.asyncio
    async def test_status_without_subscription(self, service, db_session):
        status = await service.status(db_session, OWNER_ID)

        assert status.has_active_subscription is False
        assert status.subscription is None

    @pytest.mark.asyncio
    async def test_stale_customer_is_replaced(self, service, mollie, db_session, owner):
        owner.mollie_customer_id = "cst_gone"
        mollie.get_customer.side_effect = PaymentProviderError("Customer not found")

        result = await service.create_subscription(db_session, owner)

        assert result.checkout.customer_id == "cst_1"
        mollie.create_customer.assert_awaited_once()


class TestWebhook:

    @pytest.mark.asyncio
    async def test_missing_payment_id(self, service, db_session):
        with pytest.raises(ValidationError, match="Missing payment ID"):
            await service.handle_webhook(db_session, None)

    @pytest.mark.asyncio
    async def test_unknown_payment(self, service, mollie, db_session):
        mollie.get_payment.return_value = {"id": "tr_unknown", "status": "paid"}

        assert await service.handle_webhook(db_session, "tr_unknown") == "Payment not found"

    @pytest.mark.asyncio
    async def test_provider_failure_is_acknowledged(self, service, mollie, db_session):
        mollie.get_payment.side_effect = PaymentProviderError("Mollie unavailable")

        assert await service.handle_webhook(db_session, "tr_1") == "Webhook error logged"

    @pytest.mark.asyncio
    async def test_webhook_endpoint_takes_form_data(self, client):
        with patch.object(subscription_service, "mollie") as mocked:
            mocked.get_payment = AsyncMock(return_value={"id": "tr_x", "status": "open"})
            response = await client.post("/api/subscription/webhook", data={"id": "tr_x"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {"message": "Payment not found"}}

    @pytest.mark.asyncio
    async def test_webhook_endpoint_without_id(self, client):
        response = await client.post("/api/subscription/webhook", data={"event": "ping"})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing payment ID"
