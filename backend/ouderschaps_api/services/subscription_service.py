"""
Ouderschaps API: Subscription Service
=======================================

What:  Paid subscriptions through Mollie: sign-up with a first payment,
       status overview, cancellation and the payment webhook.
How:   Sign-up creates (or reuses) the user's Mollie customer and a first
       payment with `sequenceType: first`; the user pays in the Mollie
       checkout. Mollie then calls the webhook, which reconciles the payment
       and activates the subscription:
           - valid mandate  → recurring Mollie subscription, next charge in 7 days
           - no mandate     → one-time activation, next charge in 30 days
       Later recurring payments move `volgende_betaling` a month ahead.
Who:   routes/subscription.py.

Lifecycle of an abonnement:
    pending ──paid──▶ active ──cancel──▶ canceled
       │                 └──failed──▶ suspended
       └── pending/canceled/suspended sign-ups retry the first payment on
           the existing row instead of creating a new one.

Webhook contract:
    Mollie retries any non-2xx answer, so after the payment id is known the
    webhook always answers 200; internal failures are logged only.

User-facing messages are Dutch and returned verbatim.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.config import Settings, settings
from ouderschaps_api.exceptions import DatabaseError, NotFoundError, PaymentProviderError, ValidationError
from ouderschaps_api.models import Abonnement, Gebruiker
from ouderschaps_api.schemas.subscription import (
    AbonnementOut,
    BetalingOut,
    CanceledAbonnementOut,
    CancelOut,
    CheckoutOut,
    SubscriptionStatusOut,
    TrialInfoOut,
)
from ouderschaps_api.services.mollie_client import MollieClient, checkout_url, mollie_client
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = ("pending", "canceled", "suspended")
FIRST_PAYMENT = "first_payment"
RECURRING_DESCRIPTION = "Ouderschapsdesk Basis Abonnement"


def add_months(day: date, months: int) -> date:
    """Same day `months` later, clamped to the last day of a shorter month."""
    month_index = day.month - 1 + months
    year, month = day.year + month_index // 12, month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


@dataclass
class CheckoutResult:
    checkout: CheckoutOut
    created: bool


class SubscriptionService:
    def __init__(
        self,
        config: Settings = settings,
        registry: StoreRegistry = stores,
        mollie: MollieClient = mollie_client,
    ):
        self.config = config
        self.subscriptions = registry.subscriptions
        self.users = registry.users
        self.mollie = mollie

    def _redirect_url(self) -> str:
        return f"{self.config.redirect_url}?subscriptionCreated=true"

    async def _first_payment(
        self, abonnement: Abonnement, user_id: int, description: str, has_trial: bool, is_retry: bool
    ) -> Dict[str, Any]:
        amount = float(abonnement.maandelijks_bedrag)
        return await self.mollie.create_first_payment(
            customer_id=abonnement.mollie_customer_id,
            amount=amount,
            description=description,
            redirect_url=self._redirect_url(),
            webhook_url=self.config.webhook_url,
            metadata={
                "userId": str(user_id),
                "subscriptionId": str(abonnement.id),
                "type": FIRST_PAYMENT,
                "hasTrial": str(has_trial).lower(),
                "isRetry": str(is_retry).lower(),
            },
        )

    # ── Sign-up ───────────────────────────────────────────────────────────

    async def create_subscription(self, db: AsyncSession, user: Gebruiker) -> CheckoutResult:
        """
        Start a sign-up (201) or retry the first payment of an unfinished one (200).

        Raises:
            ValidationError: the user already has an active subscription
            DatabaseError: an earlier sign-up has no Mollie customer
            PaymentProviderError: Mollie rejected a call
        """
        existing = await self.subscriptions.latest_for_user(db, user.id)
        if existing is not None and existing.status == "active":
            raise ValidationError("U heeft al een actief abonnement")

        if existing is not None and existing.status in RETRYABLE_STATUSES:
            return await self._retry(db, user, existing)

        customer_id = await self._get_or_create_customer(db, user)
        has_trial = not user.trial_gebruikt
        trial_end = date.today() + timedelta(days=self.config.trial_days) if has_trial else None

        abonnement = await self.subscriptions.create(
            db, user.id, customer_id, trial_end, self.config.subscription_price
        )
        description = (
            f"Ouderschapsplan Basis Abonnement - {self.config.trial_days} dagen proefperiode"
            if has_trial
            else "Ouderschapsplan Basis Abonnement - Direct actief"
        )
        payment = await self._first_payment(abonnement, user.id, description, has_trial, is_retry=False)
        await self.subscriptions.create_payment(db, abonnement.id, payment["id"], float(abonnement.maandelijks_bedrag))

        if has_trial:
            await self.users.update(db, user, {"trial_gebruikt": True})
            message = f"U krijgt {self.config.trial_days} dagen gratis proefperiode."
        else:
            message = "Uw proefperiode is al gebruikt. Het abonnement wordt direct actief na betaling."

        logger.info("Subscription %d created for user %d (trial=%s)", abonnement.id, user.id, has_trial)
        return CheckoutResult(
            checkout=CheckoutOut(
                checkout_url=checkout_url(payment),
                subscription_id=abonnement.id,
                payment_id=payment["id"],
                customer_id=customer_id,
                trial_info=TrialInfoOut(has_trial=has_trial, trial_end_date=trial_end, message=message),
            ),
            created=True,
        )

    async def _retry(self, db: AsyncSession, user: Gebruiker, abonnement: Abonnement) -> CheckoutResult:
        if not abonnement.mollie_customer_id:
            logger.error("Subscription %d of user %d has no Mollie customer", abonnement.id, user.id)
            raise DatabaseError("Er is een probleem met uw eerdere aanmelding. Neem contact op met support.")

        is_reactivation = abonnement.status in ("canceled", "suspended")
        trial_end = abonnement.trial_eind_datum
        description = (
            "Ouderschapsplan Basis Abonnement - Proefperiode" if trial_end else "Ouderschapsplan Basis Abonnement"
        )
        payment = await self._first_payment(
            abonnement, user.id, description, has_trial=trial_end is not None, is_retry=True
        )
        await self.subscriptions.create_payment(db, abonnement.id, payment["id"], float(abonnement.maandelijks_bedrag))

        if is_reactivation:
            message = "Uw abonnement wordt opnieuw geactiveerd na betaling."
        elif trial_end:
            message = "Vervolg uw eerdere aanmelding met proefperiode."
        else:
            message = "Vervolg uw eerdere aanmelding."

        logger.info("Retrying first payment for subscription %d (was %s)", abonnement.id, abonnement.status)
        has_trial = trial_end is not None and not is_reactivation
        return CheckoutResult(
            checkout=CheckoutOut(
                checkout_url=checkout_url(payment),
                subscription_id=abonnement.id,
                payment_id=payment["id"],
                customer_id=abonnement.mollie_customer_id,
                is_retry=True,
                previous_status=abonnement.status,
                trial_info=TrialInfoOut(
                    has_trial=has_trial,
                    trial_end_date=trial_end if has_trial else None,
                    message=message,
                ),
            ),
            created=False,
        )

    async def _get_or_create_customer(self, db: AsyncSession, user: Gebruiker) -> str:
        if user.mollie_customer_id:
            try:
                customer = await self.mollie.get_customer(user.mollie_customer_id)
                return customer["id"]
            except PaymentProviderError as e:
                logger.warning(
                    "Stored Mollie customer %s of user %d unusable, creating a new one: %s",
                    user.mollie_customer_id,
                    user.id,
                    e,
                )

        customer = await self.mollie.create_customer(name=user.naam or user.email or "Gebruiker", email=user.email)
        await self.users.update(db, user, {"mollie_customer_id": customer["id"]})
        return customer["id"]

    # ── Status & cancellation ─────────────────────────────────────────────

    async def status(self, db: AsyncSession, user_id: int) -> SubscriptionStatusOut:
        abonnement = await self.subscriptions.latest_for_user(db, user_id)
        if abonnement is None:
            return SubscriptionStatusOut(has_active_subscription=False)

        payments = await self.subscriptions.payments_for(db, abonnement.id, limit=5)
        in_trial = abonnement.trial_eind_datum is not None and date.today() < abonnement.trial_eind_datum
        return SubscriptionStatusOut(
            has_active_subscription=abonnement.status == "active",
            subscription=AbonnementOut(
                id=abonnement.id,
                plan_type=abonnement.plan_type,
                status=abonnement.status,
                start_datum=abonnement.start_datum,
                eind_datum=abonnement.eind_datum,
                trial_eind_datum=abonnement.trial_eind_datum,
                in_trial_period=in_trial,
                maandelijks_bedrag=float(abonnement.maandelijks_bedrag),
                volgende_betaling=abonnement.volgende_betaling,
            ),
            recent_payments=[BetalingOut.model_validate(p) for p in payments],
            next_payment_date=abonnement.volgende_betaling,
        )

    async def cancel(self, db: AsyncSession, user_id: int) -> CancelOut:
        abonnement = await self.subscriptions.latest_for_user(db, user_id)
        if abonnement is None:
            raise NotFoundError("Abonnement", message="Geen actief abonnement gevonden")
        if abonnement.status == "canceled":
            raise ValidationError("Abonnement is al geannuleerd")

        if abonnement.mollie_customer_id and abonnement.mollie_subscription_id:
            await self.mollie.cancel_subscription(abonnement.mollie_customer_id, abonnement.mollie_subscription_id)

        await self.subscriptions.cancel_active(db, user_id)
        await self.subscriptions.set_user_subscription_flag(db, user_id, False)
        logger.info("Subscription %d canceled by user %d", abonnement.id, user_id)
        return CancelOut(
            message="Abonnement succesvol geannuleerd",
            subscription=CanceledAbonnementOut(id=abonnement.id, status="canceled", eind_datum=date.today()),
        )

    # ── Webhook ───────────────────────────────────────────────────────────

    async def handle_webhook(self, db: AsyncSession, payment_id: Optional[str]) -> str:
        """
        Reconcile one Mollie payment. Returns the acknowledgement message.

        Raises:
            ValidationError: no payment id in the callback (400 "Missing payment ID")
        """
        if not payment_id:
            raise ValidationError("Missing payment ID", field="id")

        try:
            return await self._reconcile(db, payment_id)
        except Exception as e:
            await db.rollback()
            logger.error("Webhook for payment %s failed: %s", payment_id, e, exc_info=True)
            return "Webhook error logged"

    async def _reconcile(self, db: AsyncSession, payment_id: str) -> str:
        payment = await self.mollie.get_payment(payment_id)
        betaling = await self.subscriptions.get_payment_by_mollie_id(db, payment_id)
        if betaling is None:
            logger.warning("Webhook for unknown payment %s", payment_id)
            return "Payment not found"

        status = payment.get("status")
        logger.info("Webhook payment %s status %s (stored %s)", payment_id, status, betaling.status)

        if status == "paid" and betaling.status != "paid":
            await self.subscriptions.update_payment(
                db, betaling, {"status": "paid", "betaal_datum": datetime.now(timezone.utc)}
            )
            abonnement = await self.subscriptions.get(db, betaling.abonnement_id)
            if abonnement is None:
                logger.error("Payment %s belongs to missing subscription %d", payment_id, betaling.abonnement_id)
                return "Subscription not found"
            await self._activate(db, abonnement, payment)

        elif status == "failed" and betaling.status != "failed":
            await self.subscriptions.update_payment(db, betaling, {"status": "failed"})
            abonnement = await self.subscriptions.get(db, betaling.abonnement_id)
            if abonnement is not None:
                await self.subscriptions.update(db, abonnement, {"status": "suspended"})
                await self.subscriptions.set_user_subscription_flag(db, abonnement.gebruiker_id, False)
                logger.info("Subscription %d suspended after failed payment %s", abonnement.id, payment_id)

        elif status in ("expired", "canceled"):
            await self.subscriptions.update_payment(db, betaling, {"status": "failed"})

        return "Webhook processed"

    async def _activate(self, db: AsyncSession, abonnement: Abonnement, payment: Dict[str, Any]) -> None:
        metadata = payment.get("metadata") or {}
        customer_id = payment.get("customerId")

        if metadata.get("type") == FIRST_PAYMENT and customer_id:
            mandates = await self.mollie.list_mandates(customer_id)
            mandate = next((m for m in mandates if m.get("status") == "valid"), None)
            if mandate is not None:
                subscription = await self.mollie.create_subscription(
                    customer_id=customer_id,
                    amount=self.config.subscription_price,
                    interval="1 month",
                    description=RECURRING_DESCRIPTION,
                    webhook_url=self.config.webhook_url,
                    mandate_id=mandate["id"],
                    metadata={"userId": str(abonnement.gebruiker_id), "subscriptionId": str(abonnement.id)},
                )
                await self.subscriptions.update(
                    db,
                    abonnement,
                    {
                        "mollie_subscription_id": subscription["id"],
                        "mollie_mandate_id": mandate["id"],
                        "status": "active",
                        "volgende_betaling": date.today() + timedelta(days=7),
                    },
                )
                logger.info("Subscription %d active with recurring Mollie subscription", abonnement.id)
            else:
                await self.subscriptions.update(
                    db,
                    abonnement,
                    {"status": "active", "volgende_betaling": date.today() + timedelta(days=30)},
                )
                logger.info("Subscription %d active without mandate (one-time payment)", abonnement.id)
            await self.subscriptions.set_user_subscription_flag(db, abonnement.gebruiker_id, True)

        elif abonnement.mollie_subscription_id:
            await self.subscriptions.update(
                db, abonnement, {"volgende_betaling": add_months(date.today(), 1)}
            )
            logger.info("Recurring payment recorded for subscription %d", abonnement.id)


# Module-level singleton
subscription_service = SubscriptionService()
