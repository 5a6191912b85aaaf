"""
Ouderschaps API: User and Subscription Stores
===============================================

What:  Data access for `gebruikers`, `abonnementen` and `betalingen`.
How:   Abstract store interfaces plus their SQLAlchemy implementations. Every
       method takes the request's AsyncSession and only flushes; the
       session dependency owns the commit.
Who:   services/user_directory.py, services/user_service.py,
       services/subscription_service.py.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.config import settings
from ouderschaps_api.models import Abonnement, Betaling, Gebruiker
from ouderschaps_api.models.columns import utcnow

logger = logging.getLogger(__name__)

VAT_RATE = 0.21


class UserStore(ABC):
    @abstractmethod
    async def get(self, db: AsyncSession, user_id: int) -> Optional[Gebruiker]: ...

    @abstractmethod
    async def get_by_auth0_id(self, db: AsyncSession, auth0_id: str) -> Optional[Gebruiker]: ...

    @abstractmethod
    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[Gebruiker]: ...

    @abstractmethod
    async def create(
        self, db: AsyncSession, auth0_id: str, email: Optional[str], naam: Optional[str]
    ) -> Gebruiker: ...

    @abstractmethod
    async def update(self, db: AsyncSession, user: Gebruiker, values: Dict[str, Any]) -> Gebruiker: ...


class SqlUserStore(UserStore):
    async def get(self, db: AsyncSession, user_id: int) -> Optional[Gebruiker]:
        return await db.get(Gebruiker, user_id)

    async def get_by_auth0_id(self, db: AsyncSession, auth0_id: str) -> Optional[Gebruiker]:
        result = await db.execute(select(Gebruiker).where(Gebruiker.auth0_id == auth0_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[Gebruiker]:
        result = await db.execute(
            select(Gebruiker).where(Gebruiker.email == email).order_by(Gebruiker.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def create(
        self, db: AsyncSession, auth0_id: str, email: Optional[str], naam: Optional[str]
    ) -> Gebruiker:
        user = Gebruiker(auth0_id=auth0_id, email=email, naam=naam, laatste_login=utcnow())
        db.add(user)
        await db.flush()
        return user

    async def update(self, db: AsyncSession, user: Gebruiker, values: Dict[str, Any]) -> Gebruiker:
        for name, value in values.items():
            setattr(user, name, value)
        await db.flush()
        return user


class SubscriptionStore(ABC):
    @abstractmethod
    async def create(
        self,
        db: AsyncSession,
        gebruiker_id: int,
        mollie_customer_id: str,
        trial_eind_datum: Optional[date],
        maandelijks_bedrag: Optional[float] = None,
    ) -> Abonnement: ...

    @abstractmethod
    async def get(self, db: AsyncSession, abonnement_id: int) -> Optional[Abonnement]: ...

    @abstractmethod
    async def latest_for_user(self, db: AsyncSession, gebruiker_id: int) -> Optional[Abonnement]: ...

    @abstractmethod
    async def get_by_mollie_subscription_id(
        self, db: AsyncSession, mollie_subscription_id: str
    ) -> Optional[Abonnement]: ...

    @abstractmethod
    async def update(self, db: AsyncSession, abonnement: Abonnement, values: Dict[str, Any]) -> Abonnement: ...

    @abstractmethod
    async def set_user_subscription_flag(self, db: AsyncSession, gebruiker_id: int, active: bool) -> None: ...

    @abstractmethod
    async def cancel_active(self, db: AsyncSession, gebruiker_id: int) -> int: ...

    @abstractmethod
    async def create_payment(
        self, db: AsyncSession, abonnement_id: int, mollie_payment_id: str, bedrag: float
    ) -> Betaling: ...

    @abstractmethod
    async def update_payment(self, db: AsyncSession, betaling: Betaling, values: Dict[str, Any]) -> Betaling: ...

    @abstractmethod
    async def payments_for(self, db: AsyncSession, abonnement_id: int, limit: int = 5) -> List[Betaling]: ...

    @abstractmethod
    async def get_payment_by_mollie_id(self, db: AsyncSession, mollie_payment_id: str) -> Optional[Betaling]: ...


class SqlSubscriptionStore(SubscriptionStore):
    async def create(
        self,
        db: AsyncSession,
        gebruiker_id: int,
        mollie_customer_id: str,
        trial_eind_datum: Optional[date],
        maandelijks_bedrag: Optional[float] = None,
    ) -> Abonnement:
        abonnement = Abonnement(
            gebruiker_id=gebruiker_id,
            mollie_customer_id=mollie_customer_id,
            plan_type="basic",
            status="pending",
            start_datum=date.today(),
            trial_eind_datum=trial_eind_datum,
            maandelijks_bedrag=maandelijks_bedrag or settings.subscription_price,
        )
        db.add(abonnement)
        await db.flush()
        return abonnement

    async def get(self, db: AsyncSession, abonnement_id: int) -> Optional[Abonnement]:
        return await db.get(Abonnement, abonnement_id)

    async def latest_for_user(self, db: AsyncSession, gebruiker_id: int) -> Optional[Abonnement]:
        result = await db.execute(
            select(Abonnement)
            .where(Abonnement.gebruiker_id == gebruiker_id)
            .order_by(desc(Abonnement.aangemaakt_op), desc(Abonnement.id))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_mollie_subscription_id(
        self, db: AsyncSession, mollie_subscription_id: str
    ) -> Optional[Abonnement]:
        result = await db.execute(
            select(Abonnement).where(Abonnement.mollie_subscription_id == mollie_subscription_id)
        )
        return result.scalar_one_or_none()

    async def update(self, db: AsyncSession, abonnement: Abonnement, values: Dict[str, Any]) -> Abonnement:
        for name, value in values.items():
            setattr(abonnement, name, value)
        await db.flush()
        return abonnement

    async def set_user_subscription_flag(self, db: AsyncSession, gebruiker_id: int, active: bool) -> None:
        await db.execute(
            update(Gebruiker)
            .where(Gebruiker.id == gebruiker_id)
            .values(has_active_subscription=active, gewijzigd_op=utcnow())
        )

    async def cancel_active(self, db: AsyncSession, gebruiker_id: int) -> int:
        """Cancel the user's active subscriptions; returns the number of rows changed."""
        result = await db.execute(
            update(Abonnement)
            .where(Abonnement.gebruiker_id == gebruiker_id, Abonnement.status == "active")
            .values(status="canceled", eind_datum=date.today(), gewijzigd_op=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def create_payment(
        self, db: AsyncSession, abonnement_id: int, mollie_payment_id: str, bedrag: float
    ) -> Betaling:
        betaling = Betaling(
            abonnement_id=abonnement_id,
            mollie_payment_id=mollie_payment_id,
            bedrag=bedrag,
            btw_bedrag=round(bedrag * VAT_RATE, 2),
            status="pending",
        )
        db.add(betaling)
        await db.flush()
        return betaling

    async def update_payment(self, db: AsyncSession, betaling: Betaling, values: Dict[str, Any]) -> Betaling:
        for name, value in values.items():
            setattr(betaling, name, value)
        await db.flush()
        return betaling

    async def payments_for(self, db: AsyncSession, abonnement_id: int, limit: int = 5) -> List[Betaling]:
        result = await db.execute(
            select(Betaling)
            .where(Betaling.abonnement_id == abonnement_id)
            .order_by(desc(Betaling.aangemaakt_op), desc(Betaling.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_payment_by_mollie_id(self, db: AsyncSession, mollie_payment_id: str) -> Optional[Betaling]:
        result = await db.execute(
            select(Betaling).where(Betaling.mollie_payment_id == mollie_payment_id)
        )
        return result.scalar_one_or_none()

