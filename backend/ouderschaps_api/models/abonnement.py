"""
Ouderschaps API: Subscription and Payment Models
==================================================

What:  `abonnementen` (one row per subscription attempt of a user; the most
       recent one is current) and `betalingen` (every payment created at the
       payment provider for a subscription).

Status values:
    abonnementen.status  pending → active → canceled | suspended
    betalingen.status    pending | open → paid | failed

Both are written by the subscription service; payment status changes arrive
through the provider webhook.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from ouderschaps_api.database import Base
from ouderschaps_api.models.columns import created_at_column, updated_at_column


class Abonnement(Base):
    __tablename__ = "abonnementen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gebruiker_id: Mapped[int] = mapped_column(ForeignKey("gebruikers.id"), nullable=False, index=True)

    mollie_customer_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    mollie_subscription_id: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    mollie_mandate_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    plan_type: Mapped[str] = mapped_column(String(20), nullable=False, default="basic")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    start_datum: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    eind_datum: Mapped[date | None] = mapped_column(Date, nullable=True)
    trial_eind_datum: Mapped[date | None] = mapped_column(Date, nullable=True)
    maandelijks_bedrag: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    volgende_betaling: Mapped[date | None] = mapped_column(Date, nullable=True)

    aangemaakt_op: Mapped[datetime] = created_at_column()
    gewijzigd_op: Mapped[datetime] = updated_at_column()

    def __repr__(self) -> str:
        return f"<Abonnement(id={self.id}, gebruiker={self.gebruiker_id}, status='{self.status}')>"


class Betaling(Base):
    __tablename__ = "betalingen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    abonnement_id: Mapped[int] = mapped_column(ForeignKey("abonnementen.id"), nullable=False, index=True)
    mollie_payment_id: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    mollie_invoice_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    bedrag: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    btw_bedrag: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    factuur_pdf_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    betaal_datum: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    aangemaakt_op: Mapped[datetime] = created_at_column()
