"""
Ouderschaps API: Gebruiker (User) Model
=========================================

What:  The `gebruikers` table: one row per account.
How:   Rows are created lazily by the user directory on the first successful
       token authentication of an unknown identity, or linked to an invited
       row by email. Rows are never deleted by this service.

Billing profile columns are filled by PUT /api/user/profile; the
subscription columns are maintained by the subscription service.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ouderschaps_api.database import Base
from ouderschaps_api.models.columns import created_at_column, updated_at_column


class Gebruiker(Base):
    __tablename__ = "gebruikers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Identity ──────────────────────────────────────────────────────────
    # `sub` claim of the identity provider; NULL for invited users that
    # have not logged in yet.
    auth0_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    naam: Mapped[str | None] = mapped_column(String(255), nullable=True)
    laatste_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # ── Subscription ──────────────────────────────────────────────────────
    has_active_subscription: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    mollie_customer_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    trial_gebruikt: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # ── Billing profile ───────────────────────────────────────────────────
    klant_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    telefoon: Mapped[str | None] = mapped_column(String(20), nullable=True)
    straat: Mapped[str | None] = mapped_column(String(255), nullable=True)
    huisnummer: Mapped[str | None] = mapped_column(String(10), nullable=True)
    postcode: Mapped[str | None] = mapped_column(String(10), nullable=True)
    plaats: Mapped[str | None] = mapped_column(String(100), nullable=True)
    land: Mapped[str | None] = mapped_column(String(2), nullable=True)
    bedrijfsnaam: Mapped[str | None] = mapped_column(String(255), nullable=True)
    btw_nummer: Mapped[str | None] = mapped_column(String(20), nullable=True)
    kvk_nummer: Mapped[str | None] = mapped_column(String(8), nullable=True)
    is_zakelijk: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    profiel_compleet: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    profiel_ingevuld_op: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    aangemaakt_op: Mapped[datetime] = created_at_column()
    gewijzigd_op: Mapped[datetime] = updated_at_column()

    def __repr__(self) -> str:
        return f"<Gebruiker(id={self.id}, auth0_id='{self.auth0_id}')>"
