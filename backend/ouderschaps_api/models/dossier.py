"""
Ouderschaps API: Dossier, Persoon and Link Models
===================================================

What:  The case record (`dossiers`), the people in it (`personen`) and the
       join tables that attach people to a case as partij or kind, plus the
       parent-child relation between two people (`kind_ouder`).
How:   Plain foreign keys without ORM cascades. Rows that hang off a dossier
       are removed only by the cascade planner (services/cascade.py), which
       derives its delete order from these foreign keys.

Ownership:
    Every dossier has exactly one owner, `dossiers.gebruiker_id`. All access
    checks resolve a resource to its dossier and compare that column with
    the resolved user id.

Parents and children share the `personen` shape; the role of a person in a
case follows only from the link rows that point at it.
"""

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from ouderschaps_api.database import Base
from ouderschaps_api.models.columns import created_at_column, updated_at_column


class Dossier(Base):
    """
    A parenting-plan case owned by one user.

    `status` False means the dossier is still being worked on; listings show
    only those unless inactive ones are requested explicitly.
    """

    __tablename__ = "dossiers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Numeric string, allocated as highest existing number + 1 (first is "1000").
    dossier_nummer: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    gebruiker_id: Mapped[int] = mapped_column(
        ForeignKey("gebruikers.id"), nullable=False, index=True
    )
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_anoniem: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    template_type: Mapped[str] = mapped_column(String(20), nullable=False, default="default")

    aangemaakt_op: Mapped[datetime] = created_at_column()
    gewijzigd_op: Mapped[datetime] = updated_at_column()

    def __repr__(self) -> str:
        return f"<Dossier(id={self.id}, nummer='{self.dossier_nummer}', gebruiker={self.gebruiker_id})>"


class Persoon(Base):
    __tablename__ = "personen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Set for user-scoped address-book entries; NULL for people only reachable through a dossier.
    gebruiker_id: Mapped[int | None] = mapped_column(
        ForeignKey("gebruikers.id"), nullable=True, index=True
    )

    voorletters: Mapped[str | None] = mapped_column(String(10), nullable=True)
    voornamen: Mapped[str | None] = mapped_column(String(100), nullable=True)
    roepnaam: Mapped[str | None] = mapped_column(String(50), nullable=True)
    geslacht: Mapped[str | None] = mapped_column(String(10), nullable=True)
    tussenvoegsel: Mapped[str | None] = mapped_column(String(20), nullable=True)
    achternaam: Mapped[str] = mapped_column(String(100), nullable=False)

    adres: Mapped[str | None] = mapped_column(String(200), nullable=True)
    postcode: Mapped[str | None] = mapped_column(String(10), nullable=True)
    plaats: Mapped[str | None] = mapped_column(String(100), nullable=True)
    geboorteplaats: Mapped[str | None] = mapped_column(String(255), nullable=True)
    geboorte_datum: Mapped[date | None] = mapped_column(Date, nullable=True)
    nationaliteit_1: Mapped[str | None] = mapped_column(String(50), nullable=True)
    nationaliteit_2: Mapped[str | None] = mapped_column(String(50), nullable=True)

    telefoon: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    beroep: Mapped[str | None] = mapped_column(String(100), nullable=True)

    aangemaakt_op: Mapped[datetime] = created_at_column()
    gewijzigd_op: Mapped[datetime] = updated_at_column()

    def __repr__(self) -> str:
        return f"<Persoon(id={self.id}, achternaam='{self.achternaam}')>"


class DossierPartij(Base):
    """A person taking part in a dossier under a role."""

    __tablename__ = "dossiers_partijen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dossier_id: Mapped[int] = mapped_column(ForeignKey("dossiers.id"), nullable=False, index=True)
    persoon_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False, index=True)
    rol_id: Mapped[int] = mapped_column(ForeignKey("rollen.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("dossier_id", "persoon_id", "rol_id", name="uq_dossiers_partijen_rol"),
    )


class DossierKind(Base):
    """A child attached to a dossier. Its id is the `dossierKindId` of the API."""

    __tablename__ = "dossiers_kinderen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dossier_id: Mapped[int] = mapped_column(ForeignKey("dossiers.id"), nullable=False, index=True)
    kind_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False, index=True)


class KindOuder(Base):
    """Parent-child relation between two people; never a person with itself."""

    __tablename__ = "kind_ouder"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False, index=True)
    ouder_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False, index=True)
    relatie_type_id: Mapped[int] = mapped_column(ForeignKey("relatie_types.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("kind_id", "ouder_id", name="uq_kind_ouder"),
    )
