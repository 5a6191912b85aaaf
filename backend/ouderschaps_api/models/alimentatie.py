"""
Ouderschaps API: Alimentatie Models
=====================================

What:  Alimony data of a dossier and its two kinds of line items.

    alimentaties ──< bijdragen_kosten_kinderen      (contribution per parent)
         │    └───< financiele_afspraken_kinderen   (arrangement per child)
         └── bijdrage_kosten_kinderen ──> bijdragen_kosten_kinderen.id

The back-reference `alimentaties.bijdrage_kosten_kinderen` closes a cycle
with the line items. It is nullable and created with use_alter so both
tables can be created; the cascade planner nulls it before deleting.
"""

from decimal import Decimal

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from ouderschaps_api.database import Base


class Alimentatie(Base):
    __tablename__ = "alimentaties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dossier_id: Mapped[int] = mapped_column(ForeignKey("dossiers.id"), nullable=False, index=True)
    netto_besteedbaar_gezinsinkomen: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    kosten_kinderen: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    bijdrage_kosten_kinderen: Mapped[int | None] = mapped_column(
        ForeignKey(
            "bijdragen_kosten_kinderen.id",
            use_alter=True,
            name="fk_alimentaties_bijdrage_kosten_kinderen",
        ),
        nullable=True,
    )
    bijdrage_template: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # ── Kinderrekening (applies to all children) ──────────────────────────
    storting_ouder_1_kinderrekening: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    storting_ouder_2_kinderrekening: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    kinderrekening_kostensoorten: Mapped[list | None] = mapped_column(JSON, nullable=True)
    kinderrekening_maximum_opname: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    kinderrekening_maximum_opname_bedrag: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    kinderbijslag_storten_op_kinderrekening: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    kindgebonden_budget_storten_op_kinderrekening: Mapped[bool | None] = mapped_column(Boolean, nullable=True)


class BijdrageKostenKinderen(Base):
    __tablename__ = "bijdragen_kosten_kinderen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    alimentatie_id: Mapped[int] = mapped_column(ForeignKey("alimentaties.id"), nullable=False, index=True)
    personen_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False)
    eigen_aandeel: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)


class FinancieleAfsprakenKinderen(Base):
    __tablename__ = "financiele_afspraken_kinderen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    alimentatie_id: Mapped[int] = mapped_column(ForeignKey("alimentaties.id"), nullable=False, index=True)
    kind_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False)
    alimentatie_bedrag: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    hoofdverblijf: Mapped[str | None] = mapped_column(String(255), nullable=True)
    kinderbijslag_ontvanger: Mapped[str | None] = mapped_column(String(255), nullable=True)
    zorgkorting_percentage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    inschrijving: Mapped[str | None] = mapped_column(String(255), nullable=True)
    kindgebonden_budget: Mapped[str | None] = mapped_column(String(255), nullable=True)
