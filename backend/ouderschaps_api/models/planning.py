"""
Ouderschaps API: Planning Models
==================================

What:  Per-dossier plan content: the visitation schedule (`omgang`), care
       agreements (`zorg`) and the one-per-dossier plan settings
       (`ouderschapsplan_info`, `communicatie_afspraken`).

Omgang slots:
    At most one verzorger per (dossier, dag, dagdeel, week_regeling). The
    index below is deliberately NOT unique: the rule is enforced by the
    pre-write overlap check in the omgang service so that a whole week can be
    replaced inside one transaction without tripping over half-written rows.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ouderschaps_api.database import Base
from ouderschaps_api.models.columns import created_at_column, updated_at_column


class Omgang(Base):
    __tablename__ = "omgang"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dossier_id: Mapped[int] = mapped_column(ForeignKey("dossiers.id"), nullable=False)
    dag_id: Mapped[int] = mapped_column(ForeignKey("dagen.id"), nullable=False)
    dagdeel_id: Mapped[int] = mapped_column(ForeignKey("dagdelen.id"), nullable=False)
    verzorger_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False)
    # "HH:MM" or NULL
    wissel_tijd: Mapped[str | None] = mapped_column(String(5), nullable=True)
    week_regeling_id: Mapped[int] = mapped_column(ForeignKey("week_regelingen.id"), nullable=False)
    week_regeling_anders: Mapped[str | None] = mapped_column(String(255), nullable=True)

    aangemaakt_op: Mapped[datetime] = created_at_column()
    gewijzigd_op: Mapped[datetime] = updated_at_column()

    __table_args__ = (
        Index("idx_omgang_slot", "dossier_id", "dag_id", "dagdeel_id", "week_regeling_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Omgang(id={self.id}, dossier={self.dossier_id}, dag={self.dag_id}, "
            f"dagdeel={self.dagdeel_id}, week={self.week_regeling_id})>"
        )


class Zorg(Base):
    __tablename__ = "zorg"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dossier_id: Mapped[int] = mapped_column(ForeignKey("dossiers.id"), nullable=False, index=True)
    zorg_categorie_id: Mapped[int] = mapped_column(ForeignKey("zorg_categorieen.id"), nullable=False)
    zorg_situatie_id: Mapped[int] = mapped_column(ForeignKey("zorg_situaties.id"), nullable=False)
    overeenkomst: Mapped[str] = mapped_column(Text, nullable=False)
    situatie_anders: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Audit: user ids, not foreign keys to personen.
    aangemaakt_door: Mapped[int] = mapped_column(ForeignKey("gebruikers.id"), nullable=False)
    gewijzigd_door: Mapped[int | None] = mapped_column(ForeignKey("gebruikers.id"), nullable=True)
    aangemaakt_op: Mapped[datetime] = created_at_column()
    gewijzigd_op: Mapped[datetime] = updated_at_column()


class OuderschapsplanInfo(Base):
    """
    Plan-level settings, one row per dossier.

    Party choices (`gezag_partij`, `wa_op_naam_van_partij`, ...) hold 1 or 2
    for partij 1 / partij 2; `kinderbijslag_partij` additionally allows 3
    (split). The BRP/KGB columns hold JSON lists of persoon ids and
    `bankrekeningnummers_op_naam_van_kind` a JSON list of child accounts.
    """

    __tablename__ = "ouderschapsplan_info"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dossier_id: Mapped[int] = mapped_column(ForeignKey("dossiers.id"), nullable=False, unique=True)
    partij_1_persoon_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False)
    partij_2_persoon_id: Mapped[int] = mapped_column(ForeignKey("personen.id"), nullable=False)

    soort_relatie: Mapped[str | None] = mapped_column(String(100), nullable=True)
    soort_relatie_verbreking: Mapped[str | None] = mapped_column(String(100), nullable=True)
    betrokkenheid_kind: Mapped[str | None] = mapped_column(Text, nullable=True)
    kiesplan: Mapped[str | None] = mapped_column(String(100), nullable=True)
    gezag_partij: Mapped[int | None] = mapped_column(Integer, nullable=True)
    wa_op_naam_van_partij: Mapped[int | None] = mapped_column(Integer, nullable=True)
    keuze_devices: Mapped[str | None] = mapped_column(Text, nullable=True)
    zorgverzekering_op_naam_van_partij: Mapped[int | None] = mapped_column(Integer, nullable=True)
    kinderbijslag_partij: Mapped[int | None] = mapped_column(Integer, nullable=True)

    brp_partij_1: Mapped[list | None] = mapped_column(JSON, nullable=True)
    brp_partij_2: Mapped[list | None] = mapped_column(JSON, nullable=True)
    kgb_partij_1: Mapped[list | None] = mapped_column(JSON, nullable=True)
    kgb_partij_2: Mapped[list | None] = mapped_column(JSON, nullable=True)

    hoofdverblijf: Mapped[str | None] = mapped_column(Text, nullable=True)
    zorgverdeling: Mapped[str | None] = mapped_column(Text, nullable=True)
    opvang_kinderen: Mapped[str | None] = mapped_column(Text, nullable=True)
    bankrekeningnummers_op_naam_van_kind: Mapped[list | None] = mapped_column(JSON, nullable=True)
    parenting_coordinator: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()


class CommunicatieAfspraken(Base):
    """
    How the parents communicate and decide about the children, one row per
    dossier. Every choice column holds the label of the option picked in the
    plan wizard; `villa_pinedo` records whether the children are referred to
    the Villa Pinedo support program.
    """

    __tablename__ = "communicatie_afspraken"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dossier_id: Mapped[int] = mapped_column(ForeignKey("dossiers.id"), nullable=False, unique=True)

    villa_pinedo: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    kies_methode: Mapped[str | None] = mapped_column(String(50), nullable=True)
    omgang_tekst_of_schema: Mapped[str | None] = mapped_column(String(50), nullable=True)
    opvang: Mapped[str | None] = mapped_column(String(100), nullable=True)
    informatie_uitwisseling: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bijlage_beslissingen: Mapped[str | None] = mapped_column(String(50), nullable=True)
    social_media: Mapped[str | None] = mapped_column(String(100), nullable=True)
    mobiel_tablet: Mapped[str | None] = mapped_column(String(100), nullable=True)
    id_bewijzen: Mapped[str | None] = mapped_column(String(100), nullable=True)
    aansprakelijkheidsverzekering: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ziektekostenverzekering: Mapped[str | None] = mapped_column(String(100), nullable=True)
    toestemming_reizen: Mapped[str | None] = mapped_column(String(100), nullable=True)
    jongmeerderjarige: Mapped[str | None] = mapped_column(String(100), nullable=True)
    studiekosten: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bankrekening_kinderen: Mapped[str | None] = mapped_column(String(100), nullable=True)
    evaluatie: Mapped[str | None] = mapped_column(String(50), nullable=True)
    parenting_coordinator: Mapped[str | None] = mapped_column(String(100), nullable=True)
    mediation_clausule: Mapped[str | None] = mapped_column(String(50), nullable=True)

    aangemaakt_op: Mapped[datetime] = created_at_column()
    gewijzigd_op: Mapped[datetime] = updated_at_column()
