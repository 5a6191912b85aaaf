"""
Ouderschaps API: Reference Tables
===================================

Small, rarely-changing tables served through the lookup cache.
Seeded by migrations and maintenance scripts, read-only for the API.
"""


from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ouderschaps_api.database import Base


class Rol(Base):
    """Role of a partij in a dossier, e.g. 'Moeder' or 'Vader'."""

    __tablename__ = "rollen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    naam: Mapped[str] = mapped_column(String(50), nullable=False)


class RelatieType(Base):
    """Kind of parent-child relationship (biologisch, adoptief, ...)."""

    __tablename__ = "relatie_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    naam: Mapped[str] = mapped_column(String(50), nullable=False)


class Dag(Base):
    __tablename__ = "dagen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    naam: Mapped[str] = mapped_column(String(20), nullable=False)


class Dagdeel(Base):
    __tablename__ = "dagdelen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    naam: Mapped[str] = mapped_column(String(20), nullable=False)


class WeekRegeling(Base):
    """Week regime of a visitation schedule (every week, even weeks, ...)."""

    __tablename__ = "week_regelingen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    omschrijving: Mapped[str] = mapped_column(String(100), nullable=False)


class ZorgCategorie(Base):
    __tablename__ = "zorg_categorieen"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    naam: Mapped[str] = mapped_column(String(100), nullable=False)


class ZorgSituatie(Base):
    __tablename__ = "zorg_situaties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    naam: Mapped[str] = mapped_column(String(200), nullable=False)
    zorg_categorie_id: Mapped[int | None] = mapped_column(
        ForeignKey("zorg_categorieen.id"), nullable=True, index=True
    )


class Schoolvakantie(Base):
    __tablename__ = "schoolvakanties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    naam: Mapped[str] = mapped_column(String(100), nullable=False)


class RegelingTemplate(Base):
    """Text template for a regulation paragraph, filtered by type in the API."""

    __tablename__ = "regelingen_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    template_naam: Mapped[str] = mapped_column(String(100), nullable=False)
    template_tekst: Mapped[str] = mapped_column(Text, nullable=False)
    meervoud_kinderen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
