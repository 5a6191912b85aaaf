"""
Ouderschaps API: Persoon Schemas
==================================

What:  Request and response models for people (parents, children, caretakers).
How:   One field set shared by create and update; create additionally
       requires `achternaam`. Older clients send `geboorte_plaats` /
       `geboortePlaats` / `geboorte_datum`; those spellings are accepted too.
"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import AliasChoices, EmailStr, Field, PositiveInt, field_validator

from ouderschaps_api.schemas.common import CamelModel, reject_null

Geslacht = Literal["Man", "Vrouw", "Anders", "Onbekend"]

POSTCODE_PATTERN = r"^\d{4}\s?[A-Z]{2}$"


class PersoonUpdate(CamelModel):
    """Partial update: every field optional, only sent fields are written."""

    voorletters: Optional[str] = Field(default=None, max_length=10)
    voornamen: Optional[str] = Field(default=None, max_length=100)
    roepnaam: Optional[str] = Field(default=None, max_length=50)
    geslacht: Optional[Geslacht] = None
    tussenvoegsel: Optional[str] = Field(default=None, max_length=20)
    achternaam: Optional[str] = Field(default=None, min_length=1, max_length=100)
    adres: Optional[str] = Field(default=None, max_length=200)
    postcode: Optional[str] = Field(default=None, pattern=POSTCODE_PATTERN)
    plaats: Optional[str] = Field(default=None, max_length=100)
    geboorteplaats: Optional[str] = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("geboorteplaats", "geboortePlaats", "geboorte_plaats"),
    )
    geboorte_datum: Optional[date] = None
    nationaliteit_1: Optional[str] = Field(default=None, max_length=50)
    nationaliteit_2: Optional[str] = Field(default=None, max_length=50)
    telefoon: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = Field(default=None, max_length=100)
    beroep: Optional[str] = Field(default=None, max_length=100)

    @field_validator("achternaam", mode="before")
    @classmethod
    def achternaam_not_null(cls, v):
        return reject_null(v)

    @field_validator("geboorte_datum")
    @classmethod
    def not_in_future(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v > date.today():
            raise ValueError("geboorteDatum must not be in the future")
        return v


class PersoonCreate(PersoonUpdate):
    achternaam: str = Field(min_length=1, max_length=100)


class PersoonInline(PersoonCreate):
    """
    Person data sent inline with a partij, kind or ouder. With `id` the
    existing persoon is updated instead of a new one being created.
    """

    id: Optional[PositiveInt] = None


class PersoonOut(CamelModel):
    id: int
    voorletters: Optional[str] = None
    voornamen: Optional[str] = None
    roepnaam: Optional[str] = None
    geslacht: Optional[str] = None
    tussenvoegsel: Optional[str] = None
    achternaam: str
    adres: Optional[str] = None
    postcode: Optional[str] = None
    plaats: Optional[str] = None
    geboorteplaats: Optional[str] = None
    geboorte_datum: Optional[date] = None
    nationaliteit_1: Optional[str] = None
    nationaliteit_2: Optional[str] = None
    telefoon: Optional[str] = None
    email: Optional[str] = None
    beroep: Optional[str] = None


class PersoonDetailOut(PersoonOut):
    gebruiker_id: Optional[int] = None
    aangemaakt_op: Optional[datetime] = None
    gewijzigd_op: Optional[datetime] = None


class PersoonDependencyCounts(CamelModel):
    dossiers_partijen: int = 0
    dossiers_kinderen: int = 0
    kinderen_ouders_als_kind: int = 0
    kinderen_ouders_als_ouder: int = 0
    omgang: int = 0
    ouderschapsplan_partij_1: int = 0
    ouderschapsplan_partij_2: int = 0
    financiele_afspraken: int = 0
    bijdragen_kosten: int = 0


class PersoonDependenciesOut(CamelModel):
    has_dependencies: bool
    message: str
    dependencies: PersoonDependencyCounts
