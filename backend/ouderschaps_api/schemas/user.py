"""
Ouderschaps API: User Profile Schemas
=======================================

The billing profile is sent in snake_case by the web client
(`klant_type`, `btw_nummer`); the camelCase spelling is accepted as well.
Messages are Dutch because they are shown to the end user verbatim.
"""

import re
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator

from ouderschaps_api.schemas.common import CamelModel

DUTCH_POSTCODE = re.compile(r"^[1-9][0-9]{3}\s?[A-Z]{2}$", re.IGNORECASE)
DUTCH_PHONE = re.compile(r"^(\+31|0)[1-9][0-9]{8}$")
BTW_NUMMER = re.compile(r"^[A-Z]{2}[0-9]{9}B[0-9]{2}$", re.IGNORECASE)
KVK_NUMMER = re.compile(r"^[0-9]{8}$")


def _blank(v: Optional[str]) -> bool:
    return v is None or v == ""


class BillingProfileIn(CamelModel):
    klant_type: Literal["particulier", "zakelijk"]
    telefoon: Optional[str] = None
    straat: str = Field(min_length=1, max_length=255)
    huisnummer: str = Field(min_length=1, max_length=10)
    postcode: str
    plaats: str = Field(min_length=1, max_length=100)
    land: str = Field(default="NL", min_length=2, max_length=2)
    bedrijfsnaam: Optional[str] = Field(default=None, max_length=255)
    btw_nummer: Optional[str] = None
    kvk_nummer: Optional[str] = None

    @field_validator("telefoon")
    @classmethod
    def check_telefoon(cls, v: Optional[str]) -> Optional[str]:
        if _blank(v):
            return None
        if not DUTCH_PHONE.match(v):
            raise ValueError("Ongeldig telefoonnummer (verwacht formaat: 0612345678 of +31612345678)")
        return v

    @field_validator("postcode")
    @classmethod
    def check_postcode(cls, v: str) -> str:
        if not DUTCH_POSTCODE.match(v):
            raise ValueError("Ongeldige postcode (verwacht formaat: 1234 AB)")
        return v

    @field_validator("land")
    @classmethod
    def check_land(cls, v: str) -> str:
        if v != v.upper():
            raise ValueError("Landcode moet in hoofdletters zijn")
        return v

    @model_validator(mode="after")
    def check_zakelijk(self) -> "BillingProfileIn":
        if self.klant_type != "zakelijk":
            return self
        if _blank(self.bedrijfsnaam):
            raise ValueError("Bedrijfsnaam is verplicht voor zakelijke klanten")
        if not _blank(self.btw_nummer) and not BTW_NUMMER.match(self.btw_nummer):
            raise ValueError("Ongeldig BTW-nummer (verwacht formaat: NL123456789B01)")
        if not _blank(self.kvk_nummer) and not KVK_NUMMER.match(self.kvk_nummer):
            raise ValueError("Ongeldig KvK-nummer (verwacht: 8 cijfers)")
        return self


class UserProfileOut(CamelModel):
    id: int
    email: Optional[str] = None
    naam: Optional[str] = None
    has_active_subscription: bool = False
    trial_gebruikt: bool = False
    klant_type: Optional[str] = None
    telefoon: Optional[str] = None
    straat: Optional[str] = None
    huisnummer: Optional[str] = None
    postcode: Optional[str] = None
    plaats: Optional[str] = None
    land: Optional[str] = None
    bedrijfsnaam: Optional[str] = None
    btw_nummer: Optional[str] = None
    kvk_nummer: Optional[str] = None
    is_zakelijk: bool = False
    profiel_compleet: bool = False
    profiel_ingevuld_op: Optional[datetime] = None
    laatste_login: Optional[datetime] = None
    aangemaakt_op: Optional[datetime] = None
