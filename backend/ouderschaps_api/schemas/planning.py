"""
Ouderschaps API: Omgang, Zorg and Ouderschapsplan Schemas
===========================================================

What:  Wire contract of the plan-content endpoints.

Omgang slot bounds:
    dagId 1-7 (maandag..zondag), dagdeelId 1-4 (ochtend..nacht),
    wisselTijd "HH:MM" (24h) or empty, weekRegelingAnders at most 255 chars.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field, PositiveInt, field_validator, model_validator

from ouderschaps_api.schemas.common import CamelModel, reject_null
from ouderschaps_api.schemas.lookup import NamedOut, WeekRegelingOut
from ouderschaps_api.schemas.persoon import PersoonOut

WISSEL_TIJD_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"


def _blank_to_none(v):
    if isinstance(v, str) and v == "":
        return None
    return v


class _RequireAnyField(CamelModel):
    """Update bodies must carry at least one field."""

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


# ══════════════════════════════════════════════════════════════════════════
# Omgang
# ══════════════════════════════════════════════════════════════════════════


class OmgangCreate(CamelModel):
    dossier_id: PositiveInt
    dag_id: int = Field(ge=1, le=7)
    dagdeel_id: int = Field(ge=1, le=4)
    verzorger_id: PositiveInt
    wissel_tijd: Optional[str] = Field(default=None, pattern=WISSEL_TIJD_PATTERN)
    week_regeling_id: PositiveInt
    week_regeling_anders: Optional[str] = Field(default=None, max_length=255)

    @field_validator("wissel_tijd", "week_regeling_anders", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class OmgangUpdate(_RequireAnyField):
    dag_id: Optional[int] = Field(default=None, ge=1, le=7)
    dagdeel_id: Optional[int] = Field(default=None, ge=1, le=4)
    verzorger_id: Optional[PositiveInt] = None
    wissel_tijd: Optional[str] = Field(default=None, pattern=WISSEL_TIJD_PATTERN)
    week_regeling_id: Optional[PositiveInt] = None
    week_regeling_anders: Optional[str] = Field(default=None, max_length=255)

    @field_validator("wissel_tijd", "week_regeling_anders", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)

    @field_validator("dag_id", "dagdeel_id", "verzorger_id", "week_regeling_id", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class OmgangOut(CamelModel):
    id: int
    dossier_id: int
    dag: NamedOut
    dagdeel: NamedOut
    verzorger: PersoonOut
    wissel_tijd: Optional[str] = None
    week_regeling: WeekRegelingOut
    week_regeling_anders: Optional[str] = None
    aangemaakt_op: Optional[datetime] = None
    gewijzigd_op: Optional[datetime] = None


class ScheduleSlotOut(CamelModel):
    verzorger: PersoonOut
    wissel_tijd: Optional[str] = None
    week_regeling: str


# dag naam → dagdeel naam → slot
ScheduleGrid = Dict[str, Dict[str, ScheduleSlotOut]]


class OmgangScheduleOut(CamelModel):
    dossier_id: int
    schedule: ScheduleGrid


class OmgangBatchEntry(CamelModel):
    dag_id: int = Field(ge=1, le=7)
    dagdeel_id: int = Field(ge=1, le=4)
    verzorger_id: PositiveInt
    wissel_tijd: Optional[str] = Field(default=None, pattern=WISSEL_TIJD_PATTERN)
    week_regeling_id: PositiveInt
    week_regeling_anders: Optional[str] = Field(default=None, max_length=255)

    @field_validator("wissel_tijd", "week_regeling_anders", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class OmgangBatchIn(CamelModel):
    entries: List[OmgangBatchEntry] = Field(min_length=1, max_length=100)

    @model_validator(mode="after")
    def unique_slots(self) -> "OmgangBatchIn":
        seen = set()
        for entry in self.entries:
            slot = (entry.dag_id, entry.dagdeel_id, entry.week_regeling_id)
            if slot in seen:
                raise ValueError(
                    f"Duplicate slot dagId={entry.dag_id} dagdeelId={entry.dagdeel_id} "
                    f"weekRegelingId={entry.week_regeling_id} in batch"
                )
            seen.add(slot)
        return self


class WeekDagdeelIn(CamelModel):
    dagdeel_id: int = Field(ge=1, le=4)
    verzorger_id: PositiveInt


class WeekDagIn(CamelModel):
    dag_id: int = Field(ge=1, le=7)
    wissel_tijd: Optional[str] = Field(default=None, pattern=WISSEL_TIJD_PATTERN)
    dagdelen: List[WeekDagdeelIn] = Field(min_length=1)

    @field_validator("wissel_tijd", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class OmgangWeekIn(CamelModel):
    week_regeling_id: PositiveInt
    week_regeling_anders: Optional[str] = Field(default=None, max_length=255)
    days: List[WeekDagIn] = Field(max_length=7)

    @model_validator(mode="after")
    def unique_slots(self) -> "OmgangWeekIn":
        seen = set()
        for day in self.days:
            for deel in day.dagdelen:
                slot = (day.dag_id, deel.dagdeel_id)
                if slot in seen:
                    raise ValueError(
                        f"Duplicate slot dagId={day.dag_id} dagdeelId={deel.dagdeel_id} in week"
                    )
                seen.add(slot)
        return self


# ══════════════════════════════════════════════════════════════════════════
# Zorg
# ══════════════════════════════════════════════════════════════════════════


class ZorgCreate(CamelModel):
    zorg_categorie_id: PositiveInt
    zorg_situatie_id: PositiveInt
    overeenkomst: str = Field(min_length=1, max_length=5000)
    situatie_anders: Optional[str] = Field(default=None, max_length=500)


class ZorgUpdate(_RequireAnyField):
    zorg_categorie_id: Optional[PositiveInt] = None
    zorg_situatie_id: Optional[PositiveInt] = None
    overeenkomst: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    situatie_anders: Optional[str] = Field(default=None, max_length=500)

    @field_validator("zorg_categorie_id", "zorg_situatie_id", "overeenkomst", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class ZorgOut(CamelModel):
    id: int
    dossier_id: int
    zorg_categorie: NamedOut
    zorg_situatie: NamedOut
    overeenkomst: str
    situatie_anders: Optional[str] = None
    aangemaakt_op: Optional[datetime] = None
    aangemaakt_door: int
    gewijzigd_op: Optional[datetime] = None
    gewijzigd_door: Optional[int] = None


class ZorgUpsertItem(ZorgCreate):
    id: Optional[PositiveInt] = None


class ZorgUpsertIn(CamelModel):
    zorgregelingen: List[ZorgUpsertItem] = Field(min_length=1)


class ZorgCategoryDeleteOut(CamelModel):
    deleted: int
    message: str
    category_id: int
    dossier_id: int


# ══════════════════════════════════════════════════════════════════════════
# Ouderschapsplan info
# ══════════════════════════════════════════════════════════════════════════

PartijKeuze = Literal[1, 2]


class KinderrekeningIn(CamelModel):
    iban: str = Field(min_length=1, max_length=34)
    tenaamstelling: str = Field(min_length=1, max_length=100)
    bank_naam: str = Field(min_length=1, max_length=50)

    @field_validator("iban", "tenaamstelling", "bank_naam", mode="before")
    @classmethod
    def strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class OuderschapsplanInfoIn(CamelModel):
    partij_1_persoon_id: PositiveInt
    partij_2_persoon_id: PositiveInt
    soort_relatie: Optional[str] = Field(default=None, max_length=100)
    soort_relatie_verbreking: Optional[str] = Field(default=None, max_length=100)
    betrokkenheid_kind: Optional[str] = None
    kiesplan: Optional[str] = Field(default=None, max_length=100)
    gezag_partij: Optional[PartijKeuze] = None
    wa_op_naam_van_partij: Optional[PartijKeuze] = None
    keuze_devices: Optional[str] = None
    zorgverzekering_op_naam_van_partij: Optional[PartijKeuze] = None
    kinderbijslag_partij: Optional[Literal[1, 2, 3]] = None
    brp_partij_1: Optional[List[int]] = None
    brp_partij_2: Optional[List[int]] = None
    kgb_partij_1: Optional[List[int]] = None
    kgb_partij_2: Optional[List[int]] = None
    hoofdverblijf: Optional[str] = None
    zorgverdeling: Optional[str] = None
    opvang_kinderen: Optional[str] = None
    bankrekeningnummers_op_naam_van_kind: Optional[List[KinderrekeningIn]] = Field(
        default=None, max_length=10
    )
    parenting_coordinator: Optional[str] = None


class OuderschapsplanInfoOut(CamelModel):
    id: int
    dossier_id: int
    partij_1_persoon_id: int
    partij_2_persoon_id: int
    soort_relatie: Optional[str] = None
    soort_relatie_verbreking: Optional[str] = None
    betrokkenheid_kind: Optional[str] = None
    kiesplan: Optional[str] = None
    gezag_partij: Optional[int] = None
    wa_op_naam_van_partij: Optional[int] = None
    keuze_devices: Optional[str] = None
    zorgverzekering_op_naam_van_partij: Optional[int] = None
    kinderbijslag_partij: Optional[int] = None
    brp_partij_1: Optional[List[int]] = None
    brp_partij_2: Optional[List[int]] = None
    kgb_partij_1: Optional[List[int]] = None
    kgb_partij_2: Optional[List[int]] = None
    hoofdverblijf: Optional[str] = None
    zorgverdeling: Optional[str] = None
    opvang_kinderen: Optional[str] = None
    bankrekeningnummers_op_naam_van_kind: Optional[List[dict]] = None
    parenting_coordinator: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ══════════════════════════════════════════════════════════════════════════
# Communicatie afspraken
# ══════════════════════════════════════════════════════════════════════════


class CommunicatieAfsprakenFields(CamelModel):
    villa_pinedo: Optional[bool] = None
    kies_methode: Optional[str] = Field(default=None, max_length=50)
    omgang_tekst_of_schema: Optional[str] = Field(default=None, max_length=50)
    opvang: Optional[str] = Field(default=None, max_length=100)
    informatie_uitwisseling: Optional[str] = Field(default=None, max_length=100)
    bijlage_beslissingen: Optional[str] = Field(default=None, max_length=50)
    social_media: Optional[str] = Field(default=None, max_length=100)
    mobiel_tablet: Optional[str] = Field(default=None, max_length=100)
    id_bewijzen: Optional[str] = Field(default=None, max_length=100)
    aansprakelijkheidsverzekering: Optional[str] = Field(default=None, max_length=100)
    ziektekostenverzekering: Optional[str] = Field(default=None, max_length=100)
    toestemming_reizen: Optional[str] = Field(default=None, max_length=100)
    jongmeerderjarige: Optional[str] = Field(default=None, max_length=100)
    studiekosten: Optional[str] = Field(default=None, max_length=100)
    bankrekening_kinderen: Optional[str] = Field(default=None, max_length=100)
    evaluatie: Optional[str] = Field(default=None, max_length=50)
    parenting_coordinator: Optional[str] = Field(default=None, max_length=100)
    mediation_clausule: Optional[str] = Field(default=None, max_length=50)


class CommunicatieAfsprakenCreate(CommunicatieAfsprakenFields):
    dossier_id: PositiveInt


class CommunicatieAfsprakenUpdate(_RequireAnyField, CommunicatieAfsprakenFields):
    pass


class CommunicatieAfsprakenOut(CommunicatieAfsprakenFields):
    id: int
    dossier_id: int
    aangemaakt_op: Optional[datetime] = None
    gewijzigd_op: Optional[datetime] = None
