"""
Ouderschaps API: Complete Ouderschapsplan Schemas
===================================================

What:  The read-only overview of a whole plan and its completeness check.

Completeness:
    Four sections count towards `percentageCompleet`: at least two partijen,
    at least one kind, at least one omgang slot, at least one zorg regeling.
    Alimentatie is reported but does not count.
"""

from datetime import datetime
from typing import List, Optional

from ouderschaps_api.schemas.alimentatie import CompleteAlimentatieOut
from ouderschaps_api.schemas.common import CamelModel
from ouderschaps_api.schemas.dossier import DossierOut, KindOut, PartijOut
from ouderschaps_api.schemas.planning import OmgangOut, ScheduleGrid, ZorgOut


class PlanVolledigheidOut(CamelModel):
    heeft_partijen: bool
    heeft_kinderen: bool
    heeft_omgang: bool
    heeft_zorg: bool
    heeft_alimentatie: bool
    is_compleet: bool
    percentage_compleet: int
    laatst_gewijzigd: Optional[datetime] = None


class PlanMetadataOut(CamelModel):
    volledigheid: PlanVolledigheidOut
    laatst_gewijzigd: Optional[datetime] = None
    aantal_secties_compleet: int
    totaal_secties: int


class PlanOmgangOut(CamelModel):
    schedule: ScheduleGrid
    entries: List[OmgangOut]


class CompletePlanOut(CamelModel):
    dossier: DossierOut
    partijen: List[PartijOut]
    kinderen: List[KindOut]
    omgang: PlanOmgangOut
    zorg: List[ZorgOut]
    alimentatie: Optional[CompleteAlimentatieOut] = None
    metadata: PlanMetadataOut
