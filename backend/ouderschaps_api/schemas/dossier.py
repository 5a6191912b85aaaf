"""
Ouderschaps API: Dossier, Partij and Kind Schemas
===================================================

What:  Wire contract of the dossier endpoints and of the people attached to
       a dossier (partijen, kinderen and their ouders).

"Exactly one of" bodies:
    Adding a partij, kind or ouder takes either the id of an existing person
    or inline person data, never both and never neither. The model validators
    below enforce that before any handler code runs.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, PositiveInt, model_validator

from ouderschaps_api.schemas.common import CamelModel, Pagination
from ouderschaps_api.schemas.lookup import NamedOut
from ouderschaps_api.schemas.persoon import PersoonInline, PersoonOut


def _exactly_one(id_value, data_value, id_field: str, data_field: str) -> None:
    if (id_value is None) == (data_value is None):
        raise ValueError(f"Provide exactly one of {id_field} or {data_field}")


# ══════════════════════════════════════════════════════════════════════════
# Dossier
# ══════════════════════════════════════════════════════════════════════════


class DossierOut(CamelModel):
    id: int
    dossier_nummer: str
    gebruiker_id: int
    status: bool
    is_anoniem: bool = False
    template_type: str = "default"
    aangemaakt_op: Optional[datetime] = None
    gewijzigd_op: Optional[datetime] = None


class DossierWithOwnerOut(DossierOut):
    is_owner: bool


class DossierListOut(CamelModel):
    data: List[DossierOut]
    pagination: Pagination


class DossierStatusUpdate(CamelModel):
    status: Optional[bool] = None


class DossierAnonymityUpdate(CamelModel):
    is_anoniem: bool = Field(strict=True)


class DossierTemplateTypeUpdate(CamelModel):
    template_type: Literal["default", "v2"]


# ══════════════════════════════════════════════════════════════════════════
# Partijen
# ══════════════════════════════════════════════════════════════════════════


class PartijOut(CamelModel):
    id: int
    persoon: PersoonOut
    rol: NamedOut


class AddPartijIn(CamelModel):
    persoon_id: Optional[PositiveInt] = None
    persoon_data: Optional[PersoonInline] = None
    rol_id: PositiveInt

    @model_validator(mode="after")
    def check_persoon_source(self) -> "AddPartijIn":
        _exactly_one(self.persoon_id, self.persoon_data, "persoonId", "persoonData")
        return self


class UpdatePartijRolIn(CamelModel):
    rol_id: PositiveInt


# ══════════════════════════════════════════════════════════════════════════
# Kinderen & ouders
# ══════════════════════════════════════════════════════════════════════════


class OuderOut(CamelModel):
    ouder: PersoonOut
    relatie_type: NamedOut


class KindOut(CamelModel):
    """`id` is the dossier-kind link id, not the persoon id of the child."""

    id: int
    kind: PersoonOut
    ouders: List[OuderOut] = []


class DossierDetailOut(CamelModel):
    dossier: DossierWithOwnerOut
    partijen: List[PartijOut]
    kinderen: List[KindOut]


class OuderRelatieIn(CamelModel):
    ouder_id: PositiveInt
    relatie_type_id: PositiveInt


class AddKindIn(CamelModel):
    kind_id: Optional[PositiveInt] = None
    kind_data: Optional[PersoonInline] = None
    ouder_relaties: List[OuderRelatieIn] = []

    @model_validator(mode="after")
    def check_kind_source(self) -> "AddKindIn":
        _exactly_one(self.kind_id, self.kind_data, "kindId", "kindData")
        return self


class AddOuderIn(CamelModel):
    ouder_id: Optional[PositiveInt] = None
    ouder_data: Optional[PersoonInline] = None
    relatie_type_id: PositiveInt

    @model_validator(mode="after")
    def check_ouder_source(self) -> "AddOuderIn":
        _exactly_one(self.ouder_id, self.ouder_data, "ouderId", "ouderData")
        return self


class UpdateRelatieTypeIn(CamelModel):
    relatie_type_id: PositiveInt


class KindOuderOut(CamelModel):
    id: int
    kind_id: int
    ouder: PersoonOut
    relatie_type: NamedOut
