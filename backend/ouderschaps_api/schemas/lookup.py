"""Response models for the reference tables."""

from typing import Optional

from ouderschaps_api.schemas.common import CamelModel


class NamedOut(CamelModel):
    """Rol, relatie type, dag, dagdeel, zorg categorie, schoolvakantie."""

    id: int
    naam: Optional[str] = None


class WeekRegelingOut(CamelModel):
    id: int
    omschrijving: str


class ZorgSituatieOut(CamelModel):
    id: int
    naam: str
    zorg_categorie_id: Optional[int] = None


class RegelingTemplateOut(CamelModel):
    id: int
    template_naam: str
    template_tekst: str
    meervoud_kinderen: bool
    type: str
