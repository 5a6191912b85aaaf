"""ORM models. Importing this package registers every table on Base.metadata."""

from ouderschaps_api.models.abonnement import Abonnement, Betaling
from ouderschaps_api.models.alimentatie import (
    Alimentatie,
    BijdrageKostenKinderen,
    FinancieleAfsprakenKinderen,
)
from ouderschaps_api.models.dossier import (
    Dossier,
    DossierKind,
    DossierPartij,
    KindOuder,
    Persoon,
)
from ouderschaps_api.models.gebruiker import Gebruiker
from ouderschaps_api.models.lookup import (
    Dag,
    Dagdeel,
    RegelingTemplate,
    RelatieType,
    Rol,
    Schoolvakantie,
    WeekRegeling,
    ZorgCategorie,
    ZorgSituatie,
)
from ouderschaps_api.models.planning import CommunicatieAfspraken, Omgang, OuderschapsplanInfo, Zorg

__all__ = [
    "Abonnement",
    "Alimentatie",
    "Betaling",
    "BijdrageKostenKinderen",
    "CommunicatieAfspraken",
    "Dag",
    "Dagdeel",
    "Dossier",
    "DossierKind",
    "DossierPartij",
    "FinancieleAfsprakenKinderen",
    "Gebruiker",
    "KindOuder",
    "Omgang",
    "OuderschapsplanInfo",
    "Persoon",
    "RegelingTemplate",
    "RelatieType",
    "Rol",
    "Schoolvakantie",
    "WeekRegeling",
    "Zorg",
    "ZorgCategorie",
    "ZorgSituatie",
]
