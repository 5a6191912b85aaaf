"""
Ouderschaps API: Store Registry
=================================

What:  The data-access objects every service works through.
How:   `build_store_registry()` picks one implementation per entity from the
       settings, once at startup. With USE_REPOSITORY_PATTERN=false only the
       omgang store differs (LegacyOmgangStore); every other entity keeps its
       SQLAlchemy store.
"""

import logging
from dataclasses import dataclass

from ouderschaps_api.config import Settings, settings
from ouderschaps_api.stores.account_store import (
    SqlSubscriptionStore,
    SqlUserStore,
    SubscriptionStore,
    UserStore,
)
from ouderschaps_api.stores.dossier_store import (
    DossierStore,
    KindStore,
    PartijStore,
    PersoonStore,
    SqlDossierStore,
    SqlKindStore,
    SqlPartijStore,
    SqlPersoonStore,
)
from ouderschaps_api.stores.legacy import LegacyOmgangStore
from ouderschaps_api.stores.planning_store import (
    AlimentatieStore,
    CommunicatieStore,
    OmgangStore,
    PlanInfoStore,
    SqlAlimentatieStore,
    SqlCommunicatieStore,
    SqlOmgangStore,
    SqlPlanInfoStore,
    SqlZorgStore,
    ZorgStore,
)
from ouderschaps_api.stores.reference_store import LookupStore, SqlLookupStore

logger = logging.getLogger(__name__)


@dataclass
class StoreRegistry:
    dossiers: DossierStore
    personen: PersoonStore
    partijen: PartijStore
    kinderen: KindStore
    omgang: OmgangStore
    zorg: ZorgStore
    plan_info: PlanInfoStore
    communicatie: CommunicatieStore
    alimentatie: AlimentatieStore
    lookups: LookupStore
    users: UserStore
    subscriptions: SubscriptionStore


def build_store_registry(config: Settings = settings) -> StoreRegistry:
    omgang_store: OmgangStore = (
        SqlOmgangStore() if config.use_repository_pattern else LegacyOmgangStore()
    )
    if not config.use_repository_pattern:
        logger.warning("USE_REPOSITORY_PATTERN is off: legacy omgang store selected")
    return StoreRegistry(
        dossiers=SqlDossierStore(),
        personen=SqlPersoonStore(),
        partijen=SqlPartijStore(),
        kinderen=SqlKindStore(),
        omgang=omgang_store,
        zorg=SqlZorgStore(),
        plan_info=SqlPlanInfoStore(),
        communicatie=SqlCommunicatieStore(),
        alimentatie=SqlAlimentatieStore(),
        lookups=SqlLookupStore(),
        users=SqlUserStore(),
        subscriptions=SqlSubscriptionStore(),
    )


# Module-level singleton, chosen once at import
stores = build_store_registry(settings)
