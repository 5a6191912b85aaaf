# Services package init
"""
Ouderschaps API: Services Layer
=================================

Service Inventory:
    - token_validator / user_directory / credential_resolver: who is calling
    - access: dossier ownership rules shared by every dossier service
    - dossier / partij / kind / persoon services: the dossier and its people
    - omgang / zorg / plan_info / communicatie / alimentatie services: the plan contents
    - plan_service: the whole plan in one read and its completeness check
    - lookup_service + lookup_cache: cached reference data
    - cascade: ordered delete of a dossier and everything below it
    - mollie_client + subscription_service: paid subscriptions
    - resilience: retry policy and circuit breakers for outbound HTTP

Each service is a class with a module-level singleton; they take the
request's AsyncSession per call and reach the database only through stores.
"""
