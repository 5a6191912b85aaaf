# Routes package init
"""
Ouderschaps API: Routes Package
=================================

Route Inventory:
    - dossiers.py:         /api/dossiers, partijen and kinderen of a dossier
    - kinderen.py:         /api/kinderen/{kindId}/ouders
    - omgang.py:           /api/omgang, /api/dossiers/{id}/omgang/...
    - zorg.py:             /api/dossiers/{id}/zorg[/upsert|/category/{id}]
    - ouderschapsplan.py:  /api/dossiers/{id}/ouderschapsplan-info
    - plan.py:             /api/ouderschapsplan/{dossierId}[/validate]
    - communicatie.py:     /api/communicatie-afspraken
    - alimentatie.py:      /api/dossiers/{id}/alimentatie, /api/alimentatie/{id}/...
    - personen.py:         /api/personen, /api/personen/{id}/dependencies
    - user.py:             /api/user/profile
    - lookups.py:          /api/rollen, /api/lookups/...
    - subscription.py:     /api/subscription/...
    - health.py:           /health

Routes stay thin: resolve the user, call one service method, wrap the result
in the success envelope.
"""
