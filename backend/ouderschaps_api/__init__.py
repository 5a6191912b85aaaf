"""
Ouderschaps API: Application Package
======================================

HTTP API behind the ouderschapsplan editor: dossiers with their partijen and
kinderen, omgangs- and zorgregelingen, alimentatie, reference data and paid
subscriptions.

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← access rules, validation
    ├─────────────────────────────────────┤
    │      Stores (Data Access Seam)      │  ← one abstract store per entity
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
