"""
Mounjaro Tracker Backend — Application Package
================================================

Authentication and route protection for the Mounjaro treatment tracker.

Architecture Note:
    ┌─────────────────────────────────────┐
    │    Middleware (edge gate, limits)   │  ← optimistic, no database
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Security (codec, verifier, auth)  │  ← authoritative checks
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← accounts, profiles, push
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Everything long-lived is built once into an AppContext (context.py) by
    create_app() in main.py.
"""

__version__ = "1.0.0"
