"""
Journey Backend — Application Package Initializer
==================================================

What: Marks the `journey` directory as a Python package.
Why:  Enables module imports like `from journey.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend keeps a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (TripService,             │  ← Orchestration, state transitions
    │  ParticipantService, Dispatcher)    │
    ├─────────────────────────────────────┤
    │  Capabilities (TripStore, Mailer)   │  ← Abstract seams, injected at startup
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async engine + units of work
    └─────────────────────────────────────┘

    Services only ever talk to the TripStore and Mailer interfaces, so tests
    substitute in-memory doubles without touching HTTP or a database.
"""

__version__ = "1.0.0"
