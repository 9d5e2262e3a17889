"""
TipMate Backend — Application Package
=======================================

Layers:

    ┌─────────────────────────────────────┐
    │    Calculator UI (tipmate.ui)       │  ← form state, derivations, HTTP client
    ├─────────────────────────────────────┤
    │        Routes (API Layer)           │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       Services (Business Logic)     │  ← validation, queries
    ├─────────────────────────────────────┤
    │      Models & Schemas (Data)        │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   DatabaseConnector (Persistence)   │  ← shared async engine, sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
