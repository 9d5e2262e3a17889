"""
TipMate Backend — ORM Models
==============================

`register_models()` is the single place where model modules are imported and
bound to `Base.metadata`. The app factory calls it once at process start and
hands the returned metadata to the DatabaseConnector; Alembic calls it to
discover tables for autogenerate.
"""

from sqlalchemy import MetaData

from tipmate.database import Base


def register_models() -> MetaData:
    """Import every model module and return the shared metadata."""
    from tipmate.models import tip_calculation  # noqa: F401

    return Base.metadata
