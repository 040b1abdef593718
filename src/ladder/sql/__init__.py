"""SQL persistence for the ladder.

This package defines:
- Schema constants (configurable via env)
- The SQLAlchemy ``Member`` model with its unique rank constraint
- Engine/session helpers
- ``SqlRankStore``, the database-backed rank store
- A standings loader returning a Polars DataFrame

Environment variables:
- LADDER_DB_SCHEMA: optional schema for the ladder tables (unset on SQLite)
- LADDER_DATABASE_URL or DATABASE_URL: SQLAlchemy URL for the DB engine
"""

from __future__ import annotations

from ladder.sql import models
from ladder.sql.constants import SCHEMA
from ladder.sql.engine import (
    create_all,
    create_engine,
    create_session_factory,
    ensure_schema,
    session_scope,
)
from ladder.sql.load import load_standings_df
from ladder.sql.store import SqlRankStore

__all__ = [
    # Config
    "SCHEMA",
    # Engine helpers
    "create_engine",
    "create_session_factory",
    "session_scope",
    "ensure_schema",
    "create_all",
    # Store
    "SqlRankStore",
    # Loaders
    "load_standings_df",
    # Models submodule
    "models",
]
