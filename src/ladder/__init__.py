"""Ladder rankings: unique 1..N ranks updated after every match."""

from __future__ import annotations

from ladder.core import (
    EngineConfig,
    EntityNotFoundError,
    InvalidMatchError,
    LadderError,
    MatchOutcome,
    Outcome,
    RankCase,
    RankChange,
    RankConflictError,
    RankedEntity,
    RankedEntityStore,
    RankIntegrityError,
)
from ladder.ranking import RankingEngine, repair, validate_integrity
from ladder.store import InMemoryRankStore

__version__ = "0.1.0"

__all__ = [
    # Engine
    "RankingEngine",
    "EngineConfig",
    "validate_integrity",
    "repair",
    # Stores
    "RankedEntityStore",
    "InMemoryRankStore",
    # Value types
    "MatchOutcome",
    "Outcome",
    "RankCase",
    "RankChange",
    "RankedEntity",
    # Errors
    "LadderError",
    "EntityNotFoundError",
    "InvalidMatchError",
    "RankConflictError",
    "RankIntegrityError",
    # Version
    "__version__",
]

# Note: the SQLAlchemy store lives in ladder.sql and is imported on demand so
# the in-memory engine works without a database driver installed.
