"""Core types, configuration and error hierarchy for the ladder engine."""

from ladder.core.config import EngineConfig
from ladder.core.constants import PLACEHOLDER_START, TOP_RANK, Outcome, RankCase
from ladder.core.exceptions import (
    EntityNotFoundError,
    InvalidMatchError,
    LadderError,
    RankConflictError,
    RankIntegrityError,
)
from ladder.core.protocols import RankedEntityStore
from ladder.core.results import (
    MatchOutcome,
    RankAssignment,
    RankChange,
    RankedEntity,
)

__all__ = [
    # Config
    "EngineConfig",
    # Constants
    "PLACEHOLDER_START",
    "TOP_RANK",
    "Outcome",
    "RankCase",
    # Errors
    "LadderError",
    "EntityNotFoundError",
    "InvalidMatchError",
    "RankConflictError",
    "RankIntegrityError",
    # Store protocol
    "RankedEntityStore",
    # Value types
    "MatchOutcome",
    "RankAssignment",
    "RankChange",
    "RankedEntity",
]
