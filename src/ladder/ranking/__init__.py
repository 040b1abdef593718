"""Match-driven rank updates, staged writes and integrity tooling."""

from ladder.ranking.engine import RankingEngine
from ladder.ranking.integrity import (
    assert_integrity,
    find_violations,
    repair,
    validate_integrity,
)
from ladder.ranking.lifecycle import close_gap, next_rank
from ladder.ranking.rules import (
    Pairing,
    plan_draw,
    plan_outcome,
    plan_reshuffle,
    plan_swap,
    upset_targets,
)
from ladder.ranking.staging import apply_assignment, check_assignment

__all__ = [
    # Engine
    "RankingEngine",
    # Rules
    "Pairing",
    "plan_outcome",
    "plan_draw",
    "plan_swap",
    "plan_reshuffle",
    "upset_targets",
    # Staged writes
    "apply_assignment",
    "check_assignment",
    # Integrity
    "validate_integrity",
    "assert_integrity",
    "find_violations",
    "repair",
    # Lifecycle
    "next_rank",
    "close_gap",
]
