"""
Constants shared by the ladder ranking engine and its stores.

Rank 1 is the best standing; larger numbers are lower standing. Ranks held by
members are always positive, so anything at or below zero is free for
staging writes.
"""

from __future__ import annotations

from enum import Enum

from ladder.core.exceptions import InvalidMatchError

# =============================================================================
# Rank space
# =============================================================================

# Best possible rank on the ladder
TOP_RANK: int = 1

# First temporary rank used while staging a permutation; each staged member
# takes the next lower value (-1000, -1001, ...)
PLACEHOLDER_START: int = -1000


# =============================================================================
# Match outcomes
# =============================================================================


class Outcome(str, Enum):
    """Result of a match between participant A and participant B."""

    A_WINS = "a_wins"
    B_WINS = "b_wins"
    DRAW = "draw"

    @classmethod
    def parse(cls, value: "Outcome | str") -> "Outcome":
        """Parse an outcome tag, accepting the older player1/player2 names."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        alias = _OUTCOME_ALIASES.get(key, key)
        try:
            return cls(alias)
        except ValueError:
            raise InvalidMatchError(f"Unknown match outcome: {value!r}") from None


_OUTCOME_ALIASES = {
    "player1_win": "a_wins",
    "player2_win": "b_wins",
    "a": "a_wins",
    "b": "b_wins",
}


class RankCase(str, Enum):
    """Which displacement rule handled a match."""

    EQUAL_RANKS = "equal_ranks"
    HIGHER_RANKED_WIN = "higher_ranked_win"
    DRAW_ADJACENT = "draw_adjacent"
    DRAW_SHIFT = "draw_shift"
    DRAW_NO_DISPLACED = "draw_no_displaced"
    UPSET_SWAP = "upset_swap"
    UPSET_RESHUFFLE = "upset_reshuffle"
