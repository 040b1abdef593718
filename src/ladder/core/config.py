"""Configuration dataclasses for the ranking engine."""

from dataclasses import dataclass

from ladder.core.constants import PLACEHOLDER_START


@dataclass
class EngineConfig:
    """Runtime options for :class:`ladder.ranking.engine.RankingEngine`."""

    # First negative rank used for staged writes
    placeholder_start: int = PLACEHOLDER_START

    # Re-validate the whole ladder inside the transaction after each write
    verify_after_write: bool = False

    # Take the store-wide rank lock before reading the ladder
    lock_ranks: bool = True

    def __post_init__(self) -> None:
        if self.placeholder_start >= 0:
            raise ValueError(
                f"placeholder_start must be negative, got {self.placeholder_start}"
            )
