"""Value types passed between the caller, the engine and the stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ladder.core.constants import Outcome, RankCase

if TYPE_CHECKING:
    from typing import Any, Hashable


@dataclass(frozen=True, order=True)
class RankedEntity:
    """A ladder member as seen by the engine: identity plus current rank."""

    rank: int
    entity_id: Hashable = field(compare=False)
    name: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class MatchOutcome:
    """A finished match with both ranks recorded at match time."""

    participant_a: Hashable
    participant_b: Hashable
    rank_a_before: int
    rank_b_before: int
    outcome: Outcome

    def __post_init__(self) -> None:
        object.__setattr__(self, "outcome", Outcome.parse(self.outcome))


@dataclass
class RankAssignment:
    """Target ranks computed for one engine call.

    Only members whose target differs from their current rank are kept, so an
    empty assignment means nothing moves.
    """

    case: RankCase | None = None
    targets: dict[Any, int] = field(default_factory=dict)
    current: dict[Any, int] = field(default_factory=dict)

    def add(self, entity_id: Any, current_rank: int, target_rank: int) -> None:
        if current_rank == target_rank:
            return
        self.targets[entity_id] = target_rank
        self.current[entity_id] = current_rank

    def target_for(self, entity_id: Any, default: int) -> int:
        return self.targets.get(entity_id, default)

    def __len__(self) -> int:
        return len(self.targets)

    def __bool__(self) -> bool:
        return bool(self.targets)


@dataclass(frozen=True)
class RankChange:
    """Before/after ranks of both participants for a processed match."""

    a_before: int
    b_before: int
    a_after: int
    b_after: int
    case: RankCase
    moved: int = 0

    @property
    def changed(self) -> bool:
        return self.a_before != self.a_after or self.b_before != self.b_after

    def to_dict(self) -> dict[str, Any]:
        return {
            "a_before": self.a_before,
            "b_before": self.b_before,
            "a_after": self.a_after,
            "b_after": self.b_after,
            "case": self.case.value,
            "moved": self.moved,
        }
