"""
Displacement rules that turn a match result into target ranks.

Every function here only reads from the store; writes are left to
:mod:`ladder.ranking.staging` so a plan can be checked before anything is
persisted.

Rules, with ``hi`` the participant whose recorded rank is numerically smaller
and ``lo`` the other one:

- equal recorded ranks, or ``hi`` wins: nothing moves.
- draw between adjacent ranks: nothing moves.
- draw otherwise: ``lo`` swaps with whoever holds ``rank(lo) - 1``.
- ``lo`` wins from the adjacent rank: the two participants swap.
- ``lo`` wins otherwise: ``lo`` climbs half the gap (rounded down), ``hi``
  drops one place, and members between them are displaced by at most one
  place while keeping their relative order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from ladder.core.constants import Outcome, RankCase
from ladder.core.exceptions import RankIntegrityError
from ladder.core.results import RankAssignment

if TYPE_CHECKING:
    from typing import Hashable

    from ladder.core.protocols import RankedEntityStore
    from ladder.core.results import MatchOutcome, RankedEntity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pairing:
    """Participants ordered by the ranks recorded at match time."""

    hi_id: Hashable
    hi_rank: int
    lo_id: Hashable
    lo_rank: int
    winner_id: Hashable | None

    @property
    def diff(self) -> int:
        return self.lo_rank - self.hi_rank

    @property
    def upset(self) -> bool:
        return self.winner_id is not None and self.winner_id == self.lo_id

    @classmethod
    def from_match(cls, match: MatchOutcome) -> "Pairing":
        a_is_hi = match.rank_a_before < match.rank_b_before
        if match.outcome is Outcome.A_WINS:
            winner = match.participant_a
        elif match.outcome is Outcome.B_WINS:
            winner = match.participant_b
        else:
            winner = None
        if a_is_hi:
            return cls(
                hi_id=match.participant_a,
                hi_rank=match.rank_a_before,
                lo_id=match.participant_b,
                lo_rank=match.rank_b_before,
                winner_id=winner,
            )
        return cls(
            hi_id=match.participant_b,
            hi_rank=match.rank_b_before,
            lo_id=match.participant_a,
            lo_rank=match.rank_a_before,
            winner_id=winner,
        )


def upset_targets(hi_rank: int, lo_rank: int) -> tuple[int, int]:
    """Return ``(new_hi, new_lo)`` for a non-adjacent upset.

    The winner climbs ``diff // 2`` places and the loser drops to the rank
    just below its old one. When the gap is exactly two both would land on
    ``hi_rank + 1``; the winner keeps that slot and the loser takes the next.
    """
    diff = lo_rank - hi_rank
    new_lo = lo_rank - diff // 2
    new_hi = hi_rank + 1
    if new_hi == new_lo:
        new_hi += 1
    return new_hi, new_lo


def plan_swap(
    pairing: Pairing, hi_current: int, lo_current: int
) -> RankAssignment:
    """Adjacent upset: exchange the two participants' ranks."""
    assignment = RankAssignment(case=RankCase.UPSET_SWAP)
    assignment.add(pairing.hi_id, hi_current, pairing.lo_rank)
    assignment.add(pairing.lo_id, lo_current, pairing.hi_rank)
    return assignment


def plan_draw(
    pairing: Pairing,
    lo_current: int,
    displaced: RankedEntity | None,
) -> RankAssignment:
    """Non-adjacent draw: ``lo`` takes one step up past ``displaced``."""
    if displaced is None or displaced.entity_id in (
        pairing.hi_id,
        pairing.lo_id,
    ):
        return RankAssignment(case=RankCase.DRAW_NO_DISPLACED)
    assignment = RankAssignment(case=RankCase.DRAW_SHIFT)
    assignment.add(displaced.entity_id, displaced.rank, pairing.lo_rank)
    assignment.add(pairing.lo_id, lo_current, pairing.lo_rank - 1)
    return assignment


def plan_reshuffle(
    pairing: Pairing, ordered: Iterable[RankedEntity]
) -> RankAssignment:
    """Non-adjacent upset: recompute every rank in one pass.

    Members ranked outside ``[hi_rank, lo_rank]`` keep their rank. Inside that
    window the two participants take their new ranks and everyone else fills
    the remaining slots in their existing order, so:

    - the member just below ``hi`` moves up into the slot ``hi`` vacated;
    - members from ``new_lo`` down to just above ``lo`` drop one place;
    - members in between stay where they are.
    """
    new_hi, new_lo = upset_targets(pairing.hi_rank, pairing.lo_rank)
    reserved = {new_hi, new_lo}
    free_slots = iter(
        [
            rank
            for rank in range(pairing.hi_rank, pairing.lo_rank + 1)
            if rank not in reserved
        ]
    )

    assignment = RankAssignment(case=RankCase.UPSET_RESHUFFLE)
    for entity in ordered:
        if entity.entity_id == pairing.hi_id:
            assignment.add(entity.entity_id, entity.rank, new_hi)
        elif entity.entity_id == pairing.lo_id:
            assignment.add(entity.entity_id, entity.rank, new_lo)
        elif pairing.hi_rank <= entity.rank <= pairing.lo_rank:
            target = next(free_slots, None)
            if target is None:
                raise RankIntegrityError(
                    f"More members than slots between ranks {pairing.hi_rank} "
                    f"and {pairing.lo_rank}; ladder has drifted from the "
                    "recorded match ranks"
                )
            assignment.add(entity.entity_id, entity.rank, target)

    logger.debug(
        "Reshuffle plan: hi %s -> %s, lo %s -> %s, %d members move",
        pairing.hi_rank,
        new_hi,
        pairing.lo_rank,
        new_lo,
        len(assignment),
    )
    return assignment


def plan_outcome(
    pairing: Pairing,
    store: RankedEntityStore,
    current: dict[Hashable, int],
) -> RankAssignment:
    """Choose the rule for ``pairing`` and build its assignment.

    ``current`` maps both participants to the ranks the store holds for them
    now; the rule itself is always chosen from the recorded ranks.
    """
    if pairing.diff == 0:
        return RankAssignment(case=RankCase.EQUAL_RANKS)

    if pairing.winner_id is None:
        if pairing.diff == 1:
            return RankAssignment(case=RankCase.DRAW_ADJACENT)
        displaced = store.find_by_rank(pairing.lo_rank - 1)
        return plan_draw(pairing, current[pairing.lo_id], displaced)

    if not pairing.upset:
        return RankAssignment(case=RankCase.HIGHER_RANKED_WIN)

    if pairing.diff == 1:
        return plan_swap(
            pairing, current[pairing.hi_id], current[pairing.lo_id]
        )
    return plan_reshuffle(pairing, store.list_ordered())
