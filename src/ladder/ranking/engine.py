"""
Ranking engine: applies match results to a ladder of unique ranks.

Each call is one read-plan-write cycle inside a single store transaction.
The engine keeps no state of its own between calls; the ladder lives in the
store.

Examples:
    >>> from ladder.store import InMemoryRankStore
    >>> store = InMemoryRankStore.from_ids(["ann", "bob", "cid"])
    >>> engine = RankingEngine(store)
    >>> change = engine.apply_outcome("ann", "cid", 1, 3, "b_wins")
    >>> change.a_after, change.b_after
    (2, 1)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ladder.core.config import EngineConfig
from ladder.core.exceptions import EntityNotFoundError, InvalidMatchError
from ladder.core.logging import log_timing
from ladder.core.results import MatchOutcome, RankChange
from ladder.ranking import integrity, lifecycle
from ladder.ranking.rules import Pairing, plan_outcome
from ladder.ranking.staging import apply_assignment

if TYPE_CHECKING:
    from typing import Hashable

    from ladder.core.constants import Outcome
    from ladder.core.protocols import RankedEntityStore

logger = logging.getLogger(__name__)


class RankingEngine:
    """Apply match outcomes to a :class:`RankedEntityStore`.

    Args:
        store: Where member ranks are read from and written to.
        config: Engine options. Defaults to :class:`EngineConfig`.
    """

    def __init__(
        self,
        store: RankedEntityStore,
        config: EngineConfig | None = None,
    ) -> None:
        self.store = store
        self.config = config or EngineConfig()

    def apply_outcome(
        self,
        participant_a: Hashable,
        participant_b: Hashable,
        rank_a_before: int,
        rank_b_before: int,
        outcome: Outcome | str,
    ) -> RankChange:
        """Apply one match result and return both players' rank movement.

        Args:
            participant_a: Identity of participant A.
            participant_b: Identity of participant B.
            rank_a_before: A's rank when the match was played.
            rank_b_before: B's rank when the match was played.
            outcome: ``a_wins``, ``b_wins`` or ``draw``.

        Raises:
            InvalidMatchError: Same participant twice or unknown outcome.
            EntityNotFoundError: A participant is not on the ladder.
            RankConflictError: The store rejected a write; nothing is kept.
        """
        if participant_a == participant_b:
            raise InvalidMatchError("A member cannot play against themselves")
        return self.apply(
            MatchOutcome(
                participant_a=participant_a,
                participant_b=participant_b,
                rank_a_before=rank_a_before,
                rank_b_before=rank_b_before,
                outcome=outcome,
            )
        )

    def apply(self, match: MatchOutcome) -> RankChange:
        """Apply a :class:`MatchOutcome`; see :meth:`apply_outcome`."""
        a_id, b_id = match.participant_a, match.participant_b
        if a_id == b_id:
            raise InvalidMatchError("A member cannot play against themselves")

        logger.info(
            "Processing match result - A: %r (rank %s), B: %r (rank %s), result: %s",
            a_id,
            match.rank_a_before,
            b_id,
            match.rank_b_before,
            match.outcome.value,
        )
        pairing = Pairing.from_match(match)

        with self.store.transaction():
            if self.config.lock_ranks:
                self.store.lock_ranks()

            current = {}
            for entity_id in (a_id, b_id):
                entity = self.store.get(entity_id)
                if entity is None:
                    raise EntityNotFoundError(entity_id)
                current[entity_id] = entity.rank

            assignment = plan_outcome(pairing, self.store, current)
            moved = apply_assignment(
                self.store,
                assignment,
                placeholder_start=self.config.placeholder_start,
            )
            if moved and self.config.verify_after_write:
                integrity.assert_integrity(self.store)

        change = RankChange(
            a_before=match.rank_a_before,
            b_before=match.rank_b_before,
            a_after=assignment.target_for(a_id, current[a_id]),
            b_after=assignment.target_for(b_id, current[b_id]),
            case=assignment.case,
            moved=moved,
        )
        logger.info(
            "Rankings updated (%s) - A: %s -> %s, B: %s -> %s, %d member(s) moved",
            change.case.value,
            change.a_before,
            change.a_after,
            change.b_before,
            change.b_after,
            moved,
        )
        return change

    def validate_integrity(self) -> bool:
        """True when ranks are exactly 1..N with no duplicates or gaps."""
        with self.store.transaction():
            return integrity.validate_integrity(self.store)

    def repair(self) -> int:
        """Renumber the ladder 1..N keeping its order; returns members moved."""
        with log_timing(logger, "ranking repair", level=logging.INFO):
            with self.store.transaction():
                if self.config.lock_ranks:
                    self.store.lock_ranks()
                return integrity.repair(
                    self.store, placeholder_start=self.config.placeholder_start
                )

    def next_rank(self) -> int:
        """Rank a newly added member should be given."""
        return lifecycle.next_rank(self.store)

    def close_gap(self, removed_rank: int) -> int:
        """Shift members below ``removed_rank`` up by one after a removal."""
        with self.store.transaction():
            if self.config.lock_ranks:
                self.store.lock_ranks()
            return lifecycle.close_gap(
                self.store,
                removed_rank,
                placeholder_start=self.config.placeholder_start,
            )
