"""Rank bookkeeping when members join or leave the ladder."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ladder.core.constants import PLACEHOLDER_START, TOP_RANK
from ladder.core.results import RankAssignment
from ladder.ranking.staging import apply_assignment

if TYPE_CHECKING:
    from ladder.core.protocols import RankedEntityStore

logger = logging.getLogger(__name__)


def next_rank(store: RankedEntityStore) -> int:
    """Rank a newly joined member starts on: the bottom of the ladder."""
    return store.count() + TOP_RANK


def close_gap(
    store: RankedEntityStore,
    removed_rank: int,
    *,
    placeholder_start: int = PLACEHOLDER_START,
) -> int:
    """Move every member ranked below ``removed_rank`` up one place.

    Called after a member holding ``removed_rank`` has been deleted.

    Returns:
        Number of members moved.
    """
    assignment = RankAssignment()
    for entity in store.list_ordered():
        if entity.rank > removed_rank:
            assignment.add(entity.entity_id, entity.rank, entity.rank - 1)

    moved = apply_assignment(
        store,
        assignment,
        placeholder_start=placeholder_start,
        require_permutation=False,
    )
    logger.info(
        "Closed rank gap at %s: %d member(s) moved up", removed_rank, moved
    )
    return moved
