"""Checks and repair for the dense 1..N rank sequence."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ladder.core.constants import PLACEHOLDER_START
from ladder.core.exceptions import RankIntegrityError
from ladder.core.results import RankAssignment
from ladder.ranking.staging import apply_assignment

if TYPE_CHECKING:
    from ladder.core.protocols import RankedEntityStore
    from ladder.core.results import RankedEntity

logger = logging.getLogger(__name__)


def find_violations(
    store: RankedEntityStore,
) -> list[tuple[RankedEntity, int]]:
    """Return ``(member, expected_rank)`` for every member out of place."""
    return [
        (entity, position)
        for position, entity in enumerate(store.list_ordered(), start=1)
        if entity.rank != position
    ]


def validate_integrity(store: RankedEntityStore) -> bool:
    """True when the i-th member by rank holds rank ``i + 1`` for every i.

    A duplicate rank or a gap shows up as the first member whose rank no
    longer matches its position.
    """
    members = store.list_ordered()
    for position, entity in enumerate(members, start=1):
        if entity.rank != position:
            logger.error(
                "Ranking integrity check failed: member %r has rank %s but should be %s",
                entity.entity_id,
                entity.rank,
                position,
            )
            return False

    logger.info(
        "Ranking integrity check passed - %d members with ranks 1 to %d",
        len(members),
        len(members),
    )
    return True


def assert_integrity(store: RankedEntityStore) -> None:
    """Raise :class:`RankIntegrityError` unless :func:`validate_integrity` holds."""
    if not validate_integrity(store):
        violations = find_violations(store)
        sample = ", ".join(
            f"{entity.entity_id!r}@{entity.rank} (expected {expected})"
            for entity, expected in violations[:5]
        )
        raise RankIntegrityError(
            f"{len(violations)} member(s) out of place: {sample}"
        )


def repair(
    store: RankedEntityStore, *, placeholder_start: int = PLACEHOLDER_START
) -> int:
    """Renumber members 1..N in their current order.

    Safe to run repeatedly; a dense ladder is left untouched.

    Returns:
        Number of members whose rank changed.
    """
    assignment = RankAssignment()
    for position, entity in enumerate(store.list_ordered(), start=1):
        if entity.rank != position:
            logger.info(
                "Fixing rank for %r: %s -> %s",
                entity.entity_id,
                entity.rank,
                position,
            )
        assignment.add(entity.entity_id, entity.rank, position)

    moved = apply_assignment(
        store,
        assignment,
        placeholder_start=placeholder_start,
        require_permutation=False,
    )
    logger.info("Ranking repair completed: %d member(s) renumbered", moved)
    return moved
