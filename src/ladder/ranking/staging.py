"""
Two-phase rank writes.

Stores reject a write that would give two members the same rank, so a
permutation cannot be written member by member in place. Every member that
moves is first parked on its own negative placeholder rank, then each parked
member is written to its final rank. Members whose rank does not change are
never written.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from ladder.core.constants import PLACEHOLDER_START, TOP_RANK
from ladder.core.exceptions import RankIntegrityError

if TYPE_CHECKING:
    from ladder.core.protocols import RankedEntityStore
    from ladder.core.results import RankAssignment

logger = logging.getLogger(__name__)


def check_assignment(
    assignment: RankAssignment, *, require_permutation: bool = True
) -> None:
    """Raise :class:`RankIntegrityError` if ``assignment`` cannot be written.

    Targets must be distinct positive ranks. With ``require_permutation`` the
    targets must also be exactly the ranks the moving members vacate, which
    keeps an already dense ladder dense.
    """
    duplicates = [
        rank for rank, n in Counter(assignment.targets.values()).items() if n > 1
    ]
    if duplicates:
        raise RankIntegrityError(
            f"Assignment gives several members the same rank: {sorted(duplicates)}"
        )
    below_top = [r for r in assignment.targets.values() if r < TOP_RANK]
    if below_top:
        raise RankIntegrityError(
            f"Assignment contains ranks below {TOP_RANK}: {sorted(below_top)}"
        )
    if require_permutation:
        vacated = set(assignment.current.values())
        taken = set(assignment.targets.values())
        if vacated != taken:
            raise RankIntegrityError(
                "Assignment is not a permutation of the ranks it moves: "
                f"vacated={sorted(vacated)} taken={sorted(taken)}"
            )


def apply_assignment(
    store: RankedEntityStore,
    assignment: RankAssignment,
    *,
    placeholder_start: int = PLACEHOLDER_START,
    require_permutation: bool = True,
) -> int:
    """Write ``assignment`` to ``store`` through placeholder ranks.

    Must run inside the caller's transaction: a failure between the two
    phases leaves members on placeholders until the transaction rolls back.

    Returns:
        Number of members whose rank was rewritten.
    """
    check_assignment(assignment, require_permutation=require_permutation)
    if not assignment:
        return 0

    # Stay clear of anything already sitting in the negative range
    lowest_current = min(assignment.current.values())
    placeholder = min(placeholder_start, lowest_current - 1)

    staged = []
    for entity_id in assignment.targets:
        store.set_rank(entity_id, placeholder)
        logger.debug(
            "Staged %r from rank %s to placeholder %s",
            entity_id,
            assignment.current[entity_id],
            placeholder,
        )
        staged.append(entity_id)
        placeholder -= 1

    for entity_id in staged:
        target = assignment.targets[entity_id]
        store.set_rank(entity_id, target)
        logger.debug("Set %r to final rank %s", entity_id, target)

    return len(staged)
