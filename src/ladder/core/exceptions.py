"""Exception hierarchy for the ladder package."""

from __future__ import annotations


class LadderError(Exception):
    """Base class for all ladder errors."""


class EntityNotFoundError(LadderError, LookupError):
    """A member identity is not present in the store."""

    def __init__(self, entity_id) -> None:
        super().__init__(f"Member not found: {entity_id!r}")
        self.entity_id = entity_id


class InvalidMatchError(LadderError, ValueError):
    """The match cannot be processed as given."""


class RankConflictError(LadderError):
    """The store refused a write because the rank is already taken."""

    def __init__(self, entity_id, rank: int, holder=None) -> None:
        message = f"Cannot move {entity_id!r} to rank {rank}"
        if holder is not None:
            message += f": already held by {holder!r}"
        super().__init__(message)
        self.entity_id = entity_id
        self.rank = rank
        self.holder = holder


class RankIntegrityError(LadderError):
    """Ranks are not the contiguous sequence 1..N."""
