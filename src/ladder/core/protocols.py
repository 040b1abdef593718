"""Protocol definitions for pluggable rank stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, ContextManager, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import Hashable

    from ladder.core.results import RankedEntity


@runtime_checkable
class RankedEntityStore(Protocol):
    """Storage the ranking engine reads ranks from and writes ranks to.

    Implementations must enforce rank uniqueness at the moment of each write
    and raise :class:`ladder.core.exceptions.RankConflictError` instead of
    silently accepting a duplicate. Negative ranks are valid staging values
    and must be accepted.
    """

    def list_ordered(self) -> list[RankedEntity]:
        """Return every member ordered by rank, best first."""
        ...

    def find_by_rank(self, rank: int) -> RankedEntity | None:
        """Return the member holding ``rank``, if any."""
        ...

    def get(self, entity_id: Hashable) -> RankedEntity | None:
        """Return the member with ``entity_id``, if any."""
        ...

    def set_rank(self, entity_id: Hashable, rank: int) -> None:
        """Persist ``rank`` for ``entity_id``."""
        ...

    def count(self) -> int:
        """Return the number of ranked members."""
        ...

    def transaction(self) -> ContextManager[None]:
        """Open an atomic unit; an exception inside rolls every write back."""
        ...

    def lock_ranks(self) -> None:
        """Serialize access to the whole ladder for the open transaction."""
        ...
