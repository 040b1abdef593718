"""Dictionary-backed rank store with the same guarantees as the SQL store."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterable, Iterator

from ladder.core.exceptions import EntityNotFoundError, RankConflictError
from ladder.core.results import RankedEntity

if TYPE_CHECKING:
    from typing import Hashable

logger = logging.getLogger(__name__)


class InMemoryRankStore:
    """Rank store kept in process memory.

    Writes are checked against a rank index so a duplicate rank raises
    :class:`RankConflictError` immediately. ``transaction()`` snapshots the
    ranks on entry and restores them if the block raises; nested transactions
    roll back to their own snapshot. The outermost transaction holds a
    re-entrant lock from entry to exit, so ``lock_ranks()`` only checks that it
    is called inside one.
    """

    def __init__(self, ranks: dict[Hashable, int] | None = None) -> None:
        self._ranks: dict[Hashable, int] = {}
        self._holders: dict[int, Hashable] = {}
        self._names: dict[Hashable, str] = {}
        self._lock = threading.RLock()
        self._local = threading.local()
        for entity_id, rank in (ranks or {}).items():
            self.add(entity_id, rank)

    @classmethod
    def from_ids(cls, entity_ids: Iterable[Hashable]) -> "InMemoryRankStore":
        """Build a store ranking ``entity_ids`` 1..N in the given order."""
        return cls({eid: n for n, eid in enumerate(entity_ids, start=1)})

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def add(
        self, entity_id: Hashable, rank: int, name: str | None = None
    ) -> RankedEntity:
        if entity_id in self._ranks:
            raise ValueError(f"Member {entity_id!r} already exists")
        self._claim(entity_id, rank)
        self._ranks[entity_id] = rank
        if name is not None:
            self._names[entity_id] = name
        return self._entity(entity_id)

    def remove(self, entity_id: Hashable) -> RankedEntity:
        entity = self.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_id)
        del self._holders[self._ranks.pop(entity_id)]
        self._names.pop(entity_id, None)
        return entity

    # ------------------------------------------------------------------
    # RankedEntityStore
    # ------------------------------------------------------------------

    def list_ordered(self) -> list[RankedEntity]:
        return [
            self._entity(eid)
            for eid in sorted(
                self._ranks, key=lambda eid: (self._ranks[eid], str(eid))
            )
        ]

    def find_by_rank(self, rank: int) -> RankedEntity | None:
        entity_id = self._holders.get(rank)
        return None if entity_id is None else self._entity(entity_id)

    def get(self, entity_id: Hashable) -> RankedEntity | None:
        if entity_id not in self._ranks:
            return None
        return self._entity(entity_id)

    def set_rank(self, entity_id: Hashable, rank: int) -> None:
        if entity_id not in self._ranks:
            raise EntityNotFoundError(entity_id)
        old = self._ranks[entity_id]
        if old == rank:
            return
        self._claim(entity_id, rank)
        del self._holders[old]
        self._ranks[entity_id] = rank

    def count(self) -> int:
        return len(self._ranks)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        depth = getattr(self._local, "depth", 0)
        if depth == 0:
            # The snapshot is only valid while the lock is held
            self._lock.acquire()
        snapshot = (dict(self._ranks), dict(self._names))
        self._local.depth = depth + 1
        try:
            yield
        except BaseException:
            logger.debug("Rolling back %d rank(s)", len(snapshot[0]))
            self._restore(*snapshot)
            raise
        finally:
            self._local.depth = depth
            if depth == 0:
                self._lock.release()

    def lock_ranks(self) -> None:
        if not getattr(self._local, "depth", 0):
            raise RuntimeError("lock_ranks() must be called inside transaction()")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _claim(self, entity_id: Hashable, rank: int) -> None:
        holder = self._holders.get(rank)
        if holder is not None and holder != entity_id:
            raise RankConflictError(entity_id, rank, holder)
        self._holders[rank] = entity_id

    def _restore(
        self, ranks: dict[Hashable, int], names: dict[Hashable, str]
    ) -> None:
        self._ranks = ranks
        self._names = names
        self._holders = {rank: eid for eid, rank in ranks.items()}

    def _entity(self, entity_id: Hashable) -> RankedEntity:
        return RankedEntity(
            rank=self._ranks[entity_id],
            entity_id=entity_id,
            name=self._names.get(entity_id),
        )

    def __len__(self) -> int:
        return len(self._ranks)

    def __repr__(self) -> str:
        return f"InMemoryRankStore({self.count()} members)"
