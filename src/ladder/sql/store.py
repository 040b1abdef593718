"""SQLAlchemy-backed :class:`~ladder.core.protocols.RankedEntityStore`."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ladder.core.exceptions import EntityNotFoundError, RankConflictError
from ladder.core.results import RankedEntity
from ladder.ranking.lifecycle import close_gap, next_rank

from .models import Member

logger = logging.getLogger(__name__)


def _to_entity(row) -> RankedEntity:
    return RankedEntity(
        rank=row.current_rank, entity_id=row.member_id, name=row.display_name
    )


class SqlRankStore:
    """Rank store over the ``members`` table.

    Each :meth:`set_rank` is sent to the database straight away, so the
    ``uq_members_current_rank`` constraint judges every individual write.

    Args:
        session: Session the store reads and writes through. The store opens
            its own transaction on it (or a SAVEPOINT if one is already open).
    """

    _columns = (Member.member_id, Member.current_rank, Member.display_name)

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # RankedEntityStore
    # ------------------------------------------------------------------

    def list_ordered(self) -> list[RankedEntity]:
        rows = self.session.execute(
            select(*self._columns).order_by(
                Member.current_rank, Member.member_id
            )
        ).all()
        return [_to_entity(row) for row in rows]

    def find_by_rank(self, rank: int) -> RankedEntity | None:
        row = self.session.execute(
            select(*self._columns).where(Member.current_rank == rank)
        ).first()
        return None if row is None else _to_entity(row)

    def get(self, entity_id) -> RankedEntity | None:
        row = self.session.execute(
            select(*self._columns).where(Member.member_id == entity_id)
        ).first()
        return None if row is None else _to_entity(row)

    def set_rank(self, entity_id, rank: int) -> None:
        stmt = (
            update(Member)
            .where(Member.member_id == entity_id)
            .values(current_rank=rank)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
        except IntegrityError as e:
            logger.error(
                "Rank write rejected: member %r to rank %s: %s",
                entity_id,
                rank,
                e.orig,
            )
            raise RankConflictError(entity_id, rank) from e
        if result.rowcount == 0:
            raise EntityNotFoundError(entity_id)

    def count(self) -> int:
        return self.session.execute(
            select(func.count()).select_from(Member)
        ).scalar_one()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self.session.in_transaction():
            with self.session.begin_nested():
                yield
        else:
            with self.session.begin():
                yield

    def lock_ranks(self) -> None:
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            # SQLite takes a database-wide write lock on the first UPDATE
            return
        self.session.execute(
            select(Member.member_id)
            .order_by(Member.member_id)
            .with_for_update()
        ).all()

    # ------------------------------------------------------------------
    # Ladder membership
    # ------------------------------------------------------------------

    def add_member(self, display_name: str) -> RankedEntity:
        """Insert a member at the bottom of the ladder."""
        with self.transaction():
            self.lock_ranks()
            member = Member(
                display_name=display_name, current_rank=next_rank(self)
            )
            self.session.add(member)
            self.session.flush()
            entity = RankedEntity(
                rank=member.current_rank,
                entity_id=member.member_id,
                name=member.display_name,
            )
        logger.info(
            "Added member %r (%s) at rank %s",
            entity.entity_id,
            display_name,
            entity.rank,
        )
        return entity

    def remove_member(self, entity_id) -> RankedEntity:
        """Delete a member and move everyone below it up one place."""
        with self.transaction():
            self.lock_ranks()
            entity = self.get(entity_id)
            if entity is None:
                raise EntityNotFoundError(entity_id)
            self.session.execute(
                delete(Member)
                .where(Member.member_id == entity_id)
                .execution_options(synchronize_session=False)
            )
            close_gap(self, entity.rank)
        logger.info("Removed member %r from rank %s", entity_id, entity.rank)
        return entity

    def seed(self, display_names) -> list[RankedEntity]:
        """Append ``display_names`` to the bottom of the ladder in order."""
        return [self.add_member(name) for name in display_names]
