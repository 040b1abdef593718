from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)

from .constants import MEMBERS_TABLE, SCHEMA
from .engine import Base


class Member(Base):
    __tablename__ = MEMBERS_TABLE
    __table_args__ = (
        # Not deferrable: every single UPDATE is checked, which is why rank
        # changes are staged through negative placeholders
        UniqueConstraint("current_rank", name="uq_members_current_rank"),
        Index("ix_members_display_name", "display_name"),
        {"schema": SCHEMA},
    )

    member_id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    display_name = Column(String(100), nullable=False)
    # 1 is the top of the ladder; negative values only exist mid-transaction
    current_rank = Column(Integer, nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return (
            f"Member(member_id={self.member_id!r}, "
            f"display_name={self.display_name!r}, rank={self.current_rank!r})"
        )
