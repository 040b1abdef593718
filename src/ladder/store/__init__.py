"""Rank store implementations that do not need a database."""

from ladder.store.memory import InMemoryRankStore

__all__ = ["InMemoryRankStore"]
