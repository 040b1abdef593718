"""Integrity checks and repair."""

import logging

import pytest

from ladder import RankingEngine
from ladder.core.exceptions import RankIntegrityError
from ladder.core.results import RankedEntity
from ladder.ranking.integrity import (
    assert_integrity,
    find_violations,
    repair,
    validate_integrity,
)
from ladder.store import InMemoryRankStore


class ListStore:
    """Minimal store that, unlike the real ones, allows duplicate ranks."""

    def __init__(self, rows):
        self.rows = dict(rows)
        self.writes = []

    def list_ordered(self):
        return [
            RankedEntity(rank=r, entity_id=e)
            for e, r in sorted(self.rows.items(), key=lambda kv: (kv[1], kv[0]))
        ]

    def set_rank(self, entity_id, rank):
        self.writes.append((entity_id, rank))
        self.rows[entity_id] = rank


def test_dense_ladder_is_valid(caplog):
    caplog.set_level(logging.INFO, logger="ladder")
    store = InMemoryRankStore.from_ids(["a", "b", "c"])
    assert validate_integrity(store) is True
    assert any("check passed" in m for m in caplog.messages)


def test_empty_ladder_is_valid():
    assert validate_integrity(InMemoryRankStore()) is True


@pytest.mark.parametrize(
    "rows",
    [
        {"a": 1, "b": 3},  # gap
        {"a": 2, "b": 3},  # does not start at 1
        {"a": 1, "b": 2, "c": 2},  # duplicate
    ],
)
def test_broken_ladders_are_invalid(rows, caplog):
    caplog.set_level(logging.ERROR, logger="ladder")
    assert validate_integrity(ListStore(rows)) is False
    assert any("check failed" in m for m in caplog.messages)


def test_find_violations_reports_expected_rank():
    violations = find_violations(ListStore({"a": 1, "b": 3, "c": 7}))
    assert [(e.entity_id, e.rank, exp) for e, exp in violations] == [
        ("b", 3, 2),
        ("c", 7, 3),
    ]


def test_assert_integrity_raises():
    with pytest.raises(RankIntegrityError, match="'b'@3"):
        assert_integrity(ListStore({"a": 1, "b": 3}))


def test_repair_closes_gaps_keeping_order():
    store = InMemoryRankStore({"a": 2, "b": 5, "c": 9})
    assert repair(store) == 3
    assert [(e.entity_id, e.rank) for e in store.list_ordered()] == [
        ("a", 1),
        ("b", 2),
        ("c", 3),
    ]
    assert validate_integrity(store)


def test_repair_splits_duplicates():
    store = ListStore({"a": 1, "b": 2, "c": 2, "d": 3})
    repair(store)
    assert store.rows == {"a": 1, "b": 2, "c": 3, "d": 4}


def test_repair_is_idempotent():
    store = InMemoryRankStore({"a": 3, "b": 4})
    repair(store)
    assert repair(store) == 0


def test_engine_repair_runs_in_transaction():
    store = InMemoryRankStore({"a": 10, "b": 20})
    assert RankingEngine(store).repair() == 2
    assert RankingEngine(store).validate_integrity()
