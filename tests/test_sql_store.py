"""SqlRankStore against a throwaway SQLite database."""

import polars as pl
import pytest

from ladder import RankedEntityStore, RankingEngine
from ladder.core.exceptions import EntityNotFoundError, RankConflictError
from ladder.ranking.integrity import validate_integrity
from ladder.sql import (
    SqlRankStore,
    create_all,
    create_engine,
    create_session_factory,
    load_standings_df,
)


@pytest.fixture()
def db_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'ladder.db'}")
    create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def store(db_engine):
    session = create_session_factory(db_engine)()
    store = SqlRankStore(session)
    store.seed(["Ann", "Bob", "Cid", "Dee"])
    yield store
    session.close()


def _ranks(store):
    return {e.name: e.rank for e in store.list_ordered()}


def test_satisfies_protocol(store):
    assert isinstance(store, RankedEntityStore)


def test_seed_appends_at_bottom(store):
    assert _ranks(store) == {"Ann": 1, "Bob": 2, "Cid": 3, "Dee": 4}
    assert store.count() == 4
    eve = store.add_member("Eve")
    assert eve.rank == 5
    assert store.find_by_rank(5).entity_id == eve.entity_id


def test_get_and_find_missing(store):
    assert store.get(999) is None
    assert store.find_by_rank(42) is None


def test_unique_constraint_surfaces_as_conflict(store):
    ann = store.find_by_rank(1)
    with pytest.raises(RankConflictError) as info:
        with store.transaction():
            store.set_rank(ann.entity_id, 2)
    assert info.value.rank == 2
    assert _ranks(store)["Ann"] == 1


def test_set_rank_unknown_member(store):
    with pytest.raises(EntityNotFoundError):
        with store.transaction():
            store.set_rank(999, 10)


def test_engine_applies_upset(store):
    ann, cid = store.find_by_rank(1), store.find_by_rank(3)
    change = RankingEngine(store).apply_outcome(
        ann.entity_id, cid.entity_id, 1, 3, "b_wins"
    )
    assert (change.a_after, change.b_after) == (3, 2)
    assert _ranks(store) == {"Bob": 1, "Cid": 2, "Ann": 3, "Dee": 4}
    assert validate_integrity(store)


def test_engine_applies_draw(store):
    ann, dee = store.find_by_rank(1), store.find_by_rank(4)
    RankingEngine(store).apply_outcome(
        dee.entity_id, ann.entity_id, 4, 1, "draw"
    )
    assert _ranks(store) == {"Ann": 1, "Bob": 2, "Dee": 3, "Cid": 4}


def test_failed_write_rolls_back(store):
    class FailingStore(SqlRankStore):
        def set_rank(self, entity_id, rank):
            if rank > 0:
                raise RuntimeError("connection dropped")
            super().set_rank(entity_id, rank)

    failing = FailingStore(store.session)
    ann, dee = store.find_by_rank(1), store.find_by_rank(4)
    store.session.rollback()
    with pytest.raises(RuntimeError):
        RankingEngine(failing).apply_outcome(
            ann.entity_id, dee.entity_id, 1, 4, "b_wins"
        )
    assert _ranks(store) == {"Ann": 1, "Bob": 2, "Cid": 3, "Dee": 4}


def test_remove_member_closes_gap(store):
    bob = store.find_by_rank(2)
    removed = store.remove_member(bob.entity_id)
    assert removed.rank == 2
    assert _ranks(store) == {"Ann": 1, "Cid": 2, "Dee": 3}
    assert validate_integrity(store)


def test_remove_unknown_member(store):
    with pytest.raises(EntityNotFoundError):
        store.remove_member(999)
    assert store.count() == 4


def test_repair_over_sql(store):
    dee = store.find_by_rank(4)
    with store.transaction():
        store.set_rank(dee.entity_id, 9)
    assert not validate_integrity(store)
    assert RankingEngine(store).repair() == 1
    assert store.get(dee.entity_id).rank == 4


def test_load_standings_df(db_engine, store):
    store.session.close()
    df = load_standings_df(db_engine)
    assert df.columns == ["rank", "member_id", "display_name"]
    assert df["rank"].to_list() == [1, 2, 3, 4]
    assert df["display_name"].to_list() == ["Ann", "Bob", "Cid", "Dee"]
    assert df.schema["rank"] == pl.Int64

    top = load_standings_df(db_engine, limit=2)
    assert top.height == 2


def test_load_standings_df_empty(db_engine):
    df = load_standings_df(db_engine)
    assert df.is_empty()
    assert df.columns == ["rank", "member_id", "display_name"]
