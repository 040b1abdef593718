"""End-to-end runs of the console scripts against a SQLite file."""

import json

import pytest
from sqlalchemy import text

from ladder.cli import db_init, integrity, members, record
from ladder.sql import create_engine


@pytest.fixture()
def db_url(tmp_path, monkeypatch):
    monkeypatch.setenv("LADDER_DB_SCHEMA", "")
    for k in ("SENTRY_DSN", "LADDER_SENTRY_DSN"):
        monkeypatch.delenv(k, raising=False)
    url = f"sqlite:///{tmp_path / 'club.db'}"
    assert db_init.main(["--db-url", url]) == 0
    assert members.main(["--db-url", url, "add", "Ann", "Bob", "Cid"]) == 0
    return url


def _last_json(capsys):
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    return json.loads(lines[-1])


def test_record_upset(db_url, capsys):
    capsys.readouterr()
    rc = record.main(
        ["--db-url", db_url, "--a", "1", "--b", "3", "--outcome", "b_wins"]
    )
    assert rc == 0
    change = _last_json(capsys)
    assert change["a_before"] == 1
    assert change["b_before"] == 3
    assert change["a_after"] == 3
    assert change["b_after"] == 2
    assert change["case"] == "upset_reshuffle"


def test_record_unknown_member_fails(db_url):
    rc = record.main(
        ["--db-url", db_url, "--a", "1", "--b", "99", "--outcome", "draw"]
    )
    assert rc == 1


def test_record_rejects_bad_outcome(db_url):
    with pytest.raises(SystemExit):
        record.main(
            ["--db-url", db_url, "--a", "1", "--b", "2", "--outcome", "forfeit"]
        )


def test_integrity_check_and_standings(db_url, capsys):
    assert integrity.main(["check", "--db-url", db_url]) == 0
    assert "OK: 3 member(s)" in capsys.readouterr().out

    assert members.main(["--db-url", db_url, "standings"]) == 0
    out = capsys.readouterr().out
    assert "Ann" in out and "Cid" in out


def test_remove_member(db_url, capsys):
    assert members.main(["--db-url", db_url, "remove", "2"]) == 0
    assert "was rank 2" in capsys.readouterr().out
    assert members.main(["--db-url", db_url, "remove", "2"]) == 1
    assert integrity.main(["check", "--db-url", db_url]) == 0


def test_standings_csv(db_url, tmp_path):
    out = tmp_path / "standings.csv"
    assert (
        members.main(["--db-url", db_url, "standings", "--csv", str(out)]) == 0
    )
    assert out.read_text().splitlines()[0] == "rank,member_id,display_name"


def test_db_init_reports_members_table(db_url, capsys):
    capsys.readouterr()
    assert db_init.main(["--db-url", db_url]) == 0
    assert "Initialized members (3 member(s))." in capsys.readouterr().out


def test_db_init_flags_broken_ladder(db_url, capsys):
    engine = create_engine(db_url)
    with engine.begin() as conn:
        conn.execute(
            text("UPDATE members SET current_rank = 9 WHERE member_id = 3")
        )
    engine.dispose()
    capsys.readouterr()

    assert db_init.main(["--db-url", db_url]) == 1
    assert "1 member(s) out of place" in capsys.readouterr().out
    assert integrity.main(["repair", "--db-url", db_url]) == 0
    assert integrity.main(["check", "--db-url", db_url]) == 0
