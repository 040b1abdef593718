from __future__ import annotations

"""
Create the ladder tables and report the state of the ladder they hold.

Usage:
  poetry run ladder_db_init --schema ladder --sslmode require
  poetry run ladder_db_init --db-url sqlite:///club.db

Safe to run against an existing database: tables are only created when
missing. Exits 1 when the members already stored do not hold ranks 1..N, so
a deploy script can stop before recording matches on a broken ladder.
"""

import argparse
import logging
import os
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from ladder.core.logging import setup_logging

logger = logging.getLogger("ladder.cli.db_init")

_SSLMODES = ["disable", "allow", "prefer", "require", "verify-ca", "verify-full"]


def _with_sslmode(db_url: str, sslmode: str) -> str:
    parts = urlparse(db_url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query["sslmode"] = sslmode
    return urlunparse(parts._replace(query=urlencode(query)))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create ladder tables (idempotent) and check existing ranks"
    )
    parser.add_argument(
        "--db-url",
        type=str,
        default=os.getenv("LADDER_DATABASE_URL") or os.getenv("DATABASE_URL"),
        help="Database URL (overrides env)",
    )
    parser.add_argument(
        "--schema",
        type=str,
        default=os.getenv("LADDER_DB_SCHEMA", ""),
        help="Target schema (leave empty for the database default)",
    )
    parser.add_argument(
        "--sslmode",
        type=str,
        choices=_SSLMODES,
        default=None,
        help="Set libpq sslmode on the connection",
    )
    parser.add_argument(
        "--log-level", type=str, default=os.getenv("LOG_LEVEL", "INFO")
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, format_style="simple")

    # Table metadata reads the schema at import time
    os.environ["LADDER_DB_SCHEMA"] = args.schema

    from ladder.ranking.integrity import find_violations
    from ladder.sql import (
        SqlRankStore,
        create_all,
        create_engine,
        create_session_factory,
        session_scope,
    )
    from ladder.sql.constants import MEMBERS_TABLE, qualified

    db_url = args.db_url
    if args.sslmode:
        if db_url:
            db_url = _with_sslmode(db_url, args.sslmode)
        else:
            os.environ["LADDER_DB_SSLMODE"] = args.sslmode

    engine = create_engine(db_url)
    create_all(engine)
    table = qualified(MEMBERS_TABLE, args.schema or None)
    logger.info("Ensured table %s", table)

    with session_scope(create_session_factory(engine)) as session:
        store = SqlRankStore(session)
        members = store.count()
        violations = find_violations(store)

    print(f"Initialized {table} ({members} member(s)).")
    if violations:
        print(
            f"{len(violations)} member(s) out of place; "
            "run `ladder_integrity check` for details."
        )
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
