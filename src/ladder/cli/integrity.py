from __future__ import annotations

"""
Check or repair the ladder's 1..N rank sequence.

Usage:
  poetry run ladder_integrity check     # exit 1 when ranks have drifted
  poetry run ladder_integrity repair    # renumber 1..N keeping the order

Repair is never run automatically; run `check` on startup and `repair` only
after looking at what it reports.
"""

import argparse
import logging
import os

from ladder.core.logging import setup_logging
from ladder.core.sentry import init_sentry

logger = logging.getLogger("ladder.cli.integrity")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate or repair ladder ranks"
    )
    parser.add_argument("command", choices=["check", "repair"])
    parser.add_argument(
        "--db-url",
        type=str,
        default=os.getenv("LADDER_DATABASE_URL") or os.getenv("DATABASE_URL"),
        help="Database URL (overrides env)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("LOG_LEVEL", "INFO"),
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, format_style="simple")
    init_sentry(context=f"ladder_integrity_{args.command}")

    from ladder.ranking.engine import RankingEngine
    from ladder.ranking.integrity import find_violations
    from ladder.sql import (
        SqlRankStore,
        create_engine,
        create_session_factory,
        session_scope,
    )

    factory = create_session_factory(create_engine(args.db_url))
    with session_scope(factory) as session:
        store = SqlRankStore(session)
        engine = RankingEngine(store)
        if args.command == "repair":
            moved = engine.repair()
            print(f"Renumbered {moved} member(s).")
            return 0

        if engine.validate_integrity():
            print(f"OK: {store.count()} member(s) ranked 1..{store.count()}.")
            return 0
        for entity, expected in find_violations(store):
            print(
                f"member {entity.entity_id}: rank {entity.rank}, expected {expected}"
            )
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
