from __future__ import annotations

"""
Add members to or remove members from the ladder, and print standings.

Usage:
  poetry run ladder_members add "Ann Smith" "Bob Jones"
  poetry run ladder_members remove 7
  poetry run ladder_members standings --limit 20 [--csv standings.csv]

New members start at the bottom. Removing a member moves everyone ranked
below them up one place.
"""

import argparse
import logging
import os

from ladder.core.exceptions import LadderError
from ladder.core.logging import setup_logging
from ladder.core.sentry import init_sentry

logger = logging.getLogger("ladder.cli.members")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Manage ladder membership")
    parser.add_argument(
        "--db-url",
        type=str,
        default=os.getenv("LADDER_DATABASE_URL") or os.getenv("DATABASE_URL"),
        help="Database URL (overrides env)",
    )
    parser.add_argument(
        "--log-level", type=str, default=os.getenv("LOG_LEVEL", "INFO")
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_add = sub.add_parser("add", help="Append members at the bottom")
    p_add.add_argument("names", nargs="+")

    p_remove = sub.add_parser("remove", help="Remove a member by id")
    p_remove.add_argument("member_id", type=int)

    p_show = sub.add_parser("standings", help="Print the ladder")
    p_show.add_argument("--limit", type=int, default=None)
    p_show.add_argument("--csv", type=str, default=None, help="Also write CSV")

    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, format_style="simple")
    init_sentry(context=f"ladder_members_{args.command}")

    from ladder.sql import (
        SqlRankStore,
        create_engine,
        create_session_factory,
        load_standings_df,
        session_scope,
    )

    engine = create_engine(args.db_url)

    if args.command == "standings":
        df = load_standings_df(engine, limit=args.limit)
        print(df)
        if args.csv:
            df.write_csv(args.csv)
            logger.info("Wrote %d row(s) to %s", df.height, args.csv)
        return 0

    factory = create_session_factory(engine)
    try:
        with session_scope(factory) as session:
            store = SqlRankStore(session)
            if args.command == "add":
                for entity in store.seed(args.names):
                    print(f"{entity.entity_id}\t{entity.rank}\t{entity.name}")
            else:
                entity = store.remove_member(args.member_id)
                print(f"Removed {entity.entity_id} (was rank {entity.rank})")
    except LadderError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
