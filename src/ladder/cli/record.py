from __future__ import annotations

"""
Record a match result and update the ladder.

Usage:
  poetry run ladder_record --a 12 --b 7 --outcome a_wins
  poetry run ladder_record --a 12 --b 7 --outcome draw --verify

Both members' ranks are read from the database when the command runs and
treated as the ranks at match time. Prints the rank change as JSON.
"""

import argparse
import json
import logging
import os

from ladder.core.config import EngineConfig
from ladder.core.constants import Outcome
from ladder.core.exceptions import EntityNotFoundError, LadderError
from ladder.core.logging import setup_logging
from ladder.core.sentry import init_sentry

logger = logging.getLogger("ladder.cli.record")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Apply a match result to the ladder"
    )
    parser.add_argument(
        "--db-url",
        type=str,
        default=os.getenv("LADDER_DATABASE_URL") or os.getenv("DATABASE_URL"),
        help="Database URL (overrides env)",
    )
    parser.add_argument("--a", type=int, required=True, help="Member A id")
    parser.add_argument("--b", type=int, required=True, help="Member B id")
    parser.add_argument(
        "--outcome",
        type=str,
        required=True,
        choices=[o.value for o in Outcome],
        help="Match result from A's point of view",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Validate the whole ladder before committing",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG shows every staged write)",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, format_style="simple")
    init_sentry(context="ladder_record")

    from ladder.ranking.engine import RankingEngine
    from ladder.sql import (
        SqlRankStore,
        create_engine,
        create_session_factory,
        session_scope,
    )

    factory = create_session_factory(create_engine(args.db_url))
    try:
        with session_scope(factory) as session:
            store = SqlRankStore(session)
            players = []
            for member_id in (args.a, args.b):
                entity = store.get(member_id)
                if entity is None:
                    raise EntityNotFoundError(member_id)
                players.append(entity)
            engine = RankingEngine(
                store, EngineConfig(verify_after_write=args.verify)
            )
            change = engine.apply_outcome(
                players[0].entity_id,
                players[1].entity_id,
                players[0].rank,
                players[1].rank,
                args.outcome,
            )
    except LadderError as e:
        logger.error("Match not recorded: %s", e)
        return 1

    print(json.dumps(change.to_dict()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
