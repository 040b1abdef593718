from __future__ import annotations

from typing import Any, Optional

import pandas as pd
import polars as pl
from sqlalchemy import text
from sqlalchemy.engine import Engine

from ladder.sql.constants import MEMBERS_TABLE, SCHEMA, qualified


def _read_sql(
    engine: Engine, sql: str, params: Optional[dict[str, Any]] = None
) -> pl.DataFrame:
    """Read SQL into a Polars DataFrame via pandas for compatibility."""
    with engine.connect() as conn:
        pdf = pd.read_sql_query(text(sql), conn, params=params)
    return pl.from_pandas(pdf) if not pdf.empty else pl.DataFrame([])


def load_standings_df(
    engine: Engine, *, limit: Optional[int] = None
) -> pl.DataFrame:
    """Load the ladder ordered best first.

    Columns: rank, member_id, display_name. ``limit`` keeps only the top
    entries.
    """
    params: dict[str, Any] = {}
    limit_clause = ""
    if limit is not None:
        limit_clause = "LIMIT :limit"
        params["limit"] = int(limit)

    sql = f"""
        SELECT
            m.current_rank AS rank,
            m.member_id,
            m.display_name
        FROM {qualified(MEMBERS_TABLE, SCHEMA)} m
        ORDER BY m.current_rank, m.member_id
        {limit_clause}
    """
    df = _read_sql(engine, sql, params or None)
    if df.is_empty():
        return pl.DataFrame(
            schema={
                "rank": pl.Int64,
                "member_id": pl.Int64,
                "display_name": pl.Utf8,
            }
        )
    return df.with_columns(
        pl.col("rank").cast(pl.Int64),
        pl.col("member_id").cast(pl.Int64),
        pl.col("display_name").cast(pl.Utf8),
    )
