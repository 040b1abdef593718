from __future__ import annotations

import os
import re
from typing import Optional

_VALID_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_schema(schema: str) -> str:
    if not schema:
        raise ValueError("schema must be non-empty")
    schema = schema.strip()
    if not _VALID_IDENTIFIER_RE.match(schema):
        raise ValueError(f"Invalid schema name: {schema!r}")
    return schema


def _default_schema() -> Optional[str]:
    schema = os.getenv("LADDER_DB_SCHEMA", "").strip()
    # Unset means the database default schema (required for SQLite)
    if not schema:
        return None
    return validate_schema(schema)


# Database schema used for ladder tables
SCHEMA: Optional[str] = _default_schema()

MEMBERS_TABLE = "members"


def qualified(table: str, schema: Optional[str] = SCHEMA) -> str:
    """Return ``schema.table`` or just ``table`` when no schema is set."""
    return f"{schema}.{table}" if schema else table
