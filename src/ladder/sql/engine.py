from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .constants import SCHEMA

Base = declarative_base()

logger = logging.getLogger(__name__)


def _build_url_from_env() -> str | None:
    """Construct a Postgres URL from component env vars.

    Recognized variables (LADDER_* preferred, falls back to POSTGRES_*):
      - HOST, PORT (default 5432)
      - NAME (database name; default 'ladder_db')
      - USER, PASSWORD
      - SSLMODE (optional)
    """
    host = os.getenv("LADDER_DB_HOST") or os.getenv("POSTGRES_HOST")
    user = os.getenv("LADDER_DB_USER") or os.getenv("POSTGRES_USER")
    if not host or not user:
        return None
    port = os.getenv("LADDER_DB_PORT") or os.getenv("POSTGRES_PORT") or "5432"
    name = os.getenv("LADDER_DB_NAME") or os.getenv("POSTGRES_DB") or "ladder_db"
    password = (
        os.getenv("LADDER_DB_PASSWORD") or os.getenv("POSTGRES_PASSWORD") or ""
    )
    sslmode = os.getenv("LADDER_DB_SSLMODE") or os.getenv("POSTGRES_SSLMODE")

    auth = f"{user}:{password}" if password != "" else f"{user}"
    url = f"postgresql://{auth}@{host}:{port}/{name}"
    if sslmode:
        url = f"{url}?sslmode={sslmode}"
    return url


def create_engine(url: Optional[str] = None, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine.

    Resolution order for URL:
    - explicit ``url`` arg
    - env ``LADDER_DATABASE_URL``
    - env ``DATABASE_URL``
    - component env vars (see ``_build_url_from_env``)
    """
    database_url = (
        url
        or os.getenv("LADDER_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or _build_url_from_env()
    )
    if not database_url:
        raise RuntimeError(
            "No database URL provided. Set LADDER_DATABASE_URL or DATABASE_URL, "
            "or provide component env vars (LADDER_DB_HOST/USER/[PASSWORD]/[NAME]/[PORT]/[SSLMODE])."
        )
    engine = _sa_create_engine(database_url, echo=echo, future=True)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(engine)
    return engine


def _enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINTs work under pysqlite."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(engine: Engine) -> sessionmaker:
    """Return a configured sessionmaker bound to the engine."""
    return sessionmaker(
        bind=engine, autoflush=False, autocommit=False, future=True
    )


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def ensure_schema(engine: Engine, schema: Optional[str] = SCHEMA) -> None:
    """Create the ladder schema if it does not exist (idempotent)."""
    if not schema or engine.dialect.name == "sqlite":
        return
    try:
        with engine.begin() as conn:
            conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema}"))
    except SQLAlchemyError as e:
        # Best-effort; the role may lack CREATE on the database
        logger.warning("Could not create schema %s: %s", schema, e)


def create_all(engine: Engine) -> None:
    """Create all ladder tables (idempotent)."""
    from . import models  # noqa: F401 - ensure models are imported

    ensure_schema(engine)
    Base.metadata.create_all(engine)
