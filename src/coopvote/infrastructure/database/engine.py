"""Database engine setup.

SQLite is the default backend: WAL mode for concurrent readers, foreign
keys on, a busy timeout so writers queue instead of erroring, and every
write transaction opened with ``BEGIN IMMEDIATE`` so the write lock is
taken up front. Without that, two transactions that both read before
writing can deadlock on lock upgrade and one fails with SQLITE_BUSY
regardless of the timeout.

Other SQLAlchemy URLs are passed through untouched; the conditional
UPDATE / INSERT … SELECT statements in the services work on any backend
with row-level locking.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine, make_url

from coopvote.infrastructure.database.schema import metadata

# Execution option marking a connection as a point-in-time reader. SQLite
# readers open a deferred transaction and never take the write lock.
READ_ONLY_OPTION = "coopvote_read_only"

# Alembic bookkeeping table; its presence marks a migration-managed database.
VERSION_TABLE = "alembic_version"


def create_db_engine(url: str, *, busy_timeout: float = 5.0) -> Engine:
    """Create an engine for *url*, applying SQLite pragmas where relevant."""
    if make_url(url).get_backend_name() != "sqlite":
        return create_engine(url, echo=False, pool_pre_ping=True)

    engine = create_engine(url, echo=False, connect_args={"timeout": busy_timeout})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Hand transaction control to the "begin" listener below.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Any) -> None:
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(url: str, *, busy_timeout: float = 5.0) -> Engine:
    """Open *url*, creating every table when the database is unversioned.

    A database carrying an ``alembic_version`` table belongs to Alembic:
    its schema is changed only by ``coopvote upgrade``, so missing tables
    there are left for the pending revisions to create. For SQLite file
    URLs the parent directory is created first.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(url, busy_timeout=busy_timeout)
    if not inspect(engine).has_table(VERSION_TABLE):
        metadata.create_all(engine)
    return engine
