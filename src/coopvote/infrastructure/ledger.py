"""Ledger — the storage handle injected into every service.

The Ledger owns the SQLAlchemy engine and hands out two kinds of
connection scope:

- :meth:`transaction` — a write transaction. Commits when the block
  exits normally, rolls back on any exception.
- :meth:`snapshot` — a read-only point-in-time view. Never takes the
  write lock, so tallies and listings may race harmlessly with writers.

There is no in-process lock. Correctness under parallel workers rests on
the schema's unique constraint and on the services issuing conditional
writes inside :meth:`transaction`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.engine import make_url

from coopvote.infrastructure.database.engine import READ_ONLY_OPTION, init_database

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from coopvote.config.settings import CoopSettings

logger = logging.getLogger(__name__)


class Ledger:
    """Repository encapsulating database access for the governance core.

    Constructed once at CLI startup from :class:`CoopSettings` and stored
    on the click context. Services receive the Ledger via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: CoopSettings) -> None:
        self._settings = settings
        self._url = settings.database_url()
        self._engine: Engine = init_database(
            self._url, busy_timeout=settings.database.busy_timeout
        )
        logger.debug("Ledger opened on %s", self.describe())

    @property
    def root(self) -> Path:
        """The project root the database path is resolved against."""
        return self._settings.root

    @property
    def url(self) -> str:
        return self._url

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> CoopSettings:
        return self._settings

    @property
    def db_path(self) -> Path | None:
        """Filesystem path of a SQLite database, None for other backends."""
        parsed = make_url(self._url)
        if parsed.get_backend_name() != "sqlite" or parsed.database in (None, "", ":memory:"):
            return None
        return Path(parsed.database)

    def describe(self) -> str:
        """Connection URL with any password masked."""
        return make_url(self._url).render_as_string(hide_password=True)

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Write transaction: commit on success, roll back on exception.

        Usage::

            with ledger.transaction() as conn:
                conn.execute(update(proposals).where(...).values(...))
        """
        with self._engine.begin() as conn:
            yield conn

    @contextmanager
    def snapshot(self) -> Iterator[Connection]:
        """Read-only connection; the transaction is rolled back on exit."""
        with self._engine.connect() as conn:
            conn.execution_options(**{READ_ONLY_OPTION: True})
            yield conn

    def close(self) -> None:
        """Dispose of pooled connections."""
        self._engine.dispose()
