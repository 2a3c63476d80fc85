"""UpgradeService — schema versioning with Alembic.

Pipeline: CHECK → BACKUP → MIGRATE → REPORT

A database created by :func:`init_database` already has every table but
no ``alembic_version`` row; such databases are stamped at head instead
of migrated.
"""

from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING, Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from coopvote.infrastructure.database.migrations import build_config, stamp_head
from coopvote.services._helpers import now_compact
from coopvote.services.base import BaseService
from coopvote.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class UpgradeService(BaseService):
    """Reports and applies pending schema migrations."""

    def _tables_exist(self) -> bool:
        return "proposals" in inspect(self._ledger.engine).get_table_names()

    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying."""
        op = "upgrade"
        try:
            script = ScriptDirectory.from_config(build_config(self._ledger.url))
            head = script.get_current_head()
            with self._ledger.engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()

            pending: list[dict[str, Any]] = []
            if head is not None and current != head:
                rev = script.get_revision(head)
                while rev is not None and rev.revision != current:
                    pending.append({"revision": rev.revision, "description": rev.doc or ""})
                    if rev.down_revision is None:
                        break
                    rev = script.get_revision(str(rev.down_revision))
            pending.reverse()
        except Exception as exc:
            logger.warning("Migration check failed", exc_info=True)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="STORAGE_FAILURE",
                    message=f"Failed to check migrations: {exc}",
                ),
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head,
            },
        )

    def apply(self) -> ServiceResult:
        """CHECK → BACKUP → MIGRATE → REPORT."""
        op = "upgrade"
        check = self.check_pending()
        if not check.ok:
            return check

        if check.data["pending_count"] == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check.data["head"],
                    "message": "Database is already up to date",
                },
            )

        warnings: list[str] = []
        backup_path = self._backup()
        if backup_path is None:
            warnings.append("No file backup taken (non-SQLite or in-memory database)")

        cfg = build_config(self._ledger.url)
        try:
            if check.data["current"] is None and self._tables_exist():
                command.stamp(cfg, "head")
                action = "stamped"
            else:
                command.upgrade(cfg, "head")
                action = "migrated"
        except Exception as exc:
            logger.warning("Migration failed", exc_info=True)
            detail = {"backup_path": str(backup_path)} if backup_path else {}
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="STORAGE_FAILURE",
                    message=f"Migration failed: {exc}",
                    detail=detail,
                ),
            )

        data: dict[str, Any] = {
            "applied_count": check.data["pending_count"],
            "action": action,
            "current": check.data["head"],
        }
        if backup_path is not None:
            data["backup_path"] = str(backup_path)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def stamp_current(self) -> ServiceResult:
        """Stamp a freshly created database at head."""
        op = "init"
        try:
            stamp_head(self._ledger.url)
            head = ScriptDirectory.from_config(build_config(self._ledger.url)).get_current_head()
        except Exception as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="STORAGE_FAILURE",
                    message=f"Failed to stamp database: {exc}",
                ),
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"database": self._ledger.describe(), "current": head},
        )

    def _backup(self) -> Path | None:
        """Copy the SQLite file into a sibling ``backups/`` directory."""
        db_path = self._ledger.db_path
        if db_path is None or not db_path.exists():
            return None
        # Fold the WAL into the main file so the copy is complete.
        with self._ledger.engine.connect() as conn:
            conn.connection.driver_connection.execute("PRAGMA wal_checkpoint(TRUNCATE)")
        backup_dir = db_path.parent / "backups"
        backup_dir.mkdir(parents=True, exist_ok=True)
        target = backup_dir / f"{db_path.stem}-{now_compact()}{db_path.suffix}"
        shutil.copy2(db_path, target)
        logger.info("Database backed up to %s", target)
        return target
