"""Tests for the Ledger storage handle."""

from pathlib import Path

import pytest
from sqlalchemy import func, insert, select

from coopvote.config.settings import CoopSettings
from coopvote.infrastructure.database.schema import proposals
from coopvote.infrastructure.ledger import Ledger


class TestLedger:
    def test_default_database_under_root(self, tmp_path: Path, ledger: Ledger) -> None:
        assert ledger.db_path == tmp_path / ".coopvote" / "coopvote.db"
        assert ledger.db_path.is_file()
        assert ledger.root == tmp_path

    def test_explicit_url(self, tmp_path: Path) -> None:
        url = f"sqlite:///{tmp_path / 'other.db'}"
        led = Ledger(CoopSettings.from_cli(root=tmp_path, database={"url": url}))
        try:
            assert led.url == url
            assert led.db_path == tmp_path / "other.db"
        finally:
            led.close()

    def test_in_memory_has_no_path(self, tmp_path: Path) -> None:
        led = Ledger(CoopSettings.from_cli(root=tmp_path, database={"url": "sqlite://"}))
        try:
            assert led.db_path is None
        finally:
            led.close()

    def test_describe_names_database(self, ledger: Ledger) -> None:
        assert "coopvote.db" in ledger.describe()

    def test_transaction_commits(self, ledger: Ledger) -> None:
        with ledger.transaction() as conn:
            conn.execute(insert(proposals).values(title="T", created_at="x"))
        with ledger.snapshot() as conn:
            assert conn.execute(select(func.count()).select_from(proposals)).scalar() == 1

    def test_transaction_rolls_back_on_error(self, ledger: Ledger) -> None:
        with pytest.raises(RuntimeError), ledger.transaction() as conn:
            conn.execute(insert(proposals).values(title="T", created_at="x"))
            raise RuntimeError("boom")
        with ledger.snapshot() as conn:
            assert conn.execute(select(func.count()).select_from(proposals)).scalar() == 0
