"""Tests for the init and upgrade commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from coopvote.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestInitCommand:
    def test_creates_database(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "init"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data["current"] == "002_members"
        assert (tmp_path / ".coopvote" / "coopvote.db").is_file()

    def test_nothing_pending_after_init(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["--json", "upgrade", "--check"])
        assert json.loads(result.output)["data"]["pending_count"] == 0

    def test_database_path_from_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "coopvote.toml").write_text('[database]\npath = "data/votes.db"\n')
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "data" / "votes.db").is_file()


@pytest.mark.usefixtures("_isolated_project")
class TestUpgradeCommand:
    def test_check(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "upgrade", "--check"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["head"] == "002_members"
        assert "pending_count" in data

    def test_apply(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "upgrade"])
        assert result.exit_code == 0
        assert "applied_count" in json.loads(result.output)["data"]

    def test_apply_twice(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["upgrade"])
        result = cli_runner.invoke(cli, ["--json", "upgrade"])
        assert json.loads(result.output)["data"]["applied_count"] == 0


class TestUpgradeHelp:
    def test_help_describes_ledger_migration(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["upgrade", "--help"])
        assert result.exit_code == 0
        assert "ledger" in result.output
        assert "change nothing" in result.output
