"""Tests for the member command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from coopvote.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestMemberCommands:
    def test_add(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "member", "add", "ana@coop.example", "--name", "Ana"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data["display_name"] == "Ana"
        assert data["role"] == "member"

    def test_add_duplicate(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["member", "add", "ana@coop.example"])
        result = cli_runner.invoke(cli, ["member", "add", "ana@coop.example"])
        assert result.exit_code == 1
        assert "MEMBER_EXISTS" in result.output

    def test_list(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["member", "add", "ana@coop.example", "--role", "steward"])
        result = cli_runner.invoke(cli, ["member", "list"])
        assert result.exit_code == 0
        assert "ana@coop.example" in result.output
        assert "steward" in result.output
