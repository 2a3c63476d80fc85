"""Tests for root CLI behaviour, help text, and --examples."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from coopvote import __version__
from coopvote.cli import cli


class TestRoot:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        for name in ("proposal", "vote", "tally", "member", "init", "upgrade"):
            assert name in result.output

    def test_missing_config(self, cli_runner: CliRunner, tmp_path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(tmp_path / "nope.toml"), "proposal", "list"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["proposal"],
        ["proposal", "create"],
        ["proposal", "show"],
        ["proposal", "list"],
        ["proposal", "close"],
        ["vote"],
        ["vote", "cast"],
        ["vote", "change"],
        ["vote", "show"],
        ["vote", "list"],
        ["tally"],
        ["member"],
        ["member", "add"],
        ["member", "list"],
        ["init"],
        ["upgrade"],
    ],
)
class TestExamples:
    def test_examples_flag(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, [*args, "--examples"])
        assert result.exit_code == 0, result.output
        assert "Examples for" in result.output
        assert "coopvote" in result.output

    def test_help(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, [*args, "--help"])
        assert result.exit_code == 0
        assert "--examples" in result.output
