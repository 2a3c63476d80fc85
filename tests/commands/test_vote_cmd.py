"""Tests for the vote command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from coopvote.cli import cli


@pytest.fixture
def proposal_id(cli_runner: CliRunner, _isolated_project: None) -> int:
    result = cli_runner.invoke(cli, ["--json", "proposal", "create", "Adopt a four-day week"])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)["data"]["id"]


def _json(cli_runner: CliRunner, *args: str, **kwargs) -> tuple[int, dict]:
    result = cli_runner.invoke(cli, ["--json", *args], **kwargs)
    return result.exit_code, json.loads(result.output)


class TestVoteCommands:
    def test_cast(self, cli_runner: CliRunner, proposal_id: int) -> None:
        code, data = _json(
            cli_runner, "vote", "cast", str(proposal_id), "for", "--member", "7", "--notes", "Yes"
        )
        assert code == 0
        assert data["data"]["member_id"] == 7
        assert data["data"]["notes"] == "Yes"

    def test_member_from_env(self, cli_runner: CliRunner, proposal_id: int) -> None:
        code, data = _json(
            cli_runner,
            "vote",
            "cast",
            str(proposal_id),
            "against",
            env={"COOPVOTE_MEMBER_ID": "12"},
        )
        assert code == 0
        assert data["data"]["member_id"] == 12

    def test_member_required(self, cli_runner: CliRunner, proposal_id: int) -> None:
        result = cli_runner.invoke(cli, ["vote", "cast", str(proposal_id), "for"])
        assert result.exit_code == 2
        assert "--member" in result.output

    def test_double_vote(self, cli_runner: CliRunner, proposal_id: int) -> None:
        _json(cli_runner, "vote", "cast", str(proposal_id), "for", "--member", "7")
        code, data = _json(cli_runner, "vote", "cast", str(proposal_id), "for", "--member", "7")
        assert code == 1
        assert data["error"]["code"] == "ALREADY_VOTED"

    def test_invalid_choice(self, cli_runner: CliRunner, proposal_id: int) -> None:
        code, data = _json(cli_runner, "vote", "cast", str(proposal_id), "yes", "--member", "7")
        assert code == 1
        assert data["error"]["code"] == "INVALID_INPUT"

    def test_change(self, cli_runner: CliRunner, proposal_id: int) -> None:
        _json(cli_runner, "vote", "cast", str(proposal_id), "for", "--member", "7")
        code, data = _json(
            cli_runner, "vote", "change", str(proposal_id), "abstain", "--member", "7"
        )
        assert code == 0
        assert data["data"]["choice"] == "abstain"

    def test_cast_on_closed(self, cli_runner: CliRunner, proposal_id: int) -> None:
        cli_runner.invoke(cli, ["proposal", "close", str(proposal_id)])
        result = cli_runner.invoke(cli, ["vote", "cast", str(proposal_id), "for", "--member", "7"])
        assert result.exit_code == 1
        assert "PROPOSAL_CLOSED" in result.output

    def test_show(self, cli_runner: CliRunner, proposal_id: int) -> None:
        _json(cli_runner, "vote", "cast", str(proposal_id), "for", "--member", "7")
        code, data = _json(cli_runner, "vote", "show", str(proposal_id), "--member", "7")
        assert code == 0
        assert data["data"]["choice"] == "for"

    def test_list_paginated(self, cli_runner: CliRunner, proposal_id: int) -> None:
        for member in ("1", "2", "3"):
            _json(cli_runner, "vote", "cast", str(proposal_id), "for", "--member", member)
        code, data = _json(
            cli_runner, "vote", "list", str(proposal_id), "--limit", "1", "--offset", "1"
        )
        assert code == 0
        assert [v["member_id"] for v in data["data"]["items"]] == [2]

    def test_list_rich(self, cli_runner: CliRunner, proposal_id: int) -> None:
        _json(cli_runner, "vote", "cast", str(proposal_id), "against", "--member", "3")
        result = cli_runner.invoke(cli, ["vote", "list", str(proposal_id)])
        assert result.exit_code == 0
        assert "1 votes on proposal" in result.output
