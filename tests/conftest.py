"""Shared pytest fixtures for coopvote tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from coopvote.config.settings import CoopSettings
from coopvote.infrastructure.ledger import Ledger
from coopvote.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host env vars and global logging/telemetry state out of tests."""
    for var in (
        "COOPVOTE_CONFIG",
        "COOPVOTE_MEMBER_ID",
        "COOPVOTE_DATABASE__PATH",
        "COOPVOTE_DATABASE__URL",
        "COOPVOTE_GOVERNANCE__ROSTER",
        "COOPVOTE_GOVERNANCE__TOTAL_ELIGIBLE",
    ):
        monkeypatch.delenv(var, raising=False)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> CoopSettings:
    return CoopSettings.from_cli(root=tmp_path)


@pytest.fixture
def ledger(settings: CoopSettings) -> Iterator[Ledger]:
    """Ledger on a fresh SQLite file under ``tmp_path``."""
    led = Ledger(settings)
    try:
        yield led
    finally:
        led.close()


@pytest.fixture
def ledger_factory(tmp_path: Path) -> Iterator[Callable[..., Ledger]]:
    """Build ledgers with overridden settings sections.

    Usage::

        led = ledger_factory(governance={"roster": "members"})
    """
    opened: list[Ledger] = []

    def _make(**overrides: Any) -> Ledger:
        led = Ledger(CoopSettings.from_cli(root=tmp_path, **overrides))
        opened.append(led)
        return led

    try:
        yield _make
    finally:
        for led in opened:
            led.close()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to ``tmp_path`` so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Factory fixtures shared across service test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_proposal(ledger: Ledger) -> Callable[..., dict[str, Any]]:
    """Create a proposal via ProposalService, asserting success."""
    from coopvote.services.proposals import ProposalService

    def _make(title: str = "Adopt a four-day week", body: str = "") -> dict[str, Any]:
        result = ProposalService(ledger).create(title, body)
        assert result.ok, result.error
        return result.data

    return _make


@pytest.fixture
def cast_vote(ledger: Ledger) -> Callable[..., dict[str, Any]]:
    """Cast a vote via VoteService, asserting success."""
    from coopvote.services.votes import VoteService

    def _cast(proposal_id: int, member_id: int, choice: str, notes: str = "") -> dict[str, Any]:
        result = VoteService(ledger).cast(proposal_id, member_id, choice, notes)
        assert result.ok, result.error
        return result.data

    return _cast


@pytest.fixture
def close_proposal(ledger: Ledger) -> Callable[[int], dict[str, Any]]:
    from coopvote.services.proposals import ProposalService

    def _close(proposal_id: int) -> dict[str, Any]:
        result = ProposalService(ledger).close(proposal_id)
        assert result.ok, result.error
        return result.data

    return _close
