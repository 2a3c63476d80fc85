"""Proposal lifecycle.

Two states: ``open`` is initial, ``closed`` is terminal. There is no
path back to ``open``; the status column is the only authority that
gates vote creation and mutation.
"""

from __future__ import annotations

from enum import StrEnum


class ProposalStatus(StrEnum):
    """Machine status for proposals."""

    OPEN = "open"
    CLOSED = "closed"


PROPOSAL_TRANSITIONS: dict[str, list[str]] = {
    "open": ["closed"],
    "closed": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = PROPOSAL_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


def accepts_votes(status: str) -> bool:
    """Votes may be written only while a proposal is open."""
    return status == ProposalStatus.OPEN
