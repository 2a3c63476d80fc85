"""Vote choices and tally outcomes."""

from __future__ import annotations

from enum import StrEnum


class Choice(StrEnum):
    """A member's recorded position on a proposal."""

    FOR = "for"
    AGAINST = "against"
    ABSTAIN = "abstain"


class Outcome(StrEnum):
    """Decision reported by a tally."""

    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"


def parse_choice(raw: str) -> Choice | None:
    """Return the matching :class:`Choice`, or None for anything else.

    Matching is exact: ``"For"`` and ``" for"`` are rejected.
    """
    try:
        return Choice(raw)
    except ValueError:
        return None
