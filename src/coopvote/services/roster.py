"""Roster providers — the source of ``total_eligible`` for tallies.

:class:`FixedRoster` is a stand-in that reports a configured constant.
:class:`MemberRoster` counts the ``members`` table. Anything with an
``eligible_count()`` method can be injected into :class:`TallyService`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import func, select

from coopvote.infrastructure.database.schema import members

if TYPE_CHECKING:
    from coopvote.infrastructure.ledger import Ledger


@runtime_checkable
class RosterProvider(Protocol):
    """Reports how many members are eligible to vote."""

    def eligible_count(self) -> int: ...


class FixedRoster:
    """Constant eligible-member count (``governance.total_eligible``)."""

    def __init__(self, total: int) -> None:
        if total < 0:
            msg = f"Roster size must be non-negative, got {total}"
            raise ValueError(msg)
        self._total = total

    def eligible_count(self) -> int:
        return self._total

    def __repr__(self) -> str:
        return f"FixedRoster({self._total})"


class MemberRoster:
    """Counts registered members. Raises SQLAlchemyError on storage failure."""

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger

    def eligible_count(self) -> int:
        with self._ledger.snapshot() as conn:
            return int(conn.execute(select(func.count()).select_from(members)).scalar_one())


def roster_from_settings(ledger: Ledger) -> RosterProvider:
    """Build the roster named by ``governance.roster``."""
    governance = ledger.settings.governance
    if governance.roster == "members":
        return MemberRoster(ledger)
    return FixedRoster(governance.total_eligible)
