"""Tally arithmetic — pure functions of (status, counts, roster size).

Quorum is reported alongside the outcome but does not gate it: a closed
proposal with more ``for`` than ``against`` votes passes even when
participation fell short of quorum. Equal for/against counts fail.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from coopvote.domain.lifecycle import ProposalStatus
from coopvote.domain.records import Tally, TallyResults
from coopvote.domain.types import Choice, Outcome


def quorum_threshold(total_eligible: int) -> int:
    """Minimum votes for quorum: a simple majority of eligible members."""
    if total_eligible < 0:
        msg = f"total_eligible must be non-negative, got {total_eligible}"
        raise ValueError(msg)
    return total_eligible // 2 + 1


def compute_outcome(status: str, results: TallyResults) -> Outcome:
    """``pending`` while open; otherwise ``passed`` iff for > against."""
    if status == ProposalStatus.OPEN:
        return Outcome.PENDING
    if results.for_ > results.against:
        return Outcome.PASSED
    return Outcome.FAILED


def count_choices(grouped: Iterable[tuple[str, int]]) -> TallyResults:
    """Fold ``(choice, count)`` pairs from a GROUP BY into :class:`TallyResults`.

    Unknown choices raise ValueError — the schema only admits the three
    enumerated values, so one appearing here means the data is corrupt.
    """
    counts: dict[str, int] = {c.value: 0 for c in Choice}
    for choice, count in grouped:
        if choice not in counts:
            msg = f"Unexpected vote choice in storage: {choice!r}"
            raise ValueError(msg)
        counts[choice] += int(count)
    return TallyResults.model_validate(counts)


def build_tally(
    proposal_id: int,
    status: str,
    counts: Mapping[str, int] | TallyResults,
    total_eligible: int,
) -> Tally:
    """Assemble a :class:`Tally` from a status snapshot and vote counts."""
    results = counts if isinstance(counts, TallyResults) else count_choices(counts.items())
    votes_cast = results.total
    return Tally(
        proposal_id=proposal_id,
        status=ProposalStatus(status),
        total_eligible=total_eligible,
        votes_cast=votes_cast,
        quorum_met=votes_cast >= quorum_threshold(total_eligible),
        results=results,
        outcome=compute_outcome(status, results),
    )
