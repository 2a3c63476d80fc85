"""Parallel writers against one database file.

Each worker gets its own Ledger (its own engine and connection pool),
the same arrangement as separate CLI processes.
"""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import Callable
from pathlib import Path

from coopvote.config.settings import CoopSettings
from coopvote.infrastructure.ledger import Ledger
from coopvote.services.proposals import ProposalService
from coopvote.services.result import ServiceResult
from coopvote.services.tally import TallyService
from coopvote.services.votes import VoteService

WORKERS = 8


def _run_parallel(
    tmp_path: Path, action: Callable[[Ledger], ServiceResult]
) -> list[ServiceResult]:
    ledgers = [Ledger(CoopSettings.from_cli(root=tmp_path)) for _ in range(WORKERS)]
    barrier = threading.Barrier(WORKERS)
    results: list[ServiceResult] = []
    lock = threading.Lock()

    def worker(led: Ledger) -> None:
        barrier.wait()
        result = action(led)
        with lock:
            results.append(result)

    threads = [threading.Thread(target=worker, args=(led,)) for led in ledgers]
    try:
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)
    finally:
        for led in ledgers:
            led.close()
    return results


class TestConcurrentWrites:
    def test_same_member_votes_once(self, tmp_path: Path, ledger: Ledger, make_proposal) -> None:
        p = make_proposal()
        results = _run_parallel(tmp_path, lambda led: VoteService(led).cast(p["id"], 7, "for"))

        assert len(results) == WORKERS
        assert sum(r.ok for r in results) == 1
        codes = Counter(r.error.code for r in results if not r.ok)
        assert codes == Counter({"ALREADY_VOTED": WORKERS - 1})
        assert VoteService(ledger).list_votes(p["id"]).data["count"] == 1

    def test_distinct_members_all_counted(
        self, tmp_path: Path, ledger: Ledger, make_proposal
    ) -> None:
        p = make_proposal()
        counter = iter(range(1, WORKERS + 1))
        counter_lock = threading.Lock()

        def cast(led: Ledger) -> ServiceResult:
            with counter_lock:
                member = next(counter)
            return VoteService(led).cast(p["id"], member, "for")

        results = _run_parallel(tmp_path, cast)
        assert all(r.ok for r in results)
        assert TallyService(ledger).get_tally(p["id"]).data["votes_cast"] == WORKERS

    def test_close_succeeds_exactly_once(
        self, tmp_path: Path, ledger: Ledger, make_proposal
    ) -> None:
        p = make_proposal()
        results = _run_parallel(tmp_path, lambda led: ProposalService(led).close(p["id"]))

        assert sum(r.ok for r in results) == 1
        assert {r.error.code for r in results if not r.ok} == {"ALREADY_CLOSED"}

    def test_votes_after_close_are_rejected(
        self, tmp_path: Path, ledger: Ledger, make_proposal, close_proposal
    ) -> None:
        p = make_proposal()
        close_proposal(p["id"])
        counter = iter(range(1, WORKERS + 1))
        counter_lock = threading.Lock()

        def cast(led: Ledger) -> ServiceResult:
            with counter_lock:
                member = next(counter)
            return VoteService(led).cast(p["id"], member, "against")

        results = _run_parallel(tmp_path, cast)
        assert {r.error.code for r in results} == {"PROPOSAL_CLOSED"}
        assert TallyService(ledger).get_tally(p["id"]).data["votes_cast"] == 0
