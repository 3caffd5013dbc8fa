"""
Ports -- read-only collaborator interfaces consumed by the balance history
orchestrator.

Architecture position:
    Kernel > Domain.  Structural protocols only; the SQL implementations
    live in lp_kernel.selectors, test doubles in tests/.

Contract:
    - EventStoreReader.fetch_events returns the subject's events in
      ascending timestamp order, restricted to [from_instant, to_instant]
      (inclusive) when bounds are given.  The replayer does NOT re-sort.
    - HoldingsReader.fetch_current_holdings returns the subject's live
      positions; the oracle sums their amounts.
    - Either reader may raise StoreUnavailableError; callers propagate it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence, runtime_checkable

from lp_kernel.domain.dtos import HoldingDTO, LedgerEvent


@runtime_checkable
class EventStoreReader(Protocol):
    def fetch_events(
        self,
        subject_id: str,
        from_instant: datetime | None = None,
        to_instant: datetime | None = None,
    ) -> Sequence[LedgerEvent]: ...


@runtime_checkable
class HoldingsReader(Protocol):
    def fetch_current_holdings(self, subject_id: str) -> Sequence[HoldingDTO]: ...
