"""
BalanceHistoryService -- orchestrates the balance-history read path.

Responsibility:
    Fetches a subject's ledger events (EventStoreReader), replays them into
    a bucketed running-balance series, asks the current-balance oracle
    (HoldingsReader) for the live balance, and assembles the BalanceHistory.

Architecture position:
    Kernel > Services -- imperative shell around the pure replayer.
    Depends on the ports in lp_kernel.domain.ports, not on SQL directly;
    ``from_session()`` wires the SQL selectors.

Invariants enforced:
    - The range is validated before any I/O (InvalidRangeError).
    - current_balance is ALWAYS the oracle's value, even for an empty
      history; it is never derived from the replay.
    - Reader failures propagate unchanged; no partial history is returned.
    - Pure read path: nothing is written, no retries.

Failure modes:
    - InvalidRangeError / UnknownGranularityError on bad input.
    - StoreUnavailableError (or any other reader exception) from either
      collaborator.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from lp_kernel.domain.clock import Clock, SystemClock
from lp_kernel.domain.dtos import RANGE_START_UNAVAILABLE, BalanceHistory
from lp_kernel.domain.intervals import Granularity
from lp_kernel.domain.ports import EventStoreReader, HoldingsReader
from lp_kernel.domain.query import BalanceHistoryQuery
from lp_kernel.domain.replay import replay_balances, sum_holdings, validate_range
from lp_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.balance_history")


class BalanceHistoryService:
    """
    Balance history orchestrator.

    Contract:
        get_balance_history(subject_id, range_start?, range_end?, granularity)
        -> BalanceHistory, with range_start defaulting to the first event
        ("N/A" when there is none) and range_end defaulting to now.

    Non-goals:
        - Does NOT reconcile the replayed balance against the oracle; both
          are surfaced so a discrepancy is visible to the caller.
    """

    def __init__(
        self,
        event_reader: EventStoreReader,
        holdings_reader: HoldingsReader,
        clock: Clock | None = None,
    ):
        self._events = event_reader
        self._holdings = holdings_reader
        self._clock = clock or SystemClock()

    @classmethod
    def from_session(cls, session: Session, clock: Clock | None = None) -> BalanceHistoryService:
        """Wire the SQL selectors on a caller-owned session."""
        from lp_kernel.selectors.holdings_selector import HoldingsSelector
        from lp_kernel.selectors.ledger_event_selector import LedgerEventSelector

        return cls(LedgerEventSelector(session), HoldingsSelector(session), clock)

    def get_balance_history(
        self,
        subject_id: str,
        range_start: datetime | None = None,
        range_end: datetime | None = None,
        granularity: Granularity | str = Granularity.DAILY,
    ) -> BalanceHistory:
        """
        Compute the balance history for ``subject_id``.

        Preconditions:
            - range_start <= range_end when both are given.

        Postconditions:
            - point_count == len(history).
            - current_balance equals the oracle's live computation.

        Raises:
            InvalidRangeError: If range_end < range_start.
            UnknownGranularityError: If granularity is not recognized.
            StoreUnavailableError: If a collaborator store cannot be read.
        """
        granularity = Granularity.parse(granularity)
        range_start, range_end = validate_range(range_start, range_end)
        now = self._clock.now_utc()

        with LogContext.bind(subject_id=subject_id):
            logger.info(
                "balance_history_requested",
                extra={
                    "range_start": range_start,
                    "range_end": range_end,
                    "granularity": granularity.value,
                },
            )

            events = self._events.fetch_events(subject_id, range_start, range_end)
            current_balance = sum_holdings(self._holdings.fetch_current_holdings(subject_id))

            if not events:
                logger.info(
                    "balance_history_empty",
                    extra={"current_balance": current_balance},
                )
                return BalanceHistory(
                    subject_id=subject_id,
                    range_start=range_start if range_start is not None else RANGE_START_UNAVAILABLE,
                    range_end=range_end if range_end is not None else now,
                    granularity=granularity,
                    history=(),
                    point_count=0,
                    current_balance=current_balance,
                )

            history = replay_balances(events, granularity, range_start, range_end, now=now)

            logger.info(
                "balance_history_computed",
                extra={
                    "event_count": len(events),
                    "point_count": len(history),
                    "current_balance": current_balance,
                },
            )

            return BalanceHistory(
                subject_id=subject_id,
                range_start=range_start if range_start is not None else events[0].timestamp,
                range_end=range_end if range_end is not None else now,
                granularity=granularity,
                history=history,
                point_count=len(history),
                current_balance=current_balance,
            )

    def get_balance_history_for_query(
        self,
        subject_id: str,
        query: BalanceHistoryQuery,
    ) -> BalanceHistory:
        """Convenience entrypoint for a parsed wire query."""
        return self.get_balance_history(
            subject_id,
            range_start=query.start_date,
            range_end=query.end_date,
            granularity=query.interval,
        )
