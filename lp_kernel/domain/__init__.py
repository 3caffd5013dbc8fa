"""Pure domain layer: intervals, replay, DTOs, ports, clock."""

from lp_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from lp_kernel.domain.dtos import (
    BalanceHistory,
    BalancePoint,
    BurnResult,
    EventKind,
    EventPage,
    HoldingDTO,
    LedgerEvent,
    MintResult,
)
from lp_kernel.domain.intervals import (
    Granularity,
    align_to_bucket_start,
    next_bucket_start,
)
from lp_kernel.domain.ports import EventStoreReader, HoldingsReader
from lp_kernel.domain.query import BalanceHistoryQuery
from lp_kernel.domain.replay import replay_balances, sum_holdings, validate_range

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "BalanceHistory",
    "BalancePoint",
    "BurnResult",
    "EventKind",
    "EventPage",
    "HoldingDTO",
    "LedgerEvent",
    "MintResult",
    "Granularity",
    "align_to_bucket_start",
    "next_bucket_start",
    "EventStoreReader",
    "HoldingsReader",
    "BalanceHistoryQuery",
    "replay_balances",
    "sum_holdings",
    "validate_range",
]
