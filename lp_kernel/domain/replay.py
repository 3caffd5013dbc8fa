"""
Replay -- fold an ordered ledger into a bucketed running-balance series.

Responsibility:
    Pure balance-history reconstruction.  Given a subject's events (already
    filtered and sorted by the EventStoreReader) and a granularity, walk the
    events once while advancing a bucket cursor, emitting one BalancePoint
    per bucket.  Also hosts the pure half of the current-balance oracle
    (sum_holdings) so both derivations sit side by side.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  "Now" is passed in
    by the caller (from an injected Clock), never read here.

Invariants enforced:
    - Single forward pass: O(events + buckets).  Events are consumed
      monotonically as the cursor advances; nothing is re-sorted.
    - Boundary inclusion: an event whose timestamp equals a bucket start is
      reflected in that bucket (``<=``), not the next one.
    - Bucket timestamps are strictly increasing and exactly one bucket
      width apart.
    - Decimal accumulation; the 8-digit string is produced only at emission.

Failure modes:
    - InvalidRangeError when range_end precedes range_start.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from lp_kernel.db.types import ZERO, format_amount
from lp_kernel.domain.dtos import BalancePoint, HoldingDTO, LedgerEvent
from lp_kernel.domain.intervals import (
    Granularity,
    align_to_bucket_start,
    as_utc,
    next_bucket_start,
)
from lp_kernel.exceptions import InvalidRangeError


def validate_range(
    range_start: datetime | None,
    range_end: datetime | None,
) -> tuple[datetime | None, datetime | None]:
    """
    Normalize optional bounds to UTC and reject an inverted range.

    Raises:
        InvalidRangeError: If both bounds are given and end < start.
    """
    start = as_utc(range_start) if range_start is not None else None
    end = as_utc(range_end) if range_end is not None else None
    if start is not None and end is not None and end < start:
        raise InvalidRangeError(start, end)
    return start, end


def replay_balances(
    events: Sequence[LedgerEvent],
    granularity: Granularity,
    range_start: datetime | None = None,
    range_end: datetime | None = None,
    *,
    now: datetime,
) -> tuple[BalancePoint, ...]:
    """
    Replay ``events`` into one BalancePoint per bucket.

    Preconditions:
        - ``events`` belong to one subject, lie within [range_start,
          range_end] when bounds are given, and are sorted ascending by
          timestamp.

    Postconditions:
        - Empty ``events`` -> empty tuple.
        - Otherwise the first point sits at the bucket containing
          ``range_start`` (or the first event), the last at the bucket
          containing ``range_end`` (or ``now``), and each point's balance is
          the signed sum of every event with timestamp <= point.timestamp.

    Args:
        events: Ordered ledger events.
        granularity: Bucket width.
        range_start: Optional inclusive lower bound of the requested range.
        range_end: Optional inclusive upper bound; defaults to ``now``.
        now: Current instant, used when ``range_end`` is absent.

    Raises:
        InvalidRangeError: If range_end < range_start.
    """
    range_start, range_end = validate_range(range_start, range_end)
    if not events:
        return ()

    running = ZERO
    cursor = align_to_bucket_start(
        range_start if range_start is not None else events[0].timestamp,
        granularity,
    )
    effective_end = range_end if range_end is not None else as_utc(now)

    points: list[BalancePoint] = []
    index = 0
    count = len(events)

    while cursor <= effective_end:
        while index < count and events[index].timestamp <= cursor:
            running += events[index].signed_amount
            index += 1

        points.append(BalancePoint(timestamp=cursor, balance=format_amount(running)))
        try:
            cursor = next_bucket_start(cursor, granularity)
        except (OverflowError, ValueError):
            # no bucket after year 9999
            break

    return tuple(points)


def sum_holdings(holdings: Iterable[HoldingDTO]) -> Decimal:
    """Current balance as the sum of live holdings; 0 when there are none."""
    return sum((Decimal(h.amount) for h in holdings), ZERO)
