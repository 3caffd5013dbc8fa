"""
Query -- parse the raw parameters of a balance-history request.

Responsibility:
    Turns the wire parameters of ``GET balance-history(subjectId,
    startDate?, endDate?, interval?)`` into a validated BalanceHistoryQuery.
    This is the only place raw strings are accepted; everything downstream
    works with aware UTC datetimes and the Granularity enum.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - InvalidRangeError for a malformed ISO-8601 instant or end < start.
    - UnknownGranularityError for an interval outside daily/weekly/monthly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from lp_kernel.domain.intervals import Granularity, as_utc
from lp_kernel.domain.replay import validate_range
from lp_kernel.exceptions import InvalidRangeError

_END_FIELDS = frozenset({"endDate", "toDate"})


def parse_instant(value: str, *, field_name: str) -> datetime:
    """
    Parse an ISO-8601 instant ("2025-01-01T00:00:00Z", "2025-01-01", ...).

    A trailing ``Z`` is accepted; a value without an offset is taken as UTC.

    Raises:
        InvalidRangeError: If the value cannot be parsed.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        is_end = field_name in _END_FIELDS
        raise InvalidRangeError(
            None if is_end else value,
            value if is_end else None,
            reason=f"{field_name} is not an ISO-8601 instant: {value!r}",
        ) from None


@dataclass(frozen=True)
class BalanceHistoryQuery:
    """Validated balance-history request parameters."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    interval: Granularity = Granularity.DAILY

    def __post_init__(self) -> None:
        start, end = validate_range(self.start_date, self.end_date)
        object.__setattr__(self, "start_date", start)
        object.__setattr__(self, "end_date", end)
        object.__setattr__(self, "interval", Granularity.parse(self.interval))

    @classmethod
    def parse(
        cls,
        start_date: str | None = None,
        end_date: str | None = None,
        interval: str | None = None,
    ) -> BalanceHistoryQuery:
        """Build a query from raw (possibly empty) string parameters."""
        return cls(
            start_date=parse_instant(start_date, field_name="startDate") if start_date else None,
            end_date=parse_instant(end_date, field_name="endDate") if end_date else None,
            interval=Granularity.parse(interval or None),
        )
