"""
Intervals -- bucket granularity and UTC bucket alignment.

Responsibility:
    Defines the Granularity enumeration and the pure functions that map any
    instant onto the canonical start of its bucket, and step from one bucket
    start to the next.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - All alignment happens in UTC.  Aware instants in other offsets are
      converted first; naive instants are taken to already be UTC.
    - align_to_bucket_start is idempotent: aligning an aligned instant
      returns it unchanged.
    - next_bucket_start(align(x)) is strictly greater than align(x).

Failure modes:
    - UnknownGranularityError from Granularity.parse() for values outside
      {daily, weekly, monthly}.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

from lp_kernel.exceptions import UnknownGranularityError


class Granularity(str, Enum):
    """
    Bucket width for a balance history.

    Contract:
        Exactly three values.  The wire form is the lowercase value
        ("daily", "weekly", "monthly").
    """

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: "Granularity | str | None") -> "Granularity":
        """
        Parse a wire value, defaulting to DAILY when absent.

        Raises:
            UnknownGranularityError: If value is not one of the three names.
        """
        if value is None:
            return cls.DAILY
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownGranularityError(value)


def as_utc(instant: datetime) -> datetime:
    """Normalize an instant to an aware UTC datetime (naive means UTC)."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def format_instant(instant: datetime) -> str:
    """Render an instant as ISO-8601 UTC with milliseconds and a Z suffix."""
    return as_utc(instant).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def align_to_bucket_start(instant: datetime, granularity: Granularity) -> datetime:
    """
    Compute the canonical bucket-start instant containing ``instant``.

    - DAILY: 00:00:00.000 UTC of the same day.
    - WEEKLY: Monday 00:00 UTC of the ISO week.  With d the weekday counted
      0=Sunday..6=Saturday, the offset to Monday is -6 days for Sunday and
      1-d days otherwise.
    - MONTHLY: the 1st of the UTC month at 00:00.
    """
    utc = as_utc(instant)
    midnight = utc.replace(hour=0, minute=0, second=0, microsecond=0)

    if granularity is Granularity.DAILY:
        return midnight

    if granularity is Granularity.WEEKLY:
        # isoweekday(): Monday=1 .. Sunday=7
        d = utc.isoweekday() % 7
        offset = -6 if d == 0 else 1 - d
        return midnight + timedelta(days=offset)

    if granularity is Granularity.MONTHLY:
        return midnight.replace(day=1)

    raise UnknownGranularityError(granularity)


def next_bucket_start(bucket_start: datetime, granularity: Granularity) -> datetime:
    """
    Advance an aligned bucket start by exactly one bucket.

    Monthly buckets always sit on day 1, so stepping to day 1 of the next
    month never has to clamp a day-of-month.
    """
    if granularity is Granularity.DAILY:
        return bucket_start + timedelta(days=1)

    if granularity is Granularity.WEEKLY:
        return bucket_start + timedelta(days=7)

    if granularity is Granularity.MONTHLY:
        if bucket_start.month == 12:
            return bucket_start.replace(year=bucket_start.year + 1, month=1, day=1)
        return bucket_start.replace(month=bucket_start.month + 1, day=1)

    raise UnknownGranularityError(granularity)
