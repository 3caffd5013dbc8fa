"""
Clock -- injectable source of "now".

The replayer's open range end, the default ``rangeEnd`` of a balance history
and the timestamp stamped on every mint/burn all come from a Clock passed in
by the caller.  Nothing in the kernel calls ``datetime.now()`` outside
SystemClock, so a test can pin time with DeterministicClock.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Source of aware datetimes."""

    @abstractmethod
    def now(self) -> datetime:
        ...

    def now_utc(self) -> datetime:
        return self.now().astimezone(timezone.utc)


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Manually driven clock for tests.

    Starts at 2025-01-01T12:00:00Z unless told otherwise and only moves when
    set_time() or advance() is called.
    """

    DEFAULT_START = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or self.DEFAULT_START

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = time

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)
