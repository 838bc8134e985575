"""
Time provider abstraction and interval mapping

Generators read the clock through a TimeProvider so tests can freeze time
inside a single interval, step across interval boundaries, or jump to the end
of an epoch without sleeping.

All instants are integer nanoseconds since the Unix epoch.
"""

import time
from datetime import datetime, timezone
from typing import Protocol

from hashflake.kernel.layout import IGNORED_TIME_BITS, INTERVAL_MASK, TICK_NANOS

_NANOS_PER_SECOND = 1_000_000_000


class TimeProvider(Protocol):
    """Protocol for time providers - allows deterministic testing"""

    def now_ns(self) -> int:
        """Return current time in Unix nanoseconds"""
        ...


class RealTimeProvider:
    """Production time provider using the system wall clock"""

    def now_ns(self) -> int:
        return time.time_ns()


class TestTimeProvider:
    """
    Controllable time provider for deterministic tests

    Time stands still until the test sets or advances it, so any number of
    flakes can be generated inside one interval.
    """

    __test__ = False

    def __init__(self, initial_ns: int = 0) -> None:
        self._current_ns = initial_ns

    def now_ns(self) -> int:
        return self._current_ns

    def set_ns(self, value: int) -> None:
        """Set current time to a specific Unix nanosecond value"""
        self._current_ns = value

    def set_time(self, dt: datetime) -> None:
        """Set current time to a specific datetime"""
        self._current_ns = to_unix_nanos(dt)

    def advance_ns(self, nanos: int) -> None:
        self._current_ns += nanos

    def advance_seconds(self, seconds: int) -> None:
        self._current_ns += seconds * _NANOS_PER_SECOND

    def advance_intervals(self, intervals: int = 1) -> None:
        """Advance time by whole generator intervals (2^30 ns each)"""
        self._current_ns += intervals * TICK_NANOS


def to_unix_nanos(dt: datetime) -> int:
    """
    Convert a datetime to Unix nanoseconds without float rounding

    Naive datetimes are taken to be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    delta = dt - datetime(1970, 1, 1, tzinfo=timezone.utc)
    seconds = delta.days * 86_400 + delta.seconds
    return seconds * _NANOS_PER_SECOND + delta.microseconds * 1_000


def from_unix_nanos(nanos: int) -> datetime:
    """Convert Unix nanoseconds to an aware UTC datetime (microsecond precision)"""
    return datetime.fromtimestamp(nanos // _NANOS_PER_SECOND, tz=timezone.utc).replace(
        microsecond=(nanos % _NANOS_PER_SECOND) // 1_000
    )


def compute_interval(now_ns: int, epoch_start_ns: int) -> int:
    """
    Map an instant to the 32-bit interval counter of an epoch

    The counter wraps after 2^32 intervals; instants before the epoch origin
    wrap around to the top of the range instead of going negative.
    """
    return ((now_ns - epoch_start_ns) >> IGNORED_TIME_BITS) & INTERVAL_MASK


# Global default time provider
default_time_provider: TimeProvider = RealTimeProvider()
