"""
Tests for time providers and the interval mapper
"""

from datetime import datetime, timedelta, timezone

from hashflake.kernel.layout import DEFAULT_EPOCH_START_NS, INTERVAL_MASK, TICK_NANOS
from hashflake.kernel.time import (
    RealTimeProvider,
    TestTimeProvider,
    compute_interval,
    from_unix_nanos,
    to_unix_nanos,
)


def test_interval_zero_at_epoch_start() -> None:
    """Test the first interval starts exactly at the epoch origin"""
    assert compute_interval(DEFAULT_EPOCH_START_NS, DEFAULT_EPOCH_START_NS) == 0
    assert compute_interval(DEFAULT_EPOCH_START_NS + TICK_NANOS - 1, DEFAULT_EPOCH_START_NS) == 0
    assert compute_interval(DEFAULT_EPOCH_START_NS + TICK_NANOS, DEFAULT_EPOCH_START_NS) == 1


def test_interval_wraps_at_end_of_epoch() -> None:
    """Test the interval counter wraps to zero after 2^32 intervals"""
    last = DEFAULT_EPOCH_START_NS + INTERVAL_MASK * TICK_NANOS
    assert compute_interval(last, DEFAULT_EPOCH_START_NS) == INTERVAL_MASK
    assert compute_interval(last + TICK_NANOS, DEFAULT_EPOCH_START_NS) == 0


def test_interval_before_epoch_wraps_to_top() -> None:
    """Test instants before the origin map to the top of the range, never negative"""
    assert compute_interval(DEFAULT_EPOCH_START_NS - 1, DEFAULT_EPOCH_START_NS) == INTERVAL_MASK


def test_interval_non_decreasing_with_clock() -> None:
    """Test advancing the clock never lowers the interval"""
    clock = TestTimeProvider(DEFAULT_EPOCH_START_NS)
    previous = -1
    for _ in range(50):
        interval = compute_interval(clock.now_ns(), DEFAULT_EPOCH_START_NS)
        assert interval >= previous
        previous = interval
        clock.advance_ns(TICK_NANOS // 3)
    assert previous == 16


def test_test_time_provider_controls() -> None:
    """Test frozen clock can be set and advanced"""
    clock = TestTimeProvider(100)
    assert clock.now_ns() == 100
    assert clock.now_ns() == 100

    clock.advance_ns(5)
    assert clock.now_ns() == 105

    clock.advance_seconds(2)
    assert clock.now_ns() == 2_000_000_105

    clock.set_ns(0)
    clock.advance_intervals(3)
    assert clock.now_ns() == 3 * TICK_NANOS

    clock.set_time(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc))
    assert clock.now_ns() == 1_000_000_000


def test_real_time_provider_tracks_wall_clock() -> None:
    """Test real provider returns current Unix nanoseconds"""
    now = to_unix_nanos(datetime.now(timezone.utc))
    assert abs(RealTimeProvider().now_ns() - now) < 5_000_000_000


def test_to_unix_nanos_is_exact() -> None:
    """Test datetime conversion keeps microseconds without float rounding"""
    dt = datetime(2019, 12, 31, 23, 0, 0, tzinfo=timezone.utc)
    assert to_unix_nanos(dt) == DEFAULT_EPOCH_START_NS

    dt = datetime(2030, 6, 1, 12, 30, 15, 123456, tzinfo=timezone.utc)
    assert to_unix_nanos(dt) % 1_000_000_000 == 123_456_000


def test_to_unix_nanos_naive_is_utc() -> None:
    """Test naive datetimes are read as UTC"""
    naive = datetime(2020, 1, 1)
    aware = datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert to_unix_nanos(naive) == to_unix_nanos(aware)


def test_to_unix_nanos_respects_offset() -> None:
    """Test aware datetimes in other zones convert to the same instant"""
    cet = timezone(timedelta(hours=1))
    assert to_unix_nanos(datetime(2020, 1, 1, tzinfo=cet)) == DEFAULT_EPOCH_START_NS


def test_from_unix_nanos_round_trip() -> None:
    """Test converting back yields the same aware UTC datetime"""
    dt = datetime(2024, 2, 29, 8, 15, 0, 250000, tzinfo=timezone.utc)
    assert from_unix_nanos(to_unix_nanos(dt)) == dt
