"""
Adaptive sequence/randomness allocator

Fills the 23-bit middle field of a flake. How the field is split depends on
how many flakes the generator has already issued in the current interval:

    issued < 32       5 counter bits + 16 random bits   (fully hash-like)
    issued < 8224     13 counter bits + 8 random bits
    issued >= 8224    pure counter                      (predictable, never collides)

The counter bits always sit above the random bits, so two flakes from one
generator in the same interval differ in their counter bits no matter what
the random bits are. The tiers are laid out back to back (low tier below
0x200000, medium tier up to 0x3FFFFF, high tier from 0x400000), so raw flakes
keep increasing as the counter grows.

Once the pure counter runs past the 23-bit field it carries into the interval
bits. The loop guard accounts for those borrowed intervals: as long as the
clock has not moved past the intervals already used up by the carry, the
generator keeps counting in its current interval instead of resetting. This
is what lets a single generator go well beyond the ~4.2 million flakes one
interval's field can hold.

Intervals are compared modulo 2^32, so the wrap at the end of an epoch counts
as moving forward while a clock stepping backwards keeps the current interval.
"""

import secrets
import threading

from hashflake.kernel.layout import (
    COUNTER_OFFSET,
    HIGH_LOAD_THRESHOLD,
    INTERVAL_MASK,
    LOW_LOAD_LIMIT,
    LOW_LOAD_RANDOM_BITS,
    MEDIUM_LOAD_BASE,
    MEDIUM_LOAD_RANDOM_BITS,
    SEQUENCE_BITS,
)
from hashflake.kernel.logging import get_logger
from hashflake.kernel.metrics import allocator_tier_entered_total, interval_advances_total

logger = get_logger(__name__)

# Differences of at least half the interval range count as "behind"
_HALF_INTERVAL_RANGE = (INTERVAL_MASK + 1) >> 1


def random_bits_for(sequence: int) -> int:
    """Number of random bits mixed into the field for a given issue count"""
    if sequence < LOW_LOAD_LIMIT:
        return LOW_LOAD_RANDOM_BITS
    if sequence < HIGH_LOAD_THRESHOLD:
        return MEDIUM_LOAD_RANDOM_BITS
    return 0


def sequence_field(sequence: int) -> int:
    """
    Build the sequence/random field for the n-th flake of an interval

    The result may exceed 23 bits in the high tier; the caller adds it (not
    ORs it) onto the shifted interval so the overflow carries.
    """
    if sequence < LOW_LOAD_LIMIT:
        return (sequence << LOW_LOAD_RANDOM_BITS) | secrets.randbits(LOW_LOAD_RANDOM_BITS)
    if sequence < HIGH_LOAD_THRESHOLD:
        return (MEDIUM_LOAD_BASE + (sequence << MEDIUM_LOAD_RANDOM_BITS)) | secrets.randbits(
            MEDIUM_LOAD_RANDOM_BITS
        )
    return COUNTER_OFFSET - HIGH_LOAD_THRESHOLD + sequence


class SequenceAllocator:
    """
    Per-generator allocation state guarded by one lock

    The lock covers only the read-modify-write of (current interval, issue
    count). Drawing random bits happens after the lock is released, using the
    count captured inside it, so no two calls ever share a count.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current_interval: int | None = None
        self._sequence = 0

    def allocate(self, interval: int) -> tuple[int, int]:
        """
        Claim the next slot for the clock's `interval`

        Returns the interval the slot belongs to (the current one when the
        clock has not moved past it) and the field value. Never blocks beyond
        the lock and never fails.
        """
        with self._lock:
            if self._current_interval is None:
                advanced = True
            else:
                loop_guard = (self._sequence + COUNTER_OFFSET - HIGH_LOAD_THRESHOLD) >> SEQUENCE_BITS
                ahead = (interval - loop_guard - self._current_interval) & INTERVAL_MASK
                advanced = 0 < ahead < _HALF_INTERVAL_RANGE

            if advanced:
                self._current_interval = interval
                self._sequence = 0
            else:
                self._sequence += 1
            current = self._current_interval
            sequence = self._sequence

        if advanced:
            interval_advances_total.inc()
        elif sequence == LOW_LOAD_LIMIT:
            allocator_tier_entered_total.labels(tier="medium").inc()
            logger.debug("Allocator entered medium tier", interval=current)
        elif sequence == HIGH_LOAD_THRESHOLD:
            allocator_tier_entered_total.labels(tier="high").inc()
            logger.debug("Allocator entered high tier", interval=current)

        return current, sequence_field(sequence)

    def snapshot(self) -> tuple[int | None, int]:
        """Return (current interval, issue count) for diagnostics"""
        with self._lock:
            return self._current_interval, self._sequence
