"""
Flaker - flake generator façade

This is the primary interface for generating flakes. A Flaker combines its
settings (node id, epoch origin) with the clock, the allocator and the
shuffler, and hands out Flake values.

Example:
    >>> from hashflake import Flaker, GeneratorSettings
    >>> flaker = Flaker(GeneratorSettings(node_id=7))
    >>> flake = flaker.next()          # hash-like
    >>> ordered = flaker.next_raw()    # sortable
    >>> other = flaker.with_node_id(8) # independent generator

Flakes are unique for ~146 years per (node id, epoch origin) pair. A generator
issues more than 4,000,000 flakes per interval (~1.07 s) before it starts
borrowing capacity from the following intervals; after a restart, waiting
roughly issued / 4,000,000 seconds before issuing again keeps that guarantee.

Raw flakes from one generator never decrease until the interval counter wraps
at the end of the epoch. A clock stepping backwards is not detected; the
generator keeps counting in the last interval it saw until the clock catches
up, so it neither fails nor repeats itself. Flakes issued after a restart with
a clock that went backwards are not covered by this.
"""

import threading
from datetime import datetime

from hashflake.codec import Flake
from hashflake.generation.allocator import SequenceAllocator
from hashflake.generation.shuffle import shuffle_bits
from hashflake.kernel.layout import FLAKE_MASK, NODE_ID_BITS, SEQUENCE_BITS
from hashflake.kernel.logging import get_logger
from hashflake.kernel.metrics import generators_created_total
from hashflake.kernel.settings import GeneratorSettings
from hashflake.kernel.time import RealTimeProvider, TimeProvider, compute_interval, to_unix_nanos

logger = get_logger(__name__)


class Flaker:
    """
    Flake generator

    Thread-safe and non-blocking: concurrent callers only contend for a lock
    held during a couple of integer updates. Create one instance per node id
    and keep it for the life of the process; do not run two instances with the
    same node id and epoch origin at the same time.
    """

    def __init__(
        self,
        settings: GeneratorSettings | None = None,
        time_provider: TimeProvider | None = None,
    ) -> None:
        """
        Initialize generator

        Args:
            settings: Node id and epoch origin (node id 0 and the default epoch if None)
            time_provider: Time provider (uses real time if None)
        """
        self.settings = settings or GeneratorSettings()
        self.time_provider = time_provider or RealTimeProvider()
        self._allocator = SequenceAllocator()
        generators_created_total.inc()

    @property
    def node_id(self) -> int:
        return self.settings.node_id

    @property
    def epoch_start_ns(self) -> int:
        return self.settings.epoch_start_ns

    def next(self) -> Flake:
        """
        Generate a new flake in shuffled, hash-like form

        Shuffled flakes carry no visible ordering. Never blocks, never fails.
        """
        return Flake(shuffle_bits(self._next_value()))

    def next_raw(self) -> Flake:
        """
        Generate a new flake in raw, sortable form

        Raw flakes increase with time until the interval counter wraps at the
        end of the epoch. Never blocks, never fails.
        """
        return Flake(self._next_value())

    def _next_value(self) -> int:
        clock_interval = compute_interval(self.time_provider.now_ns(), self.settings.epoch_start_ns)
        interval, field = self._allocator.allocate(clock_interval)

        # Added, not ORed: a high-tier field overflowing 23 bits carries into the interval
        raw = (interval << SEQUENCE_BITS) + field
        return ((raw << NODE_ID_BITS) | self.settings.node_id) & FLAKE_MASK

    # Configuration - every change yields a new, independent generator

    def with_node_id(self, node_id: int) -> "Flaker":
        """
        Return a new generator with a different node id

        The new generator has its own lock and starts counting from zero; this
        generator is left untouched.

        Raises:
            InvalidNodeId: If node_id is not an integer in 0-255
        """
        flaker = Flaker(self.settings.with_node_id(node_id), self.time_provider)
        logger.debug("Derived generator", node_id=flaker.node_id, epoch_start_ns=flaker.epoch_start_ns)
        return flaker

    def with_epoch_start(self, epoch_start: datetime | int) -> "Flaker":
        """
        Return a new generator counting intervals from a different epoch origin

        Args:
            epoch_start: Origin as a datetime (naive means UTC) or Unix nanoseconds

        Only raw flakes depend on the origin for their ordering; uniqueness
        holds for 146 years from whichever origin is chosen.
        """
        if isinstance(epoch_start, datetime):
            epoch_start = to_unix_nanos(epoch_start)
        flaker = Flaker(self.settings.with_epoch_start_ns(epoch_start), self.time_provider)
        logger.debug("Derived generator", node_id=flaker.node_id, epoch_start_ns=flaker.epoch_start_ns)
        return flaker

    def __repr__(self) -> str:
        return f"Flaker(node_id={self.node_id}, epoch_start_ns={self.epoch_start_ns})"


# ============================================================================
# Process-wide default generator
# ============================================================================

_default: Flaker | None = None
_default_lock = threading.Lock()


def get_default() -> Flaker:
    """
    Return the process-wide default generator, creating it on first use

    The node id comes from HASHFLAKE_NODE_ID or the local private IPv4 address
    (0 if none), the epoch origin from HASHFLAKE_EPOCH_START_NS or 2020-01-01.
    The default is never reconfigured in place: code that needs another node
    id builds its own generator with with_node_id().
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                settings = GeneratorSettings.from_env()
                _default = Flaker(settings)
                logger.info(
                    "Default generator initialized",
                    node_id=settings.node_id,
                    epoch_start_ns=settings.epoch_start_ns,
                )
    return _default


def next_id() -> Flake:
    """Shorthand for get_default().next()"""
    return get_default().next()


def next_raw() -> Flake:
    """Shorthand for get_default().next_raw()"""
    return get_default().next_raw()


def with_node_id(node_id: int) -> Flaker:
    """Shorthand for get_default().with_node_id(node_id)"""
    return get_default().with_node_id(node_id)


def with_epoch_start(epoch_start: datetime | int) -> Flaker:
    """Shorthand for get_default().with_epoch_start(epoch_start)"""
    return get_default().with_epoch_start(epoch_start)
