"""
Bit layout of a flake

A raw (unshuffled) flake is a 63-bit integer, most significant bits first:

    [interval: 32 bits][sequence/random: 23 bits][node id: 8 bits]

The interval counts coarse time units of 2^30 ns (~1.07 s) since the epoch
origin, so one epoch lasts 2^62 ns (~146 years) before the interval wraps.

Every width, mask and threshold lives here so the generator, the shuffler and
the codec agree on them. Changing any value changes the epoch length and
throughput of the whole system.
"""

INTERVAL_BITS = 32
SEQUENCE_BITS = 23
NODE_ID_BITS = 8
IGNORED_TIME_BITS = 30

FLAKE_BITS = INTERVAL_BITS + SEQUENCE_BITS + NODE_ID_BITS  # 63
FLAKE_BYTES = 8

INTERVAL_MASK = (1 << INTERVAL_BITS) - 1
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1
NODE_ID_MASK = (1 << NODE_ID_BITS) - 1
FLAKE_MASK = (1 << FLAKE_BITS) - 1

MAX_NODE_ID = NODE_ID_MASK

# Nanoseconds per interval and per full epoch
TICK_NANOS = 1 << IGNORED_TIME_BITS
EPOCH_SPAN_NANOS = 1 << (IGNORED_TIME_BITS + INTERVAL_BITS)

# 2020-01-01 00:00 CET in Unix nanoseconds
DEFAULT_EPOCH_START_NS = 1577833200000000000

# ============================================================================
# Allocator ladder
# ============================================================================

# Below this counter value: 5 counter bits + 16 random bits
LOW_LOAD_LIMIT = 0x20

# Below this counter value: 13 counter bits + 8 random bits, above: pure counter
HIGH_LOAD_THRESHOLD = 0x2020

# Medium tier starts right above the largest low tier field (0x1FFFFF)
MEDIUM_LOAD_BASE = 0x200000 - 0x2000

# High tier starts right above the largest medium tier field (0x3FFFFF)
COUNTER_OFFSET = 0x400000

LOW_LOAD_RANDOM_BITS = 16
MEDIUM_LOAD_RANDOM_BITS = 8
