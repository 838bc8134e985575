"""
Prometheus metrics for hashflake.

Only rare events are counted: generator creation, interval advances, entering
the medium and high allocator tiers, and decode failures. Nothing is counted
per generated flake, so the hot path stays a lock plus a few integer ops.
"""

from prometheus_client import Counter

# ============================================================================
# Generator Metrics
# ============================================================================

generators_created_total = Counter(
    "hashflake_generators_created_total",
    "Total number of flake generators created",
)

interval_advances_total = Counter(
    "hashflake_interval_advances_total",
    "Total number of times a generator moved on to a new interval",
)

allocator_tier_entered_total = Counter(
    "hashflake_allocator_tier_entered_total",
    "Total number of times an interval's issue count reached an allocator tier",
    ["tier"],  # tier: medium, high
)

# ============================================================================
# Codec Metrics
# ============================================================================

decode_failures_total = Counter(
    "hashflake_decode_failures_total",
    "Total number of rejected flake decodes",
    ["reason"],  # reason: unknown_length, invalid_characters, invalid_byte_length
)
