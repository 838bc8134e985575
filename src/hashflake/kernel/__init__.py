"""
Kernel - shared building blocks of the flake generator

Bit layout constants, clock access, configuration, errors and the logging and
metrics plumbing that the generation and codec modules build upon.
"""

from hashflake.kernel.errors import FlakeError, FormatError, InvalidNodeId
from hashflake.kernel.settings import GeneratorSettings
from hashflake.kernel.time import (
    RealTimeProvider,
    TestTimeProvider,
    TimeProvider,
    compute_interval,
    to_unix_nanos,
)

__all__ = [
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    "compute_interval",
    "to_unix_nanos",
    # Configuration
    "GeneratorSettings",
    # Errors
    "FlakeError",
    "FormatError",
    "InvalidNodeId",
]
