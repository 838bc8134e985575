"""
hashflake - coordination-free 63-bit unique ids that look random

Each flake packs a ~1 s time interval, an adaptive counter/random field and an
8-bit node id into 63 bits, then shuffles the bits so consecutive ids look
unrelated. Raw (unshuffled) flakes are available when sortable ids are needed.
"""

from hashflake.codec import Flake, decode, from_bytes
from hashflake.flake import (
    Flaker,
    get_default,
    next_id,
    next_raw,
    with_epoch_start,
    with_node_id,
)
from hashflake.kernel.errors import FlakeError, FormatError, InvalidNodeId
from hashflake.kernel.settings import GeneratorSettings

__version__ = "0.1.0"
__all__ = [
    "Flake",
    "Flaker",
    "GeneratorSettings",
    "FlakeError",
    "FormatError",
    "InvalidNodeId",
    "decode",
    "from_bytes",
    "get_default",
    "next_id",
    "next_raw",
    "with_epoch_start",
    "with_node_id",
    "__version__",
]
