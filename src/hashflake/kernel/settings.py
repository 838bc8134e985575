"""
Generator settings - the configuration a flake generator is built from

Settings are frozen: a generator never changes its node id or epoch origin.
Deriving a differently configured generator builds new settings and a new
generator with fresh state.
"""

import os

from pydantic import BaseModel, Field

from hashflake.kernel.errors import InvalidNodeId
from hashflake.kernel.layout import DEFAULT_EPOCH_START_NS, MAX_NODE_ID
from hashflake.kernel.network import detect_node_id

NODE_ID_ENV = "HASHFLAKE_NODE_ID"
EPOCH_START_ENV = "HASHFLAKE_EPOCH_START_NS"


class GeneratorSettings(BaseModel):
    """
    Flake generator configuration

    The node id must be unique among generators running concurrently with the
    same epoch origin. Nothing checks this; it is the operator's job.
    """

    node_id: int = Field(
        default=0,
        ge=0,
        le=MAX_NODE_ID,
        description="8-bit identifier of this generator, stored in the low byte of each flake",
    )

    epoch_start_ns: int = Field(
        default=DEFAULT_EPOCH_START_NS,
        description="Epoch origin in Unix nanoseconds; intervals are counted from here",
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "description": "Node identity and epoch origin of a flake generator"
        },
    }

    def with_node_id(self, node_id: int) -> "GeneratorSettings":
        """Return a copy with a different node id"""
        return GeneratorSettings(node_id=_check_node_id(node_id), epoch_start_ns=self.epoch_start_ns)

    def with_epoch_start_ns(self, epoch_start_ns: int) -> "GeneratorSettings":
        """Return a copy with a different epoch origin"""
        return GeneratorSettings(node_id=self.node_id, epoch_start_ns=epoch_start_ns)

    @classmethod
    def from_env(cls) -> "GeneratorSettings":
        """
        Build settings from the environment

        HASHFLAKE_NODE_ID overrides node id detection from the local IPv4
        address; HASHFLAKE_EPOCH_START_NS overrides the default epoch origin.

        Raises:
            InvalidNodeId: If HASHFLAKE_NODE_ID is not an integer in 0-255
            ValueError: If HASHFLAKE_EPOCH_START_NS is not an integer
        """
        node_id_str = os.getenv(NODE_ID_ENV)
        if node_id_str is None:
            node_id = detect_node_id()
        else:
            try:
                node_id = _check_node_id(int(node_id_str))
            except ValueError:
                raise InvalidNodeId(node_id_str) from None

        epoch_str = os.getenv(EPOCH_START_ENV)
        if epoch_str is None:
            epoch_start_ns = DEFAULT_EPOCH_START_NS
        else:
            try:
                epoch_start_ns = int(epoch_str)
            except ValueError:
                raise ValueError(
                    f"{EPOCH_START_ENV} must be an integer, got '{epoch_str}'"
                ) from None

        return cls(node_id=node_id, epoch_start_ns=epoch_start_ns)


def _check_node_id(node_id: int) -> int:
    if isinstance(node_id, bool) or not isinstance(node_id, int) or not 0 <= node_id <= MAX_NODE_ID:
        raise InvalidNodeId(node_id)
    return node_id
