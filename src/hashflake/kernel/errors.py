"""
Custom exceptions for hashflake

Generation never fails, so the hierarchy is small: decoding text or bytes
back into a flake, and configuring a generator with a node id that does not
fit the 8-bit field.
"""


class FlakeError(Exception):
    """Base exception for all hashflake errors"""

    pass


class FormatError(FlakeError, ValueError):
    """
    Raised when text or bytes cannot be decoded into a flake

    `reason` is one of:
    - "unknown_length": text length is not 11, 13 or 16 characters
    - "invalid_characters": text does not match the alphabet for its length
    - "invalid_byte_length": decoded bytes are not exactly 8 long
    """

    def __init__(self, value: object, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Unknown flake format ({reason}): {value!r}")


class InvalidNodeId(FlakeError, ValueError):
    """Raised when a node id does not fit the 8-bit node field"""

    def __init__(self, node_id: object) -> None:
        self.node_id = node_id
        super().__init__(f"Node id must be an integer between 0 and 255, got {node_id!r}")
