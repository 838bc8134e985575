"""
Flake values and their text encodings

A flake travels as 8 big-endian bytes and has three text forms, each with a
fixed length so decode() can tell them apart without a prefix:

    base64   11 chars   URL-safe alphabet, unpadded     e.g. "QDBAQEBwAAE"
    base32   13 chars   extended hex alphabet, unpadded e.g. "80O40G20E0002"
    hex      16 chars   lowercase                       e.g. "4030404040700001"
"""

import base64
import binascii

from hashflake.kernel.errors import FormatError
from hashflake.kernel.layout import FLAKE_BYTES
from hashflake.kernel.metrics import decode_failures_total

BASE64_LENGTH = 11
BASE32_LENGTH = 13
HEX_LENGTH = 16

# URL-safe to standard alphabet; "+" and "/" turn into characters validation rejects
_URL_SAFE_SWAP = str.maketrans("-_+/", "+/-_")


class Flake(int):
    """
    A 63-bit unique id

    Behaves as a plain int (compare, hash, store in databases as BIGINT) and
    adds the binary and text encodings.
    """

    __slots__ = ()

    def to_binary(self) -> bytes:
        """8 bytes, big-endian"""
        return int(self).to_bytes(FLAKE_BYTES, "big")

    def to_hex(self) -> str:
        return f"{int(self):016x}"

    def to_base32(self) -> str:
        return base64.b32hexencode(self.to_binary()).decode("ascii").rstrip("=")

    def to_base64(self) -> str:
        return base64.urlsafe_b64encode(self.to_binary()).decode("ascii").rstrip("=")

    def __repr__(self) -> str:
        return f"Flake({int(self)})"


def from_bytes(data: bytes) -> Flake:
    """
    Decode 8 big-endian bytes into a flake

    Raises:
        FormatError: If data is not exactly 8 bytes long
    """
    if len(data) != FLAKE_BYTES:
        raise _reject(data, "invalid_byte_length")
    return Flake(int.from_bytes(data, "big"))


def decode(text: str) -> Flake:
    """
    Decode a hex, base32 or base64 encoded flake

    The encoding is picked by length alone; text of any other length is
    rejected without attempting to decode it.

    Raises:
        FormatError: If the length is unknown, the characters do not fit the
            encoding, or the decoded value is not 8 bytes
    """
    length = len(text)
    try:
        if length == BASE64_LENGTH:
            data = base64.b64decode(text.translate(_URL_SAFE_SWAP) + "=", validate=True)
        elif length == BASE32_LENGTH:
            data = base64.b32hexdecode(text + "===")
        elif length == HEX_LENGTH:
            data = binascii.unhexlify(text)
        else:
            raise _reject(text, "unknown_length")
    except FormatError:
        raise
    except ValueError:
        # binascii.Error, and non-ASCII input, are both ValueErrors
        raise _reject(text, "invalid_characters") from None
    return from_bytes(data)


def _reject(value: object, reason: str) -> FormatError:
    decode_failures_total.labels(reason=reason).inc()
    return FormatError(value, reason)
