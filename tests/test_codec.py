"""
Tests for Flake encodings and decoding

Covers round trips in every form, the fixed text lengths, known vectors, and
every way decoding can be rejected.
"""

import secrets

import pytest
from prometheus_client import REGISTRY

from hashflake.codec import Flake, decode, from_bytes
from hashflake.kernel.errors import FlakeError, FormatError
from hashflake.kernel.layout import FLAKE_MASK

EXAMPLE_HEX = "4030404040700001"
EXAMPLE_BASE32 = "80O40G20E0002"
EXAMPLE_BASE64 = "QDBAQEBwAAE"
EXAMPLE_INT = 0x4030404040700001


def sample_flakes() -> list[Flake]:
    edge = [0, 1, 255, 256, FLAKE_MASK, FLAKE_MASK - 1, EXAMPLE_INT]
    return [Flake(value) for value in edge + [secrets.randbits(63) for _ in range(200)]]


def test_known_vector_decodes_in_all_forms() -> None:
    """Test the example value decodes identically from hex, base32 and base64"""
    assert decode(EXAMPLE_HEX) == EXAMPLE_INT
    assert decode(EXAMPLE_BASE32) == EXAMPLE_INT
    assert decode(EXAMPLE_BASE64) == EXAMPLE_INT


def test_known_vector_encodes() -> None:
    """Test the example value re-encodes to the same texts and bytes"""
    flake = decode(EXAMPLE_HEX)

    assert flake.to_hex() == EXAMPLE_HEX
    assert flake.to_base32() == EXAMPLE_BASE32
    assert flake.to_base64() == EXAMPLE_BASE64
    assert flake.to_binary() == bytes.fromhex(EXAMPLE_HEX)
    assert from_bytes(flake.to_binary()) == flake


def test_round_trip_every_form() -> None:
    """Test decode(encode(x)) == x for hex, base32, base64 and bytes"""
    for flake in sample_flakes():
        assert decode(flake.to_hex()) == flake
        assert decode(flake.to_base32()) == flake
        assert decode(flake.to_base64()) == flake
        assert from_bytes(flake.to_binary()) == flake


def test_encoded_lengths_are_fixed() -> None:
    """Test every flake encodes to 16/13/11 characters and 8 bytes"""
    for flake in sample_flakes():
        assert len(flake.to_hex()) == 16
        assert len(flake.to_base32()) == 13
        assert len(flake.to_base64()) == 11
        assert len(flake.to_binary()) == 8


def test_hex_is_lowercase() -> None:
    """Test hex output uses lowercase digits"""
    assert Flake(0xABCDEF).to_hex() == "0000000000abcdef"


def test_base64_is_url_safe() -> None:
    """Test base64 output never contains + or /"""
    # 6-bit groups of 62 and 63 respectively
    assert Flake(0x7BEFBEFBEFBEFBEF).to_base64() == "e" + "-" * 9 + "8"
    assert Flake(FLAKE_MASK).to_base64() == "f" + "_" * 9 + "8"

    for flake in [Flake(0x7BEFBEFBEFBEFBEF), Flake(FLAKE_MASK)]:
        encoded = flake.to_base64()
        assert "+" not in encoded and "/" not in encoded
        assert decode(encoded) == flake


def test_decoded_value_is_flake() -> None:
    """Test decode returns a Flake that behaves as an int"""
    flake = decode(EXAMPLE_HEX)
    assert isinstance(flake, Flake)
    assert isinstance(flake, int)
    assert flake + 1 == EXAMPLE_INT + 1
    assert repr(flake) == f"Flake({EXAMPLE_INT})"
    assert {flake: "x"}[EXAMPLE_INT] == "x"


@pytest.mark.parametrize("text", ["", "1234567890", "123456789012", "12345678901234567", "abc"])
def test_unknown_length_rejected(text: str) -> None:
    """Test lengths other than 11, 13 and 16 fail before decoding"""
    with pytest.raises(FormatError) as excinfo:
        decode(text)
    assert excinfo.value.reason == "unknown_length"
    assert excinfo.value.value == text


@pytest.mark.parametrize(
    "text",
    [
        "§2345678901",  # base64 length, non-ASCII
        "QDBA.EBwAAE",  # base64 length, outside the alphabet
        "QDBA+EBwAAE",  # standard alphabet, not URL-safe
        "QDBA/EBwAAE",
        "§234567890123",  # base32 length, non-ASCII
        "80O40G20E000Z",  # base32 length, outside 0-9A-V
        "80o40g20e0002",  # base32 is upper case only
        "§234567890123456",  # hex length, non-ASCII
        "4030404040700g01",  # hex length, not a hex digit
        "4030 04040700001",  # hex length, whitespace
    ],
)
def test_invalid_characters_rejected(text: str) -> None:
    """Test text of a known length with a bad alphabet is rejected"""
    with pytest.raises(FormatError) as excinfo:
        decode(text)
    assert excinfo.value.reason == "invalid_characters"


@pytest.mark.parametrize("data", [b"", b"\x00\x00\x00\x00", b"\x00" * 7, b"\x00" * 9])
def test_from_bytes_requires_eight_bytes(data: bytes) -> None:
    """Test the raw bytes path rejects anything but 8 bytes"""
    with pytest.raises(FormatError) as excinfo:
        from_bytes(data)
    assert excinfo.value.reason == "invalid_byte_length"


def test_format_error_is_value_error() -> None:
    """Test callers can catch decode failures as ValueError or FlakeError"""
    with pytest.raises(ValueError):
        decode("1234567890")
    with pytest.raises(FlakeError):
        decode("1234567890")


def test_decode_failures_counted() -> None:
    """Test rejected decodes increment the failure counter by reason"""
    name = "hashflake_decode_failures_total"
    before = REGISTRY.get_sample_value(name, {"reason": "unknown_length"}) or 0.0

    with pytest.raises(FormatError):
        decode("short")

    assert REGISTRY.get_sample_value(name, {"reason": "unknown_length"}) == before + 1
