"""
hashflake Examples - generating, encoding and decoding flakes

This example demonstrates:
- Generating hash-like and sortable flakes from the default generator
- Deriving generators for other node ids and epoch origins
- Encoding flakes as bytes, hex, base32 and base64 and decoding them back
- Handling undecodable input
"""

from datetime import datetime, timezone

import hashflake
from hashflake import Flaker, FormatError, GeneratorSettings, decode, from_bytes


def example_1_default_generator():
    """
    Example 1: Default Generator

    Demonstrates:
    - next() for ids that look random
    - next_raw() for ids that sort by creation time
    """
    print("\n=== Example 1: Default Generator ===\n")

    print("Shuffled flakes:")
    for _ in range(3):
        print(f"  {hashflake.next_id()}")

    print("Raw flakes (increasing):")
    for _ in range(3):
        print(f"  {hashflake.next_raw()}")


def example_2_derived_generators():
    """
    Example 2: Derived Generators

    Demonstrates:
    - One generator per node id, e.g. one per worker process
    - A custom epoch origin
    """
    print("\n=== Example 2: Derived Generators ===\n")

    base = Flaker(GeneratorSettings(node_id=1))
    workers = [base.with_node_id(node_id) for node_id in (10, 11, 12)]
    for worker in workers:
        flake = worker.next_raw()
        print(f"  node {worker.node_id:3d}: {flake.to_hex()} (low byte {flake & 0xFF})")

    custom = base.with_epoch_start(datetime(2024, 1, 1, tzinfo=timezone.utc))
    print(f"  epoch 2024: {custom.next_raw().to_hex()}")


def example_3_encodings():
    """
    Example 3: Encodings

    Demonstrates:
    - Fixed-length text forms
    - decode() picking the form by length
    """
    print("\n=== Example 3: Encodings ===\n")

    flake = Flaker().next()
    print(f"  int:    {flake}")
    print(f"  hex:    {flake.to_hex()}")
    print(f"  base32: {flake.to_base32()}")
    print(f"  base64: {flake.to_base64()}")

    assert decode(flake.to_hex()) == flake
    assert decode(flake.to_base32()) == flake
    assert decode(flake.to_base64()) == flake
    assert from_bytes(flake.to_binary()) == flake
    print("  ✓ All encodings decode to the same flake")


def example_4_invalid_input():
    """
    Example 4: Invalid Input

    Demonstrates:
    - FormatError carries the rejected value and a reason
    """
    print("\n=== Example 4: Invalid Input ===\n")

    for text in ["not-a-flake", "4030404040700g01"]:
        try:
            decode(text)
        except FormatError as e:
            print(f"  {text!r}: {e.reason}")


if __name__ == "__main__":
    example_1_default_generator()
    example_2_derived_generators()
    example_3_encodings()
    example_4_invalid_input()
