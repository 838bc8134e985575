"""
Generation - filling and scrambling the bits of a flake

The allocator decides the sequence/random field of each flake, and the
shuffler turns a sortable raw flake into a hash-like one.
"""

from hashflake.generation.allocator import SequenceAllocator, random_bits_for, sequence_field
from hashflake.generation.shuffle import shuffle_bits

__all__ = [
    "SequenceAllocator",
    "random_bits_for",
    "sequence_field",
    "shuffle_bits",
]
