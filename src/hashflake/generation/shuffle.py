"""
Bit shuffler - turns sortable raw flakes into hash-like values

Every source byte contributes one bit to every destination byte: bit `l` of
source byte `i` becomes bit `i` of destination byte `l` (bytes counted from
the least significant end). Reading the 64 bits as an 8x8 matrix of bytes,
this is a transpose, so neighbouring raw flakes that differ only in their low
bytes end up differing all over the output.

Bit 63 maps onto itself, so a 63-bit input stays a 63-bit output.
"""

from hashflake.kernel.layout import FLAKE_BYTES


def _spread_table(source_byte: int) -> tuple[int, ...]:
    table = []
    for value in range(256):
        spread = 0
        for bit in range(8):
            if value & (1 << bit):
                spread |= 1 << (bit * 8 + source_byte)
        table.append(spread)
    return tuple(table)


# _SPREAD[i][v]: output bits contributed by byte value v at source byte i
_SPREAD = tuple(_spread_table(i) for i in range(FLAKE_BYTES))


def shuffle_bits(raw: int) -> int:
    """Apply the fixed bit permutation to a raw 63-bit flake"""
    s0, s1, s2, s3, s4, s5, s6, s7 = _SPREAD
    return (
        s0[raw & 0xFF]
        | s1[(raw >> 8) & 0xFF]
        | s2[(raw >> 16) & 0xFF]
        | s3[(raw >> 24) & 0xFF]
        | s4[(raw >> 32) & 0xFF]
        | s5[(raw >> 40) & 0xFF]
        | s6[(raw >> 48) & 0xFF]
        | s7[(raw >> 56) & 0xFF]
    )


def shuffle_bits_reference(raw: int) -> int:
    """Bit-by-bit version of shuffle_bits, kept as the readable definition"""
    out = 0
    for i in range(8):
        for l in range(8):
            if raw & (1 << (i * 8 + l)):
                out |= 1 << (l * 8 + i)
    return out
