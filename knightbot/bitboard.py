"""Bitboards as plain 64-bit integers; bit n stands for square n (a8 is 0)."""

from __future__ import annotations

from collections.abc import Iterator

FULL = 0xFFFFFFFFFFFFFFFF
EMPTY = 0
MASK_A = 0x0101010101010101
MASK_H = 0x8080808080808080
_NOT_A = FULL & ~MASK_A
_NOT_H = FULL & ~MASK_H


def from_square(square: int) -> int:
    """Return a bitboard holding the single given square."""
    return 1 << square


def rank_mask(rank: int) -> int:
    """Return the mask of a rank, 1 to 8."""
    if not 1 <= rank <= 8:
        raise ValueError(f"rank out of range: {rank}")
    return 0xFF << (8 * (8 - rank))


def north(bb: int) -> int:
    return bb >> 8


def south(bb: int) -> int:
    return (bb << 8) & FULL


def east(bb: int) -> int:
    return (bb << 1) & _NOT_A


def west(bb: int) -> int:
    return (bb >> 1) & _NOT_H


def north_east(bb: int) -> int:
    return (bb >> 7) & _NOT_A


def north_west(bb: int) -> int:
    return (bb >> 9) & _NOT_H


def south_east(bb: int) -> int:
    return (bb << 9) & _NOT_A


def south_west(bb: int) -> int:
    return (bb << 7) & _NOT_H


def lsb_index(bb: int) -> int:
    """Return the index of the lowest set bit, or 64 for an empty board."""
    if bb == 0:
        return 64
    return (bb & -bb).bit_length() - 1


def iter_squares(bb: int) -> Iterator[int]:
    """Yield the set squares from lowest to highest."""
    while bb:
        low = bb & -bb
        yield low.bit_length() - 1
        bb ^= low


def count(bb: int) -> int:
    """Return the number of set squares."""
    return bin(bb).count("1")


def has_square(bb: int, square: int) -> bool:
    return bool(bb >> square & 1)


def set_square(bb: int, square: int) -> int:
    return bb | (1 << square)


def clear_square(bb: int, square: int) -> int:
    return bb & ~(1 << square)


def subsets(bb: int) -> list[int]:
    """Return every subset of the set bits, starting with the empty set."""
    result = []
    subset = 0
    while True:
        result.append(subset)
        subset = (subset - bb) & bb
        if subset == 0:
            return result