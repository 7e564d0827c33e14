"""Square and file names on the 0..63 board, a8 being 0 and h1 being 63."""

from __future__ import annotations

from enum import IntEnum

_FILES = "abcdefgh"


class Square(IntEnum):
    """Board squares; rank 8 comes first."""

    A8, B8, C8, D8, E8, F8, G8, H8 = range(0, 8)
    A7, B7, C7, D7, E7, F7, G7, H7 = range(8, 16)
    A6, B6, C6, D6, E6, F6, G6, H6 = range(16, 24)
    A5, B5, C5, D5, E5, F5, G5, H5 = range(24, 32)
    A4, B4, C4, D4, E4, F4, G4, H4 = range(32, 40)
    A3, B3, C3, D3, E3, F3, G3, H3 = range(40, 48)
    A2, B2, C2, D2, E2, F2, G2, H2 = range(48, 56)
    A1, B1, C1, D1, E1, F1, G1, H1 = range(56, 64)
    INVALID = 0xFF


class File(IntEnum):
    """Board files, a to h."""

    A, B, C, D, E, F, G, H = range(8)


def square_name(square: int) -> str:
    """Return the algebraic name of a square, such as "e4"."""
    if not 0 <= square < 64:
        raise ValueError(f"square out of range: {square}")
    row, col = divmod(square, 8)
    return f"{_FILES[col]}{8 - row}"