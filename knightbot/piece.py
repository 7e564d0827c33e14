"""Piece types, colours and the piece value that occupies a square."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class PieceType(IntEnum):
    """Kind of a chess piece; NULL marks an empty square or no promotion."""

    PAWN = 0
    BISHOP = 1
    KNIGHT = 2
    ROOK = 3
    QUEEN = 4
    KING = 5
    NULL = 6


class PieceColor(IntEnum):
    """Side a piece belongs to."""

    WHITE = 0
    BLACK = 1

    def opposite(self) -> PieceColor:
        """Return the other side."""
        return PieceColor(self ^ 1)


@dataclass(frozen=True)
class Piece:
    """A piece on a square; the default value is an empty square."""

    type: PieceType = PieceType.NULL
    color: PieceColor = PieceColor.WHITE

    def __bool__(self) -> bool:
        return self.type is not PieceType.NULL