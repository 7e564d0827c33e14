"""A move from one square to another, with an optional promotion."""

from __future__ import annotations

from dataclasses import dataclass

from knightbot.piece import PieceType


@dataclass(frozen=True)
class Move:
    """A move; the default value (a8 to a8, no promotion) means "no move"."""

    start: int = 0
    target: int = 0
    promotion: PieceType = PieceType.NULL

    def is_null(self) -> bool:
        """Return True for the default, empty move."""
        return self == Move()