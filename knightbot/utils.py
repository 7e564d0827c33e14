"""Board coordinates and conversions between moves, pieces and text."""

from __future__ import annotations

from dataclasses import dataclass

from knightbot.bitboard import has_square
from knightbot.move import Move
from knightbot.piece import Piece, PieceColor, PieceType
from knightbot.squares import square_name

_PIECE_CHARS = {
    PieceType.PAWN: "p",
    PieceType.BISHOP: "b",
    PieceType.KNIGHT: "n",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_CHAR_PIECES = {char: piece_type for piece_type, char in _PIECE_CHARS.items()}


@dataclass(frozen=True)
class Coordinate:
    """A (row, col) pair; row 0 is rank 8. May lie off the board."""

    row: int
    col: int

    @classmethod
    def from_square(cls, square: int) -> Coordinate:
        return cls(square // 8, square % 8)

    def to_square(self) -> int:
        return self.row * 8 + self.col

    def in_bounds(self) -> bool:
        return 0 <= self.row < 8 and 0 <= self.col < 8

    def __add__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.row + other.row, self.col + other.col)

    def __sub__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.row - other.row, self.col - other.col)


KNIGHT_DIRECTIONS = tuple(
    Coordinate(r, c)
    for r, c in ((-2, -1), (-2, 1), (2, -1), (2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2))
)

# Orthogonal directions first (indices 0-3), then diagonal ones (4-7).
SLIDING_DIRECTIONS = tuple(
    Coordinate(r, c)
    for r, c in ((-1, 0), (0, 1), (1, 0), (0, -1), (-1, 1), (1, 1), (1, -1), (-1, -1))
)


def move_to_str(move: Move) -> str:
    """Return the start and target squares of a move, such as "e2e4"."""
    return square_name(move.start) + square_name(move.target)


def _parse_square(file_char: str, rank_char: str) -> int:
    col = ord(file_char) - ord("a")
    row = 7 - (ord(rank_char) - ord("1"))
    if not (0 <= col < 8 and 0 <= row < 8):
        raise ValueError(f"invalid square: {file_char}{rank_char}")
    return row * 8 + col


def str_to_move(text: str) -> Move:
    """Parse a move in coordinate notation, such as "e7e8q"."""
    if len(text) < 4:
        raise ValueError(f"move too short: {text!r}")
    start = _parse_square(text[0], text[1])
    target = _parse_square(text[2], text[3])
    promotion = char_to_piece_type(text[4]) if len(text) > 4 else PieceType.NULL
    return Move(start, target, promotion)


def piece_to_char(piece: Piece) -> str:
    """Return the FEN letter of a piece, upper case for white, "?" if empty."""
    char = _PIECE_CHARS.get(piece.type)
    if char is None:
        return "?"
    return char.upper() if piece.color is PieceColor.WHITE else char


def char_to_piece_type(char: str) -> PieceType:
    """Return the piece type for a letter of either case, NULL if unknown."""
    return _CHAR_PIECES.get(char.lower(), PieceType.NULL)


def bitboard_to_str(bb: int) -> str:
    """Render a bitboard as eight rows of 0s and 1s, rank 8 first."""
    rows = []
    for row in range(8):
        cells = ("1" if has_square(bb, row * 8 + col) else "0" for col in range(8))
        rows.append(" ".join(cells) + "\n")
    return "".join(rows)


def split(text: str, delimiter: str = " ") -> list[str]:
    """Split on every delimiter, keeping empty fields; "" gives []."""
    if not text:
        return []
    return text.split(delimiter)


def position_to_str(position) -> str:
    """Render the pieces of a position, rank 8 first, one letter per square."""
    lines = []
    for row in range(8):
        lines.append(
            "".join(piece_to_char(position.piece_at(row * 8 + col)) + " " for col in range(8))
            + "\n"
        )
    return "".join(lines)