"""Static evaluation of a position from the side to move's point of view."""

from __future__ import annotations

from knightbot.bitboard import iter_squares
from knightbot.piece import PieceColor, PieceType
from knightbot.piece_tables import table_value

_PIECE_VALUES = {
    PieceType.PAWN: 100,
    PieceType.BISHOP: 310,
    PieceType.KNIGHT: 300,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 800,
    PieceType.KING: 0,
    PieceType.NULL: 0,
}

_REAL_TYPES = tuple(t for t in PieceType if t is not PieceType.NULL)


def piece_value(piece_type: PieceType) -> int:
    """Return the material value of a piece type in centipawns."""
    return _PIECE_VALUES[piece_type]


def evaluate_pieces(piece_type: PieceType, color: PieceColor, bb: int) -> int:
    """Return material plus positional score for every piece in a bitboard."""
    value = piece_value(piece_type)
    return sum(value + table_value(piece_type, color, sq) for sq in iter_squares(bb))


def evaluate(position) -> int:
    """Score a position: positive favours the side to move."""
    own = position.turn()
    other = position.opposite_turn()
    score = sum(
        evaluate_pieces(t, own, position.bitboard(t, own)) for t in _REAL_TYPES
    )
    score -= sum(
        evaluate_pieces(t, other, position.bitboard(t, other)) for t in _REAL_TYPES
    )
    return score