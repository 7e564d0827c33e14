"""Zobrist hashing of positions."""

from __future__ import annotations

import random
from dataclasses import dataclass

from knightbot.bitboard import iter_squares
from knightbot.piece import PieceColor, PieceType

_PIECE_OFFSET = 0
_BLACK_TO_MOVE_OFFSET = _PIECE_OFFSET + 64 * 12
_CASTLING_FLAGS_OFFSET = _BLACK_TO_MOVE_OFFSET + 1
_EN_PASSANT_FILE_OFFSET = _CASTLING_FLAGS_OFFSET + 16
_KEY_COUNT = _EN_PASSANT_FILE_OFFSET + 8

_rng = random.Random(1)
_KEYS = tuple(_rng.getrandbits(64) for _ in range(_KEY_COUNT))
del _rng

_REAL_TYPES = tuple(t for t in PieceType if t is not PieceType.NULL)


def _piece_key(piece_type: PieceType, color: PieceColor, square: int) -> int:
    return _KEYS[_PIECE_OFFSET + square * 12 + int(color) * 6 + int(piece_type)]


def _castling_key(flags: int) -> int:
    return _KEYS[_CASTLING_FLAGS_OFFSET + flags]


def _en_passant_key(file: int) -> int:
    return _KEYS[_EN_PASSANT_FILE_OFFSET + file]


@dataclass
class Zobrist:
    """A 64-bit position hash that is updated incrementally."""

    value: int = 0

    @classmethod
    def from_position(cls, position) -> Zobrist:
        """Compute the hash of a position from scratch."""
        value = 0
        for piece_type in _REAL_TYPES:
            for color in PieceColor:
                for square in iter_squares(position.bitboard(piece_type, color)):
                    value ^= _piece_key(piece_type, color, square)
        if position.can_en_passant():
            value ^= _en_passant_key(position.en_passant_target() % 8)
        if position.turn() is PieceColor.BLACK:
            value ^= _KEYS[_BLACK_TO_MOVE_OFFSET]
        value ^= _castling_key(position.castling_flags())
        return cls(value)

    def toggle_piece(self, piece_type: PieceType, color: PieceColor, square: int) -> None:
        self.value ^= _piece_key(piece_type, color, square)

    def toggle_side(self) -> None:
        self.value ^= _KEYS[_BLACK_TO_MOVE_OFFSET]

    def toggle_castling_flags(self, flags: int) -> None:
        self.value ^= _castling_key(flags)

    def toggle_en_passant_file(self, file: int) -> None:
        self.value ^= _en_passant_key(file)

    def copy(self) -> Zobrist:
        return Zobrist(self.value)

    def __int__(self) -> int:
        return self.value