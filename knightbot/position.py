"""Board state: pieces, side to move, castling, en passant and move history."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

from knightbot.bitboard import EMPTY, from_square, lsb_index
from knightbot.move import Move
from knightbot.piece import Piece, PieceColor, PieceType
from knightbot.squares import Square
from knightbot.utils import char_to_piece_type, split
from knightbot.zobrist import Zobrist

_DEFAULT_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
_DIGITS = "0123456789"
_EMPTY_PIECE = Piece()


class CastlingRights(IntFlag):
    """Castling rights held by each side."""

    NONE = 0
    WHITE_KINGSIDE = 0b1
    WHITE_QUEENSIDE = 0b10
    BLACK_KINGSIDE = 0b100
    BLACK_QUEENSIDE = 0b1000


_CASTLING_CHARS = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}

_KINGSIDE = {
    PieceColor.WHITE: CastlingRights.WHITE_KINGSIDE,
    PieceColor.BLACK: CastlingRights.BLACK_KINGSIDE,
}
_QUEENSIDE = {
    PieceColor.WHITE: CastlingRights.WHITE_QUEENSIDE,
    PieceColor.BLACK: CastlingRights.BLACK_QUEENSIDE,
}

# Moving from or capturing on one of these squares loses the matching right.
_ROOK_CORNERS = (
    (Square.H1, CastlingRights.WHITE_KINGSIDE),
    (Square.A1, CastlingRights.WHITE_QUEENSIDE),
    (Square.H8, CastlingRights.BLACK_KINGSIDE),
    (Square.A8, CastlingRights.BLACK_QUEENSIDE),
)


class FenError(ValueError):
    """Raised when a FEN string cannot be parsed."""


@dataclass
class _State:
    castling: int = 0
    en_passant: int = int(Square.INVALID)
    half_move_clock: int = 0
    hash: Zobrist = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.hash is None:
            self.hash = Zobrist()

    def copy(self) -> _State:
        return _State(self.castling, self.en_passant, self.half_move_clock, self.hash.copy())


@dataclass(frozen=True)
class _Undo:
    state: _State
    captured: Piece


class Position:
    """A chess position that supports making and unmaking moves."""

    INVALID_SQUARE = int(Square.INVALID)

    def __init__(self) -> None:
        self._bitboards = [[EMPTY, EMPTY] for _ in range(6)]
        self._color_bitboards = [EMPTY, EMPTY]
        self._turn = PieceColor.WHITE
        self._pieces = [_EMPTY_PIECE] * 64
        self._state = _State()
        self._ply = 0
        self._history: list[_Undo] = []

    # construction

    @classmethod
    def from_fen(cls, fen: str) -> Position:
        """Parse a FEN string; "startpos" gives the initial position."""
        if fen == "startpos":
            return cls.default()

        position = cls()
        fields = split(fen)
        if len(fields) != 6:
            raise FenError("Invalid FEN piece placement")

        row = col = 0
        for char in fields[0]:
            if char == "/" and col == 8:
                row += 1
                col = 0
            elif row >= 8 or col >= 8:
                raise FenError("Invalid FEN piece placement")
            elif (piece_type := char_to_piece_type(char)) is not PieceType.NULL:
                color = PieceColor.WHITE if char.isupper() else PieceColor.BLACK
                position._add_piece(piece_type, color, row * 8 + col)
                col += 1
            elif char in _DIGITS:
                col += int(char)
            else:
                raise FenError("Invalid FEN piece placement")

        if fields[1] == "w":
            position._turn = PieceColor.WHITE
        elif fields[1] == "b":
            position._turn = PieceColor.BLACK
        else:
            raise FenError("Invalid FEN active color")

        if fields[2] != "-":
            for char in fields[2]:
                right = _CASTLING_CHARS.get(char)
                if right is None:
                    raise FenError("Invalid FEN castling rights")
                position._state.castling |= right

        en_passant = fields[3]
        if len(en_passant) == 2:
            file = ord(en_passant[0]) - ord("a")
            rank = ord(en_passant[1]) - ord("0")
            if not (1 <= rank < 8 and 0 <= file < 8):
                raise FenError("Invalid FEN en passant target")
            position._state.en_passant = 8 * (8 - rank) + file
        elif en_passant != "-":
            raise FenError("Invalid FEN en passant target")

        position._state.hash = Zobrist.from_position(position)
        return position

    @classmethod
    def default(cls) -> Position:
        """Return the standard starting position."""
        return cls.from_fen(_DEFAULT_FEN)

    def copy(self) -> Position:
        """Return an independent copy, history included."""
        clone = Position.__new__(Position)
        clone._bitboards = [list(pair) for pair in self._bitboards]
        clone._color_bitboards = list(self._color_bitboards)
        clone._turn = self._turn
        clone._pieces = list(self._pieces)
        clone._state = self._state.copy()
        clone._ply = self._ply
        clone._history = list(self._history)
        return clone

    # queries

    def bitboard(self, piece_type: PieceType, color: PieceColor) -> int:
        return self._bitboards[piece_type][color]

    def friendly_pieces(self, piece_type: PieceType) -> int:
        return self._bitboards[piece_type][self._turn]

    def opponent_pieces(self, piece_type: PieceType) -> int:
        return self._bitboards[piece_type][self.opposite_turn()]

    def piece_at(self, square: int) -> Piece:
        return self._pieces[square]

    def turn(self) -> PieceColor:
        return self._turn

    def opposite_turn(self) -> PieceColor:
        return self._turn.opposite()

    def occupied(self) -> int:
        return self._color_bitboards[0] | self._color_bitboards[1]

    def friendly(self) -> int:
        return self._color_bitboards[self._turn]

    def opponent(self) -> int:
        return self._color_bitboards[self.opposite_turn()]

    def friendly_orthogonal(self) -> int:
        return self.friendly_pieces(PieceType.ROOK) | self.friendly_pieces(PieceType.QUEEN)

    def opponent_orthogonal(self) -> int:
        return self.opponent_pieces(PieceType.ROOK) | self.opponent_pieces(PieceType.QUEEN)

    def friendly_diagonal(self) -> int:
        return self.friendly_pieces(PieceType.BISHOP) | self.friendly_pieces(PieceType.QUEEN)

    def opponent_diagonal(self) -> int:
        return self.opponent_pieces(PieceType.BISHOP) | self.opponent_pieces(PieceType.QUEEN)

    def friendly_king_square(self) -> int:
        return lsb_index(self.friendly_pieces(PieceType.KING))

    def opponent_king_square(self) -> int:
        return lsb_index(self.opponent_pieces(PieceType.KING))

    def en_passant_target(self) -> int:
        """Return the en passant target square, or INVALID_SQUARE."""
        return self._state.en_passant

    def en_passant_bitboard(self) -> int:
        if self._state.en_passant == self.INVALID_SQUARE:
            return EMPTY
        return from_square(self._state.en_passant)

    def can_en_passant(self) -> bool:
        return self._state.en_passant != self.INVALID_SQUARE

    def castling_flags(self) -> CastlingRights:
        return CastlingRights(self._state.castling)

    def zobrist(self) -> Zobrist:
        return self._state.hash.copy()

    def can_castle_kingside(self) -> bool:
        return bool(self._state.castling & _KINGSIDE[self._turn])

    def can_castle_queenside(self) -> bool:
        return bool(self._state.castling & _QUEENSIDE[self._turn])

    # board editing

    def _add_piece(self, piece_type: PieceType, color: PieceColor, square: int) -> None:
        bit = 1 << square
        self._bitboards[piece_type][color] |= bit
        self._color_bitboards[color] |= bit
        self._pieces[square] = Piece(piece_type, color)

    def _remove_piece(self, piece_type: PieceType, color: PieceColor, square: int) -> None:
        bit = ~(1 << square)
        self._bitboards[piece_type][color] &= bit
        self._color_bitboards[color] &= bit
        self._pieces[square] = _EMPTY_PIECE

    def _move_piece(self, piece_type: PieceType, color: PieceColor, src: int, dst: int) -> None:
        self._remove_piece(piece_type, color, src)
        self._add_piece(piece_type, color, dst)

    def _add_hashed(self, piece_type: PieceType, color: PieceColor, square: int) -> None:
        self._add_piece(piece_type, color, square)
        self._state.hash.toggle_piece(piece_type, color, square)

    def _remove_hashed(self, piece_type: PieceType, color: PieceColor, square: int) -> None:
        self._remove_piece(piece_type, color, square)
        self._state.hash.toggle_piece(piece_type, color, square)

    def _move_hashed(self, piece_type: PieceType, color: PieceColor, src: int, dst: int) -> None:
        self._move_piece(piece_type, color, src, dst)
        self._state.hash.toggle_piece(piece_type, color, src)
        self._state.hash.toggle_piece(piece_type, color, dst)

    # moves

    def make_move(self, move: Move) -> None:
        """Play a move, which is assumed to be legal, and switch sides."""
        to_move = self._pieces[move.start]
        if not to_move:
            raise ValueError(f"no piece on start square {move.start}")
        captured = self._pieces[move.target]
        state = self._state
        turn = self._turn
        self._history.append(_Undo(state.copy(), captured))

        self._ply += 1
        state.half_move_clock += 1
        state.hash.toggle_castling_flags(state.castling)

        if captured:
            self._remove_hashed(captured.type, captured.color, move.target)
        if captured or to_move.type is PieceType.PAWN:
            state.half_move_clock = 0

        self._move_hashed(to_move.type, to_move.color, move.start, move.target)

        if to_move.type is PieceType.KING:
            if move.target - move.start == 2:
                self._move_hashed(PieceType.ROOK, turn, move.start + 3, move.start + 1)
            if move.start - move.target == 2:
                self._move_hashed(PieceType.ROOK, turn, move.start - 4, move.start - 1)
            state.castling &= ~(_KINGSIDE[turn] | _QUEENSIDE[turn])

        if to_move.type is PieceType.PAWN and move.target == state.en_passant:
            offset = 8 if turn is PieceColor.WHITE else -8
            self._remove_hashed(PieceType.PAWN, turn.opposite(), state.en_passant + offset)

        if state.en_passant != self.INVALID_SQUARE:
            state.hash.toggle_en_passant_file(state.en_passant % 8)
        if to_move.type is PieceType.PAWN and abs(move.start - move.target) == 16:
            state.hash.toggle_en_passant_file(move.start % 8)
            state.en_passant = move.start + (-8 if turn is PieceColor.WHITE else 8)
        else:
            state.en_passant = self.INVALID_SQUARE

        if move.promotion is not PieceType.NULL:
            self._remove_hashed(PieceType.PAWN, turn, move.target)
            self._add_hashed(move.promotion, turn, move.target)

        for corner, right in _ROOK_CORNERS:
            if corner in (move.start, move.target):
                state.castling &= ~right

        state.hash.toggle_castling_flags(state.castling)
        state.hash.toggle_side()
        self._turn = turn.opposite()

    def unmake_move(self, move: Move) -> None:
        """Take back the last move played, which must be the one given."""
        if not self._history:
            raise IndexError("no move to unmake")
        undo = self._history.pop()
        self._state = undo.state.copy()
        self._turn = self.opposite_turn()
        self._ply -= 1

        moved = self._pieces[move.target]
        moved_type = moved.type if move.promotion is PieceType.NULL else PieceType.PAWN

        self._add_piece(moved_type, moved.color, move.start)
        self._remove_piece(moved.type, moved.color, move.target)
        if undo.captured:
            self._add_piece(undo.captured.type, undo.captured.color, move.target)

        en_passant = self._state.en_passant
        if move.target == en_passant and moved_type is PieceType.PAWN:
            offset = 8 if moved.color is PieceColor.WHITE else -8
            self._add_piece(PieceType.PAWN, self.opposite_turn(), en_passant + offset)

        if moved.type is PieceType.KING:
            if move.target - move.start == 2:
                self._move_piece(PieceType.ROOK, self._turn, move.start + 1, move.start + 3)
            elif move.start - move.target == 2:
                self._move_piece(PieceType.ROOK, self._turn, move.start - 1, move.start - 4)

    def has_repeated_threefold(self) -> bool:
        """Return True if this position occurred twice before since the last reset."""
        start_ply = max(self._ply - self._state.half_move_clock - 1, 0)
        current = self._state.hash
        repetitions = 1 + sum(
            1
            for i in range(len(self._history) - 2, start_ply - 1, -2)
            if self._history[i].state.hash == current
        )
        return repetitions >= 3