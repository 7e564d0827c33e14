"""Move ordering: score legal moves and hand them out best first."""

from __future__ import annotations

from knightbot.evaluator import piece_value
from knightbot.move import Move
from knightbot.movegen import generate_legal
from knightbot.piece import PieceType

INT32_MAX = 2**31 - 1
KILLER_SCORE = INT32_MAX // 2


def score_move(position, killer_moves, history, hashed_move, depth, move) -> int:
    """Return the ordering score of a move; higher scores are tried first.

    The hashed move comes first, then promotions and captures (most valuable
    victim, least valuable attacker), then killer moves, then history scores.
    """
    if move == hashed_move:
        return INT32_MAX
    to_move = position.piece_at(move.start)
    captured = position.piece_at(move.target)
    if move.promotion is not PieceType.NULL:
        return KILLER_SCORE + 1000 + piece_value(move.promotion) - 100
    if captured:
        return KILLER_SCORE + 1000 + piece_value(captured.type) - piece_value(to_move.type)
    if move in killer_moves[depth]:
        return KILLER_SCORE
    return history[position.turn()][move.start][move.target]


class SortedMoves:
    """The legal moves of a position, yielded in order of decreasing score.

    Sorting is lazy: each step picks the best remaining move. The attribute
    in_check tells whether the side to move is in check.
    """

    def __init__(
        self,
        position,
        killer_moves,
        history,
        hashed_move: Move = Move(),
        depth: int = 0,
        only_captures: bool = False,
    ) -> None:
        self._moves, self.in_check = generate_legal(position, only_captures)
        self._scores = [
            score_move(position, killer_moves, history, hashed_move, depth, move)
            for move in self._moves
        ]
        self._index = 0

    def __iter__(self) -> SortedMoves:
        return self

    def __next__(self) -> Move:
        index = self._index
        if index >= len(self._moves):
            raise StopIteration
        best = max(range(index, len(self._moves)), key=self._scores.__getitem__)
        moves, scores = self._moves, self._scores
        moves[index], moves[best] = moves[best], moves[index]
        scores[best] = scores[index]
        self._index = index + 1
        return moves[index]

    def __len__(self) -> int:
        return len(self._moves)