"""Iterative-deepening alpha-beta search with a time limit."""

from __future__ import annotations

import time

from knightbot.evaluator import evaluate
from knightbot.move import Move
from knightbot.sorting import KILLER_SCORE, SortedMoves
from knightbot.transposition import Bound, TranspositionTable

MAX_DEPTH = 64
POS_INFINITY = 1_000_000_000
NEG_INFINITY = -POS_INFINITY


def _empty_killers() -> list[list[Move]]:
    return [[Move(), Move()] for _ in range(MAX_DEPTH)]


def _empty_history() -> list[list[list[int]]]:
    return [[[0] * 64 for _ in range(64)] for _ in range(2)]


class Searcher:
    """Finds a move for a position within a given thinking time."""

    def __init__(self, table_size: int = 1 << 20) -> None:
        self._table = TranspositionTable(table_size)
        self._killers = _empty_killers()
        self._history = _empty_history()
        self._deadline = 0.0
        self.nodes = 0
        self.transpositions = 0

    def _time_up(self) -> bool:
        return time.monotonic() >= self._deadline

    def _quiescence(self, position, alpha: int, beta: int) -> int:
        score = evaluate(position)
        if score >= beta:
            return beta
        alpha = max(alpha, score)
        for move in SortedMoves(position, self._killers, self._history, Move(), 0, True):
            position.make_move(move)
            score = -self._quiescence(position, -beta, -alpha)
            position.unmake_move(move)
            if score >= beta:
                return beta
            alpha = max(alpha, score)
        return alpha

    def _record_cutoff(self, position, move: Move, depth: int) -> None:
        killers = self._killers[depth]
        killers[1] = killers[0]
        killers[0] = move
        row = self._history[position.turn()][move.start]
        row[move.target] += depth * depth
        if row[move.target] >= KILLER_SCORE:
            row[move.target] //= 2

    def _search(self, position, depth: int, ply: int, alpha: int, beta: int, is_pv: bool) -> int:
        if self._time_up():
            return 0
        self.nodes += 1
        if position.has_repeated_threefold():
            return 0
        if depth == 0:
            return self._quiescence(position, alpha, beta)

        hashed_score = self._table.probe_score(position, depth, ply, alpha, beta)
        if hashed_score is not None:
            self.transpositions += 1
            return hashed_score

        hashed_move = self._table.probe_move(position)
        moves = SortedMoves(position, self._killers, self._history, hashed_move, depth)
        if len(moves) == 0:
            return -(POS_INFINITY - ply) if moves.in_check else 0

        flag = Bound.UPPER
        choice = Move()
        for move in moves:
            position.make_move(move)
            if is_pv and flag is Bound.EXACT:
                score = -self._search(position, depth - 1, ply + 1, -alpha - 1, -alpha, False)
                if score > alpha:
                    score = -self._search(position, depth - 1, ply + 1, -beta, -alpha, True)
            else:
                score = -self._search(position, depth - 1, ply + 1, -beta, -alpha, is_pv)
            position.unmake_move(move)

            if self._time_up():
                return 0
            if score > alpha:
                alpha = score
                choice = move
                flag = Bound.EXACT
            if score >= beta:
                self._table.store(position, move, depth, beta, Bound.LOWER)
                if not position.piece_at(move.target):
                    self._record_cutoff(position, move, depth)
                return beta

        self._table.store(position, choice, depth, alpha, flag)
        return alpha

    def _root_search(self, position, depth: int) -> tuple[Move, int]:
        lowest = NEG_INFINITY - MAX_DEPTH
        alpha = lowest
        beta = POS_INFINITY + MAX_DEPTH
        choice = Move()

        hashed_move = self._table.probe_move(position)
        for move in SortedMoves(position, self._killers, self._history, hashed_move, depth):
            position.make_move(move)
            if alpha == lowest:
                score = -self._search(position, depth - 1, 0, -beta, -alpha, True)
            else:
                score = -self._search(position, depth - 1, 0, -alpha - 1, -alpha, False)
                if score > alpha:
                    score = -self._search(position, depth - 1, 0, -beta, -alpha, True)
            position.unmake_move(move)

            if self._time_up():
                return Move(), 0
            if score > alpha:
                alpha = score
                choice = move
                self._table.store(position, choice, depth, alpha, Bound.LOWER)

        self._table.store(position, choice, depth, alpha, Bound.EXACT)
        return choice, alpha

    def get_move(self, position, think_milliseconds: int = 1000) -> Move:
        """Return the best move found in the time given; the null move if none.

        The position passed in is left untouched.
        """
        self._deadline = time.monotonic() + think_milliseconds / 1000
        clone = position.copy()
        choice = Move()
        for depth in range(1, MAX_DEPTH):
            move, _ = self._root_search(clone, depth)
            if self._time_up() or move.is_null():
                break
            choice = move

        self._killers = _empty_killers()
        self._history = _empty_history()
        self.nodes = 0
        self.transpositions = 0
        return choice