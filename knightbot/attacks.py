"""Precomputed attack sets for every piece and the rays between squares."""

from __future__ import annotations

from functools import lru_cache

from knightbot.bitboard import set_square
from knightbot.utils import KNIGHT_DIRECTIONS, SLIDING_DIRECTIONS, Coordinate

_ROOK_DIRECTIONS = SLIDING_DIRECTIONS[:4]
_BISHOP_DIRECTIONS = SLIDING_DIRECTIONS[4:]


def _directions(rook: bool):
    return _ROOK_DIRECTIONS if rook else _BISHOP_DIRECTIONS


def relevant_mask(square: int, rook: bool) -> int:
    """Return the squares whose occupancy can block a slider, edges excluded."""
    mask = 0
    for step in _directions(rook):
        coord = Coordinate.from_square(square)
        while (coord + step).in_bounds():
            mask = set_square(mask, coord.to_square())
            coord = coord + step
    return mask & ~(1 << square)


def sliding_moves(square: int, blockers: int, rook: bool) -> int:
    """Return slider targets, stopping at (and including) the first blocker."""
    moves = 0
    for step in _directions(rook):
        coord = Coordinate.from_square(square) + step
        while coord.in_bounds():
            bit = 1 << coord.to_square()
            moves |= bit
            if bit & blockers:
                break
            coord = coord + step
    return moves


def _step_moves(square: int, steps) -> int:
    moves = 0
    origin = Coordinate.from_square(square)
    for step in steps:
        coord = origin + step
        if coord.in_bounds():
            moves = set_square(moves, coord.to_square())
    return moves


_ROOK_MASKS = tuple(relevant_mask(sq, True) for sq in range(64))
_BISHOP_MASKS = tuple(relevant_mask(sq, False) for sq in range(64))
_KNIGHT_MOVES = tuple(_step_moves(sq, KNIGHT_DIRECTIONS) for sq in range(64))
_KING_MOVES = tuple(_step_moves(sq, SLIDING_DIRECTIONS) for sq in range(64))


def _build_rays():
    between_table = [[0] * 64 for _ in range(64)]
    line_table = [[0] * 64 for _ in range(64)]
    for square in range(64):
        origin = Coordinate.from_square(square)
        for step in SLIDING_DIRECTIONS:
            ray = 0
            coord = origin + step
            while coord.in_bounds():
                ray = set_square(ray, coord.to_square())
                between_table[square][coord.to_square()] = ray
                coord = coord + step

            board = 1 << square
            visited = []
            for direction in (step, Coordinate(-step.row, -step.col)):
                coord = origin + direction
                while coord.in_bounds():
                    board = set_square(board, coord.to_square())
                    visited.append(coord.to_square())
                    coord = coord + direction
            for dst in visited:
                line_table[square][dst] = board
    return (
        tuple(tuple(row) for row in between_table),
        tuple(tuple(row) for row in line_table),
    )


_BETWEEN, _LINES = _build_rays()


@lru_cache(maxsize=None)
def _cached_sliding(square: int, blockers: int, rook: bool) -> int:
    return sliding_moves(square, blockers, rook)


def rook_moves(square: int, occupied: int) -> int:
    """Return rook targets from a square given the occupied squares."""
    return _cached_sliding(square, occupied & _ROOK_MASKS[square], True)


def bishop_moves(square: int, occupied: int) -> int:
    """Return bishop targets from a square given the occupied squares."""
    return _cached_sliding(square, occupied & _BISHOP_MASKS[square], False)


def queen_moves(square: int, occupied: int) -> int:
    return rook_moves(square, occupied) | bishop_moves(square, occupied)


def knight_moves(square: int) -> int:
    return _KNIGHT_MOVES[square]


def king_moves(square: int) -> int:
    return _KING_MOVES[square]


def between(src: int, dst: int) -> int:
    """Return the ray from src to dst, dst included and src not; 0 if unaligned."""
    return _BETWEEN[src][dst]


def line(src: int, dst: int) -> int:
    """Return the whole board line through src and dst; 0 if unaligned."""
    return _LINES[src][dst]