import random

import pytest

from knightbot.attacks import (
    between,
    bishop_moves,
    king_moves,
    knight_moves,
    line,
    queen_moves,
    relevant_mask,
    rook_moves,
    sliding_moves,
)
from knightbot.bitboard import FULL, count, from_square, has_square
from knightbot.squares import Square


@pytest.mark.parametrize(
    "square, rook, expected",
    [
        (1, True, 565157600297596),
        (63, True, 9115426935197958144),
        (0, False, 18049651735527936),
        (27, False, 18051867805491712),
    ],
)
def test_relevant_mask_matches_reference_masks(square, rook, expected):
    assert relevant_mask(square, rook) == expected


@pytest.mark.parametrize(
    "square, rook, shifts",
    [(0, True, 52), (9, True, 54), (8, True, 53), (0, False, 58), (27, False, 55), (18, False, 57)],
)
def test_relevant_mask_sizes_match_reference_shifts(square, rook, shifts):
    assert count(relevant_mask(square, rook)) == 64 - shifts


def test_rook_on_empty_board_reaches_fourteen_squares():
    assert {count(rook_moves(sq, 0)) for sq in range(64)} == {14}


def test_rook_in_corner_of_full_board():
    assert rook_moves(Square.A8, FULL) == from_square(Square.A7) | from_square(Square.B8)


def test_sliding_stops_at_blocker_and_includes_it():
    moves = sliding_moves(Square.A1, from_square(Square.A4), True)
    assert has_square(moves, Square.A4)
    assert not has_square(moves, Square.A5)
    assert has_square(moves, Square.H1)


def test_lookup_agrees_with_direct_computation():
    rng = random.Random(7)
    for _ in range(200):
        square = rng.randrange(64)
        occupied = rng.getrandbits(64) & rng.getrandbits(64)
        assert rook_moves(square, occupied) == sliding_moves(square, occupied, True)
        assert bishop_moves(square, occupied) == sliding_moves(square, occupied, False)


def test_queen_is_union_of_rook_and_bishop():
    occupied = from_square(Square.D6) | from_square(Square.F4)
    assert queen_moves(Square.D4, occupied) == rook_moves(Square.D4, occupied) | bishop_moves(
        Square.D4, occupied
    )


def test_knight_moves():
    assert knight_moves(Square.A8) == from_square(Square.B6) | from_square(Square.C7)
    assert count(knight_moves(Square.D4)) == 8


def test_king_moves_are_symmetric():
    for a in range(64):
        for b in range(64):
            assert has_square(king_moves(a), b) == has_square(king_moves(b), a)


def test_between_includes_target_only():
    ray = between(Square.A1, Square.A8)
    assert has_square(ray, Square.A8)
    assert not has_square(ray, Square.A1)
    assert ray == rook_moves(Square.A1, FULL & ~ray | from_square(Square.A8)) & line(
        Square.A1, Square.A8
    )


def test_between_unaligned_is_empty():
    assert between(Square.A1, Square.B3) == 0


def test_line_is_symmetric_and_contains_both_ends():
    assert line(Square.A1, Square.H8) == line(Square.H8, Square.A1)
    full_line = line(Square.C3, Square.E5)
    assert has_square(full_line, Square.C3) and has_square(full_line, Square.E5)
    assert full_line == line(Square.A1, Square.H8)


def test_line_to_self_is_empty():
    assert all(line(sq, sq) == 0 for sq in range(64))


def test_between_lies_on_line():
    for src in range(64):
        for dst in range(64):
            ray = between(src, dst)
            assert ray & ~line(src, dst) == 0