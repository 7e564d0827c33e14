from knightbot.move import Move
from knightbot.piece import PieceType


def test_default_move_is_null():
    move = Move()
    assert move.is_null()
    assert move.promotion is PieceType.NULL


def test_real_move_is_not_null():
    assert Move(52, 36).is_null() is False


def test_promotion_participates_in_equality():
    assert Move(12, 4, PieceType.QUEEN) == Move(12, 4, PieceType.QUEEN)
    assert Move(12, 4, PieceType.QUEEN) != Move(12, 4, PieceType.KNIGHT)
    assert Move(12, 4, PieceType.QUEEN) != Move(12, 4)


def test_moves_are_hashable():
    moves = {Move(1, 2), Move(1, 2), Move(2, 1)}
    assert len(moves) == 2