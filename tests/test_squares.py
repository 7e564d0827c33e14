import pytest

from knightbot.squares import File, Square, square_name


def test_corner_squares():
    assert square_name(Square.A8) == "a8"
    assert square_name(Square.H8) == "h8"
    assert square_name(Square.A1) == "a1"
    assert square_name(Square.H1) == "h1"
    assert Square(0xFF) is Square.INVALID


def test_square_members_cover_board():
    names = [square_name(Square(i)) for i in range(64)]
    assert names[:8] == [f + "8" for f in "abcdefgh"]
    assert names[56:] == [f + "1" for f in "abcdefgh"]
    assert len(set(names)) == 64


def test_square_name_matches_enum_names():
    for square in Square:
        if square is Square.INVALID:
            continue
        assert square_name(square) == square.name.lower()


def test_files():
    for square in range(64):
        assert File(square % 8).name.lower() == square_name(square)[0]


@pytest.mark.parametrize("bad", [-1, 64, 0xFF])
def test_square_name_rejects_out_of_range(bad):
    with pytest.raises(ValueError):
        square_name(bad)