from knightbot.piece import Piece, PieceColor, PieceType


def test_piece_type_ordering_matches_engine_indices():
    assert [PieceType(i) for i in range(7)] == [
        PieceType.PAWN,
        PieceType.BISHOP,
        PieceType.KNIGHT,
        PieceType.ROOK,
        PieceType.QUEEN,
        PieceType.KING,
        PieceType.NULL,
    ]


def test_opposite_colour():
    assert PieceColor.WHITE.opposite() is PieceColor.BLACK
    assert PieceColor.BLACK.opposite() is PieceColor.WHITE


def test_opposite_is_an_involution():
    assert PieceColor.WHITE.opposite().opposite() is PieceColor.WHITE
    assert PieceColor.BLACK.opposite().opposite() is PieceColor.BLACK


def test_default_piece_is_empty():
    piece = Piece()
    assert not piece
    assert piece.type is PieceType.NULL
    assert piece.color is PieceColor.WHITE


def test_only_null_pieces_are_falsy():
    for color in PieceColor:
        truthiness = [bool(Piece(piece_type, color)) for piece_type in PieceType]
        assert truthiness == [True, True, True, True, True, True, False]


def test_pieces_compare_by_value():
    assert Piece(PieceType.KING, PieceColor.BLACK) == Piece(PieceType.KING, PieceColor.BLACK)
    assert Piece(PieceType.KING, PieceColor.BLACK) != Piece(PieceType.KING, PieceColor.WHITE)