"""Legal move generation using check masks and pin detection."""

from __future__ import annotations

from knightbot.attacks import (
    between,
    bishop_moves,
    king_moves,
    knight_moves,
    line,
    rook_moves,
)
from knightbot.bitboard import (
    FULL,
    count,
    east,
    from_square,
    has_square,
    iter_squares,
    lsb_index,
    north,
    north_east,
    north_west,
    rank_mask,
    south,
    south_east,
    south_west,
    west,
)
from knightbot.move import Move
from knightbot.piece import PieceColor, PieceType

_PROMOTIONS = (PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK, PieceType.QUEEN)


def _danger_squares(position) -> int:
    """Squares the opponent attacks, seen through the friendly king."""
    occupied = position.occupied() & ~position.friendly_pieces(PieceType.KING)
    dangers = 0
    for square in iter_squares(position.opponent_orthogonal()):
        dangers |= rook_moves(square, occupied)
    for square in iter_squares(position.opponent_diagonal()):
        dangers |= bishop_moves(square, occupied)
    for square in iter_squares(position.opponent_pieces(PieceType.KNIGHT)):
        dangers |= knight_moves(square)

    pawns = position.opponent_pieces(PieceType.PAWN)
    if position.turn() is PieceColor.WHITE:
        dangers |= south_east(pawns) | south_west(pawns)
    else:
        dangers |= north_east(pawns) | north_west(pawns)

    if position.opponent_pieces(PieceType.KING):
        dangers |= king_moves(position.opponent_king_square())
    return dangers


def _attackers(position) -> int:
    """Opponent pieces giving check to the friendly king."""
    king_square = position.friendly_king_square()
    occupied = position.occupied()

    attackers = knight_moves(king_square) & position.opponent_pieces(PieceType.KNIGHT)
    attackers |= rook_moves(king_square, occupied) & position.opponent_orthogonal()
    attackers |= bishop_moves(king_square, occupied) & position.opponent_diagonal()

    pawns = position.opponent_pieces(PieceType.PAWN)
    king = from_square(king_square)
    if position.turn() is PieceColor.WHITE:
        attackers |= (north_east(king) | north_west(king)) & pawns
    else:
        attackers |= (south_east(king) | south_west(king)) & pawns
    return attackers


def _pinned(position) -> int:
    """Friendly pieces pinned against their own king."""
    king_square = position.friendly_king_square()
    occupied = position.occupied()
    friendly = position.friendly()
    pinned = 0

    from_king = rook_moves(king_square, occupied)
    for square in iter_squares(position.opponent_orthogonal()):
        pinned |= rook_moves(square, occupied) & from_king & friendly & line(king_square, square)

    from_king = bishop_moves(king_square, occupied)
    for square in iter_squares(position.opponent_diagonal()):
        pinned |= (
            bishop_moves(square, occupied) & from_king & friendly & line(king_square, square)
        )
    return pinned


def _add_targets(moves: list[Move], targets: int, start: int) -> None:
    moves.extend(Move(start, target) for target in iter_squares(targets))


def _add_king_moves(moves, position, dangers: int, only_captures: bool) -> None:
    king_square = position.friendly_king_square()
    targets = king_moves(king_square) & ~dangers & ~position.friendly()
    if only_captures:
        targets &= position.opponent()
    _add_targets(moves, targets, king_square)


def _add_sliding_moves(moves, position, check_mask: int, pinned: int, only_captures: bool) -> None:
    mask = check_mask & ~position.friendly()
    if only_captures:
        mask &= position.opponent()
    king_square = position.friendly_king_square()
    occupied = position.occupied()

    for pieces, attack in (
        (position.friendly_orthogonal(), rook_moves),
        (position.friendly_diagonal(), bishop_moves),
    ):
        for square in iter_squares(pieces):
            targets = attack(square, occupied) & mask
            if has_square(pinned, square):
                targets &= line(king_square, square)
            _add_targets(moves, targets, square)


def _add_knight_moves(moves, position, check_mask: int, pinned: int, only_captures: bool) -> None:
    mask = check_mask & ~position.friendly()
    if only_captures:
        mask &= position.opponent()
    # A pinned knight can never move.
    knights = position.friendly_pieces(PieceType.KNIGHT) & ~pinned
    for square in iter_squares(knights):
        _add_targets(moves, knight_moves(square) & mask, square)


def _pin_allows(pinned: int, king_square: int, start: int, end: int) -> bool:
    return not has_square(pinned, start) or line(start, king_square) == line(start, end)


def _try_add_pawn_move(moves, pinned: int, king_square: int, start: int, end: int) -> None:
    if _pin_allows(pinned, king_square, start, end):
        moves.append(Move(start, end))


def _try_add_promotions(moves, pinned: int, king_square: int, start: int, end: int) -> None:
    if _pin_allows(pinned, king_square, start, end):
        moves.extend(Move(start, end, promotion) for promotion in _PROMOTIONS)


def _add_pawn_moves(moves, position, check_mask: int, pinned: int, only_captures: bool) -> None:
    pawns = position.friendly_pieces(PieceType.PAWN)
    occupied = position.occupied()
    push_mask = check_mask & ~occupied
    capture_mask = check_mask & position.opponent()
    ep_board = position.en_passant_bitboard()

    if position.turn() is PieceColor.WHITE:
        last_rank = rank_mask(8)
        pushed = north(pawns) & ~occupied
        advance_one = pushed & check_mask & ~last_rank
        promotion_push = pushed & check_mask & last_rank
        advance_two = north(pushed & rank_mask(3)) & push_mask

        right = north_east(pawns) & capture_mask
        left = north_west(pawns) & capture_mask

        ep_reachable = north(south(ep_board) & check_mask)
        ep_left = north_west(pawns) & ep_reachable
        ep_right = north_east(pawns) & ep_reachable
        offset = -8
    else:
        last_rank = rank_mask(1)
        pushed = south(pawns) & ~occupied
        advance_one = pushed & check_mask & ~last_rank
        promotion_push = pushed & check_mask & last_rank
        advance_two = south(pushed & rank_mask(6)) & push_mask

        right = south_east(pawns) & capture_mask
        left = south_west(pawns) & capture_mask

        ep_reachable = south(north(ep_board) & check_mask)
        ep_left = south_west(pawns) & ep_reachable
        ep_right = south_east(pawns) & ep_reachable
        offset = 8

    capture_left = left & ~last_rank
    promotion_left = left & last_rank
    capture_right = right & ~last_rank
    promotion_right = right & last_rank

    king_square = position.friendly_king_square()
    if not only_captures:
        for square in iter_squares(advance_one):
            _try_add_pawn_move(moves, pinned, king_square, square - offset, square)
        for square in iter_squares(advance_two):
            _try_add_pawn_move(moves, pinned, king_square, square - 2 * offset, square)
        for square in iter_squares(promotion_push):
            _try_add_promotions(moves, pinned, king_square, square - offset, square)

    for square in iter_squares(capture_left):
        _try_add_pawn_move(moves, pinned, king_square, square - offset + 1, square)
    for square in iter_squares(capture_right):
        _try_add_pawn_move(moves, pinned, king_square, square - offset - 1, square)
    for square in iter_squares(promotion_left):
        _try_add_promotions(moves, pinned, king_square, square - offset + 1, square)
    for square in iter_squares(promotion_right):
        _try_add_promotions(moves, pinned, king_square, square - offset - 1, square)

    if not position.can_en_passant():
        return

    # En passant removes two pawns from one rank, which can expose the king
    # to a rook or queen along that rank even when neither pawn is pinned.
    target = position.en_passant_target()
    captured_square = target - offset
    captured = south(ep_board) if position.turn() is PieceColor.WHITE else north(ep_board)
    for reachable, neighbour, shift in ((ep_left, east, 1), (ep_right, west, -1)):
        if not reachable:
            continue
        start = captured_square + shift
        king_ray = rook_moves(king_square, occupied & ~captured & ~neighbour(captured))
        if (
            line(king_square, captured_square) != line(king_square, start)
            or not king_ray & position.opponent_orthogonal()
        ):
            _try_add_pawn_move(moves, pinned, king_square, start, target)


def _add_castling_moves(moves, position, dangers: int) -> None:
    king_square = position.friendly_king_square()
    white = position.turn() is PieceColor.WHITE
    occupied = position.occupied()

    kingside = 0b11 << 61 if white else 0b11 << 5
    if position.can_castle_kingside() and not occupied & kingside and not dangers & kingside:
        moves.append(Move(king_square, king_square + 2))

    queenside_empty = 0b111 << 57 if white else 0b111 << 1
    queenside_safe = 0b11 << 58 if white else 0b11 << 2
    if (
        position.can_castle_queenside()
        and not occupied & queenside_empty
        and not dangers & queenside_safe
    ):
        moves.append(Move(king_square, king_square - 2))


def generate_legal(position, only_captures: bool = False) -> tuple[list[Move], bool]:
    """Return the legal moves of the side to move and whether it is in check.

    With only_captures set, only captures (including en passant and
    capturing promotions) are generated, and castling is left out.
    """
    moves: list[Move] = []
    attackers = _attackers(position)
    dangers = _danger_squares(position)

    _add_king_moves(moves, position, dangers, only_captures)

    num_attackers = count(attackers)
    if num_attackers > 1:
        return moves, True

    mask = FULL
    if num_attackers == 1:
        square = lsb_index(attackers)
        if (position.opponent_orthogonal() | position.opponent_diagonal()) & attackers:
            # A slider's check can be blocked or the slider captured.
            mask = between(position.friendly_king_square(), square)
        else:
            # A knight or pawn check can only be answered by capturing it.
            mask = attackers
    elif not only_captures:
        _add_castling_moves(moves, position, dangers)

    pinned = _pinned(position)
    _add_sliding_moves(moves, position, mask, pinned, only_captures)
    _add_knight_moves(moves, position, mask, pinned, only_captures)
    _add_pawn_moves(moves, position, mask, pinned, only_captures)
    return moves, bool(attackers)