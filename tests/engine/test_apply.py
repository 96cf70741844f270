from __future__ import annotations

from chessviz.engine.board import (
    CLASSIC_FEN,
    apply_move,
    make_move,
    parse_fen,
    simulate_move,
)
from chessviz.engine.move import Move, str_to_square
from chessviz.engine.movegen import find_move
from chessviz.engine.piece import Color, Piece, PieceType


def test_apply_returns_new_position_and_does_not_mutate() -> None:
    p = parse_fen(CLASSIC_FEN)
    mv = find_move(p, str_to_square("g1"), str_to_square("f3"))
    assert mv is not None

    p2 = apply_move(p, mv)

    assert p.to_fen() == CLASSIC_FEN
    assert p.last_move is None
    assert p2.to_fen() == "rnbqkbnr/pppppppp/8/8/8/5N2/PPPPPPPP/RNBQKB1R b KQkq - 0 1"
    assert p2.turn is Color.BLACK
    assert p2.last_move == mv


def test_make_and_simulate_are_the_same_transition() -> None:
    p = parse_fen(CLASSIC_FEN)
    mv = find_move(p, str_to_square("e2"), str_to_square("e4"))
    assert make_move(p, mv) == simulate_move(p, mv) == apply_move(p, mv)


def test_capture_records_victim_and_replaces_it() -> None:
    p = parse_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
    mv = find_move(p, str_to_square("e4"), str_to_square("d5"))
    assert mv is not None
    assert mv.captured == Piece(Color.BLACK, PieceType.PAWN)
    p2 = apply_move(p, mv)
    assert p2.board[str_to_square("d5")] == Piece(Color.WHITE, PieceType.PAWN)
    assert sum(1 for sq in p2.board if sq is not None) == 3


def test_apply_trusts_caller_and_never_validates() -> None:
    p = parse_fen(CLASSIC_FEN)
    # A rook jumping over its own pawns is applied as given
    p2 = apply_move(p, Move(str_to_square("a1"), str_to_square("a5")))
    assert p2.board[str_to_square("a5")] == Piece(Color.WHITE, PieceType.ROOK)
    assert p2.castling == "Kkq"


def test_apply_ignores_off_board_squares() -> None:
    p = parse_fen(CLASSIC_FEN)
    e2 = str_to_square("e2")

    off_end = apply_move(p, Move(e2, 64))
    assert off_end.board[e2] is None
    assert len(off_end.board) == 64
    assert off_end.turn is Color.BLACK

    # Negative squares must not wrap around to h1
    wrapped = apply_move(p, Move(e2, -1))
    assert wrapped.board[63] == Piece(Color.WHITE, PieceType.ROOK)
    assert wrapped.board[e2] is None

    from_nowhere = apply_move(p, Move(-3, str_to_square("e4")))
    assert from_nowhere.board[str_to_square("e4")] is None
    assert from_nowhere.board[61] == Piece(Color.WHITE, PieceType.BISHOP)
    assert from_nowhere.ep_square is None


def test_apply_with_unknown_castle_side_moves_only_the_king() -> None:
    p = parse_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    p2 = apply_move(p, Move(str_to_square("e1"), str_to_square("g1"), castle="X"))
    assert p2.board[str_to_square("g1")] == Piece(Color.WHITE, PieceType.KING)
    assert p2.board[str_to_square("h1")] == Piece(Color.WHITE, PieceType.ROOK)
    assert p2.castling == "kq"


def test_apply_from_empty_square_is_deterministic() -> None:
    p = parse_fen("4k3/8/8/8/4p3/8/8/4K3 w - - 0 1")
    p2 = apply_move(p, Move(str_to_square("d3"), str_to_square("e4")))
    assert p2.board[str_to_square("e4")] is None
    assert p2.turn is Color.BLACK
    assert apply_move(p, Move(str_to_square("d3"), str_to_square("e4"))) == p2


def test_promotion_piece_can_be_overridden() -> None:
    p = parse_fen("4k3/1P6/8/8/8/8/8/4K3 w - - 0 1")
    mv = Move(
        str_to_square("b7"),
        str_to_square("b8"),
        piece=Piece(Color.WHITE, PieceType.PAWN),
        promotion=PieceType.KNIGHT,
    )
    p2 = apply_move(p, mv)
    assert p2.board[str_to_square("b8")] == Piece(Color.WHITE, PieceType.KNIGHT)
    assert p2.board[str_to_square("b7")] is None
