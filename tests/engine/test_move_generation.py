from __future__ import annotations

import pytest

from chessviz.engine.attacks import is_king_in_check
from chessviz.engine.board import CLASSIC_FEN, START_FEN, apply_move, parse_fen
from chessviz.engine.move import square_to_str, str_to_square
from chessviz.engine.movegen import all_legal_moves, legal_moves, pseudo_moves
from chessviz.engine.piece import Color, Piece, PieceType


def targets(fen: str, square: str) -> set[str]:
    p = parse_fen(fen)
    return {square_to_str(m.to_sq) for m in legal_moves(p, str_to_square(square))}


def test_standard_start_has_twenty_moves() -> None:
    p = parse_fen(CLASSIC_FEN)
    moves = all_legal_moves(p)
    assert len(moves) == 20
    kinds = [m.piece.kind for m in moves]
    assert kinds.count(PieceType.PAWN) == 16
    assert kinds.count(PieceType.KNIGHT) == 4


def test_empty_square_and_opponent_piece_give_no_moves() -> None:
    p = parse_fen(CLASSIC_FEN)
    assert legal_moves(p, str_to_square("e4")) == []
    assert legal_moves(p, str_to_square("e7")) == []
    assert pseudo_moves(p, str_to_square("e4")) == []


def test_rook_rays_stop_at_blockers() -> None:
    assert targets("4k3/8/8/8/8/8/8/R3K3 w - - 0 1", "a1") == {
        "a2", "a3", "a4", "a5", "a6", "a7", "a8", "b1", "c1", "d1",
    }


def test_slider_captures_enemy_but_not_friend() -> None:
    fen = "4k3/8/8/8/8/1p6/8/R1N1K3 w - - 0 1"
    assert targets(fen, "a1") == {"a2", "a3", "a4", "a5", "a6", "a7", "a8", "b1"}
    assert targets("4k3/8/8/8/8/2p5/8/B3K3 w - - 0 1", "a1") == {"b2", "c3"}


def test_bishop_and_queen_basic_moves() -> None:
    assert {"b2", "d2", "h6"} <= targets("4k3/8/8/8/8/8/8/2B1K3 w - - 0 1", "c1")
    assert {"d2", "c1", "c2", "d8"} <= targets("4k3/8/8/8/8/8/8/3QK3 w - - 0 1", "d1")


def test_knight_in_corner() -> None:
    assert targets("4k3/8/8/8/8/8/8/N3K3 w - - 0 1", "a1") == {"b3", "c2"}


def test_pawn_pushes_and_blocks() -> None:
    assert targets(CLASSIC_FEN, "e2") == {"e3", "e4"}
    assert targets("4k3/8/8/8/4p3/8/4P3/4K3 w - - 0 1", "e2") == {"e3"}
    assert targets("4k3/8/8/8/8/4p3/4P3/4K3 w - - 0 1", "e2") == set()
    # Double step only from the starting rank
    assert targets("4k3/8/8/8/8/4P3/8/4K3 w - - 0 1", "e3") == {"e4"}
    assert targets("4k3/3p4/8/8/8/8/8/4K3 b - - 0 1", "d7") == {"d6", "d5"}


def test_pawn_captures_diagonally_only_enemies() -> None:
    fen = "4k3/8/8/8/8/3p1N2/4P3/4K3 w - - 0 1"
    assert targets(fen, "e2") == {"e3", "e4", "d3"}


def test_pinned_rook_may_only_slide_along_pin() -> None:
    fen = "4r3/8/8/8/8/8/4R3/4K3 w - - 0 1"
    assert targets(fen, "e2") == {"e3", "e4", "e5", "e6", "e7", "e8"}


def test_king_cannot_step_into_attack() -> None:
    fen = "4k3/8/8/8/8/8/r7/4K3 w - - 0 1"
    assert targets(fen, "e1") == {"d1", "f1"}


def test_promotion_is_flagged_on_last_rank() -> None:
    p = parse_fen("3rk3/2P5/8/8/8/8/8/4K3 w - - 0 1")
    moves = legal_moves(p, str_to_square("c7"))
    assert {square_to_str(m.to_sq) for m in moves} == {"c8", "d8"}
    assert all(m.promotion is PieceType.QUEEN for m in moves)
    capture = next(m for m in moves if m.to_sq == str_to_square("d8"))
    assert capture.captured == Piece(Color.BLACK, PieceType.ROOK)


def test_promotion_keeps_color() -> None:
    white = parse_fen("4k3/3P4/8/8/8/8/8/4K3 w - - 0 1")
    move = legal_moves(white, str_to_square("d7"))[0]
    after = apply_move(white, move)
    assert after.board[str_to_square("d8")] == Piece(Color.WHITE, PieceType.QUEEN)
    assert after.board[str_to_square("d7")] is None

    black = parse_fen("4K3/8/8/8/8/8/3p4/4k3 b - - 0 1")
    move = legal_moves(black, str_to_square("d2"))[0]
    assert move.promotion is PieceType.QUEEN
    after = apply_move(black, move)
    assert after.board[str_to_square("d1")] == Piece(Color.BLACK, PieceType.QUEEN)


def test_generation_is_idempotent() -> None:
    p = parse_fen(START_FEN)
    before = p.board
    for sq in range(64):
        assert legal_moves(p, sq) == legal_moves(p, sq)
    assert p.board is before


@pytest.mark.parametrize(
    "fen",
    [
        START_FEN,
        CLASSIC_FEN,
        "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
        "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
        "r3k2r/pppppppp/8/2b5/7q/8/PPPPPPPP/R1BQ1BKR w - - 0 1",
        "4r3/8/8/8/8/8/4R3/4K3 w - - 0 1",
    ],
)
def test_legal_moves_never_leave_own_king_attacked(fen: str) -> None:
    p = parse_fen(fen)
    for move in all_legal_moves(p):
        assert not is_king_in_check(apply_move(p, move).board, p.turn)


def test_positions_without_kings_still_generate_moves() -> None:
    p = parse_fen("8/8/8/8/3N4/8/8/8 w - - 0 1")
    assert len(legal_moves(p, str_to_square("d4"))) == 8
