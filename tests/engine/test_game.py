from __future__ import annotations

import pytest

from chessviz.engine.board import CLASSIC_FEN, START_FEN
from chessviz.engine.game import Game
from chessviz.engine.move import str_to_square
from chessviz.engine.movegen import GameStatus
from chessviz.engine.piece import Color, Piece, PieceType


def sq(name: str) -> int:
    return str_to_square(name)


def test_new_game_defaults_to_italian_position() -> None:
    g = Game.new()
    assert g.position.board == Game.new(START_FEN).position.board
    assert g.history == []
    assert g.status() is GameStatus.ONGOING


def test_apply_and_undo() -> None:
    g = Game.new(CLASSIC_FEN)
    move = g.apply_move(sq("e2"), sq("e4"))
    assert move.to_uci() == "e2e4"
    assert g.position.turn is Color.BLACK
    g.apply_move(sq("e7"), sq("e5"))
    assert g.move_history_uci() == ["e2e4", "e7e5"]

    g.undo_move()
    g.undo_move()
    assert g.to_fen() == CLASSIC_FEN
    assert g.move_history_uci() == []
    with pytest.raises(ValueError):
        g.undo_move()


def test_illegal_move_rejected_without_state_change() -> None:
    g = Game.new(CLASSIC_FEN)
    with pytest.raises(ValueError):
        g.apply_move(sq("e2"), sq("e5"))
    with pytest.raises(ValueError):
        g.apply_move(sq("e7"), sq("e5"))
    assert g.to_fen() == CLASSIC_FEN
    assert g.history == []


def test_preview_leaves_live_position_alone() -> None:
    g = Game.new(CLASSIC_FEN)
    preview = g.preview(sq("d2"), sq("d4"))
    assert preview.board[sq("d4")] == Piece(Color.WHITE, PieceType.PAWN)
    assert g.to_fen() == CLASSIC_FEN
    assert g.history == []


def test_promotion_choice() -> None:
    g = Game.from_scenario("promotion")
    g.apply_move(sq("d7"), sq("d8"), PieceType.KNIGHT)
    assert g.position.board[sq("d8")] == Piece(Color.WHITE, PieceType.KNIGHT)
    assert g.move_history_uci() == ["d7d8n"]


def test_promotion_choice_rejected_for_king() -> None:
    g = Game.from_scenario("promotion")
    with pytest.raises(ValueError):
        g.apply_move(sq("d7"), sq("d8"), PieceType.KING)


def test_legal_moves_for_square_and_whole_side() -> None:
    g = Game.new(CLASSIC_FEN)
    assert len(g.legal_moves()) == 20
    assert len(g.legal_moves(sq("b1"))) == 2


def test_unknown_scenario_raises() -> None:
    with pytest.raises(KeyError):
        Game.from_scenario("nope")
