"""Evaluation heuristics and related utilities.

Pure, deterministic, and side-effect free.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Final

from chessviz.engine.attacks import attack_map
from chessviz.engine.board import Position
from chessviz.engine.movegen import legal_moves
from chessviz.engine.piece import Color, PieceType


# Material values in pawns. The king's value is a sentinel, not a price.
PIECE_VALUES: Dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 100,
}

MOBILITY_EXPONENT: Final = 1.25
THREAT_MULTIPLIERS: Dict[PieceType, int] = {PieceType.QUEEN: 3, PieceType.KING: 5}


def material(position: Position, color: Color) -> int:
    return sum(PIECE_VALUES[p.kind] for p in position.board if p is not None and p.color is color)


def mobility(position: Position, color: Color) -> float:
    """Sum over ``color``'s pieces of ``legal_move_count ** 1.25``.

    Moves are counted as if ``color`` were to move; the en passant square is
    only honoured for the side actually on move.
    """
    if position.turn is not color:
        position = replace(position, turn=color, ep_square=None)
    total = 0.0
    for sq, piece in enumerate(position.board):
        if piece is None or piece.color is not color:
            continue
        total += len(legal_moves(position, sq)) ** MOBILITY_EXPONENT
    return total


def threat(position: Position, color: Color) -> int:
    """Penalty for ``color``'s pieces currently attacked by the opponent."""
    enemy = attack_map(position.board, color.other())
    total = 0
    for sq, piece in enumerate(position.board):
        if piece is None or piece.color is not color or not enemy[sq]:
            continue
        total += PIECE_VALUES[piece.kind] * THREAT_MULTIPLIERS.get(piece.kind, 1)
    return total


def side_score(position: Position, color: Color) -> float:
    return material(position, color) + mobility(position, color) - threat(position, color)


def evaluate(position: Position, color: Color) -> float:
    """Score ``position`` from ``color``'s point of view.

    Returns:
        float: ``(material + mobility - threat)`` for ``color`` minus the
            same for the opponent. Unbounded; positive favours ``color``.
    """
    return side_score(position, color) - side_score(position, color.other())


evaluate_board = evaluate
