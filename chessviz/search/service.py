from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

from chessviz.engine.board import Position, simulate_move
from chessviz.engine.move import Move
from chessviz.engine.movegen import all_legal_moves, is_checkmate
from chessviz.engine.piece import Color
from chessviz.eval import PIECE_VALUES, evaluate


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    score: float
    mates: bool
    piece_value: int


def rank_moves(position: Position, color: Optional[Color] = None) -> List[ScoredMove]:
    """Rank every legal move of ``color`` by a single-ply greedy heuristic.

    Order: moves delivering checkmate first, then by the evaluation of the
    resulting position (descending), then by the moving piece's value
    (ascending) so cheaper pieces go first among equal-looking moves.
    ``color`` defaults to the side to move; otherwise the position is
    treated as if ``color`` were on move.
    """
    if color is None:
        color = position.turn
    elif color is not position.turn:
        position = replace(position, turn=color, ep_square=None)

    scored: List[ScoredMove] = []
    for move in all_legal_moves(position):
        child = simulate_move(position, move)
        scored.append(
            ScoredMove(
                move=move,
                score=evaluate(child, color),
                mates=is_checkmate(child),
                piece_value=PIECE_VALUES[move.piece.kind] if move.piece else 0,
            )
        )
    scored.sort(key=lambda s: (not s.mates, -s.score, s.piece_value))
    return scored


def best_move(position: Position, color: Optional[Color] = None) -> Optional[Move]:
    ranked = rank_moves(position, color)
    return ranked[0].move if ranked else None
