"""Per-square pressure layers shown over the board.

Every function returns plain lists indexed by square so the front end can
paint them without further computation.
"""

from __future__ import annotations

import math
from typing import Dict, Final, List

from chessviz.engine.attacks import attack_map, king_square
from chessviz.engine.board import BOARD_SIZE, Board
from chessviz.engine.piece import Color, PieceType


# The king counts as a heavy but finite target here.
THREAT_VALUES: Dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 12,
}

STANDARD_SET: Dict[PieceType, int] = {
    PieceType.PAWN: 8,
    PieceType.KNIGHT: 2,
    PieceType.BISHOP: 2,
    PieceType.ROOK: 2,
    PieceType.QUEEN: 1,
    PieceType.KING: 1,
}

ENEMY_WEIGHT: Final = 0.45
FRIENDLY_WEIGHT: Final = 0.15
KING_PRESSURE_WEIGHT: Final = 0.25
LINE_BONUS: Final = 0.15
HEAT_RADIUS: Final = 5.0


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def threat_levels(board: Board) -> List[float]:
    """Normalized danger for each occupied square, in ``[0, 1]``."""
    attacked_by = {color: attack_map(board, color.other()) for color in Color}
    levels = [0.0] * BOARD_SIZE
    for sq, piece in enumerate(board):
        if piece is None:
            continue
        attackers = attacked_by[piece.color][sq]
        if attackers:
            levels[sq] = min(1.0, attackers * THREAT_VALUES[piece.kind] / 9)
    return levels


def king_heat(board: Board, color: Color) -> List[float]:
    """Heat map of danger around ``color``'s king, in ``[0, 1]``.

    All zeros when ``color`` has no king.
    """
    ksq = king_square(board, color)
    if ksq is None:
        return [0.0] * BOARD_SIZE
    enemy = attack_map(board, color.other())
    friendly = attack_map(board, color)
    kf, kr = ksq % 8, ksq // 8

    heat = []
    for sq in range(BOARD_SIZE):
        f, r = sq % 8, sq // 8
        distance = math.hypot(f - kf, r - kr)
        distance_factor = max(0.0, 1 - distance / HEAT_RADIUS)
        danger = enemy[sq] * ENEMY_WEIGHT - friendly[sq] * FRIENDLY_WEIGHT
        danger += distance_factor * enemy[ksq] * KING_PRESSURE_WEIGHT
        on_line = f == kf or abs(f - kf) == abs(r - kr)
        if on_line and enemy[sq] > 0:
            danger += LINE_BONUS
        heat.append(_clamp01(danger))
    return heat


def piece_counts(board: Board) -> Dict[Color, Dict[PieceType, int]]:
    counts = {color: {pt: 0 for pt in PieceType} for color in Color}
    for piece in board:
        if piece is not None:
            counts[piece.color][piece.kind] += 1
    return counts


def captured_pieces(board: Board) -> Dict[Color, Dict[PieceType, int]]:
    """Pieces missing from each side compared to a full standard set.

    Promotions can push a type above its standard count; that never yields
    a negative tally.
    """
    counts = piece_counts(board)
    return {
        color: {pt: max(0, STANDARD_SET[pt] - counts[color][pt]) for pt in PieceType}
        for color in Color
    }
