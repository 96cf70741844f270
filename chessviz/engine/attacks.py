"""Attack maps, attacked-square queries and king lookup.

Pure functions over a :data:`~chessviz.engine.board.Board`; nothing here
depends on whose turn it is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, List, Optional, Tuple

from .board import BOARD_SIZE, Board
from .piece import Color, Piece, PieceType


KNIGHT_JUMPS: Final = ((1, 2), (2, 1), (-1, 2), (-2, 1), (1, -2), (2, -1), (-1, -2), (-2, -1))
KING_STEPS: Final = ((1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (-1, 1), (1, -1), (-1, -1))
BISHOP_DIRS: Final = ((1, 1), (-1, 1), (1, -1), (-1, -1))
ROOK_DIRS: Final = ((1, 0), (-1, 0), (0, 1), (0, -1))
SLIDER_DIRS: Dict[PieceType, Tuple[Tuple[int, int], ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: ROOK_DIRS + BISHOP_DIRS,
}


@dataclass(frozen=True)
class Ray:
    """A slider's open line: direction plus squares reached (blocker included)."""

    df: int
    dr: int
    length: int


def offset_square(sq: int, df: int, dr: int) -> Optional[int]:
    """Square reached from ``sq`` by ``df`` files and ``dr`` ranks, if on board."""
    if sq < 0 or sq >= BOARD_SIZE:
        return None
    file = sq % 8 + df
    rank = sq // 8 + dr
    if file < 0 or file > 7 or rank < 0 or rank > 7:
        return None
    return rank * 8 + file


def pawn_direction(color: Color) -> int:
    # White pawns move toward rank index 0 (row 8).
    return -1 if color is Color.WHITE else 1


def _steps(sq: int, offsets: Tuple[Tuple[int, int], ...]) -> List[int]:
    targets = []
    for df, dr in offsets:
        to = offset_square(sq, df, dr)
        if to is not None:
            targets.append(to)
    return targets


def _slider_targets(board: Board, sq: int, dirs: Tuple[Tuple[int, int], ...]) -> List[int]:
    targets = []
    for df, dr in dirs:
        cursor = offset_square(sq, df, dr)
        while cursor is not None:
            targets.append(cursor)
            if board[cursor] is not None:
                break
            cursor = offset_square(cursor, df, dr)
    return targets


def pawn_attacks(sq: int, color: Color) -> List[int]:
    dr = pawn_direction(color)
    return _steps(sq, ((-1, dr), (1, dr)))


def attacks_from(board: Board, sq: int, piece: Piece) -> List[int]:
    """Squares attacked by ``piece`` standing on ``sq``.

    Sliders stop at the first occupied square, which is included whether it
    holds a friend or a foe.
    """
    if piece.kind is PieceType.PAWN:
        return pawn_attacks(sq, piece.color)
    if piece.kind is PieceType.KNIGHT:
        return _steps(sq, KNIGHT_JUMPS)
    if piece.kind is PieceType.KING:
        return _steps(sq, KING_STEPS)
    return _slider_targets(board, sq, SLIDER_DIRS[piece.kind])


def piece_attacks(board: Board, sq: int) -> List[int]:
    piece = board[sq] if 0 <= sq < BOARD_SIZE else None
    if piece is None:
        return []
    return attacks_from(board, sq, piece)


def attack_map(board: Board, color: Color) -> List[int]:
    """Per-square count of ``color`` pieces attacking it."""
    counts = [0] * BOARD_SIZE
    for sq, piece in enumerate(board):
        if piece is None or piece.color is not color:
            continue
        for target in attacks_from(board, sq, piece):
            counts[target] += 1
    return counts


def is_square_attacked(board: Board, sq: int, by_color: Color) -> bool:
    for origin, piece in enumerate(board):
        if piece is None or piece.color is not by_color:
            continue
        if sq in attacks_from(board, origin, piece):
            return True
    return False


def king_square(board: Board, color: Color) -> Optional[int]:
    """Index of ``color``'s king, or ``None`` when it is not on the board."""
    king = Piece(color, PieceType.KING)
    for sq, piece in enumerate(board):
        if piece == king:
            return sq
    return None


def is_king_in_check(board: Board, color: Color) -> bool:
    ksq = king_square(board, color)
    if ksq is None:
        return False
    return is_square_attacked(board, ksq, color.other())


def move_rays(board: Board, sq: int) -> List[Ray]:
    """Open lines of the slider on ``sq``; empty for other pieces."""
    piece = board[sq] if 0 <= sq < BOARD_SIZE else None
    if piece is None or piece.kind not in SLIDER_DIRS:
        return []
    rays = []
    for df, dr in SLIDER_DIRS[piece.kind]:
        length = 0
        cursor = offset_square(sq, df, dr)
        while cursor is not None:
            length += 1
            if board[cursor] is not None:
                break
            cursor = offset_square(cursor, df, dr)
        if length:
            rays.append(Ray(df, dr, length))
    return rays


# Names used by the visualizer front end.
get_attack_map = attack_map
get_king_square = king_square
