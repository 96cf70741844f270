from __future__ import annotations

from .board import Position, apply_move
from .movegen import all_legal_moves


def perft(position: Position, depth: int) -> int:
    """Compute perft node count for ``position`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Note: promotions are generated once (as a queen), so counts only match
    published perft tables for trees that contain no promotions.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1
    moves = all_legal_moves(position)
    if depth == 1:
        return len(moves)
    return sum(perft(apply_move(position, m), depth - 1) for m in moves)
