from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from .attacks import (
    KING_STEPS,
    KNIGHT_JUMPS,
    SLIDER_DIRS,
    is_king_in_check,
    is_square_attacked,
    king_square,
    offset_square,
    pawn_direction,
)
from .board import (
    KING_HOME,
    ROOK_HOME,
    Position,
    apply_move,
    castle_king_target,
    castling_letter,
)
from .move import Move
from .piece import Color, Piece, PieceType


class GameStatus(str, Enum):
    ONGOING = "ongoing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


def _build_move(position: Position, from_sq: int, to_sq: int, promote: bool = False) -> Move:
    return Move(
        from_sq,
        to_sq,
        piece=position.board[from_sq],
        captured=position.board[to_sq],
        promotion=PieceType.QUEEN if promote else None,
    )


def pseudo_moves(position: Position, from_sq: int) -> List[Move]:
    """Geometrically valid moves for the piece on ``from_sq``.

    Moves may leave the mover's own king attacked; castling is the exception
    since its attacked-square conditions are part of the move's geometry.
    """
    piece = position.piece_at(from_sq)
    if piece is None:
        return []
    if piece.kind is PieceType.PAWN:
        return _pawn_moves(position, from_sq, piece.color)
    if piece.kind is PieceType.KNIGHT:
        return _step_moves(position, from_sq, piece.color, KNIGHT_JUMPS)
    if piece.kind is PieceType.KING:
        moves = _step_moves(position, from_sq, piece.color, KING_STEPS)
        moves.extend(_castle_moves(position, from_sq, piece.color))
        return moves
    return _slider_moves(position, from_sq, piece.color)


def _pawn_moves(position: Position, from_sq: int, color: Color) -> List[Move]:
    board = position.board
    moves: List[Move] = []
    dr = pawn_direction(color)
    start_rank = 6 if color is Color.WHITE else 1
    promotion_rank = 0 if color is Color.WHITE else 7

    one = offset_square(from_sq, 0, dr)
    if one is not None and board[one] is None:
        moves.append(_build_move(position, from_sq, one, one // 8 == promotion_rank))
        two = offset_square(from_sq, 0, 2 * dr)
        if from_sq // 8 == start_rank and two is not None and board[two] is None:
            moves.append(_build_move(position, from_sq, two))

    for df in (-1, 1):
        target = offset_square(from_sq, df, dr)
        if target is None:
            continue
        occupant = board[target]
        if occupant is not None and occupant.color is not color:
            moves.append(_build_move(position, from_sq, target, target // 8 == promotion_rank))
        elif occupant is None and target == position.ep_square:
            victim_sq = offset_square(target, 0, -dr)
            if victim_sq is not None and board[victim_sq] == Piece(color.other(), PieceType.PAWN):
                moves.append(
                    Move(
                        from_sq,
                        target,
                        piece=board[from_sq],
                        en_passant=True,
                        remove_sq=victim_sq,
                    )
                )
    return moves


def _step_moves(
    position: Position, from_sq: int, color: Color, offsets: Tuple[Tuple[int, int], ...]
) -> List[Move]:
    moves = []
    for df, dr in offsets:
        target = offset_square(from_sq, df, dr)
        if target is None:
            continue
        occupant = position.board[target]
        if occupant is None or occupant.color is not color:
            moves.append(_build_move(position, from_sq, target))
    return moves


def _slider_moves(position: Position, from_sq: int, color: Color) -> List[Move]:
    board = position.board
    moves = []
    for df, dr in SLIDER_DIRS[board[from_sq].kind]:
        cursor = offset_square(from_sq, df, dr)
        while cursor is not None:
            occupant = board[cursor]
            if occupant is None:
                moves.append(_build_move(position, from_sq, cursor))
                cursor = offset_square(cursor, df, dr)
                continue
            if occupant.color is not color:
                moves.append(_build_move(position, from_sq, cursor))
            break
    return moves


def _castle_moves(position: Position, from_sq: int, color: Color) -> List[Move]:
    board = position.board
    home = KING_HOME[color]
    if from_sq != home or not position.castling:
        return []
    opponent = color.other()
    if is_square_attacked(board, home, opponent):
        return []

    moves = []
    for side in ("K", "Q"):
        if castling_letter(color, side) not in position.castling:
            continue
        rook_sq = ROOK_HOME[(color, side)]
        if board[rook_sq] != Piece(color, PieceType.ROOK):
            continue
        step = 1 if rook_sq > home else -1
        between = range(home + step, rook_sq, step)
        if any(board[sq] is not None for sq in between):
            continue
        target = castle_king_target(color, side)
        transit = (home + step, target)
        if any(is_square_attacked(board, sq, opponent) for sq in transit):
            continue
        moves.append(Move(home, target, piece=board[home], castle=side))
    return moves


def legal_moves(position: Position, from_sq: int) -> List[Move]:
    """Legal moves for the side to move from ``from_sq``.

    Empty when the square is empty or holds an opponent's piece. Each
    pseudo-legal move is played on a copy and kept only if the mover's king
    is not attacked afterwards.
    """
    piece = position.piece_at(from_sq)
    if piece is None or piece.color is not position.turn:
        return []
    return [
        m
        for m in pseudo_moves(position, from_sq)
        if not is_king_in_check(apply_move(position, m).board, piece.color)
    ]


get_legal_moves = legal_moves


def all_legal_moves(position: Position) -> List[Move]:
    moves: List[Move] = []
    for sq in range(len(position.board)):
        moves.extend(legal_moves(position, sq))
    return moves


def has_legal_moves(position: Position) -> bool:
    return any(legal_moves(position, sq) for sq in range(len(position.board)))


def is_checkmate(position: Position) -> bool:
    return is_king_in_check(position.board, position.turn) and not has_legal_moves(position)


def is_stalemate(position: Position) -> bool:
    """No legal moves while not in check. A side without a king is never stalemated."""
    if king_square(position.board, position.turn) is None:
        return False
    return not is_king_in_check(position.board, position.turn) and not has_legal_moves(position)


def game_status(position: Position) -> GameStatus:
    in_check = is_king_in_check(position.board, position.turn)
    if king_square(position.board, position.turn) is None or has_legal_moves(position):
        return GameStatus.CHECK if in_check else GameStatus.ONGOING
    return GameStatus.CHECKMATE if in_check else GameStatus.STALEMATE


def find_move(position: Position, from_sq: int, to_sq: int) -> Optional[Move]:
    """The legal move between two squares, if there is one."""
    for move in legal_moves(position, from_sq):
        if move.to_sq == to_sq:
            return move
    return None
