from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, List, Optional, Tuple, Union

from .move import Move, square_to_str, str_to_square
from .piece import Color, Piece, PieceType, piece_from_char


# Italian Game (Giuoco Pianissimo) after 6...O-O, white to move.
START_FEN: Final = "r1bq1rk1/ppp11ppp/2np1n2/2b1p3/2B1P3/2PP1N2/PP3PPP/RNBQ1RK1 w - - 2 7"
CLASSIC_FEN: Final = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

BOARD_SIZE: Final = 64
CASTLING_ORDER: Final = "KQkq"

# 64 slots indexed rank*8+file, rank 0 being the FEN-first row (row 8).
Board = Tuple[Optional[Piece], ...]
EMPTY_BOARD: Board = (None,) * BOARD_SIZE

KING_HOME: Dict[Color, int] = {Color.WHITE: 60, Color.BLACK: 4}
ROOK_HOME: Dict[Tuple[Color, str], int] = {
    (Color.WHITE, "K"): 63,
    (Color.WHITE, "Q"): 56,
    (Color.BLACK, "K"): 7,
    (Color.BLACK, "Q"): 0,
}


def castling_letter(color: Color, side: str) -> str:
    return side if color is Color.WHITE else side.lower()


def castle_king_target(color: Color, side: str) -> int:
    return KING_HOME[color] + (2 if side == "K" else -2)


def castle_rook_target(color: Color, side: str) -> int:
    return KING_HOME[color] + (1 if side == "K" else -1)


@dataclass(frozen=True)
class Position:
    """Immutable chess position.

    Notes:
    - ``board`` is a 64-tuple; square 0 is a8 and square 63 is h1.
    - ``castling`` is a subset of ``"KQkq"`` in that order, ``""`` for none.
      Rights are trusted as declared, not re-derived from piece placement.
    - ``ep_square`` is the square skipped by the pawn double-step that
      produced this position, if any.
    """

    board: Board = EMPTY_BOARD
    turn: Color = Color.WHITE
    last_move: Optional[Move] = None
    castling: str = ""
    ep_square: Optional[int] = None

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        return parse_fen(fen)

    def to_fen(self) -> str:
        return board_to_fen(self.board, self.turn, self.castling, self.ep_square)

    def piece_at(self, sq: int) -> Optional[Piece]:
        if sq < 0 or sq >= BOARD_SIZE:
            return None
        return self.board[sq]


def parse_fen(fen: str) -> Position:
    """Create a position from a Forsyth-Edwards Notation (FEN) string.

    Args:
        fen (str): FEN string; only the placement field is needed.

    Returns:
        Position: Position encoded in ``fen``.

    Notes:
        Parsing never raises. Missing fields default to white to move, no
        castling rights and no en passant square. Unknown placement letters,
        squares past the h-file and rows past the eighth are ignored, as are
        the halfmove and fullmove counters.
    """
    if not fen or not isinstance(fen, str):
        return Position()
    parts = fen.strip().split()
    placement = parts[0] if parts else ""
    active = parts[1] if len(parts) > 1 else "w"
    castling = parts[2] if len(parts) > 2 else "-"
    ep = parts[3] if len(parts) > 3 else "-"

    squares: List[Optional[Piece]] = [None] * BOARD_SIZE
    for rank, row in enumerate(placement.split("/")[:8]):
        file = 0
        for ch in row:
            if "0" <= ch <= "9":
                file += int(ch)
                continue
            piece = piece_from_char(ch)
            if piece is None:
                continue
            if file < 8:
                squares[rank * 8 + file] = piece
            file += 1

    ep_square: Optional[int]
    try:
        ep_square = str_to_square(ep) if ep != "-" else None
    except ValueError:
        ep_square = None

    return Position(
        board=tuple(squares),
        turn=Color.BLACK if active == "b" else Color.WHITE,
        castling="".join(c for c in CASTLING_ORDER if c in castling),
        ep_square=ep_square,
    )


def board_to_fen(
    board: Board,
    turn: Union[Color, str] = Color.WHITE,
    castling: str = "",
    ep_square: Optional[int] = None,
) -> str:
    """Serialize a board and its side fields into FEN.

    The halfmove and fullmove counters are not tracked and always come out
    as ``0 1``.
    """
    ranks: List[str] = []
    for rank in range(8):
        run = 0
        row = []
        for file in range(8):
            piece = board[rank * 8 + file]
            if piece is None:
                run += 1
                continue
            if run:
                row.append(str(run))
                run = 0
            row.append(piece.fen_char)
        if run:
            row.append(str(run))
        ranks.append("".join(row))
    stm = turn.value if isinstance(turn, Color) else turn
    rights = "".join(c for c in CASTLING_ORDER if c in castling) or "-"
    ep = square_to_str(ep_square) if ep_square is not None else "-"
    return f"{'/'.join(ranks)} {stm} {rights} {ep} 0 1"


def create_initial_state(fen: Optional[str] = None) -> Position:
    return parse_fen(fen or START_FEN)


def apply_move(position: Position, move: Move) -> Position:
    """Return the position reached by playing ``move``.

    No legality check happens here; moves are expected to come from
    ``legal_moves``. Speculative moves still produce a deterministic result.
    The input position is never modified.
    """
    squares = list(position.board)
    piece = move.piece if move.piece is not None else position.piece_at(move.from_sq)
    placed = piece
    if piece is not None and move.promotion is not None:
        placed = piece.promoted(move.promotion)
    _put(squares, move.from_sq, None)
    _put(squares, move.to_sq, placed)

    if move.castle and piece is not None and (piece.color, move.castle) in ROOK_HOME:
        rook_from = ROOK_HOME[(piece.color, move.castle)]
        rook_to = castle_rook_target(piece.color, move.castle)
        squares[rook_to] = squares[rook_from]
        squares[rook_from] = None

    if move.en_passant and move.remove_sq is not None:
        _put(squares, move.remove_sq, None)

    ep_square: Optional[int] = None
    on_board = _on_board(move.from_sq) and _on_board(move.to_sq)
    double_step = on_board and abs(move.to_sq - move.from_sq) == 16
    if piece is not None and piece.kind is PieceType.PAWN and double_step:
        ep_square = (move.from_sq + move.to_sq) // 2

    return Position(
        board=tuple(squares),
        turn=position.turn.other(),
        last_move=move,
        castling=_update_castling_rights(position.castling, piece, move),
        ep_square=ep_square,
    )


def _on_board(sq: int) -> bool:
    return 0 <= sq < BOARD_SIZE


def _put(squares: List[Optional[Piece]], sq: int, piece: Optional[Piece]) -> None:
    # Off-board writes are dropped; negative indices must not wrap.
    if _on_board(sq):
        squares[sq] = piece


# Same transition; the names only tell the reader whether the result is kept.
make_move = apply_move
simulate_move = apply_move


def _update_castling_rights(castling: str, piece: Optional[Piece], move: Move) -> str:
    """Drop rights forfeited by king/rook moves and captures on rook homes."""
    if not castling:
        return castling
    rights = set(castling)
    if piece is not None:
        if piece.kind is PieceType.KING:
            rights.discard(castling_letter(piece.color, "K"))
            rights.discard(castling_letter(piece.color, "Q"))
        elif piece.kind is PieceType.ROOK:
            for side in ("K", "Q"):
                if move.from_sq == ROOK_HOME[(piece.color, side)]:
                    rights.discard(castling_letter(piece.color, side))
    if move.captured is not None:
        for (color, side), sq in ROOK_HOME.items():
            if sq == move.to_sq and (piece is None or color is not piece.color):
                rights.discard(castling_letter(color, side))
    return "".join(c for c in CASTLING_ORDER if c in rights)
