from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .piece import PROMOTION_TYPES, Piece, PieceType


@dataclass(frozen=True)
class Move:
    """Engine move representation.

    Attributes:
        from_sq (int): Origin square index (0 = a8, 63 = h1).
        to_sq (int): Destination square index.
        piece (Optional[Piece]): The moving piece as it stood on ``from_sq``.
        captured (Optional[Piece]): Piece occupying ``to_sq`` before the move.
            En passant captures leave this unset and use ``remove_sq``.
        promotion (Optional[PieceType]): Piece type the pawn becomes.
        castle (Optional[str]): ``"K"`` or ``"Q"`` when the rook also moves.
        en_passant (bool): Whether this is an en passant capture.
        remove_sq (Optional[int]): Square of the pawn taken en passant.
    """

    from_sq: int
    to_sq: int
    piece: Optional[Piece] = None
    captured: Optional[Piece] = None
    promotion: Optional[PieceType] = None
    castle: Optional[str] = None
    en_passant: bool = False
    remove_sq: Optional[int] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None or self.en_passant

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = self.promotion.value.lower() if self.promotion else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo


def with_promotion(move: Move, kind: PieceType) -> Move:
    """Return ``move`` re-targeted to promote into ``kind``.

    Raises:
        ValueError: If ``move`` is not a promotion or ``kind`` is not one of
            queen, rook, bishop or knight.
    """
    if move.promotion is None:
        raise ValueError("move is not a promotion")
    if kind not in PROMOTION_TYPES:
        raise ValueError(f"invalid promotion piece: {kind!r}")
    return replace(move, promotion=kind)


def parse_promotion(letter: str) -> PieceType:
    """Map a promotion letter (either case) to its piece type.

    Raises:
        ValueError: If ``letter`` is not one of ``q r b n``.
    """
    try:
        kind = PieceType(letter.upper())
    except ValueError:
        raise ValueError(f"invalid promotion piece: {letter!r}") from None
    if kind not in PROMOTION_TYPES:
        raise ValueError(f"invalid promotion piece: {letter!r}")
    return kind


def parse_uci(uci: str) -> Move:
    """Parse a UCI move string into a bare move (squares and promotion only).

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        Move: Parsed move without piece information.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promo: Optional[PieceType] = None
    if len(uci) == 5:
        promo = parse_promotion(uci[4])
    return Move(from_sq, to_sq, promotion=promo)


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a square index.

    Index 0 is a8 and 63 is h1, following FEN row order.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = 8 - int(s[1])
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    rank = idx // 8
    return chr(ord("a") + file) + str(8 - rank)
