from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Optional


class Color(str, Enum):
    WHITE = "w"
    BLACK = "b"

    def other(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceType(str, Enum):
    PAWN = "P"
    KNIGHT = "N"
    BISHOP = "B"
    ROOK = "R"
    QUEEN = "Q"
    KING = "K"


PROMOTION_TYPES: Final = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


@dataclass(frozen=True)
class Piece:
    """Immutable piece value: a color and a piece type.

    ``str(piece)`` gives the two-character tag used by the visualizer
    (``"wP"``, ``"bK"``); ``fen_char`` gives the FEN letter.
    """

    color: Color
    kind: PieceType

    def __str__(self) -> str:
        return self.color.value + self.kind.value

    @property
    def fen_char(self) -> str:
        ch = self.kind.value
        return ch if self.color is Color.WHITE else ch.lower()

    def promoted(self, kind: PieceType) -> "Piece":
        return Piece(self.color, kind)


CHAR_TO_PIECE: Dict[str, Piece] = {
    (pt.value if color is Color.WHITE else pt.value.lower()): Piece(color, pt)
    for color in Color
    for pt in PieceType
}


def piece_from_char(ch: str) -> Optional[Piece]:
    """Return the piece for a FEN letter, or ``None`` if ``ch`` is not one."""
    return CHAR_TO_PIECE.get(ch)
