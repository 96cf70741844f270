from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from chessviz.assets.scenarios import get_scenario

from .board import Position, apply_move, create_initial_state
from .move import Move, with_promotion
from .movegen import GameStatus, all_legal_moves, find_move, game_status, legal_moves
from .piece import PieceType


@dataclass
class Game:
    """Game wrapper around the live position with an undo history.

    Responsibility: hold the authoritative position, expose legal moves,
    commit or preview moves. Positions are immutable, so previews never
    disturb the live state.
    """

    position: Position
    history: List[Position] = field(default_factory=list)

    @classmethod
    def new(cls, fen: Optional[str] = None) -> "Game":
        return cls(position=create_initial_state(fen))

    @classmethod
    def from_scenario(cls, scenario_id: str) -> "Game":
        return cls.new(get_scenario(scenario_id).fen)

    def to_fen(self) -> str:
        return self.position.to_fen()

    def legal_moves(self, square: Optional[int] = None) -> List[Move]:
        if square is None:
            return all_legal_moves(self.position)
        return legal_moves(self.position, square)

    def resolve(self, from_sq: int, to_sq: int, promotion: Optional[PieceType] = None) -> Move:
        move = find_move(self.position, from_sq, to_sq)
        if move is None:
            raise ValueError("illegal move")
        if promotion is not None and move.promotion is not None:
            move = with_promotion(move, promotion)
        return move

    def apply_move(
        self, from_sq: int, to_sq: int, promotion: Optional[PieceType] = None
    ) -> Move:
        move = self.resolve(from_sq, to_sq, promotion)
        self.history.append(self.position)
        self.position = apply_move(self.position, move)
        return move

    def preview(
        self, from_sq: int, to_sq: int, promotion: Optional[PieceType] = None
    ) -> Position:
        return apply_move(self.position, self.resolve(from_sq, to_sq, promotion))

    def undo_move(self) -> None:
        if not self.history:
            raise ValueError("no moves to undo")
        self.position = self.history.pop()

    def status(self) -> GameStatus:
        return game_status(self.position)

    def move_history_uci(self) -> List[str]:
        # Each stored position's successor carries the move that left it.
        later = self.history[1:] + [self.position]
        return [p.last_move.to_uci() for p in later if p.last_move is not None]
