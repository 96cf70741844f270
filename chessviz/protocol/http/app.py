from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel, Field, model_validator

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ...assets.scenarios import SCENARIOS, get_scenario
from ...engine.attacks import attack_map, move_rays, piece_attacks
from ...engine.board import START_FEN, Position
from ...engine.game import Game
from ...engine.move import Move, parse_promotion, parse_uci, square_to_str, str_to_square
from ...engine.movegen import GameStatus, all_legal_moves, game_status
from ...engine.perft import perft as perft_nodes
from ...engine.piece import Color, PieceType
from ...eval import evaluate
from ...eval.pressure import captured_pieces, king_heat, threat_levels
from ...search.service import rank_moves


logger = logging.getLogger(__name__)


class ScenarioModel(BaseModel):
    id: str
    name: str
    description: str
    fen: str


class CreateGameRequest(BaseModel):
    fen: Optional[str] = Field(default=None, description="FEN string")
    scenario: Optional[str] = Field(default=None, description="Scenario id")


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: Optional[str] = Field(default=None, description="UCI move, e.g. e7e8q")
    from_square: Optional[str] = Field(default=None, description="Origin square, e.g. e2")
    to_square: Optional[str] = Field(default=None, description="Destination square, e.g. e4")
    promotion: Optional[str] = Field(default=None, pattern="^[qrbnQRBN]$")

    @model_validator(mode="after")
    def _one_move_form(self) -> "MoveRequest":
        if self.move is None and (self.from_square is None or self.to_square is None):
            raise ValueError("either move or from_square and to_square is required")
        return self


class MoveModel(BaseModel):
    uci: str
    from_square: str
    to_square: str
    piece: Optional[str]
    captured: Optional[str] = None
    promotion: Optional[str] = None
    castle: Optional[str] = None
    en_passant: bool = False
    remove_square: Optional[str] = None


class GameState(BaseModel):
    game_id: str
    fen: str
    turn: str
    status: GameStatus
    in_check: bool
    checkmate: bool
    stalemate: bool
    evaluation: Dict[str, float]
    legal_moves: List[str]
    last_move: Optional[MoveModel]
    move_history: List[str]
    preview: bool = False


class RayModel(BaseModel):
    df: int
    dr: int
    length: int


class SquareMoves(BaseModel):
    square: str
    moves: List[MoveModel]
    attacks: List[str]
    rays: List[RayModel]


class AttackMapResponse(BaseModel):
    color: Color
    counts: List[int]


class OverlaysResponse(BaseModel):
    color: Color
    threat_levels: List[float]
    king_heat: List[float]
    captured: Dict[str, Dict[str, int]]


class RankedMove(BaseModel):
    move: MoveModel
    score: float
    mates: bool
    piece_value: int


class AutoMovesResponse(BaseModel):
    color: Color
    moves: List[RankedMove]


class PerftRequest(BaseModel):
    fen: str = Field(..., description="FEN string")
    depth: int = Field(default=1, ge=0, le=4)


class PerftResponse(BaseModel):
    fen: str
    depth: int
    nodes: int


def create_app(
    default_fen: str = START_FEN,
    log_level: str = "INFO",
    max_sessions: Optional[int] = None,
) -> FastAPI:
    app = FastAPI(title="Chess Visualizer Engine API", version="0.1.0")

    logging.basicConfig(level=log_level)

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore(default_fen=default_fen, max_sessions=max_sessions)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/scenarios", response_model=List[ScenarioModel])
    async def list_scenarios() -> List[ScenarioModel]:
        return [
            ScenarioModel(id=s.id, name=s.name, description=s.description, fen=s.fen)
            for s in SCENARIOS
        ]

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        game: Optional[Game] = None
        if req is not None and req.scenario:
            try:
                game = Game.from_scenario(req.scenario)
            except KeyError:
                raise HTTPException(status_code=404, detail="scenario not found")
        elif req is not None and req.fen:
            game = Game.new(req.fen)
        game_id = store.create(game)
        game = _require_game(store, game_id)
        logger.info("game created", extra={"game_id": game_id, "fen": game.to_fen()})
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, bool]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"deleted": True}

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        return _game_state(game_id, game)

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        if not req.fen.strip():
            raise HTTPException(status_code=400, detail="fen is required")
        store.set(game_id, Game.new(req.fen))
        return _game_state(game_id, _require_game(store, game_id))

    @app.get("/api/games/{game_id}/moves/{square}", response_model=SquareMoves)
    async def square_moves(game_id: str, square: str) -> SquareMoves:
        game = _require_game(store, game_id)
        sq = _parse_square(square)
        board = game.position.board
        return SquareMoves(
            square=square,
            moves=[_move_model(m) for m in game.legal_moves(sq)],
            attacks=[square_to_str(t) for t in piece_attacks(board, sq)],
            rays=[RayModel(df=r.df, dr=r.dr, length=r.length) for r in move_rays(board, sq)],
        )

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        from_sq, to_sq, promotion = _parse_move_request(req)
        try:
            move = game.apply_move(from_sq, to_sq, promotion)
        except ValueError:
            raise HTTPException(status_code=400, detail="illegal move")
        logger.info("move applied", extra={"game_id": game_id, "move": move.to_uci()})
        return _game_state(game_id, game)

    @app.post("/api/games/{game_id}/preview", response_model=GameState)
    async def preview_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        from_sq, to_sq, promotion = _parse_move_request(req)
        try:
            position = game.preview(from_sq, to_sq, promotion)
        except ValueError:
            raise HTTPException(status_code=400, detail="illegal move")
        history = game.move_history_uci() + [position.last_move.to_uci()]
        return _position_state(game_id, position, history, preview=True)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        try:
            game.undo_move()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _game_state(game_id, game)

    @app.post("/api/perft", response_model=PerftResponse)
    async def perft(req: PerftRequest) -> PerftResponse:
        if not req.fen.strip():
            raise HTTPException(status_code=400, detail="fen is required")
        position = Position.from_fen(req.fen)
        return PerftResponse(
            fen=position.to_fen(), depth=req.depth, nodes=perft_nodes(position, req.depth)
        )

    @app.get("/api/games/{game_id}/attack-map", response_model=AttackMapResponse)
    async def get_attack_map(game_id: str, color: Optional[Color] = None) -> AttackMapResponse:
        game = _require_game(store, game_id)
        side = color or game.position.turn
        return AttackMapResponse(color=side, counts=attack_map(game.position.board, side))

    @app.get("/api/games/{game_id}/overlays", response_model=OverlaysResponse)
    async def get_overlays(game_id: str, color: Optional[Color] = None) -> OverlaysResponse:
        game = _require_game(store, game_id)
        board = game.position.board
        side = color or game.position.turn
        captured = {
            c.value: {pt.value: n for pt, n in counts.items()}
            for c, counts in captured_pieces(board).items()
        }
        return OverlaysResponse(
            color=side,
            threat_levels=threat_levels(board),
            king_heat=king_heat(board, side),
            captured=captured,
        )

    @app.get("/api/games/{game_id}/auto-moves", response_model=AutoMovesResponse)
    async def auto_moves(
        game_id: str,
        color: Optional[Color] = None,
        limit: Optional[int] = Query(default=None, ge=1),
    ) -> AutoMovesResponse:
        game = _require_game(store, game_id)
        side = color or game.position.turn
        ranked = rank_moves(game.position, side)
        if limit is not None:
            ranked = ranked[:limit]
        return AutoMovesResponse(
            color=side,
            moves=[
                RankedMove(
                    move=_move_model(r.move),
                    score=r.score,
                    mates=r.mates,
                    piece_value=r.piece_value,
                )
                for r in ranked
            ],
        )

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _parse_square(name: str) -> int:
    try:
        return str_to_square(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _parse_move_request(req: MoveRequest) -> tuple[int, int, Optional[PieceType]]:
    promotion = parse_promotion(req.promotion) if req.promotion else None
    if req.move is not None:
        try:
            parsed = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return parsed.from_sq, parsed.to_sq, parsed.promotion or promotion
    return _parse_square(req.from_square), _parse_square(req.to_square), promotion


def _move_model(move: Move) -> MoveModel:
    return MoveModel(
        uci=move.to_uci(),
        from_square=square_to_str(move.from_sq),
        to_square=square_to_str(move.to_sq),
        piece=str(move.piece) if move.piece else None,
        captured=str(move.captured) if move.captured else None,
        promotion=move.promotion.value if move.promotion else None,
        castle=move.castle,
        en_passant=move.en_passant,
        remove_square=square_to_str(move.remove_sq) if move.remove_sq is not None else None,
    )


def _game_state(game_id: str, game: Game) -> GameState:
    return _position_state(game_id, game.position, game.move_history_uci())


def _position_state(
    game_id: str, position: Position, history: List[str], *, preview: bool = False
) -> GameState:
    status = game_status(position)
    return GameState(
        game_id=game_id,
        fen=position.to_fen(),
        turn=position.turn.value,
        status=status,
        in_check=status in (GameStatus.CHECK, GameStatus.CHECKMATE),
        checkmate=status is GameStatus.CHECKMATE,
        stalemate=status is GameStatus.STALEMATE,
        evaluation={c.value: round(evaluate(position, c), 4) for c in Color},
        legal_moves=[m.to_uci() for m in all_legal_moves(position)],
        last_move=_move_model(position.last_move) if position.last_move else None,
        move_history=history,
        preview=preview,
    )


# Default app for non-factory servers
app = create_app()
