from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Optional

from ...engine.game import Game


logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """Thread-safe in-memory store of board sessions.

    Responsibilities:
    - Create new sessions with unique `game_id`s, starting from `default_fen`
    - Retrieve existing sessions by `game_id`
    - Replace a session's game (e.g. when a new FEN is loaded)
    - Delete sessions
    - Evict the least recently used session once `max_sessions` is reached
    """

    def __init__(self, default_fen: Optional[str] = None, max_sessions: Optional[int] = None) -> None:
        if max_sessions is not None and max_sessions < 1:
            raise ValueError("max_sessions must be positive")
        self._lock = threading.RLock()
        self._games: "OrderedDict[str, Game]" = OrderedDict()
        self._default_fen = default_fen
        self._max_sessions = max_sessions

    def create(self, game: Optional[Game] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        if game is None:
            game = Game.new(self._default_fen)
        with self._lock:
            self._games[gid] = game
            self._evict()
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
            if game is not None:
                self._games.move_to_end(game_id)
            return game

    def set(self, game_id: str, game: Game) -> None:
        with self._lock:
            if game_id not in self._games:
                raise KeyError(game_id)
            self._games[game_id] = game
            self._games.move_to_end(game_id)

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def _evict(self) -> None:
        if self._max_sessions is None:
            return
        while len(self._games) > self._max_sessions:
            gid, _ = self._games.popitem(last=False)
            logger.info("session evicted", extra={"game_id": gid})

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
