from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Any, Callable, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
_GAME_PATH = re.compile(r"^/api/games/(?P<game_id>[^/]+)")


def game_id_from_path(path: str) -> Optional[str]:
    match = _GAME_PATH.match(path)
    return match.group("game_id") if match else None


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ID and log it together with its game.

    A client-supplied ``x-request-id`` is reused so the board UI can
    correlate its own logs with ours. Requests addressed to a game session
    carry its ``game_id`` in both log records. Server errors log at WARNING.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        context: Dict[str, Any] = {"request_id": request_id}
        game_id = game_id_from_path(request.url.path)
        if game_id is not None:
            context["game_id"] = game_id

        logger.info("request", extra={**context, "method": request.method, "path": request.url.path})

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "response",
            extra={**context, "status_code": response.status_code, "duration_ms": elapsed_ms},
        )
        return response
