from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from chessviz.assets.scenarios import get_scenario
from chessviz.engine.board import START_FEN
from chessviz.protocol.http.app import create_app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Serve the chess visualizer engine over HTTP")
    ap.add_argument("--host", default="127.0.0.1", help="Bind address")
    ap.add_argument("--port", type=int, default=8000, help="Bind port")
    ap.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level for the app and uvicorn",
    )
    ap.add_argument(
        "--max-sessions",
        type=int,
        default=None,
        help="Keep at most this many games, dropping the least recently used",
    )
    start = ap.add_mutually_exclusive_group()
    start.add_argument("--fen", default=None, help="Default position for new games")
    start.add_argument("--scenario", default=None, help="Scenario id used as default position")
    return ap.parse_args(argv)


def resolve_default_fen(args: argparse.Namespace) -> str:
    if args.scenario:
        return get_scenario(args.scenario).fen
    return args.fen or START_FEN


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    app = create_app(
        default_fen=resolve_default_fen(args),
        log_level=args.log_level.upper(),
        max_sessions=args.max_sessions,
    )
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
