from __future__ import annotations

import pytest

from chessviz.engine.board import CLASSIC_FEN, parse_fen
from chessviz.engine.perft import perft


def test_perft_startpos_depths_0_3() -> None:
    p = parse_fen(CLASSIC_FEN)
    assert perft(p, 0) == 1
    assert perft(p, 1) == 20
    assert perft(p, 2) == 400
    assert perft(p, 3) == 8902


def test_perft_kiwipete_depth_2() -> None:
    # Classic Kiwipete position: castling, pins and en passant at depth 2
    fen = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
    p = parse_fen(fen)
    assert perft(p, 1) == 48
    assert perft(p, 2) == 2039


def test_perft_rook_endgame_depth_3() -> None:
    # Rank pins against en passant captures
    p = parse_fen("8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1")
    assert perft(p, 1) == 14
    assert perft(p, 2) == 191
    assert perft(p, 3) == 2812


def test_perft_negative_depth_raises() -> None:
    with pytest.raises(ValueError):
        perft(parse_fen(CLASSIC_FEN), -1)
