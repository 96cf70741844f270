from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Scenario:
    """A named preset position offered as a training drill."""

    id: str
    name: str
    description: str
    fen: str


SCENARIOS: Tuple[Scenario, ...] = (
    Scenario(
        "italian",
        "Italian Game",
        "Standard Italian Game shell used as the default position.",
        "r1bq1rk1/ppp11ppp/2np1n2/2b1p3/2B1P3/2PP1N2/PP3PPP/RNBQ1RK1 w - - 2 7",
    ),
    Scenario(
        "classic",
        "Fresh Start",
        "Traditional initial chess position, ready for a brand-new game.",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
    ),
    Scenario(
        "queen-h4",
        "Latvian Alarm",
        "White to move: only g3 (or Qf3) stops ...Qxf2# on the next turn.",
        "r3k2r/pppppppp/8/2b5/7q/8/PPPPPPPP/R1BQ1BKR w - - 0 1",
    ),
    Scenario(
        "setup",
        "Open Launchpad",
        "Half-empty training board to explore tactics freely.",
        "4k3/8/3p4/8/4N3/8/3P4/4K3 w - - 0 1",
    ),
    Scenario(
        "pregame",
        "Pregame Focus",
        "Fully empty board to place pieces before starting a custom drill.",
        "8/8/8/8/8/8/8/8 w - - 0 1",
    ),
    Scenario(
        "castle-test",
        "Castle Drill",
        "Kings and rooks ready on the edges to practice both castling sides.",
        "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1",
    ),
    Scenario(
        "en-passant",
        "En Passant Trap",
        "White to move can capture the pawn on d5 via en passant right away.",
        "rnbqkbnr/ppp1pppp/8/3pP3/8/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 4",
    ),
    Scenario(
        "promotion",
        "Promotion Test",
        "White pawn on d7 promotes when advanced to d8.",
        "4k3/3P4/8/8/8/8/8/4K3 w - - 0 1",
    ),
    Scenario(
        "promotion-black",
        "Black Promotion",
        "Black pawn on d2 promotes when advanced to d1.",
        "4K3/8/8/8/8/8/3p4/4k3 b - - 0 1",
    ),
)

_BY_ID: Dict[str, Scenario] = {s.id: s for s in SCENARIOS}


def get_scenario(scenario_id: str) -> Scenario:
    """Look up a scenario by id.

    Raises:
        KeyError: If no scenario has ``scenario_id``.
    """
    try:
        return _BY_ID[scenario_id]
    except KeyError:
        raise KeyError(f"unknown scenario: {scenario_id!r}") from None
