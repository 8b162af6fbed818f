from __future__ import annotations

import os

import pytest

from tictactoe_engine.game_logic import GameEngine, Position

# Qt tests run without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def play(engine: GameEngine, *cells: int) -> GameEngine:
    for c in cells:
        engine.play_move(Position(c))
    return engine


@pytest.fixture()
def engine() -> GameEngine:
    return GameEngine()


@pytest.fixture()
def won_engine() -> GameEngine:
    # X takes the top row
    return play(GameEngine(), 0, 3, 1, 4, 2)


@pytest.fixture()
def drawn_engine() -> GameEngine:
    return play(GameEngine(), 0, 1, 2, 4, 3, 5, 7, 6, 8)
