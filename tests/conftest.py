"""
Shared pytest fixtures for Pente tests.

Game state fixtures are function-scoped so every test gets its own board.
"""
from typing import Callable, Iterable

import pytest

from game import GameState
from rules import BLACK, WHITE, BOARD_SIZE


@pytest.fixture
def state() -> GameState:
    """Fresh game: empty board, White to move."""
    return GameState()


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    """Factory for positions built by dropping stones straight onto the board.

    Captures and wins are not evaluated for the dropped stones; the dirty
    region grows as if each stone had been played.
    """
    def _make(black: Iterable = (), white: Iterable = (), next_player: int = WHITE) -> GameState:
        s = GameState()
        for colour, coords in ((BLACK, black), (WHITE, white)):
            for x, y in coords:
                s.board[x + y * BOARD_SIZE] = colour
                s.expand_region((x, y))
        s.next_player = next_player
        return s

    return _make
