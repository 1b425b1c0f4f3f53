"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.engine.game import Game
from src.engine.square import Square

PlayFn = Callable[..., None]


@pytest.fixture
def new_game() -> Game:
    """Fresh game from the standard starting position, White to move."""
    return Game.new_game()


@pytest.fixture
def play() -> PlayFn:
    """
    Play a sequence of moves written as origin + destination, ex. play(game, "e2e4", "e7e5").
    Promotions are not resolved: use Game.resolve_promotion() for those.
    """

    def _play(game: Game, *moves: str) -> None:
        for move in moves:
            origin = Square.from_algebraic(move[:2])
            destination = Square.from_algebraic(move[2:4])
            piece_id = game.board.piece_id_at(origin)
            assert piece_id is not None, f"No piece on {origin} to play {move}"
            game.request_move(piece_id, destination)

    return _play
