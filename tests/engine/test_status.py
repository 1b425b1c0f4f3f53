"""Unit tests for src/engine/status.py"""

import pytest

from src.core.config import GameSettings
from src.engine.board import Board
from src.engine.moves import MoveMadeEvent, MoveType
from src.engine.pieces import Color, Piece, PieceType
from src.engine.square import Square
from src.engine.status import (
    DrawReason,
    Status,
    evaluate_status,
    next_fifty_move_count,
    passes_turn,
)

# black king on a8 got mated by the rooks on g7 and h8
LADDER_MATE = "k6R/6R1/8/8/8/8/8/K7"
# black king on a8 has nowhere to go, but is not in check
STALEMATE = "k7/2Q5/1K6/8/8/8/8/8"


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


# --- FIFTY MOVE COUNTER ---
@pytest.mark.parametrize(
    "move, expected",
    [
        (
            MoveMadeEvent(
                Piece(Color.WHITE, PieceType.KNIGHT, sq("g1")),
                sq("g1"),
                sq("f3"),
                MoveType.MOVE,
            ),
            13,
        ),
        (
            MoveMadeEvent(
                Piece(Color.WHITE, PieceType.PAWN, sq("e2")),
                sq("e2"),
                sq("e4"),
                MoveType.MOVE,
            ),
            0,
        ),
        (
            MoveMadeEvent(
                Piece(Color.BLACK, PieceType.ROOK, sq("a8")),
                sq("a8"),
                sq("a1"),
                MoveType.TAKE,
                captured=Piece(Color.WHITE, PieceType.ROOK, sq("a1")),
            ),
            0,
        ),
        (
            MoveMadeEvent(
                Piece(Color.WHITE, PieceType.KING, sq("e1")),
                sq("e1"),
                sq("g1"),
                MoveType.CASTLE,
            ),
            13,
        ),
    ],
)
def test_fifty_move_counter(move: MoveMadeEvent, expected: int) -> None:
    """Pawn moves and captures reset the counter, every other move adds exactly one."""
    assert next_fifty_move_count(move, 12) == expected


# --- EVALUATION ---
def test_ongoing() -> None:
    board = Board.starting_position()
    assert evaluate_status(Color.WHITE, board.pieces(), None, 0, GameSettings()) == Status.ON_GOING


def test_check() -> None:
    board = Board.from_fen("k6R/8/8/8/8/8/8/K7")
    assert evaluate_status(Color.WHITE, board.pieces(), None, 0, GameSettings()) == Status.CHECK


def test_checkmate() -> None:
    board = Board.from_fen(LADDER_MATE)
    assert (
        evaluate_status(Color.WHITE, board.pieces(), None, 0, GameSettings())
        == Status.CHECKMATE
    )


def test_stalemate() -> None:
    board = Board.from_fen(STALEMATE)
    assert (
        evaluate_status(Color.WHITE, board.pieces(), None, 0, GameSettings())
        == Status.DRAW_STALEMATE
    )


def test_fifty_move_limit() -> None:
    board = Board.starting_position()
    settings = GameSettings()
    assert evaluate_status(Color.BLACK, board.pieces(), None, 49, settings) == Status.ON_GOING
    assert (
        evaluate_status(Color.BLACK, board.pieces(), None, 50, settings)
        == Status.DRAW_FIFTY_MOVE_RULE
    )


def test_fifty_move_limit_overrules_checkmate() -> None:
    board = Board.from_fen(LADDER_MATE)
    assert (
        evaluate_status(Color.WHITE, board.pieces(), None, 50, GameSettings())
        == Status.DRAW_FIFTY_MOVE_RULE
    )


def test_checkmate_overrules_fifty_move_limit_when_configured() -> None:
    board = Board.from_fen(LADDER_MATE)
    settings = GameSettings(fifty_move_precedes_checkmate=False)
    assert evaluate_status(Color.WHITE, board.pieces(), None, 50, settings) == Status.CHECKMATE


def test_custom_fifty_move_limit() -> None:
    board = Board.starting_position()
    settings = GameSettings(fifty_move_limit=10)
    assert (
        evaluate_status(Color.WHITE, board.pieces(), None, 10, settings)
        == Status.DRAW_FIFTY_MOVE_RULE
    )


# --- STATUS HELPERS ---
@pytest.mark.parametrize(
    "status, is_terminal, draw_reason, turn_passes",
    [
        (Status.NOT_STARTED, False, None, False),
        (Status.ON_GOING, False, None, True),
        (Status.CHECK, False, None, True),
        (Status.CHECKMATE, True, None, False),
        (Status.DRAW_STALEMATE, True, DrawReason.STALEMATE, False),
        (Status.DRAW_FIFTY_MOVE_RULE, True, DrawReason.FIFTY_MOVE_RULE, False),
    ],
)
def test_status_properties(
    status: Status, is_terminal: bool, draw_reason: DrawReason | None, turn_passes: bool
) -> None:
    assert status.is_terminal == is_terminal
    assert status.draw_reason == draw_reason
    assert status.is_draw == (draw_reason is not None)
    assert passes_turn(status) == turn_passes
