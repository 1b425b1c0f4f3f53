"""
Game status state machine.

NOT_STARTED -> ON_GOING <-> CHECK -> CHECKMATE | DRAW_STALEMATE | DRAW_FIFTY_MOVE_RULE

The status is re-evaluated once after every applied move, from the point of view of the player about to move.
"""

import logging
from enum import Enum, auto
from typing import Optional, Sequence

from src.core.config import GameSettings
from src.engine.legality import is_in_check, player_has_moves
from src.engine.moves import MoveMadeEvent, MoveRecord
from src.engine.pieces import Color, Piece, PieceType

logger = logging.getLogger(__name__)


class DrawReason(Enum):
    """Fivefold repetition and dead positions are not detected."""

    STALEMATE = auto()
    FIFTY_MOVE_RULE = auto()


class Status(Enum):
    NOT_STARTED = auto()
    ON_GOING = auto()
    CHECK = auto()
    CHECKMATE = auto()
    DRAW_STALEMATE = auto()
    DRAW_FIFTY_MOVE_RULE = auto()

    @property
    def is_draw(self) -> bool:
        return self in (Status.DRAW_STALEMATE, Status.DRAW_FIFTY_MOVE_RULE)

    @property
    def is_terminal(self) -> bool:
        return self == Status.CHECKMATE or self.is_draw

    @property
    def draw_reason(self) -> Optional[DrawReason]:
        return {
            Status.DRAW_STALEMATE: DrawReason.STALEMATE,
            Status.DRAW_FIFTY_MOVE_RULE: DrawReason.FIFTY_MOVE_RULE,
        }.get(self)


def next_fifty_move_count(move: MoveMadeEvent, count: int) -> int:
    """Pawn moves and captures reset the clock, anything else adds one half-move"""
    if move.piece.piece_type == PieceType.PAWN or move.is_take():
        return 0
    return count + 1


def evaluate_status(
    mover: Color,
    pieces: Sequence[Piece],
    last_move: Optional[MoveRecord],
    fifty_move_count: int,
    settings: GameSettings,
) -> Status:
    """
    Status after `mover` made their move.
    ---

    1. checkmate: opponent is in check and has no moves
    2. fifty-move rule: limit reached (checked before stalemate)
    3. check: opponent is in check, but can still get out of it
    4. stalemate: opponent is not in check and has no moves

    NOTE: settings decide whether reaching the fifty-move limit overrules a checkmate on the same move.
    """
    opponent = mover.opponent()
    has_moves = player_has_moves(opponent, pieces, last_move)
    check = is_in_check(opponent, pieces, last_move)
    limit_reached = fifty_move_count >= settings.fifty_move_limit

    if limit_reached and settings.fifty_move_precedes_checkmate:
        status = Status.DRAW_FIFTY_MOVE_RULE
    elif check and not has_moves:
        status = Status.CHECKMATE
    elif limit_reached:
        status = Status.DRAW_FIFTY_MOVE_RULE
    elif check:
        status = Status.CHECK
    elif not has_moves:
        status = Status.DRAW_STALEMATE
    else:
        status = Status.ON_GOING

    logger.debug(
        "%s to move: check=%s, has_moves=%s, fifty_move_count=%d -> %s",
        opponent,
        check,
        has_moves,
        fifty_move_count,
        status.name,
    )
    return status


def passes_turn(status: Status) -> bool:
    """The turn only passes on while the game goes on. After the final move, the turn stays with the player who made it."""
    return status in (Status.ON_GOING, Status.CHECK)
