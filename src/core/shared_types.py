"""
Type definitions used across layers
"""

from enum import StrEnum


# --- NOTE member names match the enums in src/engine, so `Status[engine_status.name]` converts between them
class Status(StrEnum):
    NOT_STARTED = "not started"
    ON_GOING = "ongoing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    DRAW_STALEMATE = "draw by stalemate"
    DRAW_FIFTY_MOVE_RULE = "draw by 50 half-moves"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
