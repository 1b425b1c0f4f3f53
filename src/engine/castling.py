"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from src.engine.pieces import Color
from src.engine.square import Square


class CastlingSide(Enum):
    """The two castling directions. Values are their notation in the move history."""

    KING_SIDE = "0-0"
    QUEEN_SIDE = "0-0-0"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: Castling is only possible while neither piece has moved, so they are known to stand on their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    (Color.WHITE, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    (Color.BLACK, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    (Color.BLACK, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_rule(
    color: Color, origin: Square, destination: Square
) -> Optional[CastlingSquares]:
    """Find the castling rule for a king moving from origin to destination (None if this is no castling move)"""
    for (rule_color, _), rule in CASTLING_RULES.items():
        if rule_color != color:
            continue
        if rule.king_from == origin and rule.king_to == destination:
            return rule
    return None


def castling_side(origin: Square, destination: Square) -> Optional[CastlingSide]:
    """Castling is the only king move that covers two files."""
    if origin.rank != destination.rank or abs(destination.file - origin.file) != 2:
        return None
    return (
        CastlingSide.KING_SIDE
        if destination.file > origin.file
        else CastlingSide.QUEEN_SIDE
    )


def squares_between_on_rank(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares in between the two squares specified that are on the same rank

    Needed for checking if you can still castle (the caller will check which of those are empty etc.)
    """
    if from_square.rank != to_square.rank:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )

    step = 1 if to_square.file > from_square.file else -1
    return [
        Square(from_square.rank, file)
        for file in range(from_square.file + step, to_square.file, step)
    ]


def king_path(rule: CastlingSquares) -> list[Square]:
    """Every square the king stands on while castling: start, the square it passes and its destination."""
    return [
        rule.king_from,
        *squares_between_on_rank(rule.king_from, rule.king_to),
        rule.king_to,
    ]
