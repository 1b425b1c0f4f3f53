"""Unit tests for src/engine/square.py"""

import pytest

from src.core.exceptions import InvalidDestinationError
from src.engine.pieces import Color, Piece, PieceType
from src.engine.square import Square


@pytest.mark.parametrize(
    "name, rank, file",
    [
        ("a1", 0, 0),
        ("h8", 7, 7),
        ("e4", 3, 4),
        ("C7", 6, 2),  # upper case file letter is accepted
    ],
)
def test_from_algebraic(name: str, rank: int, file: int) -> None:
    """Convert square names into 0-indexed coordinates."""
    assert Square.from_algebraic(name) == Square(rank, file)


@pytest.mark.parametrize(
    "name",
    [
        "i1",  # file past h
        "a9",  # rank past 8
        "a0",  # rank before 1
        "e",  # too short
        "e10",  # too long
        "zz",  # not a square at all
        "a²",  # superscript two is a digit, but not a rank
    ],
)
def test_from_algebraic_off_the_board(name: str) -> None:
    with pytest.raises(InvalidDestinationError):
        _ = Square.from_algebraic(name)


def test_to_algebraic() -> None:
    assert Square(0, 0).to_algebraic() == "a1"
    assert str(Square(7, 3)) == "d8"
    assert Square(4, 5).file_letter() == "f"
    assert Square(4, 5).rank_digit() == "5"


@pytest.mark.parametrize(
    "square, expected",
    [
        (Square(0, 0), True),
        (Square(7, 7), True),
        (Square(-1, 0), False),
        (Square(0, 8), False),
    ],
)
def test_is_valid(square: Square, expected: bool) -> None:
    assert square.is_valid() == expected


@pytest.mark.parametrize(
    "name, is_white",
    [
        ("a1", False),
        ("h1", True),
        ("a8", True),
        ("h8", False),
        ("e4", True),
    ],
)
def test_square_colors(name: str, is_white: bool) -> None:
    """a1 is a dark square, the colors alternate from there."""
    assert Square.from_algebraic(name).is_white_square() == is_white


def test_adjacency() -> None:
    """Adjacent includes diagonals, but a square is not next to itself."""
    e4 = Square.from_algebraic("e4")
    assert e4.is_adjacent(Square.from_algebraic("f5"))
    assert e4.is_adjacent(Square.from_algebraic("e3"))
    assert not e4.is_adjacent(e4)
    assert not e4.is_adjacent(Square.from_algebraic("e6"))


def test_alignment() -> None:
    c3 = Square.from_algebraic("c3")
    assert c3.is_same_diagonal(Square.from_algebraic("f6"))
    assert c3.is_same_diagonal(Square.from_algebraic("a5"))
    assert c3.is_same_file(Square.from_algebraic("c8"))
    assert c3.is_same_rank(Square.from_algebraic("h3"))
    assert not c3.is_same_diagonal(Square.from_algebraic("d5"))


def test_is_occupied() -> None:
    """Returns the color of the piece on the square, if any."""
    e4 = Square.from_algebraic("e4")
    pieces = [Piece(Color.BLACK, PieceType.KNIGHT, e4)]
    assert e4.is_occupied(pieces) == Color.BLACK
    assert Square.from_algebraic("e5").is_occupied(pieces) is None


def test_adding_offsets() -> None:
    """Plain addition does not check the board edge, try_add() does."""
    a1 = Square.from_algebraic("a1")
    assert a1 + (1, 2) == Square.from_algebraic("c2")
    assert a1 + (-1, 0) == Square(-1, 0)
    assert a1.try_add((7, 7)) == Square.from_algebraic("h8")

    with pytest.raises(InvalidDestinationError):
        _ = a1.try_add((-1, 0))
