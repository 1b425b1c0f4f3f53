"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase
from typing import TYPE_CHECKING, Iterable, Optional

from src.core.exceptions import InvalidDestinationError

if TYPE_CHECKING:
    from src.engine.pieces import Color, Piece

# Chess board is always 8x8. (ranks, files)
BOARD_DIMENSIONS = (8, 8)

RANK_1, RANK_2, RANK_3, RANK_4, RANK_5, RANK_6, RANK_7, RANK_8 = range(8)
A_FILE, B_FILE, C_FILE, D_FILE, E_FILE, F_FILE, G_FILE, H_FILE = range(8)

# (delta rank, delta file)
Offset = tuple[int, int]


@dataclass(frozen=True)
class Square:
    """0-indexed: Square(rank=0, file=0) is a1, Square(rank=7, file=7) is h8"""

    rank: int
    file: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[1] not in "12345678":
            raise InvalidDestinationError(f"Cannot interpret {sq!r} as a square.")
        square = cls(rank=int(sq[1]) - 1, file=ord(sq[0].lower()) - ord("a"))
        if not square.is_valid():
            raise InvalidDestinationError(f"Square {sq!r} is not on the board.")
        return square

    def to_algebraic(self) -> str:
        return f"{self.file_letter()}{self.rank_digit()}"

    def __str__(self) -> str:
        return self.to_algebraic()

    def file_letter(self) -> str:
        if not 0 <= self.file < BOARD_DIMENSIONS[1]:
            raise InvalidDestinationError(f"No file letter for file index {self.file}")
        return ascii_lowercase[self.file]

    def rank_digit(self) -> str:
        return str(self.rank + 1)

    def is_valid(self) -> bool:
        return (0 <= self.rank < BOARD_DIMENSIONS[0]) and (
            0 <= self.file < BOARD_DIMENSIONS[1]
        )

    def is_white_square(self) -> bool:
        """a1 is a dark square, so light squares are the ones with an odd coordinate sum"""
        return (self.rank + self.file + 1) % 2 == 0

    def is_adjacent(self, other: Square) -> bool:
        """
        Adjacency includes diagonals.

        NOTE: a square is not adjacent to itself
        """
        if self == other:
            return False
        return abs(self.rank - other.rank) <= 1 and abs(self.file - other.file) <= 1

    # NOTE: the three alignment checks below return True when other == self
    def is_same_rank(self, other: Square) -> bool:
        return self.rank == other.rank

    def is_same_file(self, other: Square) -> bool:
        return self.file == other.file

    def is_same_diagonal(self, other: Square) -> bool:
        return abs(self.rank - other.rank) == abs(self.file - other.file)

    def is_occupied(self, pieces: Iterable[Piece]) -> Optional[Color]:
        """Color of the piece standing on this square, None if the square is empty."""
        return next((piece.color for piece in pieces if piece.pos == self), None)

    def __add__(self, offset: Offset) -> Square:
        """Unchecked: the result may be off the board."""
        d_rank, d_file = offset
        return Square(self.rank + d_rank, self.file + d_file)

    def try_add(self, offset: Offset) -> Square:
        """Fallible add. Never clamps or wraps around: off the board is an error."""
        new_square = self + offset
        if not new_square.is_valid():
            raise InvalidDestinationError(
                f"{self} + {offset} = {new_square!r} lies off the board."
            )
        return new_square
