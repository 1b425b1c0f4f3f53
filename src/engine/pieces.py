"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from src.engine.square import RANK_1, RANK_2, RANK_7, RANK_8, Square


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def pawn_direction(self) -> int:
        """White pawns move UP the board (increasing rank), black pawns move DOWN"""
        return 1 if self == Color.WHITE else -1

    @property
    def pawn_start_rank(self) -> int:
        return RANK_2 if self == Color.WHITE else RANK_7

    @property
    def home_rank(self) -> int:
        return RANK_1 if self == Color.WHITE else RANK_8

    @property
    def promotion_rank(self) -> int:
        return RANK_8 if self == Color.WHITE else RANK_1

    def __str__(self) -> str:
        return self.name.capitalize()


class PieceType(Enum):
    KING = auto()
    QUEEN = auto()
    ROOK = auto()
    BISHOP = auto()
    KNIGHT = auto()
    PAWN = auto()

    @property
    def notation(self) -> str:
        """Letter used in algebraic notation. Pawns do not get one."""
        return PIECE_NOTATION[self]


PIECE_NOTATION: dict[PieceType, str] = {
    PieceType.KING: "K",
    PieceType.QUEEN: "Q",
    PieceType.ROOK: "R",
    PieceType.BISHOP: "B",
    PieceType.KNIGHT: "N",
    PieceType.PAWN: "",
}

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass
class Piece:
    color: Color
    piece_type: PieceType
    pos: Square
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str, pos: Square) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(color, piece_type, pos)

    def move_to(self, square: Square) -> None:
        """Relocate the piece. Once moved, a piece loses its castling / double step privileges for good."""
        self.pos = square
        self.has_moved = True

    def promote_to(self, new_type: PieceType) -> None:
        self.piece_type = new_type
