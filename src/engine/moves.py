"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the maximal set of squares each piece type could reach.

The squares produced here ignore every other piece on the board: blocking, captures and
legality are all checked later (see legality.py).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Iterable, Optional

from src.core.exceptions import InvalidDestinationError
from src.engine.pieces import Piece, PieceType
from src.engine.square import BOARD_DIMENSIONS, Offset, Square

# (delta rank, delta file)
DIAGONALS: list[Offset] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
STRAIGHTS: list[Offset] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Offset] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Offset] = DIAGONALS + STRAIGHTS
# two files sideways: only ever legal as castling
CASTLING_DELTAS: list[Offset] = [(0, 2), (0, -2)]


# --- MOVEMENT PATTERNS ---
def single_step_squares(origin: Square, deltas: Iterable[Offset]) -> set[Square]:
    """Apply every delta once. Deltas that would leave the board are simply dropped."""
    squares: set[Square] = set()
    for delta in deltas:
        try:
            squares.add(origin.try_add(delta))
        except InvalidDestinationError:
            continue
    return squares


def sliding_squares(origin: Square, directions: Iterable[Offset]) -> set[Square]:
    """
    Project each direction outward, step by step, until the edge of the board.

    ---
    NOTE: Unlike a raycast, this does NOT stop at the first occupied square. The full
    theoretical reach is returned and the path check culls the blocked squares afterward.
    """
    squares: set[Square] = set()
    for d_rank, d_file in directions:
        for distance in range(1, max(BOARD_DIMENSIONS)):
            try:
                squares.add(origin.try_add((d_rank * distance, d_file * distance)))
            except InvalidDestinationError:
                # once off the board, any further step is off the board too
                break
    return squares


def candidate_pawn_squares(piece: Piece) -> set[Square]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in their first move
    - takes diagonally (en passant included)
    """
    forward = piece.color.pawn_direction
    deltas: list[Offset] = [(forward, 0), (2 * forward, 0), (forward, 1), (forward, -1)]
    return single_step_squares(piece.pos, deltas)


def candidate_knight_squares(piece: Piece) -> set[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_squares(piece.pos, KNIGHT_DELTAS)


def candidate_bishop_squares(piece: Piece) -> set[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return sliding_squares(piece.pos, DIAGONALS)


def candidate_rook_squares(piece: Piece) -> set[Square]:
    """Rooks move either horizontally or vertically"""
    return sliding_squares(piece.pos, STRAIGHTS)


def candidate_queen_squares(piece: Piece) -> set[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_squares(piece) | candidate_rook_squares(piece)


def candidate_king_squares(piece: Piece) -> set[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a king move of two files (whether it is allowed is decided elsewhere).
    """
    return single_step_squares(piece.pos, KING_DELTAS + CASTLING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT PATTERNS ---
CandidateSquaresFn = Callable[[Piece], set[Square]]
MOVE_PATTERNS: dict[PieceType, CandidateSquaresFn] = {
    PieceType.PAWN: candidate_pawn_squares,
    PieceType.KNIGHT: candidate_knight_squares,
    PieceType.BISHOP: candidate_bishop_squares,
    PieceType.ROOK: candidate_rook_squares,
    PieceType.QUEEN: candidate_queen_squares,
    PieceType.KING: candidate_king_squares,
}


def candidate_squares(piece: Piece) -> set[Square]:
    return MOVE_PATTERNS[piece.piece_type](piece)


# --- PATH CLEARANCE ---
def squares_between(begin: Square, end: Square) -> list[Square]:
    """
    The squares strictly in between two squares on the same rank, file or diagonal.

    Squares that are not aligned (ex. a knight jump) have nothing in between: returns an empty list.
    """
    aligned = (
        begin.is_same_rank(end)
        or begin.is_same_file(end)
        or begin.is_same_diagonal(end)
    )
    if not aligned or begin == end:
        return []

    d_rank = (end.rank > begin.rank) - (end.rank < begin.rank)
    d_file = (end.file > begin.file) - (end.file < begin.file)
    distance = max(abs(end.rank - begin.rank), abs(end.file - begin.file))
    return [begin + (d_rank * step, d_file * step) for step in range(1, distance)]


def is_path_empty(begin: Square, end: Square, pieces: Iterable[Piece]) -> bool:
    """Checks that none of the pieces supplied stands in the path between the two squares"""
    occupied = {piece.pos for piece in pieces}
    return not any(square in occupied for square in squares_between(begin, end))


# --- MOVE RECORDS ---
class MoveType(Enum):
    MOVE = auto()
    TAKE = auto()
    TAKE_EN_PASSANT = auto()
    CASTLE = auto()


@dataclass(frozen=True)
class MoveRecord:
    """
    The last move made. Context needed for en passant.

    `piece` is a snapshot of the piece BEFORE it moved.
    """

    piece: Piece
    origin: Square
    destination: Square


@dataclass(frozen=True)
class MoveMadeEvent:
    """Outcome of a successfully applied move. Produced once per move and never changed afterward."""

    piece: Piece
    origin: Square
    destination: Square
    move_type: MoveType
    captured: Optional[Piece] = None

    def __post_init__(self) -> None:
        # keep our own copies, so later mutations of the board cannot leak into the history
        object.__setattr__(self, "piece", replace(self.piece))
        if self.captured is not None:
            object.__setattr__(self, "captured", replace(self.captured))

    def is_take(self) -> bool:
        return self.move_type in (MoveType.TAKE, MoveType.TAKE_EN_PASSANT)

    @property
    def record(self) -> MoveRecord:
        return MoveRecord(self.piece, self.origin, self.destination)


# -- PAWN PROMOTION ---
def is_promotion_square(piece: Piece, square: Square) -> bool:
    """Check if a pawn reaches the far end of the board"""
    is_pawn = piece.piece_type == PieceType.PAWN
    return is_pawn and square.rank == piece.color.promotion_rank
