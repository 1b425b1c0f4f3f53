"""The Game board holds the authoritative set of live pieces (in chess: the `position`)"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.core.exceptions import (
    CorruptBoardError,
    InvalidDestinationError,
    InvalidPlacementError,
    NoPieceSelectedError,
)
from src.engine.castling import CASTLING_RULES
from src.engine.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.engine.square import BOARD_DIMENSIONS, E_FILE, Square

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

PieceId = int


@dataclass(frozen=True)
class PieceState:
    """Read-model record of a single piece, for whoever draws the board."""

    piece_id: PieceId
    color: Color
    piece_type: PieceType
    square: Square


@dataclass
class Board:
    """
    Flat arena of pieces.
    ---

    Every piece gets an ID when placed on the board. IDs are never reused, so an ID handed out to
    a presentation layer keeps pointing at the same piece for the whole game.
    Taking a piece removes it from the arena.
    """

    _pieces: dict[PieceId, Piece] = field(default_factory=dict)
    _next_id: PieceId = 0

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        NOTE: pieces found away from their starting squares are marked as moved.
        """
        board = cls()
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[0]:
            raise InvalidPlacementError(
                f"Expected {BOARD_DIMENSIONS[0]} ranks in {fen_str!r}, found {len(fen_by_ranks)}."
            )
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[0] - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in fen_one_rank:
                if character.lower() in FEN_TO_PIECE:
                    piece = Piece.from_fen(character, Square(rank, file))
                    piece.has_moved = not _on_starting_square(piece)
                    board.place_piece(piece)
                    file += 1
                elif character in "12345678":
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                else:
                    raise InvalidPlacementError(
                        f"Cannot interpret {character!r} in piece placement {fen_str!r}."
                    )
            if file != BOARD_DIMENSIONS[1]:
                raise InvalidPlacementError(
                    f"Rank {fen_one_rank!r} covers {file} squares instead of {BOARD_DIMENSIONS[1]}."
                )
        return board

    # --- ARENA ---
    def place_piece(self, piece: Piece) -> PieceId:
        if not piece.pos.is_valid():
            raise InvalidDestinationError(f"Cannot place a piece on {piece.pos!r}.")
        if self.piece_at(piece.pos) is not None:
            raise InvalidDestinationError(f"Square {piece.pos} is already occupied.")
        piece_id = self._next_id
        self._pieces[piece_id] = piece
        self._next_id += 1
        return piece_id

    def piece(self, piece_id: PieceId) -> Piece:
        if piece_id not in self._pieces:
            raise NoPieceSelectedError(f"No piece with ID {piece_id} on the board.")
        return self._pieces[piece_id]

    def piece_id_at(self, square: Square) -> Optional[PieceId]:
        return next(
            (
                piece_id
                for piece_id, piece in self._pieces.items()
                if piece.pos == square
            ),
            None,
        )

    def piece_at(self, square: Square) -> Optional[Piece]:
        piece_id = self.piece_id_at(square)
        return None if piece_id is None else self._pieces[piece_id]

    def pieces(self) -> list[Piece]:
        return list(self._pieces.values())

    def items(self) -> Iterator[tuple[PieceId, Piece]]:
        return iter(list(self._pieces.items()))

    def locate_color(self, color: Color) -> list[Piece]:
        return [piece for piece in self._pieces.values() if piece.color == color]

    def king(self, color: Color) -> Piece:
        """Exactly one king per color must always be present"""
        kings = [
            piece
            for piece in self.locate_color(color)
            if piece.piece_type == PieceType.KING
        ]
        if len(kings) != 1:
            raise CorruptBoardError(f"Expected one {color} king, found {len(kings)}.")
        return kings[0]

    # --- UPDATES ---
    def move_piece(self, piece_id: PieceId, square: Square) -> None:
        """Update the position on the board. Does not check any rules: taking pieces is up to the caller."""
        self.piece(piece_id).move_to(square)

    def remove_piece(self, piece_id: PieceId) -> Piece:
        piece = self.piece(piece_id)
        del self._pieces[piece_id]
        return piece

    def promote_piece(self, piece_id: PieceId, to: PieceType) -> None:
        self.piece(piece_id).promote_to(to)

    def state(self) -> list[PieceState]:
        return [
            PieceState(piece_id, piece.color, piece.piece_type, piece.pos)
            for piece_id, piece in self.items()
        ]


def _on_starting_square(piece: Piece) -> bool:
    """Only matters for the pieces whose first move is special: pawns, kings and rooks."""
    if piece.piece_type == PieceType.PAWN:
        return piece.pos.rank == piece.color.pawn_start_rank
    if piece.piece_type == PieceType.KING:
        return piece.pos == Square(piece.color.home_rank, E_FILE)
    if piece.piece_type == PieceType.ROOK:
        return any(
            rule.rook_from == piece.pos
            for (color, _), rule in CASTLING_RULES.items()
            if color == piece.color
        )
    return True
