"""
Algebraic notation for the move history.

Examples: `Nf3`, `exd5`, `Rae1`, `0-0`, `e8=Q`, `Qh5!` (check) and `Qxf7#` (checkmate).
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from src.engine.castling import castling_side
from src.engine.legality import legal_moves
from src.engine.moves import MoveMadeEvent, MoveRecord, MoveType
from src.engine.pieces import Color, Piece, PieceType
from src.engine.status import Status

STATUS_SUFFIX: dict[Status, str] = {
    Status.CHECK: "!",
    Status.CHECKMATE: "#",
}


def disambiguate(
    move: MoveMadeEvent, pieces: Sequence[Piece], last_move: Optional[MoveRecord]
) -> str:
    """
    Minimal extra notation to tell apart pieces of the same type that could all reach the destination
    ---

    `pieces` / `last_move` describe the position BEFORE the move was made.

    * another such piece on the same file -> rank digit (full square if one also shares the rank)
    * otherwise -> file letter
    * no other piece can reach the destination -> nothing
    """
    mover = move.piece
    if mover.piece_type == PieceType.PAWN:
        # the file letter of a pawn capture already tells them apart
        return ""

    ambiguous_pieces = [
        piece
        for piece in pieces
        if piece.color == mover.color
        and piece.piece_type == mover.piece_type
        and piece.pos != move.origin
        and move.destination in legal_moves(piece, pieces, last_move)
    ]
    if not ambiguous_pieces:
        return ""

    file_ambiguous = any(
        piece.pos.is_same_file(move.origin) for piece in ambiguous_pieces
    )
    rank_ambiguous = any(
        piece.pos.is_same_rank(move.origin) for piece in ambiguous_pieces
    )
    if file_ambiguous and rank_ambiguous:
        return move.origin.to_algebraic()
    if file_ambiguous:
        return move.origin.rank_digit()
    return move.origin.file_letter()


def annotate_move(
    move: MoveMadeEvent,
    pieces: Sequence[Piece],
    last_move: Optional[MoveRecord],
    status: Status,
    promotion: Optional[PieceType] = None,
) -> str:
    """The algebraic notation of a single (half-)move."""
    suffix = STATUS_SUFFIX.get(status, "")

    if move.move_type == MoveType.CASTLE:
        side = castling_side(move.origin, move.destination)
        assert side is not None
        return f"{side.value}{suffix}"

    disambiguation = disambiguate(move, pieces, last_move)
    promoted = f"={promotion.notation}" if promotion else ""

    if move.is_take():
        piece_letter = (
            move.origin.file_letter()
            if move.piece.piece_type == PieceType.PAWN
            else move.piece.piece_type.notation
        )
        return f"{piece_letter}{disambiguation}x{move.destination}{promoted}{suffix}"

    return f"{move.piece.piece_type.notation}{disambiguation}{move.destination}{promoted}{suffix}"


@dataclass
class HistoryEntry:
    """One full move: white's half-move, and black's reply (once made)"""

    number: int
    white: Optional[str] = None
    black: Optional[str] = None

    def __str__(self) -> str:
        if self.white is None:
            # game was set up with black to move
            return f"{self.number}... {self.black}"
        if self.black is None:
            return f"{self.number}. {self.white}"
        return f"{self.number}. {self.white} {self.black}"


@dataclass
class MoveHistory:
    """
    White's move opens a new entry ("1. e4"), Black's move completes it ("1. e4 e5").
    """

    _entries: list[HistoryEntry] = field(default_factory=list)
    _last_color: Optional[Color] = None

    def record(self, color: Color, san: str) -> None:
        opens_entry = (
            color == Color.WHITE
            or not self._entries
            or self._entries[-1].black is not None
        )
        if opens_entry:
            next_number = self._entries[-1].number + 1 if self._entries else 1
            self._entries.append(HistoryEntry(next_number))

        if color == Color.WHITE:
            self._entries[-1].white = san
        else:
            self._entries[-1].black = san
        self._last_color = color

    def amend_last(self, san: str) -> None:
        """Replace the notation of the latest half-move (ex. once the promotion choice is known)"""
        if not self._entries or self._last_color is None:
            raise IndexError("No move recorded yet.")
        if self._last_color == Color.WHITE:
            self._entries[-1].white = san
        else:
            self._entries[-1].black = san

    def entries(self) -> list[str]:
        return [str(entry) for entry in self._entries]
