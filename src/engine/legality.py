"""
Legality engine
----

Two different questions get asked about a move:

* `is_move_valid()` : does the move follow the movement rules of the piece (geometry + clear path)?
* `legal_moves()`   : which valid moves, castling included, do not leave your own king in check?

Check detection only ever uses validity. If it used legality instead, deciding whether the king
is attacked would ask for the legal moves of the attacker, which asks whether ITS king is attacked,
and so on without end.
"""

from dataclasses import replace
from typing import Callable, Optional, Sequence

from src.core.exceptions import CorruptBoardError
from src.engine.castling import CastlingSquares, castling_rule, king_path
from src.engine.moves import (
    MoveRecord,
    candidate_squares,
    is_path_empty,
    squares_between,
)
from src.engine.pieces import Color, Piece, PieceType
from src.engine.square import Square

Pieces = Sequence[Piece]


# --- VALIDITY RULES ---
def is_valid_for_king(
    piece: Piece, destination: Square, pieces: Pieces, last_move: Optional[MoveRecord]
) -> bool:
    """Castling is not a valid move in this sense: see `may_castle()`"""
    return piece.pos.is_adjacent(destination)


def is_valid_for_queen(
    piece: Piece, destination: Square, pieces: Pieces, last_move: Optional[MoveRecord]
) -> bool:
    aligned = (
        destination.is_same_diagonal(piece.pos)
        or destination.is_same_file(piece.pos)
        or destination.is_same_rank(piece.pos)
    )
    return aligned and is_path_empty(piece.pos, destination, pieces)


def is_valid_for_bishop(
    piece: Piece, destination: Square, pieces: Pieces, last_move: Optional[MoveRecord]
) -> bool:
    return destination.is_same_diagonal(piece.pos) and is_path_empty(
        piece.pos, destination, pieces
    )


def is_valid_for_rook(
    piece: Piece, destination: Square, pieces: Pieces, last_move: Optional[MoveRecord]
) -> bool:
    aligned = destination.is_same_file(piece.pos) or destination.is_same_rank(piece.pos)
    return aligned and is_path_empty(piece.pos, destination, pieces)


def is_valid_for_knight(
    piece: Piece, destination: Square, pieces: Pieces, last_move: Optional[MoveRecord]
) -> bool:
    d_rank = abs(piece.pos.rank - destination.rank)
    d_file = abs(piece.pos.file - destination.file)
    return {d_rank, d_file} == {1, 2}


def is_valid_for_pawn(
    piece: Piece, destination: Square, pieces: Pieces, last_move: Optional[MoveRecord]
) -> bool:
    """
    Exactly one of the following has to hold, all other pawn moves are rejected:

    1. single step forward onto an empty square
    2. double step forward from the (unmoved) starting square, onto an empty square with nothing in between
    3. diagonal step forward, taking an opponent's piece
    4. en passant
    """
    forward = piece.color.pawn_direction
    d_rank = destination.rank - piece.pos.rank
    d_file = destination.file - piece.pos.file
    occupant = destination.is_occupied(pieces)

    if d_file == 0 and d_rank == forward:
        return occupant is None

    if d_file == 0 and d_rank == 2 * forward:
        unmoved = not piece.has_moved and piece.pos.rank == piece.color.pawn_start_rank
        return (
            unmoved
            and occupant is None
            and is_path_empty(piece.pos, destination, pieces)
        )

    if abs(d_file) == 1 and d_rank == forward:
        if occupant == piece.color.opponent():
            return True
        return occupant is None and may_take_en_passant(piece, destination, last_move)

    return False


# -- STRATEGY PATTERN: VALIDITY RULES ---
IsValidFn = Callable[[Piece, Square, Pieces, Optional[MoveRecord]], bool]
VALIDITY_RULES: dict[PieceType, IsValidFn] = {
    PieceType.PAWN: is_valid_for_pawn,
    PieceType.KNIGHT: is_valid_for_knight,
    PieceType.BISHOP: is_valid_for_bishop,
    PieceType.ROOK: is_valid_for_rook,
    PieceType.QUEEN: is_valid_for_queen,
    PieceType.KING: is_valid_for_king,
}


def is_move_valid(
    piece: Piece,
    destination: Square,
    pieces: Pieces,
    last_move: Optional[MoveRecord] = None,
) -> bool:
    """
    Structural validity of a move: movement pattern + clear path.

    ---
    A move taking an opponent's piece is valid. Does NOT check if your own king ends up in check,
    and does NOT consider castling.
    """
    if not destination.is_valid() or destination == piece.pos:
        return False
    if destination.is_occupied(pieces) == piece.color:
        return False
    return VALIDITY_RULES[piece.piece_type](piece, destination, pieces, last_move)


# --- EN PASSANT ---
def may_take_en_passant(
    pawn: Piece, destination: Square, last_move: Optional[MoveRecord]
) -> bool:
    """
    En passant is only allowed right after the opponent's pawn advanced two ranks and landed next to your pawn.
    You take it by moving diagonally onto the square it skipped.
    """
    if last_move is None or pawn.piece_type != PieceType.PAWN:
        return False

    previous = last_move.piece
    if previous.piece_type != PieceType.PAWN or previous.color == pawn.color:
        return False
    if abs(last_move.destination.rank - last_move.origin.rank) != 2:
        return False

    landed_next_to_us = last_move.destination.is_same_rank(pawn.pos) and (
        abs(last_move.destination.file - pawn.pos.file) == 1
    )
    skipped_square = Square(
        rank=last_move.destination.rank + pawn.color.pawn_direction,
        file=last_move.destination.file,
    )
    return landed_next_to_us and destination == skipped_square


def en_passant_victim(
    pawn: Piece, destination: Square, pieces: Pieces, last_move: Optional[MoveRecord]
) -> Optional[Piece]:
    """The pawn that just double-stepped (NOT whatever is on the destination square, which is empty)."""
    if last_move is None or not may_take_en_passant(pawn, destination, last_move):
        return None
    return next(
        (piece for piece in pieces if piece.pos == last_move.destination), None
    )


# --- CASTLING ---
def may_castle(king: Piece, destination: Square, pieces: Pieces) -> bool:
    """
    You are allowed to castle if
    ---

    * the king has never moved
    * the rook on the corresponding side has never moved
    * all squares in between the king and the rook are empty
    * none of the squares the king stands on (start, passing, end) is attacked

    NOTE: The opponent's king is left out of the attack check. The destination square is still
    covered, as the king cannot end its move next to the other king (see `puts_own_king_in_check()`).
    """
    if king.piece_type != PieceType.KING or king.has_moved:
        return False

    rule = castling_rule(king.color, king.pos, destination)
    if rule is None:
        return False

    rook = next((piece for piece in pieces if piece.pos == rule.rook_from), None)
    if (
        rook is None
        or rook.color != king.color
        or rook.piece_type != PieceType.ROOK
        or rook.has_moved
    ):
        return False

    between = squares_between(king.pos, rule.rook_from)
    if any(square.is_occupied(pieces) for square in between):
        return False

    opponent = king.color.opponent()
    for square in king_path(rule):
        # put the king on the square itself, so pawns see something to take
        king_there = _relocate(pieces, king.pos, square)
        if is_square_attacked(square, opponent, king_there, include_king=False):
            return False
    return True


# --- CHECK DETECTION ---
def is_square_attacked(
    square: Square,
    by_color: Color,
    pieces: Pieces,
    include_king: bool = True,
    last_move: Optional[MoveRecord] = None,
) -> bool:
    """Does any piece of the given color have a VALID move onto the square?"""
    return any(
        is_move_valid(piece, square, pieces, last_move)
        for piece in pieces
        if piece.color == by_color
        and (include_king or piece.piece_type != PieceType.KING)
    )


def find_king(color: Color, pieces: Pieces) -> Piece:
    king = next(
        (
            piece
            for piece in pieces
            if piece.color == color and piece.piece_type == PieceType.KING
        ),
        None,
    )
    if king is None:
        raise CorruptBoardError(f"No {color} king on the board.")
    return king


def is_in_check(
    color: Color, pieces: Pieces, last_move: Optional[MoveRecord] = None
) -> bool:
    """
    Is the king of the given color attacked?

    NOTE: A pinned piece still gives check here, even though moving it would be illegal for its own side.
    That is correct chess: check is about attack, not about whose move is legal.
    """
    king = find_king(color, pieces)
    return is_square_attacked(king.pos, color.opponent(), pieces, last_move=last_move)


# --- LEGAL MOVES ---
def simulate_move(
    piece: Piece,
    destination: Square,
    pieces: Pieces,
    last_move: Optional[MoveRecord] = None,
) -> list[Piece]:
    """
    Play the move on a COPY of the pieces.

    1. remove the piece that gets taken (on the destination square, or the en passant victim)
    2. relocate the moving piece
    3. castling? relocate the rook as well
    """
    victim = en_passant_victim(piece, destination, pieces, last_move)
    taken_square = victim.pos if victim else destination

    simulated = [
        replace(other)
        for other in pieces
        if other.pos != taken_square or other.color == piece.color
    ]
    for other in simulated:
        if other.pos == piece.pos:
            other.move_to(destination)
            break

    rule = _castling_rule_for(piece, destination)
    if rule is not None:
        for other in simulated:
            if other.pos == rule.rook_from and other.piece_type == PieceType.ROOK:
                other.move_to(rule.rook_to)
                break
    return simulated


def puts_own_king_in_check(
    piece: Piece,
    destination: Square,
    pieces: Pieces,
    last_move: Optional[MoveRecord] = None,
) -> bool:
    simulated = simulate_move(piece, destination, pieces, last_move)
    hypothetical = MoveRecord(replace(piece), piece.pos, destination)
    return is_in_check(piece.color, simulated, hypothetical)


def _is_allowed_by_piece_rule(
    piece: Piece, destination: Square, pieces: Pieces, last_move: Optional[MoveRecord]
) -> bool:
    if piece.piece_type == PieceType.KING:
        return piece.pos.is_adjacent(destination) or may_castle(
            piece, destination, pieces
        )
    return VALIDITY_RULES[piece.piece_type](piece, destination, pieces, last_move)


def legal_moves(
    piece: Piece, pieces: Pieces, last_move: Optional[MoveRecord] = None
) -> set[Square]:
    """
    The set of squares the piece may legally move to
    ----

    1. generate candidate squares from the movement patterns
    2. drop squares with a blocked path, or occupied by your own pieces
    3. apply the piece specific rules (pawns, castling)
    4. drop moves that would put (or leave) your own king in check
    """
    legal: set[Square] = set()
    for destination in candidate_squares(piece):
        if destination.is_occupied(pieces) == piece.color:
            continue
        if not is_path_empty(piece.pos, destination, pieces):
            continue
        if not _is_allowed_by_piece_rule(piece, destination, pieces, last_move):
            continue
        if puts_own_king_in_check(piece, destination, pieces, last_move):
            continue
        legal.add(destination)
    return legal


def player_has_moves(
    color: Color, pieces: Pieces, last_move: Optional[MoveRecord] = None
) -> bool:
    return any(
        legal_moves(piece, pieces, last_move)
        for piece in pieces
        if piece.color == color
    )


# -- PRIVATE HELPERS ---
def _castling_rule_for(piece: Piece, destination: Square) -> Optional[CastlingSquares]:
    if piece.piece_type != PieceType.KING:
        return None
    return castling_rule(piece.color, piece.pos, destination)


def _relocate(pieces: Pieces, origin: Square, destination: Square) -> list[Piece]:
    """Copy of the pieces with the piece on origin moved to destination (nothing gets taken)"""
    relocated = [replace(piece) for piece in pieces]
    for piece in relocated:
        if piece.pos == origin:
            piece.pos = destination
            break
    return relocated
