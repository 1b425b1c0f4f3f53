"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn:
validating the request, moving the pieces, updating the status and writing down the move.
"""

import logging
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Optional, Self, Sequence

from src.core.config import GameSettings
from src.core.exceptions import (
    CorruptBoardError,
    GameStateError,
    IllegalMoveError,
    InvalidDestinationError,
    InvalidPromotionError,
    NotYourTurnError,
    PromotionPendingError,
)
from src.engine.board import Board, PieceId, PieceState
from src.engine.castling import castling_rule, castling_side
from src.engine.legality import en_passant_victim
from src.engine.legality import legal_moves as generate_legal_moves
from src.engine.moves import MoveMadeEvent, MoveRecord, MoveType, is_promotion_square
from src.engine.notation import MoveHistory, annotate_move
from src.engine.pieces import PROMOTION_OPTIONS, Color, Piece, PieceType
from src.engine.square import Square
from src.engine.status import (
    Status,
    evaluate_status,
    next_fifty_move_count,
    passes_turn,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayedMove:
    """Entry of the move stack: a move together with the position it was played in."""

    event: MoveMadeEvent
    pieces_before: list[Piece]
    last_move_before: Optional[MoveRecord]
    promotion: Optional[PieceType] = None


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    turn: Color
    status: Status = Status.NOT_STARTED
    settings: GameSettings = field(default_factory=GameSettings)
    history: MoveHistory = field(default_factory=MoveHistory)
    move_stack: list[PlayedMove] = field(default_factory=list)
    captured: list[Piece] = field(default_factory=list)
    fifty_move_count: int = 0
    promotion: Optional[PieceId] = None

    @classmethod
    def new_game(
        cls,
        settings: Optional[GameSettings] = None,
        placement: Optional[str] = None,
        turn: Color = Color.WHITE,
    ) -> Self:
        """Start from the canonical starting position, or from the piece placement part of a FEN string."""
        board = Board.from_fen(placement) if placement else Board.starting_position()
        for color in Color:
            try:
                board.king(color)
            except CorruptBoardError as e:
                raise GameStateError(f"Cannot create new game: {e}") from e
        return cls(board=board, turn=turn, settings=settings or GameSettings())

    # --- INPUT ---
    def request_move(self, piece_id: PieceId, destination: Square) -> MoveMadeEvent:
        """
        Attempt to make a move
        -----

        1. no promotion may be pending
        2. the destination must be on the board
        3. the piece must exist and belong to the player on turn
        4. the destination must be one of the piece's legal moves

        Then the move gets applied as a single step: move (and take) pieces, update the fifty-move clock,
        the status, the turn and the history. All of it is computed on copies first, so a failure halfway
        leaves the game untouched.
        """
        self._assert_no_promotion_pending()
        if not destination.is_valid():
            raise InvalidDestinationError(f"Square {destination!r} is not on the board.")

        piece = self.board.piece(piece_id)
        self._assert_your_turn(piece)

        pieces = self.board.pieces()
        last_move = self.last_move()
        if destination not in generate_legal_moves(piece, pieces, last_move):
            logger.debug("Rejected %s %s-%s", piece.piece_type.name, piece.pos, destination)
            raise IllegalMoveError(
                f"Move not allowed: {piece.color} {piece.piece_type.name.lower()} {piece.pos}-{destination}"
            )

        move = self._create_move_event(piece, destination, pieces, last_move)

        board = deepcopy(self.board)
        taken = self._update_board(board, piece_id, move)
        fifty_move_count = next_fifty_move_count(move, self.fifty_move_count)
        status = evaluate_status(
            piece.color, board.pieces(), move.record, fifty_move_count, self.settings
        )
        history = deepcopy(self.history)
        history.record(piece.color, annotate_move(move, pieces, last_move, status))
        pending = piece_id if is_promotion_square(piece, destination) else None

        # commit
        self.board = board
        self.fifty_move_count = fifty_move_count
        self._change_status(status, mover=piece.color)
        self.history = history
        self.move_stack.append(
            PlayedMove(move, [replace(p) for p in pieces], last_move)
        )
        if taken is not None:
            self.captured.append(taken)
        self.promotion = pending

        logger.info(
            "%s %s %s-%s (%s), status: %s",
            piece.color,
            piece.piece_type.name.lower(),
            move.origin,
            move.destination,
            move.move_type.name,
            status.name,
        )
        if pending is not None:
            logger.info("Waiting for promotion choice of piece %d on %s", piece_id, destination)
        return move

    def resolve_promotion(self, piece_id: PieceId, piece_type: PieceType) -> Status:
        """
        Second half of the promotion handshake
        ---

        The pawn turns into the chosen piece. The status is evaluated again (the new piece might give check, or even mate),
        and the last move in the history gets its `=<letter>`.
        """
        if self.promotion is None:
            raise GameStateError("No promotion pending.")
        if piece_id != self.promotion:
            raise GameStateError(f"Piece {piece_id} is not waiting for a promotion.")
        if piece_type not in PROMOTION_OPTIONS:
            raise InvalidPromotionError(
                f"Cannot promote into a {piece_type.name.lower()}. Pick one from {', '.join(p.name.lower() for p in PROMOTION_OPTIONS)}"
            )

        played = self.move_stack[-1]
        mover = played.event.piece.color

        board = deepcopy(self.board)
        board.promote_piece(piece_id, piece_type)
        status = evaluate_status(
            mover, board.pieces(), played.event.record, self.fifty_move_count, self.settings
        )
        history = deepcopy(self.history)
        history.amend_last(
            annotate_move(
                played.event,
                played.pieces_before,
                played.last_move_before,
                status,
                promotion=piece_type,
            )
        )

        # commit
        self.board = board
        self._change_status(status, mover=mover)
        self.history = history
        self.move_stack[-1] = replace(played, promotion=piece_type)
        self.promotion = None

        logger.info("Piece %d promoted to %s, status: %s", piece_id, piece_type.name.lower(), status.name)
        return status

    # --- READ MODEL ---
    def legal_moves(self, piece_id: PieceId) -> set[Square]:
        piece = self.board.piece(piece_id)
        return generate_legal_moves(piece, self.board.pieces(), self.last_move())

    def pending_promotion(self) -> Optional[PieceId]:
        return self.promotion

    def board_state(self) -> list[PieceState]:
        return self.board.state()

    def current_status(self) -> Status:
        return self.status

    def current_turn(self) -> Color:
        return self.turn

    def move_history(self) -> list[str]:
        return self.history.entries()

    def last_move(self) -> Optional[MoveRecord]:
        if not self.move_stack:
            return None
        return self.move_stack[-1].event.record

    def captured_pieces(self) -> list[Piece]:
        return list(self.captured)

    @property
    def winner(self) -> Optional[Color]:
        """
        Only defined for checkmate.
        The turn does not pass on after the final move, so the player on turn is the one who delivered mate.
        """
        if self.status != Status.CHECKMATE:
            return None
        return self.turn

    # -- PRIVATE HELPERS ---
    def _assert_no_promotion_pending(self) -> None:
        if self.promotion is not None:
            raise PromotionPendingError(
                f"Piece {self.promotion} must be promoted before the next move."
            )

    def _assert_your_turn(self, piece: Piece) -> None:
        """You must wait for your turn before making a move."""
        if piece.color != self.turn:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.turn} to make a move first."
            )

    def _change_status(self, new_status: Status, mover: Color) -> None:
        if new_status != self.status:
            logger.info("Status changed: %s -> %s", self.status.name, new_status.name)
        self.status = new_status
        self.turn = mover.opponent() if passes_turn(new_status) else mover

    def _create_move_event(
        self,
        piece: Piece,
        destination: Square,
        pieces: Sequence[Piece],
        last_move: Optional[MoveRecord],
    ) -> MoveMadeEvent:
        """Snapshot of the move before the board gets updated: what kind of move is it, and what gets taken?"""
        if piece.piece_type == PieceType.KING and castling_side(piece.pos, destination):
            return MoveMadeEvent(piece, piece.pos, destination, MoveType.CASTLE)

        occupant = next((other for other in pieces if other.pos == destination), None)
        if occupant is not None:
            return MoveMadeEvent(
                piece, piece.pos, destination, MoveType.TAKE, captured=occupant
            )

        victim = en_passant_victim(piece, destination, pieces, last_move)
        if victim is not None:
            return MoveMadeEvent(
                piece, piece.pos, destination, MoveType.TAKE_EN_PASSANT, captured=victim
            )

        return MoveMadeEvent(piece, piece.pos, destination, MoveType.MOVE)

    def _update_board(
        self, board: Board, piece_id: PieceId, move: MoveMadeEvent
    ) -> Optional[Piece]:
        """
        Call for the proper updates of the Board's position
        ---

        1. remove the piece that gets taken (NOTE: en passant takes on a different square than the destination)
        2. move the piece
        3. castling? move the rook as well

        Returns the piece that was taken, if any.
        """
        taken: Optional[Piece] = None
        if move.captured is not None:
            taken_id = board.piece_id_at(move.captured.pos)
            if taken_id is None:
                raise CorruptBoardError(f"No piece to take on {move.captured.pos}.")
            taken = board.remove_piece(taken_id)

        board.move_piece(piece_id, move.destination)

        if move.move_type == MoveType.CASTLE:
            self._move_castling_rook(board, move)
        return taken

    def _move_castling_rook(self, board: Board, move: MoveMadeEvent) -> None:
        """The rook ends up right next to the king, on the side the king came from."""
        rule = castling_rule(move.piece.color, move.origin, move.destination)
        rook_id = board.piece_id_at(rule.rook_from) if rule else None
        if rule is None or rook_id is None:
            raise CorruptBoardError(
                f"No rook to castle with for {move.origin}-{move.destination}."
            )
        board.move_piece(rook_id, rule.rook_to)
