"""Orchestration of communication from API router to the chess engine (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID, uuid4

from src.api.models import (
    CapturedPieceResponse,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    PieceResponse,
    PromotionRequest,
)
from src.core.config import GameSettings
from src.core.exceptions import GameNotFoundError, GameStateError, NoPieceSelectedError
from src.core.shared_types import Color, PieceType, Status
from src.engine.board import PieceId
from src.engine.game import Game
from src.engine.pieces import Color as EngineColor
from src.engine.pieces import PieceType as EnginePieceType
from src.engine.square import Square

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game. Games only live in memory."""

    def __init__(self, settings: Optional[GameSettings] = None) -> None:
        self.settings = settings or GameSettings.from_env()
        self._games: dict[UUID, Game] = {}

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Set up the pieces (starting position unless a placement is supplied) and register the game."""
        game = Game.new_game(
            settings=self.settings,
            placement=request.placement,
            turn=EngineColor[request.to_move.name],
        )
        game_id = uuid4()
        self._games[game_id] = game
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Retrieve the squares the piece on the requested square may move to."""
        game = self._fetch_game(request.game_id)
        self._assert_game_not_over(game)

        piece_id = self._piece_id_at(game, request.square)
        legal_moves = sorted(square.to_algebraic() for square in game.legal_moves(piece_id))
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            legal_moves=legal_moves,
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""
        game = self._fetch_game(request.game_id)
        self._assert_game_not_over(game)

        piece_id = self._piece_id_at(game, request.from_square)
        destination = Square.from_algebraic(request.to_square)

        # Attempt the move (errors of the engine propagate)
        game.request_move(piece_id, destination)
        return self._create_game_response(request.game_id, game)

    def promote(self, request: PromotionRequest) -> GameResponse:
        """Finish a promotion: the pawn that reached the last rank becomes the requested piece."""
        game = self._fetch_game(request.game_id)
        piece_id = game.pending_promotion()
        if piece_id is None:
            raise GameStateError("No pawn is waiting for a promotion.")

        game.resolve_promotion(piece_id, EnginePieceType[request.piece_type.name])
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self._games.pop(request.game_id, None) is not None:
            logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the read model of the Game to a GameResponse (for game with given ID.)"""
        pending = game.pending_promotion()
        winner = game.winner
        return GameResponse(
            game_id=game_id,
            status=Status[game.current_status().name],
            turn=Color[game.current_turn().name],
            pieces=[
                PieceResponse(
                    piece_id=state.piece_id,
                    color=Color[state.color.name],
                    piece_type=PieceType[state.piece_type.name],
                    square=state.square.to_algebraic(),
                )
                for state in game.board_state()
            ],
            move_history=game.move_history(),
            captured=[
                CapturedPieceResponse(
                    color=Color[piece.color.name],
                    piece_type=PieceType[piece.piece_type.name],
                )
                for piece in game.captured_pieces()
            ],
            pending_promotion=(
                None if pending is None else game.board.piece(pending).pos.to_algebraic()
            ),
            winner=None if winner is None else Color[winner.name],
        )

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game and raise error if it fails."""
        game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game

    def _piece_id_at(self, game: Game, square_name: str) -> PieceId:
        piece_id = game.board.piece_id_at(Square.from_algebraic(square_name))
        if piece_id is None:
            raise NoPieceSelectedError(f"There is no piece on {square_name}.")
        return piece_id

    def _assert_game_not_over(self, game: Game) -> None:
        if game.current_status().is_terminal:
            raise GameStateError(
                f"Game is over ({Status[game.current_status().name]}). No more moves can be made."
            )
