"""Unit tests for src/services/chess_service.py"""

from uuid import UUID, uuid4

import pytest

from src.core.config import GameSettings
from src.core.exceptions import GameError, GameNotFoundError, GameStateError
from src.core.shared_types import Color, PieceType, Status
from src.services.chess_service import (
    ChessService,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    PromotionRequest,
)

KINGS_ONLY = "k7/8/8/8/8/8/8/K7"
LADDER = "k7/6R1/8/8/8/8/8/K6R"


@pytest.fixture
def service() -> ChessService:
    return ChessService(GameSettings())


def create(service: ChessService, placement: str | None = None) -> UUID:
    response = service.create_new_game(CreateGameRequest(placement=placement))
    return response.game_id


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: ChessService) -> None:
    """Check that new game is created, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest())

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.status == Status.NOT_STARTED
    assert response.turn == Color.WHITE
    assert len(response.pieces) == 32
    assert response.move_history == []
    assert response.captured == []
    assert response.pending_promotion is None
    assert response.winner is None


def test_create_from_placement(service: ChessService) -> None:
    response = service.create_new_game(
        CreateGameRequest(placement=KINGS_ONLY, to_move=Color.BLACK)
    )
    assert response.turn == Color.BLACK
    assert {(piece.color, piece.piece_type, piece.square) for piece in response.pieces} == {
        (Color.BLACK, PieceType.KING, "a8"),
        (Color.WHITE, PieceType.KING, "a1"),
    }


def test_create_without_kings(service: ChessService) -> None:
    """Make sure service propagates the exceptions."""
    with pytest.raises(GameError):
        _ = create(service, "8/8/8/8/8/8/8/7R")


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_FIFTY_MOVE_LIMIT", "12")
    service = ChessService()
    assert service.settings.fifty_move_limit == 12


# --- SERVICE - GET GAME ----
def test_get_existing_game_state(service: ChessService) -> None:
    game_id = create(service, KINGS_ONLY)
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.game_id == game_id
    assert len(response.pieces) == 2


def test_attempt_to_find_unknown_game(service: ChessService) -> None:
    with pytest.raises(GameNotFoundError):
        _ = service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - LEGAL MOVES ----
def test_getting_legal_moves(service: ChessService) -> None:
    game_id = create(service, KINGS_ONLY)
    response = service.legal_moves(LegalMovesRequest(game_id=game_id, square="a1"))

    assert isinstance(response, LegalMovesResponse)
    assert response.game_id == game_id
    assert response.square == "a1"
    assert response.legal_moves == ["a2", "b1", "b2"]


def test_legal_moves_on_empty_square(service: ChessService) -> None:
    game_id = create(service, KINGS_ONLY)
    with pytest.raises(GameError):
        _ = service.legal_moves(LegalMovesRequest(game_id=game_id, square="e4"))


def test_legal_moves_after_checkmate(service: ChessService) -> None:
    game_id = create(service, LADDER)
    _ = service.make_move(MoveRequest(game_id=game_id, from_square="h1", to_square="h8"))

    with pytest.raises(GameStateError):
        _ = service.legal_moves(LegalMovesRequest(game_id=game_id, square="a8"))


# --- SERVICE - MAKE MOVE ---
def test_make_legal_move(service: ChessService) -> None:
    game_id = create(service)
    response = service.make_move(
        MoveRequest(game_id=game_id, from_square="e2", to_square="e4")
    )

    assert response.status == Status.ON_GOING
    assert response.turn == Color.BLACK
    assert response.move_history == ["1. e4"]
    assert any(piece.square == "e4" for piece in response.pieces)


def test_attempt_illegal_move(service: ChessService) -> None:
    """Service must propagate error raised by Game upwards."""
    game_id = create(service)
    with pytest.raises(GameError):
        _ = service.make_move(MoveRequest(game_id=game_id, from_square="e2", to_square="e5"))
    with pytest.raises(GameError):
        # no piece there
        _ = service.make_move(MoveRequest(game_id=game_id, from_square="e4", to_square="e5"))


def test_attempt_move_before_your_turn(service: ChessService) -> None:
    game_id = create(service)
    with pytest.raises(GameError):
        _ = service.make_move(MoveRequest(game_id=game_id, from_square="e7", to_square="e5"))


def test_checkmate_ends_the_game(service: ChessService) -> None:
    game_id = create(service, LADDER)
    response = service.make_move(
        MoveRequest(game_id=game_id, from_square="h1", to_square="h8")
    )
    assert response.status == Status.CHECKMATE
    assert response.winner == Color.WHITE
    assert response.move_history == ["1. Rh8#"]

    # Nobody should be able to move anymore
    with pytest.raises(GameStateError):
        _ = service.make_move(MoveRequest(game_id=game_id, from_square="g7", to_square="g6"))


def test_captured_pieces_in_response(service: ChessService) -> None:
    game_id = create(service)
    for from_square, to_square in [("e2", "e4"), ("d7", "d5"), ("e4", "d5")]:
        response = service.make_move(
            MoveRequest(game_id=game_id, from_square=from_square, to_square=to_square)
        )
    assert [(piece.color, piece.piece_type) for piece in response.captured] == [
        (Color.BLACK, PieceType.PAWN)
    ]


# --- SERVICE - PROMOTION ---
def test_promotion(service: ChessService) -> None:
    game_id = create(service, "k7/4P3/8/8/8/8/8/4K3")
    response = service.make_move(MoveRequest(game_id=game_id, from_square="e7", to_square="e8"))
    assert response.pending_promotion == "e8"

    response = service.promote(PromotionRequest(game_id=game_id, piece_type=PieceType.QUEEN))
    assert response.pending_promotion is None
    assert response.status == Status.CHECK
    assert response.move_history == ["1. e8=Q!"]
    assert any(
        piece.square == "e8" and piece.piece_type == PieceType.QUEEN
        for piece in response.pieces
    )


def test_promotion_without_pending_pawn(service: ChessService) -> None:
    game_id = create(service)
    with pytest.raises(GameStateError):
        _ = service.promote(PromotionRequest(game_id=game_id, piece_type=PieceType.QUEEN))


# --- SERVICE - DELETE GAME ---
def test_delete_game(service: ChessService) -> None:
    """A game should no longer be available after a properly processed request."""
    game_id = create(service)
    service.delete_game(DeleteGameRequest(game_id=game_id))

    with pytest.raises(GameNotFoundError):
        _ = service.get_game_state(GetGameRequest(game_id=game_id))
