"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Status

SquareName = str

FEN_PIECE_CHARACTERS = set("pnbrqkPNBRQK")


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    first_character = value[0]
    second_character = value[1]
    return first_character in "abcdefgh" and second_character in "12345678"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    """No placement: the canonical starting position."""

    placement: Optional[str] = None
    to_move: Color = Color.WHITE

    @field_validator("placement")
    @classmethod
    def validate_placement(cls, value: Optional[str]) -> Optional[str]:
        """Only the piece placement part of a FEN string, ex. 'k7/8/8/8/8/8/8/K7'"""
        if value is None:
            return value

        ranks = value.strip().split("/")
        if len(ranks) != 8:
            raise InvalidRequestError(
                f"Piece placement must contain 8 ranks separated by '/', found {len(ranks)}."
            )
        for rank in ranks:
            width = 0
            for character in rank:
                if character in FEN_PIECE_CHARACTERS:
                    width += 1
                elif character in "12345678":
                    width += int(character)
                else:
                    raise InvalidRequestError(
                        f"Unexpected character {character!r} in piece placement."
                    )
            if width != 8:
                raise InvalidRequestError(
                    f"Rank {rank!r} covers {width} squares instead of 8."
                )
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


class PromotionRequest(BaseModel):
    game_id: UUID
    piece_type: PieceType


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    piece_id: int
    color: Color
    piece_type: PieceType
    square: SquareName


class CapturedPieceResponse(BaseModel):
    color: Color
    piece_type: PieceType


class GameResponse(BaseModel):
    game_id: UUID
    status: Status
    turn: Color
    pieces: list[PieceResponse]
    move_history: list[str]
    captured: list[CapturedPieceResponse]
    pending_promotion: Optional[SquareName] = None
    winner: Optional[Color] = None


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: SquareName
    legal_moves: list[SquareName]
