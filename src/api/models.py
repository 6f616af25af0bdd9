"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.board import is_valid_position
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Difficulty, PieceType, Status

PieceColor = str
PieceName = str


def _is_algebraic_notation(value: str) -> bool:
    """'a1' up to 'h8'"""
    if len(value) != 2:
        return False
    return value[0].lower() in "abcdefgh" and value[1] in "12345678"


def _validate_square_name(value: str) -> str:
    if not _is_algebraic_notation(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value.lower()


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    """
    Without `ai_color` both sides are played by people (taking turns on the same board).
    With it, the computer plays that color at the given difficulty (or the configured default).
    """

    starting_position: Optional[str] = None
    turn: Color = Color.WHITE
    ai_color: Optional[Color] = None
    difficulty: Optional[Difficulty] = None

    @field_validator("starting_position")
    @classmethod
    def validate_starting_position(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        position = value.strip()
        if not is_valid_position(position):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as the board part of a FEN string."
            )
        return position


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class AIMoveRequest(BaseModel):
    game_id: UUID
    difficulty: Optional[Difficulty] = None


class ResetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    position: str
    turn: Color
    status: Status
    winner: Optional[str]
    in_check: bool
    message: str
    move_history: list[str]
    captured: dict[PieceColor, list[PieceName]]
    ai_color: Optional[Color]
    difficulty: Optional[Difficulty]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    legal_moves: list[str]
    destinations: list[str]
