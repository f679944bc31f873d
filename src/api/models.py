"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Outcome
from src.rules.pieces import FEN_TO_PIECE
from src.rules.square import is_algebraic

SquareName = str
PieceLetter = str


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    """
    Leave `position` empty to play from the standard starting position.

    Otherwise: a mapping of square names to piece letters, ex. {"e1": "K", "e8": "k", "e7": "P"}
    (upper case: white pieces, lower case: black pieces)
    """

    position: Optional[dict[SquareName, PieceLetter]] = None

    @field_validator("position")
    @classmethod
    def validate_position(
        cls, value: Optional[dict[SquareName, PieceLetter]]
    ) -> Optional[dict[SquareName, PieceLetter]]:
        if value is None:
            return value

        for square, letter in value.items():
            if not is_algebraic(square):
                raise InvalidRequestError(
                    f"Cannot interpret {square!r} as a valid square name."
                )
            if len(letter) != 1 or letter.lower() not in FEN_TO_PIECE:
                raise InvalidRequestError(
                    f"Cannot interpret {letter!r} (on {square}) as a piece. Pick one from {''.join(FEN_TO_PIECE)} (lower or upper case)."
                )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    notation: str

    @field_validator("notation")
    @classmethod
    def validate_notation(cls, value: str) -> str:
        """Only the basic shape is checked here. The domain layer parses the notation itself."""
        value = value.strip()
        if not value or " " in value:
            raise InvalidRequestError(
                f"Move notation must be a single non-empty token. Got {value!r}."
            )
        return value


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    position: dict[SquareName, PieceLetter]
    starting_position: dict[SquareName, PieceLetter]
    move_history: list[str]
    outcome: Outcome
    to_move: Optional[Color]
    winner: Optional[Color]
    is_game_over: bool
