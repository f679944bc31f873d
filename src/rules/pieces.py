"""Defines the colors and types of chess pieces"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from src.rules.square import BOARD_DIMENSIONS, Vector


class PieceType(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()

    @property
    def san(self) -> str:
        """Letter used in algebraic notation. Pawns have none."""
        return PIECE_TO_SAN[self]


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def back_rank(self) -> int:
        return 1 if self == Color.WHITE else BOARD_DIMENSIONS[1]

    @property
    def forward(self) -> Vector:
        """White moves UP the board, black moves DOWN"""
        return (0, 1) if self == Color.WHITE else (0, -1)


# Lower case letters: black pieces / upper case letters: white pieces (same convention as FEN)
FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

SAN_TO_PIECE: dict[str, PieceType] = {
    "N": PieceType.KNIGHT,
    "B": PieceType.BISHOP,
    "R": PieceType.ROOK,
    "Q": PieceType.QUEEN,
    "K": PieceType.KING,
}

PIECE_TO_SAN: dict[PieceType, str] = {value: key for key, value in SAN_TO_PIECE.items()} | {
    PieceType.PAWN: ""
}

# A pawn reaching the final rank must turn into one of these
PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @property
    def forward(self) -> Vector:
        return self.color.forward

    @property
    def start_rank(self) -> int:
        """Pawns start one rank in front of the other pieces"""
        if self.type == PieceType.PAWN:
            return self.color.back_rank + self.forward[1]
        return self.color.back_rank
