"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from src.rules.pieces import Color
from src.rules.square import Square, Vector


class CastlingSide(Enum):
    """The two castling directions. Values represent their notation."""

    SHORT = "O-O"
    LONG = "O-O-O"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    `between` are the squares that must be empty (everything between the king and the rook).
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square
    between: tuple[Square, ...]

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        between = tuple(squares_between_on_rank(king_from, rook_from))
        return cls(king_from, king_to, rook_from, rook_to, between)


CastlingRight = tuple[Color, CastlingSide]


def squares_between_on_rank(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares in between the two squares specified that are on the same rank

    Needed for checking if you can still castle (the Board will check which of those are empty etc.)
    """
    if from_square.rank != to_square.rank:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )

    search_direction: Vector = (1, 0) if to_square.file > from_square.file else (-1, 0)
    squares_found: list[Square] = []
    square = from_square.offset(search_direction)
    while square is not None and square != to_square:
        squares_found.append(square)
        square = square.offset(search_direction)
    return squares_found


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingRight, CastlingSquares] = {
    (Color.WHITE, CastlingSide.SHORT): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    (Color.WHITE, CastlingSide.LONG): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    (Color.BLACK, CastlingSide.SHORT): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    (Color.BLACK, CastlingSide.LONG): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}

ALL_CASTLING_RIGHTS: frozenset[CastlingRight] = frozenset(CASTLING_RULES.keys())


def castling_side_for(king_from: Square, king_to: Square) -> CastlingSide:
    """A king moving two files over is castling: towards the a-file is long, towards the h-file is short."""
    return CastlingSide.LONG if king_to.file < king_from.file else CastlingSide.SHORT


def is_castling_move(king_from: Square, king_to: Square) -> bool:
    return king_from.rank == king_to.rank and abs(king_to.file - king_from.file) == 2
