"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase
from typing import Optional

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

# A geometric offset (delta file, delta rank). Not a board entity.
Vector = tuple[int, int]

# Characters allowed in algebraic notation (ASCII only)
FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]
RANK_NAMES = "".join(str(rank) for rank in range(1, BOARD_DIMENSIONS[1] + 1))


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not is_algebraic(sq):
            raise InvalidSquareError(
                f"Cannot interpret {sq!r} as a square. Expected 'a1' - 'h8'."
            )
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{file_name(self.file)}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, vector: Vector) -> Optional[Square]:
        """The square found by stepping along the vector, or None if that step leaves the board."""
        df, dr = vector
        square = Square(self.file + df, self.rank + dr)
        return square if square.is_within_bounds() else None

    def __str__(self) -> str:
        return self.to_algebraic()


def file_name(file: int) -> str:
    """1 -> 'a', 8 -> 'h'"""
    return chr(file + ord("a") - 1)


def file_from_name(name: str) -> int:
    """'a' -> 1, 'h' -> 8"""
    return ord(name) - ord("a") + 1


def is_algebraic(sq: str) -> bool:
    """Two characters: a file letter followed by a rank digit, both within the board."""
    if len(sq) != 2:
        return False
    file_char, rank_char = sq
    return file_char in FILE_NAMES and rank_char in RANK_NAMES
