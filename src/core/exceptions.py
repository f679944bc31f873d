"""
Custom exceptions used across layers.

Every exception derives from GameError, so the service layer (or any other caller) can catch a single top-level type.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong while playing a game."""


# --- DOMAIN: NOTATION / MOVE SUBMISSION ---
class InvalidNotationError(GameError):
    """A submitted move (in algebraic notation) was rejected. The committed game state is left unchanged."""


class UnparseableNotationError(InvalidNotationError):
    """The string does not match the notation grammar."""

    def __init__(self, notation: str) -> None:
        self.notation = notation
        super().__init__(f"Cannot parse {notation!r} as a move.")


class AmbiguousMoveError(InvalidNotationError):
    """More than one of your pieces can legally make the move. Add the origin file and/or rank."""

    def __init__(self, notation: str, candidates: list[str]) -> None:
        self.notation = notation
        self.candidates = candidates
        super().__init__(
            f"Move {notation!r} is ambiguous. Candidates: {', '.join(candidates)}"
        )


class IllegalMoveError(InvalidNotationError):
    """Notation parsed fine, but no legal move matches it."""


class BadPunctuationError(InvalidNotationError):
    """
    The move itself is legal, but the check ('+') / checkmate ('#') marker does not match the resulting position.

    `correct_punctuation` holds the marker that should have been used (empty string: no marker at all).
    """

    def __init__(self, notation: str, correct_punctuation: str) -> None:
        self.notation = notation
        self.correct_punctuation = correct_punctuation
        super().__init__(
            f"Bad punctuation in {notation!r}. Expected {correct_punctuation!r}."
        )


# --- DOMAIN: GEOMETRY / STATE ---
class InvalidSquareError(GameError):
    """Square name is not in algebraic notation ('a1' - 'h8')."""


class GameStateError(GameError):
    """Stored game information cannot be turned into a consistent Game."""


# --- BOUNDARY LAYERS ---
class InvalidRequestError(GameError):
    """Request data does not pass validation."""


class RepositoryError(GameError):
    """Game record could not be found / stored."""
