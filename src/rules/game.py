"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
parse the notation, find the (unique) legal move it describes, validate the check/checkmate punctuation and commit.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping, Optional, Self

from src.core.exceptions import (
    AmbiguousMoveError,
    BadPunctuationError,
    GameStateError,
    IllegalMoveError,
    InvalidNotationError,
    InvalidSquareError,
    UnparseableNotationError,
)
from src.core.models import GameModel
from src.rules.board import Board, Mutation
from src.rules.castling import castling_side_for, is_castling_move
from src.rules.notation import (
    Castle,
    End,
    Notation,
    Play,
    PlayNotation,
    Punctuation,
    Translation,
    format_notation,
    format_play,
    is_pawn_move_or_capture,
    matches,
    parse_notation,
)
from src.rules.pieces import FEN_TO_PIECE, PROMOTION_OPTIONS, Color, Piece, PieceType
from src.rules.square import Square

logger = logging.getLogger(__name__)

# A draw can be claimed after this many plies without a pawn move or a capture
FIFTY_MOVE_RULE_PLIES = 50


# --- GAME STATUS ---
class DrawReason(Enum):
    AGREEMENT = auto()
    FIFTY_MOVE_RULE = auto()
    STALEMATE = auto()


@dataclass(frozen=True)
class Win:
    color: Color
    by_resignation: bool


@dataclass(frozen=True)
class Draw:
    reason: DrawReason


@dataclass(frozen=True)
class ToMove:
    color: Color


Status = Win | Draw | ToMove


@dataclass(frozen=True)
class Candidate:
    """A fully specified move the side to move could make, plus the board it leads to."""

    play: Play
    board: Board


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    _board: Board = field(default_factory=Board.starting_position)
    _starting_position: Mapping[Square, Piece] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # NOTE: the position the history is played from. Needed to store / replay the game.
        self._starting_position = self._board.position

    @classmethod
    def from_position(cls, position: Mapping[Square, Piece]) -> Self:
        """Start from a custom arrangement of pieces instead of the standard one."""
        return cls(Board.from_position(position))

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has: replay the history."""

        # Validation
        invalid_letters = [
            letter
            for letter in model.starting_position.values()
            if not _is_piece_letter(letter)
        ]
        if invalid_letters:
            raise GameStateError(
                f"Invalid piece letter(s) in starting position: {', '.join(invalid_letters)}"
            )
        try:
            position = {
                Square.from_algebraic(square): Piece.from_fen(letter)
                for square, letter in model.starting_position.items()
            }
        except InvalidSquareError as e:
            raise GameStateError(f"Invalid starting position: {e}") from e

        # create the Game and replay its moves
        game = cls.from_position(position)
        for notation in model.history:
            try:
                game.move(notation)
            except InvalidNotationError as e:
                raise GameStateError(
                    f"Cannot replay stored move {notation!r}: {e}"
                ) from e
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            starting_position={
                square.to_algebraic(): piece.to_fen()
                for square, piece in self.starting_position.items()
            },
            history=[format_notation(notation) for notation in self.history],
            status=describe_status(self.status),
        )

    # --- READ SURFACE ---
    @property
    def board(self) -> Board:
        """The committed board (immutable). Only `move` replaces it."""
        return self._board

    @property
    def starting_position(self) -> Mapping[Square, Piece]:
        """Read-only view of the position the history is played from"""
        return self._starting_position

    @property
    def position(self) -> dict[Square, Piece]:
        """Copy of the current occupancy of the board"""
        return dict(self._board.position)

    @property
    def history(self) -> tuple[Notation, ...]:
        return self._board.history

    @property
    def color_to_move(self) -> Color:
        return self._board.color_to_move

    @property
    def status(self) -> Status:
        """
        Derived from the board and its history (never stored)
        ----

        1. resignation / draw by agreement
        2. checkmate
        3. stalemate
        4. fifty-move rule
        5. otherwise: the game goes on
        """
        mover = self.color_to_move
        if self.history:
            match self.history[-1]:
                case End(victor=None):
                    return Draw(DrawReason.AGREEMENT)
                case End(victor=victor):
                    assert victor is not None
                    return Win(victor, by_resignation=True)

        if self._board.is_no_move_possible(mover):
            if self._board.is_check(mover):
                return Win(mover.opposite, by_resignation=False)
            return Draw(DrawReason.STALEMATE)

        if self._is_fifty_move_draw():
            return Draw(DrawReason.FIFTY_MOVE_RULE)

        return ToMove(mover)

    @property
    def is_game_over(self) -> bool:
        return not isinstance(self.status, ToMove)

    # --- MUTATING ENTRYPOINT ---
    def move(self, notation: str) -> Notation:
        """
        Attempt to make a move
        -----

        1. parse the notation
        2. resignation / draw agreement: only check whose turn it is
        3. find all candidate moves matching the notation, and keep those that do not leave your king in check
        4. exactly one should be left (else: illegal / ambiguous)
        5. check the punctuation against the resulting position (check / checkmate)
        6. commit the new board (history included)

        On any error the game is left untouched.
        """
        try:
            committed = self._move(notation)
        except InvalidNotationError as e:
            logger.info("Rejected move %r: %s", notation, type(e).__name__)
            raise

        logger.debug("Committed move %r (ply %d)", notation, len(self.history))
        return committed

    def _move(self, notation: str) -> Notation:
        if self.is_game_over:
            raise IllegalMoveError(
                f"Game is over ({describe_status(self.status)}). No more moves accepted."
            )

        parsed = parse_notation(notation)
        if parsed is None:
            raise UnparseableNotationError(notation)

        match parsed:
            case End(victor=victor):
                self._assert_end_allowed(notation, victor)
                self._board = self._board.record(parsed)
                return parsed

            case PlayNotation(play=play, punctuation=punctuation):
                candidate = self._find_candidate(notation, play)
                new_board = candidate.board.record(parsed)
                self._assert_punctuation(notation, new_board, punctuation)
                self._board = new_board
                return parsed

    # -- PRIVATE HELPERS ---
    def _assert_end_allowed(self, notation: str, victor: Optional[Color]) -> None:
        """You can only resign on your own turn: '1-0' (black resigns) when black is to move and vice versa."""
        if victor is not None and victor == self.color_to_move:
            raise IllegalMoveError(
                f"{notation!r} can only be declared when {victor.opposite.name.lower()} is to move."
            )

    def _find_candidate(self, notation: str, play: Play) -> Candidate:
        """The single legal move that matches the parsed play"""
        color = self.color_to_move
        legal_candidates: list[Candidate] = []
        for candidate_play, mutations in self._candidate_moves(play):
            if not matches(play, candidate_play):
                continue
            board = self._board.mutated_board(mutations, color)
            if board is not None:
                legal_candidates.append(Candidate(candidate_play, board))

        if not legal_candidates:
            raise IllegalMoveError(f"Move not allowed: {notation}")

        if len(legal_candidates) > 1:
            plays = [c.play for c in legal_candidates]
            raise AmbiguousMoveError(notation, disambiguate(plays))

        return legal_candidates[0]

    def _candidate_moves(self, play: Play) -> list[tuple[Play, list[Mutation]]]:
        """
        Every move the side to move could make (capturing or not, as the play requires), fully specified.

        * A king moving two files over is a castling move
        * A pawn reaching the final rank gets one candidate per piece it can promote into
        """
        color = self.color_to_move
        is_capture = isinstance(play, Translation) and play.is_capture

        candidates: list[tuple[Play, list[Mutation]]] = []
        for origin in self._board.locate_color(color):
            piece = self._board.position[origin]
            for target in self._board.moves(piece, origin, is_capture):
                if piece.type == PieceType.KING and is_castling_move(origin, target):
                    side = castling_side_for(origin, target)
                    candidates.append(
                        (Castle(side), self._board.castling_mutations(color, side))
                    )
                    continue

                is_promotion = (
                    piece.type == PieceType.PAWN
                    and target.rank == color.opposite.back_rank
                )
                promotions = PROMOTION_OPTIONS if is_promotion else (None,)
                for promote_to in promotions:
                    translation = Translation(
                        origin_file=origin.file,
                        origin_rank=origin.rank,
                        piece_type=piece.type,
                        is_capture=is_capture,
                        promote_to=promote_to,
                        target=target,
                    )
                    candidates.append(
                        (
                            translation,
                            [self._board.mutation(piece, origin, target, promote_to)],
                        )
                    )
        return candidates

    def _assert_punctuation(
        self, notation: str, new_board: Board, punctuation: Optional[Punctuation]
    ) -> None:
        """'#' for checkmate, '+' for check, nothing otherwise."""
        opponent = new_board.color_to_move
        expected: Optional[Punctuation] = None
        if new_board.is_checkmate(opponent):
            expected = Punctuation.CHECKMATE
        elif new_board.is_check(opponent):
            expected = Punctuation.CHECK

        if punctuation != expected:
            raise BadPunctuationError(notation, expected.value if expected else "")

    def _is_fifty_move_draw(self) -> bool:
        """The last fifty plies contain no pawn move and no capture"""
        if len(self.history) < FIFTY_MOVE_RULE_PLIES:
            return False
        recent = self.history[-FIFTY_MOVE_RULE_PLIES:]
        return not any(is_pawn_move_or_capture(notation) for notation in recent)


# --- HELPERS ---
def disambiguate(plays: list[Play]) -> list[str]:
    """
    Canonical notation for a set of moves that all match the same (ambiguous) input.

    Use the least amount of disambiguation needed: the origin file if that is unique among moves of the same kind,
    otherwise the origin rank, otherwise both. Pawn captures always name the origin file.
    """
    descriptions: list[str] = []
    for play in plays:
        if not isinstance(play, Translation):
            descriptions.append(format_play(play))
            continue

        peers = [
            other
            for other in plays
            if isinstance(other, Translation)
            and other.promote_to == play.promote_to
            and other != play
        ]
        file_is_unique = all(other.origin_file != play.origin_file for other in peers)
        rank_is_unique = all(other.origin_rank != play.origin_rank for other in peers)
        is_pawn_capture = play.piece_type == PieceType.PAWN and play.is_capture

        if not peers:
            origin_file = play.origin_file if is_pawn_capture else None
            origin_rank = None
        elif file_is_unique:
            origin_file, origin_rank = play.origin_file, None
        elif rank_is_unique and not is_pawn_capture:
            origin_file, origin_rank = None, play.origin_rank
        else:
            origin_file, origin_rank = play.origin_file, play.origin_rank

        canonical = Translation(
            origin_file=origin_file,
            origin_rank=origin_rank,
            piece_type=play.piece_type,
            is_capture=play.is_capture,
            promote_to=play.promote_to,
            target=play.target,
        )
        descriptions.append(format_play(canonical))
    return descriptions


def describe_status(status: Status) -> str:
    match status:
        case Win(color=color):
            return f"{color.name.lower()} wins"
        case Draw(reason=reason):
            return f"draw by {reason.name.lower().replace('_', ' ')}"
        case ToMove(color=color):
            return f"{color.name.lower()} to move"


def _is_piece_letter(letter: str) -> bool:
    return len(letter) == 1 and letter.lower() in FEN_TO_PIECE
