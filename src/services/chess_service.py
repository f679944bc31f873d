"""Orchestration of communication from API router to business logic and storage layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
)
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Color, Outcome
from src.db.repository import GameRepository
from src.rules.game import Draw, DrawReason, Game, Status, ToMove, Win
from src.rules.notation import format_notation
from src.rules.pieces import Color as PieceColor
from src.rules.pieces import Piece
from src.rules.square import Square

logger = logging.getLogger(__name__)

DRAW_OUTCOMES: dict[DrawReason, Outcome] = {
    DrawReason.AGREEMENT: Outcome.DRAW_AGREEMENT,
    DrawReason.FIFTY_MOVE_RULE: Outcome.DRAW_FIFTY_MOVE_RULE,
    DrawReason.STALEMATE: Outcome.STALEMATE,
}


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game from the standard starting position, or from the requested custom position."""

        # Use info in CreateGameRequest to create a new Game, and convert into GameModel
        if request.position is None:
            new_game = Game()
        else:
            new_game = Game.from_position(
                {
                    Square.from_algebraic(square): Piece.from_fen(letter)
                    for square, letter in request.position.items()
                }
            )
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        _, game_id = self.repo.create_game(created_game_data)
        logger.debug("Created game %s", game_id)

        # Return a GameResponse
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = Game.from_model(self._fetch_game(request.game_id))
        return self._create_game_response(request.game_id, game)

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt. Domain errors (illegal / ambiguous / badly punctuated moves) propagate to the caller."""

        # Retrieve persisted GameModel from repository and rebuild the Game
        game = Game.from_model(self._fetch_game(request.game_id))

        # Attempt the move
        game.move(request.notation)

        # store in repository
        self.repo.update_game(request.game_id, game.to_model())

        # Return a GameResponse
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the Game's read surface into a GameResponse (for game with given ID.)"""
        model: GameModel = game.to_model()
        status = game.status
        return GameResponse(
            game_id=game_id,
            position={
                square.to_algebraic(): piece.to_fen()
                for square, piece in game.position.items()
            },
            starting_position=model.starting_position,
            move_history=[format_notation(notation) for notation in game.history],
            outcome=outcome_of(status),
            to_move=_shared_color(status.color) if isinstance(status, ToMove) else None,
            winner=_shared_color(status.color) if isinstance(status, Win) else None,
            is_game_over=not isinstance(status, ToMove),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def outcome_of(status: Status) -> Outcome:
    match status:
        case Win(by_resignation=True):
            return Outcome.RESIGNATION
        case Win(by_resignation=False):
            return Outcome.CHECKMATE
        case Draw(reason=reason):
            return DRAW_OUTCOMES[reason]
        case ToMove():
            return Outcome.IN_PROGRESS


def _shared_color(color: PieceColor) -> Color:
    return Color[color.name]
