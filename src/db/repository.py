"""
Protocol repository: what the Service layer needs from game storage.

Records are `GameModel`s (starting position + notation history), so a stored game can always be replayed.
Implemented with SQLAlchemy in `src/db/sql_repository.py`.
"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Game storage orchestration. Returned models are copies: changing them never changes the stored record."""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new game (before any move is played) and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the record after a committed move. None if the game is unknown."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record. Returns the removed game, None if it was unknown."""
        ...
