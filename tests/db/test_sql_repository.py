"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy.orm import Session

from src.db.database import create_session_factory, get_db
from src.db.schema import DBGame
from src.db.sql_repository import GameModel, SQLGameRepository

STARTING_POSITION = {"e1": "K", "a7": "P", "h5": "k"}


def make_model(history: list[str] | None = None, status: str = "white to move") -> GameModel:
    return GameModel(
        starting_position=dict(STARTING_POSITION),
        history=history or [],
        status=status,
    )


def test_create_game(db_session_repo: Session) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = make_model(["a8=Q"], "black to move")

    repo = SQLGameRepository(db_session_repo)
    record_in_db, game_id = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model

    game_db = db_session_repo.get(DBGame, game_id)
    assert game_db is not None
    assert game_db.starting_position == STARTING_POSITION
    assert game_db.history == ["a8=Q"]
    assert game_db.created_at is not None


def test_get_game_by_id(db_session_repo: Session) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(make_model(["a8=Q"]))
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game


def test_get_unknown_game(db_session_repo: Session) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(make_model())
    assert repo.get_game(uuid4()) is None


def test_returned_models_are_copies(db_session_repo: Session) -> None:
    """Changing a model after storing / fetching it does not change the stored record"""
    repo = SQLGameRepository(db_session_repo)
    model = make_model()
    _, game_id = repo.create_game(model)
    model.history.append("Kd1")

    fetched = repo.get_game(game_id)
    assert fetched is not None
    assert fetched.history == []

    fetched.history.append("Kd1")
    stored = repo.get_game(game_id)
    assert stored is not None
    assert stored.history == []


def test_consecutive_game_updates(db_session_repo: Session) -> None:
    """Tests that we can successfully make multiple updates to the same game (history grows by one move each time)."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(make_model())

    first_update = make_model(["Kd1"], "black to move")
    second_update = make_model(["Kd1", "Kg4"], "white to move")
    third_update = make_model(["Kd1", "Kg4", "a8=Q"], "black to move")

    assert repo.update_game(game_id, first_update) == first_update
    repo.update_game(game_id, second_update)
    repo.update_game(game_id, third_update)

    after_all_updates = repo.get_game(game_id)
    assert after_all_updates is not None
    assert after_all_updates == third_update


def test_attempt_updating_unknown_game(db_session_repo: Session) -> None:
    """the update_game() method should break early and return None"""
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), make_model()) is None


def test_delete_game(db_session_repo: Session) -> None:
    """Record of the game should no longer exist after deletion"""
    repo = SQLGameRepository(db_session_repo)
    created_game, game_id = repo.create_game(make_model(["a8=Q"]))
    deleted_game = repo.delete_game(game_id)

    # the correct game should be deleted
    assert deleted_game == created_game

    # The game should no longer be available in db
    assert repo.get_game(game_id) is None


def test_attempt_deleting_unknown_game(db_session_repo: Session) -> None:
    """the delete_game() method should break early and return None"""
    repo = SQLGameRepository(db_session_repo)
    assert repo.delete_game(uuid4()) is None


# -- SESSION FACTORY --
def test_sessions_share_the_in_memory_database() -> None:
    """A game stored through one session can be read through the next one"""
    session_factory = create_session_factory("sqlite:///:memory:")

    sessions = get_db(session_factory)
    db = next(sessions)
    _, game_id = SQLGameRepository(db).create_game(make_model(["a8=Q"]))
    sessions.close()

    other_sessions = get_db(session_factory)
    other_db = next(other_sessions)
    game_found = SQLGameRepository(other_db).get_game(game_id)
    other_sessions.close()

    assert game_found == make_model(["a8=Q"])
