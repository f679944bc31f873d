"""Unit tests for src/services/chess_service.py"""

from uuid import UUID, uuid4

import pytest

from src.core.exceptions import (
    AmbiguousMoveError,
    BadPunctuationError,
    GameError,
    GameStateError,
    IllegalMoveError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, Outcome
from src.db.sql_repository import SQLGameRepository
from src.rules.game import Draw, DrawReason, ToMove, Win
from src.rules.pieces import Color as PieceColor
from src.services.chess_service import (
    ChessService,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    outcome_of,
)

LADDER_MATE_POSITION = {"a8": "k", "g7": "R", "h7": "R", "a2": "K"}


@pytest.fixture
def service(repository: SQLGameRepository) -> ChessService:
    return ChessService(repository)


def create_game(
    service: ChessService, position: dict[str, str] | None = None
) -> UUID:
    return service.create_new_game(CreateGameRequest(position=position)).game_id


def play(service: ChessService, game_id: UUID, *moves: str) -> GameResponse:
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    for notation in moves:
        response = service.make_move(MoveRequest(game_id=game_id, notation=notation))
    return response


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(
    service: ChessService, repository: SQLGameRepository
) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest())

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert len(response.position) == 32
    assert response.position["e1"] == "K"
    assert response.position["d8"] == "q"
    assert response.starting_position == response.position
    assert response.move_history == []
    assert response.outcome == Outcome.IN_PROGRESS
    assert response.to_move == Color.WHITE
    assert response.winner is None
    assert not response.is_game_over

    # Check persisted data
    stored_game = repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.starting_position == response.starting_position
    assert stored_game.history == []
    assert stored_game.status == "white to move"


def test_create_game_from_custom_position(service: ChessService) -> None:
    response = service.create_new_game(
        CreateGameRequest(position={"e1": "K", "e8": "k", "a7": "P"})
    )
    assert response.position == {"e1": "K", "e8": "k", "a7": "P"}
    assert response.to_move == Color.WHITE


# --- SERVICE - GET GAME ----
def test_get_existing_game_state(service: ChessService) -> None:
    """Retrieve a game from the repository from an ID generated during creation."""
    game_id = create_game(service)
    response = service.get_game_state(GetGameRequest(game_id=game_id))

    assert isinstance(response, GameResponse)
    assert response.game_id == game_id
    assert response.move_history == []
    assert response.to_move == Color.WHITE


def test_attempt_to_find_unknown_game(service: ChessService) -> None:
    """Ensure exception is raised when trying to look up a game with an unknown ID."""
    with pytest.raises(RepositoryError):
        _ = service.get_game_state(GetGameRequest(game_id=uuid4()))


def test_corrupt_record_is_reported(
    service: ChessService, repository: SQLGameRepository
) -> None:
    _, game_id = repository.create_game(
        GameModel(starting_position={"e1": "K"}, history=["e4"], status="")
    )
    with pytest.raises(GameStateError):
        _ = service.get_game_state(GetGameRequest(game_id=game_id))


# --- SERVICE - MAKE MOVE ---
def test_make_legal_move(
    service: ChessService, repository: SQLGameRepository
) -> None:
    """Attempt a legal move during your turn. Should result in a GameResponse."""
    game_id = create_game(service)
    response = service.make_move(MoveRequest(game_id=game_id, notation="e4"))

    # Check response data
    assert response.game_id == game_id
    assert response.position["e4"] == "P"
    assert "e2" not in response.position
    assert response.starting_position["e2"] == "P"
    assert response.move_history == ["e4"]
    assert response.to_move == Color.BLACK

    # Check persisted data
    stored_game = repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.history == ["e4"]
    assert stored_game.status == "black to move"


def test_game_continues_over_requests(service: ChessService) -> None:
    """Every request rebuilds the game from the stored record"""
    game_id = create_game(service)
    response = play(service, game_id, "e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5", "O-O")
    assert response.move_history == ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5", "O-O"]
    assert response.position["g1"] == "K"
    assert response.position["f1"] == "R"


@pytest.mark.parametrize(
    "notation, error",
    [
        ("e5", IllegalMoveError),
        ("Z9", GameError),
    ],
)
def test_attempt_invalid_move(
    service: ChessService,
    repository: SQLGameRepository,
    notation: str,
    error: type[GameError],
) -> None:
    """Service must propagate error raised by Game upwards, and leave the stored record alone."""
    game_id = create_game(service)
    with pytest.raises(error):
        _ = service.make_move(MoveRequest(game_id=game_id, notation=notation))

    stored_game = repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.history == []


def test_ambiguous_move_lists_candidates(service: ChessService) -> None:
    game_id = create_game(service, {"a1": "R", "h1": "R", "h3": "K", "c8": "k"})
    with pytest.raises(AmbiguousMoveError) as e:
        _ = service.make_move(MoveRequest(game_id=game_id, notation="Rd1"))
    assert set(e.value.candidates) == {"Rad1", "Rhd1"}


def test_checkmate(service: ChessService) -> None:
    game_id = create_game(service, LADDER_MATE_POSITION)
    with pytest.raises(BadPunctuationError):
        _ = play(service, game_id, "Rh8")

    response = play(service, game_id, "Rh8#")
    assert response.outcome == Outcome.CHECKMATE
    assert response.winner == Color.WHITE
    assert response.to_move is None
    assert response.is_game_over

    # Game is over: black cannot move anymore
    with pytest.raises(IllegalMoveError):
        _ = play(service, game_id, "Ka7")


def test_resignation(service: ChessService) -> None:
    game_id = create_game(service)
    response = play(service, game_id, "e4", "1-0")
    assert response.outcome == Outcome.RESIGNATION
    assert response.winner == Color.WHITE
    assert response.move_history == ["e4", "1-0"]


def test_draw_by_agreement(service: ChessService) -> None:
    game_id = create_game(service)
    response = play(service, game_id, "1/2-1/2")
    assert response.outcome == Outcome.DRAW_AGREEMENT
    assert response.winner is None
    assert response.is_game_over


def test_move_in_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        _ = service.make_move(MoveRequest(game_id=uuid4(), notation="e4"))


# --- SERVICE - DELETE GAME ---
def test_delete_game(service: ChessService) -> None:
    game_id = create_game(service)
    service.delete_game(DeleteGameRequest(game_id=game_id))
    with pytest.raises(RepositoryError):
        _ = service.get_game_state(GetGameRequest(game_id=game_id))


# --- HELPERS ---
@pytest.mark.parametrize(
    "status, outcome",
    [
        (ToMove(PieceColor.BLACK), Outcome.IN_PROGRESS),
        (Win(PieceColor.WHITE, by_resignation=False), Outcome.CHECKMATE),
        (Win(PieceColor.BLACK, by_resignation=True), Outcome.RESIGNATION),
        (Draw(DrawReason.STALEMATE), Outcome.STALEMATE),
        (Draw(DrawReason.AGREEMENT), Outcome.DRAW_AGREEMENT),
        (Draw(DrawReason.FIFTY_MOVE_RULE), Outcome.DRAW_FIFTY_MOVE_RULE),
    ],
)
def test_outcome_of(status: ToMove | Win | Draw, outcome: Outcome) -> None:
    assert outcome_of(status) == outcome
