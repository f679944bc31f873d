"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.db.sql_repository import SQLGameRepository
from src.rules.pieces import Piece
from src.rules.square import Square

PositionFactory = Callable[[dict[str, str]], dict[Square, Piece]]

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def position_from() -> PositionFactory:
    """Call the inner function with a mapping like {"e1": "K", "e8": "k"} (upper case: white, lower case: black)"""

    def _create_position(pieces: dict[str, str]) -> dict[Square, Piece]:
        return {
            Square.from_algebraic(square): Piece.from_fen(letter)
            for square, letter in pieces.items()
        }

    return _create_position


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repository(db_session_repo: Session) -> SQLGameRepository:
    return SQLGameRepository(db_session_repo)
