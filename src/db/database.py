"""Generate database sessions"""

import os
from typing import Generator

from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base

# Any SQLAlchemy URL. An in-memory SQLite database keeps the games for as long as the process lives.
DATABASE_URL = os.environ.get("CHESS_DATABASE_URL", "sqlite:///:memory:")


def create_session_factory(database_url: str = DATABASE_URL) -> sessionmaker[Session]:
    """Connect to the database and ensure all tables are created"""
    if database_url.startswith("sqlite"):
        # One shared connection: every new connection to ':memory:' is a separate, empty database
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autoflush=False, bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
