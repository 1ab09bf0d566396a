"""
Database engine and session management.

Usage:
    from database import db, get_db

    with db.get_session() as session:
        session.query(Company).all()

    # FastAPI
    def endpoint(session: Session = Depends(get_db)): ...
"""

from contextlib import contextmanager
from typing import Generator, Optional

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from core.config import settings
from .base import Base


class DatabaseConnection:
    """Holds the engine and session factory for one database URL."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        self.engine: Engine = create_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Session context manager. Rolls back on error."""
        session = self.SessionLocal()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self):
        Base.metadata.create_all(bind=self.engine)

db = DatabaseConnection(settings.database_url, echo=settings.database_echo)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a database session."""
    with db.get_session() as session:
        yield session


def init_db(connection: Optional[DatabaseConnection] = None):
    """Create all tables (idempotent)."""
    connection = connection or db
    connection.create_tables()
    logger.info(f"Tables ready on {connection.engine.url.render_as_string(hide_password=True)}")

