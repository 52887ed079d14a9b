"""Database access for the sector threshold store.

The store is small and read far more often than written: one row per
sector standard. SQLite is the default backend; any SQLAlchemy URL works.
"""

import os
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, SectorStandardModel

DATABASE_URL_ENV = "SEWER_CONDITION_DATABASE_URL"
DEFAULT_DATABASE_URL = "sqlite:///sewer_condition.db"


def get_database_url(database_url: Optional[str] = None) -> str:
    """
    Resolve the threshold store URL.

    An explicit URL wins, then the SEWER_CONDITION_DATABASE_URL
    environment variable, then a SQLite file in the working directory.
    """
    return database_url or os.environ.get(DATABASE_URL_ENV, DEFAULT_DATABASE_URL)


class DatabaseManager:
    """
    Owns the engine and session factory for the threshold store.

    The engine is created lazily so that building a manager never touches
    the database; classification falls back to built-in thresholds when
    the store cannot be reached.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        self._database_url = get_database_url(database_url)
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    @property
    def database_url(self) -> str:
        return self._database_url

    @property
    def is_sqlite(self) -> bool:
        return self._database_url.startswith("sqlite")

    def _engine_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"echo": self._echo}
        if self.is_sqlite:
            # API worker threads share one connection pool
            options["connect_args"] = {"check_same_thread": False}
        else:
            options["pool_pre_ping"] = True
        return options

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(self._database_url, **self._engine_options())
        return self._engine

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Session scope for one unit of work.

        Commits when the block exits normally and rolls back when it
        raises. Loaded rows stay readable after the session closes.
        """
        if self._sessions is None:
            self._sessions = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create the threshold table if it does not exist."""
        Base.metadata.create_all(self.engine)

    def has_schema(self) -> bool:
        """True when the threshold table exists."""
        return inspect(self.engine).has_table(SectorStandardModel.__tablename__)

    def close(self) -> None:
        """Dispose of the engine; a later call reconnects."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._sessions = None

    def health_check(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True
