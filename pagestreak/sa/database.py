# pagestreak/sa/database.py
import logging
from contextlib import contextmanager
from typing import Iterator, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool, QueuePool, StaticPool

from pagestreak import config
from pagestreak.sa.models import Base
from pagestreak.sa.repositories.preferences import PreferencesRepository

logger = logging.getLogger(__name__)

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

class Database:
    def __init__(self, connection_string: Optional[str] = None, **engine_kwargs):
        """Initialize database connection

        Args:
            connection_string: Database connection string (e.g., "sqlite:///pagestreak.db")
                              If None, will use the DATABASE_URL setting
            engine_kwargs: Additional keyword arguments to pass to create_engine
        """
        self.connection_string = connection_string or config.DATABASE_URL
        self.is_sqlite = self.connection_string.startswith("sqlite")

        # SQLite-specific settings
        if self.is_sqlite:
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
            if ":memory:" in self.connection_string or self.connection_string == "sqlite://":
                # Every connection must see the same in-memory database
                engine_kwargs.setdefault("poolclass", StaticPool)
            else:
                engine_kwargs.setdefault("poolclass", NullPool)

        # PostgreSQL recommended settings
        else:
            engine_kwargs.setdefault("pool_size", 5)
            engine_kwargs.setdefault("max_overflow", 10)
            engine_kwargs.setdefault("poolclass", QueuePool)

        self.engine = create_engine(
            self.connection_string,
            **engine_kwargs
        )
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        # Create sessionmaker
        self._SessionFactory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

        self._session: Optional[Session] = None

    @property
    def session(self) -> Session:
        """Get the current session or create a new one"""
        if self._session is None:
            self._session = self._SessionFactory()
        return self._session

    def close_session(self) -> None:
        """Close the current session if it exists"""
        if self._session is not None:
            self._session.close()
            self._session = None

    @contextmanager
    def get_db(self) -> Iterator[Session]:
        """Context manager for database sessions"""
        session: Session = self._SessionFactory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """Create any missing tables and seed the singleton preference rows. Idempotent."""
        Base.metadata.create_all(self.engine)
        with self.get_db() as session:
            PreferencesRepository(session).ensure_defaults()
        logger.info(f"Database initialized at {self.engine.url.render_as_string(hide_password=True)}")

    def reset_db(self) -> None:
        """Drop every table and recreate the schema. All data is lost."""
        self.close_session()
        Base.metadata.drop_all(self.engine)
        logger.warning("All tables dropped")
        self.init_db()

    def get_session(self) -> Session:
        return self._SessionFactory()

    def dispose(self) -> None:
        self.close_session()
        self.engine.dispose()
