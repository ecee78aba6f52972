# tests/conftest.py
import pytest
from datetime import datetime
from typing import Any, Dict, Optional

from pagestreak.sa.database import Database
from pagestreak.sa.models import Base
from pagestreak.sa.repositories.book import BookRepository
from pagestreak.sa.repositories.preferences import PreferencesRepository
from pagestreak.sa.repositories.session import ReadingSessionRepository
from pagestreak.services.notifier import Notifier
from pagestreak.utils.dates import FixedClock

# Thursday; the week starts on Monday 2024-03-11
NOW = datetime(2024, 3, 14, 9, 0)
TODAY = "2024-03-14"

class RecordingNotifier(Notifier):
    """In-memory notifier that remembers what was scheduled and cancelled"""

    def __init__(self, permission: bool = True):
        self.permission = permission
        self.scheduled: Dict[str, Dict[str, Any]] = {}
        self.cancelled = []
        self._counter = 0

    def has_permission(self) -> bool:
        return self.permission

    def schedule(self, title: str, body: str, seconds: float,
                 data: Optional[Dict[str, Any]] = None) -> str:
        self._counter += 1
        identifier = f"reminder-{self._counter}"
        self.scheduled[identifier] = {'title': title, 'body': body, 'seconds': seconds, 'data': data}
        return identifier

    def cancel(self, identifier: str) -> None:
        if self.scheduled.pop(identifier, None) is not None:
            self.cancelled.append(identifier)

    def cancel_all(self) -> None:
        self.cancelled.extend(self.scheduled)
        self.scheduled.clear()

    def pending_count(self) -> int:
        return len(self.scheduled)

@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_pagestreak.db")

@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}")
    Base.metadata.drop_all(db.engine)
    db.init_db()
    yield db
    db.dispose()

@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture(autouse=True)
def cleanup_db(db_session):
    """Empty every table and restore the default preference rows before each test"""
    for table in reversed(Base.metadata.sorted_tables):
        db_session.execute(table.delete())
    db_session.commit()
    PreferencesRepository(db_session).ensure_defaults()
    yield
    db_session.rollback()

@pytest.fixture
def clock():
    return FixedClock(NOW)

@pytest.fixture
def notifier():
    return RecordingNotifier()

@pytest.fixture
def book_repo(db_session):
    return BookRepository(db_session)

@pytest.fixture
def session_repo(db_session):
    return ReadingSessionRepository(db_session)

@pytest.fixture
def sample_book(book_repo, clock):
    """A 300 page book that is currently being read."""
    return book_repo.create_book(
        name="The Hobbit",
        author="J.R.R. Tolkien",
        page=300,
        reading_status="currently_reading",
        now=clock.now()
    )

@pytest.fixture
def second_book(book_repo, clock):
    return book_repo.create_book(
        name="Dune",
        author="Frank Herbert",
        page=412,
        now=clock.now()
    )
