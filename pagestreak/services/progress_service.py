# pagestreak/services/progress_service.py
"""Reading-progress aggregation.

All figures are computed from the reading_sessions rows at query time. A
failing query degrades to a zero result with a logged warning.
"""
import logging
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagestreak.models.progress import BookProgress, ProgressSource
from pagestreak.models.stats import RecentSession
from pagestreak.sa.models import Book
from pagestreak.sa.repositories.book import BookRepository
from pagestreak.sa.repositories.session import ReadingSessionRepository
from pagestreak.utils.dates import Clock, resolve_clock, trailing_days

logger = logging.getLogger(__name__)

class ProgressAggregator:
    def __init__(self, session: Session, clock: Optional[Clock] = None):
        self.session = session
        self.clock = resolve_clock(clock)
        self.sessions = ReadingSessionRepository(session)
        self.books = BookRepository(session)

    def _rollback(self) -> None:
        try:
            self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")

    def minutes_for_day(self, day: str) -> int:
        """Total minutes logged for a calendar day; 0 when nothing was logged"""
        try:
            return self.sessions.minutes_for_day(day)
        except SQLAlchemyError as e:
            logger.warning(f"Error getting reading minutes for {day}: {e}")
            self._rollback()
            return 0

    def today_minutes(self) -> int:
        return self.minutes_for_day(self.clock.today())

    def minutes_for_book(self, book_id: int) -> int:
        """Time spent reading a book, in minutes"""
        try:
            return self.sessions.minutes_for_book(book_id)
        except SQLAlchemyError as e:
            logger.warning(f"Error getting reading time for book {book_id}: {e}")
            self._rollback()
            return 0

    def _session_pages(self, book_id: int) -> int:
        try:
            return self.sessions.pages_for_book(book_id)
        except SQLAlchemyError as e:
            logger.warning(f"Error summing pages read for book {book_id}: {e}")
            self._rollback()
            return 0

    def book_progress_from_sessions(self, book_id: int, total_pages: int) -> BookProgress:
        """Progress from the pages logged in sessions; sessions without a page count are ignored"""
        return BookProgress.from_pages(self._session_pages(book_id), total_pages, ProgressSource.SESSIONS)

    def _progress_sources(
        self, book_id: int, total_pages: int, current_page: int
    ) -> List[Tuple[ProgressSource, Callable[[], int]]]:
        # Tried in order; the first source reporting a positive page count wins
        return [
            (ProgressSource.SESSIONS, lambda: self._session_pages(book_id)),
            (ProgressSource.CURRENT_PAGE, lambda: current_page if total_pages > 0 else 0),
        ]

    def enhanced_progress(self, book_id: int, total_pages: int, current_page: int = 0) -> BookProgress:
        """Progress preferring session page counts, falling back to the stored current page.

        Books logged before page-level tracking existed only have a
        current_page, so they still report progress without inventing pages.
        """
        for source, resolve in self._progress_sources(book_id, total_pages, current_page or 0):
            pages = resolve()
            if pages > 0:
                return BookProgress.from_pages(pages, total_pages, source)
        return BookProgress.empty()

    def progress_for_book(self, book: Book) -> BookProgress:
        return self.enhanced_progress(book.id, book.page, book.current_page)

    def sync_current_page(self, book_id: int) -> Optional[int]:
        """Copy the session page total onto the book's current_page.

        Returns the new current page, or None when nothing changed. A zero
        total never overwrites a manually set current page.
        """
        total_pages_read = self._session_pages(book_id)
        if total_pages_read <= 0:
            return None
        try:
            book = self.books.update_current_page(book_id, total_pages_read)
        except SQLAlchemyError as e:
            logger.warning(f"Error syncing current page for book {book_id}: {e}")
            self._rollback()
            return None
        return book.current_page if book else None

    def weekly_minutes(self, today: Optional[str] = None) -> List[int]:
        """Minutes per day for the trailing 7 days, oldest first and today last"""
        days = trailing_days(today or self.clock.today(), 7)
        try:
            totals = self.sessions.daily_totals_between(days[0], days[-1])
        except SQLAlchemyError as e:
            logger.warning(f"Error getting weekly reading data: {e}")
            self._rollback()
            return [0] * 7
        return [totals.get(day, 0) for day in days]

    def recent_sessions(self, limit: int = 5) -> List[RecentSession]:
        try:
            rows = self.sessions.get_recent(limit)
        except SQLAlchemyError as e:
            logger.warning(f"Error getting recent reading sessions: {e}")
            self._rollback()
            return []
        return [
            RecentSession(
                id=row.id,
                book_id=row.book_id,
                book_name=row.book.name,
                book_author=row.book.author,
                minutes_read=row.minutes_read,
                pages_read=row.pages_read,
                date=row.date,
                notes=row.notes
            )
            for row in rows
        ]
