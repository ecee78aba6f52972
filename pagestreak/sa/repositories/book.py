# pagestreak/sa/repositories/book.py
from typing import Dict, List, Optional
from datetime import datetime
from sqlalchemy import func, desc
from sqlalchemy.orm import Session
from pagestreak.exceptions import BookNotFoundError
from ..models import Book, ReadingStatus, local_now

METADATA_FIELDS = (
    'isbn', 'cover_id', 'cover_url', 'first_publish_year', 'publisher', 'language',
    'description', 'subjects', 'open_library_key', 'author_key', 'rating', 'notes'
)

def _coerce_status(status) -> ReadingStatus:
    try:
        return ReadingStatus(status)
    except ValueError:
        valid = ", ".join(s.value for s in ReadingStatus)
        raise ValueError(f"Invalid reading status '{status}'. Expected one of: {valid}")

class BookRepository:
    """Repository for managing Book entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, book_id: int) -> Optional[Book]:
        """Get a book by its ID.

        Args:
            book_id: The ID of the book to retrieve

        Returns:
            The Book object if found, None otherwise
        """
        return self.session.query(Book).filter(Book.id == book_id).first()

    def require(self, book_id: int) -> Book:
        """Like get_by_id but raises BookNotFoundError for unknown IDs"""
        book = self.get_by_id(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def list_books(self, status: Optional[str] = None) -> List[Book]:
        """List books, newest first.

        Args:
            status: Optional reading status to filter by

        Returns:
            List of Book objects ordered by date_added descending
        """
        query = self.session.query(Book)
        if status:
            query = query.filter(Book.reading_status == _coerce_status(status).value)
        return query.order_by(desc(Book.date_added), desc(Book.id)).all()

    def get_currently_reading(self) -> List[Book]:
        """Books in progress, most recently started first"""
        return (
            self.session.query(Book)
            .filter(Book.reading_status == ReadingStatus.CURRENTLY_READING.value)
            .order_by(desc(Book.date_started), desc(Book.date_added))
            .all()
        )

    def search_by_title(self, query: str, limit: int = 20) -> List[Book]:
        """Search for books by title or author.

        Args:
            query: The search query string
            limit: Maximum number of results to return (default: 20)

        Returns:
            List of matching Book objects
        """
        pattern = f"%{query}%"
        return (
            self.session.query(Book)
            .filter(Book.name.ilike(pattern) | Book.author.ilike(pattern))
            .order_by(Book.name)
            .limit(limit)
            .all()
        )

    def count_by_status(self) -> Dict[str, int]:
        """Number of books per reading status (every status present, zero if unused)"""
        counts = {status.value: 0 for status in ReadingStatus}
        rows = (
            self.session.query(Book.reading_status, func.count(Book.id))
            .group_by(Book.reading_status)
            .all()
        )
        for status, count in rows:
            counts[status] = count
        return counts

    def create_book(
        self,
        name: str,
        author: str,
        page: int,
        reading_status: str = ReadingStatus.WANT_TO_READ.value,
        current_page: int = 0,
        now: Optional[datetime] = None,
        **metadata
    ) -> Book:
        """Create a new book.

        Args:
            name: The title of the book
            author: The author of the book
            page: Total page count, must be positive
            reading_status: Initial reading status (default: want_to_read)
            current_page: Initial current page (default: 0)
            now: Timestamp used for date_added and the status dates
            metadata: Optional metadata columns (isbn, publisher, ...)

        Returns:
            The created Book object

        Raises:
            ValueError: If the title/author is empty, the page counts are invalid
                or an unknown metadata field is passed
        """
        if not name or not name.strip():
            raise ValueError("Book title is required")
        if not author or not author.strip():
            raise ValueError("Book author is required")
        if page is None or page <= 0:
            raise ValueError("Total page count must be a positive integer")
        if current_page < 0:
            raise ValueError("Current page cannot be negative")
        unknown = set(metadata) - set(METADATA_FIELDS)
        if unknown:
            raise ValueError(f"Unknown book fields: {', '.join(sorted(unknown))}")

        status = _coerce_status(reading_status)
        now = now or local_now()
        book = Book(
            name=name.strip(),
            author=author.strip(),
            page=page,
            current_page=current_page,
            reading_status=status.value,
            date_added=now,
            **{k: v for k, v in metadata.items() if v is not None}
        )
        if status == ReadingStatus.CURRENTLY_READING:
            book.date_started = now
        elif status == ReadingStatus.READ:
            book.date_finished = now

        self.session.add(book)
        self.session.commit()
        return book

    def update_status(self, book_id: int, status: str, now: Optional[datetime] = None) -> Optional[Book]:
        """Move a book to a new reading status.

        Starting a book stamps date_started, finishing it stamps date_finished,
        and any status other than read clears date_finished.

        Args:
            book_id: The ID of the book to update
            status: The new reading status
            now: Timestamp for the status dates (default: current local time)

        Returns:
            The updated Book object if found, None otherwise
        """
        new_status = _coerce_status(status)
        book = self.get_by_id(book_id)
        if not book:
            return None

        now = now or local_now()
        if new_status == ReadingStatus.CURRENTLY_READING:
            book.date_started = now
        elif new_status == ReadingStatus.READ:
            book.date_finished = now
        if new_status != ReadingStatus.READ:
            book.date_finished = None

        book.reading_status = new_status.value
        self.session.commit()
        return book

    def update_current_page(self, book_id: int, current_page: int) -> Optional[Book]:
        """Set a book's current page manually.

        Returns:
            The updated Book object if found, None otherwise
        """
        if current_page < 0:
            raise ValueError("Current page cannot be negative")
        book = self.get_by_id(book_id)
        if not book:
            return None

        book.current_page = current_page
        self.session.commit()
        return book

    def delete_book(self, book_id: int) -> bool:
        """Delete a book and, through the cascade, its reading sessions.

        Args:
            book_id: The ID of the book to delete

        Returns:
            True if the book was deleted, False if not found
        """
        book = self.get_by_id(book_id)
        if not book:
            return False

        self.session.delete(book)
        self.session.commit()
        return True
