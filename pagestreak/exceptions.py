# pagestreak/exceptions.py

class PageStreakError(Exception):
    """Base class for all PageStreak errors"""
    pass

class BookNotFoundError(PageStreakError, LookupError):
    def __init__(self, book_id: int):
        super().__init__(f"Book with id {book_id} not found")
        self.book_id = book_id

class InvalidSessionError(PageStreakError, ValueError):
    """Raised when a reading session fails validation"""
    pass

class BackupValidationError(PageStreakError, ValueError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Invalid backup file: {', '.join(errors)}")
        self.errors = errors

class OpenLibraryError(PageStreakError):
    """Raised when the Open Library API cannot be reached or returns an error"""
    pass
