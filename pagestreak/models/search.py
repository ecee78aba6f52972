# pagestreak/models/search.py
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

class SearchBookResult(BaseModel):
    """One book returned by an Open Library search"""
    key: str
    title: str
    authors: List[str] = []
    author_keys: List[str] = []
    first_publish_year: Optional[int] = None
    page_count: Optional[int] = None
    cover_id: Optional[int] = None
    cover_url: Optional[str] = None
    publisher: Optional[str] = None
    language: Optional[str] = None
    isbn: Optional[str] = None
    subjects: List[str] = []
    rating: Optional[float] = None
    ratings_count: Optional[int] = None

    @property
    def author(self) -> str:
        return ", ".join(self.authors) if self.authors else "Unknown Author"

    def to_book_fields(self) -> Dict[str, Any]:
        """Keyword arguments for BookRepository.create_book"""
        return {
            'name': self.title,
            'author': self.author,
            'page': self.page_count,
            'isbn': self.isbn,
            'cover_id': self.cover_id,
            'cover_url': self.cover_url,
            'first_publish_year': self.first_publish_year,
            'publisher': self.publisher,
            'language': self.language,
            'subjects': ", ".join(self.subjects[:10]) if self.subjects else None,
            'open_library_key': self.key,
            'author_key': self.author_keys[0] if self.author_keys else None,
            'rating': self.rating
        }
