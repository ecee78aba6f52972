# pagestreak/services/open_library.py
import logging
from typing import Any, Dict, List, Optional

import requests

from pagestreak import config
from pagestreak.exceptions import OpenLibraryError
from pagestreak.models.search import SearchBookResult

logger = logging.getLogger(__name__)

SEARCH_FIELDS = (
    "key,title,author_name,author_key,first_publish_year,number_of_pages_median,"
    "cover_i,publisher,language,isbn,subject,ratings_average,ratings_count"
)
COVER_SIZES = ("S", "M", "L")

class OpenLibraryClient:
    def __init__(
        self,
        base_url: str = config.OPEN_LIBRARY_URL,
        covers_url: str = config.OPEN_LIBRARY_COVERS_URL,
        timeout: float = 10,
        http: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.covers_url = covers_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def cover_url(self, cover_id: int, size: str = "M") -> str:
        if size not in COVER_SIZES:
            raise ValueError(f"Invalid cover size '{size}'. Expected one of: {', '.join(COVER_SIZES)}")
        return f"{self.covers_url}/b/id/{cover_id}-{size}.jpg"

    def cover_url_by_isbn(self, isbn: str, size: str = "M") -> str:
        return f"{self.covers_url}/b/isbn/{isbn}-{size}.jpg"

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.http.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.warning(f"Open Library request failed for {url}: {e}")
            raise OpenLibraryError(f"Open Library request failed: {e}") from e
        except ValueError as e:
            raise OpenLibraryError(f"Open Library returned invalid JSON: {e}") from e

    def _search(self, params: Dict[str, Any], limit: int) -> List[SearchBookResult]:
        params = dict(params, limit=limit, fields=SEARCH_FIELDS)
        data = self._get_json("/search.json", params)
        return [self.to_search_result(doc) for doc in data.get('docs', [])]

    def search_books(self, query: str, limit: int = 20) -> List[SearchBookResult]:
        """Free-text search across titles and authors.

        Args:
            query: Search text
            limit: Maximum number of results

        Returns:
            Matching books, empty for a blank query

        Raises:
            OpenLibraryError: If the request fails
        """
        if not query or not query.strip():
            return []
        return self._search({'q': query.strip()}, limit)

    def search_by_title(self, title: str, limit: int = 10) -> List[SearchBookResult]:
        if not title or not title.strip():
            return []
        return self._search({'title': title.strip()}, limit)

    def search_by_author(self, author: str, limit: int = 20) -> List[SearchBookResult]:
        if not author or not author.strip():
            return []
        return self._search({'author': author.strip()}, limit)

    def get_work_description(self, work_key: str) -> Optional[str]:
        """Description of a work such as ``/works/OL45804W``; None when it has none"""
        data = self._get_json(f"{work_key}.json")
        description = data.get('description')
        if isinstance(description, dict):
            return description.get('value')
        return description

    def to_search_result(self, doc: Dict[str, Any]) -> SearchBookResult:
        cover_id = doc.get('cover_i')
        return SearchBookResult(
            key=doc['key'],
            title=doc.get('title') or "Unknown Title",
            authors=doc.get('author_name') or [],
            author_keys=doc.get('author_key') or [],
            first_publish_year=doc.get('first_publish_year'),
            page_count=doc.get('number_of_pages_median'),
            cover_id=cover_id,
            cover_url=self.cover_url(cover_id) if cover_id else None,
            publisher=(doc.get('publisher') or [None])[0],
            language=(doc.get('language') or ['eng'])[0],
            isbn=(doc.get('isbn') or [None])[0],
            subjects=(doc.get('subject') or [])[:5],
            rating=doc.get('ratings_average'),
            ratings_count=doc.get('ratings_count')
        )
