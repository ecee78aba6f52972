# tests/test_services/test_open_library.py

import pytest
import requests
from unittest.mock import MagicMock

from pagestreak.exceptions import OpenLibraryError
from pagestreak.services.open_library import SEARCH_FIELDS, OpenLibraryClient

HOBBIT_DOC = {
    'key': '/works/OL27482W',
    'title': 'The Hobbit',
    'author_name': ['J.R.R. Tolkien'],
    'author_key': ['OL26320A'],
    'first_publish_year': 1937,
    'number_of_pages_median': 310,
    'cover_i': 14627509,
    'publisher': ['Allen & Unwin', 'Houghton Mifflin'],
    'language': ['eng', 'fre'],
    'isbn': ['9780261102217'],
    'subject': ['Fantasy', 'Dragons', 'Dwarves', 'Wizards', 'Quests', 'Middle Earth'],
    'ratings_average': 4.25,
    'ratings_count': 512
}

def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response

@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)

@pytest.fixture
def client(http):
    return OpenLibraryClient(base_url="https://openlibrary.test/", covers_url="https://covers.test", http=http)

def test_search_books(client, http):
    http.get.return_value = _response({'numFound': 1, 'docs': [HOBBIT_DOC]})

    results = client.search_books("  the hobbit ", limit=5)

    http.get.assert_called_once_with(
        "https://openlibrary.test/search.json",
        params={'q': 'the hobbit', 'limit': 5, 'fields': SEARCH_FIELDS},
        timeout=10
    )
    assert len(results) == 1
    result = results[0]
    assert result.title == "The Hobbit"
    assert result.author == "J.R.R. Tolkien"
    assert result.page_count == 310
    assert result.cover_url == "https://covers.test/b/id/14627509-M.jpg"
    assert result.publisher == "Allen & Unwin"
    assert result.language == "eng"
    assert result.isbn == "9780261102217"
    assert len(result.subjects) == 5
    assert result.rating == pytest.approx(4.25)

def test_search_result_with_missing_fields(client, http):
    http.get.return_value = _response({'docs': [{'key': '/works/OL1W', 'title': 'Untitled Notes'}]})
    result = client.search_books("notes")[0]
    assert result.authors == []
    assert result.author == "Unknown Author"
    assert result.cover_url is None
    assert result.language == "eng"
    assert result.page_count is None

def test_blank_query_skips_request(client, http):
    assert client.search_books("   ") == []
    http.get.assert_not_called()

def test_search_by_author(client, http):
    http.get.return_value = _response({'docs': []})
    assert client.search_by_author("Ursula K. Le Guin") == []
    assert http.get.call_args.kwargs['params']['author'] == "Ursula K. Le Guin"

def test_network_error_raises(client, http):
    http.get.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(OpenLibraryError):
        client.search_books("dune")

def test_http_error_raises(client, http):
    response = _response({})
    response.raise_for_status.side_effect = requests.HTTPError("503 Service Unavailable")
    http.get.return_value = response
    with pytest.raises(OpenLibraryError):
        client.search_books("dune")

def test_to_book_fields(client):
    fields = client.to_search_result(HOBBIT_DOC).to_book_fields()
    assert fields['name'] == "The Hobbit"
    assert fields['author'] == "J.R.R. Tolkien"
    assert fields['page'] == 310
    assert fields['open_library_key'] == "/works/OL27482W"
    assert fields['author_key'] == "OL26320A"
    assert fields['subjects'] == "Fantasy, Dragons, Dwarves, Wizards, Quests"

def test_work_description(client, http):
    http.get.return_value = _response({'description': {'type': '/type/text', 'value': 'A hobbit goes on an adventure.'}})
    assert client.get_work_description('/works/OL27482W') == 'A hobbit goes on an adventure.'
    http.get.return_value = _response({'description': 'Plain text.'})
    assert client.get_work_description('/works/OL27482W') == 'Plain text.'

def test_cover_url_sizes(client):
    assert client.cover_url(1, "L") == "https://covers.test/b/id/1-L.jpg"
    assert client.cover_url_by_isbn("9780261102217") == "https://covers.test/b/isbn/9780261102217-M.jpg"
    with pytest.raises(ValueError):
        client.cover_url(1, "XL")
