# tests/test_services/test_backup_service.py

import json
import pytest
from datetime import datetime
from sqlalchemy.exc import IntegrityError

from pagestreak.exceptions import BackupValidationError
from pagestreak.sa.models import Book, ReadingSession
from pagestreak.sa.repositories.preferences import PreferencesRepository
from pagestreak.services.backup_service import BackupService, validate_backup

@pytest.fixture
def backup_service(db_session, clock):
    return BackupService(db_session, clock)

@pytest.fixture
def populated(db_session, session_repo, sample_book, second_book):
    session_repo.log_session(sample_book.id, 20, "2024-03-13", pages_read=15)
    session_repo.log_session(sample_book.id, 25, "2024-03-14", pages_read=20)
    session_repo.log_session(second_book.id, 10, "2024-03-14")
    PreferencesRepository(db_session).set_daily_goal(45)
    return sample_book, second_book

def _document(books=None, sessions=None, **overrides):
    document = {
        'app': 'pagestreak',
        'schemaVersion': 1,
        'createdAt': '2024-03-14T09:00:00',
        'tables': {
            'enhanced_books': books if books is not None else [],
            'reading_sessions': sessions if sessions is not None else [],
        }
    }
    document.update(overrides)
    return document

def _book(book_id, name="Emma"):
    return {'id': book_id, 'name': name, 'author': 'Jane Austen', 'page': 474,
            'current_page': 0, 'reading_status': 'want_to_read',
            'date_added': '2024-01-02T10:30:00'}

def test_export_data(backup_service, populated, clock):
    document = backup_service.export_data()
    assert document['app'] == 'pagestreak'
    assert document['schemaVersion'] == 1
    assert document['createdAt'] == clock.now().isoformat()
    tables = document['tables']
    assert set(tables) == {
        'enhanced_books', 'reading_sessions', 'user_preferences',
        'notification_preferences', 'app_usage_tracking'
    }
    assert [b['name'] for b in tables['enhanced_books']] == ["The Hobbit", "Dune"]
    assert len(tables['reading_sessions']) == 3
    assert tables['enhanced_books'][0]['date_added'] == clock.now().isoformat()
    assert tables['user_preferences'][0]['current_reading_rate_minutes_per_day'] == 45

def test_export_unknown_table(backup_service):
    with pytest.raises(ValueError):
        backup_service.export_data(['books'])

def test_export_and_import_into_empty_database(db_session, backup_service, populated, tmp_path):
    path = backup_service.export_to_file(tmp_path / "backup.json")
    assert json.loads(path.read_text(encoding="utf-8"))['app'] == 'pagestreak'

    db_session.query(Book).delete()
    db_session.commit()
    assert db_session.query(ReadingSession).count() == 0

    result = backup_service.import_file(path)
    assert result.books == 2
    assert result.sessions == 3
    db_session.expire_all()
    assert db_session.query(Book).count() == 2
    assert db_session.query(ReadingSession).count() == 3
    assert PreferencesRepository(db_session).get_daily_goal() == 45

def test_replace_clears_existing_rows(db_session, backup_service, populated):
    backup_service.import_data(_document(books=[_book(50)]))
    books = db_session.query(Book).all()
    assert [(b.id, b.name) for b in books] == [(50, "Emma")]
    assert books[0].date_added == datetime(2024, 1, 2, 10, 30)
    assert db_session.query(ReadingSession).count() == 0

def test_merge_keeps_existing_rows(db_session, backup_service, populated):
    hobbit, _ = populated
    renamed = _book(hobbit.id, name="The Hobbit (Annotated)")
    result = backup_service.import_data(_document(books=[renamed, _book(50)]), mode="merge")
    assert result.mode == "merge"
    db_session.expire_all()
    assert db_session.query(Book).count() == 3
    assert db_session.get(Book, hobbit.id).name == "The Hobbit (Annotated)"
    assert db_session.query(ReadingSession).count() == 3

def test_failed_import_rolls_back(db_session, backup_service, populated):
    """A session pointing at a missing book fails the import and leaves the data untouched."""
    orphan = {'id': 1, 'book_id': 999, 'minutes_read': 10, 'date': '2024-03-01',
              'created_at': '2024-03-01T08:00:00'}
    with pytest.raises(IntegrityError):
        backup_service.import_data(_document(books=[_book(50)], sessions=[orphan]))

    db_session.expire_all()
    assert {b.name for b in db_session.query(Book).all()} == {"The Hobbit", "Dune"}
    assert db_session.query(ReadingSession).count() == 3

def test_invalid_document_is_rejected(backup_service):
    with pytest.raises(BackupValidationError) as excinfo:
        backup_service.import_data(_document(app='other-app'))
    assert 'Invalid app identifier' in excinfo.value.errors[0]

def test_invalid_mode(backup_service):
    with pytest.raises(ValueError, match="Invalid import mode"):
        backup_service.import_data(_document(), mode="append")

def test_load_file_with_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(BackupValidationError, match="Failed to parse backup file"):
        BackupService.load_file(path)

def test_validate_backup_errors():
    result = validate_backup({'tables': {'enhanced_books': [{'name': '', 'author': 'A', 'page': 10}],
                                         'reading_sessions': [{'book_id': 1, 'minutes_read': 0, 'date': ''}]}})
    assert result.is_valid is False
    assert "Missing app identifier" in result.errors
    assert "Missing schema version" in result.errors
    assert "Missing creation timestamp" in result.errors
    assert "1 books have invalid data" in result.errors
    assert "1 reading sessions have invalid data" in result.errors

def test_validate_backup_newer_schema():
    result = validate_backup(_document(schemaVersion=2))
    assert result.is_valid is False
    assert "newer than supported" in result.errors[0]

def test_validate_backup_warnings():
    session = {'id': 1, 'book_id': 7, 'minutes_read': 10, 'date': '2024-03-01'}
    result = validate_backup(_document(books=[_book(1)], sessions=[session]))
    assert result.is_valid is True
    assert result.total_books == 1
    assert result.total_sessions == 1
    assert result.warnings == ["1 reading sessions reference books that don't exist in the backup"]

def test_validate_non_object():
    assert validate_backup([1, 2, 3]).errors == ["Backup must be a JSON object"]
