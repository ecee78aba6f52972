# pagestreak/services/backup_service.py
"""JSON backup export and import.

A backup is a single JSON document::

    {"app": "pagestreak", "schemaVersion": 1, "createdAt": "...",
     "tables": {"enhanced_books": [...], "reading_sessions": [...], ...}}

Imports run in one transaction; any failure rolls back every change.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field
from sqlalchemy import DateTime, Boolean
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagestreak.exceptions import BackupValidationError
from pagestreak.sa.models import (
    AppUsageTracking, Book, NotificationPreferences, ReadingSession, UserPreferences
)
from pagestreak.utils.dates import Clock, resolve_clock

logger = logging.getLogger(__name__)

BACKUP_SCHEMA_VERSION = 1
APP_IDENTIFIER = "pagestreak"
IMPORT_MODES = ("replace", "merge")

# Parents before children; deletes run in reverse
BACKUP_TABLES = {
    'user_preferences': UserPreferences,
    'notification_preferences': NotificationPreferences,
    'enhanced_books': Book,
    'reading_sessions': ReadingSession,
    'app_usage_tracking': AppUsageTracking,
}

class BackupValidationResult(BaseModel):
    is_valid: bool = False
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    total_books: int = 0
    total_sessions: int = 0
    has_user_preferences: bool = False
    schema_version: int = 0
    created_at: str = ""

class ImportResult(BaseModel):
    mode: str
    books: int = 0
    sessions: int = 0
    warnings: List[str] = Field(default_factory=list)

def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value

def row_to_dict(row) -> Dict[str, Any]:
    return {column.key: _serialize(getattr(row, column.key)) for column in row.__table__.columns}

def dict_to_row(model, record: Dict[str, Any]):
    """Build a model instance from a backup record, ignoring unknown keys"""
    values = {}
    for column in model.__table__.columns:
        if column.key not in record:
            continue
        value = record[column.key]
        if value is not None and isinstance(column.type, DateTime) and isinstance(value, str):
            value = datetime.fromisoformat(value)
        elif value is not None and isinstance(column.type, Boolean):
            value = bool(value)
        values[column.key] = value
    return model(**values)

def validate_backup(data: Any) -> BackupValidationResult:
    """Check a parsed backup document without touching the database"""
    result = BackupValidationResult()
    if not isinstance(data, dict):
        result.errors.append("Backup must be a JSON object")
        return result

    app = data.get('app')
    if not app:
        result.errors.append("Missing app identifier")
    elif app != APP_IDENTIFIER:
        result.errors.append(f'Invalid app identifier: expected "{APP_IDENTIFIER}", got "{app}"')

    version = data.get('schemaVersion')
    if not version:
        result.errors.append("Missing schema version")
    else:
        result.schema_version = version
        if version > BACKUP_SCHEMA_VERSION:
            result.errors.append(
                f"Backup schema version {version} is newer than supported version {BACKUP_SCHEMA_VERSION}"
            )
        elif version < BACKUP_SCHEMA_VERSION:
            result.warnings.append(
                f"Backup schema version {version} is older than current version {BACKUP_SCHEMA_VERSION}. "
                "Data will be migrated."
            )

    if not data.get('createdAt'):
        result.errors.append("Missing creation timestamp")
    else:
        result.created_at = data['createdAt']

    tables = data.get('tables')
    if not isinstance(tables, dict):
        result.errors.append("Missing tables data")
    else:
        books = tables.get('enhanced_books') or []
        sessions = tables.get('reading_sessions') or []
        result.total_books = len(books)
        result.total_sessions = len(sessions)
        result.has_user_preferences = bool(tables.get('user_preferences'))

        invalid_books = [
            b for b in books
            if not b.get('name') or not b.get('author') or not isinstance(b.get('page'), int)
        ]
        if invalid_books:
            result.errors.append(f"{len(invalid_books)} books have invalid data")

        invalid_sessions = [
            s for s in sessions
            if not s.get('book_id') or not s.get('minutes_read') or not s.get('date')
        ]
        if invalid_sessions:
            result.errors.append(f"{len(invalid_sessions)} reading sessions have invalid data")

        if books and sessions:
            book_ids = {b.get('id') for b in books}
            orphaned = [s for s in sessions if s.get('book_id') not in book_ids]
            if orphaned:
                result.warnings.append(
                    f"{len(orphaned)} reading sessions reference books that don't exist in the backup"
                )

    result.is_valid = not result.errors
    return result

class BackupService:
    def __init__(self, session: Session, clock: Optional[Clock] = None):
        self.session = session
        self.clock = resolve_clock(clock)

    def export_data(self, tables: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Serialize the selected tables (all by default) into a backup document"""
        selected = list(tables) if tables is not None else list(BACKUP_TABLES)
        unknown = set(selected) - set(BACKUP_TABLES)
        if unknown:
            raise ValueError(f"Unknown backup tables: {', '.join(sorted(unknown))}")

        document: Dict[str, Any] = {
            'app': APP_IDENTIFIER,
            'schemaVersion': BACKUP_SCHEMA_VERSION,
            'createdAt': self.clock.now().isoformat(),
            'tables': {}
        }
        for name in selected:
            model = BACKUP_TABLES[name]
            primary_key = list(model.__table__.primary_key.columns)[0]
            rows = self.session.query(model).order_by(primary_key).all()
            document['tables'][name] = [row_to_dict(row) for row in rows]
            logger.info(f"Exported {len(rows)} rows from {name}")
        return document

    def export_to_file(self, path: Union[str, Path], tables: Optional[Iterable[str]] = None) -> Path:
        path = Path(path)
        document = self.export_data(tables)
        path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        return path

    @staticmethod
    def load_file(path: Union[str, Path]) -> Dict[str, Any]:
        try:
            return json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise BackupValidationError([f"Failed to parse backup file: {e}"])

    def import_data(self, data: Dict[str, Any], mode: str = "replace") -> ImportResult:
        """Import a backup document.

        Args:
            data: Parsed backup document
            mode: "replace" clears each table present in the backup first,
                "merge" upserts rows by primary key

        Returns:
            Counts of imported books and sessions

        Raises:
            ValueError: If the mode is unknown
            BackupValidationError: If the document fails validation
            SQLAlchemyError: If any write fails; nothing is committed in that case
        """
        if mode not in IMPORT_MODES:
            raise ValueError(f"Invalid import mode '{mode}'. Expected one of: {', '.join(IMPORT_MODES)}")
        validation = validate_backup(data)
        if not validation.is_valid:
            raise BackupValidationError(validation.errors)

        tables = data['tables']
        result = ImportResult(mode=mode, warnings=validation.warnings)
        try:
            if mode == "replace":
                for name in reversed(list(BACKUP_TABLES)):
                    if tables.get(name) is not None:
                        self.session.query(BACKUP_TABLES[name]).delete()
                self.session.flush()

            for name, model in BACKUP_TABLES.items():
                for record in tables.get(name) or []:
                    row = dict_to_row(model, record)
                    if mode == "replace":
                        self.session.add(row)
                    else:
                        self.session.merge(row)
                self.session.flush()

            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Backup import failed, all changes rolled back")
            raise

        result.books = len(tables.get('enhanced_books') or [])
        result.sessions = len(tables.get('reading_sessions') or [])
        logger.info(f"Imported {result.books} books and {result.sessions} sessions ({mode})")
        return result

    def import_file(self, path: Union[str, Path], mode: str = "replace") -> ImportResult:
        return self.import_data(self.load_file(path), mode)
