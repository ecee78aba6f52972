import logging
from contextlib import contextmanager
from typing import Iterator

import click
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagestreak import config
from pagestreak.exceptions import PageStreakError
from pagestreak.models.progress import BookProgress
from pagestreak.sa.database import Database
from pagestreak.sa.models import Book
from pagestreak.utils.dates import Clock

STATUS_COLORS = {
    'want_to_read': 'blue',
    'currently_reading': 'yellow',
    'read': 'green',
}

def configure_logging(verbose: bool = False) -> None:
    """Attach a stream handler to the pagestreak logger once"""
    logger = logging.getLogger("pagestreak")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else config.LOG_LEVEL.upper())

def get_clock(ctx: click.Context) -> Clock:
    return ctx.obj.get('clock') or Clock()

def get_database(ctx: click.Context, initialize: bool = True) -> Database:
    """Open the database selected on the command line and make sure its schema exists"""
    database = Database(ctx.obj.get('database_url'))
    if initialize:
        database.init_db()
    return database

@contextmanager
def open_session(ctx: click.Context) -> Iterator[Session]:
    """Session for one command; domain errors become a red message and an abort"""
    database = get_database(ctx)
    session = database.get_session()
    try:
        yield session
    except (PageStreakError, ValueError, SQLAlchemyError) as e:
        session.rollback()
        echo_error(str(e))
        raise click.Abort()
    finally:
        session.close()
        database.dispose()

def echo_error(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg='red'), err=True)

def echo_success(message: str) -> None:
    click.echo(click.style(message, fg='green'))

def echo_label(label: str, value) -> None:
    click.echo(click.style(f"{label}: ", fg='blue') + click.style(str(value), fg='cyan'))

def progress_bar(percentage: int, width: int = 20) -> str:
    filled = round(width * percentage / 100)
    return "[" + "#" * filled + "-" * (width - filled) + f"] {percentage}%"

def format_book_line(book: Book, progress: BookProgress) -> str:
    status = click.style(book.reading_status, fg=STATUS_COLORS.get(book.reading_status, 'white'))
    return (
        click.style(f"[{book.id}] ", fg='cyan')
        + f"{book.name} by {book.author}  {status}  "
        + f"{progress_bar(progress.percentage)} ({progress.pages_read}/{book.page} pages)"
    )

