import click
from pagestreak.models.progress import GoalStatus, format_minutes
from pagestreak.sa.repositories.preferences import PreferencesRepository
from pagestreak.sa.repositories.session import ReadingSessionRepository
from pagestreak.services.progress_service import ProgressAggregator
from ..utils import echo_label, echo_success, get_clock, open_session

@click.group(name='session')
def session_group():
    """Reading session commands"""
    pass

@session_group.command()
@click.argument('book_id', type=int)
@click.argument('minutes', type=int)
@click.option('--pages', type=int, default=None, help='Pages read in this session')
@click.option('--date', 'day', default=None, help='Reading day as YYYY-MM-DD (default: today)')
@click.option('--notes', default=None, help='Free-text notes')
@click.pass_context
def log(ctx, book_id, minutes, pages, day, notes):
    """Log a reading session

    Logging pages also moves the book's current page to the total pages read.

    Example:
        pagestreak session log 3 25 --pages 18
    """
    clock = get_clock(ctx)
    with open_session(ctx) as session:
        logged = ReadingSessionRepository(session).log_session(
            book_id=book_id,
            minutes_read=minutes,
            date=day or clock.today(),
            pages_read=pages,
            notes=notes
        )
        aggregator = ProgressAggregator(session, clock)
        if pages is not None:
            aggregator.sync_current_page(book_id)

        echo_success(f"Logged {format_minutes(logged.minutes_read)} of {logged.book.name} on {logged.date}")
        status = GoalStatus(
            daily_goal=PreferencesRepository(session).get_daily_goal(),
            minutes_read=aggregator.today_minutes()
        )
        if status.is_met:
            echo_success("Daily goal reached!")
        else:
            echo_label("Left today", status.formatted_remaining)

@session_group.command()
@click.option('--limit', default=5, type=int, help='Number of sessions to show')
@click.pass_context
def recent(ctx, limit):
    """Show the most recently logged sessions"""
    with open_session(ctx) as session:
        sessions = ProgressAggregator(session, get_clock(ctx)).recent_sessions(limit)
        if not sessions:
            click.echo("No reading sessions yet")
            return
        for entry in sessions:
            pages = f", {entry.pages_read} pages" if entry.pages_read is not None else ""
            click.echo(
                click.style(f"{entry.date} ", fg='cyan')
                + f"{entry.book_name}: {format_minutes(entry.minutes_read)}{pages}"
            )
            if entry.notes:
                click.echo(click.style(f"    {entry.notes}", fg='white'))
