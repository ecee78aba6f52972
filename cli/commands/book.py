import click
from pagestreak.exceptions import BookNotFoundError, OpenLibraryError
from pagestreak.models.progress import format_minutes
from pagestreak.sa.models import ReadingStatus
from pagestreak.sa.repositories.book import BookRepository
from pagestreak.services.open_library import OpenLibraryClient
from pagestreak.services.progress_service import ProgressAggregator
from ..utils import echo_error, echo_label, echo_success, format_book_line, get_clock, open_session, progress_bar

STATUS_CHOICES = click.Choice([s.value for s in ReadingStatus])

@click.group()
def book():
    """Book management commands"""
    pass

@book.command()
@click.argument('title')
@click.argument('author')
@click.argument('pages', type=int)
@click.option('--status', type=STATUS_CHOICES, default=ReadingStatus.WANT_TO_READ.value,
              help='Initial reading status')
@click.option('--current-page', type=int, default=0, help='Page you are currently on')
@click.option('--isbn', default=None, help='ISBN of the edition')
@click.option('--notes', default=None, help='Free-text notes')
@click.pass_context
def add(ctx, title, author, pages, status, current_page, isbn, notes):
    """Add a book to your library

    Example:
        pagestreak book add "Dune" "Frank Herbert" 412 --status currently_reading
    """
    with open_session(ctx) as session:
        created = BookRepository(session).create_book(
            name=title,
            author=author,
            page=pages,
            reading_status=status,
            current_page=current_page,
            now=get_clock(ctx).now(),
            isbn=isbn,
            notes=notes
        )
        echo_success(f"Added [{created.id}] {created.name} by {created.author}")

@book.command(name='list')
@click.option('--status', type=STATUS_CHOICES, default=None, help='Only show books with this status')
@click.pass_context
def list_books(ctx, status):
    """List books with their progress"""
    with open_session(ctx) as session:
        books = BookRepository(session).list_books(status)
        if not books:
            click.echo("No books found")
            return
        aggregator = ProgressAggregator(session, get_clock(ctx))
        for entry in books:
            click.echo(format_book_line(entry, aggregator.progress_for_book(entry)))

@book.command()
@click.argument('book_id', type=int)
@click.argument('status', type=STATUS_CHOICES)
@click.pass_context
def status(ctx, book_id, status):
    """Change a book's reading status"""
    with open_session(ctx) as session:
        updated = BookRepository(session).update_status(book_id, status, get_clock(ctx).now())
        if updated is None:
            raise BookNotFoundError(book_id)
        echo_success(f"{updated.name} is now {updated.reading_status}")

@book.command()
@click.argument('book_id', type=int)
@click.argument('page', type=int)
@click.pass_context
def page(ctx, book_id, page):
    """Set the page you are currently on"""
    with open_session(ctx) as session:
        updated = BookRepository(session).update_current_page(book_id, page)
        if updated is None:
            raise BookNotFoundError(book_id)
        echo_success(f"{updated.name}: now on page {updated.current_page} of {updated.page}")

@book.command()
@click.argument('book_id', type=int)
@click.pass_context
def progress(ctx, book_id):
    """Show reading progress for one book"""
    with open_session(ctx) as session:
        entry = BookRepository(session).require(book_id)
        aggregator = ProgressAggregator(session, get_clock(ctx))
        result = aggregator.progress_for_book(entry)

        click.echo(click.style(f"\n{entry.name}", fg='cyan', bold=True) + f" by {entry.author}")
        echo_label("Status", entry.reading_status)
        echo_label("Progress", progress_bar(result.percentage))
        echo_label("Pages", f"{result.pages_read} of {entry.page}")
        echo_label("Source", result.source.value)
        echo_label("Time spent", format_minutes(aggregator.minutes_for_book(entry.id)))
        if result.is_complete:
            echo_success("Finished!")

@book.command()
@click.argument('book_id', type=int)
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def delete(ctx, book_id, yes):
    """Delete a book together with its reading sessions"""
    with open_session(ctx) as session:
        repo = BookRepository(session)
        entry = repo.require(book_id)
        if not yes:
            click.confirm(f"Delete '{entry.name}' and all of its reading sessions?", abort=True)
        repo.delete_book(book_id)
        echo_success(f"Deleted {entry.name}")

@book.command()
@click.argument('query')
@click.option('--limit', default=10, type=int, help='Maximum number of results')
@click.option('--add', 'add_index', type=int, default=None,
              help='Add the result with this number to your library')
@click.pass_context
def search(ctx, query, limit, add_index):
    """Search Open Library for books

    Example:
        pagestreak book search "project hail mary"
        pagestreak book search "project hail mary" --add 1
    """
    try:
        results = OpenLibraryClient().search_books(query, limit)
    except OpenLibraryError as e:
        echo_error(str(e))
        raise click.Abort()

    if not results:
        click.echo("No results")
        return

    for index, result in enumerate(results, start=1):
        details = [str(result.first_publish_year) if result.first_publish_year else None,
                   f"{result.page_count} pages" if result.page_count else None]
        suffix = ", ".join(d for d in details if d)
        click.echo(click.style(f"{index:>2}. ", fg='cyan') + f"{result.title} by {result.author}"
                   + (f" ({suffix})" if suffix else ""))

    if add_index is None:
        return
    if not 1 <= add_index <= len(results):
        echo_error(f"Choose a result between 1 and {len(results)}")
        raise click.Abort()

    chosen = results[add_index - 1]
    fields = chosen.to_book_fields()
    if not fields['page']:
        fields['page'] = click.prompt("Open Library has no page count for this book. Pages", type=int)

    with open_session(ctx) as session:
        created = BookRepository(session).create_book(now=get_clock(ctx).now(), **fields)
        echo_success(f"Added [{created.id}] {created.name} by {created.author}")
