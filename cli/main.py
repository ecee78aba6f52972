# cli/main.py
import click
from .commands.db import db
from .commands.book import book
from .commands.session import session_group
from .commands.stats import stats
from .commands.goal import goal
from .commands.reminder import reminder
from .commands.backup import backup
from .utils import configure_logging

@click.group()
@click.option('--database-url', envvar='DATABASE_URL', default=None,
              help='Database connection string (default: sqlite:///pagestreak.db)')
@click.option('--verbose', is_flag=True, default=False, help='Show debug logging')
@click.pass_context
def cli(ctx, database_url, verbose):
    """PageStreak reading tracker CLI"""
    ctx.ensure_object(dict)
    ctx.obj['database_url'] = database_url
    ctx.obj['verbose'] = verbose
    configure_logging(verbose)

cli.add_command(db)
cli.add_command(book)
cli.add_command(session_group)
cli.add_command(stats)
cli.add_command(goal)
cli.add_command(reminder)
cli.add_command(backup)

def main():
    """Entry point for the CLI"""
    cli(obj={})

if __name__ == '__main__':
    main()
