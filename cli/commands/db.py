import click
from ..utils import echo_success, get_database

@click.group()
def db():
    """Database management commands"""
    pass

@db.command()
@click.pass_context
def init(ctx):
    """Create missing tables and the default preference rows"""
    database = get_database(ctx, initialize=False)
    try:
        database.init_db()
        echo_success("Database initialized")
    finally:
        database.dispose()

@db.command()
@click.confirmation_option(prompt='This deletes all books, sessions and settings. Continue?')
@click.pass_context
def reset(ctx):
    """Drop and recreate every table"""
    database = get_database(ctx, initialize=False)
    try:
        database.reset_db()
        echo_success("Database reset")
    finally:
        database.dispose()
