import click
from pagestreak.models.progress import format_minutes
from pagestreak.sa.repositories.preferences import PreferencesRepository
from ..utils import echo_label, echo_success, open_session

@click.group()
def goal():
    """Daily reading goal"""
    pass

@goal.command()
@click.pass_context
def show(ctx):
    """Show the daily reading goal"""
    with open_session(ctx) as session:
        echo_label("Daily goal", format_minutes(PreferencesRepository(session).get_daily_goal()))

@goal.command(name='set')
@click.argument('minutes', type=int)
@click.pass_context
def set_goal(ctx, minutes):
    """Set the daily reading goal in minutes"""
    with open_session(ctx) as session:
        PreferencesRepository(session).set_daily_goal(minutes)
        echo_success(f"Daily goal set to {format_minutes(minutes)}")
