import click
from pagestreak.services.notifier import DatabaseNotifier
from pagestreak.services.reminder_service import APP_STATE_ACTIVE, APP_STATES_BACKGROUND, ReminderScheduler
from ..utils import echo_label, echo_success, get_clock, open_session

def _scheduler(session, ctx) -> ReminderScheduler:
    clock = get_clock(ctx)
    return ReminderScheduler(session, DatabaseNotifier(session, clock), clock)

@click.group()
def reminder():
    """Daily reminder commands"""
    pass

@reminder.command(name='app-state')
@click.argument('state', type=click.Choice((APP_STATE_ACTIVE,) + APP_STATES_BACKGROUND))
@click.pass_context
def app_state(ctx, state):
    """Report an app lifecycle change (active, background or inactive)

    Going to the background schedules a reminder if today's goal is not met;
    becoming active cancels it.
    """
    with open_session(ctx) as session:
        scheduler = _scheduler(session, ctx)
        identifier = scheduler.on_app_state_change(state)
        if identifier:
            pending = scheduler.notifier.pending()
            fire_at = pending[0].fire_at.isoformat(sep=' ', timespec='minutes') if pending else "unknown"
            echo_success(f"Reminder scheduled for {fire_at}")
        elif state == APP_STATE_ACTIVE:
            click.echo("App opened, pending reminders cancelled")
        else:
            click.echo("No reminder scheduled")

@reminder.command()
@click.pass_context
def status(ctx):
    """Show reminder settings and pending reminders"""
    with open_session(ctx) as session:
        scheduler = _scheduler(session, ctx)
        result = scheduler.status()
        echo_label("Enabled", "yes" if result.enabled else "no")
        echo_label("Development mode", "yes" if result.is_development else "no")
        echo_label("Hours after last open", result.hours_after_last_open)
        echo_label("Title", result.reminder_title)
        echo_label("Body", result.reminder_body)
        last_opened = result.last_opened_at.isoformat(sep=' ', timespec='minutes') if result.last_opened_at else "never"
        echo_label("Last opened", last_opened)
        echo_label("Pending reminders", result.scheduled_notifications)
        for pending in scheduler.notifier.pending():
            click.echo(f"  {pending.fire_at.isoformat(sep=' ', timespec='minutes')}  {pending.title}")

@reminder.command()
@click.pass_context
def due(ctx):
    """Deliver reminders whose time has come"""
    with open_session(ctx) as session:
        delivered = _scheduler(session, ctx).notifier.deliver_due()
        if not delivered:
            click.echo("No reminders due")
            return
        for item in delivered:
            click.echo(click.style(item.title, fg='yellow', bold=True))
            click.echo(item.body)

@reminder.command()
@click.option('--enable/--disable', 'enabled', default=None, help='Turn daily reminders on or off')
@click.option('--hours', type=int, default=None, help='Hours after the last app open to remind you')
@click.option('--title', default=None, help='Reminder title')
@click.option('--body', default=None, help='Reminder message')
@click.pass_context
def settings(ctx, enabled, hours, title, body):
    """Change reminder settings"""
    fields = {}
    if enabled is not None:
        fields['daily_reminder_enabled'] = enabled
        if enabled:
            fields['notifications_enabled'] = True
    if hours is not None:
        fields['daily_reminder_hours_after_last_open'] = hours
    if title is not None:
        fields['daily_reminder_title'] = title
    if body is not None:
        fields['daily_reminder_body'] = body

    with open_session(ctx) as session:
        scheduler = _scheduler(session, ctx)
        if fields:
            scheduler.update_settings(**fields)
            echo_success("Reminder settings updated")
        prefs = scheduler.preferences.get_notification_preferences()
        echo_label("Enabled", "yes" if scheduler.notifications_enabled() else "no")
        echo_label("Hours after last open", prefs.daily_reminder_hours_after_last_open)
