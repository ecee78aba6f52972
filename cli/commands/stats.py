import click
from pagestreak.models.progress import GoalStatus, format_minutes
from pagestreak.sa.repositories.preferences import PreferencesRepository
from pagestreak.services.progress_service import ProgressAggregator
from pagestreak.services.stats_service import WeeklyStatsService
from pagestreak.services.streak_service import StreakCalculator
from pagestreak.utils.dates import is_valid_date_string, start_of_week, trailing_days
from ..utils import echo_label, echo_success, get_clock, open_session

@click.group()
def stats():
    """Reading statistics"""
    pass

@stats.command()
@click.pass_context
def today(ctx):
    """Today's minutes, goal and streak"""
    clock = get_clock(ctx)
    with open_session(ctx) as session:
        aggregator = ProgressAggregator(session, clock)
        status = GoalStatus(
            daily_goal=PreferencesRepository(session).get_daily_goal(),
            minutes_read=aggregator.today_minutes()
        )
        echo_label("Read today", format_minutes(status.minutes_read))
        echo_label("Daily goal", format_minutes(status.daily_goal))
        if status.is_met:
            echo_success("Goal reached!")
        else:
            echo_label("Remaining", status.formatted_remaining)
        echo_label("Streak", f"{StreakCalculator(session, clock).current_streak()} day(s)")

@stats.command()
@click.pass_context
def streak(ctx):
    """Current streak and the last 7 days"""
    clock = get_clock(ctx)
    with open_session(ctx) as session:
        current = StreakCalculator(session, clock).current_streak()
        echo_label("Current streak", f"{current} day(s)")

        minutes = ProgressAggregator(session, clock).weekly_minutes()
        for day, total in zip(trailing_days(clock.today(), 7), minutes):
            click.echo(f"  {day}  {'#' * (total // 5)} {total}")

@stats.command()
@click.option('--week-start', default=None, help='First day of the week as YYYY-MM-DD (default: this Monday)')
@click.pass_context
def week(ctx, week_start):
    """Weekly summary"""
    if week_start is not None and not is_valid_date_string(week_start):
        raise click.BadParameter("expected YYYY-MM-DD", param_hint="--week-start")

    clock = get_clock(ctx)
    with open_session(ctx) as session:
        result = WeeklyStatsService(session, clock).weekly_stats(week_start or start_of_week(clock.today()))

        click.echo(click.style(f"\nWeek of {result.week_start} to {result.week_end}", fg='blue', bold=True))
        for day in result.daily_breakdown:
            marker = click.style("✓", fg='green') if day.goal_met else " "
            click.echo(f" {marker} {day.day_name:<9} {day.date}  {day.minutes:>4} min  {day.sessions} session(s)")

        echo_label("Total", format_minutes(result.total_minutes))
        echo_label("Average per day", f"{result.average_minutes_per_day:.1f} min")
        echo_label("Reading days", f"{result.reading_days} of 7")
        echo_label("Weekly goal", f"{result.goal_progress:.0f}%")
        echo_label("Current streak", f"{result.streak_info.current_streak} day(s)")
        echo_label("Longest streak", f"{result.streak_info.longest_streak} day(s)")
        if result.top_book:
            echo_label("Top book", f"{result.top_book.book_name} ({format_minutes(result.top_book.minutes_read)})")
        if result.books_read:
            click.echo(click.style("Books read:", fg='blue'))
            for title in result.books_read:
                click.echo(f"  - {title}")
