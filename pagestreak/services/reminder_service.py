# pagestreak/services/reminder_service.py
"""Daily reading reminders.

The scheduler reacts to app lifecycle changes. Coming to the foreground
records the open time and cancels any pending reminder; going to the
background records the close time and, if today's goal is not met yet,
schedules exactly one reminder.

The reminder is anchored to the last open, not to the latest backgrounding:
with a 5 hour target, backgrounding the app 2 hours after opening it
schedules the reminder 3 hours out, so the total time from last open to
reminder is always the configured target.
"""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagestreak import config
from pagestreak.models.progress import GoalStatus
from pagestreak.models.reminder import ReminderStatus
from pagestreak.sa.models import NotificationPreferences
from pagestreak.sa.repositories.preferences import PreferencesRepository
from pagestreak.sa.repositories.usage import AppUsageRepository
from pagestreak.services.notifier import Notifier
from pagestreak.services.progress_service import ProgressAggregator
from pagestreak.utils.dates import Clock, resolve_clock

logger = logging.getLogger(__name__)

APP_STATE_ACTIVE = "active"
APP_STATES_BACKGROUND = ("background", "inactive")
REMINDER_TYPE = "daily_reminder_based_on_last_open"

def reminder_delay_seconds(
    hours_since_last_open: Optional[float],
    target_hours: float,
    minimum_seconds: float = config.MIN_REMINDER_SECONDS
) -> float:
    """Seconds from now until the reminder should fire.

    Args:
        hours_since_last_open: Hours elapsed since the app was last opened,
            None if it has never been opened
        target_hours: Configured hours between last open and the reminder
        minimum_seconds: Shortest delay ever returned

    Returns:
        The full target when there is no last open, the remaining part of the
        target otherwise, and never less than ``minimum_seconds``
    """
    if hours_since_last_open is None:
        return max(target_hours * 3600, minimum_seconds)
    elapsed = max(hours_since_last_open, 0.0)
    if elapsed >= target_hours:
        return minimum_seconds
    return max((target_hours - elapsed) * 3600, minimum_seconds)

class ReminderScheduler:
    def __init__(
        self,
        session: Session,
        notifier: Notifier,
        clock: Optional[Clock] = None,
        dev_mode: Optional[bool] = None,
        min_delay_seconds: Optional[float] = None
    ):
        self.session = session
        self.notifier = notifier
        self.clock = resolve_clock(clock)
        self.dev_mode = config.DEV_MODE if dev_mode is None else dev_mode
        self.min_delay_seconds = config.MIN_REMINDER_SECONDS if min_delay_seconds is None else min_delay_seconds
        self.preferences = PreferencesRepository(session)
        self.usage = AppUsageRepository(session)
        self.progress = ProgressAggregator(session, self.clock)
        self.notification_identifier: Optional[str] = None

    def on_app_state_change(self, next_state: str) -> Optional[str]:
        """React to an app lifecycle change.

        Returns:
            The identifier of the reminder scheduled by this change, if any
        """
        try:
            if next_state == APP_STATE_ACTIVE:
                self.track_app_opened()
                self.cancel()
            elif next_state in APP_STATES_BACKGROUND:
                self.track_app_closed()
                return self.check_and_schedule()
            else:
                logger.debug(f"Ignoring app state '{next_state}'")
        except SQLAlchemyError:
            logger.exception(f"Error handling app state change to '{next_state}'")
            self.session.rollback()
        return None

    def track_app_opened(self) -> None:
        self.usage.track_opened(self.clock.now())

    def track_app_closed(self) -> None:
        self.usage.track_closed(self.clock.now())

    def notifications_enabled(self) -> bool:
        prefs = self.preferences.get_notification_preferences()
        return bool(prefs.notifications_enabled and prefs.daily_reminder_enabled)

    def goal_status(self) -> GoalStatus:
        return GoalStatus(
            daily_goal=self.preferences.get_daily_goal(),
            minutes_read=self.progress.today_minutes()
        )

    def is_daily_goal_met(self) -> bool:
        if not self.preferences.has_user():
            return False
        return self.goal_status().is_met

    def remaining_time_to_goal(self) -> str:
        """Time left to reach today's goal, e.g. "1h 15m"; "0 minutes" once it is met"""
        return self.goal_status().formatted_remaining

    def generate_message(self, base_message: str) -> str:
        """Append today's remaining time to the configured reminder body"""
        status = self.goal_status()
        if status.remaining_minutes == 0:
            return "Congratulations! You've already reached your daily reading goal! 🎉"
        return (
            f"{base_message} You have {status.formatted_remaining} left to reach "
            f"your daily goal of {status.daily_goal} minutes."
        )

    def check_and_schedule(self) -> Optional[str]:
        """Schedule a reminder unless there is no user, reminders are off or the goal is met"""
        if not self.preferences.has_user():
            logger.info("No user preferences found, skipping reminder")
            return None
        if not self.notifications_enabled():
            logger.info("Reminders disabled, skipping")
            return None
        if self.is_daily_goal_met():
            logger.info("Daily goal already met, no reminder needed")
            return None
        return self.schedule_based_on_last_open()

    def schedule_based_on_last_open(self) -> Optional[str]:
        """Replace any pending reminder with one anchored to the last app open"""
        if not self.notifier.request_permission():
            logger.warning("No notification permission, skipping reminder")
            return None

        prefs: NotificationPreferences = self.preferences.get_notification_preferences()
        target_hours = prefs.daily_reminder_hours_after_last_open
        now = self.clock.now()
        last_opened_at = self.usage.last_opened_at()
        hours_since_last_open = None
        if last_opened_at is not None:
            hours_since_last_open = (now - last_opened_at).total_seconds() / 3600

        self.cancel()

        if self.dev_mode:
            seconds = self.min_delay_seconds
        else:
            seconds = reminder_delay_seconds(hours_since_last_open, target_hours, self.min_delay_seconds)

        if hours_since_last_open is None:
            logger.info(f"No last open recorded, scheduling reminder in {seconds / 3600:.2f} hours")
        else:
            logger.info(
                f"{hours_since_last_open:.2f} hours since last open (target: {target_hours}h), "
                f"scheduling reminder in {seconds / 3600:.2f} hours"
            )

        self.notification_identifier = self.notifier.schedule(
            prefs.daily_reminder_title,
            self.generate_message(prefs.daily_reminder_body),
            seconds,
            data={
                'type': REMINDER_TYPE,
                'scheduled_at': now.isoformat(),
                'last_opened_at': last_opened_at.isoformat() if last_opened_at else None,
                'hours_since_last_open': hours_since_last_open,
                'is_development': self.dev_mode
            }
        )
        return self.notification_identifier

    def cancel(self) -> None:
        """Cancel the pending reminder. Safe to call when nothing is scheduled."""
        if self.notification_identifier:
            self.notifier.cancel(self.notification_identifier)
            self.notification_identifier = None
        # A reminder scheduled by an earlier process is only reachable this way
        self.notifier.cancel_all()

    def update_settings(self, **fields) -> NotificationPreferences:
        """Update reminder settings; turning reminders off cancels the pending one"""
        prefs = self.preferences.update_notification_preferences(**fields)
        if fields.get('notifications_enabled') is False or fields.get('daily_reminder_enabled') is False:
            self.cancel()
        return prefs

    def status(self) -> ReminderStatus:
        prefs = self.preferences.get_notification_preferences()
        return ReminderStatus(
            enabled=self.notifications_enabled(),
            has_permission=self.notifier.has_permission(),
            is_development=self.dev_mode,
            last_opened_at=self.usage.last_opened_at(),
            scheduled_notifications=self.notifier.pending_count(),
            hours_after_last_open=prefs.daily_reminder_hours_after_last_open,
            reminder_title=prefs.daily_reminder_title,
            reminder_body=prefs.daily_reminder_body
        )
