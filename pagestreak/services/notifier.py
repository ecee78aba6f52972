# pagestreak/services/notifier.py
"""Local notification capability used by the reminder scheduler.

``Notifier`` is the seam to the platform. ``DatabaseNotifier`` is the
implementation shipped with the CLI: scheduled reminders are stored in the
``scheduled_reminders`` table and handed out by ``deliver_due`` once their
fire time has passed.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from pagestreak.sa.models import ScheduledReminder
from pagestreak.sa.repositories.reminder import ReminderRepository
from pagestreak.utils.dates import Clock, resolve_clock

logger = logging.getLogger(__name__)

class Notifier(ABC):
    @abstractmethod
    def has_permission(self) -> bool:
        """Whether the platform currently allows notifications"""

    def request_permission(self) -> bool:
        """Ask for permission if needed; returns whether it is granted"""
        return self.has_permission()

    @abstractmethod
    def schedule(self, title: str, body: str, seconds: float,
                 data: Optional[Dict[str, Any]] = None) -> str:
        """Schedule a one-shot notification ``seconds`` from now and return its identifier"""

    @abstractmethod
    def cancel(self, identifier: str) -> None:
        """Cancel one scheduled notification; unknown identifiers are ignored"""

    @abstractmethod
    def cancel_all(self) -> None:
        """Cancel every scheduled notification"""

    @abstractmethod
    def pending_count(self) -> int:
        """Number of notifications still waiting to fire"""

class DatabaseNotifier(Notifier):
    def __init__(self, session: Session, clock: Optional[Clock] = None, permission_granted: bool = True):
        self.clock = resolve_clock(clock)
        self.reminders = ReminderRepository(session)
        self.permission_granted = permission_granted

    def has_permission(self) -> bool:
        return self.permission_granted

    def schedule(self, title: str, body: str, seconds: float,
                 data: Optional[Dict[str, Any]] = None) -> str:
        identifier = uuid.uuid4().hex
        fire_at = self.clock.now() + timedelta(seconds=seconds)
        self.reminders.add(identifier, title, body, fire_at, data)
        logger.info(f"Scheduled reminder {identifier} for {fire_at.isoformat(timespec='seconds')}")
        return identifier

    def cancel(self, identifier: str) -> None:
        if self.reminders.cancel(identifier, self.clock.now()):
            logger.info(f"Cancelled reminder {identifier}")

    def cancel_all(self) -> None:
        cancelled = self.reminders.cancel_all(self.clock.now())
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending reminder(s)")

    def pending_count(self) -> int:
        return len(self.reminders.pending())

    def pending(self) -> List[ScheduledReminder]:
        return self.reminders.pending()

    def deliver_due(self) -> List[ScheduledReminder]:
        """Mark reminders whose fire time has passed as delivered and return them"""
        now = self.clock.now()
        due = self.reminders.due(now)
        if due:
            self.reminders.mark_delivered(due, now)
        return due
