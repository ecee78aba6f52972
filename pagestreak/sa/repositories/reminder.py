# pagestreak/sa/repositories/reminder.py
import json
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from ..models import ScheduledReminder

class ReminderRepository:
    """Storage for reminders scheduled through the database notifier."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, identifier: str) -> Optional[ScheduledReminder]:
        return self.session.get(ScheduledReminder, identifier)

    def add(
        self,
        identifier: str,
        title: str,
        body: str,
        fire_at: datetime,
        payload: Optional[Dict[str, Any]] = None
    ) -> ScheduledReminder:
        reminder = ScheduledReminder(
            identifier=identifier,
            title=title,
            body=body,
            fire_at=fire_at,
            payload=json.dumps(payload, default=str) if payload else None
        )
        self.session.add(reminder)
        self.session.commit()
        return reminder

    def _pending_query(self):
        return self.session.query(ScheduledReminder).filter(
            ScheduledReminder.cancelled_at.is_(None),
            ScheduledReminder.delivered_at.is_(None)
        )

    def pending(self) -> List[ScheduledReminder]:
        return self._pending_query().order_by(ScheduledReminder.fire_at).all()

    def due(self, now: datetime) -> List[ScheduledReminder]:
        """Pending reminders whose fire time has passed"""
        return (
            self._pending_query()
            .filter(ScheduledReminder.fire_at <= now)
            .order_by(ScheduledReminder.fire_at)
            .all()
        )

    def cancel(self, identifier: str, now: datetime) -> bool:
        """Cancel one pending reminder. Returns False if it was not pending."""
        reminder = self.get(identifier)
        if reminder is None or not reminder.is_pending:
            return False
        reminder.cancelled_at = now
        self.session.commit()
        return True

    def cancel_all(self, now: datetime) -> int:
        """Cancel every pending reminder, returning how many were cancelled"""
        reminders = self.pending()
        for reminder in reminders:
            reminder.cancelled_at = now
        self.session.commit()
        return len(reminders)

    def mark_delivered(self, reminders: List[ScheduledReminder], now: datetime) -> None:
        for reminder in reminders:
            reminder.delivered_at = now
        self.session.commit()
