# pagestreak/sa/repositories/usage.py
from datetime import datetime
from typing import Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session
from pagestreak.utils.dates import to_local_date_string
from ..models import AppUsageTracking

class AppUsageRepository:
    """Records app foreground/background events, one row per local day."""

    def __init__(self, session: Session):
        self.session = session

    def latest_for_day(self, date: str) -> Optional[AppUsageTracking]:
        return (
            self.session.query(AppUsageTracking)
            .filter(AppUsageTracking.date == date)
            .order_by(desc(AppUsageTracking.id))
            .first()
        )

    def track_opened(self, now: datetime) -> AppUsageTracking:
        """Stamp today's row with the open time, creating it on the first open of the day"""
        today = to_local_date_string(now)
        record = self.latest_for_day(today)
        if record:
            record.last_opened_at = now
            record.session_count_today = (record.session_count_today or 0) + 1
        else:
            record = AppUsageTracking(last_opened_at=now, session_count_today=1, date=today)
            self.session.add(record)
        self.session.commit()
        return record

    def latest(self) -> Optional[AppUsageTracking]:
        return self.session.query(AppUsageTracking).order_by(desc(AppUsageTracking.id)).first()

    def track_closed(self, now: datetime) -> Optional[AppUsageTracking]:
        """Stamp the close time on today's latest row.

        A close with no open today (the app stayed in the foreground across
        midnight) lands on the most recent row of any day; its open time is
        never touched. Nothing is written if the app was never opened.
        """
        record = self.latest_for_day(to_local_date_string(now)) or self.latest()
        if record is None:
            return None
        record.last_closed_at = now
        self.session.commit()
        return record

    def last_opened_at(self) -> Optional[datetime]:
        """Open time of the most recent usage record, None if the app was never opened"""
        record = self.latest()
        return record.last_opened_at if record else None
