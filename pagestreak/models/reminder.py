# pagestreak/models/reminder.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class ReminderStatus(BaseModel):
    enabled: bool
    has_permission: bool
    is_development: bool
    last_opened_at: Optional[datetime] = None
    scheduled_notifications: int = 0
    hours_after_last_open: Optional[int] = None
    reminder_title: Optional[str] = None
    reminder_body: Optional[str] = None
