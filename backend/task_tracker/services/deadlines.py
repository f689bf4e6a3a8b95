# backend/task_tracker/services/deadlines.py
"""Deadline classification shared by every reminder trigger.

All "today" values come from :func:`today_in_zone`, which reads the current
date in the single configured ``REMINDER_TIMEZONE``. Deadlines are stored as
plain dates, so no further truncation is applied.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import settings

DUE_SOON_DAYS = 3


@dataclass(frozen=True)
class DeadlineStatus:
    days_remaining: int
    is_overdue: bool
    is_due_soon: bool


def today_in_zone(tz_name: Optional[str] = None) -> date:
    """Current calendar date in the reminder time zone"""
    return datetime.now(ZoneInfo(tz_name or settings.REMINDER_TIMEZONE)).date()


def classify(today: date, deadline: date) -> DeadlineStatus:
    days_remaining = (deadline - today).days
    return DeadlineStatus(
        days_remaining=days_remaining,
        is_overdue=days_remaining < 0,
        is_due_soon=0 <= days_remaining <= DUE_SOON_DAYS,
    )


def due_soon_window(today: date) -> tuple[date, date]:
    """Inclusive date range a project must fall in to be due soon"""
    return today, today + timedelta(days=DUE_SOON_DAYS)
