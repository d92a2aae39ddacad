"""Human-facing reminder status: passed/upcoming badge and countdown text."""

from datetime import datetime
from typing import Optional

from .models import Reminder

STATUS_NONE = "none"
STATUS_UPCOMING = "upcoming"
STATUS_PASSED = "passed"


def reminder_status(reminder: Reminder, now: datetime) -> str:
    """'none' without a reminder time, 'passed' once due, else 'upcoming'."""
    if reminder.due_at is None:
        return STATUS_NONE
    if now >= reminder.due_at:
        return STATUS_PASSED
    return STATUS_UPCOMING


def format_countdown(due_at: Optional[datetime], now: datetime) -> str:
    """Countdown text, e.g. 'Due in: 1d 2h 5m'."""
    if due_at is None:
        return "No alarm set"

    remaining = due_at - now
    if remaining.total_seconds() <= 0:
        return "Alarm Passed"

    total_minutes = int(remaining.total_seconds() // 60)
    days, rest = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rest, 60)
    return f"Due in: {days}d {hours}h {minutes}m"
