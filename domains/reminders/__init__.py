"""Reminders domain: due detection and once-per-channel alert dispatch for notes.

Uses APScheduler interval jobs with SQLite persistence.
"""

from .models import Note, Reminder, MatchPolicy, AnnounceState, SmsState, SmsOutcome
from .store import ReminderStore, StoreError, get_store, reset_store
from .resolver import DueSetResolver, is_due_window, is_due_exact_minute, truncate_to_minute
from .alarm import AlarmSequencer
from .notifier import NotificationDispatcher
from .dispatch import DispatchStateMachine
from .poller import ReminderPoller
from .status import reminder_status, format_countdown

__all__ = [
    "Note",
    "Reminder",
    "MatchPolicy",
    "AnnounceState",
    "SmsState",
    "SmsOutcome",
    "ReminderStore",
    "StoreError",
    "get_store",
    "reset_store",
    "DueSetResolver",
    "is_due_window",
    "is_due_exact_minute",
    "truncate_to_minute",
    "AlarmSequencer",
    "NotificationDispatcher",
    "DispatchStateMachine",
    "ReminderPoller",
    "reminder_status",
    "format_countdown",
]
