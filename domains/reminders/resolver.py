"""Decide which reminders are due at a given moment.

Both polling tiers share this resolver; they differ only in the match policy:

- WINDOW: due while now is in [due_at, due_at + window). Suits frequent
  polling; jitter between ticks cannot skip a reminder, and reminders long
  past due are not re-fired.
- EXACT_MINUTE: due when due_at and now fall in the same wall-clock minute.
  With a poll period <= 60s each reminder matches in exactly one tick. A
  missed tick (process asleep or down) misses the reminder; there is no
  catch-up.
"""

from datetime import datetime, timedelta
from typing import Optional

from .models import MatchPolicy, Reminder


def truncate_to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def is_due_window(due_at: Optional[datetime], now: datetime, window: timedelta) -> bool:
    """True if now is in [due_at, due_at + window)."""
    if due_at is None:
        return False
    return due_at <= now < due_at + window


def is_due_exact_minute(due_at: Optional[datetime], now: datetime) -> bool:
    """True if due_at and now share the same minute."""
    if due_at is None:
        return False
    return truncate_to_minute(due_at) == truncate_to_minute(now)


class DueSetResolver:
    """Computes the due set from the store's reminder candidates."""

    def __init__(
        self,
        store,
        policy: MatchPolicy,
        window: timedelta = timedelta(seconds=60)
    ):
        """
        Args:
            store: Anything with list_due_candidates() -> list[Reminder]
            policy: Matching policy for this tier
            window: Width of the due window (WINDOW policy only)
        """
        if policy is MatchPolicy.WINDOW and window <= timedelta(0):
            raise ValueError("window must be positive")

        self.store = store
        self.policy = policy
        self.window = window

    def is_due(self, reminder: Reminder, now: datetime) -> bool:
        if self.policy is MatchPolicy.WINDOW:
            return is_due_window(reminder.due_at, now, self.window)
        return is_due_exact_minute(reminder.due_at, now)

    def find_due(self, now: datetime) -> list[Reminder]:
        """Reminders due at `now`. Order is unspecified.

        Store failures propagate; the poller treats them as a failed tick.
        """
        return [r for r in self.store.list_due_candidates() if self.is_due(r, now)]
