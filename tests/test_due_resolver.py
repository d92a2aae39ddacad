"""Tests for due-set resolution under both match policies."""

from datetime import datetime, timedelta

import pytest

from domains.reminders import DueSetResolver, MatchPolicy, Reminder, StoreError
from domains.reminders.resolver import is_due_exact_minute, is_due_window, truncate_to_minute

T = datetime(2024, 1, 1, 10, 0, 0)
WINDOW = timedelta(seconds=60)


class StubStore:
    def __init__(self, reminders):
        self.reminders = reminders

    def list_due_candidates(self):
        return list(self.reminders)


class BrokenStore:
    def list_due_candidates(self):
        raise StoreError("database is locked")


def _ids(reminders):
    return sorted(r.id for r in reminders)


class TestWindowPolicy:

    def test_included_from_due_time_until_window_end(self):
        resolver = DueSetResolver(StubStore([Reminder(1, "a", T)]), MatchPolicy.WINDOW, WINDOW)

        assert _ids(resolver.find_due(T)) == [1]
        assert _ids(resolver.find_due(T + timedelta(seconds=5))) == [1]
        assert _ids(resolver.find_due(T + timedelta(seconds=59, microseconds=999999))) == [1]

    def test_excluded_outside_window(self):
        resolver = DueSetResolver(StubStore([Reminder(1, "a", T)]), MatchPolicy.WINDOW, WINDOW)

        assert resolver.find_due(T - timedelta(seconds=1)) == []
        assert resolver.find_due(T + WINDOW) == []
        assert resolver.find_due(T + timedelta(hours=3)) == []

    def test_window_must_be_positive(self):
        with pytest.raises(ValueError):
            DueSetResolver(StubStore([]), MatchPolicy.WINDOW, timedelta(0))

    def test_is_due_window_helper(self):
        assert is_due_window(T, T, WINDOW)
        assert not is_due_window(None, T, WINDOW)


class TestExactMinutePolicy:

    def test_matches_same_minute_only(self):
        reminder = Reminder(1, "a", T + timedelta(seconds=30))
        resolver = DueSetResolver(StubStore([reminder]), MatchPolicy.EXACT_MINUTE)

        assert _ids(resolver.find_due(T)) == [1]
        assert _ids(resolver.find_due(T + timedelta(seconds=59))) == [1]
        assert resolver.find_due(T - timedelta(seconds=1)) == []
        assert resolver.find_due(T + timedelta(minutes=1)) == []

    def test_matched_in_exactly_one_minute(self):
        """Stepping now one minute at a time, the reminder matches once."""
        resolver = DueSetResolver(StubStore([Reminder(1, "a", T)]), MatchPolicy.EXACT_MINUTE)
        start = T - timedelta(minutes=30) + timedelta(seconds=17)

        matches = [
            minute for minute in range(60)
            if resolver.find_due(start + timedelta(minutes=minute))
        ]

        assert len(matches) == 1

    def test_truncate_to_minute(self):
        assert truncate_to_minute(datetime(2024, 1, 1, 10, 0, 42, 5)) == T
        assert is_due_exact_minute(T, datetime(2024, 1, 1, 10, 0, 42))
        assert not is_due_exact_minute(None, T)


@pytest.mark.parametrize("policy", [MatchPolicy.WINDOW, MatchPolicy.EXACT_MINUTE])
def test_reminders_without_due_time_never_due(policy):
    store = StubStore([Reminder(1, "none", None), Reminder(2, "set", T)])
    resolver = DueSetResolver(store, policy, WINDOW)

    for offset in (-3600, -1, 0, 1, 30, 59, 60, 3600):
        due = resolver.find_due(T + timedelta(seconds=offset))
        assert 1 not in _ids(due)


def test_returns_every_due_reminder():
    store = StubStore([
        Reminder(1, "a", T),
        Reminder(2, "b", T + timedelta(seconds=20)),
        Reminder(3, "later", T + timedelta(minutes=5)),
    ])
    resolver = DueSetResolver(store, MatchPolicy.WINDOW, WINDOW)

    assert _ids(resolver.find_due(T + timedelta(seconds=30))) == [1, 2]


def test_store_failure_propagates():
    resolver = DueSetResolver(BrokenStore(), MatchPolicy.EXACT_MINUTE)

    with pytest.raises(StoreError):
        resolver.find_due(T)
