"""Pytest configuration and fixtures."""

import os
import sys
import tempfile

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domains.reminders.store import ReminderStore


class FakeAudioSink:
    """Audio sink that records rings. `results` scripts each ring's outcome."""

    def __init__(self, results=None):
        self.calls = 0
        self.results = list(results or [])

    def play(self):
        self.calls += 1
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return True


class FakeNotificationSink:
    """Notification sink that records (title, body, on_activate) calls."""

    def __init__(self, result=True):
        self.calls = []
        self.result = result

    def notify(self, title, body, on_activate=None):
        self.calls.append((title, body, on_activate))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeGateway:
    """SMS gateway that records sends. `results` scripts each send's outcome."""

    def __init__(self, results=None):
        self.sent = []
        self.results = list(results or [])

    def send_sms(self, to, body):
        self.sent.append((to, body))
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return True


class RecordingSleep:
    """Stand-in for asyncio.sleep that returns immediately."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def store():
    """Fresh SQLite reminder store per test."""
    fd, temp_path = tempfile.mkstemp(suffix="_chronicle_test.db")
    os.close(fd)

    reminder_store = ReminderStore(temp_path)

    yield reminder_store

    # Cleanup
    reminder_store.close()
    for suffix in ["", "-wal", "-shm"]:
        try:
            os.unlink(temp_path + suffix)
        except FileNotFoundError:
            pass


@pytest.fixture
def audio_sink():
    return FakeAudioSink()


@pytest.fixture
def notification_sink():
    return FakeNotificationSink()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
