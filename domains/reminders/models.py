"""Reminder data types and dispatch states."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass
class Note:
    """A stored note, including its reminder fields."""
    id: int
    title: str
    content: str
    color: str
    file_path: Optional[str]
    file_original_name: Optional[str]
    due_at: Optional[datetime]
    repeat_count: int
    phone: Optional[str]
    sms_sent: bool
    created_at: Optional[datetime]

    def to_reminder(self) -> "Reminder":
        return Reminder(
            id=self.id,
            title=self.title,
            due_at=self.due_at,
            repeat_count=self.repeat_count,
            phone=self.phone,
            sms_sent=self.sms_sent,
        )


@dataclass
class Reminder:
    """The dispatch-relevant projection of a note."""
    id: int
    title: str
    due_at: Optional[datetime]
    repeat_count: int = 1
    phone: Optional[str] = None
    sms_sent: bool = False

    @property
    def activation_key(self) -> tuple:
        """Identity of one due moment: rescheduling creates a new key."""
        return (self.id, self.due_at)


class MatchPolicy(Enum):
    """How a poll tick decides a reminder is due."""
    WINDOW = "window"              # now in [due_at, due_at + window)
    EXACT_MINUTE = "exact_minute"  # same wall-clock minute as now


class AnnounceState(Enum):
    """Per-activation announce state, process-local."""
    PENDING = "pending"
    ANNOUNCED = "announced"


class SmsState(Enum):
    """Durable SMS state, backed by the store's sms_sent flag."""
    NOT_SENT = "not_sent"
    SENT = "sent"


class SmsOutcome(Enum):
    """Result of one pass through the SMS channel."""
    SENT = "sent"
    SENT_UNRECORDED = "sent_unrecorded"  # delivered, but sms_sent could not be persisted
    FAILED = "failed"
    SKIPPED_NO_PHONE = "skipped_no_phone"
    SKIPPED_ALREADY_SENT = "skipped_already_sent"
    IN_FLIGHT = "in_flight"
    DISABLED = "disabled"
