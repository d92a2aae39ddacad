"""Tests for the SQLite reminder store.

Uses the `store` fixture - each test gets a fresh database.
"""

from datetime import datetime

import pytest

from domains.reminders.store import ReminderStore, StoreError


def test_add_and_get_note_defaults(store):
    """New notes have no reminder, one ring and no SMS sent."""
    note_id = store.add_note("Dentist", content="<p>Bring card</p>")

    note = store.get_note(note_id)
    assert note is not None
    assert note.title == "Dentist"
    assert note.content == "<p>Bring card</p>"
    assert note.color == "#ffffff"
    assert note.due_at is None
    assert note.repeat_count == 1
    assert note.phone is None
    assert note.sms_sent is False
    assert note.created_at is not None


def test_get_missing_note_returns_none(store):
    assert store.get_note(999) is None


def test_repeat_count_must_be_positive(store):
    with pytest.raises(ValueError):
        store.add_note("Bad", repeat_count=0)

    note_id = store.add_note("Ok")
    with pytest.raises(ValueError):
        store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0), repeat_count=0)


def test_set_due_at_stores_time_and_repeat_count(store):
    note_id = store.add_note("Standup")

    assert store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0, 5, 123456), repeat_count=3)

    note = store.get_note(note_id)
    assert note.due_at == datetime(2024, 1, 1, 10, 0, 5)
    assert note.repeat_count == 3


def test_set_due_at_keeps_repeat_count_when_not_given(store):
    note_id = store.add_note("Standup", repeat_count=4)

    store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0))

    assert store.get_note(note_id).repeat_count == 4


def test_set_due_at_on_missing_note_returns_false(store):
    assert store.set_due_at(42, datetime(2024, 1, 1, 10, 0)) is False


def test_reschedule_resets_sms_sent(store):
    """A new due_at is a new obligation: sms_sent goes back to false."""
    note_id = store.add_note("Call mum", phone="+15550000001")
    store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0))

    store.set_sms_sent(note_id, True)
    assert store.get_sms_sent(note_id) is True

    store.set_due_at(note_id, datetime(2024, 1, 2, 10, 0))
    assert store.get_sms_sent(note_id) is False


def test_saving_same_time_keeps_sms_sent(store):
    note_id = store.add_note("Call mum", phone="+15550000001")
    store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0))
    store.set_sms_sent(note_id, True)

    store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0, 0, 500), repeat_count=2)

    note = store.get_note(note_id)
    assert note.sms_sent is True
    assert note.repeat_count == 2


def test_clear_then_set_resets_sms_sent(store):
    note_id = store.add_note("Call mum", phone="+15550000001")
    store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0))
    store.set_sms_sent(note_id, True)

    store.set_due_at(note_id, None)
    store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0))

    assert store.get_sms_sent(note_id) is False


def test_clearing_reminder_keeps_sms_sent(store):
    note_id = store.add_note("Call mum", phone="+15550000001")
    store.set_due_at(note_id, datetime(2024, 1, 1, 10, 0))
    store.set_sms_sent(note_id, True)

    store.set_due_at(note_id, None)

    note = store.get_note(note_id)
    assert note.due_at is None
    assert note.sms_sent is True


def test_sms_sent_cannot_be_cleared_directly(store):
    note_id = store.add_note("Call mum")

    with pytest.raises(ValueError):
        store.set_sms_sent(note_id, False)


def test_get_sms_sent_for_missing_note_blocks_sending(store):
    """A deleted note must never get an SMS."""
    assert store.get_sms_sent(12345) is True


def test_list_due_candidates_excludes_notes_without_reminder(store):
    with_time = store.add_note("Has reminder", repeat_count=2, phone="+15550000002")
    store.add_note("No reminder")
    store.set_due_at(with_time, datetime(2024, 1, 1, 10, 0))

    candidates = store.list_due_candidates()

    assert len(candidates) == 1
    reminder = candidates[0]
    assert reminder.id == with_time
    assert reminder.title == "Has reminder"
    assert reminder.due_at == datetime(2024, 1, 1, 10, 0)
    assert reminder.repeat_count == 2
    assert reminder.phone == "+15550000002"
    assert reminder.sms_sent is False


def test_list_notes_newest_first(store):
    first = store.add_note("First")
    second = store.add_note("Second")

    ids = [n.id for n in store.list_notes()]
    assert ids == [second, first]


def test_search_notes_matches_title_and_content(store):
    store.add_note("Groceries", content="milk, eggs")
    store.add_note("Work", content="Quarterly REPORT")
    store.add_note("Other")

    assert [n.title for n in store.search_notes("groc")] == ["Groceries"]
    assert [n.title for n in store.search_notes("report")] == ["Work"]
    assert len(store.search_notes("   ")) == 3


def test_update_color_phone_and_delete(store):
    note_id = store.add_note("Draft")

    assert store.update_note(note_id, "Final", "body", "#ffeb3b")
    assert store.set_color(note_id, "#c8e6c9")
    assert store.set_phone(note_id, "+15550000003")

    note = store.get_note(note_id)
    assert note.title == "Final"
    assert note.content == "body"
    assert note.color == "#c8e6c9"
    assert note.phone == "+15550000003"

    assert store.set_phone(note_id, "")
    assert store.get_note(note_id).phone is None

    assert store.delete_note(note_id) is True
    assert store.get_note(note_id) is None
    assert store.delete_note(note_id) is False


def test_unopenable_database_raises_store_error(tmp_path):
    """sqlite errors surface as StoreError."""
    broken = ReminderStore(str(tmp_path))  # a directory, not a file

    with pytest.raises(StoreError):
        broken.list_due_candidates()
