"""Create a note with a reminder, or reschedule an existing note.

Usage:
    python scripts/add_reminder.py "Dentist" --at "2024-01-01 10:00" --rings 3
    python scripts/add_reminder.py --note 4 --at "2024-01-02 09:30" --phone +15551234567
    python scripts/add_reminder.py --note 4 --clear
    python scripts/add_reminder.py --list
"""

import sys
sys.path.insert(0, '.')

import argparse
from datetime import datetime
from typing import Optional

from dateutil.parser import parse as parse_datetime

from domains.reminders import format_countdown, get_store, reminder_status


def _print_notes(store, now: Optional[datetime] = None) -> None:
    now = now or datetime.now()
    notes = store.list_notes()
    if not notes:
        print("No notes.")
        return

    for note in notes:
        when = note.due_at.strftime("%a %d %b %H:%M") if note.due_at else "-"
        sms = " sms:sent" if note.sms_sent else ""
        status = reminder_status(note.to_reminder(), now)
        print(
            f"{note.id:>4}  {when:<16}  [{status:<8}]  x{note.repeat_count}{sms}  "
            f"{note.title}  ({format_countdown(note.due_at, now)})"
        )


def main():
    parser = argparse.ArgumentParser(description="Set Chronicle reminders")
    parser.add_argument("title", nargs="?", help="Title for a new note")
    parser.add_argument("--note", type=int, help="Existing note ID to reschedule")
    parser.add_argument("--at", help="Reminder time, e.g. '2024-01-01 10:00'")
    parser.add_argument("--rings", type=int, help="Number of alarm rings")
    parser.add_argument("--phone", help="SMS destination")
    parser.add_argument("--content", default="", help="Note body for a new note")
    parser.add_argument("--clear", action="store_true", help="Remove the note's reminder")
    parser.add_argument("--list", action="store_true", help="List notes and exit")
    args = parser.parse_args()

    store = get_store()

    if args.list:
        _print_notes(store)
        return

    due_at = parse_datetime(args.at) if args.at else None

    if args.note is None:
        if not args.title:
            parser.error("a title is required for a new note")
        note_id = store.add_note(
            args.title,
            content=args.content,
            repeat_count=args.rings or 1,
            phone=args.phone,
        )
        print(f"Created note {note_id}")
    else:
        note_id = args.note
        if store.get_note(note_id) is None:
            parser.error(f"note {note_id} not found")
        if args.phone is not None:
            store.set_phone(note_id, args.phone)

    if args.clear:
        store.set_due_at(note_id, None)
        print(f"Cleared reminder on note {note_id}")
    elif due_at is not None:
        store.set_due_at(note_id, due_at, repeat_count=args.rings)
        print(f"Reminder on note {note_id}: {due_at:%a %d %b %H:%M} ({format_countdown(due_at, datetime.now())})")


if __name__ == "__main__":
    main()
