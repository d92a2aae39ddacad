"""Tests for the reminder CLI listing."""

from datetime import datetime

from scripts.add_reminder import _print_notes

NOW = datetime(2024, 1, 1, 9, 0)


def test_list_shows_status_badges(store, capsys):
    upcoming = store.add_note("Dentist")
    store.set_due_at(upcoming, datetime(2024, 1, 1, 10, 0))
    passed = store.add_note("Stand-up")
    store.set_due_at(passed, datetime(2024, 1, 1, 8, 30))
    store.add_note("Shopping list")

    _print_notes(store, now=NOW)

    lines = {line.split()[0]: line for line in capsys.readouterr().out.splitlines()}
    assert "[upcoming]" in lines[str(upcoming)]
    assert "Due in: 0d 1h 0m" in lines[str(upcoming)]
    assert "[passed  ]" in lines[str(passed)]
    assert "Alarm Passed" in lines[str(passed)]
    assert "[none    ]" in lines["3"]


def test_list_without_notes(store, capsys):
    _print_notes(store, now=NOW)

    assert capsys.readouterr().out == "No notes.\n"
