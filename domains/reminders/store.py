"""SQLite persistence for notes and their reminder fields.

One table holds the notes. The dispatch core only reads reminder fields and
writes sms_sent; everything else belongs to the note-editing flow.
Survives restarts, so sms_sent is the only at-most-once guarantee that
outlives the process.
"""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from dateutil.parser import parse as parse_datetime

from logger import logger
from config import CHRONICLE_DB
from . import config
from .models import Note, Reminder

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOTE_COLUMNS = (
    "id, title, content, color, file_path, file_original_name, "
    "reminder_time, repeat_count, phone, sms_sent, created_at"
)


class StoreError(Exception):
    """Raised when the notes database cannot be read or written."""


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp the way the notes table stores it."""
    return value.strftime(TIMESTAMP_FORMAT)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return parse_datetime(value)


def _row_to_note(row: sqlite3.Row) -> Note:
    return Note(
        id=row["id"],
        title=row["title"] or "",
        content=row["content"] or "",
        color=row["color"],
        file_path=row["file_path"],
        file_original_name=row["file_original_name"],
        due_at=_parse_timestamp(row["reminder_time"]),
        repeat_count=row["repeat_count"] or config.DEFAULT_REPEAT_COUNT,
        phone=row["phone"],
        sms_sent=bool(row["sms_sent"]),
        created_at=_parse_timestamp(row["created_at"]),
    )


def _check_repeat_count(repeat_count: int) -> None:
    if int(repeat_count) < 1:
        raise ValueError(f"repeat_count must be >= 1, got {repeat_count}")


class ReminderStore:
    """Notes table on SQLite with WAL mode.

    Methods raise StoreError when the database fails; callers on the polling
    path treat that as a failed tick, not a fatal error.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is not None:
            return self._connection

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            self.db_path,
            check_same_thread=False,  # Pollers read from worker threads
            timeout=10.0
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        self._init_schema(conn)

        self._connection = conn
        logger.info(f"Reminder store initialized: {self.db_path}")
        return conn

    @staticmethod
    def _init_schema(conn: sqlite3.Connection) -> None:
        """Create tables if they don't exist."""
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS notes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL DEFAULT '',
                content TEXT NOT NULL DEFAULT '',
                color TEXT NOT NULL DEFAULT '#ffffff',
                file_path TEXT,
                file_original_name TEXT,
                reminder_time TEXT,
                repeat_count INTEGER NOT NULL DEFAULT 1,
                phone TEXT,
                sms_sent INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
            );

            CREATE INDEX IF NOT EXISTS idx_notes_reminder_time ON notes(reminder_time);
        """)
        conn.commit()

    @contextmanager
    def _transaction(self):
        """Serialized write; commits on success, rolls back on failure."""
        with self._lock:
            try:
                conn = self._get_connection()
            except sqlite3.Error as e:
                raise StoreError(f"Cannot open {self.db_path}: {e}") from e
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(str(e)) from e

    @contextmanager
    def _reading(self):
        with self._lock:
            try:
                yield self._get_connection()
            except sqlite3.Error as e:
                raise StoreError(str(e)) from e

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    # ------------------------------------------------------------------
    # Note CRUD
    # ------------------------------------------------------------------

    def add_note(
        self,
        title: str,
        content: str = "",
        color: str = "#ffffff",
        repeat_count: int = config.DEFAULT_REPEAT_COUNT,
        phone: Optional[str] = None,
        file_path: Optional[str] = None,
        file_original_name: Optional[str] = None,
    ) -> int:
        """Create a note without a reminder.

        Returns:
            The new note ID
        """
        _check_repeat_count(repeat_count)
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO notes
                (title, content, color, file_path, file_original_name, repeat_count, phone)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (title, content, color, file_path, file_original_name, int(repeat_count), phone)
            )
            note_id = cursor.lastrowid
        logger.debug(f"Note {note_id} created")
        return note_id

    def get_note(self, note_id: int) -> Optional[Note]:
        with self._reading() as conn:
            row = conn.execute(
                f"SELECT {_NOTE_COLUMNS} FROM notes WHERE id = ?",
                (note_id,)
            ).fetchone()
        return _row_to_note(row) if row else None

    def list_notes(self) -> list[Note]:
        """All notes, newest first."""
        with self._reading() as conn:
            rows = conn.execute(
                f"SELECT {_NOTE_COLUMNS} FROM notes ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [_row_to_note(row) for row in rows]

    def search_notes(self, query: str) -> list[Note]:
        """Case-insensitive match on title or content, newest first."""
        query = query.strip().lower()
        if not query:
            return self.list_notes()

        pattern = f"%{query}%"
        with self._reading() as conn:
            rows = conn.execute(
                f"""
                SELECT {_NOTE_COLUMNS} FROM notes
                WHERE lower(title) LIKE ? OR lower(content) LIKE ?
                ORDER BY created_at DESC, id DESC
                """,
                (pattern, pattern)
            ).fetchall()
        return [_row_to_note(row) for row in rows]

    def update_note(self, note_id: int, title: str, content: str, color: str) -> bool:
        """Replace a note's text and color. Reminder fields are untouched."""
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE notes SET title = ?, content = ?, color = ? WHERE id = ?",
                (title, content, color, note_id)
            )
        return cursor.rowcount > 0

    def set_color(self, note_id: int, color: str) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE notes SET color = ? WHERE id = ?",
                (color, note_id)
            )
        return cursor.rowcount > 0

    def set_phone(self, note_id: int, phone: Optional[str]) -> bool:
        """Set or clear the SMS destination for a note."""
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE notes SET phone = ? WHERE id = ?",
                (phone or None, note_id)
            )
        return cursor.rowcount > 0

    def delete_note(self, note_id: int) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted note {note_id}")
        return deleted

    # ------------------------------------------------------------------
    # Reminder fields
    # ------------------------------------------------------------------

    def set_due_at(
        self,
        note_id: int,
        due_at: Optional[datetime],
        repeat_count: Optional[int] = None
    ) -> bool:
        """Schedule, reschedule or clear a note's reminder.

        A changed non-null due_at is a new obligation, so sms_sent is reset to
        false. Saving the same time again, or clearing the reminder, leaves
        sms_sent as it was.

        Args:
            note_id: The note to update
            due_at: New reminder time (sub-second precision is dropped), or None
            repeat_count: New ring count; keeps the current one when None

        Returns:
            True if the note exists
        """
        if repeat_count is not None:
            _check_repeat_count(repeat_count)

        with self._transaction() as conn:
            if due_at is None:
                cursor = conn.execute(
                    "UPDATE notes SET reminder_time = NULL WHERE id = ?",
                    (note_id,)
                )
            else:
                stamp = format_timestamp(due_at)
                cursor = conn.execute(
                    """
                    UPDATE notes
                    SET sms_sent = CASE WHEN reminder_time IS ? THEN sms_sent ELSE 0 END,
                        reminder_time = ?,
                        repeat_count = COALESCE(?, repeat_count)
                    WHERE id = ?
                    """,
                    (stamp, stamp, repeat_count, note_id)
                )

        updated = cursor.rowcount > 0
        if updated:
            logger.info(f"Note {note_id} reminder set to {due_at}")
        return updated

    def list_due_candidates(self) -> list[Reminder]:
        """Every note that has a reminder time set."""
        with self._reading() as conn:
            rows = conn.execute(
                f"SELECT {_NOTE_COLUMNS} FROM notes WHERE reminder_time IS NOT NULL"
            ).fetchall()
        return [_row_to_note(row).to_reminder() for row in rows]

    def get_sms_sent(self, note_id: int) -> bool:
        """Durable SMS flag; a missing note counts as already sent."""
        with self._reading() as conn:
            row = conn.execute(
                "SELECT sms_sent FROM notes WHERE id = ?",
                (note_id,)
            ).fetchone()
        if row is None:
            return True
        return bool(row["sms_sent"])

    def set_sms_sent(self, note_id: int, sent: bool) -> None:
        """Record that the SMS for the current reminder time went out.

        Raises:
            ValueError: If asked to clear the flag; only set_due_at may do that
            StoreError: If the write fails
        """
        if not sent:
            raise ValueError("sms_sent can only be cleared by rescheduling the reminder")

        with self._transaction() as conn:
            conn.execute(
                "UPDATE notes SET sms_sent = 1 WHERE id = ?",
                (note_id,)
            )
        logger.debug(f"Marked SMS sent for note {note_id}")


# Process-wide store (reused across pollers)
_store: Optional[ReminderStore] = None


def get_store() -> ReminderStore:
    """Get or create the store for the configured database."""
    global _store
    if _store is None:
        _store = ReminderStore(CHRONICLE_DB)
    return _store


def reset_store() -> None:
    """Close and forget the process-wide store."""
    global _store
    if _store is not None:
        _store.close()
    _store = None
