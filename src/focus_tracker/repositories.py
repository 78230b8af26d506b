from __future__ import annotations

"""Repository helper functions for pomodoro sessions and settings."""

from datetime import date, datetime, timedelta
import sqlite3

from .database_manager import DatabaseManager
from .models import PomodoroSession


# --- Row mapping ------------------------------------------------------------

def _row_to_session(row: sqlite3.Row) -> PomodoroSession:
    return PomodoroSession(
        id=row["id"],
        date=datetime.fromisoformat(row["started_on"]),
        phase=row["phase"],
        duration_seconds=row["duration_seconds"],
        completed=bool(row["completed"]),
        cycle_number=row["cycle_number"],
        project_id=row["project_id"],
        description=row["description"],
    )


# --- Pomodoro sessions ------------------------------------------------------

def create_session(db: DatabaseManager, session: PomodoroSession) -> PomodoroSession:
    db.execute(
        """
        INSERT INTO pomodoro_sessions
            (id, started_on, phase, duration_seconds, completed, cycle_number, project_id, description)
        VALUES (?,?,?,?,?,?,?,?)
        """,
        (
            session.id,
            session.date.replace(microsecond=0).isoformat(),
            session.phase,
            session.duration_seconds,
            1 if session.completed else 0,
            session.cycle_number,
            session.project_id,
            session.description,
        ),
    )
    return session


def get_session(db: DatabaseManager, session_id: str) -> PomodoroSession | None:
    row = db.query_one("SELECT * FROM pomodoro_sessions WHERE id=?", (session_id,))
    if not row:
        return None
    return _row_to_session(row)


def list_sessions(db: DatabaseManager) -> list[PomodoroSession]:
    rows = db.query_all("SELECT * FROM pomodoro_sessions ORDER BY started_on")
    return [_row_to_session(r) for r in rows]


def list_sessions_between(db: DatabaseManager, start: date, end: date) -> list[PomodoroSession]:
    """Sessions whose day falls in ``[start, end]`` (inclusive)."""
    rows = db.query_all(
        "SELECT * FROM pomodoro_sessions WHERE started_on >= ? AND started_on < ? ORDER BY started_on",
        (start.isoformat(), (end + timedelta(days=1)).isoformat()),
    )
    return [_row_to_session(r) for r in rows]


def list_sessions_for_day(db: DatabaseManager, day: date) -> list[PomodoroSession]:
    return list_sessions_between(db, day, day)


def delete_session(db: DatabaseManager, session_id: str) -> None:
    db.execute("DELETE FROM pomodoro_sessions WHERE id=?", (session_id,))


# --- Settings ---------------------------------------------------------------

def get_setting(db: DatabaseManager, key: str) -> str | None:
    row = db.query_one("SELECT value FROM settings WHERE key=?", (key,))
    return row["value"] if row else None


def set_setting(db: DatabaseManager, key: str, value: str) -> None:
    db.execute(
        "INSERT INTO settings(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
        (key, value),
    )


__all__ = [
    # Sessions
    "create_session",
    "get_session",
    "list_sessions",
    "list_sessions_between",
    "list_sessions_for_day",
    "delete_session",
    # Settings
    "get_setting",
    "set_setting",
]
