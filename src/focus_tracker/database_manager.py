from __future__ import annotations

"""SQLite storage and migrations for Focus Tracker.

Holds the pomodoro session history and the key/value settings used as the
preference store. Each schema change is a function in ``MIGRATIONS``; applied
versions are tracked in ``schema_migrations``.

Idempotency: ``init_db`` can be safely called multiple times.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
import sqlite3
from typing import Callable, Iterable, Iterator


@dataclass(slots=True)
class DBConfig:
    path: Path
    pragmas: tuple[tuple[str, str | int], ...] = (
        ("journal_mode", "WAL"),
        ("foreign_keys", 1),
        ("synchronous", "NORMAL"),
    )


class DatabaseManager:
    def __init__(self, config: DBConfig):
        self.config = config
        self._conn: sqlite3.Connection | None = None

    # --- Connection --------------------------------------------------------
    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.config.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.config.path)
            self._conn.row_factory = sqlite3.Row
            for key, value in self.config.pragmas:
                self._conn.execute(f"PRAGMA {key}={value}")
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit on success, roll back on error."""
        conn = self.connect()
        with conn:
            yield conn

    # --- Migrations --------------------------------------------------------
    def init_db(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
                )
                """
            )

        applied = self._applied_versions()
        for version, migration_fn in enumerate(MIGRATIONS, start=1):
            if version in applied:
                continue
            with self.transaction() as conn:
                migration_fn(conn)
                conn.execute("INSERT INTO schema_migrations (version) VALUES (?)", (version,))

    def schema_version(self) -> int:
        return max(self._applied_versions(), default=0)

    def _applied_versions(self) -> set[int]:
        rows = self.query_all("SELECT version FROM schema_migrations")
        return {row[0] for row in rows}

    # --- Convenience -------------------------------------------------------
    def execute(self, sql: str, params: Iterable | None = None) -> sqlite3.Cursor:
        with self.transaction() as conn:
            return conn.execute(sql, tuple(params or ()))

    def query_all(self, sql: str, params: Iterable | None = None) -> list[sqlite3.Row]:
        return self.connect().execute(sql, tuple(params or ())).fetchall()

    def query_one(self, sql: str, params: Iterable | None = None) -> sqlite3.Row | None:
        return self.connect().execute(sql, tuple(params or ())).fetchone()


# --- Migration definitions --------------------------------------------------

def migration_001_create_session_tables(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE pomodoro_sessions (
            id TEXT PRIMARY KEY,
            started_on TEXT NOT NULL,
            phase TEXT NOT NULL CHECK (phase IN ('work', 'short-break', 'long-break')),
            duration_seconds INTEGER NOT NULL DEFAULT 0,
            completed INTEGER NOT NULL DEFAULT 0,
            cycle_number INTEGER NOT NULL DEFAULT 0,
            project_id TEXT,
            description TEXT,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
        );

        CREATE INDEX idx_pomodoro_sessions_started_on ON pomodoro_sessions(started_on);
        CREATE INDEX idx_pomodoro_sessions_project ON pomodoro_sessions(project_id);
        """
    )


def migration_002_add_settings_table(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
        """
    )


MIGRATIONS: list[Callable[[sqlite3.Connection], None]] = [
    migration_001_create_session_tables,
    migration_002_add_settings_table,
]

__all__ = [
    "DBConfig",
    "DatabaseManager",
    "MIGRATIONS",
]
