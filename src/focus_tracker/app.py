from __future__ import annotations

"""Headless entry point: wires storage, preferences and the engine together."""

import sys
import logging
import os
import signal
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QCoreApplication

from . import __version__
from .cycle import format_pomodoro_time
from .database_manager import DBConfig, DatabaseManager
from .logging_setup import configure_logging
from .models import PomodoroSession
from .pomodoro import PomodoroEngine
from .preferences import load_daily_goal, load_pomodoro_config
from .progress import daily_progress
from .repositories import create_session, list_sessions_for_day

APP_NAME = "Focus Tracker"
DATA_DIR_ENV = "FOCUS_TRACKER_DATA"

_log = logging.getLogger(__name__)


@dataclass(slots=True)
class AppState:
    data_dir: Path
    db: DatabaseManager
    engine: PomodoroEngine
    daily_goal: int


def default_data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent.parent / "data"


def get_app_state(data_dir: Optional[Path] = None, *, console_logging: bool = True) -> AppState:
    data_dir = data_dir or default_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    # Logging first
    configure_logging(data_dir, console=console_logging)
    db = DatabaseManager(DBConfig(path=data_dir / "focus_tracker.sqlite"))
    db.init_db()
    config = load_pomodoro_config(db)
    engine = PomodoroEngine(config, session_sink=lambda s: create_session(db, s))
    if not engine.validation.is_valid:
        _log.warning("stored pomodoro config is invalid: %s", "; ".join(engine.validation.errors))
    _log.info(
        "app_state_created",
        extra={"_json_version": __version__, "_json_schema": db.schema_version()},
    )
    return AppState(data_dir=data_dir, db=db, engine=engine, daily_goal=load_daily_goal(db))


def _connect_console_output(state: AppState) -> None:
    engine = state.engine

    def on_tick(elapsed: int, remaining: int, phase: str) -> None:
        if elapsed % 60 == 0 or remaining == 0:
            _log.info("%s %s remaining", phase, format_pomodoro_time(remaining))

    def on_completed(session: PomodoroSession) -> None:
        progress = daily_progress(list_sessions_for_day(state.db, session.day), state.daily_goal, session.day)
        _log.info(
            "%s done; today %s/%s (%s%%)",
            session.phase,
            progress.completed,
            progress.goal,
            progress.percentage,
        )

    engine.tick.connect(on_tick)
    engine.phase_completed.connect(on_completed)
    engine.phase_changed.connect(lambda old, new: _log.info("next phase: %s -> %s", old, new))


def run(argv: Optional[list[str]] = None) -> int:
    if argv is None:
        argv = sys.argv
    app = QCoreApplication(argv)
    app.setApplicationName(APP_NAME)
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    state = get_app_state()
    _connect_console_output(state)
    result = state.engine.start()
    if not result.accepted:
        _log.error("cannot start: %s", result.reason)
        state.db.close()
        return 1
    try:
        return app.exec()
    finally:
        state.engine.stop(record_partial=True)
        state.db.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
