import json
import logging

from focus_tracker.app import get_app_state
from focus_tracker.logging_setup import LOG_DIR_NAME, LOG_FILE_BASENAME
from focus_tracker.models import PomodoroConfig
from focus_tracker.preferences import save_daily_goal, save_pomodoro_config
from focus_tracker.repositories import list_sessions


def test_app_state_wires_engine_to_storage(tmp_path, qtbot):
    state = get_app_state(tmp_path, console_logging=False)
    try:
        assert state.daily_goal == 8
        assert state.engine.config == PomodoroConfig()
        state.engine.start()
        for _ in range(30):
            state.engine.handle_tick()
        state.engine.stop(record_partial=True)
        sessions = list_sessions(state.db)
        assert len(sessions) == 1
        assert sessions[0].duration_seconds == 30
    finally:
        state.db.close()


def test_app_state_loads_saved_preferences(tmp_path, qtbot):
    first = get_app_state(tmp_path, console_logging=False)
    save_pomodoro_config(first.db, PomodoroConfig(work_duration=40, long_break_interval=3))
    save_daily_goal(first.db, 5)
    first.db.close()

    second = get_app_state(tmp_path, console_logging=False)
    try:
        assert second.engine.config.work_duration == 40
        assert second.engine.state.current_phase == "work"
        assert second.daily_goal == 5
    finally:
        second.db.close()


def test_log_lines_are_json(tmp_path, qtbot):
    state = get_app_state(tmp_path, console_logging=False)
    state.db.close()
    for handler in logging.getLogger().handlers:
        handler.flush()
    lines = (tmp_path / LOG_DIR_NAME / LOG_FILE_BASENAME).read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    created = [r for r in records if r["msg"] == "app_state_created"]
    assert created and created[0]["schema"] == 2
    assert {"ts", "level", "logger"} <= set(created[0])
