from __future__ import annotations

"""Pomodoro preferences backed by the ``settings`` table.

Values are stored as strings ("1"/"0" for flags). Anything that fails to parse
falls back to the default with a warning; range checks are left to
``config_validator`` so the engine can refuse to start on a bad config.
"""

import json
import logging
from dataclasses import fields
from pathlib import Path

from .config_validator import clamp_daily_goal
from .database_manager import DatabaseManager
from .models import PomodoroConfig
from .repositories import get_setting, set_setting

POMO_WORK = "pomo.work"
POMO_SB = "pomo.short"
POMO_LB = "pomo.long"
POMO_CYC = "pomo.cycles"
POMO_SKIP_BREAKS = "pomo.skip_breaks"
POMO_AUTO_BREAKS = "pomo.auto_breaks"
POMO_AUTO_POMODOROS = "pomo.auto_pomodoros"
POMO_DAILY_GOAL = "pomo.daily_goal"

DEFAULT_DAILY_GOAL = 8

# settings key -> PomodoroConfig field
CONFIG_KEYS: dict[str, str] = {
    POMO_WORK: "work_duration",
    POMO_SB: "short_break_duration",
    POMO_LB: "long_break_duration",
    POMO_CYC: "long_break_interval",
    POMO_SKIP_BREAKS: "allow_skip_breaks",
    POMO_AUTO_BREAKS: "auto_start_breaks",
    POMO_AUTO_POMODOROS: "auto_start_pomodoros",
}
EXPORT_KEYS = [*CONFIG_KEYS, POMO_DAILY_GOAL]

_log = logging.getLogger(__name__)


def _int_setting(db: DatabaseManager, key: str, default: int) -> int:
    raw = get_setting(db, key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        _log.warning("ignoring unparsable setting %s=%r", key, raw)
        return default


def _flag_setting(db: DatabaseManager, key: str, default: bool) -> bool:
    raw = get_setting(db, key)
    if raw is None or raw == "":
        return default
    return raw == "1"


def load_pomodoro_config(db: DatabaseManager) -> PomodoroConfig:
    defaults = PomodoroConfig()
    values = {}
    for key, name in CONFIG_KEYS.items():
        default = getattr(defaults, name)
        if isinstance(default, bool):
            values[name] = _flag_setting(db, key, default)
        else:
            values[name] = _int_setting(db, key, default)
    return PomodoroConfig(**values)


def save_pomodoro_config(db: DatabaseManager, config: PomodoroConfig) -> None:
    by_field = {name: key for key, name in CONFIG_KEYS.items()}
    for f in fields(config):
        value = getattr(config, f.name)
        if isinstance(value, bool):
            set_setting(db, by_field[f.name], "1" if value else "0")
        else:
            set_setting(db, by_field[f.name], str(value))


def load_daily_goal(db: DatabaseManager) -> int:
    return clamp_daily_goal(_int_setting(db, POMO_DAILY_GOAL, DEFAULT_DAILY_GOAL))


def save_daily_goal(db: DatabaseManager, goal: int) -> int:
    goal = clamp_daily_goal(goal)
    set_setting(db, POMO_DAILY_GOAL, str(goal))
    return goal


# --- Export/Import ----------------------------------------------------------

def export_preferences(db: DatabaseManager, path: Path) -> None:
    data = {k: (get_setting(db, k) or "") for k in EXPORT_KEYS}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def import_preferences(db: DatabaseManager, path: Path) -> int:
    """Store known keys from a JSON export; returns how many were written."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    written = 0
    for k, v in data.items():
        if k not in EXPORT_KEYS:
            _log.warning("skipping unknown preference key %s", k)
            continue
        set_setting(db, k, str(v))
        written += 1
    return written


__all__ = [
    "POMO_WORK",
    "POMO_SB",
    "POMO_LB",
    "POMO_CYC",
    "POMO_SKIP_BREAKS",
    "POMO_AUTO_BREAKS",
    "POMO_AUTO_POMODOROS",
    "POMO_DAILY_GOAL",
    "DEFAULT_DAILY_GOAL",
    "load_pomodoro_config",
    "save_pomodoro_config",
    "load_daily_goal",
    "save_daily_goal",
    "export_preferences",
    "import_preferences",
]
