from __future__ import annotations

"""Range checks for pomodoro configuration values.

Accepts either a full ``PomodoroConfig`` or a partial mapping (e.g. values
read back from the settings table before they are assembled into a config).
Absent fields are not checked. All violations are reported, not just the first.
"""

from dataclasses import asdict, is_dataclass
from typing import Any, Mapping

from .models import PomodoroConfig, ValidationResult

# field -> (minimum, maximum, message)
CONFIG_RANGES: dict[str, tuple[int, int, str]] = {
    "work_duration": (1, 180, "Work duration must be between 1 and 180 minutes"),
    "short_break_duration": (1, 60, "Short break duration must be between 1 and 60 minutes"),
    "long_break_duration": (1, 120, "Long break duration must be between 1 and 120 minutes"),
    "long_break_interval": (2, 10, "Long break interval must be between 2 and 10 sessions"),
}

DAILY_GOAL_MIN = 1
DAILY_GOAL_MAX = 20


def validate_config(config: PomodoroConfig | Mapping[str, Any]) -> ValidationResult:
    values: Mapping[str, Any] = asdict(config) if is_dataclass(config) else config
    errors: list[str] = []
    for name, (low, high, message) in CONFIG_RANGES.items():
        value = values.get(name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"{name} must be a number")
            continue
        if value < low or value > high:
            errors.append(message)
    return ValidationResult(is_valid=not errors, errors=tuple(errors))


def clamp_daily_goal(goal: int) -> int:
    return max(DAILY_GOAL_MIN, min(DAILY_GOAL_MAX, int(goal)))


__all__ = ["validate_config", "clamp_daily_goal", "CONFIG_RANGES", "DAILY_GOAL_MIN", "DAILY_GOAL_MAX"]
