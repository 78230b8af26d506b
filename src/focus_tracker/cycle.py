from __future__ import annotations

"""Phase sequencing and cycle arithmetic.

A "cycle" is the number of work sessions completed so far. The ordinal of a
finished work session decides what follows it: every ``long_break_interval``-th
work session is followed by a long break, all others by a short break. Breaks
are always followed by work.

Everything here is a pure function of its arguments; the engine in
``pomodoro.py`` is the only caller that keeps state.
"""

from datetime import datetime, timedelta
from typing import Optional

from .models import (
    CyclePhase,
    PomodoroConfig,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
)


def is_long_break_time(current_cycle: int, long_break_interval: int) -> bool:
    return current_cycle > 0 and current_cycle % long_break_interval == 0


def next_phase(current_cycle: int, current_phase: CyclePhase, long_break_interval: int) -> CyclePhase:
    if current_phase == PHASE_WORK:
        if is_long_break_time(current_cycle, long_break_interval):
            return PHASE_LONG_BREAK
        return PHASE_SHORT_BREAK
    return PHASE_WORK


def sessions_until_long_break(current_cycle: int, long_break_interval: int) -> int:
    return long_break_interval - (current_cycle % long_break_interval)


def cycle_progress_percent(current_cycle: int, long_break_interval: int) -> float:
    # An exact multiple reports a full window rather than an empty one.
    position = (current_cycle % long_break_interval) or long_break_interval
    return position / long_break_interval * 100


def phase_duration_seconds(phase: CyclePhase, config: PomodoroConfig) -> int:
    if phase == PHASE_SHORT_BREAK:
        return config.short_break_duration * 60
    if phase == PHASE_LONG_BREAK:
        return config.long_break_duration * 60
    return config.work_duration * 60


def cycle_duration_seconds(config: PomodoroConfig) -> int:
    """Seconds in one full long-break cycle (display/estimation only)."""
    interval = config.long_break_interval
    minutes = (
        config.work_duration * interval
        + config.short_break_duration * (interval - 1)
        + config.long_break_duration
    )
    return minutes * 60


def estimated_completion(
    current_cycle: int,
    current_phase: CyclePhase,
    elapsed_seconds: int,
    config: PomodoroConfig,
    now: Optional[datetime] = None,
) -> datetime:
    """Projected finish time of the current long-break cycle.

    Remaining time in the current phase plus the full durations of every phase
    still owed before (and, unless already in it, including) the next long break.
    """
    now = now or datetime.now()
    work = config.work_duration * 60
    short = config.short_break_duration * 60
    long_ = config.long_break_duration * 60

    remaining = max(0, phase_duration_seconds(current_phase, config) - elapsed_seconds)
    left = sessions_until_long_break(current_cycle, config.long_break_interval)

    if current_phase == PHASE_WORK:
        remaining += (left - 1) * work + (left - 1) * short + long_
    elif current_phase == PHASE_SHORT_BREAK:
        remaining += left * work + (left - 1) * short + long_
    else:
        remaining += left * work + (left - 1) * short

    return now + timedelta(seconds=remaining)


def format_pomodoro_time(total_seconds: int) -> str:
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_duration(seconds: int) -> str:
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m"
    return f"{seconds}s"


__all__ = [
    "is_long_break_time",
    "next_phase",
    "sessions_until_long_break",
    "cycle_progress_percent",
    "phase_duration_seconds",
    "cycle_duration_seconds",
    "estimated_completion",
    "format_pomodoro_time",
    "format_duration",
]
