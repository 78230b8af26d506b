from datetime import datetime, timedelta

import pytest

from focus_tracker.cycle import (
    cycle_duration_seconds,
    cycle_progress_percent,
    estimated_completion,
    format_duration,
    format_pomodoro_time,
    is_long_break_time,
    next_phase,
    phase_duration_seconds,
    sessions_until_long_break,
)
from focus_tracker.models import PomodoroConfig

NOW = datetime(2025, 3, 12, 9, 0, 0)


@pytest.mark.parametrize("interval", range(2, 11))
def test_long_break_follows_every_interval_th_work_session(interval):
    for cycle in range(0, interval * 3 + 1):
        expected = "long-break" if cycle > 0 and cycle % interval == 0 else "short-break"
        assert next_phase(cycle, "work", interval) == expected


def test_breaks_are_followed_by_work():
    assert next_phase(3, "short-break", 4) == "work"
    assert next_phase(4, "long-break", 4) == "work"


def test_cycle_zero_is_never_long_break():
    assert not is_long_break_time(0, 4)
    assert next_phase(0, "work", 4) == "short-break"


@pytest.mark.parametrize("interval", range(2, 11))
def test_cycle_progress_in_range(interval):
    for cycle in range(1, interval * 3 + 1):
        value = cycle_progress_percent(cycle, interval)
        assert 0 < value <= 100
        assert (value == 100) == (cycle % interval == 0)


def test_cycle_progress_values():
    assert cycle_progress_percent(1, 4) == 25
    assert cycle_progress_percent(3, 4) == 75
    assert cycle_progress_percent(8, 4) == 100


def test_sessions_until_long_break():
    assert sessions_until_long_break(0, 4) == 4
    assert sessions_until_long_break(3, 4) == 1
    assert sessions_until_long_break(4, 4) == 4


def test_phase_and_cycle_durations():
    config = PomodoroConfig(work_duration=25, short_break_duration=5, long_break_duration=15, long_break_interval=4)
    assert phase_duration_seconds("work", config) == 1500
    assert phase_duration_seconds("short-break", config) == 300
    assert phase_duration_seconds("long-break", config) == 900
    # 4 x 25 + 3 x 5 + 15 = 130 minutes
    assert cycle_duration_seconds(config) == 130 * 60


def test_estimated_completion_during_first_work_session():
    config = PomodoroConfig()
    eta = estimated_completion(0, "work", 600, config, now=NOW)
    # 15m left, then 3 work + 3 short + 1 long
    expected = 15 + 3 * 25 + 3 * 5 + 15
    assert eta == NOW + timedelta(minutes=expected)


def test_estimated_completion_during_short_break():
    config = PomodoroConfig()
    eta = estimated_completion(1, "short-break", 0, config, now=NOW)
    expected = 5 + 3 * 25 + 2 * 5 + 15
    assert eta == NOW + timedelta(minutes=expected)


def test_estimated_completion_during_long_break_owes_no_long_break():
    config = PomodoroConfig()
    eta = estimated_completion(4, "long-break", 300, config, now=NOW)
    expected = 10 + 4 * 25 + 3 * 5
    assert eta == NOW + timedelta(minutes=expected)


def test_estimated_completion_ignores_overshoot():
    config = PomodoroConfig()
    a = estimated_completion(0, "work", 1500, config, now=NOW)
    b = estimated_completion(0, "work", 9999, config, now=NOW)
    assert a == b


def test_format_helpers():
    assert format_pomodoro_time(1500) == "25:00"
    assert format_pomodoro_time(59) == "00:59"
    assert format_pomodoro_time(3725) == "01:02:05"
    assert format_duration(3900) == "1h 5m"
    assert format_duration(1500) == "25m"
    assert format_duration(45) == "45s"
