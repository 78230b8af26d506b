import pytest

from focus_tracker.config_validator import clamp_daily_goal, validate_config
from focus_tracker.models import PomodoroConfig


def test_default_config_is_valid():
    result = validate_config(PomodoroConfig())
    assert result.is_valid
    assert result.errors == ()


def test_reports_every_violation():
    result = validate_config(
        PomodoroConfig(work_duration=0, short_break_duration=61, long_break_duration=121, long_break_interval=1)
    )
    assert not result.is_valid
    assert result.errors == (
        "Work duration must be between 1 and 180 minutes",
        "Short break duration must be between 1 and 60 minutes",
        "Long break duration must be between 1 and 120 minutes",
        "Long break interval must be between 2 and 10 sessions",
    )


def test_partial_mapping_only_checks_present_fields():
    assert validate_config({"work_duration": 50}).is_valid
    result = validate_config({"long_break_interval": 11})
    assert result.errors == ("Long break interval must be between 2 and 10 sessions",)


@pytest.mark.parametrize(
    "field, low, high",
    [
        ("work_duration", 1, 180),
        ("short_break_duration", 1, 60),
        ("long_break_duration", 1, 120),
        ("long_break_interval", 2, 10),
    ],
)
def test_range_bounds_are_inclusive(field, low, high):
    assert validate_config({field: low}).is_valid
    assert validate_config({field: high}).is_valid
    assert not validate_config({field: low - 1}).is_valid
    assert not validate_config({field: high + 1}).is_valid


def test_non_numeric_values_rejected():
    result = validate_config({"work_duration": "25", "short_break_duration": True})
    assert result.errors == (
        "work_duration must be a number",
        "short_break_duration must be a number",
    )


def test_input_not_mutated():
    values = {"work_duration": 0}
    validate_config(values)
    assert values == {"work_duration": 0}


def test_clamp_daily_goal():
    assert clamp_daily_goal(0) == 1
    assert clamp_daily_goal(8) == 8
    assert clamp_daily_goal(50) == 20
