from datetime import date, datetime

from focus_tracker.models import PomodoroConfig, PomodoroSession
from focus_tracker.pomodoro import PomodoroEngine
from focus_tracker.progress import daily_progress
from focus_tracker.repositories import (
    create_session,
    delete_session,
    get_session,
    list_sessions,
    list_sessions_between,
    list_sessions_for_day,
)


def _session(sid: str, when: datetime, **overrides) -> PomodoroSession:
    values = dict(
        id=sid,
        date=when,
        phase="work",
        duration_seconds=1500,
        completed=True,
        cycle_number=1,
    )
    values.update(overrides)
    return PomodoroSession(**values)


def test_create_and_get_round_trip(db):
    s = _session("a", datetime(2025, 3, 12, 9, 30, 15), project_id="proj", description="notes")
    create_session(db, s)
    loaded = get_session(db, "a")
    assert loaded == s
    assert get_session(db, "missing") is None


def test_incomplete_break_is_stored_as_is(db):
    s = _session("b", datetime(2025, 3, 12, 10, 0), phase="long-break", completed=False, duration_seconds=42)
    create_session(db, s)
    loaded = get_session(db, "b")
    assert loaded.phase == "long-break"
    assert loaded.completed is False
    assert loaded.duration_seconds == 42


def test_list_sessions_ordered_by_start(db):
    create_session(db, _session("late", datetime(2025, 3, 12, 15, 0)))
    create_session(db, _session("early", datetime(2025, 3, 12, 8, 0)))
    assert [s.id for s in list_sessions(db)] == ["early", "late"]


def test_between_is_inclusive_of_both_days(db):
    create_session(db, _session("d1", datetime(2025, 3, 10, 23, 59, 59)))
    create_session(db, _session("d2", datetime(2025, 3, 11, 0, 0)))
    create_session(db, _session("d3", datetime(2025, 3, 12, 23, 59, 59)))
    create_session(db, _session("d4", datetime(2025, 3, 13, 0, 0)))
    got = list_sessions_between(db, date(2025, 3, 11), date(2025, 3, 12))
    assert [s.id for s in got] == ["d2", "d3"]
    assert [s.id for s in list_sessions_for_day(db, date(2025, 3, 10))] == ["d1"]


def test_delete_session(db):
    create_session(db, _session("x", datetime(2025, 3, 12, 9, 0)))
    delete_session(db, "x")
    assert get_session(db, "x") is None
    assert list_sessions(db) == []


def test_engine_sessions_persist_through_sink(db, qtbot, clock):
    config = PomodoroConfig(work_duration=1, short_break_duration=1, long_break_duration=2, long_break_interval=2)
    engine = PomodoroEngine(config, session_sink=lambda s: create_session(db, s), time_provider=clock)
    for _ in range(2):
        engine.start()
        for _ in range(engine.phase_duration_seconds):
            engine.handle_tick()
        clock.advance(60)

    stored = list_sessions_for_day(db, clock.now.date())
    assert [s.phase for s in stored] == ["work", "short-break"]
    progress = daily_progress(stored, 4, clock.now.date())
    assert progress.completed == 1
    assert progress.remaining == 3
