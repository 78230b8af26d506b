from __future__ import annotations

"""Daily / weekly goal progress, streaks and session statistics.

Design notes:
 - Every function takes the session history from the caller and performs no I/O.
 - A "day" is the session's local calendar date.
 - Per-day counts are built once with a Counter and exposed read-only, so no
   function mutates shared state.
 - Missing or empty history yields zeroed results rather than errors.
"""

import math
from collections import Counter
from datetime import date, timedelta
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from .models import (
    DailyProgress,
    DayProgress,
    PomodoroSession,
    ProductivityInsights,
    SessionStatistics,
    StreakInfo,
    WeeklyProgress,
    PHASE_WORK,
)

MAX_STREAK_WALK_DAYS = 365


def _is_completed_work(session: PomodoroSession) -> bool:
    return session.completed and session.phase == PHASE_WORK


def _percent(part: float, whole: float) -> int:
    # Half-up rounding; round() would send 12.5 to 12.
    return math.floor(part / whole * 100 + 0.5)


def _check_goal(daily_goal: int) -> None:
    if daily_goal < 1:
        raise ValueError("daily_goal must be at least 1")


def completed_work_by_day(sessions: Optional[Iterable[PomodoroSession]]) -> Mapping[date, int]:
    counts = Counter(s.date.date() for s in (sessions or ()) if _is_completed_work(s))
    return MappingProxyType(dict(counts))


def daily_progress(
    sessions: Optional[Sequence[PomodoroSession]],
    daily_goal: int,
    day: Optional[date] = None,
) -> DailyProgress:
    _check_goal(daily_goal)
    day = day or date.today()
    completed = completed_work_by_day(sessions).get(day, 0)
    return DailyProgress(
        completed=completed,
        goal=daily_goal,
        percentage=_percent(completed, daily_goal),
        remaining=max(0, daily_goal - completed),
    )


def week_start(today: date) -> date:
    """Sunday on or before ``today``."""
    return today - timedelta(days=(today.weekday() + 1) % 7)


def weekly_progress(
    sessions: Optional[Sequence[PomodoroSession]],
    daily_goal: int,
    today: Optional[date] = None,
) -> WeeklyProgress:
    _check_goal(daily_goal)
    start = week_start(today or date.today())
    breakdown: list[DayProgress] = []
    total_completed = 0
    for offset in range(7):
        day = start + timedelta(days=offset)
        progress = daily_progress(sessions, daily_goal, day)
        total_completed += progress.completed
        breakdown.append(
            DayProgress(
                date=day.isoformat(),
                completed=progress.completed,
                goal=progress.goal,
                percentage=progress.percentage,
            )
        )
    total_goal = daily_goal * 7
    return WeeklyProgress(
        total_completed=total_completed,
        total_goal=total_goal,
        daily_breakdown=tuple(breakdown),
        weekly_percentage=_percent(total_completed, total_goal),
    )


def streak(
    sessions: Optional[Sequence[PomodoroSession]],
    daily_goal: int,
    today: Optional[date] = None,
) -> StreakInfo:
    """Current and longest run of consecutive days meeting ``daily_goal``.

    The current streak is 0 until today itself meets the goal, even when
    yesterday closed a run; the longest streak has no such special case.
    ``last_streak_date`` is the earliest day of the current streak.
    """
    _check_goal(daily_goal)
    if not sessions:
        return StreakInfo()
    counts = completed_work_by_day(sessions)
    qualifying = sorted(day for day, n in counts.items() if n >= daily_goal)
    qualifying_set = frozenset(qualifying)

    current = 0
    last_streak_date: Optional[date] = None
    cursor = today or date.today()
    while cursor in qualifying_set and current < MAX_STREAK_WALK_DAYS:
        current += 1
        last_streak_date = cursor
        cursor -= timedelta(days=1)

    longest = 0
    run = 0
    previous: Optional[date] = None
    for day in qualifying:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        longest = max(longest, run)
        previous = day

    return StreakInfo(current=current, longest=longest, last_streak_date=last_streak_date)


def session_statistics(
    sessions: Optional[Sequence[PomodoroSession]],
    daily_goal: int,
    today: Optional[date] = None,
) -> SessionStatistics:
    """Totals for the last seven days plus streak figures over the full history."""
    _check_goal(daily_goal)
    if not sessions:
        return SessionStatistics()
    today = today or date.today()
    since = today - timedelta(days=7)
    week = [s for s in sessions if s.date.date() >= since]
    completed = [s for s in week if s.completed]
    work_seconds = sum(s.duration_seconds for s in completed if s.phase == PHASE_WORK)
    break_seconds = sum(s.duration_seconds for s in completed if s.phase != PHASE_WORK)
    info = streak(sessions, daily_goal, today)
    return SessionStatistics(
        total_sessions=len(week),
        completed_sessions=len(completed),
        total_work_seconds=work_seconds,
        total_break_seconds=break_seconds,
        average_session_seconds=math.floor((work_seconds + break_seconds) / len(completed) + 0.5) if completed else 0,
        completion_rate=_percent(len(completed), len(week)) if week else 0,
        current_streak=info.current,
        longest_streak=info.longest,
    )


def productivity_insights(
    sessions: Optional[Sequence[PomodoroSession]],
    daily_goal: int,
    work_duration: int,
    today: Optional[date] = None,
) -> ProductivityInsights:
    _check_goal(daily_goal)
    sessions = sessions or ()
    today = today or date.today()
    work_sessions = [s for s in sessions if s.phase == PHASE_WORK]
    done = [s for s in work_sessions if s.completed]

    focus_score = _percent(len(done), len(work_sessions)) if work_sessions else 0

    since = today - timedelta(days=7)
    active_days = {s.date.date() for s in sessions if s.date.date() >= since}
    consistency = _percent(len(active_days), 7)

    target = work_duration * 60
    average = sum(s.duration_seconds for s in done) / len(done) if done else 0
    efficiency = min(100, _percent(average, target)) if target > 0 else 0

    recommendations: list[str] = []
    if focus_score < 70:
        recommendations.append("Try to complete more work sessions to improve focus")
    if consistency < 50:
        recommendations.append("Maintain a more regular schedule for better consistency")
    if efficiency < 80:
        recommendations.append("Consider adjusting work session duration to match your focus span")
    if len(done) < daily_goal:
        recommendations.append(f"Aim for {daily_goal} work sessions per day")

    return ProductivityInsights(
        focus_score=focus_score,
        consistency=consistency,
        efficiency=efficiency,
        recommendations=tuple(recommendations),
    )


def format_streak_duration(days: int) -> str:
    if days == 0:
        return "No streak"
    if days == 1:
        return "1 day"
    if days < 7:
        return f"{days} days"
    if days < 30:
        weeks, rest = divmod(days, 7)
        if rest == 0:
            return f"{weeks} {'week' if weeks == 1 else 'weeks'}"
        return f"{weeks}w {rest}d"
    if days < 365:
        months, rest = divmod(days, 30)
        if rest == 0:
            return f"{months} {'month' if months == 1 else 'months'}"
        return f"{months}mo {rest}d"
    years, rest = divmod(days, 365)
    if rest == 0:
        return f"{years} {'year' if years == 1 else 'years'}"
    return f"{years}y {rest}d"


__all__ = [
    "MAX_STREAK_WALK_DAYS",
    "completed_work_by_day",
    "daily_progress",
    "week_start",
    "weekly_progress",
    "streak",
    "session_statistics",
    "productivity_insights",
    "format_streak_duration",
]
