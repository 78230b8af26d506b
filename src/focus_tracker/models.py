from __future__ import annotations

"""Dataclass models for the pomodoro cycle engine and its analytics."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Optional

CyclePhase = Literal["work", "short-break", "long-break"]
TimerStatus = Literal["idle", "running", "paused", "completed"]

PHASE_WORK: CyclePhase = "work"
PHASE_SHORT_BREAK: CyclePhase = "short-break"
PHASE_LONG_BREAK: CyclePhase = "long-break"
CYCLE_PHASES: tuple[CyclePhase, ...] = (PHASE_WORK, PHASE_SHORT_BREAK, PHASE_LONG_BREAK)


@dataclass(frozen=True, slots=True)
class PomodoroConfig:
    work_duration: int = 25  # minutes
    short_break_duration: int = 5
    long_break_duration: int = 15
    long_break_interval: int = 4  # work sessions per long break
    allow_skip_breaks: bool = False
    auto_start_breaks: bool = False
    auto_start_pomodoros: bool = False


@dataclass(slots=True)
class CycleState:
    current_cycle: int = 0
    current_phase: CyclePhase = PHASE_WORK
    is_active: bool = False
    is_paused: bool = False
    elapsed_seconds: int = 0
    status: TimerStatus = "idle"


@dataclass(frozen=True, slots=True)
class PomodoroSession:
    id: str
    date: datetime
    phase: CyclePhase
    duration_seconds: int
    completed: bool
    cycle_number: int
    project_id: Optional[str] = None
    description: Optional[str] = None

    @property
    def day(self) -> date:
        return self.date.date()


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DailyProgress:
    completed: int
    goal: int
    percentage: int
    remaining: int


@dataclass(frozen=True, slots=True)
class DayProgress:
    date: str  # YYYY-MM-DD
    completed: int
    goal: int
    percentage: int


@dataclass(frozen=True, slots=True)
class WeeklyProgress:
    total_completed: int
    total_goal: int
    daily_breakdown: tuple[DayProgress, ...]
    weekly_percentage: int


@dataclass(frozen=True, slots=True)
class StreakInfo:
    current: int = 0
    longest: int = 0
    last_streak_date: Optional[date] = None


@dataclass(frozen=True, slots=True)
class SessionStatistics:
    total_sessions: int = 0
    completed_sessions: int = 0
    total_work_seconds: int = 0
    total_break_seconds: int = 0
    average_session_seconds: int = 0
    completion_rate: int = 0  # percent
    current_streak: int = 0
    longest_streak: int = 0


@dataclass(frozen=True, slots=True)
class ProductivityInsights:
    focus_score: int
    consistency: int
    efficiency: int
    recommendations: tuple[str, ...] = field(default_factory=tuple)


__all__ = [
    "CyclePhase",
    "TimerStatus",
    "PHASE_WORK",
    "PHASE_SHORT_BREAK",
    "PHASE_LONG_BREAK",
    "CYCLE_PHASES",
    "PomodoroConfig",
    "CycleState",
    "PomodoroSession",
    "ValidationResult",
    "DailyProgress",
    "DayProgress",
    "WeeklyProgress",
    "StreakInfo",
    "SessionStatistics",
    "ProductivityInsights",
]
