from __future__ import annotations

"""Pomodoro cycle engine.

Features:
 - Tick-driven elapsed time (one QTimer, +1 second per tick).
 - Work / short-break / long-break sequencing via ``cycle.next_phase``.
 - Pause / resume / skip / stop / reset / complete with explicit results
   instead of exceptions for disallowed transitions.
 - Auto-start chaining between phases, deferred to the next event-loop pass.
 - Emits transitions via Qt signals for UI & notification integration.

State machine: idle -> running <-> paused -> completed -> running ... ; stop()
and reset() return to idle from anywhere. Only this class writes ``CycleState``.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from . import cycle
from .config_validator import validate_config
from .constants import (
    ACTION_COMPLETE,
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_RESUME,
    ACTION_SKIP,
    ACTION_START,
    ACTION_STOP,
    ACTION_UPDATE_CONFIG,
    ACTIVE_STATUSES,
    DEFAULT_TICK_INTERVAL_MS,
    REASON_ALREADY_ACTIVE,
    REASON_COMPLETED,
    REASON_CONFIG_UPDATED,
    REASON_INVALID_CONFIG,
    REASON_NOT_ACTIVE,
    REASON_NOT_PAUSED,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_RESUMED,
    REASON_SKIP_NOT_ALLOWED,
    REASON_SKIPPED,
    REASON_STARTED,
    REASON_STOPPED,
    STARTABLE_STATUSES,
    STATUS_COMPLETED,
    STATUS_IDLE,
    STATUS_PAUSED,
    STATUS_RUNNING,
)
from .models import (
    CyclePhase,
    CycleState,
    PomodoroConfig,
    PomodoroSession,
    TimerStatus,
    ValidationResult,
    PHASE_WORK,
)

TimeProvider = Callable[[], datetime]
SessionSink = Callable[[PomodoroSession], object]

_log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """Outcome of an engine operation; ``state`` is a copy taken afterwards."""
    action: str
    accepted: bool
    reason: str
    state: CycleState


class PomodoroEngine(QObject):
    tick = pyqtSignal(int, int, str)  # elapsed_seconds, remaining_seconds, phase
    state_changed = pyqtSignal(str)  # idle|running|paused|completed
    phase_started = pyqtSignal(str, int)  # phase, current_cycle
    phase_completed = pyqtSignal(object)  # PomodoroSession
    phase_skipped = pyqtSignal(object)  # PomodoroSession
    phase_changed = pyqtSignal(str, str)  # from_phase, to_phase
    transition_rejected = pyqtSignal(str, str)  # action, reason

    def __init__(
        self,
        config: PomodoroConfig | None = None,
        *,
        session_sink: Optional[SessionSink] = None,
        time_provider: Optional[TimeProvider] = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be greater than zero")
        self._config = config or PomodoroConfig()
        self._validation = validate_config(self._config)
        self._session_sink = session_sink
        self._time_provider: TimeProvider = time_provider or datetime.now
        self._state = CycleState()
        self._project_id: Optional[str] = None
        self._description: Optional[str] = None

        self._timer = QTimer(self)
        self._timer.setInterval(tick_interval_ms)
        self._timer.timeout.connect(self.handle_tick)

        # Auto-start runs from here so a completion never starts the next
        # phase inside its own call stack.
        self._chain_timer = QTimer(self)
        self._chain_timer.setSingleShot(True)
        self._chain_timer.setInterval(0)
        self._chain_timer.timeout.connect(self._auto_start)

    # --- Properties -----------------------------------------------------
    @property
    def config(self) -> PomodoroConfig:
        return self._config

    @property
    def validation(self) -> ValidationResult:
        return self._validation

    @property
    def state(self) -> CycleState:
        return replace(self._state)

    @property
    def status(self) -> TimerStatus:
        return self._state.status

    @property
    def phase_duration_seconds(self) -> int:
        return cycle.phase_duration_seconds(self._state.current_phase, self._config)

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.phase_duration_seconds - self._state.elapsed_seconds)

    @property
    def next_phase(self) -> CyclePhase:
        upcoming = self._state.current_cycle
        if self._state.current_phase == PHASE_WORK:
            upcoming += 1
        return cycle.next_phase(upcoming, self._state.current_phase, self._config.long_break_interval)

    @property
    def cycle_progress_percent(self) -> float:
        return cycle.cycle_progress_percent(self._state.current_cycle, self._config.long_break_interval)

    @property
    def is_chain_pending(self) -> bool:
        return self._chain_timer.isActive()

    def estimated_completion(self, now: Optional[datetime] = None) -> datetime:
        return cycle.estimated_completion(
            self._state.current_cycle,
            self._state.current_phase,
            self._state.elapsed_seconds,
            self._config,
            now,
        )

    # --- Public API -----------------------------------------------------
    def start(self, project_id: Optional[str] = None, description: Optional[str] = None) -> TransitionResult:
        if not self._validation.is_valid:
            return self._reject(ACTION_START, REASON_INVALID_CONFIG)
        if self._state.status not in STARTABLE_STATUSES:
            return self._reject(ACTION_START, REASON_ALREADY_ACTIVE)
        if self.phase_duration_seconds <= 0:
            return self._reject(ACTION_START, REASON_INVALID_CONFIG)
        self._chain_timer.stop()
        if project_id is not None:
            self._project_id = project_id
        if description is not None:
            self._description = description
        self._state.elapsed_seconds = 0
        self._timer.start()
        self._set_status(STATUS_RUNNING)
        _log.info(
            "phase started: phase=%s cycle=%s duration=%ss",
            self._state.current_phase,
            self._state.current_cycle,
            self.phase_duration_seconds,
            extra={"_json_phase": self._state.current_phase},
        )
        self.phase_started.emit(self._state.current_phase, self._state.current_cycle)
        self.tick.emit(0, self.phase_duration_seconds, self._state.current_phase)
        return self._result(ACTION_START, True, REASON_STARTED)

    def pause(self) -> TransitionResult:
        if self._state.status != STATUS_RUNNING:
            return self._reject(ACTION_PAUSE, REASON_NOT_RUNNING)
        self._timer.stop()
        self._set_status(STATUS_PAUSED)
        _log.info("phase paused: phase=%s elapsed=%ss", self._state.current_phase, self._state.elapsed_seconds)
        return self._result(ACTION_PAUSE, True, REASON_PAUSED)

    def resume(self) -> TransitionResult:
        if self._state.status != STATUS_PAUSED:
            return self._reject(ACTION_RESUME, REASON_NOT_PAUSED)
        self._timer.start()
        self._set_status(STATUS_RUNNING)
        _log.info("phase resumed: phase=%s elapsed=%ss", self._state.current_phase, self._state.elapsed_seconds)
        return self._result(ACTION_RESUME, True, REASON_RESUMED)

    def complete(self) -> TransitionResult:
        """Finish the active phase now; it is recorded with its full configured duration."""
        if self._state.status not in ACTIVE_STATUSES:
            return self._reject(ACTION_COMPLETE, REASON_NOT_ACTIVE)
        self._finish_phase(completed=True, duration_seconds=self.phase_duration_seconds)
        return self._result(ACTION_COMPLETE, True, REASON_COMPLETED)

    def skip(self) -> TransitionResult:
        if self._state.current_phase != PHASE_WORK and not self._config.allow_skip_breaks:
            return self._reject(ACTION_SKIP, REASON_SKIP_NOT_ALLOWED)
        if self._state.status not in ACTIVE_STATUSES:
            return self._reject(ACTION_SKIP, REASON_NOT_ACTIVE)
        self._timer.stop()
        session = self._build_session(completed=False, duration_seconds=self._state.elapsed_seconds)
        self._deliver(session)
        _log.info("phase skipped: phase=%s elapsed=%ss", session.phase, session.duration_seconds)
        self.phase_skipped.emit(session)
        self._advance_phase()
        self._set_status(STATUS_IDLE)
        return self._result(ACTION_SKIP, True, REASON_SKIPPED)

    def stop(self, record_partial: bool = False) -> TransitionResult:
        self._chain_timer.stop()
        if self._state.status == STATUS_IDLE:
            return self._reject(ACTION_STOP, REASON_NOT_ACTIVE)
        self._timer.stop()
        if record_partial and self._state.status in ACTIVE_STATUSES and self._state.elapsed_seconds > 0:
            self._deliver(self._build_session(completed=False, duration_seconds=self._state.elapsed_seconds))
        self._state.elapsed_seconds = 0
        self._set_status(STATUS_IDLE)
        _log.info("timer stopped: phase=%s cycle=%s", self._state.current_phase, self._state.current_cycle)
        return self._result(ACTION_STOP, True, REASON_STOPPED)

    def reset(self) -> TransitionResult:
        self._chain_timer.stop()
        self._timer.stop()
        previous_phase = self._state.current_phase
        self._state.current_cycle = 0
        self._state.current_phase = PHASE_WORK
        self._state.elapsed_seconds = 0
        self._project_id = None
        self._description = None
        self._set_status(STATUS_IDLE)
        if previous_phase != PHASE_WORK:
            self.phase_changed.emit(previous_phase, PHASE_WORK)
        _log.info("cycle reset")
        return self._result(ACTION_RESET, True, REASON_RESET)

    def update_config(self, config: PomodoroConfig) -> TransitionResult:
        """Swap in ``config``; an active phase restarts from zero and keeps its paused flag.

        An invalid config is rejected before anything is touched.
        """
        validation = validate_config(config)
        if not validation.is_valid:
            _log.warning("invalid pomodoro config: %s", "; ".join(validation.errors))
            return self._reject(ACTION_UPDATE_CONFIG, REASON_INVALID_CONFIG)
        was_active = self._state.status in ACTIVE_STATUSES
        was_paused = self._state.status == STATUS_PAUSED
        if was_active:
            self.stop()
        self._config = config
        self._validation = validation
        if was_active:
            self.start()
            if was_paused:
                self.pause()
        return self._result(ACTION_UPDATE_CONFIG, True, REASON_CONFIG_UPDATED)

    def handle_tick(self) -> None:
        """Advance one second; the QTimer calls this, tests may call it directly."""
        if self._state.status != STATUS_RUNNING:
            return
        duration = self.phase_duration_seconds
        elapsed = self._state.elapsed_seconds + 1
        if elapsed >= duration:
            self._state.elapsed_seconds = duration
            self.tick.emit(duration, 0, self._state.current_phase)
            self._finish_phase(completed=True, duration_seconds=duration)
            return
        self._state.elapsed_seconds = elapsed
        self.tick.emit(elapsed, duration - elapsed, self._state.current_phase)

    # --- Internal -------------------------------------------------------
    def _finish_phase(self, *, completed: bool, duration_seconds: int) -> None:
        self._timer.stop()
        finished_phase = self._state.current_phase
        session = self._build_session(completed=completed, duration_seconds=duration_seconds)
        self._deliver(session)
        _log.info(
            "phase completed: phase=%s cycle=%s duration=%ss",
            session.phase,
            session.cycle_number,
            session.duration_seconds,
            extra={"_json_phase": session.phase},
        )
        self.phase_completed.emit(session)
        self._advance_phase()
        self._set_status(STATUS_COMPLETED)
        if self._should_auto_start(finished_phase):
            self._chain_timer.start()

    def _advance_phase(self) -> None:
        finished_phase = self._state.current_phase
        if finished_phase == PHASE_WORK:
            self._state.current_cycle += 1
        upcoming = cycle.next_phase(
            self._state.current_cycle, finished_phase, self._config.long_break_interval
        )
        self._state.current_phase = upcoming
        self._state.elapsed_seconds = 0
        self.phase_changed.emit(finished_phase, upcoming)

    def _should_auto_start(self, finished_phase: CyclePhase) -> bool:
        if finished_phase == PHASE_WORK:
            return self._config.auto_start_breaks
        return self._config.auto_start_pomodoros

    def _auto_start(self) -> None:
        if self._state.status != STATUS_COMPLETED:
            return
        self.start()

    def _build_session(self, *, completed: bool, duration_seconds: int) -> PomodoroSession:
        cycle_number = self._state.current_cycle
        if self._state.current_phase == PHASE_WORK:
            cycle_number += 1  # ordinal of the work session being recorded
        return PomodoroSession(
            id=str(uuid.uuid4()),
            date=self._time_provider(),
            phase=self._state.current_phase,
            duration_seconds=duration_seconds,
            completed=completed,
            cycle_number=cycle_number,
            project_id=self._project_id,
            description=self._description,
        )

    def _deliver(self, session: PomodoroSession) -> None:
        if self._session_sink is None:
            return
        try:
            self._session_sink(session)
        except Exception:
            _log.exception("session sink failed: id=%s phase=%s", session.id, session.phase)

    def _set_status(self, status: TimerStatus) -> None:
        self._state.is_active = status in ACTIVE_STATUSES
        self._state.is_paused = status == STATUS_PAUSED
        if status != self._state.status:
            self._state.status = status
            self.state_changed.emit(status)

    def _result(self, action: str, accepted: bool, reason: str) -> TransitionResult:
        return TransitionResult(action=action, accepted=accepted, reason=reason, state=self.state)

    def _reject(self, action: str, reason: str) -> TransitionResult:
        _log.warning("transition rejected: action=%s reason=%s status=%s", action, reason, self._state.status)
        self.transition_rejected.emit(action, reason)
        return self._result(action, False, reason)


__all__ = ["PomodoroEngine", "TransitionResult", "SessionSink", "TimeProvider"]
