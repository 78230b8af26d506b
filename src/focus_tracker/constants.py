"""Status, action, and reason names used by the pomodoro engine."""

from __future__ import annotations

STATUS_IDLE = "idle"
STATUS_RUNNING = "running"
STATUS_PAUSED = "paused"
STATUS_COMPLETED = "completed"

ACTIVE_STATUSES: frozenset[str] = frozenset({STATUS_RUNNING, STATUS_PAUSED})
STARTABLE_STATUSES: frozenset[str] = frozenset({STATUS_IDLE, STATUS_COMPLETED})

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESUME = "resume"
ACTION_COMPLETE = "complete"
ACTION_SKIP = "skip"
ACTION_STOP = "stop"
ACTION_RESET = "reset"
ACTION_UPDATE_CONFIG = "update_config"

REASON_STARTED = "started"
REASON_PAUSED = "paused"
REASON_RESUMED = "resumed"
REASON_COMPLETED = "completed"
REASON_SKIPPED = "skipped"
REASON_STOPPED = "stopped"
REASON_RESET = "reset"
REASON_CONFIG_UPDATED = "config_updated"

REASON_NOT_RUNNING = "not_running"
REASON_NOT_PAUSED = "not_paused"
REASON_NOT_ACTIVE = "not_active"
REASON_ALREADY_ACTIVE = "already_active"
REASON_SKIP_NOT_ALLOWED = "skip_not_allowed"
REASON_INVALID_CONFIG = "invalid_config"

DEFAULT_TICK_INTERVAL_MS = 1000
