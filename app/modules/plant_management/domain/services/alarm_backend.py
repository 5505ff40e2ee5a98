# 📄 File: app/modules/plant_management/domain/services/alarm_backend.py
# 🧭 Purpose (Layman Explanation): 
# Describes the "alarm clock" the app relies on: it can ring once at an exact moment, or ring roughly at the same time every day, and it can tell us whether exact alarms and notifications are currently allowed
# 🧪 Purpose (Technical Summary): 
# Domain contracts for the alarm registry (exact one-shot and inexact repeating registrations keyed by job id) and the runtime capability probe consulted by the reminder scheduler's fallback ladder
# 🔗 Dependencies: 
# abc, enum, threading, datetime
# 🔄 Connected Modules / Calls From: 
# reminder_scheduler.py, notification_presenter.py, infrastructure/alarms/apscheduler_backend.py, reminders API (permission toggles)

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Optional, Sequence

AlarmCallback = Callable[..., Any]


class AlarmStrategy(str, Enum):
    """How a reminder is registered with the alarm backend."""
    EXACT = "exact"                          # one-shot, re-armed on each fire
    INEXACT_REPEATING = "inexact_repeating"  # daily period, may drift


class AlarmCapabilities:
    """
    Runtime permission probe.

    Both flags can flip while the process runs (the user grants or revokes a
    permission), so reads and writes are guarded by a lock.
    """

    def __init__(self, exact_alarms_allowed: bool = True, notifications_allowed: bool = True):
        self._lock = threading.Lock()
        self._exact_alarms_allowed = exact_alarms_allowed
        self._notifications_allowed = notifications_allowed

    def can_schedule_exact(self) -> bool:
        with self._lock:
            return self._exact_alarms_allowed

    def notifications_enabled(self) -> bool:
        with self._lock:
            return self._notifications_allowed

    def set_exact_alarms_allowed(self, allowed: bool) -> bool:
        """Update the exact-alarm permission. Returns True when it changed."""
        with self._lock:
            changed = self._exact_alarms_allowed != allowed
            self._exact_alarms_allowed = allowed
            return changed

    def set_notifications_enabled(self, enabled: bool) -> bool:
        """Update the notification permission. Returns True when it changed."""
        with self._lock:
            changed = self._notifications_allowed != enabled
            self._notifications_allowed = enabled
            return changed

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "exact_alarms_allowed": self._exact_alarms_allowed,
                "notifications_enabled": self._notifications_allowed,
            }


class AlarmBackend(ABC):
    """
    Process-wide alarm registry keyed by job id.

    Registering under an existing job id replaces the earlier registration.
    Callbacks run outside the caller's context (a worker thread) and receive
    ``args`` positionally.
    """

    @abstractmethod
    def register_exact(
        self,
        job_id: str,
        run_at: datetime,
        callback: AlarmCallback,
        args: Sequence[Any] = (),
    ) -> None:
        """
        Register a one-shot alarm that fires at ``run_at``.

        Raises:
            AlarmPermissionError: Precise scheduling is not permitted
        """

    @abstractmethod
    def register_repeating(
        self,
        job_id: str,
        first_run: datetime,
        period: timedelta,
        callback: AlarmCallback,
        args: Sequence[Any] = (),
    ) -> None:
        """Register an alarm that fires around ``first_run`` and then every ``period``."""

    @abstractmethod
    def cancel(self, job_id: str) -> bool:
        """Remove a registration. Returns False when nothing was registered."""

    @abstractmethod
    def is_registered(self, job_id: str) -> bool:
        pass

    @abstractmethod
    def next_run_time(self, job_id: str) -> Optional[datetime]:
        pass
