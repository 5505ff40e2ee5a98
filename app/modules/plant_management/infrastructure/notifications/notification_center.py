# 📄 File: app/modules/plant_management/infrastructure/notifications/notification_center.py
# 🧭 Purpose (Layman Explanation):
# Keeps the list of watering alerts currently showing, one per plant, so a new alert for the same plant replaces the old one
#
# 🧪 Purpose (Technical Summary):
# Thread-safe in-memory NotificationSink keyed by plant id; posts come from the alarm worker thread
# while reads and dismissals come from the API event loop.
#
# 🔗 Dependencies:
# - threading
# - app.modules.plant_management.domain.services.notification_presenter (contracts)
#
# 🔄 Connected Modules / Calls From:
# - NotificationPresenter (post / cancel / list)
# - Reminders API (notification list and dismissal through the presenter)

import threading
from typing import Dict, List

from app.modules.plant_management.domain.services.notification_presenter import (
    NotificationSink,
    ReminderNotification,
)


class InMemoryNotificationCenter(NotificationSink):
    def __init__(self):
        self._lock = threading.Lock()
        self._active: Dict[int, ReminderNotification] = {}

    def post(self, notification: ReminderNotification) -> None:
        with self._lock:
            self._active[notification.key] = notification

    def cancel(self, key: int) -> bool:
        with self._lock:
            return self._active.pop(key, None) is not None

    def list_active(self) -> List[ReminderNotification]:
        with self._lock:
            return sorted(self._active.values(), key=lambda n: n.posted_at, reverse=True)
