# 📄 File: app/modules/plant_management/domain/services/notification_presenter.py
# 🧭 Purpose (Layman Explanation): 
# Turns "it's time to water Fern" into an actual alert the user can see, one alert per plant, and stays quiet if the user has switched notifications off
# 🧪 Purpose (Technical Summary): 
# Domain service rendering a fired reminder into a ReminderNotification keyed by plant id and posting it to a NotificationSink, gated by the notification capability
# 🔗 Dependencies: 
# dataclasses, abc, alarm_backend.AlarmCapabilities, app.shared.utils.logging
# 🔄 Connected Modules / Calls From: 
# reminder_scheduler.py (fire), infrastructure/notifications/notification_center.py, reminders API (list / dismiss)

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List

from app.shared.utils.helpers import Clock, utc_now
from app.shared.utils.logging import get_logger

from .alarm_backend import AlarmCapabilities

logger = get_logger(__name__)

REMINDER_CHANNEL_ID = "plant_watering_reminders"
REMINDER_CHANNEL_NAME = "Plant Watering Reminders"


@dataclass(frozen=True)
class ReminderNotification:
    """A posted watering alert. ``key`` equals the plant id."""
    key: int
    plant_id: int
    plant_name: str
    title: str
    body: str
    channel_id: str
    posted_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NotificationSink(ABC):
    """Where alerts end up. Posting under an existing key replaces that alert."""

    @abstractmethod
    def post(self, notification: ReminderNotification) -> None:
        pass

    @abstractmethod
    def cancel(self, key: int) -> bool:
        pass

    @abstractmethod
    def list_active(self) -> List[ReminderNotification]:
        pass


class NotificationPresenter:
    def __init__(self, sink: NotificationSink, capabilities: AlarmCapabilities, clock: Clock = utc_now):
        self._sink = sink
        self._capabilities = capabilities
        self._clock = clock

    @staticmethod
    def render_title(plant_name: str) -> str:
        return f"🌱 Time to water {plant_name}!"

    @staticmethod
    def render_body(plant_name: str) -> str:
        return f"It's time to water {plant_name}! Tap to open the app and mark it as watered."

    def present(self, plant_id: int, plant_name: str) -> bool:
        """
        Post (or replace) the watering alert for ``plant_id``.

        Returns False without posting when notifications are disabled.
        """
        if not self._capabilities.notifications_enabled():
            logger.info("Notifications disabled, reminder not shown", plant_id=plant_id)
            return False

        notification = ReminderNotification(
            key=plant_id,
            plant_id=plant_id,
            plant_name=plant_name,
            title=self.render_title(plant_name),
            body=self.render_body(plant_name),
            channel_id=REMINDER_CHANNEL_ID,
            posted_at=self._clock(),
        )
        self._sink.post(notification)
        logger.info("Watering reminder posted", plant_id=plant_id, plant_name=plant_name)
        return True

    def dismiss(self, plant_id: int) -> bool:
        return self._sink.cancel(plant_id)

    def active(self) -> List[ReminderNotification]:
        return self._sink.list_active()
