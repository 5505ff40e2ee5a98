# 📄 File: app/modules/plant_management/presentation/api/schemas/reminder_schemas.py
# 🧭 Purpose (Layman Explanation):
# Shapes of the data used to switch watering reminders on and off, to tell the app which
# alarm and notification permissions it has, and to show which reminders are currently set.
#
# 🧪 Purpose (Technical Summary):
# Pydantic v2 schemas for reminder toggling, capability (permission) management,
# reconciliation reports, live alarm registrations and posted notifications.
#
# 🔗 Dependencies:
# - pydantic
# - app.modules.plant_management.domain.services (AlarmStrategy, ReminderRegistration, ReminderNotification)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_management.presentation.api.v1.plants (reminder toggle)
# - app.modules.plant_management.presentation.api.v1.reminders

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.modules.plant_management.domain.services.alarm_backend import AlarmStrategy
from app.modules.plant_management.domain.services.notification_presenter import ReminderNotification
from app.modules.plant_management.domain.services.reminder_scheduler import ReminderRegistration
from app.shared.utils.formatters import format_time


class ReminderToggleRequest(BaseModel):
    """Enable or disable a plant's reminder, optionally moving it to a new time."""
    enabled: bool
    hour: Optional[int] = Field(default=None, ge=0, le=23)
    minute: Optional[int] = Field(default=None, ge=0, le=59)


class PermissionsResponse(BaseModel):
    exact_alarms_allowed: bool
    notifications_enabled: bool


class PermissionsUpdateRequest(BaseModel):
    """Omitted flags keep their current value."""
    exact_alarms_allowed: Optional[bool] = None
    notifications_enabled: Optional[bool] = None


class ReconciliationResponse(BaseModel):
    rescheduled: List[int] = Field(default_factory=list)
    repaired: List[int] = Field(default_factory=list)
    cleared: List[int] = Field(default_factory=list)
    orphans_cancelled: List[int] = Field(default_factory=list)
    failed: List[int] = Field(default_factory=list)


class RegistrationResponse(BaseModel):
    handle: int
    plant_id: int
    plant_name: str
    reminder_time: str
    strategy: AlarmStrategy
    next_trigger_at: datetime

    @classmethod
    def from_registration(cls, registration: ReminderRegistration) -> "RegistrationResponse":
        return cls(
            handle=registration.handle,
            plant_id=registration.plant_id,
            plant_name=registration.plant_name,
            reminder_time=format_time(registration.hour, registration.minute),
            strategy=registration.strategy,
            next_trigger_at=registration.next_trigger_at,
        )


class NotificationResponse(BaseModel):
    plant_id: int
    plant_name: str
    title: str
    body: str
    channel_id: str
    posted_at: datetime

    @classmethod
    def from_notification(cls, notification: ReminderNotification) -> "NotificationResponse":
        return cls(
            plant_id=notification.plant_id,
            plant_name=notification.plant_name,
            title=notification.title,
            body=notification.body,
            channel_id=notification.channel_id,
            posted_at=notification.posted_at,
        )


class CoordinatorStateResponse(BaseModel):
    is_loading: bool
    error_message: Optional[str] = None
    selected_plant_id: Optional[int] = None
