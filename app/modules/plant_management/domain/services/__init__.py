# 📄 File: app/modules/plant_management/domain/services/__init__.py
# 🧭 Purpose (Layman Explanation): 
# Groups the reminder logic: the alarm clock contract, the reminder scheduler and the alert presenter
# 🧪 Purpose (Technical Summary): 
# Domain services package exports for reminder scheduling and notification presentation
# 🔗 Dependencies: 
# alarm_backend.py, reminder_scheduler.py, notification_presenter.py
# 🔄 Connected Modules / Calls From: 
# Application coordinator, infrastructure adapters, service container

from .alarm_backend import AlarmBackend, AlarmCapabilities, AlarmStrategy
from .notification_presenter import NotificationPresenter, NotificationSink, ReminderNotification
from .reminder_scheduler import NO_HANDLE, ReminderRegistration, ReminderScheduler

__all__ = [
    "AlarmBackend",
    "AlarmCapabilities",
    "AlarmStrategy",
    "NotificationPresenter",
    "NotificationSink",
    "ReminderNotification",
    "NO_HANDLE",
    "ReminderRegistration",
    "ReminderScheduler",
]
