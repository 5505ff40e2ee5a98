# 📄 File: app/modules/plant_management/infrastructure/alarms/__init__.py
# 🧭 Purpose (Layman Explanation): 
# The real alarm clock used for watering reminders
# 🧪 Purpose (Technical Summary): 
# Exports the APScheduler-backed AlarmBackend
# 🔗 Dependencies: 
# apscheduler_backend.py
# 🔄 Connected Modules / Calls From: 
# Service container, app.main lifespan

from .apscheduler_backend import APSchedulerAlarmBackend

__all__ = ["APSchedulerAlarmBackend"]
