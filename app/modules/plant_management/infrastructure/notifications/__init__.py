# 📄 File: app/modules/plant_management/infrastructure/notifications/__init__.py
# 🧭 Purpose (Layman Explanation): 
# The tray where watering alerts are kept until the user dismisses them
# 🧪 Purpose (Technical Summary): 
# Exports the in-memory NotificationSink implementation
# 🔗 Dependencies: 
# notification_center.py
# 🔄 Connected Modules / Calls From: 
# Service container

from .notification_center import InMemoryNotificationCenter

__all__ = ["InMemoryNotificationCenter"]
