# 📄 File: app/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell our Plant Care app where to keep its data,
# how to log, and how reminders should behave.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization exporting the cached settings accessor.
#
# 🔗 Dependencies:
# - settings.py (application settings)
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - Infrastructure components

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
