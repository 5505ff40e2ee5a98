# 📄 File: app/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation): 
# This file organizes version 1 of our API, like having a dedicated section for the first version
# of our plant care features so we can add new versions later without breaking existing apps.
# 🧪 Purpose (Technical Summary): 
# Package initialization for API version 1: version metadata, route prefixes and tags used by
# the v1 router.
# 🔗 Dependencies: 
# app.shared.config.settings
# 🔄 Connected Modules / Calls From: 
# app.api.v1.router, app.main.py

from typing import Any, Dict

from app.shared.config.settings import get_settings

__api_version__ = "v1"

ROUTE_PREFIXES = {
    "plants": "/plants",
    "reminders": "/reminders",
}

API_TAGS = {
    "plants": "Plants",
    "reminders": "Reminders",
    "health": "Health Check",
}


def get_api_info() -> Dict[str, Any]:
    """Version information for the API v1 info endpoint."""
    settings = get_settings()
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api_version": __api_version__,
        "environment": settings.ENVIRONMENT,
        "routes": {name: f"/api/{__api_version__}{prefix}" for name, prefix in ROUTE_PREFIXES.items()},
    }
