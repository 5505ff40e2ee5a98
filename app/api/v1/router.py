# 📄 File: app/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# This file acts like a traffic director for all API version 1 requests, sending plant requests to
# plant handlers and reminder requests to reminder handlers.
# 🧪 Purpose (Technical Summary):
# Main API v1 router aggregation that combines the health and plant management routers
# under their configured prefixes and tags.
# 🔗 Dependencies:
# FastAPI, app.api.v1.health, app.modules.plant_management.presentation.api.v1.*
# 🔄 Connected Modules / Calls From:
# app.main.py

from typing import Any, Dict

from fastapi import APIRouter

from app.modules.plant_management.presentation.api.v1 import plants_router, reminders_router

from . import API_TAGS, ROUTE_PREFIXES, get_api_info
from .health import health_router

# Create main API v1 router
api_v1_router = APIRouter()

# Include health check router (no prefix - direct access)
api_v1_router.include_router(health_router, tags=[API_TAGS["health"]])

api_v1_router.include_router(
    plants_router,
    prefix=ROUTE_PREFIXES["plants"],
    tags=[API_TAGS["plants"]],
)

api_v1_router.include_router(
    reminders_router,
    prefix=ROUTE_PREFIXES["reminders"],
    tags=[API_TAGS["reminders"]],
)


@api_v1_router.get("/",
                   summary="API v1 Information",
                   description="Get API v1 version information and available endpoints",
                   tags=["API Info"])
async def api_v1_info() -> Dict[str, Any]:
    return get_api_info()
