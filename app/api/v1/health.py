# 📄 File: app/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# This file provides health check endpoints that tell us if our plant care app is working properly,
# like a doctor's checkup making sure the database and the reminder alarm clock are running.
# 🧪 Purpose (Technical Summary):
# Health check endpoints reporting database connectivity, alarm scheduler state, live reminder
# registrations and permission flags, plus liveness/readiness probes.
# 🔗 Dependencies:
# FastAPI, APScheduler (scheduler states), app.shared.core.dependencies (service container)
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, monitoring systems

import platform
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from apscheduler.schedulers.base import STATE_PAUSED, STATE_RUNNING, STATE_STOPPED
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.shared.core.dependencies import ServiceContainer, get_container
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

health_router = APIRouter()

_SCHEDULER_STATES = {
    STATE_STOPPED: "stopped",
    STATE_RUNNING: "running",
    STATE_PAUSED: "paused",
}

# Application start time for uptime calculation
_app_start_time = datetime.now(timezone.utc)


def _scheduler_health(container: ServiceContainer) -> Dict[str, Any]:
    state = _SCHEDULER_STATES.get(container.alarm_backend.scheduler.state, "unknown")
    return {
        "status": "healthy" if state == "running" else "unhealthy",
        "state": state,
        "active_reminders": len(container.reminder_scheduler.active_handles()),
        "jobs": len(container.alarm_backend.scheduler.get_jobs()),
    }


@health_router.get("/health",
                   summary="Basic Health Check",
                   description="Basic health check endpoint for load balancers and monitoring")
async def health_check(container: ServiceContainer = Depends(get_container)) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "pocket-plant-care",
            "version": container.settings.APP_VERSION,
        }
    )


@health_router.get("/health/detailed",
                   summary="Detailed Health Check",
                   description="Database, alarm scheduler and permission status")
async def detailed_health_check(container: ServiceContainer = Depends(get_container)) -> JSONResponse:
    """
    Comprehensive health check for all system components.

    The overall status is ``unhealthy`` when the database cannot be reached
    and ``degraded`` when the alarm scheduler is not running.
    """
    components: Dict[str, Any] = {}
    overall_status = "healthy"

    database = await container.connection_manager.health_check()
    components["database"] = database
    if database["status"] != "healthy":
        overall_status = "unhealthy"

    scheduler = _scheduler_health(container)
    components["alarm_scheduler"] = scheduler
    if scheduler["status"] != "healthy" and overall_status == "healthy":
        overall_status = "degraded"

    components["permissions"] = container.capabilities.snapshot()

    uptime = datetime.now(timezone.utc) - _app_start_time
    return JSONResponse(
        status_code=200 if overall_status != "unhealthy" else 503,
        content={
            "status": overall_status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": container.settings.APP_VERSION,
            "environment": container.settings.ENVIRONMENT,
            "uptime_seconds": int(uptime.total_seconds()),
            "python_version": sys.version.split()[0],
            "platform": platform.system(),
            "components": components,
        }
    )


@health_router.get("/health/live", summary="Liveness Probe")
async def liveness_probe() -> Dict[str, str]:
    return {"status": "alive"}


@health_router.get("/health/ready", summary="Readiness Probe")
async def readiness_probe(container: ServiceContainer = Depends(get_container)) -> JSONResponse:
    database = await container.connection_manager.health_check()
    scheduler = _scheduler_health(container)
    ready = database["status"] == "healthy" and scheduler["status"] == "healthy"
    if not ready:
        logger.warning("Readiness check failed", database=database["status"], scheduler=scheduler["state"])
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "database": database["status"],
            "alarm_scheduler": scheduler["state"],
        }
    )
