# 📄 File: app/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts up our Plant Care app, connects all the different parts together,
# brings back every watering reminder after a restart, and makes sure everything is ready to handle requests.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point with middleware setup, router registration and a
# lifespan that starts the service container (database, alarm scheduler, startup reminder
# reconciliation) and stops it on shutdown.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - app.shared.config.settings
# - app.shared.core.dependencies (service container)
# - app.api (middleware and v1 router)
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - python -m app.main
# - tests (create_application with a prepared container)

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from app.api.middleware import ErrorHandlingMiddleware, register_exception_handlers
from app.api.v1.router import api_v1_router
from app.shared.config.settings import Settings, get_settings
from app.shared.core.dependencies import ServiceContainer, build_container
from app.shared.utils.logging import (
    SERVICE_NAME,
    get_logger,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup opens the database, starts the alarm scheduler and reconciles
    stored reminder intent with live alarms. Shutdown reverses it.
    """
    container: ServiceContainer = app.state.container
    settings = container.settings

    setup_logging()
    logger.info("🌱 Plant Care API starting up...")

    try:
        report = await container.start()
    except Exception as e:
        logger.error(f"❌ Startup failed: {e}", exc_info=True)
        await container.stop()
        raise

    log_startup_event(SERVICE_NAME, settings.APP_VERSION, {"reconciliation": report})
    logger.info("✅ Plant Care API startup complete")

    try:
        yield
    finally:
        logger.info("🔄 Plant Care API shutting down...")
        await container.stop()
        log_shutdown_event(SERVICE_NAME)


def create_application(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Application factory function.

    Args:
        settings: Settings to use (defaults to environment settings)
        container: Pre-built service container; built from ``settings`` when omitted

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or (container.settings if container else get_settings())

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )
    app.state.container = container or build_container(settings)

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )
    # Added last so it wraps everything else
    app.add_middleware(ErrorHandlingMiddleware, settings=settings)

    register_exception_handlers(app)

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "docs_url": "/docs" if settings.DEBUG else None,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


def main():
    """
    Run the application in development.

    Used when running the application directly with python -m app.main.
    """
    settings = get_settings()
    uvicorn.run(
        "app.main:create_application",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
