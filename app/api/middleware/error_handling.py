# 📄 File: app/api/middleware/error_handling.py
# 🧭 Purpose (Layman Explanation):
# This file catches any errors that happen in our app and turns them into friendly, consistent error messages,
# and stamps every request with an id so its log lines can be found together.
# 🧪 Purpose (Technical Summary):
# Global error handling: a request-correlation middleware that converts unhandled exceptions into
# JSON 500 responses, plus FastAPI exception handlers mapping PlantCareException subclasses and
# request validation failures to a single error envelope.
# 🔗 Dependencies:
# FastAPI, starlette, app.shared.core.exceptions, app.shared.utils.logging, uuid
# 🔄 Connected Modules / Calls From:
# app.main.py (middleware and handler registration), all API endpoints

import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.shared.config.settings import Settings, get_settings
from app.shared.core.exceptions import PlantCareException
from app.shared.utils.logging import get_logger, log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Request correlation and last-resort error handling.

    Every request runs inside ``log_context`` with its request id, so log
    records emitted while handling it carry the same correlation id.
    Exceptions not handled by the registered exception handlers become
    a generic 500 response.
    """

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        with log_context(request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    f"Server error in {request.method} {request.url.path}: {exc}",
                    method=request.method,
                    path=request.url.path,
                    exc_info=True,
                )
                response = create_error_response(
                    "INTERNAL_SERVER_ERROR",
                    "An internal server error occurred",
                    status_code=500,
                    details=self._debug_details(exc),
                    request_id=request_id,
                    path=request.url.path,
                )

            elapsed = time.perf_counter() - started
            logger.debug(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(elapsed * 1000, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"
        return response

    def _debug_details(self, exc: Exception) -> Dict[str, Any]:
        if not self.settings.DEBUG or self.settings.is_production:
            return {}
        return {
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
            "traceback": traceback.format_exc().split("\n"),
        }


def create_error_response(
    error_code: str,
    message: str,
    status_code: int = 500,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    path: Optional[str] = None,
) -> JSONResponse:
    """
    Create a standardized error response

    Args:
        error_code: Error code identifier
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional error details
        request_id: Request correlation ID
        path: Request path

    Returns:
        JSON error response
    """
    error = {
        "code": error_code,
        "message": message,
        "details": details or {},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if request_id:
        error["request_id"] = request_id
    if path:
        error["path"] = path

    response = JSONResponse(status_code=status_code, content={"error": error})
    response.headers["X-Error-Code"] = error_code
    return response


async def plant_care_exception_handler(request: Request, exc: PlantCareException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}", path=request.url.path, error_code=exc.error_code)
    else:
        logger.info(f"Client error: {exc.message}", path=request.url.path, error_code=exc.error_code)

    return create_error_response(
        exc.error_code,
        exc.message,
        status_code=exc.status_code,
        details=exc.details,
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    validation_errors = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "validation_error"),
        }
        for error in exc.errors()
    ]
    logger.info("Request validation failed", path=request.url.path, errors=len(validation_errors))

    return create_error_response(
        "VALIDATION_ERROR",
        "Request validation failed",
        status_code=422,
        details={"validation_errors": validation_errors},
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PlantCareException, plant_care_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
