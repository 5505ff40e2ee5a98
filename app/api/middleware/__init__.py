# 📄 File: app/api/middleware/__init__.py
# 🧭 Purpose (Layman Explanation): 
# This file organizes the helpers that sit in front of every API call, giving each request an id
# and turning errors into tidy answers.
# 🧪 Purpose (Technical Summary): 
# Package initialization for API middleware components: request correlation, error envelope
# and exception handler registration.
# 🔗 Dependencies: 
# FastAPI middleware components, app.shared.core
# 🔄 Connected Modules / Calls From: 
# app.main.py, FastAPI application setup, middleware registration

"""
Plant Care Application API Middleware Package

Usage:
    from app.api.middleware import ErrorHandlingMiddleware, register_exception_handlers

    app.add_middleware(ErrorHandlingMiddleware)
    register_exception_handlers(app)
"""

from .error_handling import (
    ErrorHandlingMiddleware,
    create_error_response,
    register_exception_handlers,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "create_error_response",
    "register_exception_handlers",
]
