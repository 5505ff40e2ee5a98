# 📄 File: app/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types our Plant Care app uses to communicate
# what went wrong in a clear, organized way instead of generic error messages.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error codes and details rendered by the API error handlers and the coordinator's error slot.
# 🔗 Dependencies:
# FastAPI HTTP status constants, typing
# 🔄 Connected Modules / Calls From:
# Care coordinator, reminder scheduler, repositories, photo storage, API error handlers

from typing import Any, Dict, Optional
from fastapi import status


class PlantCareException(Exception):
    """
    Base exception class for Plant Care Application.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(PlantCareException):
    """
    Exception raised for data validation failures.
    Used when input data doesn't meet validation requirements.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class NotFoundError(PlantCareException):
    """
    Exception raised when requested resource is not found.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


class PlantNotFoundError(NotFoundError):
    """
    Exception raised when plant is not found.
    Specialized NotFoundError for plant resources.
    """

    def __init__(self, plant_id: int, message: Optional[str] = None):
        if not message:
            message = f"Plant not found: {plant_id}"

        super().__init__(
            message=message,
            resource_type="plant",
            resource_id=str(plant_id),
            details={"plant_id": plant_id}
        )


# =============================================================================
# REMINDER SCHEDULING EXCEPTIONS
# =============================================================================

class AlarmPermissionError(PlantCareException):
    """
    Raised by an alarm backend when precise scheduling is not permitted.
    The reminder scheduler treats it as a signal to degrade, never as a failure.
    """

    def __init__(
        self,
        message: str = "Exact alarm scheduling is not permitted",
        permission: str = "schedule_exact_alarm",
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        details["permission"] = permission

        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
            error_code="ALARM_PERMISSION_DENIED"
        )


class ReminderSchedulingError(PlantCareException):
    """
    Exception raised when an alarm registration fails unexpectedly.
    """

    def __init__(
        self,
        message: str = "Reminder scheduling failed",
        plant_id: Optional[int] = None,
        strategy: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if plant_id is not None:
            details["plant_id"] = plant_id
        if strategy:
            details["strategy"] = strategy

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            error_code="REMINDER_SCHEDULING_ERROR"
        )


# =============================================================================
# DATABASE & INFRASTRUCTURE EXCEPTIONS
# =============================================================================

class DatabaseError(PlantCareException):
    """
    Exception raised for database operation failures.
    Used for connection issues, query failures, etc.
    """

    def __init__(
        self,
        message: str = "Database error",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="DATABASE_ERROR"
        )


class RepositoryError(PlantCareException):
    """
    Exception raised for repository/database operation failures.
    Used when database operations fail at the repository layer.
    """

    def __init__(
        self,
        message: str = "Repository operation failed",
        operation: Optional[str] = None,
        entity: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if entity:
            details["entity"] = entity

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="REPOSITORY_ERROR"
        )


class TransactionError(PlantCareException):
    """
    Exception raised when a database transaction fails.
    Used to wrap commit/rollback errors in DB sessions.
    """

    def __init__(
        self,
        message: str = "Database transaction failed",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="TRANSACTION_ERROR"
        )


# =============================================================================
# FILE EXCEPTIONS
# =============================================================================

class FileStorageError(PlantCareException):
    """
    Exception raised for file storage operation failures.
    """

    def __init__(
        self,
        message: str = "File storage error",
        operation: Optional[str] = None,
        storage_path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if storage_path:
            details["storage_path"] = storage_path

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="FILE_STORAGE_ERROR"
        )


class FileTooLargeError(PlantCareException):
    """Uploaded photo exceeds the configured size limit."""

    def __init__(
        self,
        message: str = "File too large",
        file_size: Optional[int] = None,
        max_size: Optional[int] = None
    ):
        details = {}
        if file_size is not None:
            details["file_size"] = file_size
        if max_size is not None:
            details["max_size"] = max_size

        super().__init__(
            message=message,
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            details=details,
            error_code="FILE_TOO_LARGE"
        )


class InvalidFileTypeError(PlantCareException):
    """Photo payload is not a supported image."""

    def __init__(
        self,
        message: str = "Invalid file type",
        file_type: Optional[str] = None,
        allowed_types: Optional[list] = None
    ):
        details = {}
        if file_type:
            details["file_type"] = file_type
        if allowed_types:
            details["allowed_types"] = allowed_types

        super().__init__(
            message=message,
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            details=details,
            error_code="INVALID_FILE_TYPE"
        )
