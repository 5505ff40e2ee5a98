"""
Core utilities package for Plant Care Application.
Provides the exception hierarchy and service wiring.
"""

from .exceptions import (
    PlantCareException,
    ValidationError,
    NotFoundError,
    PlantNotFoundError,
    AlarmPermissionError,
    ReminderSchedulingError,
    DatabaseError,
    RepositoryError,
    TransactionError,
    FileStorageError,
    FileTooLargeError,
    InvalidFileTypeError,
)

__all__ = [
    "PlantCareException",
    "ValidationError",
    "NotFoundError",
    "PlantNotFoundError",
    "AlarmPermissionError",
    "ReminderSchedulingError",
    "DatabaseError",
    "RepositoryError",
    "TransactionError",
    "FileStorageError",
    "FileTooLargeError",
    "InvalidFileTypeError",
]
