# 📄 File: app/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# This file sets up a smart logging system that records what happens in the app in a structured way,
# so we can see when plants were added, when reminders were armed and when a reminder went off.

# 🧪 Purpose (Technical Summary):
# Implements structured logging with JSON formatting (python-json-logger), contextual
# correlation identifiers and a thin StructuredLogger wrapper that turns keyword arguments
# into extra fields.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: Correlation tracking across reminder firings and requests

# 🔄 Connected Modules / Calls From:
# Used by: All application modules for consistent logging, reminder scheduler,
# care coordinator, alarm backend, photo storage, API error handlers

import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from app.shared.config.settings import get_settings

# Context variable for correlating log lines (request id or reminder job id)
correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')

_logging_configured = False
_loggers_cache: Dict[str, "StructuredLogger"] = {}

SERVICE_NAME = 'pocket-plant-care'


class ContextualFormatter(logging.Formatter):
    """
    Plain-text formatter that adds contextual information to log records.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.hostname = os.uname().nodename if hasattr(os, 'uname') else 'unknown'

    def format(self, record):
        record.correlation_id = correlation_id_var.get('')
        record.hostname = self.hostname
        record.service = SERVICE_NAME
        record.timestamp = datetime.now(timezone.utc).isoformat()

        message = super().format(record)
        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            rendered = " ".join(f"{key}={value}" for key, value in extra_fields.items())
            message = f"{message} | {rendered}"
        return message


class JSONFormatter(JsonFormatter):
    """
    JSON formatter for structured logging.

    Emits one JSON object per line with a consistent envelope so the output
    can be fed straight into log aggregation tools.
    """

    def __init__(self):
        super().__init__('%(message)s', json_ensure_ascii=False)
        self.hostname = os.uname().nodename if hasattr(os, 'uname') else 'unknown'

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno
        log_record['service'] = SERVICE_NAME
        log_record['hostname'] = self.hostname

        correlation_id = correlation_id_var.get('')
        if correlation_id:
            log_record['correlation_id'] = correlation_id

        # extra_fields is nested so user keys never clash with LogRecord attributes
        extra_fields = log_record.pop('extra_fields', None)
        if extra_fields:
            log_record['extra'] = extra_fields


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger.

    Keyword arguments passed to the level methods become structured
    ``extra_fields`` on the record.
    """

    _PASSTHROUGH = ('exc_info', 'stack_info', 'stacklevel')

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.ERROR, message, extra, exc_info=exc_info, **kwargs)

    def critical(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.CRITICAL, message, extra, exc_info=exc_info, **kwargs)

    def log(self, level: int, message: str, extra: Dict = None, **kwargs):
        self._log(level, message, extra, **kwargs)

    def _log(self, level: int, message: str, extra: Dict = None, **kwargs):
        """Internal log method with extra fields handling."""
        extra_fields = dict(extra or {})

        for key, value in kwargs.items():
            if key not in self._PASSTHROUGH:
                extra_fields[key] = value

        clean_kwargs = {k: v for k, v in kwargs.items() if k in self._PASSTHROUGH}
        clean_kwargs.setdefault('stacklevel', 3)

        if extra_fields:
            clean_kwargs['extra'] = {'extra_fields': extra_fields}

        self.logger.log(level, message, **clean_kwargs)


def setup_logging(
    log_level: str = None,
    log_format: str = None,
    log_file: str = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Setup application logging configuration.

    Values not passed explicitly are read from settings. Calling this more
    than once is a no-op.
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger("startup")

    settings = get_settings()
    log_level = log_level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT
    log_file = log_file or settings.LOG_FILE

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format.lower() == 'json':
        formatter = JSONFormatter()
    else:
        formatter = ContextualFormatter('%(timestamp)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Third-party chatter
    logging.getLogger('apscheduler').setLevel(logging.WARNING)
    logging.getLogger('aiosqlite').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    _logging_configured = True
    return logging.getLogger("startup")


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        StructuredLogger instance
    """
    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = StructuredLogger(name)
    _loggers_cache[name] = logger
    return logger


@contextmanager
def log_context(correlation_id: Optional[str] = None):
    """
    Tag every log line emitted inside the block with a correlation id.

    A random id is generated when none is given.
    """
    if correlation_id is None:
        correlation_id = str(uuid4())

    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


def log_startup_event(service_name: str, version: str, extra: Dict[str, Any] = None):
    """Log application startup event."""
    logger = get_logger('startup')
    logger.info(
        f"Service {service_name} starting up",
        extra={
            'event_type': 'service_startup',
            'service_name': service_name,
            'version': version,
            **(extra or {})
        }
    )


def log_shutdown_event(service_name: str, extra: Dict[str, Any] = None):
    """Log application shutdown event."""
    logger = get_logger('shutdown')
    logger.info(
        f"Service {service_name} shutting down",
        extra={
            'event_type': 'service_shutdown',
            'service_name': service_name,
            **(extra or {})
        }
    )
