# 📄 File: app/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# This file sets up a collection of helpful tools that other parts of the app
# can use for logging, date formatting and time handling.

# 🧪 Purpose (Technical Summary):
# Initializes the utilities package with structured logging, date formatters
# and clock helpers used across the Plant Care application.

# 🔗 Dependencies:
# - logging: Structured logging utilities
# - formatters: Date formatting utilities
# - helpers: Clock and path helpers

# 🔄 Connected Modules / Calls From:
# Used by: All application modules

from .logging import get_logger, setup_logging, log_context
from .formatters import format_date, format_full_datetime, format_time, relative_time_description
from .helpers import utc_now, to_epoch_millis, from_epoch_millis, ensure_directory

__all__ = [
    'get_logger',
    'setup_logging',
    'log_context',
    'format_date',
    'format_full_datetime',
    'format_time',
    'relative_time_description',
    'utc_now',
    'to_epoch_millis',
    'from_epoch_millis',
    'ensure_directory',
]
