# 📄 File: app/shared/utils/formatters.py

# 🧭 Purpose (Layman Explanation):
# Turns dates and times into friendly text like "09:30", "17/03/2025" or
# "Yesterday" so plant details and reminders read naturally.

# 🧪 Purpose (Technical Summary):
# Fixed-pattern date/time formatting (day-first) and a day-granular relative
# description used by API responses and reminder notification text.

# 🔗 Dependencies:
# - datetime: Date and time formatting

# 🔄 Connected Modules / Calls From:
# Used by: Plant API schemas (last watered labels), notification presenter (reminder time)

from datetime import datetime, time, timezone
from typing import Optional

FULL_DATE_TIME_PATTERN = "%d/%m/%Y %H:%M:%S"
TIME_PATTERN = "%H:%M"
DATE_PATTERN = "%d/%m/%Y"


def format_full_datetime(dt: datetime) -> str:
    """Format as ``dd/MM/yyyy HH:mm:ss``."""
    return dt.strftime(FULL_DATE_TIME_PATTERN)


def format_time(hour: int, minute: int) -> str:
    """Format a reminder time as a zero-padded 24-hour ``HH:MM`` string."""
    return time(hour=hour, minute=minute).strftime(TIME_PATTERN)


def format_date(dt: datetime) -> str:
    """Format as ``dd/MM/yyyy``."""
    return dt.strftime(DATE_PATTERN)


def relative_time_description(dt: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how long ago ``dt`` was, in whole days.

    Args:
        dt: Past datetime to describe
        now: Reference datetime (defaults to the current UTC time)

    Returns:
        "Today", "Yesterday", "N days ago", "N weeks ago", "N months ago"
        or "N years ago". Future values count as "Today".
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if dt.tzinfo is None and now.tzinfo is not None:
        dt = dt.replace(tzinfo=timezone.utc)
    elif dt.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff_days = int((now - dt).total_seconds() // 86400)

    if diff_days <= 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    if diff_days < 30:
        return f"{diff_days // 7} weeks ago"
    if diff_days < 365:
        return f"{diff_days // 30} months ago"
    return f"{diff_days // 365} years ago"


__all__ = [
    'format_full_datetime',
    'format_time',
    'format_date',
    'relative_time_description',
]
