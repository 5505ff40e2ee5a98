# 📄 File: app/shared/utils/helpers.py

# 🧭 Purpose (Layman Explanation):
# Small helpful tools used all over the app, like getting the current time
# and turning dates into plain numbers so they can be saved in the database.

# 🧪 Purpose (Technical Summary):
# Clock helpers (UTC now truncated to storage precision), epoch-millisecond
# conversion used by the persistence layer, and filesystem helpers.

# 🔗 Dependencies:
# - datetime: Timestamp handling
# - pathlib: Directory creation

# 🔄 Connected Modules / Calls From:
# Used by: Plant repository (epoch millis columns), care coordinator (clock),
# photo file manager (directory creation)

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Union

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """
    Current UTC time truncated to milliseconds.

    Stored timestamps are epoch millis, so truncating here keeps a value read
    back from the database equal to the one that was written.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def to_epoch_millis(dt: datetime) -> int:
    """Convert an aware (or naive UTC) datetime to integer epoch milliseconds."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def from_epoch_millis(value: int) -> datetime:
    """Convert epoch milliseconds back to an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


# File and path utilities
def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure directory exists, create if it doesn't.

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path_obj = Path(path)
    path_obj.mkdir(parents=True, exist_ok=True)
    return path_obj
