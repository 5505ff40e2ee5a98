# 📄 File: app/shared/events/__init__.py

# 🧭 Purpose (Layman Explanation):
# Sets up the "watch for changes" tools that keep plant lists and screens up to date.

# 🧪 Purpose (Technical Summary):
# Exports the change tracker, query stream helper and observable state holder.

# 🔗 Dependencies:
# - stream: Change tracking and async streams

# 🔄 Connected Modules / Calls From:
# Plant repository, care coordinator

from .stream import ChangeTracker, StateFlow, observe_query

__all__ = [
    'ChangeTracker',
    'StateFlow',
    'observe_query',
]
