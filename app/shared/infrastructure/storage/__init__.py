# 📄 File: app/shared/infrastructure/storage/__init__.py

# 🧭 Purpose (Layman Explanation):
# The storage package keeps plant photos on the local disk.

# 🧪 Purpose (Technical Summary):
# Exports the local photo file manager.

# 🔗 Dependencies:
# - file_manager: Photo storage

# 🔄 Connected Modules / Calls From:
# Service container, care coordinator, plants API

from .file_manager import PhotoFileManager

__all__ = ['PhotoFileManager']
