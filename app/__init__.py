# 📄 File: app/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this 'app' folder contains our Plant Care application code
# and holds the basic version and package information.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version metadata for the plant tracker
# and its reminder scheduling service.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - main.py (application entry point)
# - pyproject.toml (version)

"""
Pocket Plant Care - personal plant tracker with daily watering reminders.
"""

__version__ = "1.0.0"
__title__ = "Pocket Plant Care"
__description__ = "Personal plant tracker with daily watering reminders"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__license__",
]
