# 📄 File: app/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a Python package containing common tools
# that all parts of our Plant Care app can use, like the database and logging.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, infrastructure, reactive streams
# and cross-cutting concerns used by the plant management module.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - All application modules importing shared utilities

__all__ = []
