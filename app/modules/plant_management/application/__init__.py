# 📄 File: app/modules/plant_management/application/__init__.py
# 🧭 Purpose (Layman Explanation): 
# The use cases of the plant tracker: add, edit, water, delete plants and manage their reminders
# 🧪 Purpose (Technical Summary): 
# Application layer exporting the CareCoordinator and its reconciliation report
# 🔗 Dependencies: 
# coordinator.py
# 🔄 Connected Modules / Calls From: 
# Presentation layer, service container, app.main

from .coordinator import CareCoordinator, ReconciliationReport

__all__ = ["CareCoordinator", "ReconciliationReport"]
