# 📄 File: app/modules/plant_management/presentation/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation): 
# Version 1 of the plant and reminder web endpoints
# 🧪 Purpose (Technical Summary): 
# v1 router exports for plant CRUD and reminder control
# 🔗 Dependencies: 
# plants.py, reminders.py
# 🔄 Connected Modules / Calls From: 
# app.api.v1.router

from .plants import plants_router
from .reminders import reminders_router

__all__ = ["plants_router", "reminders_router"]
