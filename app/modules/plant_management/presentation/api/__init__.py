# 📄 File: app/modules/plant_management/presentation/api/__init__.py
# 🧭 Purpose (Layman Explanation): 
# Collects the plant and reminder web endpoints
# 🧪 Purpose (Technical Summary): 
# API package exposing the plant management routers
# 🔗 Dependencies: 
# app.modules.plant_management.presentation.api.v1
# 🔄 Connected Modules / Calls From: 
# app.api.v1.router

from .v1 import plants_router, reminders_router

__all__ = ["plants_router", "reminders_router"]
