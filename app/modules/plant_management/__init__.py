# 📄 File: app/modules/plant_management/__init__.py
# 🧭 Purpose (Layman Explanation): 
# Organizes everything about a user's plants: saving them, their photos, watering history and the daily watering reminders
# 🧪 Purpose (Technical Summary): 
# Package initialization for the plant management module: plant records, reminder scheduling subsystem, notification presentation and the care coordinator
# 🔗 Dependencies: 
# FastAPI, SQLAlchemy, APScheduler, pydantic, app.shared
# 🔄 Connected Modules / Calls From: 
# app.main.py, app.shared.core.dependencies, app.api.v1.router

"""
Plant Management Module

Architecture follows Domain-Driven Design:
- Domain: PlantRecord, repository contract, reminder scheduler, alarm contracts, notification presenter
- Application: Care coordinator orchestrating records, reminders and photos
- Infrastructure: SQLite persistence, APScheduler alarm backend, in-memory notification center
- Presentation: Plant and reminder API endpoints
"""

__version__ = "1.0.0"
__module_name__ = "plant_management"
