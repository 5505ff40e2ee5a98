# 📄 File: app/modules/plant_management/domain/models/__init__.py
# 🧭 Purpose (Layman Explanation): 
# Holds the description of what we remember about each plant
# 🧪 Purpose (Technical Summary): 
# Package initialization for domain models exporting the PlantRecord entity
# 🔗 Dependencies: 
# plant.py
# 🔄 Connected Modules / Calls From: 
# Repositories, coordinator, API schemas

from .plant import PlantRecord, DEFAULT_REMINDER_HOUR, DEFAULT_REMINDER_MINUTE

__all__ = ["PlantRecord", "DEFAULT_REMINDER_HOUR", "DEFAULT_REMINDER_MINUTE"]
