# 📄 File: app/modules/plant_management/domain/repositories/__init__.py
# 🧭 Purpose (Layman Explanation): 
# Holds the promise of how plants can be saved and looked up, without saying which database is used
# 🧪 Purpose (Technical Summary): 
# Package initialization exporting the PlantRepository interface
# 🔗 Dependencies: 
# plant_repository.py
# 🔄 Connected Modules / Calls From: 
# Coordinator, infrastructure implementation

from .plant_repository import PlantRepository

__all__ = ["PlantRepository"]
