# 📄 File: app/modules/plant_management/infrastructure/database/__init__.py
# 🧭 Purpose (Layman Explanation): 
# The part that reads and writes plants in the database file
# 🧪 Purpose (Technical Summary): 
# Exports the plants ORM model and the SQLAlchemy PlantRepository implementation
# 🔗 Dependencies: 
# models.py, plant_repository_impl.py
# 🔄 Connected Modules / Calls From: 
# Service container, Alembic env, DatabaseConnectionManager.create_schema

from .models import PlantModel
from .plant_repository_impl import PlantRepositoryImpl

__all__ = ["PlantModel", "PlantRepositoryImpl"]
