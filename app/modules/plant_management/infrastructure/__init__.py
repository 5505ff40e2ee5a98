# 📄 File: app/modules/plant_management/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation): 
# Holds the real-world plumbing for plants: the database, the alarm clock and the alert tray
# 🧪 Purpose (Technical Summary): 
# Infrastructure layer: SQLAlchemy persistence, APScheduler alarm backend, in-memory notification sink
# 🔗 Dependencies: 
# SQLAlchemy, APScheduler, domain contracts
# 🔄 Connected Modules / Calls From: 
# Service container (app.shared.core.dependencies)
