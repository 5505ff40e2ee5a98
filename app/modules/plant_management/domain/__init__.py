# 📄 File: app/modules/plant_management/domain/__init__.py
# 🧭 Purpose (Layman Explanation): 
# Organizes the core rules about plants and reminders - what a plant record holds and how a reminder time becomes an alarm
# 🧪 Purpose (Technical Summary): 
# Domain layer initialization containing the plant entity, repository interface and reminder/notification domain services
# 🔗 Dependencies: 
# Domain models, services, repositories from subpackages
# 🔄 Connected Modules / Calls From: 
# Application layer, Infrastructure layer, Presentation layer
