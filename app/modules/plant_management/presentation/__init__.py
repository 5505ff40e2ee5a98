# 📄 File: app/modules/plant_management/presentation/__init__.py
# 🧭 Purpose (Layman Explanation): 
# The part of the plant module that the outside world talks to over HTTP
# 🧪 Purpose (Technical Summary): 
# Presentation layer package: API schemas and v1 routers for plants and reminders
# 🔗 Dependencies: 
# FastAPI, pydantic
# 🔄 Connected Modules / Calls From: 
# app.api.v1.router
