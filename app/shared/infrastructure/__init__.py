"""
Infrastructure layer package for Plant Care Application.
Provides the database engine/session managers and local photo storage.
"""
