"""
Feature modules for Workout Map.

Each feature is a self-contained module with:
- models.py - Domain models
- schemas.py - Pydantic schemas (optional)
- service.py - Business logic (optional)
"""
