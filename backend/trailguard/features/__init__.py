"""
Feature modules for TrailGuard.

Each feature is a self-contained module with:
- models.py - Domain dataclasses
- schemas.py - Pydantic schemas
- service.py - Orchestration (optional)
"""
