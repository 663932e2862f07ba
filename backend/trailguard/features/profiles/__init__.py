"""
User fitness profile module.

Usage:
    from trailguard.features.profiles import UserFitnessProfile, EmergencyContact
"""
from .schemas import EmergencyContact, UserFitnessProfile

__all__ = [
    "EmergencyContact",
    "UserFitnessProfile",
]
