# pethub/services/__init__.py
"""
Data access to the collections owned by other PetHub services.
"""

from .record_repository import RecordRepository

__all__ = ['RecordRepository']
