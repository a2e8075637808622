# pethub/utils/__init__.py
"""
Helpers shared across the PetHub backend.
"""

from .datetime_utils import DateTimeUtils

__all__ = ['DateTimeUtils']
