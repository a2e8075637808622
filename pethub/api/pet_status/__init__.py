# pethub/api/pet_status/__init__.py
"""
Pet status card: five 0-100 bars (health, nutrition, energy, hygiene,
wellbeing), recommendations and mood, computed from the care records.
"""

from .routes import pet_status_bp
from .services import PetStatusService

__all__ = ['pet_status_bp', 'PetStatusService']
