# pethub/models/__init__.py
from .care_event import CareEvent, FeedingSchedule
from .pet_status import (
    StatusLevel, Priority, StatusDimension,
    StatusBar, PetStatus, StatusRecommendation, PetMood,
    clamp_score
)

__all__ = [
    'CareEvent', 'FeedingSchedule',
    'StatusLevel', 'Priority', 'StatusDimension',
    'StatusBar', 'PetStatus', 'StatusRecommendation', 'PetMood',
    'clamp_score'
]
