# pethub/models/pet_status.py
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class StatusLevel(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def needs_attention(self) -> bool:
        return self in (StatusLevel.WARNING, StatusLevel.CRITICAL)


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class StatusDimension(Enum):
    HEALTH = "health"
    NUTRITION = "nutrition"
    ENERGY = "energy"
    HYGIENE = "hygiene"
    WELLBEING = "wellbeing"


def clamp_score(value: float) -> int:
    """Rounds half up and clamps into [0, 100]."""
    return max(0, min(100, int(value + 0.5) if value >= 0 else 0))


@dataclass(frozen=True)
class StatusBar:
    """
    One 0-100 bar of the pet status card.

    value is always clamped to [0, 100]. status is derived by the scorer from
    value and recency and is never set on its own.
    """
    value: int
    status: StatusLevel
    label: str
    message: str
    last_update: Optional[date] = None
    days_since_last_update: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'value', clamp_score(self.value))


@dataclass(frozen=True)
class PetStatus:
    """The five bars shown on the pet status card."""
    health: StatusBar
    nutrition: StatusBar
    energy: StatusBar
    hygiene: StatusBar
    wellbeing: StatusBar

    def bars(self):
        """(dimension, bar) pairs in display order."""
        return [
            (StatusDimension.HEALTH, self.health),
            (StatusDimension.NUTRITION, self.nutrition),
            (StatusDimension.ENERGY, self.energy),
            (StatusDimension.HYGIENE, self.hygiene),
            (StatusDimension.WELLBEING, self.wellbeing),
        ]


@dataclass(frozen=True)
class StatusRecommendation:
    """An action suggested for a dimension in warning or critical state. Never persisted."""
    type: StatusDimension
    message: str
    action: str
    priority: Priority
    marketplace_link: Optional[str] = None


@dataclass(frozen=True)
class PetMood:
    """Overall mood shown next to the pet avatar."""
    average: float
    text: str
    emoji: str
