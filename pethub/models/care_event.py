# pethub/models/care_event.py
from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class CareEvent:
    """
    A dated record read from one of the care collections
    (vet visit, meal, exercise session, adventure, grooming).
    The source documents are owned by other services and only read here.
    """
    date: date
    kind: str  # e.g. 'vaccination', 'checkup', 'meal', 'exercise', 'adventure', 'reminder', 'service'
    duration_minutes: int = 0
    calories: float = 0.0
    source: Optional[str] = None  # originating collection


@dataclass(frozen=True)
class FeedingSchedule:
    """Active feeding plan configured for a pet."""
    times_per_day: int
    is_active: bool = True
