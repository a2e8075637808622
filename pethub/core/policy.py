# pethub/core/policy.py
"""
Scoring policy for the pet status bars.

None of these numbers has a derivation behind it; they are product policy and
can be overridden per deployment by building a different ScoringPolicy.
Step tables are (days threshold, value) pairs checked from the stalest band
down: the first threshold the staleness exceeds sets the value.
"""

from dataclasses import dataclass, field
from typing import Tuple

# Days-since value used when a dimension has never been recorded.
NO_DATA_DAYS = 999


@dataclass(frozen=True)
class WellbeingWeights:
    """Share of each dimension in the wellbeing composite; sums to 1."""
    health: float = 0.30
    nutrition: float = 0.25
    energy: float = 0.25
    hygiene: float = 0.20


@dataclass(frozen=True)
class ScoringPolicy:
    week_days: int = 7
    # Records fetched per source when no date window applies.
    history_limit: int = 10

    # Health
    health_steps: Tuple[Tuple[int, int], ...] = ((365, 30), (180, 50), (90, 70), (30, 85))
    vaccination_window_days: int = 90
    # The missing-vaccination penalty only applies up to this staleness.
    vaccination_check_max_days: int = 180
    vaccination_penalty: int = 10
    vaccination_penalty_floor: int = 60

    # Nutrition
    nutrition_window_days: int = 30
    default_meals_per_day: int = 2
    meal_critical_after_days: int = 3
    meal_warning_after_days: int = 1
    compliance_warning_pct: float = 50.0
    compliance_good_pct: float = 80.0
    nutrition_decay_per_day: int = 10
    nutrition_floor: int = 30

    # Energy
    activity_window_days: int = 30
    weekly_activity_target_minutes: int = 150
    activity_critical_after_days: int = 7
    activity_warning_after_days: int = 3
    activity_critical_penalty: int = 30
    activity_warning_penalty: int = 20
    activity_warning_floor: int = 40
    energy_decay_per_day: int = 5
    energy_floor: int = 20

    # Hygiene
    hygiene_steps: Tuple[Tuple[int, int], ...] = ((60, 30), (30, 50), (14, 70), (7, 85))
    hygiene_decay_start_days: int = 7
    hygiene_decay_per_day: int = 2
    hygiene_floor: int = 30

    # Wellbeing composite
    wellbeing_weights: WellbeingWeights = field(default_factory=WellbeingWeights)


DEFAULT_POLICY = ScoringPolicy()
