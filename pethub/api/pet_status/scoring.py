# pethub/api/pet_status/scoring.py
"""
Pure scoring functions behind the pet status card.

Each scorer turns already-fetched records into a StatusBar for one day
(`today`). No I/O happens here, so the same records and the same day always
produce the same bars.

Labels and messages are Spanish product copy shown as-is by the frontend.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence, Tuple

from pethub.core.policy import DEFAULT_POLICY, NO_DATA_DAYS, ScoringPolicy
from pethub.models.care_event import CareEvent, FeedingSchedule
from pethub.models.pet_status import (
    PetMood, PetStatus, Priority, StatusBar, StatusDimension,
    StatusLevel, StatusRecommendation
)
from pethub.utils.datetime_utils import DateTimeUtils

EXCELLENT = StatusLevel.EXCELLENT
GOOD = StatusLevel.GOOD
WARNING = StatusLevel.WARNING
CRITICAL = StatusLevel.CRITICAL

# (status, label, message) for each entry of ScoringPolicy.health_steps
_HEALTH_BANDS = (
    (CRITICAL, 'Riesgo', 'No hay registros de salud en más de un año'),
    (WARNING, 'Atención', 'Última visita hace más de 6 meses'),
    (WARNING, 'Atención', 'Última visita hace más de 3 meses'),
    (GOOD, 'Bien', 'Salud al día'),
)
_HEALTH_DEFAULT = (EXCELLENT, 'Saludable', 'Todo está perfecto')

# (status, label, message) for each entry of ScoringPolicy.hygiene_steps
_HYGIENE_BANDS = (
    (CRITICAL, 'Muy atrasado', 'Sin grooming en más de 2 meses'),
    (WARNING, 'Necesita grooming', 'Último grooming hace más de un mes'),
    (WARNING, 'Necesita grooming', 'Considera agendar un grooming'),
    (GOOD, 'Limpio', 'Higiene en buen estado'),
)
_HYGIENE_DEFAULT = (EXCELLENT, 'Limpio', 'Higiene al día')

# Value below which decayed bars escalate: (critical, warning)
_NUTRITION_DECAY_BANDS = (50, 70)
_ENERGY_DECAY_BANDS = (40, 60)
_HYGIENE_DECAY_BANDS = (50, 70)

# action, marketplace link
_RECOMMENDATION_ACTIONS = {
    StatusDimension.HEALTH: ('Agendar visita veterinaria', '/marketplace?category=veterinaria'),
    StatusDimension.NUTRITION: ('Comprar alimento o registrar comida', '/marketplace?category=productos'),
    StatusDimension.ENERGY: ('Registrar paseo o actividad', '/adventure-log'),
    StatusDimension.HYGIENE: ('Agendar servicio de grooming', '/marketplace?category=grooming'),
}


def round_half_up(value) -> int:
    """Rounds .5 away from zero, unlike the built-in round()."""
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def latest_event(events: Iterable[CareEvent], today: date) -> Tuple[Optional[date], int]:
    """
    Date of the newest event and whole days since it.

    No events gives (None, NO_DATA_DAYS). Future-dated events count as today.
    """
    newest = max((e.date for e in events), default=None)
    if newest is None:
        return None, NO_DATA_DAYS
    return newest, max(0, DateTimeUtils.days_between(newest, today))


def _within(event: CareEvent, today: date, days: int) -> bool:
    return DateTimeUtils.days_between(event.date, today) < days


def _step_band(days: int, steps, bands, default):
    for (threshold, value), band in zip(steps, bands):
        if days > threshold:
            return (value,) + band
    return (100,) + default


def _escalate(value: int, status: StatusLevel, bands: Tuple[int, int]) -> StatusLevel:
    critical_below, warning_below = bands
    if value < critical_below:
        return CRITICAL
    if value < warning_below:
        return WARNING
    return status


def score_health(events: Sequence[CareEvent], today: date,
                 policy: ScoringPolicy = DEFAULT_POLICY) -> StatusBar:
    """
    Health from vet visits and health records.

    Steps down with the age of the last visit; without a recent vaccination
    the value loses a further penalty (never below the penalty floor).
    """
    last_update, days = latest_event(events, today)
    value, status, label, message = _step_band(days, policy.health_steps, _HEALTH_BANDS, _HEALTH_DEFAULT)

    recently_vaccinated = any(
        e.kind == 'vaccination' and _within(e, today, policy.vaccination_window_days)
        for e in events
    )
    if not recently_vaccinated and days <= policy.vaccination_check_max_days:
        value = max(policy.vaccination_penalty_floor, value - policy.vaccination_penalty)
        if value < 70:
            status = WARNING
        message = 'Considera revisar el calendario de vacunación'

    return StatusBar(
        value=value, status=status, label=label, message=message,
        last_update=last_update, days_since_last_update=days
    )


def meal_compliance(meals: Sequence[CareEvent], schedules: Sequence[FeedingSchedule],
                    today: date, policy: ScoringPolicy = DEFAULT_POLICY) -> float:
    """Meals logged this week as a percentage of the meals the schedules expect."""
    per_day = sum(s.times_per_day for s in schedules if s.is_active) or policy.default_meals_per_day
    expected = per_day * policy.week_days
    actual = sum(1 for m in meals if _within(m, today, policy.week_days))
    if expected > 0:
        return actual / expected * 100
    return 50.0 if actual > 0 else 0.0


def score_nutrition(meals: Sequence[CareEvent], schedules: Sequence[FeedingSchedule],
                    today: date, policy: ScoringPolicy = DEFAULT_POLICY) -> StatusBar:
    last_update, days = latest_event(meals, today)
    compliance = meal_compliance(meals, schedules, today, policy)

    if days > policy.meal_critical_after_days:
        value, status, label, message = 30, CRITICAL, 'Falta alimentación', 'No hay registros de comida en varios días'
    elif days > policy.meal_warning_after_days:
        value, status, label, message = 60, WARNING, 'Ajustar dieta', 'Última comida hace más de un día'
    elif compliance < policy.compliance_warning_pct:
        value, status, label, message = 65, WARNING, 'Ajustar dieta', 'Baja frecuencia de comidas registradas'
    elif compliance < policy.compliance_good_pct:
        value, status, label, message = 80, GOOD, 'Bien alimentado', 'Buena regularidad en las comidas'
    else:
        value, status, label, message = 100, EXCELLENT, 'Bien alimentado', 'Nutrición óptima'

    if days >= 1:
        value = max(policy.nutrition_floor, value - policy.nutrition_decay_per_day * days)
        status = _escalate(value, status, _NUTRITION_DECAY_BANDS)

    return StatusBar(
        value=value, status=status, label=label, message=message,
        last_update=last_update, days_since_last_update=days
    )


def weekly_activity_minutes(activities: Sequence[CareEvent], today: date,
                            policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    return sum(a.duration_minutes for a in activities if _within(a, today, policy.week_days))


def score_energy(activities: Sequence[CareEvent], today: date,
                 policy: ScoringPolicy = DEFAULT_POLICY) -> StatusBar:
    """
    Energy from exercise sessions and adventures.

    Weekly minutes against the weekly target give the activity score, which
    is then cut by staleness and by a per-day decay. The value never goes
    below the energy floor, and a value under 40 is critical on any day.
    """
    last_update, days = latest_event(activities, today)
    minutes = weekly_activity_minutes(activities, today, policy)
    activity_score = min(100, round_half_up(minutes / policy.weekly_activity_target_minutes * 100))

    critical_below = _ENERGY_DECAY_BANDS[0]
    value = max(policy.energy_floor, activity_score)
    if days > policy.activity_critical_after_days:
        value = max(policy.energy_floor, activity_score - policy.activity_critical_penalty)
        status, label, message = CRITICAL, 'Sedentario', 'Sin actividad registrada en más de una semana'
    elif days > policy.activity_warning_after_days:
        value = max(policy.activity_warning_floor, activity_score - policy.activity_warning_penalty)
        status, label, message = WARNING, 'Bajo nivel', 'Última actividad hace varios días'
    elif value < critical_below:
        status, label, message = CRITICAL, 'Sedentario', 'Muy poca actividad esta semana'
    elif activity_score < 50:
        status, label, message = WARNING, 'Bajo nivel', 'Poca actividad esta semana'
    elif activity_score < 80:
        status, label, message = GOOD, 'Activo', 'Buena actividad semanal'
    else:
        status, label, message = EXCELLENT, 'Activo', 'Excelente nivel de actividad'

    if days >= 1:
        value = max(policy.energy_floor, value - policy.energy_decay_per_day * days)
        status = _escalate(value, status, _ENERGY_DECAY_BANDS)

    return StatusBar(
        value=value, status=status, label=label, message=message,
        last_update=last_update, days_since_last_update=days
    )


def score_hygiene(events: Sequence[CareEvent], today: date,
                  policy: ScoringPolicy = DEFAULT_POLICY) -> StatusBar:
    last_update, days = latest_event(events, today)
    value, status, label, message = _step_band(days, policy.hygiene_steps, _HYGIENE_BANDS, _HYGIENE_DEFAULT)

    if days >= policy.hygiene_decay_start_days:
        value = max(policy.hygiene_floor, value - policy.hygiene_decay_per_day * days)
        status = _escalate(value, status, _HYGIENE_DECAY_BANDS)

    return StatusBar(
        value=value, status=status, label=label, message=message,
        last_update=last_update, days_since_last_update=days
    )


def wellbeing_value(health: int, nutrition: int, energy: int, hygiene: int,
                    policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    """Weighted composite, rounded half up. Decimal keeps .5 cases exact."""
    weights = policy.wellbeing_weights
    total = (
        Decimal(str(weights.health)) * health
        + Decimal(str(weights.nutrition)) * nutrition
        + Decimal(str(weights.energy)) * energy
        + Decimal(str(weights.hygiene)) * hygiene
    )
    return round_half_up(total)


def score_wellbeing(health: StatusBar, nutrition: StatusBar, energy: StatusBar,
                    hygiene: StatusBar, policy: ScoringPolicy = DEFAULT_POLICY) -> StatusBar:
    value = wellbeing_value(health.value, nutrition.value, energy.value, hygiene.value, policy)

    if value < 40:
        status, label, message = CRITICAL, 'Descuidado', 'Necesita atención en varias áreas'
    elif value < 60:
        status, label, message = WARNING, 'Aburrido', 'Algunas áreas necesitan atención'
    elif value < 80:
        status, label, message = GOOD, 'Contento', 'Bienestar general bueno'
    else:
        status, label, message = EXCELLENT, 'Feliz', 'Todo está perfecto'

    return StatusBar(value=value, status=status, label=label, message=message)


def recommend(status: PetStatus) -> List[StatusRecommendation]:
    """
    One recommendation per dimension in warning or critical state.

    Critical bars give high priority, warning bars medium. The list is sorted
    by descending priority; ties keep the health, nutrition, energy, hygiene
    order.
    """
    recommendations = []
    for dimension, bar in status.bars():
        if dimension not in _RECOMMENDATION_ACTIONS or not bar.status.needs_attention:
            continue
        action, link = _RECOMMENDATION_ACTIONS[dimension]
        recommendations.append(StatusRecommendation(
            type=dimension,
            message=bar.message,
            action=action,
            marketplace_link=link,
            priority=Priority.HIGH if bar.status is CRITICAL else Priority.MEDIUM
        ))
    # sorted() is stable, so equal priorities keep emission order
    return sorted(recommendations, key=lambda r: r.priority.weight, reverse=True)


def pet_mood(status: PetStatus) -> PetMood:
    """Average of the five bars mapped to the mood shown on the avatar."""
    bars = [bar for _, bar in status.bars()]
    average = sum(bar.value for bar in bars) / len(bars)

    if average >= 80:
        return PetMood(average=average, text='Feliz y saludable', emoji='😊')
    if average >= 60:
        return PetMood(average=average, text='Neutral', emoji='😐')
    if average >= 40:
        return PetMood(average=average, text='Necesita atención', emoji='😔')
    return PetMood(average=average, text='Descuidado', emoji='😢')
