# pethub/api/pet_status/services.py
"""
Pet status service.

Fetches the care records of a pet and turns them into the five status bars,
the recommendation list and the overall mood.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from pethub.core.exceptions import (
    CollectionUnavailableError, PetAccessDeniedError, StatusTimeoutError
)
from pethub.core.policy import DEFAULT_POLICY, ScoringPolicy
from pethub.models.pet_status import PetMood, PetStatus, StatusBar, StatusRecommendation
from pethub.services.record_repository import RecordRepository
from pethub.utils.datetime_utils import DateTimeUtils

from . import scoring

logger = logging.getLogger(__name__)

_DIMENSIONS = ('health', 'nutrition', 'energy', 'hygiene')


class PetStatusService:
    """Computes pet status bars from the records in the care collections."""

    def __init__(self, repository: RecordRepository, policy: Optional[ScoringPolicy] = None,
                 max_workers: int = 4):
        self.repository = repository
        self.policy = policy or DEFAULT_POLICY
        self.max_workers = max(1, max_workers)
        logger.info("PetStatusService initialized.")

    # ------------------------------------------------------------ dimensions

    def health_status(self, pet_id: str, today: date) -> StatusBar:
        events = self.repository.fetch_health_events(pet_id, limit=self.policy.history_limit)
        return scoring.score_health(events, today, self.policy)

    def nutrition_status(self, pet_id: str, today: date) -> StatusBar:
        since = DateTimeUtils.days_ago(today, self.policy.nutrition_window_days)
        meals = self.repository.fetch_meals(pet_id, since)
        schedules = self.repository.fetch_feeding_schedules(pet_id)
        return scoring.score_nutrition(meals, schedules, today, self.policy)

    def energy_status(self, pet_id: str, today: date) -> StatusBar:
        since = DateTimeUtils.days_ago(today, self.policy.activity_window_days)
        sessions = self.repository.fetch_exercise_sessions(pet_id, since)
        adventures = self._optional(self.repository.fetch_adventure_logs, pet_id, since)
        return scoring.score_energy(sessions + adventures, today, self.policy)

    def hygiene_status(self, pet_id: str, today: date) -> StatusBar:
        limit = self.policy.history_limit
        reminders = self.repository.fetch_grooming_reminders(pet_id, limit=limit)
        bookings = self._optional(self.repository.fetch_grooming_bookings, pet_id, limit=limit)
        return scoring.score_hygiene(reminders + bookings, today, self.policy)

    # ------------------------------------------------------------- aggregate

    def compute_status(self, pet_id: str, today: Optional[date] = None,
                       timeout: Optional[float] = None) -> PetStatus:
        """
        Computes all five bars for a pet.

        The four dimension scorers run concurrently; wellbeing is computed
        once all of them have finished. If any scorer fails, its error is
        raised and no partial status is returned.

        Args:
            pet_id: pet document id
            today: reference day (defaults to the current UTC day)
            timeout: seconds to wait for the four scorers

        Raises:
            RecordSourceError: a required collection could not be read
            StatusTimeoutError: the scorers did not finish within timeout
        """
        today = today or DateTimeUtils.today()
        tasks: Dict[str, Callable[[str, date], StatusBar]] = {
            'health': self.health_status,
            'nutrition': self.nutrition_status,
            'energy': self.energy_status,
            'hygiene': self.hygiene_status,
        }

        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='pet-status')
        try:
            futures = {name: executor.submit(task, pet_id, today) for name, task in tasks.items()}
            done, pending = wait(futures.values(), timeout=timeout, return_when=FIRST_EXCEPTION)

            for name in _DIMENSIONS:
                future = futures[name]
                if future in done and future.exception() is not None:
                    logger.error(f"Status calculation failed for pet {pet_id} ({name}): {future.exception()}")
                    raise future.exception()

            if pending:
                raise StatusTimeoutError(
                    f"Status calculation for pet {pet_id} exceeded {timeout} seconds"
                )

            bars = {name: futures[name].result() for name in _DIMENSIONS}
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        wellbeing = scoring.score_wellbeing(
            bars['health'], bars['nutrition'], bars['energy'], bars['hygiene'], self.policy
        )
        return PetStatus(wellbeing=wellbeing, **bars)

    def recommend(self, status: PetStatus) -> List[StatusRecommendation]:
        return scoring.recommend(status)

    def mood(self, status: PetStatus) -> PetMood:
        return scoring.pet_mood(status)

    def get_status_report(self, pet_id: str, user_id: str, today: Optional[date] = None,
                          timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Status, recommendations and mood for a pet owned by user_id.

        Raises:
            PetNotFoundError: the pet does not exist
            PetAccessDeniedError: the pet belongs to someone else
        """
        self._verify_pet_ownership(pet_id, user_id)

        status = self.compute_status(pet_id, today=today, timeout=timeout)
        report = {
            'pet_id': pet_id,
            'status': status,
            'recommendations': self.recommend(status),
            'mood': self.mood(status),
            'calculated_at': DateTimeUtils.now(),
        }
        logger.info(f"Pet status calculated for {pet_id} (wellbeing={status.wellbeing.value})")
        return report

    # --------------------------------------------------------------- helpers

    def _verify_pet_ownership(self, pet_id: str, user_id: str) -> None:
        owner_id = self.repository.get_pet_owner(pet_id)
        if owner_id != user_id:
            raise PetAccessDeniedError(f"You do not have access to pet '{pet_id}'.")

    @staticmethod
    def _optional(fetch: Callable[..., list], *args, **kwargs) -> list:
        """Runs a fetch on an optional collection; a missing collection reads as empty."""
        try:
            return fetch(*args, **kwargs)
        except CollectionUnavailableError as e:
            logger.warning(f"{e}; continuing without it")
            return []
