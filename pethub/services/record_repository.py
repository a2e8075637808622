# pethub/services/record_repository.py
"""
Read-only access to the care collections used by the pet status bars.

The documents are written by other PetHub services; this module only queries
them by pet_id, newest first, optionally bounded by a start date.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional

from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from pethub.core.exceptions import (
    CollectionUnavailableError, PetNotFoundError, RecordSourceError
)
from pethub.models.care_event import CareEvent, FeedingSchedule
from pethub.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

# Collections that may be missing from a deployment.
ADVENTURE_LOGS = 'adventure_logs'
SERVICE_BOOKINGS = 'service_bookings'
OPTIONAL_COLLECTIONS = (ADVENTURE_LOGS, SERVICE_BOOKINGS)

# Errors Firestore raises when a collection or its index is not set up.
_UNAVAILABLE_ERRORS = (gcp_exceptions.NotFound, gcp_exceptions.FailedPrecondition)


class RecordRepository:
    """Firestore-backed source of the records each status bar is computed from."""

    def __init__(self, db=None, capabilities: Optional[Dict[str, bool]] = None):
        self.db = db or firestore.client()
        self.capabilities = {name: True for name in OPTIONAL_COLLECTIONS}
        if capabilities:
            self.capabilities.update(capabilities)
        logger.info(f"RecordRepository initialized (capabilities: {self.capabilities})")

    def supports(self, collection: str) -> bool:
        """Required collections are always supported; optional ones follow the flags."""
        return self.capabilities.get(collection, True)

    # ------------------------------------------------------------------ pets

    def get_pet_owner(self, pet_id: str) -> Optional[str]:
        """Returns the owner id of the pet document."""
        try:
            doc = self.db.collection('pets').document(pet_id).get()
        except Exception as e:
            logger.error(f"Pet lookup failed ({pet_id}): {e}", exc_info=True)
            raise RecordSourceError('pets', e) from e

        if not doc.exists:
            raise PetNotFoundError(f"Pet '{pet_id}' was not found.")
        data = doc.to_dict() or {}
        return data.get('owner_id') or data.get('user_id')

    # ---------------------------------------------------------------- health

    def fetch_health_events(self, pet_id: str, limit: int = 10) -> List[CareEvent]:
        """
        Latest vet sessions and health records, merged and sorted newest first.

        Args:
            pet_id: pet document id
            limit: documents read from each of the two collections

        Returns:
            CareEvent list whose kind is the appointment/visit type
            (e.g. 'vaccination', 'checkup').
        """
        sessions = self._query(
            'veterinary_sessions', pet_id, date_field='date', limit=limit,
            to_event=lambda d: self._event(d.get('date'), d.get('appointment_type') or 'visit', 'veterinary_sessions')
        )
        records = self._query(
            'health_records', pet_id, date_field='date', limit=limit,
            to_event=lambda d: self._event(d.get('date'), d.get('visit_type') or 'visit', 'health_records')
        )
        return _newest_first(sessions + records)

    # ------------------------------------------------------------- nutrition

    def fetch_meals(self, pet_id: str, since: date) -> List[CareEvent]:
        return self._query(
            'nutrition_sessions', pet_id, date_field='date', since=since,
            to_event=lambda d: self._event(
                d.get('date'), 'meal', 'nutrition_sessions',
                calories=d.get('total_calories') or 0.0
            )
        )

    def fetch_feeding_schedules(self, pet_id: str) -> List[FeedingSchedule]:
        """Active feeding schedules only."""
        collection = 'pet_feeding_schedules'
        try:
            query = (
                self.db.collection(collection)
                .where(filter=FieldFilter('pet_id', '==', pet_id))
                .where(filter=FieldFilter('is_active', '==', True))
            )
            schedules = []
            for doc in query.stream():
                data = doc.to_dict() or {}
                schedules.append(FeedingSchedule(
                    times_per_day=int(data.get('times_per_day') or 0),
                    is_active=bool(data.get('is_active', True))
                ))
            return schedules
        except Exception as e:
            logger.error(f"Failed to read {collection} for pet {pet_id}: {e}", exc_info=True)
            raise RecordSourceError(collection, e) from e

    # ---------------------------------------------------------------- energy

    def fetch_exercise_sessions(self, pet_id: str, since: date) -> List[CareEvent]:
        return self._query(
            'exercise_sessions', pet_id, date_field='session_date', since=since,
            to_event=lambda d: self._event(
                d.get('session_date'), 'exercise', 'exercise_sessions',
                duration=d.get('duration_minutes'), calories=d.get('calories_burned')
            )
        )

    def fetch_adventure_logs(self, pet_id: str, since: date) -> List[CareEvent]:
        """Optional collection; empty when disabled for this deployment."""
        return self._query(
            ADVENTURE_LOGS, pet_id, date_field='adventure_date', since=since,
            to_event=lambda d: self._event(
                d.get('adventure_date'), 'adventure', ADVENTURE_LOGS,
                duration=d.get('duration_minutes'), calories=d.get('calories_burned')
            ),
            optional=True
        )

    # --------------------------------------------------------------- hygiene

    def fetch_grooming_reminders(self, pet_id: str, limit: int = 10) -> List[CareEvent]:
        """
        Completed grooming reminders. The event date is due_date, else scheduled_date.

        Firestore drops documents without the order_by field, so these are
        ordered and limited here once the fallback date is resolved.
        """
        return self._query(
            'pet_reminders', pet_id, date_field='due_date', limit=limit,
            filters=[('reminder_type', '==', 'grooming'), ('is_completed', '==', True)],
            to_event=lambda d: self._event(
                d.get('due_date') or d.get('scheduled_date'), 'reminder', 'pet_reminders'
            ),
            order_in_query=False
        )

    def fetch_grooming_bookings(self, pet_id: str, limit: int = 10) -> List[CareEvent]:
        """Completed or confirmed service bookings. Optional collection."""
        return self._query(
            SERVICE_BOOKINGS, pet_id, date_field='service_date', limit=limit,
            filters=[('status', 'in', ['completed', 'confirmed'])],
            to_event=lambda d: self._event(d.get('service_date'), 'service', SERVICE_BOOKINGS),
            optional=True
        )

    # --------------------------------------------------------------- helpers

    def _query(self, collection: str, pet_id: str, *, date_field: str,
               to_event: Callable[[Dict[str, Any]], Optional[CareEvent]],
               since: Optional[date] = None, limit: Optional[int] = None,
               filters: Iterable[tuple] = (), optional: bool = False,
               order_in_query: bool = True) -> List[CareEvent]:
        """
        Runs one pet-scoped query, newest first, and converts the documents.

        since is compared as a 'YYYY-MM-DD' string; windowed date fields are
        stored in that form. With order_in_query=False the documents are
        sorted and limited after conversion instead of by Firestore.

        Raises:
            CollectionUnavailableError: optional collection missing in Firestore
            RecordSourceError: any other read failure
        """
        if optional and not self.supports(collection):
            return []

        try:
            query = self.db.collection(collection).where(filter=FieldFilter('pet_id', '==', pet_id))
            for field_name, op, value in filters:
                query = query.where(filter=FieldFilter(field_name, op, value))
            if since is not None:
                query = query.where(filter=FieldFilter(date_field, '>=', DateTimeUtils.to_date_string(since)))
            if order_in_query:
                query = query.order_by(date_field, direction=firestore.Query.DESCENDING)
                if limit:
                    query = query.limit(limit)

            events = []
            for doc in query.stream():
                event = to_event(doc.to_dict() or {})
                if event is not None:
                    events.append(event)
            if not order_in_query:
                events = _newest_first(events)
                if limit:
                    events = events[:limit]
            return events

        except _UNAVAILABLE_ERRORS as e:
            if optional:
                logger.warning(f"Optional collection {collection} unavailable: {e}")
                raise CollectionUnavailableError(collection) from e
            logger.error(f"Required collection {collection} unavailable for pet {pet_id}: {e}", exc_info=True)
            raise RecordSourceError(collection, e) from e
        except Exception as e:
            logger.error(f"Failed to read {collection} for pet {pet_id}: {e}", exc_info=True)
            raise RecordSourceError(collection, e) from e

    @staticmethod
    def _event(raw_date: Any, kind: str, source: str,
               duration: Any = None, calories: Any = None) -> Optional[CareEvent]:
        try:
            event_date = DateTimeUtils.to_date(raw_date)
        except ValueError:
            logger.warning(f"Skipping {source} record with unreadable date: {raw_date!r}")
            return None
        if event_date is None:
            return None
        return CareEvent(
            date=event_date,
            kind=kind,
            duration_minutes=int(duration or 0),
            calories=float(calories or 0.0),
            source=source
        )


def _newest_first(events: List[CareEvent]) -> List[CareEvent]:
    return sorted(events, key=lambda e: e.date, reverse=True)
