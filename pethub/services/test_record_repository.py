# pethub/services/test_record_repository.py
"""
RecordRepository tests with a mocked Firestore client.

Usage: python -m pytest pethub/services/test_record_repository.py -v
"""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcp_exceptions

from pethub.core.exceptions import (
    CollectionUnavailableError, PetNotFoundError, RecordSourceError
)
from pethub.services.record_repository import (
    ADVENTURE_LOGS, SERVICE_BOOKINGS, RecordRepository
)


def _doc(data):
    doc = MagicMock()
    doc.to_dict.return_value = data
    return doc


def _query(docs=(), error=None):
    """A query mock whose builder methods return itself."""
    query = MagicMock()
    query.where.return_value = query
    query.order_by.return_value = query
    query.limit.return_value = query
    if error is not None:
        query.stream.side_effect = error
    else:
        query.stream.return_value = [_doc(d) for d in docs]
    return query


def _db(**collections):
    """collections: name -> query mock."""
    db = MagicMock()
    db.collection.side_effect = lambda name: collections.get(name) or _query()
    return db


def test_exercise_sessions_are_converted():
    query = _query([
        {'session_date': '2024-06-14', 'duration_minutes': 45, 'calories_burned': 120.5},
        {'session_date': '2024-06-10', 'duration_minutes': None},
    ])
    repo = RecordRepository(db=_db(exercise_sessions=query))

    events = repo.fetch_exercise_sessions('pet-1', since=date(2024, 5, 16))

    assert [e.date for e in events] == [date(2024, 6, 14), date(2024, 6, 10)]
    assert events[0].duration_minutes == 45
    assert events[0].calories == 120.5
    assert events[1].duration_minutes == 0
    assert all(e.kind == 'exercise' and e.source == 'exercise_sessions' for e in events)
    query.order_by.assert_called_once()
    query.limit.assert_not_called()


def test_since_is_compared_as_a_date_string():
    query = _query()
    repo = RecordRepository(db=_db(exercise_sessions=query))

    repo.fetch_exercise_sessions('pet-1', since=date(2024, 5, 16))

    date_filter = query.where.call_args_list[-1].kwargs['filter']
    assert (date_filter.field_path, date_filter.op_string, date_filter.value) == (
        'session_date', '>=', '2024-05-16'
    )


def test_health_events_accept_timestamp_dates():
    stamped = datetime(2024, 6, 10, 23, 30, tzinfo=timezone.utc)
    repo = RecordRepository(db=_db(health_records=_query([{'date': stamped}])))

    (event,) = repo.fetch_health_events('pet-1')
    assert event.date == date(2024, 6, 10)


def test_unreadable_dates_are_skipped():
    query = _query([{'date': 'yesterday'}, {'date': None}, {'date': '2024-06-01'}])
    repo = RecordRepository(db=_db(nutrition_sessions=query))

    events = repo.fetch_meals('pet-1', since=date(2024, 5, 16))
    assert [e.date for e in events] == [date(2024, 6, 1)]


def test_health_events_merge_both_collections():
    repo = RecordRepository(db=_db(
        veterinary_sessions=_query([{'date': '2024-06-01', 'appointment_type': 'vaccination'}]),
        health_records=_query([{'date': '2024-06-10', 'visit_type': 'checkup'}, {'date': '2024-05-01'}]),
    ))

    events = repo.fetch_health_events('pet-1', limit=10)

    assert [(e.date, e.kind) for e in events] == [
        (date(2024, 6, 10), 'checkup'),
        (date(2024, 6, 1), 'vaccination'),
        (date(2024, 5, 1), 'visit'),
    ]


def test_grooming_reminders_fall_back_to_scheduled_date():
    query = _query([
        {'due_date': '2024-05-20'},
        {'scheduled_date': '2024-06-05'},
        {'due_date': '2024-04-01', 'scheduled_date': '2024-06-14'},
        {'scheduled_date': '2024-06-01'},
    ])
    repo = RecordRepository(db=_db(pet_reminders=query))

    events = repo.fetch_grooming_reminders('pet-1', limit=3)

    # reminders without due_date must not be dropped by a server-side order_by
    query.order_by.assert_not_called()
    query.limit.assert_not_called()
    assert query.where.call_count == 3
    assert [e.date for e in events] == [date(2024, 6, 5), date(2024, 6, 1), date(2024, 5, 20)]


def test_feeding_schedules():
    query = _query([{'times_per_day': 3, 'is_active': True}, {'times_per_day': None}])
    repo = RecordRepository(db=_db(pet_feeding_schedules=query))

    schedules = repo.fetch_feeding_schedules('pet-1')
    assert [s.times_per_day for s in schedules] == [3, 0]


def test_missing_optional_collection_is_reported_as_unavailable():
    query = _query(error=gcp_exceptions.NotFound('no such collection'))
    repo = RecordRepository(db=_db(adventure_logs=query))

    with pytest.raises(CollectionUnavailableError) as exc_info:
        repo.fetch_adventure_logs('pet-1', since=date(2024, 5, 16))
    assert exc_info.value.collection == ADVENTURE_LOGS


def test_missing_required_collection_is_a_source_error():
    query = _query(error=gcp_exceptions.FailedPrecondition('index missing'))
    repo = RecordRepository(db=_db(exercise_sessions=query))

    with pytest.raises(RecordSourceError) as exc_info:
        repo.fetch_exercise_sessions('pet-1', since=date(2024, 5, 16))
    assert exc_info.value.collection == 'exercise_sessions'


def test_other_optional_failures_are_source_errors():
    query = _query(error=gcp_exceptions.ServiceUnavailable('backend down'))
    repo = RecordRepository(db=_db(service_bookings=query))

    with pytest.raises(RecordSourceError):
        repo.fetch_grooming_bookings('pet-1')


def test_disabled_optional_collection_is_not_queried():
    db = _db()
    repo = RecordRepository(db=db, capabilities={SERVICE_BOOKINGS: False})

    assert repo.fetch_grooming_bookings('pet-1') == []
    assert not repo.supports(SERVICE_BOOKINGS)
    assert repo.supports(ADVENTURE_LOGS)
    db.collection.assert_not_called()


def test_get_pet_owner():
    db = MagicMock()
    snapshot = db.collection.return_value.document.return_value.get.return_value
    snapshot.exists = True
    snapshot.to_dict.return_value = {'user_id': 'user-7'}

    assert RecordRepository(db=db).get_pet_owner('pet-1') == 'user-7'
    db.collection.assert_called_with('pets')


def test_get_pet_owner_unknown_pet():
    db = MagicMock()
    db.collection.return_value.document.return_value.get.return_value.exists = False

    with pytest.raises(PetNotFoundError):
        RecordRepository(db=db).get_pet_owner('ghost')


def test_get_pet_owner_read_failure():
    db = MagicMock()
    db.collection.return_value.document.return_value.get.side_effect = gcp_exceptions.DeadlineExceeded('slow')

    with pytest.raises(RecordSourceError):
        RecordRepository(db=db).get_pet_owner('pet-1')
