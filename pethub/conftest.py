# pethub/conftest.py
"""
Shared pytest fixtures.

FakeRecordRepository mirrors the RecordRepository interface in memory so the
service and the routes can be tested without Firestore.
"""

from datetime import date, timedelta

import pytest

from pethub.core.exceptions import PetNotFoundError
from pethub.models.care_event import CareEvent, FeedingSchedule

TODAY = date(2024, 6, 15)


class FakeRecordRepository:
    def __init__(self, owner_id='user-1', health=(), meals=(), schedules=(), exercise=(),
                 adventures=(), reminders=(), bookings=(), failures=None):
        self.owner_id = owner_id
        self.health = list(health)
        self.meals = list(meals)
        self.schedules = list(schedules)
        self.exercise = list(exercise)
        self.adventures = list(adventures)
        self.reminders = list(reminders)
        self.bookings = list(bookings)
        # method name -> exception raised when it is called
        self.failures = dict(failures or {})
        self.calls = []

    def _call(self, name):
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    @staticmethod
    def _newest(events, limit=None, since=None):
        events = sorted(events, key=lambda e: e.date, reverse=True)
        if since is not None:
            events = [e for e in events if e.date >= since]
        return events[:limit] if limit else events

    def get_pet_owner(self, pet_id):
        self._call('get_pet_owner')
        if self.owner_id is None:
            raise PetNotFoundError(f"Pet '{pet_id}' was not found.")
        return self.owner_id

    def fetch_health_events(self, pet_id, limit=10):
        self._call('fetch_health_events')
        return self._newest(self.health, limit=limit)

    def fetch_meals(self, pet_id, since):
        self._call('fetch_meals')
        return self._newest(self.meals, since=since)

    def fetch_feeding_schedules(self, pet_id):
        self._call('fetch_feeding_schedules')
        return [s for s in self.schedules if s.is_active]

    def fetch_exercise_sessions(self, pet_id, since):
        self._call('fetch_exercise_sessions')
        return self._newest(self.exercise, since=since)

    def fetch_adventure_logs(self, pet_id, since):
        self._call('fetch_adventure_logs')
        return self._newest(self.adventures, since=since)

    def fetch_grooming_reminders(self, pet_id, limit=10):
        self._call('fetch_grooming_reminders')
        return self._newest(self.reminders, limit=limit)

    def fetch_grooming_bookings(self, pet_id, limit=10):
        self._call('fetch_grooming_bookings')
        return self._newest(self.bookings, limit=limit)


def make_event(days_ago, kind='visit', minutes=0, today=TODAY):
    return CareEvent(date=today - timedelta(days=days_ago), kind=kind, duration_minutes=minutes)


def healthy_records():
    """Vet visit 10 days ago, vaccination 5 days ago, two meals a day,
    200 exercise minutes this week, grooming 5 days ago."""
    return dict(
        health=[make_event(10, 'checkup'), make_event(5, 'vaccination')],
        meals=[make_event(day, 'meal') for day in range(7) for _ in range(2)],
        schedules=[FeedingSchedule(times_per_day=2)],
        exercise=[make_event(0, 'exercise', 60), make_event(2, 'exercise', 80), make_event(4, 'exercise', 60)],
        reminders=[make_event(5, 'reminder')],
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def event():
    return make_event


@pytest.fixture
def fake_repository():
    """Factory: fake_repository(**records) -> FakeRecordRepository."""
    return FakeRecordRepository


@pytest.fixture
def healthy_repository():
    return FakeRecordRepository(**healthy_records())
