# pethub/utils/datetime_utils.py
"""
Date handling shared by the record repository and the status scorers.

- Everything runs in UTC; the frontend converts to local time.
- Source records store their dates as 'YYYY-MM-DD' strings, ISO datetimes or
  Firestore timestamps. to_date() folds all of them into a plain date.
- Staleness is measured in whole calendar days (days_between).
"""

import logging
from datetime import datetime, date, timezone, timedelta
from typing import Any, Optional

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """Central date/time helpers."""

    @staticmethod
    def now() -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def today() -> date:
        return datetime.now(timezone.utc).date()

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        Parses an ISO 8601 string into a UTC datetime.

        Accepted forms:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00 (naive, assumed UTC)
        """
        try:
            if not iso_string:
                raise ValueError("Cannot parse an empty string")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.error(f"ISO datetime parsing failed: {iso_string} - {e}")
            raise ValueError(f"Invalid ISO datetime: {iso_string}")

    @staticmethod
    def parse_date_string(date_string: str) -> date:
        """
        Parses a date string ('2024-01-15', '2024/01/15', ...) into a date.
        """
        try:
            if not date_string:
                raise ValueError("Cannot parse an empty string")
            return dateutil_parser.parse(date_string).date()

        except Exception as e:
            logger.error(f"Date parsing failed: {date_string} - {e}")
            raise ValueError(f"Invalid date: {date_string}")

    @staticmethod
    def to_date_string(d: date) -> str:
        return d.strftime('%Y-%m-%d')

    @staticmethod
    def to_date(value: Any) -> Optional[date]:
        """
        Folds a stored date value into a date.

        Args:
            value: 'YYYY-MM-DD' or ISO string, date, datetime, or a Firestore
                   timestamp (anything exposing .timestamp())

        Returns:
            The UTC calendar date, or None for empty values.

        Raises:
            ValueError: the value cannot be interpreted as a date
        """
        if value is None or value == '':
            return None
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.date()
            return value.astimezone(timezone.utc).date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            if len(value) == 10:
                return DateTimeUtils.parse_date_string(value)
            return DateTimeUtils.parse_iso_datetime(value).date()
        if hasattr(value, 'timestamp'):
            # Firestore DatetimeWithNanoseconds / Timestamp
            return datetime.fromtimestamp(value.timestamp(), tz=timezone.utc).date()
        raise ValueError(f"Unsupported date value: {value!r} ({type(value).__name__})")

    @staticmethod
    def days_between(earlier: date, later: date) -> int:
        """Whole calendar days from earlier to later (negative if reversed)."""
        return (later - earlier).days

    @staticmethod
    def days_ago(today: date, days: int) -> date:
        return today - timedelta(days=days)
