from __future__ import annotations

"""Absolute date & time codec."""

import datetime
import typing as t

from pydantic import Field, TypeAdapter, field_validator

from .base import ValueCodec

__all__ = ['Date', 'DISTANT_PAST', 'DISTANT_FUTURE']

DISTANT_PAST = datetime.datetime(1, 1, 1, tzinfo=datetime.timezone.utc)
DISTANT_FUTURE = datetime.datetime(4001, 1, 1, tzinfo=datetime.timezone.utc)

_datetime_adapter = TypeAdapter(datetime.datetime)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Date(ValueCodec):
    """
    A single instant in time.

    The instant is stored timezone-aware and normalised to UTC; naive inputs
    are taken to be local time.  Encodes as an ISO-8601 string and decodes
    either that, any string ``dateparser`` understands, or a numeric epoch in
    seconds.
    """

    date: datetime.datetime = Field(default_factory=_utcnow)

    @field_validator('date')
    @classmethod
    def _normalize_date(cls, value: datetime.datetime) -> datetime.datetime:
        if value.tzinfo is None:
            value = value.astimezone()
        return value.astimezone(datetime.timezone.utc)

    @classmethod
    def with_date(cls, date: datetime.datetime) -> 'Date':
        return cls(date=date)

    @classmethod
    def now(cls) -> 'Date':
        return cls(date=_utcnow())

    @classmethod
    def distant_past(cls) -> 'Date':
        return cls(date=DISTANT_PAST)

    @classmethod
    def distant_future(cls) -> 'Date':
        return cls(date=DISTANT_FUTURE)

    @classmethod
    def with_time_interval_since_now(cls, seconds: float) -> 'Date':
        return cls(date=_utcnow() + datetime.timedelta(seconds=seconds))

    @classmethod
    def from_timestamp(cls, timestamp: float, is_ms: t.Optional[bool] = False) -> 'Date':
        """Create a date from a Unix epoch value (seconds, or milliseconds with ``is_ms``)."""

        if is_ms: timestamp /= 1000
        try:
            date = datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f'Epoch out of range for Date: {timestamp!r}') from e
        return cls(date=date)

    @classmethod
    def from_string(cls, text: str) -> 'Date':
        """Parse ISO-8601 first, then fall back to ``dateparser``."""

        try:
            return cls(date=_datetime_adapter.validate_python(text))
        except ValueError:
            import dateparser

            parsed = dateparser.parse(text)
            if parsed is None:
                raise ValueError(f'Unrecognised date string: {text!r}') from None
            return cls(date=parsed)

    @property
    def string(self) -> str:
        """The canonical ISO-8601 rendering, as written to the wire."""

        return self.date.isoformat()

    @property
    def timestamp(self) -> float:
        return self.date.timestamp()

    @property
    def time_interval_since_now(self) -> float:
        """Seconds from now until the date; negative when it is in the past."""

        return (self.date - _utcnow()).total_seconds()

    @property
    def is_today(self) -> bool:
        """Whether the date falls on the current local calendar day."""

        try:
            local = self.date.astimezone()
        except (OverflowError, OSError):
            # within a day of datetime.min or datetime.max
            return False
        return local.date() == datetime.date.today()

    def add_time_interval(self, seconds: float) -> 'Date':
        """Return a new date ``seconds`` later than this one."""

        return type(self)(date=self.date + datetime.timedelta(seconds=seconds))

    def to_json(self) -> str:
        return self.string

    @classmethod
    def from_json(cls, value: t.Any) -> 'Date':
        if isinstance(value, bool):
            raise TypeError(f'Expected a date string or epoch for Date, got {value!r}')
        if isinstance(value, (int, float)):
            return cls.from_timestamp(value)
        if isinstance(value, str):
            return cls.from_string(value)
        raise TypeError(f'Expected a date string or epoch for Date, got {value!r}')
