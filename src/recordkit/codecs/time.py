from __future__ import annotations

"""Wall-clock time codec."""

import datetime
import typing as t
from collections.abc import Mapping

import pytz
from pydantic import Field, field_validator

from .base import ValueCodec

__all__ = ['Time', 'tz_map']

tz_map = {
    'PST': 'US/Pacific',
    'PDT': 'US/Pacific',
    'EST': 'US/Eastern',
    'EDT': 'US/Eastern',
    'CST': 'US/Central',
    'CDT': 'US/Central',
    'MST': 'US/Mountain',
    'MDT': 'US/Mountain',
    'AKST': 'US/Alaska',
    'AKDT': 'US/Alaska',
    'HST': 'US/Hawaii',
    'HAST': 'US/Hawaii',
    'HADT': 'US/Hawaii',
    'SST': 'US/Samoa',
    'SDT': 'US/Samoa',
    'CHST': 'Pacific/Guam',
    'CHDT': 'Pacific/Guam',
}


def _zone_name(tzinfo: datetime.tzinfo) -> t.Optional[str]:
    """Best-effort name for a tzinfo: ``''`` for UTC, its zone key, or ``None``."""

    if tzinfo in {pytz.utc, datetime.timezone.utc}:
        return ''
    return getattr(tzinfo, 'zone', None) or getattr(tzinfo, 'key', None)


def _resolve_zone(name: str) -> datetime.tzinfo:
    if not name:
        return pytz.utc
    return pytz.timezone(tz_map.get(name.upper(), name))


class Time(ValueCodec):
    """A time of day without a date.

    ``time_zone_name`` is ``None`` for the local time zone, ``''`` for UTC, or
    a pytz zone name (common abbreviations such as ``PST`` are accepted).
    Encodes as ``{hour, minute, second, timeZoneName}`` with ``timeZoneName``
    omitted for local time.
    """

    hour: int = Field(0, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)
    second: int = Field(0, ge=0, le=59)
    time_zone_name: t.Optional[str] = Field(None, alias='timeZoneName')

    @field_validator('time_zone_name')
    @classmethod
    def _check_time_zone_name(cls, value: t.Optional[str]) -> t.Optional[str]:
        if value is not None:
            try:
                _resolve_zone(value)
            except pytz.UnknownTimeZoneError:
                raise ValueError(f'Unknown time zone: {value!r}') from None
        return value

    @classmethod
    def with_time(
        cls,
        hour: int,
        minute: int = 0,
        second: int = 0,
        time_zone_name: t.Optional[str] = None,
    ) -> 'Time':
        return cls(hour=hour, minute=minute, second=second, time_zone_name=time_zone_name)

    @classmethod
    def from_date(cls, date: datetime.datetime) -> 'Time':
        """Take the time of day of ``date``.

        Naive dates and aware dates without a resolvable zone name give a local
        time; aware dates in UTC or a named zone keep that zone.
        """

        time_zone_name = None
        if date.tzinfo is not None:
            time_zone_name = _zone_name(date.tzinfo)
            if time_zone_name is None:
                date = date.astimezone()
        return cls(hour=date.hour, minute=date.minute, second=date.second, time_zone_name=time_zone_name)

    @property
    def time_zone(self) -> t.Optional[datetime.tzinfo]:
        """The resolved zone, or ``None`` for local time."""

        if self.time_zone_name is None:
            return None
        return _resolve_zone(self.time_zone_name)

    @property
    def date(self) -> datetime.datetime:
        """Today's date with the time components set from this time."""

        return self.date_by_setting_time_today()

    def date_by_setting_time_today(self) -> datetime.datetime:
        tz = self.time_zone
        today = datetime.datetime.now(tz) if tz is not None else datetime.datetime.now()
        return self.date_by_setting_time_with_date(today)

    def date_by_setting_time_with_date(self, date: datetime.datetime) -> datetime.datetime:
        """Return ``date`` with its time of day replaced by this time.

        The calendar date is taken in this time's zone.  A naive ``date`` is
        read as wall-clock time in that zone; for local time a naive ``date``
        gives a naive result.
        """

        parts = {'hour': self.hour, 'minute': self.minute, 'second': self.second, 'microsecond': 0}
        tz = self.time_zone
        if tz is None:
            if date.tzinfo is None:
                return date.replace(**parts)
            return date.astimezone().replace(tzinfo=None, **parts).astimezone()
        wall = date if date.tzinfo is None else date.astimezone(tz).replace(tzinfo=None)
        return tz.localize(wall.replace(**parts))

    def to_json(self) -> t.Dict[str, t.Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, value: t.Any) -> 'Time':
        if not isinstance(value, Mapping):
            raise TypeError(f'Expected a mapping for Time, got {value!r}')
        return cls.model_validate(value)
