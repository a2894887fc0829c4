from __future__ import annotations

"""Amount-of-time codec."""

import typing as t
from collections.abc import Mapping
from enum import IntEnum

from pydantic import ConfigDict, Field

from .base import ValueCodec

__all__ = ['Interval', 'IntervalAmount', 'IntervalUnits']


class IntervalUnits(IntEnum):
    """Interval units.  The values are persisted, so only ever append."""

    SECOND = 0
    MINUTE = 1
    HOUR = 2
    DAY = 3
    WEEK = 4
    MONTH = 5
    QUARTER = 6
    YEAR = 7
    NEVER = 8
    FOREVER = 9


class IntervalAmount(IntEnum):
    """Seconds in one of each unit."""

    NEVER = 0
    SECOND = 1
    MINUTE = 60
    HOUR = 60 * 60
    DAY = 60 * 60 * 24
    WEEK = 60 * 60 * 24 * 7
    MONTH = 60 * 60 * 24 * 365 // 12
    QUARTER = 60 * 60 * 24 * 365 // 4
    YEAR = 60 * 60 * 24 * 365
    FOREVER = 2 ** 31 - 1


class Interval(ValueCodec):
    """
    An amount of time expressed as a count of calendar-ish units, or as a
    ``first_amount``..``second_amount`` range of them.

    Wire keys that are not fields are retained (see :attr:`extra_values`) and
    written back out on encode, so newer writers' data survives a round trip.
    """

    model_config = ConfigDict(extra='allow')

    using_range: bool = Field(False, alias='usingRange')
    first_amount: int = Field(0, alias='firstAmount')
    second_amount: int = Field(0, alias='secondAmount')
    amount: int = 0
    units: IntervalUnits = IntervalUnits.SECOND

    @classmethod
    def with_amount(cls, amount: int, units: IntervalUnits) -> 'Interval':
        return cls(amount=amount, units=units)

    @classmethod
    def with_range(cls, first_amount: int, second_amount: int, units: IntervalUnits) -> 'Interval':
        return cls(using_range=True, first_amount=first_amount, second_amount=second_amount, units=units)

    @property
    def extra_values(self) -> t.Dict[str, t.Any]:
        """Unrecognised keys read from the wire."""

        return dict(self.model_extra or {})

    def _seconds(self, count: int) -> float:
        if self.units == IntervalUnits.FOREVER:
            return float(IntervalAmount.FOREVER)
        return float(count * self.units_time_interval)

    @property
    def units_time_interval(self) -> float:
        """Seconds in one of :attr:`units`."""

        return float(IntervalAmount[self.units.name])

    @property
    def amount_time_interval(self) -> float:
        return self._seconds(self.amount)

    @property
    def first_time_interval(self) -> float:
        return self._seconds(self.first_amount)

    @property
    def second_time_interval(self) -> float:
        return self._seconds(self.second_amount)

    @property
    def range_difference_interval(self) -> float:
        """Seconds between the two ends of the range."""

        if self.units == IntervalUnits.FOREVER:
            return float(IntervalAmount.FOREVER)
        return self.second_time_interval - self.first_time_interval

    def to_json(self) -> t.Dict[str, t.Any]:
        return self.model_dump(mode='json', by_alias=True)

    @classmethod
    def from_json(cls, value: t.Any) -> 'Interval':
        if not isinstance(value, Mapping):
            raise TypeError(f'Expected a mapping for Interval, got {value!r}')
        return cls.model_validate(value)
