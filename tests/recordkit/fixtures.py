from __future__ import annotations

"""Record types shared by the recordkit tests."""

import typing as t
from enum import Enum

from pydantic import BaseModel

from recordkit import (
    Blob,
    Color,
    Date,
    Interval,
    IntervalUnits,
    Record,
    RecordField,
    Time,
    archivable,
)


class Priority(str, Enum):
    LOW = 'low'
    HIGH = 'high'


class FxAddress(Record):
    street: str = ''
    city: str = ''


class FxPerson(Record):
    record_version: t.ClassVar[int] = 2

    name: str = ''
    age: int = 0
    nickname: t.Optional[str] = RecordField(None, legacy_keys=['alias'])
    address: t.Optional[FxAddress] = None
    tags: t.List[str] = RecordField(default_factory=list)
    priority: Priority = Priority.LOW
    favorite_color: Color = RecordField(default_factory=Color, key='favoriteColor')


class FxShape(Record):
    label: str = ''


class FxCircle(FxShape):
    radius: float = 1.0


class FxSquare(FxShape):
    side: float = 1.0


class FxGroup(FxShape):
    child: t.Optional[FxShape] = None


class FxDrawing(Record):
    shapes: t.List[FxShape] = RecordField(default_factory=list)
    layers: t.Dict[str, FxShape] = RecordField(default_factory=dict)
    background: t.Optional[FxShape] = None


class FxSchedule(Record):
    """Sets its defaults in ``load_default_values``."""

    title: str = ''
    created: t.Optional[Date] = None
    every: Interval = RecordField(default_factory=Interval)

    def load_default_values(self) -> None:
        self.title = 'Untitled'
        self.every = Interval.with_amount(1, IntervalUnits.DAY)


class FxTask(Record):
    """Renamed and reshaped keys from older versions."""

    record_version: t.ClassVar[int] = 3

    title: str = RecordField('', legacy_keys=['name', 'label'])
    duration_minutes: int = RecordField(0, key='durationMinutes', legacy_keys=['durationHours'])

    def set_value_for_key(self, key: str, old_key: str, data: t.Mapping[str, t.Any]) -> None:
        if old_key == 'durationHours':
            self.duration_minutes = int(data[old_key]) * 60
            return
        super().set_value_for_key(key, old_key, data)


class FxAttachment(Record):
    attachment: Blob = RecordField(default_factory=Blob)
    due: t.Optional[Time] = None
    note: t.Optional[str] = RecordField(None, nullable=True)


class FxLegacyNamed(Record):
    record_name: t.ClassVar[t.Optional[str]] = 'fx.legacy-named'

    value: int = 0


class FxPayload(BaseModel):
    count: int
    label: str


@archivable('fx-point')
class FxPoint:
    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def to_bytes(self) -> bytes:
        return f'{self.x},{self.y}'.encode()

    @classmethod
    def from_bytes(cls, data: bytes) -> 'FxPoint':
        x, y = data.decode().split(',')
        return cls(int(x), int(y))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FxPoint) and (self.x, self.y) == (other.x, other.y)
