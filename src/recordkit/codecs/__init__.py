"""
Value codecs: immutable values with a JSON-safe wire projection.
"""

from .base import ValueCodec
from .color import Color
from .date import DISTANT_FUTURE, DISTANT_PAST, Date
from .time import Time
from .interval import Interval, IntervalAmount, IntervalUnits
from .blob import (
    Archivable,
    Archiver,
    Blob,
    archivable,
    archive_object,
    get_archiver_registry,
    register_archiver,
    unarchive_object,
)

__all__ = [
    'Archivable',
    'Archiver',
    'Blob',
    'Color',
    'DISTANT_FUTURE',
    'DISTANT_PAST',
    'Date',
    'Interval',
    'IntervalAmount',
    'IntervalUnits',
    'Time',
    'ValueCodec',
    'archivable',
    'archive_object',
    'get_archiver_registry',
    'register_archiver',
    'unarchive_object',
]
