"""
recordkit: typed records that marshal to and from JSON-compatible dictionaries.
"""

from recordkit.version import VERSION as __version__
from recordkit.errors import (
    FieldDecodeError,
    ParseError,
    RecordDefinitionError,
    RecordKitError,
    SchemaMismatchError,
    SerializationError,
    UnknownTypeError,
)
from recordkit.configs import RecordKitSettings, get_settings
from recordkit.codecs import (
    Archivable,
    Blob,
    Color,
    Date,
    Interval,
    IntervalAmount,
    IntervalUnits,
    Time,
    ValueCodec,
    archivable,
    register_archiver,
)
from recordkit.fields import FieldSpec, RecordField, TypeSpec, build_field_specs
from recordkit.record import Record
from recordkit.engine import DecodeReport, Marshaller, SkippedElement, get_marshaller
from recordkit.registry import (
    get_record_class,
    register_record,
    register_record_path,
    unregister_record,
)

__all__ = [
    'Archivable',
    'Blob',
    'Color',
    'Date',
    'DecodeReport',
    'FieldDecodeError',
    'FieldSpec',
    'Interval',
    'IntervalAmount',
    'IntervalUnits',
    'Marshaller',
    'ParseError',
    'Record',
    'RecordDefinitionError',
    'RecordField',
    'RecordKitError',
    'RecordKitSettings',
    'SchemaMismatchError',
    'SerializationError',
    'SkippedElement',
    'Time',
    'TypeSpec',
    'UnknownTypeError',
    'ValueCodec',
    'archivable',
    'build_field_specs',
    'get_marshaller',
    'get_record_class',
    'get_settings',
    'register_archiver',
    'register_record',
    'register_record_path',
    'unregister_record',
]
