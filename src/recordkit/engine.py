from __future__ import annotations

"""
The marshalling engine: walks records and their field specs to produce the
encoded dictionary, and rebuilds records from it.
"""

import math
import typing as t
from collections.abc import Mapping, Sequence
from enum import Enum

from pydantic import BaseModel, Field

from recordkit.codecs.base import ValueCodec
from recordkit.configs import RecordKitSettings, get_settings
from recordkit.errors import (
    FieldDecodeError,
    ParseError,
    RecordKitError,
    SerializationError,
    UnknownTypeError,
)
from recordkit.fields import CLASS_NAME_KEY, VERSION_KEY, FieldKind, FieldSpec, TypeSpec, values_equal
from recordkit.record import Record
from recordkit.registry.records import get_record_class
from recordkit.ser import JsonSerializer, get_serializer
from recordkit.utils.logs import logger

if t.TYPE_CHECKING:
    from loguru import Logger
    from recordkit.utils.logs import NullLogger

RecordT = t.TypeVar('RecordT', bound=Record)

__all__ = ['DecodeReport', 'Marshaller', 'SkippedElement', 'get_marshaller']


class SkippedElement(BaseModel):
    """A collection element dropped during decode."""

    path: str
    class_name: t.Optional[str] = None
    reason: str


class DecodeReport(BaseModel):
    """What a decode had to leave out."""

    skipped: t.List[SkippedElement] = Field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def ok(self) -> bool:
        return not self.skipped

    def add(self, path: str, reason: str, class_name: t.Optional[str] = None) -> SkippedElement:
        element = SkippedElement(path=path, class_name=class_name, reason=reason)
        self.skipped.append(element)
        return element


def _join(path: t.Optional[str], key: str) -> str:
    return f'{path}.{key}' if path else key


class Marshaller:
    """
    Encodes records to JSON-compatible dictionaries (and bytes) and decodes
    them back.

    Encoding is strict: anything that cannot be represented raises
    :class:`SerializationError`.  Decoding is tolerant of one thing only: an
    element of a list or mapping of records whose ``representedClassName`` is
    not registered is skipped and noted in the :class:`DecodeReport`.
    """

    def __init__(
        self,
        settings: t.Optional[RecordKitSettings] = None,
        serializer: t.Optional[JsonSerializer] = None,
    ):
        self.settings = settings or get_settings()
        self.serializer = serializer or get_serializer(
            jsonlib=self.settings.jsonlib,
            indent=self.settings.json_indent,
        )

    @property
    def autologger(self) -> t.Union['Logger', 'NullLogger']:
        return self.settings.autologger

    """
    Encoding
    """

    def encode(self, record: Record, polymorphic: t.Optional[bool] = None) -> t.Dict[str, t.Any]:
        """
        Encode ``record`` into a JSON-compatible dictionary.

        ``representedClassName`` is written at the top level when
        ``polymorphic`` is true (or the settings say to always write it), and
        for nested records whose type differs from the declared field type.
        """

        data = self._encode_record(record, '', stamp=bool(polymorphic) or self._always_stamp)
        self.autologger.debug(f'Encoded {record.represented_class_name} ({len(data)} keys)')
        return data

    def dumps(self, record: Record, polymorphic: t.Optional[bool] = None) -> bytes:
        """Encode ``record`` to UTF-8 JSON bytes."""

        return self.serializer.encode(self.encode(record, polymorphic=polymorphic))

    @property
    def _always_stamp(self) -> bool:
        return self.settings.stamp_class_name == 'always'

    def _encode_record(self, record: Record, path: str, stamp: bool) -> t.Dict[str, t.Any]:
        data: t.Dict[str, t.Any] = {}
        for spec in record.field_specs:
            value = getattr(record, spec.name)
            if value is None:
                if spec.nullable:
                    data[spec.key] = None
                continue
            data[spec.key] = self.encode_value(spec.type, value, _join(path, spec.key))
        if stamp:
            data[CLASS_NAME_KEY] = record.represented_class_name
        data[VERSION_KEY] = record.version
        return data

    def encode_value(self, spec: TypeSpec, value: t.Any, path: str) -> t.Any:
        """Encode a single value of the type described by ``spec``."""

        if value is None:
            return None
        kind = spec.kind
        if kind is FieldKind.RECORD:
            if not isinstance(value, Record):
                raise SerializationError(f'Expected a record, got {type(value).__name__}', path)
            stamp = type(value) is not spec.cls or self._always_stamp
            return self._encode_record(value, path, stamp)

        if kind is FieldKind.CODEC:
            if not isinstance(value, ValueCodec):
                raise SerializationError(f'Expected {spec.cls.__name__}, got {type(value).__name__}', path)
            try:
                projected = value.to_json()
            except RecordKitError:
                raise
            except (TypeError, ValueError) as exc:
                raise SerializationError(f'Unable to encode {type(value).__name__}: {exc}', path) from exc
            return self._ensure_json(projected, path)

        if kind is FieldKind.LIST:
            if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                raise SerializationError(f'Expected a sequence, got {type(value).__name__}', path)
            return [self.encode_value(spec.item, item, f'{path}[{i}]') for i, item in enumerate(value)]

        if kind is FieldKind.MAPPING:
            if not isinstance(value, Mapping):
                raise SerializationError(f'Expected a mapping, got {type(value).__name__}', path)
            encoded = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise SerializationError(f'Mapping keys must be str, got {key!r}', path)
                encoded[key] = self.encode_value(spec.item, item, _join(path, key))
            return encoded

        return self._ensure_json(value, path)

    def _ensure_json(self, value: t.Any, path: str) -> t.Any:
        """Return ``value`` as plain JSON types, rejecting what JSON cannot hold."""

        if isinstance(value, Enum):
            value = value.value
        if value is None or isinstance(value, (str, bool, int)):
            return value
        if isinstance(value, float):
            if not math.isfinite(value):
                raise SerializationError(f'{value!r} is not representable in JSON', path)
            return value
        if isinstance(value, (list, tuple)):
            return [self._ensure_json(item, f'{path}[{i}]') for i, item in enumerate(value)]
        if isinstance(value, Mapping):
            result = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise SerializationError(f'Mapping keys must be str, got {key!r}', path)
                result[key] = self._ensure_json(item, _join(path, key))
            return result
        raise SerializationError(f'{type(value).__name__} is not JSON serializable', path)

    """
    Decoding
    """

    def decode(
        self,
        data: t.Mapping[str, t.Any],
        cls: t.Optional[t.Type[RecordT]] = None,
        report: t.Optional[DecodeReport] = None,
    ) -> RecordT:
        """
        Build a record from its encoded dictionary.

        The concrete type is ``cls`` unless ``data`` names a registered
        subclass of it under ``representedClassName``.

        Raises:
            UnknownTypeError: The named type is unknown or not a ``cls``.
            FieldDecodeError: A present value cannot be converted.
        """

        if not isinstance(data, Mapping):
            raise ParseError(f'Expected a mapping to decode, got {type(data).__name__}')
        if report is None:
            report = DecodeReport()
        record = self._decode_record(data, cls or Record, report, '')
        if not report.ok:
            self.autologger.debug(f'Decoded {record.represented_class_name} with {report.skipped_count} skipped')
        return record

    def loads(
        self,
        buffer: t.Union[str, bytes],
        cls: t.Optional[t.Type[RecordT]] = None,
        report: t.Optional[DecodeReport] = None,
    ) -> RecordT:
        """Parse JSON text or bytes and decode the root object."""

        data = self.serializer.decode(buffer)
        if not isinstance(data, Mapping):
            raise ParseError(f'Expected a JSON object at the root, got {type(data).__name__}')
        return self.decode(data, cls, report=report)

    def resolve_class(self, data: t.Mapping[str, t.Any], cls: t.Type[RecordT]) -> t.Type[RecordT]:
        """Select the record type to build for ``data``."""

        name = data.get(CLASS_NAME_KEY)
        if name is None or name == cls.record_name:
            return cls
        if not isinstance(name, str):
            raise UnknownTypeError(str(name), f'Invalid {CLASS_NAME_KEY}: {name!r}')
        found = get_record_class(name)
        if not issubclass(found, cls):
            raise UnknownTypeError(name, f'`{name}` is not a {cls.__name__}')
        return found

    def _decode_record(self, data: t.Mapping[str, t.Any], cls: t.Type[RecordT], report: DecodeReport, path: str) -> RecordT:
        record = self.resolve_class(data, cls)()
        self.load(record, data, report=report, path=path)
        return record

    def load(
        self,
        record: Record,
        data: t.Mapping[str, t.Any],
        report: t.Optional[DecodeReport] = None,
        path: str = '',
    ) -> Record:
        """
        Apply ``data`` to ``record`` in place.

        Each saved key present in ``data`` is converted and assigned.  A missing
        key falls back to the first of its legacy keys that is present, handed
        to :meth:`Record.set_value_for_key`.  Missing keys keep their current
        values and unknown keys are ignored.
        """

        if report is None:
            report = DecodeReport()
        version = data.get(VERSION_KEY)
        record._decode_report = report
        record._loaded_version = version if isinstance(version, int) and not isinstance(version, bool) else None
        with record.changes_suspended():
            for spec in record.field_specs:
                if spec.key in data:
                    self.assign(record, spec, data[spec.key], report=report, path=_join(path, spec.key))
                    continue
                for old_key in spec.legacy_keys:
                    if old_key in data:
                        self.autologger.debug(f'{record.represented_class_name}: migrating `{old_key}` to `{spec.key}`')
                        record.set_value_for_key(spec.name, old_key, data)
                        break
        return record

    def assign(
        self,
        record: Record,
        spec: FieldSpec,
        raw: t.Any,
        report: t.Optional[DecodeReport] = None,
        path: t.Optional[str] = None,
    ) -> None:
        """
        Convert ``raw`` with ``spec`` and assign it to ``record``.

        A ``null`` is only assigned to optional or nullable fields (and codecs
        that decode it to a value); otherwise the field keeps its value.
        """

        if raw is None and not (spec.optional or spec.nullable or self._decodes_null(spec.type)):
            return
        if report is None:
            report = record.decode_report
        value = self.decode_value(spec.type, raw, report, path or spec.key)
        setattr(record, spec.name, value)

    @staticmethod
    def _decodes_null(spec: TypeSpec) -> bool:
        return spec.kind is FieldKind.CODEC and spec.cls.decodes_null

    def decode_value(self, spec: TypeSpec, raw: t.Any, report: DecodeReport, path: str) -> t.Any:
        """Convert one wire value to the type described by ``spec``."""

        if raw is None:
            return spec.cls.from_json(None) if self._decodes_null(spec) else None
        try:
            kind = spec.kind
            if kind is FieldKind.RECORD:
                if not isinstance(raw, Mapping):
                    raise TypeError(f'Expected an object for {spec.cls.__name__}, got {type(raw).__name__}')
                return self._decode_record(raw, spec.cls, report, path)

            if kind is FieldKind.CODEC:
                return spec.cls.from_json(raw)

            if kind is FieldKind.LIST:
                if not isinstance(raw, (list, tuple)):
                    raise TypeError(f'Expected an array, got {type(raw).__name__}')
                items = []
                for i, item in enumerate(raw):
                    item_path = f'{path}[{i}]'
                    try:
                        items.append(self.decode_value(spec.item, item, report, item_path))
                    except UnknownTypeError as exc:
                        if not self._is_element_type_error(spec.item, item, exc):
                            raise
                        self._skip(report, item_path, exc)
                return tuple(items) if spec.cls is tuple else items

            if kind is FieldKind.MAPPING:
                if not isinstance(raw, Mapping):
                    raise TypeError(f'Expected an object, got {type(raw).__name__}')
                values = {}
                for key, item in raw.items():
                    item_path = _join(path, key)
                    try:
                        values[key] = self.decode_value(spec.item, item, report, item_path)
                    except UnknownTypeError as exc:
                        if not self._is_element_type_error(spec.item, item, exc):
                            raise
                        self._skip(report, item_path, exc)
                return values

            if kind is FieldKind.ANY:
                return raw
            return spec.adapter.validate_python(raw)

        except RecordKitError:
            raise
        except (TypeError, ValueError) as exc:
            raise FieldDecodeError(str(exc), path) from exc

    @staticmethod
    def _is_element_type_error(spec: TypeSpec, item: t.Any, exc: UnknownTypeError) -> bool:
        # only the element's own class name is recoverable, not one nested inside it
        return (
            spec.kind is FieldKind.RECORD
            and isinstance(item, Mapping)
            and item.get(CLASS_NAME_KEY) == exc.name
        )

    def _skip(self, report: DecodeReport, path: str, exc: UnknownTypeError) -> None:
        report.add(path=path, reason=str(exc), class_name=exc.name)
        if self.settings.warn_on_skipped:
            logger.warning(f'Skipped {path}: {exc}')

    """
    Equality
    """

    def values_equal(self, spec: TypeSpec, a: t.Any, b: t.Any) -> bool:
        """Deep equality of two values of the type described by ``spec``."""

        return values_equal(spec, a, b)


_marshaller: t.Optional[Marshaller] = None


def get_marshaller() -> Marshaller:
    """Return the shared marshaller built from :func:`get_settings`."""

    global _marshaller
    if _marshaller is None:
        _marshaller = Marshaller()
    return _marshaller
