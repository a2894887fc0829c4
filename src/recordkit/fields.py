from __future__ import annotations

"""
Field descriptors for record types.

A record's saved keys are its declared pydantic fields.  :func:`build_field_specs`
turns those declarations into :class:`FieldSpec` entries that tell the
marshaller how each value is encoded and decoded.
"""

import collections.abc
import dataclasses
import functools
import types
import typing as t
from enum import Enum

from pydantic import Field, TypeAdapter
from pydantic_core import PydanticUndefined

from recordkit.codecs.base import ValueCodec
from recordkit.errors import RecordDefinitionError

if t.TYPE_CHECKING:
    from recordkit.record import Record

__all__ = [
    'CLASS_NAME_KEY',
    'FieldKind',
    'FieldSpec',
    'RESERVED_KEYS',
    'RecordField',
    'TypeSpec',
    'VERSION_KEY',
    'build_field_specs',
    'iter_field_records',
    'resolve_type',
    'values_equal',
]

VERSION_KEY = 'version'
CLASS_NAME_KEY = 'representedClassName'
RESERVED_KEYS = frozenset({VERSION_KEY, CLASS_NAME_KEY})

_OPTIONS_KEY = 'recordkit'

_PRIMITIVES = (str, int, float, bool)
_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


class FieldKind(str, Enum):
    PRIMITIVE = 'primitive'
    ENUM = 'enum'
    RECORD = 'record'
    CODEC = 'codec'
    LIST = 'list'
    MAPPING = 'mapping'
    ANY = 'any'


@dataclasses.dataclass(frozen=True)
class TypeSpec:
    """
    How a value of one declared type is marshalled.

    ``cls`` is the primitive, enum, record or codec class (or ``tuple`` for a
    tuple-typed list); ``item`` describes the elements of a list or the values
    of a mapping.
    """

    kind: FieldKind
    cls: t.Optional[type] = None
    item: t.Optional['TypeSpec'] = None
    optional: bool = False

    @functools.cached_property
    def adapter(self) -> TypeAdapter:
        """Coerces leaf (primitive and enum) values read from the wire."""

        return TypeAdapter(self.cls)


@dataclasses.dataclass(frozen=True)
class FieldSpec:
    name: str
    key: str
    type: TypeSpec
    optional: bool = False
    nullable: bool = False
    legacy_keys: t.Tuple[str, ...] = ()


def RecordField(
    default: t.Any = PydanticUndefined,
    *,
    key: t.Optional[str] = None,
    legacy_keys: t.Iterable[str] = (),
    nullable: bool = False,
    default_factory: t.Optional[t.Callable[[], t.Any]] = None,
    **kwargs: t.Any,
) -> t.Any:
    """
    Declare a record field with marshalling options on top of ``pydantic.Field``.

    Args:
        default: The value a new record starts with.
        key: Wire key, when it differs from the attribute name.
        legacy_keys: Keys this value was saved under by older versions, tried
            in order when ``key`` is missing from the input.
        nullable: Write ``None`` as ``null`` instead of omitting the key.
        default_factory: Called to produce the default instead of ``default``.
    """

    extra = dict(kwargs.pop('json_schema_extra', None) or {})
    extra[_OPTIONS_KEY] = {'legacy_keys': list(legacy_keys), 'nullable': nullable}
    if default_factory is not None:
        return Field(default_factory=default_factory, alias=key, json_schema_extra=extra, **kwargs)
    return Field(default, alias=key, json_schema_extra=extra, **kwargs)


def _record_base() -> t.Type['Record']:
    from recordkit.record import Record
    return Record


def resolve_type(annotation: t.Any) -> TypeSpec:
    """Map a field annotation to a :class:`TypeSpec`.

    Raises:
        RecordDefinitionError: The annotation has no marshalling rule.
    """

    origin = t.get_origin(annotation)
    args = t.get_args(annotation)

    if origin is t.Annotated:
        return resolve_type(args[0])

    if origin is t.Union or origin is types.UnionType:
        members = [arg for arg in args if arg is not type(None)]
        if len(members) != 1:
            raise RecordDefinitionError(f'Only Optional[X] unions are supported, got {annotation!r}')
        return dataclasses.replace(resolve_type(members[0]), optional=True)

    if annotation is t.Any or annotation is object:
        return TypeSpec(FieldKind.ANY)

    if origin in _SEQUENCE_ORIGINS:
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            raise RecordDefinitionError(f'Only variable-length tuple[X, ...] is supported, got {annotation!r}')
        item = resolve_type(args[0]) if args else TypeSpec(FieldKind.ANY)
        return TypeSpec(FieldKind.LIST, cls=tuple if origin is tuple else list, item=item)

    if origin in _MAPPING_ORIGINS:
        if args and args[0] is not str:
            raise RecordDefinitionError(f'Mapping keys must be str, got {annotation!r}')
        item = resolve_type(args[1]) if args else TypeSpec(FieldKind.ANY)
        return TypeSpec(FieldKind.MAPPING, cls=dict, item=item)

    if annotation in (list, tuple):
        return TypeSpec(FieldKind.LIST, cls=annotation, item=TypeSpec(FieldKind.ANY))
    if annotation is dict:
        return TypeSpec(FieldKind.MAPPING, cls=dict, item=TypeSpec(FieldKind.ANY))

    if isinstance(annotation, type):
        if issubclass(annotation, _record_base()):
            return TypeSpec(FieldKind.RECORD, cls=annotation)
        if issubclass(annotation, ValueCodec):
            return TypeSpec(FieldKind.CODEC, cls=annotation)
        if issubclass(annotation, Enum):
            return TypeSpec(FieldKind.ENUM, cls=annotation)
        if annotation in _PRIMITIVES:
            return TypeSpec(FieldKind.PRIMITIVE, cls=annotation)

    raise RecordDefinitionError(f'Unsupported field type: {annotation!r}')


def build_field_specs(cls: t.Type['Record']) -> t.Tuple[FieldSpec, ...]:
    """Return the ordered field specs for a record type."""

    specs = []
    for name, info in cls.model_fields.items():
        key = info.alias or name
        if key in RESERVED_KEYS:
            raise RecordDefinitionError(f'{cls.__name__}.{name}: `{key}` is a reserved key')
        if info.is_required():
            raise RecordDefinitionError(f'{cls.__name__}.{name} must declare a default')
        try:
            type_spec = resolve_type(info.annotation)
        except RecordDefinitionError as exc:
            raise RecordDefinitionError(f'{cls.__name__}.{name}: {exc}') from exc
        options = info.json_schema_extra.get(_OPTIONS_KEY, {}) if isinstance(info.json_schema_extra, dict) else {}
        specs.append(FieldSpec(
            name=name,
            key=key,
            type=type_spec,
            optional=type_spec.optional,
            nullable=bool(options.get('nullable', False)),
            legacy_keys=tuple(options.get('legacy_keys', ())),
        ))
    return tuple(specs)


def values_equal(spec: TypeSpec, a: t.Any, b: t.Any) -> bool:
    """Deep equality of two values of the type described by ``spec``."""

    if a is None or b is None:
        return a is None and b is None
    if spec.kind is FieldKind.RECORD:
        return a.is_equal_to_object(b)
    if spec.kind is FieldKind.LIST:
        return len(a) == len(b) and all(values_equal(spec.item, x, y) for x, y in zip(a, b))
    if spec.kind is FieldKind.MAPPING:
        return a.keys() == b.keys() and all(values_equal(spec.item, a[k], b[k]) for k in a)
    return a == b


def iter_field_records(spec: TypeSpec, value: t.Any) -> t.Iterator['Record']:
    """Yield the records held directly in ``value``, in order."""

    if value is None:
        return
    if spec.kind is FieldKind.RECORD:
        yield value
    elif spec.kind is FieldKind.LIST and spec.item.kind in {FieldKind.RECORD, FieldKind.LIST, FieldKind.MAPPING}:
        for item in value:
            yield from iter_field_records(spec.item, item)
    elif spec.kind is FieldKind.MAPPING and spec.item.kind in {FieldKind.RECORD, FieldKind.LIST, FieldKind.MAPPING}:
        for item in value.values():
            yield from iter_field_records(spec.item, item)
