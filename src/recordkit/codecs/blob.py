from __future__ import annotations

"""
Binary data codec, plus the archive registry that lets a blob carry an
arbitrary object.

An archived object is stored as ``<tag> NUL <payload>``, where ``tag`` names
the archiver that produced ``payload`` and can reverse it.
"""

import base64
import typing as t

from pydantic import BaseModel, PrivateAttr

from recordkit.errors import SerializationError, UnknownTypeError
from recordkit.registry.base import TypeRegistry, lazy_import
from recordkit.ser import get_serializer
from .base import ValueCodec

__all__ = [
    'Archivable',
    'Archiver',
    'Blob',
    'archivable',
    'archive_object',
    'get_archiver_registry',
    'register_archiver',
    'unarchive_object',
]

SEPARATOR = b'\x00'
PYDANTIC_TAG = 'pydantic'

ArchivableT = t.TypeVar('ArchivableT', bound=type)


@t.runtime_checkable
class Archivable(t.Protocol):
    """An object that can turn itself into bytes and back."""

    def to_bytes(self) -> bytes: ...

    @classmethod
    def from_bytes(cls, data: bytes) -> t.Any: ...


class Archiver(t.NamedTuple):
    tag: str
    dump: t.Callable[[t.Any], bytes]
    load: t.Callable[[bytes], t.Any]
    types: t.Tuple[type, ...] = ()


_aregistry: TypeRegistry[Archiver] = TypeRegistry('archivers')


def get_archiver_registry() -> TypeRegistry[Archiver]:
    return _aregistry


def register_archiver(
    tag: str,
    dump: t.Callable[[t.Any], bytes],
    load: t.Callable[[bytes], t.Any],
    types: t.Iterable[type] = (),
) -> Archiver:
    """
    Register an archiver under ``tag``.

    Objects that are instances of any of ``types`` are archived with ``dump``;
    payloads tagged ``tag`` are restored with ``load``.  Later registrations
    take precedence over earlier ones when several match an object.
    """

    if not tag or SEPARATOR.decode() in tag or tag.startswith(f'{PYDANTIC_TAG}:'):
        raise ValueError(f'Invalid archive tag: {tag!r}')
    archiver = Archiver(tag=tag, dump=dump, load=load, types=tuple(types))
    _aregistry[tag] = archiver
    return archiver


def archivable(tag: t.Optional[str] = None) -> t.Callable[[ArchivableT], ArchivableT]:
    """
    Class decorator registering an :class:`Archivable` type.

    >>> @archivable('point')
    ... class Point:
    ...     def to_bytes(self): ...
    ...     @classmethod
    ...     def from_bytes(cls, data): ...
    """

    def decorator(cls: ArchivableT) -> ArchivableT:
        if not issubclass(cls, Archivable):
            raise TypeError(f'{cls.__name__} must define `to_bytes()` and `from_bytes(data)`')
        register_archiver(tag or cls.__qualname__, lambda obj: obj.to_bytes(), cls.from_bytes, (cls,))
        return cls

    return decorator


def _is_json_value(value: t.Any) -> bool:
    if value is None or isinstance(value, (str, int, float, bool)):
        return True
    if isinstance(value, (list, tuple)):
        return all(_is_json_value(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(key, str) and _is_json_value(item) for key, item in value.items())
    return False


def _dump_json(value: t.Any) -> bytes:
    return get_serializer().encode(value)


def _load_json(data: bytes) -> t.Any:
    return get_serializer().decode(data)


def _dump_record(record: t.Any) -> bytes:
    from recordkit.engine import get_marshaller
    return get_marshaller().dumps(record, polymorphic=True)


def _load_record(data: bytes) -> t.Any:
    from recordkit.engine import get_marshaller
    from recordkit.record import Record
    return get_marshaller().loads(data, Record)


def _select_archiver(obj: t.Any) -> t.Tuple[str, t.Callable[[t.Any], bytes]]:
    for archiver in reversed(list(_aregistry.mregistry.values())):
        if archiver.types and isinstance(obj, archiver.types):
            return archiver.tag, archiver.dump

    from recordkit.record import Record

    if isinstance(obj, Record):
        return 'record', _dump_record
    if isinstance(obj, BaseModel):
        cls = type(obj)
        return f'{PYDANTIC_TAG}:{cls.__module__}.{cls.__qualname__}', lambda model: model.model_dump_json().encode()
    if _is_json_value(obj):
        return 'json', _dump_json
    raise SerializationError(f'No archiver registered for {type(obj).__name__}')


def archive_object(obj: t.Any) -> bytes:
    """Archive ``obj`` to tagged bytes."""

    tag, dump = _select_archiver(obj)
    try:
        payload = dump(obj)
    except SerializationError:
        raise
    except (TypeError, ValueError) as exc:
        raise SerializationError(f'[{tag}] Unable to archive {type(obj).__name__}: {exc}') from exc
    return tag.encode() + SEPARATOR + payload


def unarchive_object(data: bytes) -> t.Any:
    """Restore an object archived by :func:`archive_object`."""

    tag_bytes, sep, payload = data.partition(SEPARATOR)
    if not sep:
        raise ValueError('Data is not an archived object')
    tag = tag_bytes.decode()
    if tag.startswith(f'{PYDANTIC_TAG}:'):
        path = tag.split(':', 1)[1]
        try:
            model_cls = lazy_import(path)
        except ImportError as exc:
            raise UnknownTypeError(tag, f'[archivers] Unable to import `{path}`: {exc}') from exc
        return model_cls.model_validate_json(payload)
    return _aregistry[tag].load(payload)


register_archiver('json', _dump_json, _load_json)
register_archiver('record', _dump_record, _load_record)


class Blob(ValueCodec):
    """
    Arbitrary bytes, or an object archived into bytes.

    ``data is None`` is the empty blob, which encodes as ``null``; otherwise
    the wire form is the Base64 text of ``data``.
    """

    data: t.Optional[bytes] = None

    decodes_null: t.ClassVar[bool] = True

    _object: t.Any = PrivateAttr(default=None)

    @classmethod
    def with_data(cls, data: t.Optional[bytes]) -> 'Blob':
        return cls(data=data)

    @classmethod
    def with_string(cls, text: str) -> 'Blob':
        """Create a blob from Base64 text."""

        return cls(data=base64.b64decode(text, validate=True))

    @classmethod
    def with_object(cls, obj: t.Any) -> 'Blob':
        """Archive ``obj`` into a new blob; ``None`` gives the empty blob."""

        if obj is None:
            return cls()
        return cls(data=archive_object(obj))

    @classmethod
    def empty_blob(cls) -> 'Blob':
        return cls()

    @property
    def empty(self) -> bool:
        return self.data is None

    @property
    def length(self) -> int:
        return 0 if self.data is None else len(self.data)

    @property
    def string(self) -> t.Optional[str]:
        """``data`` as Base64 text, ``None`` when empty."""

        if self.data is None:
            return None
        return base64.b64encode(self.data).decode('ascii')

    @property
    def object(self) -> t.Any:
        """The archived object, restored from ``data`` on first access."""

        if self._object is None and self.data is not None:
            self._object = unarchive_object(self.data)
        return self._object

    def __eq__(self, other: t.Any) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return type(self) is type(other) and self.data == other.data

    def __hash__(self) -> int:
        return hash((type(self), self.data))

    def to_json(self) -> t.Optional[str]:
        return self.string

    @classmethod
    def from_json(cls, value: t.Any) -> 'Blob':
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls.with_string(value)
        raise TypeError(f'Expected Base64 text or null for Blob, got {type(value).__name__}')
