from __future__ import annotations

"""Registry of record types addressable by their ``representedClassName``."""

import typing as t

from .base import TypeRegistry

if t.TYPE_CHECKING:
    from recordkit.record import Record

RecordT = t.TypeVar('RecordT', bound='Record')

_rregistry: TypeRegistry[t.Type['Record']] = TypeRegistry('records')


def get_record_registry() -> TypeRegistry[t.Type['Record']]:
    """Return the process-wide record registry."""

    return _rregistry


def register_record(cls: t.Type[RecordT], name: t.Optional[str] = None) -> t.Type[RecordT]:
    """Register ``cls`` under ``name`` (defaults to its ``record_name``).

    Record subclasses call this automatically when they are created, so it is
    only needed to expose a type under an additional (e.g. legacy) name.
    """

    _rregistry[name or getattr(cls, 'record_name', None) or cls.__name__] = cls
    return cls


def register_record_path(name: str, path: str) -> None:
    """Register ``pkg.module.Class`` to be imported when ``name`` is first decoded."""

    _rregistry.register_path(name, path)


def unregister_record(name: str) -> None:
    """Forget the record type registered under ``name``."""

    _rregistry.unregister(name)


def get_record_class(name: str) -> t.Type['Record']:
    """Resolve ``name`` to a record type, raising ``UnknownTypeError`` if unknown."""

    return _rregistry[name]
