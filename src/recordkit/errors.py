from __future__ import annotations

"""Exception hierarchy raised by recordkit.

Whole-record failures propagate to the caller as one of these types. The
only failure that is recovered locally is an :class:`UnknownTypeError` raised
for a single element of a list or mapping of records, which is skipped and
noted in the decode report instead.
"""

import typing as t

__all__ = [
    'RecordKitError',
    'ParseError',
    'SerializationError',
    'UnknownTypeError',
    'SchemaMismatchError',
    'FieldDecodeError',
    'RecordDefinitionError',
]


class RecordKitError(Exception):
    """Base class for every error raised by recordkit."""


class _PathError(RecordKitError):
    """Error that optionally carries the dotted path of the offending value."""

    def __init__(self, message: str, path: t.Optional[str] = None) -> None:
        self.path = path
        if path:
            message = f'{path}: {message}'
        super().__init__(message)


class ParseError(RecordKitError, ValueError):
    """The byte buffer is not valid JSON, or its root is not a JSON object."""


class SerializationError(_PathError, ValueError):
    """A value cannot be projected to a JSON-safe form (e.g. NaN or Infinity)."""


class FieldDecodeError(_PathError, ValueError):
    """A value present in the input cannot be converted to its field's type."""


class UnknownTypeError(RecordKitError, LookupError):
    """A ``representedClassName`` or archive tag is not registered."""

    def __init__(self, name: str, message: t.Optional[str] = None) -> None:
        self.name = name
        super().__init__(message or f'Unknown type `{name}`')


class SchemaMismatchError(RecordKitError):
    """
    Raised by a record type's own migration hooks when stored data cannot be
    upgraded. recordkit itself never raises it.
    """


class RecordDefinitionError(RecordKitError, TypeError):
    """A record type declares a field that has no codec or primitive mapping."""
