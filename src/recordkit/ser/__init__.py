from __future__ import annotations

"""JSON byte-buffer serialization for encoded records."""

from types import ModuleType

from .defaults import default_json
from .utils import guess_json_utf
from ._json import JsonSerializer

_initialized_sers: dict[tuple, JsonSerializer] = {}


def get_serializer(
    jsonlib: str | ModuleType | None = None,
    encoding: str | None = None,
    indent: int | None = None,
) -> JsonSerializer:
    """Return a cached :class:`JsonSerializer` for the given configuration."""

    key = (jsonlib, encoding, indent)
    if key not in _initialized_sers:
        _initialized_sers[key] = JsonSerializer(jsonlib=jsonlib, encoding=encoding, indent=indent)
    return _initialized_sers[key]


__all__ = [
    "JsonSerializer",
    "default_json",
    "get_serializer",
    "guess_json_utf",
]
