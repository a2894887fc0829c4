from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any, Dict, Optional, Union

from recordkit.errors import ParseError, SerializationError
from .defaults import default_json, JsonLibT
from .utils import guess_json_utf


class JsonSerializer:
    """
    Turns JSON-safe dictionaries into UTF-8 bytes and back with a pluggable
    JSON library.
    """

    name: Optional[str] = "json"
    encoding: Optional[str] = "utf-8"
    jsonlib: JsonLibT = default_json

    def __init__(
        self,
        jsonlib: Optional[Union[str, ModuleType]] = None,
        encoding: Optional[str] = None,
        indent: Optional[int] = None,
    ):
        if encoding is not None: self.encoding = encoding
        if jsonlib is not None:
            if isinstance(jsonlib, str):
                jsonlib = importlib.import_module(jsonlib)
            if not hasattr(jsonlib, "dumps") or not hasattr(jsonlib, "loads"):
                raise ValueError(f"Invalid JSON Library: {jsonlib}")
            self.jsonlib = jsonlib
        self.indent = indent
        self.jsonlib_name: str = self.jsonlib.__name__

    def encode(self, value: Dict[str, Any]) -> bytes:
        """
        Encodes the value as JSON bytes
        """
        kwargs = {} if self.indent is None else {"indent": self.indent}
        try:
            encoded = self.jsonlib.dumps(value, **kwargs)
        except (TypeError, ValueError, OverflowError) as e:
            raise SerializationError(f"[{self.jsonlib_name}] Error Encoding Value: {e}") from e
        if isinstance(encoded, str): encoded = encoded.encode(self.encoding)
        return encoded

    def decode(self, value: Union[str, bytes, bytearray]) -> Any:
        """
        Decodes JSON text or bytes
        """
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value)
            try:
                value = value.decode(guess_json_utf(value) or self.encoding)
            except UnicodeDecodeError as e:
                raise ParseError(f"[{self.jsonlib_name}] Invalid Encoding: {e}") from e
        if not isinstance(value, str):
            raise ParseError(f"[{self.jsonlib_name}] Expected str or bytes, got {type(value).__name__}")
        try:
            return self.jsonlib.loads(value)
        except (ValueError, TypeError, OverflowError) as e:
            raise ParseError(f"[{self.jsonlib_name}] Invalid JSON: {e}: {value[:100]!r}") from e
