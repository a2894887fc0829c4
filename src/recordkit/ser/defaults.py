from __future__ import annotations

import json
from typing import TypeVar

try:
    import ujson
    _ujson_available = True
except ImportError:
    _ujson_available = False


if _ujson_available:
    default_json = ujson

else:
    default_json = json


JsonLibT = TypeVar("JsonLibT")
