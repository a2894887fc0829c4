from __future__ import annotations

"""Shared helpers used across recordkit."""

from .logs import logger, null_logger, get_logger, change_logger_level, NullLogger
from .properties import classproperty

__all__ = [
    'NullLogger',
    'change_logger_level',
    'classproperty',
    'get_logger',
    'logger',
    'null_logger',
]
