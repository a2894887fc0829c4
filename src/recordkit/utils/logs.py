from __future__ import annotations

"""Loguru-backed loggers shared across recordkit.

Every module logs through :data:`logger`, which is the global Loguru logger
bound with ``module_name="recordkit"`` so its records can be filtered and
formatted separately from the host application's.  :data:`null_logger` is the
drop-in used when debug output is disabled (see
:attr:`recordkit.configs.RecordKitSettings.autologger`).
"""

import sys
import typing as t

from loguru import logger as _logger

if t.TYPE_CHECKING:
    from loguru import Logger, Record

__all__ = [
    'NullLogger',
    'change_logger_level',
    'default_formatter',
    'get_logger',
    'logger',
    'null_logger',
]

DEFAULT_FUNCTION_COLOR = '<fg #219ebc>'
DEFAULT_CLASS_COLOR = '<fg #a8dadc>'

_handler_id: t.Optional[int] = None


def default_formatter(record: 'Record') -> str:
    """Format recordkit records as ``LEVEL time: module:function: message``."""

    extra = record['extra']
    name = extra.get('module_name') or '{name}'
    if extra.get('prefix'):
        name += ':{extra[prefix]}'
    return (
        '<level>{level: <8}</> <green>{time:YYYY-MM-DD HH:mm:ss.SSS}</>: '
        + DEFAULT_CLASS_COLOR + name + '</>:'
        + DEFAULT_FUNCTION_COLOR + '{function}</>: '
        + '<level>{message}</level>\n{exception}'
    )


def _is_recordkit_record(record: 'Record') -> bool:
    return record['extra'].get('module_name') == 'recordkit'


logger: 'Logger' = _logger.bind(module_name='recordkit')


class NullLogger:
    """Logger stand-in that silently drops every call."""

    def trace(self, *args: t.Any, **kwargs: t.Any) -> None: ...
    def debug(self, *args: t.Any, **kwargs: t.Any) -> None: ...
    def info(self, *args: t.Any, **kwargs: t.Any) -> None: ...
    def success(self, *args: t.Any, **kwargs: t.Any) -> None: ...
    def warning(self, *args: t.Any, **kwargs: t.Any) -> None: ...
    def error(self, *args: t.Any, **kwargs: t.Any) -> None: ...
    def critical(self, *args: t.Any, **kwargs: t.Any) -> None: ...
    def exception(self, *args: t.Any, **kwargs: t.Any) -> None: ...
    def log(self, *args: t.Any, **kwargs: t.Any) -> None: ...

    def bind(self, **kwargs: t.Any) -> 'NullLogger':
        return self

    def opt(self, *args: t.Any, **kwargs: t.Any) -> 'NullLogger':
        return self


null_logger = NullLogger()


def get_logger(prefix: t.Optional[str] = None) -> 'Logger':
    """Return the recordkit logger, optionally tagged with ``prefix``."""

    return logger.bind(prefix=prefix) if prefix else logger


def change_logger_level(
    level: t.Union[str, int] = 'INFO',
    sink: t.Any = sys.stderr,
) -> int:
    """(Re)install the recordkit sink at ``level``.

    Loguru's stock handler is removed the first time this is called, mirroring
    how the sink is owned by the library once it is configured explicitly.

    Returns:
        The Loguru handler id of the new sink.
    """

    global _handler_id
    try:
        _logger.remove(0 if _handler_id is None else _handler_id)
    except ValueError:
        # already removed
        pass
    _handler_id = _logger.add(
        sink,
        level=level,
        format=default_formatter,
        filter=_is_recordkit_record,
        colorize=None,
    )
    return _handler_id
