from __future__ import annotations

"""Runtime configuration for recordkit, loaded from ``RECORDKIT_*`` env vars."""

import functools
import typing as t

from pydantic_settings import BaseSettings, SettingsConfigDict

from recordkit.utils.logs import NullLogger, logger, null_logger

if t.TYPE_CHECKING:
    from loguru import Logger

__all__ = ['RecordKitSettings', 'get_settings']


class RecordKitSettings(BaseSettings):
    """Settings for the marshalling engine.

    Attributes:
        stamp_class_name: ``'polymorphic'`` writes ``representedClassName`` only
            when a record sits in a slot typed as one of its base classes (or
            when the caller asks for it); ``'always'`` writes it for every
            record.
        json_indent: Indent passed to the JSON library by ``dumps``.
        jsonlib: Dotted module name of the JSON library to use.  Defaults to
            ``ujson`` when installed, else the standard library.
        debug_enabled: Emit debug traces of encode/decode through ``autologger``.
        warn_on_skipped: Log a warning for every collection element skipped
            during decode.
    """

    stamp_class_name: t.Literal['polymorphic', 'always'] = 'polymorphic'
    json_indent: t.Optional[int] = None
    jsonlib: t.Optional[str] = None
    debug_enabled: bool = False
    warn_on_skipped: bool = True

    model_config = SettingsConfigDict(
        env_prefix='RECORDKIT_',
        case_sensitive=False,
        extra='ignore',
    )

    @property
    def logger(self) -> 'Logger':
        return logger

    @property
    def null_logger(self) -> NullLogger:
        return null_logger

    @property
    def autologger(self) -> t.Union['Logger', NullLogger]:
        """Return ``logger`` when debugging is enabled, else ``null_logger``."""

        return self.logger if self.debug_enabled else self.null_logger


@functools.lru_cache()
def get_settings(**kwargs: t.Any) -> RecordKitSettings:
    """Return the cached settings instance for ``kwargs``."""

    return RecordKitSettings(**kwargs)
