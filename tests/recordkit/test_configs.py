from __future__ import annotations

import pytest
from loguru import logger as _logger

from recordkit import Marshaller, RecordKitSettings, get_settings
from recordkit.utils import NullLogger, change_logger_level, get_logger, logger, null_logger

from . import fixtures


def test_settings_defaults() -> None:
    settings = RecordKitSettings()

    assert settings.stamp_class_name == 'polymorphic'
    assert settings.json_indent is None
    assert settings.warn_on_skipped
    assert settings.autologger is null_logger
    assert get_settings() is get_settings()


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('RECORDKIT_STAMP_CLASS_NAME', 'always')
    monkeypatch.setenv('RECORDKIT_DEBUG_ENABLED', 'true')
    settings = RecordKitSettings()

    assert settings.stamp_class_name == 'always'
    assert settings.autologger is logger
    assert 'representedClassName' in Marshaller(settings=settings).encode(fixtures.FxAddress())


def test_null_logger_drops_everything() -> None:
    assert isinstance(null_logger, NullLogger)
    assert null_logger.bind(extra=1) is null_logger
    assert null_logger.opt(depth=1) is null_logger
    assert null_logger.info('ignored') is None


def test_skipped_elements_are_logged() -> None:
    messages: list[str] = []
    handler_id = change_logger_level('WARNING', sink=messages.append)
    try:
        get_logger('tests').warning('prefixed')
        _logger.warning('not ours')
        fixtures.FxDrawing.from_dict({'shapes': [{'representedClassName': 'FxNonagon'}]})
    finally:
        _logger.remove(handler_id)

    assert any('prefixed' in message for message in messages)
    assert not any('not ours' in message for message in messages)
    assert any('FxNonagon' in message and 'shapes[0]' in message for message in messages)
