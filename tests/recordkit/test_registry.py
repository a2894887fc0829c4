from __future__ import annotations

import collections

import pytest

from recordkit.errors import UnknownTypeError
from recordkit.registry import (
    TypeRegistry,
    get_record_class,
    lazy_import,
    register_record,
    register_record_path,
    unregister_record,
)

from . import fixtures


def test_registry_stores_and_resolves_entries() -> None:
    registry = TypeRegistry('test-registry', verbose=True)
    registry['dummy'] = fixtures.FxAddress

    assert 'dummy' in registry
    assert registry['dummy'] is fixtures.FxAddress
    assert registry.get('missing') is None
    assert registry.get('missing', fixtures.FxPerson) is fixtures.FxPerson
    assert registry.keys() == ['dummy']


def test_registry_replaces_existing_entries() -> None:
    registry = TypeRegistry('test-registry')
    registry['dummy'] = fixtures.FxAddress
    registry['dummy'] = fixtures.FxPerson

    assert registry['dummy'] is fixtures.FxPerson


def test_registry_imports_paths_on_first_lookup() -> None:
    registry = TypeRegistry('test-registry')
    registry.register_path('ordered', 'collections.OrderedDict')

    assert 'ordered' in registry
    assert 'ordered' not in registry.mregistry
    assert registry['ordered'] is collections.OrderedDict
    assert 'ordered' in registry.mregistry
    assert registry.uninit_registry == {}


def test_registry_unknown_keys_raise() -> None:
    registry = TypeRegistry('test-registry')
    registry.register_path('broken', 'collections.DoesNotExist')

    with pytest.raises(UnknownTypeError) as excinfo:
        registry['nothing']
    assert excinfo.value.name == 'nothing'
    assert isinstance(excinfo.value, LookupError)

    with pytest.raises(UnknownTypeError):
        registry['broken']


def test_registry_unregister() -> None:
    registry = TypeRegistry('test-registry')
    registry['dummy'] = fixtures.FxAddress

    assert registry.unregister('dummy') is fixtures.FxAddress
    assert 'dummy' not in registry
    assert registry.unregister('dummy') is None


def test_lazy_import_rejects_bad_paths() -> None:
    assert lazy_import('collections.OrderedDict') is collections.OrderedDict
    with pytest.raises(ImportError):
        lazy_import('collections')
    with pytest.raises(ImportError):
        lazy_import('collections.NotAThing')


def test_records_register_on_class_creation() -> None:
    assert get_record_class('FxPerson') is fixtures.FxPerson
    assert get_record_class('FxCircle') is fixtures.FxCircle
    assert get_record_class('fx.legacy-named') is fixtures.FxLegacyNamed


def test_register_record_under_extra_name() -> None:
    register_record(fixtures.FxAddress, 'LegacyAddress')
    try:
        assert get_record_class('LegacyAddress') is fixtures.FxAddress
        assert get_record_class('FxAddress') is fixtures.FxAddress
    finally:
        unregister_record('LegacyAddress')

    with pytest.raises(UnknownTypeError):
        get_record_class('LegacyAddress')


def test_register_record_path_is_lazy() -> None:
    register_record_path('LazyCircle', f'{fixtures.__name__}.FxCircle')
    try:
        assert get_record_class('LazyCircle') is fixtures.FxCircle
    finally:
        unregister_record('LazyCircle')
