from __future__ import annotations

import typing as t

import pytest

from recordkit import Color, Record, RecordDefinitionError, RecordField
from recordkit.fields import FieldKind, build_field_specs, resolve_type, values_equal

from . import fixtures


def test_field_specs_follow_declarations() -> None:
    specs = {spec.name: spec for spec in build_field_specs(fixtures.FxPerson)}

    assert list(specs) == ['name', 'age', 'nickname', 'address', 'tags', 'priority', 'favorite_color']
    assert specs['name'].type.kind is FieldKind.PRIMITIVE
    assert specs['nickname'].optional
    assert specs['nickname'].legacy_keys == ('alias',)
    assert specs['address'].type.kind is FieldKind.RECORD
    assert specs['address'].type.cls is fixtures.FxAddress
    assert specs['tags'].type.kind is FieldKind.LIST
    assert specs['tags'].type.item.kind is FieldKind.PRIMITIVE
    assert specs['priority'].type.kind is FieldKind.ENUM
    assert specs['favorite_color'].type.kind is FieldKind.CODEC
    assert specs['favorite_color'].key == 'favoriteColor'
    assert not specs['favorite_color'].nullable


def test_saved_keys_are_cached_per_class() -> None:
    assert fixtures.FxShape.saved_keys == ('label',)
    assert fixtures.FxCircle.saved_keys == ('label', 'radius')
    assert fixtures.FxCircle().saved_keys == ('label', 'radius')
    assert fixtures.FxCircle.field_specs is fixtures.FxCircle.field_specs


def test_resolve_type_containers() -> None:
    mapping = resolve_type(t.Dict[str, int])
    assert mapping.kind is FieldKind.MAPPING
    assert mapping.item.cls is int

    tuples = resolve_type(t.Tuple[float, ...])
    assert tuples.kind is FieldKind.LIST
    assert tuples.cls is tuple

    nested = resolve_type(t.List[t.Optional[fixtures.FxShape]])
    assert nested.item.kind is FieldKind.RECORD
    assert nested.item.optional

    assert resolve_type(t.Sequence[str]).kind is FieldKind.LIST
    assert resolve_type(t.Mapping[str, t.Any]).item.kind is FieldKind.ANY
    assert resolve_type(int | None).optional
    assert resolve_type(t.Any).kind is FieldKind.ANY
    assert resolve_type(dict).item.kind is FieldKind.ANY


@pytest.mark.parametrize(
    'annotation',
    [set, t.Set[int], t.Dict[int, str], t.Union[int, str], t.Tuple[int, str], bytes],
)
def test_resolve_type_rejects_unsupported(annotation: t.Any) -> None:
    with pytest.raises(RecordDefinitionError):
        resolve_type(annotation)


def test_unsupported_fields_fail_at_class_creation() -> None:
    with pytest.raises(RecordDefinitionError):
        class BadFieldType(Record):
            values: t.Set[int] = RecordField(default_factory=set)

    with pytest.raises(RecordDefinitionError):
        class MissingDefault(Record):
            name: str

    with pytest.raises(RecordDefinitionError):
        class ReservedKey(Record):
            revision: int = RecordField(0, key='version')


def test_values_equal() -> None:
    spec = resolve_type(t.List[fixtures.FxShape])

    assert values_equal(spec, [fixtures.FxCircle(radius=2)], [fixtures.FxCircle(radius=2)])
    assert not values_equal(spec, [fixtures.FxCircle(radius=2)], [fixtures.FxSquare(side=2)])
    assert not values_equal(spec, [fixtures.FxCircle(), fixtures.FxSquare()], [fixtures.FxSquare(), fixtures.FxCircle()])
    assert values_equal(spec, None, None)
    assert not values_equal(spec, [], None)

    codec = resolve_type(Color)
    assert values_equal(codec, Color.from_native('#102030'), Color.from_native('#102030'))
