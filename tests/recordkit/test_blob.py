from __future__ import annotations

import pytest

from recordkit.codecs import Blob, archivable, archive_object, register_archiver, unarchive_object
from recordkit.errors import SerializationError, UnknownTypeError

from . import fixtures


def test_empty_blob() -> None:
    blob = Blob.empty_blob()

    assert blob.empty
    assert blob.length == 0
    assert blob.to_json() is None
    assert blob.object is None
    assert Blob.from_json(None) == blob


def test_blob_data_is_base64_on_the_wire() -> None:
    blob = Blob.with_data(b'hello')

    assert not blob.empty
    assert blob.length == 5
    assert blob.to_json() == 'aGVsbG8='
    assert Blob.from_json('aGVsbG8=').data == b'hello'
    assert Blob.with_string('aGVsbG8=') == blob


def test_blob_rejects_bad_wire_values() -> None:
    with pytest.raises(ValueError):
        Blob.from_json('not base64!')
    with pytest.raises(TypeError):
        Blob.from_json(42)


@pytest.mark.parametrize(
    'value',
    [
        {'a': [1, 2, None], 'b': 'text'},
        fixtures.FxPoint(3, 4),
        fixtures.FxPayload(count=2, label='two'),
    ],
)
def test_blob_object_survives_the_wire(value: object) -> None:
    blob = Blob.with_object(value)

    assert not blob.empty
    assert blob.object == value
    assert blob.object is not value
    assert blob.object is blob.object

    restored = Blob.from_json(blob.to_json())
    assert restored == blob
    assert restored.object == value


def test_blob_archives_records() -> None:
    circle = fixtures.FxCircle(label='dot', radius=0.5)
    restored = Blob.from_json(Blob.with_object(circle).to_json()).object

    assert isinstance(restored, fixtures.FxCircle)
    assert restored == circle


def test_blob_object_reflects_archived_data() -> None:
    circle = fixtures.FxCircle(label='a')
    blob = Blob.with_object(circle)
    circle.label = 'b'
    restored = Blob.from_json(blob.to_json())

    assert restored == blob
    assert blob.object.label == 'a'
    assert restored.object == blob.object


def test_archive_payload_is_tagged() -> None:
    assert archive_object(fixtures.FxPoint(1, 2)) == b'fx-point\x001,2'
    assert unarchive_object(b'json\x00[1, 2]') == [1, 2]


def test_archive_failures() -> None:
    with pytest.raises(SerializationError):
        Blob.with_object(object())
    with pytest.raises(UnknownTypeError):
        Blob.with_data(b'mystery\x00payload').object
    with pytest.raises(ValueError):
        Blob.with_data(b'raw bytes').object


def test_archiver_registration_checks() -> None:
    with pytest.raises(ValueError):
        register_archiver('bad\x00tag', bytes, bytes)
    with pytest.raises(ValueError):
        register_archiver('pydantic:custom', bytes, bytes)

    with pytest.raises(TypeError):
        @archivable('not-archivable')
        class Plain:
            pass
