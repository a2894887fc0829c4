from __future__ import annotations

import pytest

from recordkit.codecs import Interval, IntervalAmount, IntervalUnits


def test_interval_amount_wire_form() -> None:
    interval = Interval.with_amount(3, IntervalUnits.DAY)

    assert interval.to_json() == {
        'usingRange': False,
        'firstAmount': 0,
        'secondAmount': 0,
        'amount': 3,
        'units': 3,
    }
    assert interval.amount_time_interval == 259200
    assert Interval.from_json(interval.to_json()) == interval


def test_interval_range() -> None:
    interval = Interval.with_range(1, 3, IntervalUnits.WEEK)

    assert interval.using_range
    assert interval.first_time_interval == 604800
    assert interval.second_time_interval == 3 * 604800
    assert interval.range_difference_interval == 2 * 604800
    assert interval.to_json()['usingRange'] is True


@pytest.mark.parametrize(
    'units, seconds',
    [
        (IntervalUnits.SECOND, 1),
        (IntervalUnits.HOUR, 3600),
        (IntervalUnits.MONTH, 365 * 86400 / 12),
        (IntervalUnits.QUARTER, 365 * 86400 / 4),
        (IntervalUnits.YEAR, 365 * 86400),
        (IntervalUnits.NEVER, 0),
        (IntervalUnits.FOREVER, 2 ** 31 - 1),
    ],
)
def test_interval_unit_seconds(units: IntervalUnits, seconds: float) -> None:
    assert Interval.with_amount(1, units).units_time_interval == seconds


def test_interval_saturates_at_forever() -> None:
    forever = Interval.with_amount(5, IntervalUnits.FOREVER)
    assert forever.amount_time_interval == IntervalAmount.FOREVER
    assert forever.range_difference_interval == IntervalAmount.FOREVER

    never = Interval.with_amount(5, IntervalUnits.NEVER)
    assert never.amount_time_interval == 0


def test_interval_units_are_stable() -> None:
    assert [units.value for units in IntervalUnits] == list(range(10))
    assert IntervalUnits.NEVER == 8
    assert IntervalUnits.FOREVER == 9


def test_interval_keeps_unknown_keys() -> None:
    data = {'usingRange': False, 'amount': 2, 'units': 1, 'label': 'soon'}
    interval = Interval.from_json(data)

    assert interval.extra_values == {'label': 'soon'}
    assert interval.amount_time_interval == 120
    assert interval.to_json()['label'] == 'soon'
    assert interval.to_json()['firstAmount'] == 0


def test_interval_rejects_bad_wire_values() -> None:
    with pytest.raises(TypeError):
        Interval.from_json([3, 3])
    with pytest.raises(ValueError):
        Interval.from_json({'units': 42})
