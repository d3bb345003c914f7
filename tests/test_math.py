from datetime import date as py_date

import pytest
from hypothesis import given
from hypothesis.strategies import integers

from zonedtime._math import (
    MAX_EPOCH_DAYS,
    MAX_YEAR,
    MIN_EPOCH_DAYS,
    MIN_YEAR,
    add_months,
    day_of_year,
    days_in_month,
    days_in_year,
    epoch_days_to_ymd,
    is_leap,
    iso_week,
    iso_weekday,
    months_between,
    ymd_to_epoch_days,
)

_PY_EPOCH = py_date(1970, 1, 1).toordinal()


@pytest.mark.parametrize(
    "year, expect",
    [
        (2000, True),
        (1900, False),
        (2024, True),
        (2023, False),
        (0, True),
        (-4, True),
        (-100, False),
        (-400, True),
    ],
)
def test_is_leap(year, expect):
    assert is_leap(year) is expect
    assert days_in_year(year) == (366 if expect else 365)


def test_days_in_month():
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2024, 2) == 29
    assert days_in_month(1900, 2) == 28
    assert days_in_month(2023, 4) == 30
    assert days_in_month(2023, 12) == 31


@pytest.mark.parametrize(
    "ymd, days",
    [
        ((1970, 1, 1), 0),
        ((1969, 12, 31), -1),
        ((2000, 3, 1), 11017),
        ((2021, 3, 14), 18700),
        ((0, 3, 1), -719468),
    ],
)
def test_known_epoch_days(ymd, days):
    assert ymd_to_epoch_days(*ymd) == days
    assert epoch_days_to_ymd(days) == ymd


def test_range_limits():
    assert epoch_days_to_ymd(MIN_EPOCH_DAYS) == (MIN_YEAR, 1, 1)
    assert epoch_days_to_ymd(MAX_EPOCH_DAYS) == (MAX_YEAR, 12, 31)


@given(integers(MIN_EPOCH_DAYS, MAX_EPOCH_DAYS))
def test_days_roundtrip(days):
    y, m, d = epoch_days_to_ymd(days)
    assert 1 <= m <= 12
    assert 1 <= d <= days_in_month(y, m)
    assert ymd_to_epoch_days(y, m, d) == days


@given(integers(1, 3_652_058))
def test_matches_stdlib(ordinal):
    d = py_date.fromordinal(ordinal)
    days = ordinal - _PY_EPOCH
    assert epoch_days_to_ymd(days) == (d.year, d.month, d.day)
    assert iso_weekday(days) == d.isoweekday()
    assert iso_week(days) == tuple(d.isocalendar())
    assert day_of_year(d.year, d.month, d.day) == d.timetuple().tm_yday


def test_add_months_clamps():
    assert add_months(2021, 1, 31, 1) == (2021, 2, 28)
    assert add_months(2020, 1, 31, 1) == (2020, 2, 29)
    assert add_months(2021, 3, 31, -1) == (2021, 2, 28)
    assert add_months(2021, 11, 15, 3) == (2022, 2, 15)
    assert add_months(2021, 1, 15, -13) == (2019, 12, 15)


@pytest.mark.parametrize(
    "start, end, expect",
    [
        ((2021, 1, 31), (2021, 2, 28), 1),
        ((2021, 1, 31), (2021, 2, 27), 0),
        ((2021, 1, 15), (2023, 4, 1), 26),
        ((2023, 4, 1), (2021, 1, 31), -26),
        ((2021, 3, 31), (2021, 2, 28), -1),
        ((2021, 3, 1), (2021, 3, 1), 0),
    ],
)
def test_months_between(start, end, expect):
    assert months_between(start, end) == expect
