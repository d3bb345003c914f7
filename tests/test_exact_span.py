import pickle

import pytest
from hypothesis import given
from hypothesis.strategies import builds, integers

from zonedtime import (
    CalendarSpan,
    ExactSpan,
    Overflow,
    hours,
    microseconds,
    milliseconds,
    minutes,
    nanoseconds,
    seconds,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual

_MAX_NANOS = ExactSpan.MAX.in_nanoseconds()
spans = builds(
    ExactSpan._from_nanos,
    integers(-_MAX_NANOS // 4, _MAX_NANOS // 4),
)


class TestInit:

    def test_defaults(self):
        assert ExactSpan().in_nanoseconds() == 0
        assert ExactSpan() == ExactSpan.ZERO

    def test_normalization(self):
        d = ExactSpan(hours=1, minutes=90, seconds=-30, nanoseconds=-1)
        assert d == ExactSpan(hours=2, minutes=29, seconds=29, nanoseconds=999_999_999)

    def test_all_units(self):
        d = ExactSpan(
            hours=1,
            minutes=2,
            seconds=3,
            milliseconds=4,
            microseconds=5,
            nanoseconds=6,
        )
        assert d.in_nanoseconds() == 3_723_004_005_006

    def test_helpers(self):
        assert hours(1) == ExactSpan(hours=1)
        assert minutes(1) == ExactSpan(minutes=1)
        assert seconds(1) == ExactSpan(seconds=1)
        assert milliseconds(1) == ExactSpan(milliseconds=1)
        assert microseconds(1) == ExactSpan(microseconds=1)
        assert nanoseconds(1) == ExactSpan(nanoseconds=1)

    def test_non_int(self):
        with pytest.raises(TypeError):
            ExactSpan(hours=1.5)  # type: ignore[arg-type]

    def test_bounds(self):
        assert ExactSpan(nanoseconds=_MAX_NANOS) == ExactSpan.MAX
        assert -ExactSpan.MAX == ExactSpan.MIN

        with pytest.raises(Overflow):
            ExactSpan(nanoseconds=_MAX_NANOS + 1)

        with pytest.raises(Overflow):
            ExactSpan(hours=1_000_000_000)

        with pytest.raises(Overflow):
            ExactSpan.MAX + nanoseconds(1)

        with pytest.raises(Overflow):
            ExactSpan.MIN * 2


def test_seconds_and_nanoseconds():
    d = ExactSpan(seconds=2, nanoseconds=50)
    assert d.seconds == 2
    assert d.nanoseconds == 50

    # nanoseconds are always positive, the sign is carried by the seconds
    neg = -d
    assert neg.seconds == -3
    assert neg.nanoseconds == 999_999_950


def test_in_units():
    d = ExactSpan(hours=1, minutes=30)
    assert d.in_hours() == 1.5
    assert d.in_minutes() == 90.0
    assert d.in_seconds() == 5400.0
    assert ExactSpan(seconds=2, nanoseconds=50).in_nanoseconds() == 2_000_000_050


def test_in_hrs_mins_secs_nanos():
    d = ExactSpan(hours=1, minutes=30, microseconds=5_000_090)
    assert d.in_hrs_mins_secs_nanos() == (1, 30, 5, 90_000)
    assert (-d).in_hrs_mins_secs_nanos() == (-1, -30, -5, -90_000)
    assert ExactSpan.ZERO.in_hrs_mins_secs_nanos() == (0, 0, 0, 0)


def test_arithmetic():
    d = ExactSpan(hours=1, minutes=30)
    assert d + minutes(30) == hours(2)
    assert d - hours(2) == minutes(-30)
    assert -d == ExactSpan(hours=-1, minutes=-30)
    assert +d is d
    assert abs(-d) == d
    assert d * 3 == ExactSpan(hours=4, minutes=30)
    assert 2 * d == hours(3)

    with pytest.raises(TypeError, match="unsupported operand"):
        d + CalendarSpan(days=1)  # type: ignore[operator]

    with pytest.raises(TypeError, match="unsupported operand"):
        CalendarSpan(days=1) + d  # type: ignore[operator]

    with pytest.raises(TypeError):
        d * 1.5  # type: ignore[operator]


@given(spans, spans, spans)
def test_group_laws(a, b, c):
    assert (a + b) + c == a + (b + c)
    assert a + b == b + a
    assert a + ExactSpan.ZERO == a
    assert a + (-a) == ExactSpan.ZERO
    assert (a - b) + b == a


@given(spans, spans)
def test_total_order(a, b):
    assert (a < b) == (a.in_nanoseconds() < b.in_nanoseconds())
    assert (a <= b) == (not a > b)
    assert (a == b) == (a.in_nanoseconds() == b.in_nanoseconds())


def test_bool():
    assert not ExactSpan()
    assert ExactSpan(nanoseconds=1)
    assert ExactSpan(hours=-1)


def test_eq():
    d = hours(1)
    assert d == minutes(60)
    assert d != minutes(61)
    assert hash(d) == hash(minutes(60))
    assert d == AlwaysEqual()
    assert d != NeverEqual()
    assert not d == 3600  # type: ignore[comparison-overlap]


def test_comparison():
    d = hours(1)
    assert d < hours(2)
    assert d <= hours(1)
    assert d > minutes(59)
    assert d >= minutes(60)
    assert d < AlwaysLarger()
    assert d > AlwaysSmaller()

    with pytest.raises(TypeError):
        d < 3  # type: ignore[operator]


@pytest.mark.parametrize(
    "d, expect",
    [
        (ExactSpan(hours=1, minutes=30), "ExactSpan(01:30:00)"),
        (ExactSpan(hours=-1, minutes=-30), "ExactSpan(-01:30:00)"),
        (ExactSpan(hours=47, seconds=3), "ExactSpan(47:00:03)"),
        (ExactSpan(milliseconds=5), "ExactSpan(00:00:00.005)"),
        (ExactSpan(), "ExactSpan(00:00:00)"),
    ],
)
def test_repr(d, expect):
    assert repr(d) == expect


def test_pickle():
    for d in (hours(5), -ExactSpan(seconds=2, nanoseconds=50), ExactSpan.MAX):
        assert pickle.loads(pickle.dumps(d)) == d
