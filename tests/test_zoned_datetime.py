import pickle
from copy import copy, deepcopy
from typing import Any

import pytest
from hypothesis import given
from hypothesis.strategies import integers

from zonedtime import (
    AmbiguousLocalTime,
    CalendarSpan,
    Date,
    ExactSpan,
    Instant,
    InvalidDate,
    InvalidTime,
    NonExistentLocalTime,
    Overflow,
    Time,
    TransitionTable,
    UnknownTimeZone,
    UtcOffset,
    ZonedDateTime,
    days,
    hours,
    minutes,
    months,
    nanoseconds,
    weeks,
)

from .common import (
    NYC_TZ_POSIX,
    AlwaysEqual,
    AlwaysLarger,
    AlwaysSmaller,
    NeverEqual,
    nyc_table,
)

AMS = "Europe/Amsterdam"
NYC = "America/New_York"


class TestInit:

    def test_unambiguous(self):
        d = ZonedDateTime(2020, 8, 15, 5, 12, 30, nanosecond=450, tz=NYC)

        assert d.year == 2020
        assert d.month == 8
        assert d.day == 15
        assert d.hour == 5
        assert d.minute == 12
        assert d.second == 30
        assert d.nanosecond == 450
        assert d.tz == NYC
        assert d.offset == UtcOffset(-4)

    def test_fold(self):
        kwargs: dict[str, Any] = dict(
            year=2023,
            month=10,
            day=29,
            hour=2,
            minute=15,
            second=30,
            tz=AMS,
        )

        with pytest.raises(
            AmbiguousLocalTime,
            match="2023-10-29 02:15:30 is ambiguous in timezone "
            "'Europe/Amsterdam'",
        ):
            ZonedDateTime(**kwargs)

        assert ZonedDateTime(**kwargs, disambiguate="earliest").offset == (
            UtcOffset(2)
        )
        assert ZonedDateTime(**kwargs, disambiguate="latest").offset == (
            UtcOffset(1)
        )
        # with both readings allowed, the earliest is picked
        assert ZonedDateTime(**kwargs, disambiguate="reject_gap").exact_eq(
            ZonedDateTime(**kwargs, disambiguate="earliest")
        )
        assert issubclass(AmbiguousLocalTime, ValueError)

    def test_gap(self):
        kwargs: dict[str, Any] = dict(
            year=2023,
            month=3,
            day=26,
            hour=2,
            minute=15,
            second=30,
            tz=AMS,
        )

        with pytest.raises(
            NonExistentLocalTime,
            match="2023-03-26 02:15:30 doesn't exist in timezone "
            "'Europe/Amsterdam'",
        ):
            ZonedDateTime(**kwargs)

        for policy in ("earliest", "latest", "reject_gap"):
            with pytest.raises(NonExistentLocalTime):
                ZonedDateTime(**kwargs, disambiguate=policy)

        assert ZonedDateTime(**kwargs, disambiguate="shift_forward").exact_eq(
            ZonedDateTime(2023, 3, 26, 3, 15, 30, tz=AMS)
        )
        assert issubclass(NonExistentLocalTime, ValueError)

    def test_invalid_zone_type(self):
        with pytest.raises(TypeError):
            ZonedDateTime(2020, 8, 15, 5, 12, tz=hours(3))  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "key",
        [
            "America/Nowhere",  # non-existent
            "/America/New_York",  # slash at the beginning
            "America/New_York/",  # slash at the end
            "America/New\0York",  # null byte
            "America\\New_York",  # backslash
            "../America/New_York/",  # relative path
            "America/New_York/..",  # other dots
            "America//New_York",  # double slash
            "America/../America/New_York",  # not normalized
            "America/./America/New_York",  # not normalized
            "Europe",  # a directory
            "__init__.py",  # file in tzdata package
            "",
            ".",
            "/",
            " ",
            "Foo" * 100,  # too long
            "foo:bar",
            "*",
            "America/Bogotá",  # non-ascii
            "+B",
            "-foo",
        ],
    )
    def test_invalid_key(self, key: str):
        with pytest.raises(UnknownTimeZone):
            ZonedDateTime(2020, 8, 15, 5, 12, tz=key)

    def test_tz_required(self):
        with pytest.raises(TypeError):
            ZonedDateTime(2020, 8, 15, 12)  # type: ignore[call-arg]

    def test_invalid_fields(self):
        with pytest.raises(InvalidTime):
            ZonedDateTime(2020, 8, 15, 12, nanosecond=1_000_000_000, tz=AMS)

        with pytest.raises(InvalidDate):
            ZonedDateTime(2021, 2, 29, tz=AMS)

    def test_out_of_range_due_to_offset(self):
        with pytest.raises(Overflow):
            ZonedDateTime(-32768, 1, 1, tz="Asia/Tokyo")

        with pytest.raises(Overflow):
            ZonedDateTime(32767, 12, 31, 23, tz=NYC)

    def test_transition_table(self):
        d = ZonedDateTime(2021, 7, 1, 12, tz=nyc_table())
        assert d.offset == UtcOffset(-4)
        assert d.tz == "Test/New_York"

    def test_fixed_offset(self):
        d = ZonedDateTime(2021, 3, 14, 2, 30, tz=UtcOffset(-3))
        assert d.offset == UtcOffset(-3)
        assert d.tz is None
        assert d.zone == UtcOffset(-3)


def test_from_civil():
    d = ZonedDateTime.from_civil(
        Date(2023, 10, 29), Time(2, 30), tz=AMS, disambiguate="latest"
    )
    assert d.offset == UtcOffset(1)
    assert Date(2023, 10, 29).at(
        Time(2, 30), tz=AMS, disambiguate="latest"
    ).exact_eq(d)

    with pytest.raises(AmbiguousLocalTime):
        ZonedDateTime.from_civil(Date(2023, 10, 29), Time(2, 30), tz=AMS)


class TestFromInstant:

    def test_tzdata(self):
        i = Instant.from_utc(2023, 10, 29, 0, 30)
        d = ZonedDateTime.from_instant(i, tz=AMS)
        assert d.time() == Time(2, 30)
        assert d.offset == UtcOffset(2)
        # an hour later, the same local time with a different offset
        d2 = ZonedDateTime.from_instant(i + hours(1), tz=AMS)
        assert d2.time() == Time(2, 30)
        assert d2.offset == UtcOffset(1)

    def test_explicit_and_posix_transitions(self):
        tz = nyc_table()
        i = Instant.from_utc(2021, 11, 7, 6)
        assert ZonedDateTime.from_instant(i, tz=tz).offset == UtcOffset(-5)
        assert ZonedDateTime.from_instant(
            i - nanoseconds(1), tz=tz
        ).offset == UtcOffset(-4)

        # after the last transition, the POSIX rule applies
        i = Instant.from_utc(2030, 3, 10, 7)
        assert ZonedDateTime.from_instant(i, tz=tz).offset == UtcOffset(-4)
        assert ZonedDateTime.from_instant(
            i - nanoseconds(1), tz=tz
        ).offset == UtcOffset(-5)

    def test_extremes(self):
        assert ZonedDateTime.from_instant(Instant.MIN, tz=UtcOffset()).date() == (
            Date.MIN
        )
        assert ZonedDateTime.from_instant(
            Instant.MAX, tz="UTC"
        ).time() == Time(23, 59, 59, nanosecond=999_999_999)


class TestTimestamp:

    def test_roundtrip(self):
        d = ZonedDateTime.from_timestamp(0, tz=NYC)
        assert d.date() == Date(1969, 12, 31)
        assert d.time() == Time(19)
        assert d.timestamp() == 0

    def test_nanos(self):
        d = ZonedDateTime.from_timestamp_nanos(1_597_493_520_000_000_001, tz=AMS)
        assert d.exact_eq(
            ZonedDateTime(2020, 8, 15, 14, 12, nanosecond=1, tz=AMS)
        )
        assert d.timestamp_nanos() == 1_597_493_520_000_000_001
        assert d.timestamp() == 1_597_493_520

    def test_out_of_range(self):
        with pytest.raises(Overflow):
            ZonedDateTime.from_timestamp(Instant.MAX.timestamp() + 1, tz=AMS)

    # the local date must stay in range too
    @given(integers(Instant.MIN.timestamp(), Instant.MAX.timestamp() - 86_400))
    def test_matches_instant(self, ts):
        d = ZonedDateTime.from_timestamp(ts, tz=UtcOffset(5, 30))
        assert d.instant() == Instant.from_timestamp(ts)
        assert d.timestamp() == ts


def test_now():
    before = Instant.now()
    now = ZonedDateTime.now(AMS)
    after = Instant.now()
    assert before <= now <= after
    assert now.tz == AMS


def test_immutable():
    d = ZonedDateTime(2020, 8, 15, tz=AMS)
    with pytest.raises(AttributeError):
        d.year = 2021  # type: ignore[misc]

    assert copy(d) is d
    assert deepcopy(d) is d


def test_date_and_time():
    d = ZonedDateTime(2020, 8, 15, 14, 30, 45, tz=AMS)
    assert d.date() == Date(2020, 8, 15)
    assert d.time() == Time(14, 30, 45)
    assert d.instant() == Instant.from_utc(2020, 8, 15, 12, 30, 45)


class TestIsDstAndDesignation:

    def test_tzdata(self):
        summer = ZonedDateTime(2023, 7, 1, tz=AMS)
        winter = ZonedDateTime(2023, 1, 1, tz=AMS)
        assert summer.is_dst()
        assert not winter.is_dst()
        assert summer.designation() == "CEST"
        assert winter.designation() == "CET"

    def test_table(self):
        tz = nyc_table()
        # explicit transitions
        assert ZonedDateTime(2021, 7, 1, tz=tz).designation() == "EDT"
        # POSIX rule
        assert ZonedDateTime(2035, 7, 1, tz=tz).designation() == "EDT"
        assert ZonedDateTime(2035, 12, 1, tz=tz).designation() == "EST"
        assert not ZonedDateTime(2035, 12, 1, tz=tz).is_dst()
        # initial type
        assert ZonedDateTime(1850, 1, 1, tz=tz).designation() == "LMT"

    def test_fixed(self):
        d = ZonedDateTime(2023, 7, 1, tz=UtcOffset(5, 30))
        assert not d.is_dst()
        assert d.designation() == "+05:30"


def test_is_ambiguous():
    assert not ZonedDateTime(2023, 10, 29, 1, 59, tz=AMS).is_ambiguous()
    assert ZonedDateTime(
        2023, 10, 29, 2, 15, tz=AMS, disambiguate="earliest"
    ).is_ambiguous()
    assert ZonedDateTime(
        2023, 10, 29, 2, 15, tz=AMS, disambiguate="latest"
    ).is_ambiguous()
    assert not ZonedDateTime(2023, 10, 29, 3, tz=AMS).is_ambiguous()
    assert not ZonedDateTime(2023, 10, 29, 2, 15, tz=UtcOffset(2)).is_ambiguous()


class TestExactEquality:

    def test_same_exact(self):
        a = ZonedDateTime(2020, 8, 15, 12, 8, 30, tz=AMS)
        assert a.exact_eq(ZonedDateTime(2020, 8, 15, 12, 8, 30, tz=AMS))

    def test_same_instant_different_zone(self):
        a = ZonedDateTime(2020, 8, 15, 12, tz=AMS)
        b = a.to_zone(NYC)
        assert a == b
        assert not a.exact_eq(b)

    def test_different_offset_same_local(self):
        a = ZonedDateTime(2023, 10, 29, 2, 15, tz=AMS, disambiguate="earliest")
        b = ZonedDateTime(2023, 10, 29, 2, 15, tz=AMS, disambiguate="latest")
        assert not a.exact_eq(b)

    def test_tables_with_equal_content(self):
        a = ZonedDateTime(2021, 7, 1, tz=nyc_table())
        b = ZonedDateTime(2021, 7, 1, tz=nyc_table())
        assert a.exact_eq(b)

    def test_zone_kinds_differ(self):
        a = ZonedDateTime(2021, 7, 1, tz=UtcOffset(-4))
        b = ZonedDateTime(2021, 7, 1, tz=nyc_table())
        assert a == b
        assert not a.exact_eq(b)

    def test_invalid_type(self):
        a = ZonedDateTime(2020, 8, 15, 12, tz=AMS)
        with pytest.raises(TypeError):
            a.exact_eq(a.instant())  # type: ignore[arg-type]


class TestEquality:

    def test_same_instant(self):
        a = ZonedDateTime(2020, 8, 15, 12, tz=AMS)
        b = ZonedDateTime(2020, 8, 15, 6, tz=NYC)
        assert a == b
        assert hash(a) == hash(b)
        assert a == a.instant()
        assert hash(a) == hash(a.instant())
        assert not a != b

    def test_different(self):
        a = ZonedDateTime(2020, 8, 15, 12, tz=AMS)
        assert a != a + nanoseconds(1)
        assert a != a.replace(tz=NYC)

    def test_fold(self):
        a = ZonedDateTime(2023, 10, 29, 2, 15, tz=AMS, disambiguate="earliest")
        b = ZonedDateTime(2023, 10, 29, 2, 15, tz=AMS, disambiguate="latest")
        assert a != b
        assert b - a == hours(1)

    def test_other_types(self):
        a = ZonedDateTime(2020, 8, 15, 12, tz=AMS)
        assert a == AlwaysEqual()
        assert a != NeverEqual()
        assert not a == 42  # type: ignore[comparison-overlap]
        assert a != a.date()  # type: ignore[comparison-overlap]


def test_comparison():
    a = ZonedDateTime(2020, 8, 15, 12, tz=AMS)
    later = ZonedDateTime(2020, 8, 15, 7, tz=NYC)
    assert a < later
    assert a <= later
    assert later > a
    assert later >= a
    assert a <= a.to_zone(UtcOffset(9))
    assert a < later.instant()
    assert later.instant() > a

    assert a < AlwaysLarger()
    assert a > AlwaysSmaller()

    with pytest.raises(TypeError):
        a < 42  # type: ignore[operator]


def test_to_zone():
    d = ZonedDateTime(2020, 8, 15, 23, tz="Europe/Paris")
    nyc = d.to_zone(NYC)
    assert nyc.exact_eq(ZonedDateTime(2020, 8, 15, 17, tz=NYC))
    assert d.to_zone(UtcOffset()).time() == Time(21)
    # the explicit DST transitions only start in 2021
    assert d.to_zone(nyc_table()).offset == UtcOffset(-5)
    assert d.add(years=1).to_zone(nyc_table()).offset == UtcOffset(-4)

    with pytest.raises(UnknownTimeZone):
        d.to_zone("America/Nowhere")

    with pytest.raises(TypeError):
        d.to_zone(3)  # type: ignore[arg-type]


class TestReplace:

    def test_fields(self):
        d = ZonedDateTime(2020, 8, 15, 23, 12, 9, nanosecond=987_654, tz=AMS)
        assert d.replace(year=2021).exact_eq(
            ZonedDateTime(2021, 8, 15, 23, 12, 9, nanosecond=987_654, tz=AMS)
        )
        assert d.replace(month=1).offset == UtcOffset(1)
        assert d.replace(hour=1, nanosecond=0).exact_eq(
            ZonedDateTime(2020, 8, 15, 1, 12, 9, tz=AMS)
        )

    def test_invalid(self):
        d = ZonedDateTime(2020, 8, 31, tz=AMS)
        with pytest.raises(InvalidDate):
            d.replace(month=9)
        with pytest.raises(InvalidTime):
            d.replace(hour=24)
        with pytest.raises(UnknownTimeZone):
            d.replace(tz="Nowhere")

    def test_tz(self):
        d = ZonedDateTime(2023, 10, 29, 3, 30, tz=AMS)
        nyc = d.replace(tz=NYC)
        assert nyc.time() == Time(3, 30)
        assert nyc.offset == UtcOffset(-4)
        assert nyc != d

    def test_fold_keeps_offset(self):
        before = ZonedDateTime(2023, 10, 29, 1, 30, tz=AMS)
        assert before.replace(hour=2).offset == UtcOffset(2)

        after = ZonedDateTime(2023, 10, 29, 3, 30, tz=AMS)
        assert after.replace(hour=2).offset == UtcOffset(1)

        with pytest.raises(AmbiguousLocalTime):
            after.replace(hour=2, disambiguate="reject")

        assert before.replace(
            hour=2, disambiguate="latest"
        ).offset == UtcOffset(1)

    def test_gap(self):
        d = ZonedDateTime(2023, 3, 26, 1, 30, tz=AMS)
        assert d.replace(hour=2).exact_eq(
            ZonedDateTime(2023, 3, 26, 3, 30, tz=AMS)
        )
        with pytest.raises(NonExistentLocalTime):
            d.replace(hour=2, disambiguate="reject_gap")

        # coming from the later side, the time moves back
        d = ZonedDateTime(2023, 3, 26, 4, 30, tz=AMS)
        assert d.replace(hour=2).exact_eq(
            ZonedDateTime(2023, 3, 26, 1, 30, tz=AMS)
        )

    def test_replace_date(self):
        d = ZonedDateTime(2023, 3, 25, 2, 30, tz=AMS)
        assert d.replace_date(Date(2023, 3, 26)).exact_eq(
            ZonedDateTime(2023, 3, 26, 3, 30, tz=AMS)
        )
        assert d.replace_date(Date(2023, 7, 1)).offset == UtcOffset(2)

        with pytest.raises(NonExistentLocalTime):
            d.replace_date(Date(2023, 3, 26), disambiguate="reject")

    def test_replace_time(self):
        d = ZonedDateTime(2023, 10, 29, 4, tz=AMS)
        assert d.replace_time(Time(2, 15)).offset == UtcOffset(1)
        assert d.replace_time(
            Time(2, 15), disambiguate="earliest"
        ).offset == UtcOffset(2)
        assert d.replace_time(Time(0, 15)).exact_eq(
            ZonedDateTime(2023, 10, 29, 0, 15, tz=AMS)
        )


class TestAddExactUnits:

    def test_across_gap(self):
        d = ZonedDateTime(2023, 3, 26, 1, 30, tz=AMS)
        assert d.add(hours=1).exact_eq(
            ZonedDateTime(2023, 3, 26, 3, 30, tz=AMS)
        )
        assert (d + minutes(30)).exact_eq(
            ZonedDateTime(2023, 3, 26, 3, tz=AMS)
        )

    def test_across_fold(self):
        d = ZonedDateTime(2023, 10, 29, 1, 30, tz=AMS)
        first = d.add(hours=1)
        second = d.add(hours=2)
        assert first.time() == second.time() == Time(2, 30)
        assert first.offset == UtcOffset(2)
        assert second.offset == UtcOffset(1)
        assert second.subtract(hours=1).exact_eq(first)

    def test_units(self):
        d = ZonedDateTime(2020, 8, 15, 23, 12, tz=AMS)
        assert d.add(
            hours=1,
            minutes=2,
            seconds=3,
            milliseconds=4,
            microseconds=5,
            nanoseconds=6,
        ).exact_eq(
            ZonedDateTime(
                2020, 8, 16, 0, 14, 3, nanosecond=4_005_006, tz=AMS
            )
        )
        assert (d - ExactSpan(hours=24)).exact_eq(
            ZonedDateTime(2020, 8, 14, 23, 12, tz=AMS)
        )

    def test_fixed_offset(self):
        d = ZonedDateTime(2023, 3, 26, 1, 30, tz=UtcOffset(1))
        result = d.add(hours=1)
        assert result.time() == Time(2, 30)
        assert result.zone == UtcOffset(1)

    def test_overflow(self):
        d = ZonedDateTime.from_instant(Instant.MAX, tz="UTC")
        with pytest.raises(Overflow):
            d.add(nanoseconds=1)

        d = ZonedDateTime.from_instant(Instant.MIN, tz=UtcOffset())
        with pytest.raises(Overflow):
            d - nanoseconds(1)


class TestAddCalendarUnits:

    def test_keeps_local_time(self):
        d = ZonedDateTime(2023, 10, 28, 12, tz=AMS)
        assert d.add(days=1).exact_eq(ZonedDateTime(2023, 10, 29, 12, tz=AMS))
        assert (d + days(1)) - d == hours(25)
        assert d.add(weeks=1).exact_eq(
            ZonedDateTime(2023, 11, 4, 12, tz=AMS)
        )
        assert (d - weeks(1)).exact_eq(
            ZonedDateTime(2023, 10, 21, 12, tz=AMS)
        )

    def test_month_clamping(self):
        d = ZonedDateTime(2023, 1, 31, 12, tz=AMS)
        assert d.add(months=1).date() == Date(2023, 2, 28)
        assert (d + months(13)).date() == Date(2024, 2, 29)
        assert d.add(years=1, months=1).date() == Date(2024, 2, 29)
        assert d.subtract(months=2).date() == Date(2022, 11, 30)

    def test_gap_forward(self):
        d = ZonedDateTime(2023, 3, 25, 2, 30, tz=AMS)
        assert d.add(days=1).exact_eq(
            ZonedDateTime(2023, 3, 26, 3, 30, tz=AMS)
        )

    def test_gap_backward(self):
        d = ZonedDateTime(2023, 3, 27, 2, 30, tz=AMS)
        assert d.subtract(days=1).exact_eq(
            ZonedDateTime(2023, 3, 26, 1, 30, tz=AMS)
        )

    def test_fold_keeps_offset(self):
        d = ZonedDateTime(2023, 10, 28, 2, 30, tz=AMS)
        assert d.add(days=1).offset == UtcOffset(2)

        d = ZonedDateTime(2023, 10, 30, 2, 30, tz=AMS)
        assert d.subtract(days=1).offset == UtcOffset(1)

        # from the winter offset, months away
        d = ZonedDateTime(2023, 12, 29, 2, 30, tz=AMS)
        assert d.subtract(months=2).offset == UtcOffset(1)

    def test_explicit_policy(self):
        d = ZonedDateTime(2023, 10, 28, 2, 30, tz=AMS)
        assert d.add(days=1, disambiguate="latest").offset == UtcOffset(1)

        with pytest.raises(AmbiguousLocalTime):
            d.add(days=1, disambiguate="reject")

        d = ZonedDateTime(2023, 3, 25, 2, 30, tz=AMS)
        with pytest.raises(NonExistentLocalTime):
            d.add(days=1, disambiguate="earliest")

    def test_calendar_then_exact(self):
        d = ZonedDateTime(2023, 10, 28, 12, tz=AMS)
        assert d.add(days=1, hours=1).exact_eq(
            ZonedDateTime(2023, 10, 29, 13, tz=AMS)
        )
        assert d.add(CalendarSpan(days=1), hours=-24).exact_eq(
            ZonedDateTime(2023, 10, 28, 13, tz=AMS)
        )

    def test_zero(self):
        d = ZonedDateTime(2023, 10, 28, 12, tz=AMS)
        assert d.add().exact_eq(d)
        assert (d + CalendarSpan.ZERO).exact_eq(d)

    def test_overflow(self):
        d = ZonedDateTime(32767, 12, 31, tz="UTC")
        with pytest.raises(Overflow):
            d.add(days=1)

        d = ZonedDateTime(-32768, 1, 1, 12, tz="UTC")
        with pytest.raises(Overflow):
            d.subtract(years=1)

    def test_invalid_type(self):
        d = ZonedDateTime(2023, 10, 28, 12, tz=AMS)
        with pytest.raises(TypeError):
            d.add(3)  # type: ignore[arg-type]

        with pytest.raises(TypeError, match="unsupported operand"):
            d + 3  # type: ignore[operator]

        with pytest.raises(TypeError, match="unsupported operand"):
            d - Date(2023, 1, 1)  # type: ignore[operator]


def test_difference():
    d = ZonedDateTime(2023, 10, 29, 6, tz=AMS)
    assert d - ZonedDateTime(2023, 10, 28, 6, tz=AMS) == ExactSpan(hours=25)
    assert ZonedDateTime(2023, 10, 28, 6, tz=AMS) - d == ExactSpan(hours=-25)
    assert d - d.to_zone(NYC) == ExactSpan.ZERO
    assert d - d.instant().subtract(hours=1) == hours(1)


class TestCalendarDifference:

    @pytest.mark.parametrize(
        "start, end, cal, exact",
        [
            (
                ZonedDateTime(2012, 3, 10, 10, tz=UtcOffset()),
                ZonedDateTime(2012, 3, 12, 2, tz=UtcOffset()),
                days(1),
                hours(16),
            ),
            (
                ZonedDateTime(2012, 4, 11, 9, tz=UtcOffset()),
                ZonedDateTime(2014, 5, 12, 10, tz=UtcOffset()),
                CalendarSpan(years=2, months=1, days=1),
                hours(1),
            ),
            # start is converted to the zone of the end
            (
                ZonedDateTime(2000, 2, 29, 10, tz=UtcOffset(5)),
                ZonedDateTime(2000, 3, 2, 6, tz=UtcOffset()),
                days(2),
                hours(1),
            ),
            # backwards: all components negative
            (
                ZonedDateTime(2021, 12, 31, 1, tz=UtcOffset(-5)),
                ZonedDateTime(2020, 12, 19, 3, tz=UtcOffset()),
                CalendarSpan(years=-1, days=-12),
                hours(-3),
            ),
            # month end clamping
            (
                ZonedDateTime(2021, 1, 31, 10, tz=UtcOffset()),
                ZonedDateTime(2021, 3, 1, 9, tz=UtcOffset()),
                months(1),
                hours(23),
            ),
            # a calendar day across a DST change is 25 exact hours
            (
                ZonedDateTime(2023, 10, 28, 6, tz=AMS),
                ZonedDateTime(2023, 10, 29, 6, tz=AMS),
                days(1),
                ExactSpan.ZERO,
            ),
            (
                ZonedDateTime(2023, 10, 28, 6, tz=AMS),
                ZonedDateTime(2023, 10, 28, 6, tz=AMS),
                CalendarSpan.ZERO,
                ExactSpan.ZERO,
            ),
        ],
    )
    def test_examples(self, start, end, cal, exact):
        assert end.calendar_difference(start) == (cal, exact)
        assert start.to_zone(end.zone).add(cal) + exact == end

    def test_other_zone(self):
        start = ZonedDateTime(2023, 1, 15, 12, tz=NYC)
        end = ZonedDateTime(2023, 7, 20, 9, tz=AMS)
        cal, exact = end.calendar_difference(start)
        # 2023-01-15 18:00 in Amsterdam
        assert cal == CalendarSpan(months=6, days=4)
        assert exact == hours(15)
        assert start.to_zone(AMS).add(cal) + exact == end

    def test_invalid(self):
        d = ZonedDateTime(2023, 1, 15, 12, tz=NYC)
        with pytest.raises(TypeError):
            d.calendar_difference(d.instant())  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "d, expect",
    [
        (
            ZonedDateTime(2020, 8, 15, 23, 12, tz="Europe/London"),
            "2020-08-15T23:12:00+01:00[Europe/London]",
        ),
        (
            ZonedDateTime(2020, 8, 15, 23, 12, nanosecond=1, tz=NYC),
            "2020-08-15T23:12:00.000000001-04:00[America/New_York]",
        ),
        (
            ZonedDateTime(1850, 1, 1, tz=nyc_table()),
            "1850-01-01T00:00:00-04:56:02[Test/New_York]",
        ),
        (
            ZonedDateTime(2020, 8, 15, tz=UtcOffset(-3)),
            "2020-08-15T00:00:00-03:00",
        ),
        (
            ZonedDateTime(
                2021, 7, 1, tz=TransitionTable.parse_posix(NYC_TZ_POSIX)
            ),
            "2021-07-01T00:00:00-04:00",
        ),
    ],
)
def test_str_and_repr(d, expect):
    assert str(d) == expect
    assert repr(d) == f"ZonedDateTime({expect.replace('T', ' ', 1)})"


class TestPickle:

    def test_tzdata(self):
        d = ZonedDateTime(2023, 10, 29, 2, 15, tz=AMS, disambiguate="latest")
        loaded = pickle.loads(pickle.dumps(d))
        assert loaded.exact_eq(d)

    def test_fixed_offset(self):
        d = ZonedDateTime(2020, 8, 15, 23, nanosecond=5, tz=UtcOffset(-3))
        loaded = pickle.loads(pickle.dumps(d))
        assert loaded.exact_eq(d)
        assert loaded.tz is None

    def test_table_without_key(self):
        d = ZonedDateTime(
            2021, 7, 1, tz=TransitionTable.parse_posix(NYC_TZ_POSIX)
        )
        with pytest.raises(TypeError, match="without ID"):
            pickle.dumps(d)
