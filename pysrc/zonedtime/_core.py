# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - All the value types live in this one file, since they 'know' about each
#   other (a Date can be combined into a ZonedDateTime, which can produce
#   an Instant, etc.) Timezone data handling lives in the `_tz` package,
#   which knows nothing about the types here: it speaks in epoch seconds
#   and offsets in whole seconds.
# - Every type stores plain integers: a Date is a day count from 1970-01-01,
#   a Time is nanoseconds since midnight. Calendar fields are computed on
#   demand.
# - Nothing here wraps around silently. Leaving the supported range of
#   dates raises `Overflow`.
from __future__ import annotations

__version__ = "0.1.0"

import enum
from struct import pack, unpack
from time import time_ns
from typing import (
    TYPE_CHECKING,
    ClassVar,
    NamedTuple,
    Optional,
    Union,
    no_type_check,
)

from ._common import (
    EPOCH_SECS_MAX,
    EPOCH_SECS_MIN,
    MAX_OFFSET_SECS,
    NS_PER_DAY,
    NS_PER_SEC,
    SECS_PER_DAY,
)
from ._math import (
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
    iso_week_to_epoch_days,
    iso_weekday,
    months_between,
    weeks_in_iso_year,
    ymd_to_epoch_days,
)
from ._tz.ambiguity import (
    AmbiguousLocalTime,
    NonExistentLocalTime,
    Resolution,
    as_policy,
    resolve_ambiguity,
    resolve_using_prev_offset,
)
from ._tz.common import (
    Ambiguity,
    Disambiguate,
    Fold,
    FormatError,
    Unambiguous,
)
from ._tz.store import UnknownTimeZone, get_system_tz, get_tz
from ._tz.tzif import TransitionTable

__all__ = [
    # Date and time
    "Date",
    "Time",
    "Instant",
    "UtcOffset",
    "ZonedDateTime",
    # Spans and time units
    "CalendarSpan",
    "ExactSpan",
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
    "microseconds",
    "nanoseconds",
    # Timezones
    "TransitionTable",
    "Disambiguate",
    "Candidate",
    "resolve_local",
    "system_tz",
    # Exceptions
    "InvalidDate",
    "InvalidTime",
    "InvalidOffset",
    "Overflow",
    "FormatError",
    "UnknownTimeZone",
    "AmbiguousLocalTime",
    "NonExistentLocalTime",
    # Constants
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    "Weekday",
]


class Weekday(enum.Enum):
    """The days of the week; ``.value`` corresponds with ISO numbering."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


MONDAY = Weekday.MONDAY
TUESDAY = Weekday.TUESDAY
WEDNESDAY = Weekday.WEDNESDAY
THURSDAY = Weekday.THURSDAY
FRIDAY = Weekday.FRIDAY
SATURDAY = Weekday.SATURDAY
SUNDAY = Weekday.SUNDAY

# Helpers that pre-compute/lookup as much as possible
_object_new = object.__new__
_MAX_DELTA_YEARS = MAX_YEAR - MIN_YEAR
_MAX_DELTA_MONTHS = (_MAX_DELTA_YEARS + 1) * 12
_MAX_DELTA_DAYS = MAX_EPOCH_DAYS - MIN_EPOCH_DAYS
_MAX_DELTA_NANOS = (_MAX_DELTA_DAYS + 1) * NS_PER_DAY


def _check_ints(*values: int) -> None:
    for v in values:
        if not isinstance(v, int):
            raise TypeError(f"Expected int, got {type(v).__name__}")


def _checked_epoch_days(year: int, month: int, day: int) -> int:
    _check_ints(year, month, day)
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidDate(f"Year out of range: {year}")
    if not 1 <= month <= 12:
        raise InvalidDate(f"Month must be in 1..12, got {month}")
    if not 1 <= day <= days_in_month(year, month):
        raise InvalidDate(
            f"Day {day} out of range for {_format_year(year)}-{month:02}"
        )
    return ymd_to_epoch_days(year, month, day)


def _checked_span_nanos(ns: int) -> int:
    if abs(ns) > _MAX_DELTA_NANOS:
        raise Overflow("ExactSpan out of range")
    return ns


def _checked_calendar_parts(
    years: int, months: int, days: int
) -> tuple[int, int, int]:
    if (
        abs(years) > _MAX_DELTA_YEARS
        or abs(years * 12 + months) > _MAX_DELTA_MONTHS
        or abs(days) > _MAX_DELTA_DAYS
    ):
        raise Overflow("CalendarSpan out of range")
    return years, months, days


def _format_year(year: int) -> str:
    # Years outside 0-9999 use the expanded ISO 8601 format
    return f"{year:04}" if 0 <= year <= 9999 else f"{year:+07}"


class InvalidDate(ValueError):
    """A year, month, and day that don't form a valid date"""


class InvalidTime(ValueError):
    """Time components outside their valid range"""


class InvalidOffset(ValueError):
    """A UTC offset of 24 hours or more"""


class Overflow(OverflowError):
    """A result falls outside the supported range of dates"""


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


@final
class Date(_ImmutableBase):
    """A date in the proleptic Gregorian calendar

    Example
    -------
    >>> d = Date(2021, 1, 2)
    Date(2021-01-02)
    """

    __slots__ = ("_days",)

    MIN: ClassVar[Date]
    """The minimum possible date"""
    MAX: ClassVar[Date]
    """The maximum possible date"""

    def __init__(self, year: int, month: int, day: int) -> None:
        self._days = _checked_epoch_days(year, month, day)

    @classmethod
    def from_epoch_days(cls, days: int, /) -> Date:
        """Create from the number of days since 1970-01-01

        Inverse of :attr:`epoch_days`

        Example
        -------
        >>> Date.from_epoch_days(365)
        Date(1971-01-01)
        """
        _check_ints(days)
        if not MIN_EPOCH_DAYS <= days <= MAX_EPOCH_DAYS:
            raise Overflow(f"Date out of range: {days} days from 1970-01-01")
        return cls._from_days_unchecked(days)

    @classmethod
    def from_ordinal(cls, year: int, ordinal: int, /) -> Date:
        """Create from a year and the (1-based) day of that year

        Inverse of :meth:`day_of_year`

        Example
        -------
        >>> Date.from_ordinal(1992, 62)
        Date(1992-03-02)
        >>> Date.from_ordinal(2013, 366)
        Traceback (most recent call last):
          ...
        zonedtime.InvalidDate: Day 366 out of range for year 2013
        """
        _check_ints(year, ordinal)
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise InvalidDate(f"Year out of range: {year}")
        if not 1 <= ordinal <= days_in_year(year):
            raise InvalidDate(
                f"Day {ordinal} out of range for year {_format_year(year)}"
            )
        return cls._from_days_unchecked(
            ymd_to_epoch_days(year, 1, 1) + ordinal - 1
        )

    @classmethod
    def from_iso_week(cls, year: int, week: int, weekday: Weekday, /) -> Date:
        """Create from an ISO 8601 week date

        Inverse of :meth:`iso_week`. Note that the week-based year may
        differ from the calendar year near January 1st.

        Example
        -------
        >>> Date.from_iso_week(2020, 53, Weekday.SATURDAY)
        Date(2021-01-02)
        >>> Date.from_iso_week(1997, 1, Weekday.TUESDAY)
        Date(1996-12-31)
        """
        _check_ints(year, week)
        if not isinstance(weekday, Weekday):
            raise TypeError(f"Expected Weekday, got {type(weekday).__name__}")
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise InvalidDate(f"Year out of range: {year}")
        if not 1 <= week <= weeks_in_iso_year(year):
            raise InvalidDate(
                f"Week {week} out of range for ISO year {_format_year(year)}"
            )
        return cls.from_epoch_days(
            iso_week_to_epoch_days(year, week, weekday.value)
        )

    @classmethod
    def today_in(cls, tz: ZoneLike, /) -> Date:
        """The current date in the given timezone

        Alias for ``ZonedDateTime.now(tz).date()``.
        """
        return ZonedDateTime.now(tz).date()

    @property
    def epoch_days(self) -> int:
        """The number of days since 1970-01-01 (negative before then)"""
        return self._days

    @property
    def year(self) -> int:
        return epoch_days_to_ymd(self._days)[0]

    @property
    def month(self) -> int:
        return epoch_days_to_ymd(self._days)[1]

    @property
    def day(self) -> int:
        return epoch_days_to_ymd(self._days)[2]

    def ymd(self) -> tuple[int, int, int]:
        """The year, month, and day as a tuple

        Example
        -------
        >>> Date(2021, 1, 2).ymd()
        (2021, 1, 2)
        """
        return epoch_days_to_ymd(self._days)

    def day_of_week(self) -> Weekday:
        """The day of the week

        Example
        -------
        >>> Date(2021, 1, 2).day_of_week()
        Weekday.SATURDAY
        >>> Weekday.SATURDAY.value
        6  # the ISO value
        """
        return Weekday(iso_weekday(self._days))

    def day_of_year(self) -> int:
        """The ordinal day of the year, starting at 1 for January 1st"""
        return day_of_year(*epoch_days_to_ymd(self._days))

    def iso_week(self) -> tuple[int, int, Weekday]:
        """The ISO 8601 week date: week-based year, week number, weekday

        Example
        -------
        >>> Date(2021, 1, 2).iso_week()
        (2020, 53, Weekday.SATURDAY)
        """
        year, week, weekday = iso_week(self._days)
        return year, week, Weekday(weekday)

    def in_leap_year(self) -> bool:
        return is_leap(self.year)

    def days_in_month(self) -> int:
        return days_in_month(*epoch_days_to_ymd(self._days)[:2])

    def days_in_year(self) -> int:
        return days_in_year(self.year)

    def next_weekday(self, weekday: Weekday, /) -> Date:
        """The first date after this one that falls on the given weekday.
        Always moves forward, even if this date is already that weekday.

        Example
        -------
        >>> d = Date(2021, 3, 17)  # a wednesday
        >>> d.next_weekday(Weekday.MONDAY)
        Date(2021-03-22)
        >>> d.next_weekday(Weekday.WEDNESDAY)
        Date(2021-03-24)
        """
        if not isinstance(weekday, Weekday):
            raise TypeError(f"Expected Weekday, got {type(weekday).__name__}")
        ahead = (weekday.value - iso_weekday(self._days)) % 7 or 7
        return Date.from_epoch_days(self._days + ahead)

    def prev_weekday(self, weekday: Weekday, /) -> Date:
        """The last date before this one that falls on the given weekday.
        Always moves back, even if this date is already that weekday.

        Example
        -------
        >>> d = Date(2021, 3, 17)  # a wednesday
        >>> d.prev_weekday(Weekday.THURSDAY)
        Date(2021-03-11)
        >>> d.prev_weekday(Weekday.WEDNESDAY)
        Date(2021-03-10)
        """
        if not isinstance(weekday, Weekday):
            raise TypeError(f"Expected Weekday, got {type(weekday).__name__}")
        behind = (iso_weekday(self._days) - weekday.value) % 7 or 7
        return Date.from_epoch_days(self._days - behind)

    def at(
        self,
        t: Time,
        /,
        *,
        tz: ZoneLike,
        disambiguate: Union[Disambiguate, str] = Disambiguate.REJECT,
    ) -> ZonedDateTime:
        """Combine with a time, in the given timezone

        Example
        -------
        >>> Date(2021, 1, 2).at(Time(12, 30), tz="Europe/Paris")
        ZonedDateTime(2021-01-02 12:30:00+01:00[Europe/Paris])
        """
        return ZonedDateTime.from_civil(
            self, t, tz=tz, disambiguate=disambiguate
        )

    def replace(
        self,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        day: Optional[int] = None,
    ) -> Date:
        """Create a new instance with the given fields replaced

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d.replace(day=4)
        Date(2021-01-04)
        """
        y, m, d = epoch_days_to_ymd(self._days)
        return Date(
            y if year is None else year,
            m if month is None else month,
            d if day is None else day,
        )

    def add(
        self,
        delta: Optional[CalendarSpan] = None,
        /,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
    ) -> Date:
        """Add a calendar span to this date.

        Years and months are applied together, after which the day is
        clamped to the end of the month if needed. Days are added last.

        Example
        -------
        >>> d = Date(2021, 1, 31)
        >>> d.add(months=1)
        Date(2021-02-28)
        >>> d.add(years=1, months=1, days=2)
        Date(2022-03-02)
        """
        span = CalendarSpan(years=years, months=months, weeks=weeks, days=days)
        if delta is not None:
            span = span + delta
        return self._add_span(span)

    def subtract(
        self,
        delta: Optional[CalendarSpan] = None,
        /,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
    ) -> Date:
        """Subtract a calendar span from this date

        Equivalent to adding the negated span.

        Example
        -------
        >>> d = Date(2021, 3, 31)
        >>> d.subtract(months=1)
        Date(2021-02-28)
        """
        span = CalendarSpan(years=years, months=months, weeks=weeks, days=days)
        if delta is not None:
            span = span + delta
        return self._add_span(-span)

    def _add_span(self, span: CalendarSpan) -> Date:
        days = self._days
        if total_months := span._years * 12 + span._months:
            y, m, d = add_months(*epoch_days_to_ymd(days), total_months)
            if not MIN_YEAR <= y <= MAX_YEAR:
                raise Overflow(f"Resulting year {y} out of range")
            days = ymd_to_epoch_days(y, m, d)
        return Date.from_epoch_days(days + span._days)

    def days_until(self, other: Date, /) -> int:
        """The number of days from this date to the other

        Example
        -------
        >>> Date(2021, 1, 2).days_until(Date(2021, 1, 5))
        3
        """
        return other._days - self._days

    def days_since(self, other: Date, /) -> int:
        """The number of days from the other date to this one"""
        return self._days - other._days

    def __add__(self, p: CalendarSpan) -> Date:
        """Add a calendar span to this date

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d + months(2)
        Date(2021-03-02)
        """
        if isinstance(p, CalendarSpan):
            return self._add_span(p)
        return NotImplemented

    def __sub__(self, d: Union[CalendarSpan, Date]) -> Union[Date, CalendarSpan]:
        """Subtract a span, or calculate the span between two dates.

        The span between dates consists of years, months, and days,
        such that ``other + (self - other) == self``.

        Example
        -------
        >>> Date(2021, 3, 2) - months(2)
        Date(2021-01-02)
        >>> Date(2023, 4, 1) - Date(2021, 1, 31)
        CalendarSpan(P2Y2M1D)
        """
        if isinstance(d, CalendarSpan):
            return self._add_span(-d)
        elif isinstance(d, Date):
            start, end = d.ymd(), self.ymd()
            total_months = months_between(start, end)
            remaining = self._days - ymd_to_epoch_days(
                *add_months(*start, total_months)
            )
            yrs, mos = divmod(abs(total_months), 12)
            sign = -1 if total_months < 0 else 1
            return CalendarSpan._from_parts_unchecked(
                sign * yrs, sign * mos, remaining
            )
        return NotImplemented

    def __str__(self) -> str:
        y, m, d = epoch_days_to_ymd(self._days)
        return f"{_format_year(y)}-{m:02}-{d:02}"

    def __repr__(self) -> str:
        return f"Date({self})"

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d == Date(2021, 1, 2)
        True
        >>> d == Date(2021, 1, 3)
        False
        """
        if not isinstance(other, Date):
            return NotImplemented
        return self._days == other._days

    def __hash__(self) -> int:
        return hash(self._days)

    def __lt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._days < other._days

    def __le__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._days <= other._days

    def __gt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._days > other._days

    def __ge__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._days >= other._days

    @classmethod
    def _from_days_unchecked(cls, days: int) -> Date:
        self = _object_new(cls)
        self._days = days
        return self

    @no_type_check
    def __reduce__(self):
        return _unpkl_date, (pack("<i", self._days),)


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_date(data: bytes) -> Date:
    return Date._from_days_unchecked(*unpack("<i", data))


Date.MIN = Date._from_days_unchecked(MIN_EPOCH_DAYS)
Date.MAX = Date._from_days_unchecked(MAX_EPOCH_DAYS)


@final
class Time(_ImmutableBase):
    """Time of day without a date component

    Example
    -------
    >>> t = Time(12, 30, 0)
    Time(12:30:00)
    """

    __slots__ = ("_ns",)

    MIDNIGHT: ClassVar[Time]
    """The time at midnight"""
    NOON: ClassVar[Time]
    """The time at noon"""
    MAX: ClassVar[Time]
    """The maximum time, just before midnight"""

    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        nanosecond: int = 0,
    ) -> None:
        _check_ints(hour, minute, second, nanosecond)
        if not (
            0 <= hour < 24
            and 0 <= minute < 60
            and 0 <= second < 60
            and 0 <= nanosecond < NS_PER_SEC
        ):
            raise InvalidTime(
                f"Invalid time: hour={hour}, minute={minute}, "
                f"second={second}, nanosecond={nanosecond}"
            )
        self._ns = (hour * 3600 + minute * 60 + second) * NS_PER_SEC + nanosecond

    @classmethod
    def from_nanos_of_day(cls, ns: int, /) -> Time:
        """Create from the number of nanoseconds since midnight

        Inverse of :attr:`nanosecond_of_day`
        """
        _check_ints(ns)
        if not 0 <= ns < NS_PER_DAY:
            raise InvalidTime(f"Nanosecond of day out of range: {ns}")
        return cls._from_ns_unchecked(ns)

    @property
    def hour(self) -> int:
        return self._ns // 3_600_000_000_000

    @property
    def minute(self) -> int:
        return self._ns // 60_000_000_000 % 60

    @property
    def second(self) -> int:
        return self._ns // NS_PER_SEC % 60

    @property
    def nanosecond(self) -> int:
        return self._ns % NS_PER_SEC

    @property
    def nanosecond_of_day(self) -> int:
        return self._ns

    def add_with_carry(self, span: ExactSpan, /) -> tuple[Time, int]:
        """Add an exact span, wrapping around midnight.
        Also returns the number of days carried over (possibly negative).

        Example
        -------
        >>> Time(23, 30).add_with_carry(hours(1))
        (Time(00:30:00), 1)
        >>> Time(0, 30).add_with_carry(hours(-25))
        (Time(23:30:00), -2)
        """
        carry, ns = divmod(self._ns + span._total_ns, NS_PER_DAY)
        return Time._from_ns_unchecked(ns), carry

    def __sub__(self, other: Time) -> ExactSpan:
        """The exact span between two times of day, within the same day

        Example
        -------
        >>> Time(23, 30, 15) - Time(10, 0, 30)
        ExactSpan(13:29:45)
        """
        if not isinstance(other, Time):
            return NotImplemented
        return ExactSpan._from_nanos_unchecked(self._ns - other._ns)

    def replace(
        self,
        *,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        second: Optional[int] = None,
        nanosecond: Optional[int] = None,
    ) -> Time:
        """Create a new instance with the given fields replaced

        Example
        -------
        >>> t = Time(12, 30, 0)
        >>> t.replace(minute=3, nanosecond=4_000)
        Time(12:03:00.000004)
        """
        return Time(
            self.hour if hour is None else hour,
            self.minute if minute is None else minute,
            self.second if second is None else second,
            nanosecond=self.nanosecond if nanosecond is None else nanosecond,
        )

    def __str__(self) -> str:
        secs, ns = divmod(self._ns, NS_PER_SEC)
        hrs, rem = divmod(secs, 3600)
        mins, secs = divmod(rem, 60)
        return f"{hrs:02}:{mins:02}:{secs:02}" + (
            f".{ns:09}".rstrip("0") if ns else ""
        )

    def __repr__(self) -> str:
        return f"Time({self})"

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------
        >>> t = Time(12, 30, 0)
        >>> t == Time(12, 30, 0)
        True
        >>> t == Time(12, 30, 1)
        False
        """
        if not isinstance(other, Time):
            return NotImplemented
        return self._ns == other._ns

    def __hash__(self) -> int:
        return hash(self._ns)

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._ns < other._ns

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._ns <= other._ns

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._ns > other._ns

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._ns >= other._ns

    @classmethod
    def _from_ns_unchecked(cls, ns: int) -> Time:
        self = _object_new(cls)
        self._ns = ns
        return self

    @no_type_check
    def __reduce__(self):
        return _unpkl_time, (pack("<q", self._ns),)


def _unpkl_time(data: bytes) -> Time:
    return Time._from_ns_unchecked(*unpack("<q", data))


Time.MIDNIGHT = Time()
Time.NOON = Time(12)
Time.MAX = Time(23, 59, 59, nanosecond=999_999_999)


@final
class ExactSpan(_ImmutableBase):
    """A precise duration: a fixed number of (nano)seconds

    The inputs are normalized, so 90 minutes becomes 1 hour and 30 minutes,
    for example. Unlike :class:`CalendarSpan`, the size of an exact span
    never depends on when it's applied.

    Examples
    --------
    >>> d = ExactSpan(hours=1, minutes=30)
    ExactSpan(01:30:00)
    >>> d.in_minutes()
    90.0

    Note
    ----
    A shorter way to instantiate a span is to use the helper functions
    :func:`~zonedtime.hours`, :func:`~zonedtime.minutes`, etc.
    """

    __slots__ = ("_total_ns",)

    def __init__(
        self,
        *,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> None:
        _check_ints(
            hours, minutes, seconds, milliseconds, microseconds, nanoseconds
        )
        self._total_ns = _checked_span_nanos(
            hours * 3_600_000_000_000
            + minutes * 60_000_000_000
            + seconds * NS_PER_SEC
            + milliseconds * 1_000_000
            + microseconds * 1_000
            + nanoseconds
        )

    ZERO: ClassVar[ExactSpan]
    """A span of zero"""
    MAX: ClassVar[ExactSpan]
    """The maximum possible span"""
    MIN: ClassVar[ExactSpan]
    """The minimum possible span"""

    @property
    def seconds(self) -> int:
        """The whole seconds, rounded towards negative infinity.
        Together with :attr:`nanoseconds` this makes up the span."""
        return self._total_ns // NS_PER_SEC

    @property
    def nanoseconds(self) -> int:
        """The nanoseconds after :attr:`seconds`, always 0-999_999_999"""
        return self._total_ns % NS_PER_SEC

    def in_hours(self) -> float:
        """The total size in hours

        Example
        -------
        >>> d = ExactSpan(hours=1, minutes=30)
        >>> d.in_hours()
        1.5
        """
        return self._total_ns / 3_600_000_000_000

    def in_minutes(self) -> float:
        return self._total_ns / 60_000_000_000

    def in_seconds(self) -> float:
        """The total size in seconds

        Example
        -------
        >>> d = ExactSpan(minutes=2, seconds=1, microseconds=500_000)
        >>> d.in_seconds()
        121.5
        """
        return self._total_ns / NS_PER_SEC

    def in_nanoseconds(self) -> int:
        """The total size in nanoseconds

        >>> d = ExactSpan(seconds=2, nanoseconds=50)
        >>> d.in_nanoseconds()
        2_000_000_050
        """
        return self._total_ns

    def in_hrs_mins_secs_nanos(self) -> tuple[int, int, int, int]:
        """Convert to a tuple of (hours, minutes, seconds, nanoseconds).
        All components share the sign of the span.

        Example
        -------
        >>> d = ExactSpan(hours=1, minutes=30, microseconds=5_000_090)
        >>> d.in_hrs_mins_secs_nanos()
        (1, 30, 5, 90_000)
        """
        hrs, rem = divmod(abs(self._total_ns), 3_600_000_000_000)
        mins, rem = divmod(rem, 60_000_000_000)
        secs, ns = divmod(rem, NS_PER_SEC)
        return (
            (hrs, mins, secs, ns)
            if self._total_ns >= 0
            else (-hrs, -mins, -secs, -ns)
        )

    def __add__(self, other: ExactSpan) -> ExactSpan:
        """Add two spans together

        Example
        -------
        >>> d = ExactSpan(hours=1, minutes=30)
        >>> d + ExactSpan(minutes=30)
        ExactSpan(02:00:00)
        """
        if not isinstance(other, ExactSpan):
            return NotImplemented
        return ExactSpan._from_nanos(self._total_ns + other._total_ns)

    def __sub__(self, other: ExactSpan) -> ExactSpan:
        if not isinstance(other, ExactSpan):
            return NotImplemented
        return ExactSpan._from_nanos(self._total_ns - other._total_ns)

    def __neg__(self) -> ExactSpan:
        return ExactSpan._from_nanos_unchecked(-self._total_ns)

    def __pos__(self) -> ExactSpan:
        return self

    def __abs__(self) -> ExactSpan:
        return ExactSpan._from_nanos_unchecked(abs(self._total_ns))

    def __mul__(self, other: int) -> ExactSpan:
        """Multiply by a whole number

        Example
        -------
        >>> d = ExactSpan(hours=1, minutes=30)
        >>> d * 3
        ExactSpan(04:30:00)
        """
        if not isinstance(other, int):
            return NotImplemented
        return ExactSpan._from_nanos(self._total_ns * other)

    __rmul__ = __mul__

    def __bool__(self) -> bool:
        """True if the value is non-zero

        Example
        -------
        >>> bool(ExactSpan())
        False
        >>> bool(ExactSpan(minutes=1))
        True
        """
        return bool(self._total_ns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExactSpan):
            return NotImplemented
        return self._total_ns == other._total_ns

    def __hash__(self) -> int:
        return hash(self._total_ns)

    def __lt__(self, other: ExactSpan) -> bool:
        if not isinstance(other, ExactSpan):
            return NotImplemented
        return self._total_ns < other._total_ns

    def __le__(self, other: ExactSpan) -> bool:
        if not isinstance(other, ExactSpan):
            return NotImplemented
        return self._total_ns <= other._total_ns

    def __gt__(self, other: ExactSpan) -> bool:
        if not isinstance(other, ExactSpan):
            return NotImplemented
        return self._total_ns > other._total_ns

    def __ge__(self, other: ExactSpan) -> bool:
        if not isinstance(other, ExactSpan):
            return NotImplemented
        return self._total_ns >= other._total_ns

    def __repr__(self) -> str:
        hrs, mins, secs, ns = abs(self).in_hrs_mins_secs_nanos()
        return (
            f"ExactSpan({'-'*(self._total_ns < 0)}{hrs:02}:{mins:02}:{secs:02}"
            + f".{ns:0>9}".rstrip("0") * bool(ns)
            + ")"
        )

    @classmethod
    def _from_nanos_unchecked(cls, ns: int) -> ExactSpan:
        new = _object_new(cls)
        new._total_ns = ns
        return new

    @classmethod
    def _from_nanos(cls, ns: int) -> ExactSpan:
        return cls._from_nanos_unchecked(_checked_span_nanos(ns))

    @no_type_check
    def __reduce__(self):
        return _unpkl_espan, (pack("<qI", self.seconds, self.nanoseconds),)


@no_type_check
def _unpkl_espan(data: bytes) -> ExactSpan:
    s, ns = unpack("<qI", data)
    return ExactSpan(seconds=s, nanoseconds=ns)


ExactSpan.ZERO = ExactSpan()
ExactSpan.MAX = ExactSpan._from_nanos_unchecked(_MAX_DELTA_NANOS)
ExactSpan.MIN = ExactSpan._from_nanos_unchecked(-_MAX_DELTA_NANOS)


@final
class CalendarSpan(_ImmutableBase):
    """A span of calendar units: years, months, and days.

    The components are kept separately, and may have different signs.
    The actual length of a calendar span depends on the date it's applied to,
    so it can't be compared with (or added to) an :class:`ExactSpan`.
    Weeks are stored as 7 days.

    Example
    -------
    >>> p = CalendarSpan(years=1, months=2, weeks=3)
    CalendarSpan(P1Y2M21D)
    >>> p.days
    21
    """

    __slots__ = ("_years", "_months", "_days")

    ZERO: ClassVar[CalendarSpan]
    """A span of zero"""

    def __init__(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
    ) -> None:
        _check_ints(years, months, weeks, days)
        self._years, self._months, self._days = _checked_calendar_parts(
            years, months, weeks * 7 + days
        )

    @property
    def years(self) -> int:
        return self._years

    @property
    def months(self) -> int:
        return self._months

    @property
    def days(self) -> int:
        return self._days

    def total_months(self) -> int:
        """Years and months combined into a number of months

        Example
        -------
        >>> CalendarSpan(years=1, months=-2).total_months()
        10
        """
        return self._years * 12 + self._months

    def __add__(self, other: CalendarSpan) -> CalendarSpan:
        """Add the components of two spans

        Example
        -------
        >>> p = CalendarSpan(years=1, weeks=2)
        >>> p + CalendarSpan(months=1, days=-1)
        CalendarSpan(P1Y1M13D)
        """
        if not isinstance(other, CalendarSpan):
            return NotImplemented
        return CalendarSpan._from_parts(
            self._years + other._years,
            self._months + other._months,
            self._days + other._days,
        )

    def __sub__(self, other: CalendarSpan) -> CalendarSpan:
        if not isinstance(other, CalendarSpan):
            return NotImplemented
        return CalendarSpan._from_parts(
            self._years - other._years,
            self._months - other._months,
            self._days - other._days,
        )

    def __neg__(self) -> CalendarSpan:
        return CalendarSpan._from_parts_unchecked(
            -self._years, -self._months, -self._days
        )

    def __pos__(self) -> CalendarSpan:
        return self

    def __mul__(self, other: int) -> CalendarSpan:
        """Multiply each component by a whole number

        Example
        -------
        >>> p = CalendarSpan(years=1, weeks=2)
        >>> p * 2
        CalendarSpan(P2Y28D)
        """
        if not isinstance(other, int):
            return NotImplemented
        return CalendarSpan._from_parts(
            self._years * other, self._months * other, self._days * other
        )

    __rmul__ = __mul__

    def __bool__(self) -> bool:
        return bool(self._years or self._months or self._days)

    def __eq__(self, other: object) -> bool:
        """Compare component-wise

        Example
        -------
        >>> p = CalendarSpan(weeks=4, days=2)
        CalendarSpan(P30D)
        >>> p == CalendarSpan(days=30)
        True
        >>> p == CalendarSpan(months=1)
        False
        """
        if not isinstance(other, CalendarSpan):
            return NotImplemented
        return (
            self._years == other._years
            and self._months == other._months
            and self._days == other._days
        )

    def __hash__(self) -> int:
        return hash((self._years, self._months, self._days))

    def __repr__(self) -> str:
        parts = "".join(
            f"{value}{unit}"
            for value, unit in (
                (self._years, "Y"),
                (self._months, "M"),
                (self._days, "D"),
            )
            if value
        )
        return f"CalendarSpan(P{parts or '0D'})"

    @classmethod
    def _from_parts_unchecked(
        cls, years: int, months: int, days: int
    ) -> CalendarSpan:
        new = _object_new(cls)
        new._years = years
        new._months = months
        new._days = days
        return new

    @classmethod
    def _from_parts(cls, years: int, months: int, days: int) -> CalendarSpan:
        return cls._from_parts_unchecked(
            *_checked_calendar_parts(years, months, days)
        )

    @no_type_check
    def __reduce__(self):
        return (_unpkl_cspan, (self._years, self._months, self._days))


def _unpkl_cspan(years: int, months: int, days: int) -> CalendarSpan:
    return CalendarSpan._from_parts_unchecked(years, months, days)


CalendarSpan.ZERO = CalendarSpan()


@final
class UtcOffset(_ImmutableBase):
    """A fixed difference from UTC, strictly less than 24 hours either way.

    Can be used as a timezone that never changes its offset.

    Example
    -------
    >>> UtcOffset(hours=5, minutes=30)
    UtcOffset(+05:30)
    >>> UtcOffset(seconds=-18_000)
    UtcOffset(-05:00)
    """

    __slots__ = ("_secs",)

    UTC: ClassVar[UtcOffset]
    """The offset of UTC itself: zero"""
    MIN: ClassVar[UtcOffset]
    MAX: ClassVar[UtcOffset]

    def __init__(
        self, hours: int = 0, minutes: int = 0, seconds: int = 0
    ) -> None:
        _check_ints(hours, minutes, seconds)
        secs = hours * 3600 + minutes * 60 + seconds
        if abs(secs) > MAX_OFFSET_SECS:
            raise InvalidOffset(f"Offset out of range: {secs} seconds")
        self._secs = secs

    @property
    def total_seconds(self) -> int:
        return self._secs

    def as_span(self) -> ExactSpan:
        """The offset as an exact span

        Example
        -------
        >>> UtcOffset(hours=-3).as_span()
        ExactSpan(-03:00:00)
        """
        return ExactSpan._from_nanos_unchecked(self._secs * NS_PER_SEC)

    def __str__(self) -> str:
        hrs, rem = divmod(abs(self._secs), 3600)
        mins, secs = divmod(rem, 60)
        return f"{'-' if self._secs < 0 else '+'}{hrs:02}:{mins:02}" + (
            f":{secs:02}" if secs else ""
        )

    def __repr__(self) -> str:
        return f"UtcOffset({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs == other._secs

    def __hash__(self) -> int:
        return hash(self._secs)

    def __lt__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs < other._secs

    def __le__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs <= other._secs

    def __gt__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs > other._secs

    def __ge__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs >= other._secs

    @classmethod
    def _unchecked(cls, secs: int) -> UtcOffset:
        new = _object_new(cls)
        new._secs = secs
        return new

    @no_type_check
    def __reduce__(self):
        return _unpkl_offset, (self._secs,)


def _unpkl_offset(secs: int) -> UtcOffset:
    return UtcOffset._unchecked(secs)


UtcOffset.UTC = UtcOffset()
UtcOffset.MIN = UtcOffset._unchecked(-MAX_OFFSET_SECS)
UtcOffset.MAX = UtcOffset._unchecked(MAX_OFFSET_SECS)


Zone = Union[UtcOffset, TransitionTable]
ZoneLike = Union[str, UtcOffset, TransitionTable]


@final
class Instant(_ImmutableBase):
    """Represents a moment in time with nanosecond precision.

    This class is great for representing a specific point in time independent
    of location. It maps 1:1 to UTC or a UNIX timestamp.

    Example
    -------
    >>> Instant.from_utc(2020, 8, 15, hour=23, minute=12)
    Instant(2020-08-15 23:12:00Z)
    >>> Instant.from_timestamp(1_597_493_520)
    Instant(2020-08-15 12:12:00Z)
    """

    __slots__ = ("_secs", "_nanos")

    MIN: ClassVar[Instant]
    """The minimum representable instant."""
    MAX: ClassVar[Instant]
    """The maximum representable instant."""

    def __init__(self) -> None:
        raise TypeError(
            "Instant cannot be instantiated directly. "
            "Use Instant.from_utc() or Instant.from_timestamp() instead."
        )

    @classmethod
    def from_utc(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        nanosecond: int = 0,
    ) -> Instant:
        """Create an instance from a UTC date and time."""
        date = Date(year, month, day)
        time = Time(hour, minute, second, nanosecond=nanosecond)
        return cls._from_parts_unchecked(
            _local_secs(date, time), time._ns % NS_PER_SEC
        )

    @classmethod
    def now(cls) -> Instant:
        """Create an Instant from the current time."""
        return cls._from_parts_checked(*divmod(time_ns(), NS_PER_SEC))

    @classmethod
    def from_timestamp(cls, i: int, /) -> Instant:
        """Create an Instant from a UNIX timestamp (in seconds).

        The inverse of the ``timestamp()`` method.
        """
        if not isinstance(i, int):
            raise TypeError("method requires an integer")
        return cls._from_parts_checked(i, 0)

    @classmethod
    def from_timestamp_nanos(cls, i: int, /) -> Instant:
        """Create an Instant from a UNIX timestamp (in nanoseconds).

        The inverse of the ``timestamp_nanos()`` method.
        """
        if not isinstance(i, int):
            raise TypeError("method requires an integer")
        return cls._from_parts_checked(*divmod(i, NS_PER_SEC))

    def timestamp(self) -> int:
        """The UNIX timestamp for this instant, in whole seconds.

        Rounds down: the nanoseconds are discarded.
        """
        return self._secs

    def timestamp_nanos(self) -> int:
        return self._secs * NS_PER_SEC + self._nanos

    def to_zone(self, tz: ZoneLike, /) -> ZonedDateTime:
        """Convert to a ZonedDateTime representing the same moment

        Example
        -------
        >>> Instant.from_utc(2020, 8, 15, hour=23).to_zone("Europe/Paris")
        ZonedDateTime(2020-08-16 01:00:00+02:00[Europe/Paris])
        """
        return ZonedDateTime._from_instant_parts(
            self._secs, self._nanos, _load_zone(tz)
        )

    def add(
        self,
        delta: Optional[ExactSpan] = None,
        /,
        *,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> Instant:
        """Add an exact span of time

        Example
        -------
        >>> Instant.from_utc(2020, 8, 15).add(hours=25)
        Instant(2020-08-16 01:00:00Z)
        """
        span = ExactSpan(
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            milliseconds=milliseconds,
            microseconds=microseconds,
            nanoseconds=nanoseconds,
        )
        if delta is not None:
            span = span + delta
        return self._add_nanos(span._total_ns)

    def subtract(
        self,
        delta: Optional[ExactSpan] = None,
        /,
        *,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> Instant:
        """Subtract an exact span of time. Inverse of :meth:`add`."""
        span = ExactSpan(
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            milliseconds=milliseconds,
            microseconds=microseconds,
            nanoseconds=nanoseconds,
        )
        if delta is not None:
            span = span + delta
        return self._add_nanos(-span._total_ns)

    def _add_nanos(self, ns: int) -> Instant:
        return Instant._from_parts_checked(
            *divmod(self.timestamp_nanos() + ns, NS_PER_SEC)
        )

    def __add__(self, delta: ExactSpan) -> Instant:
        if isinstance(delta, ExactSpan):
            return self._add_nanos(delta._total_ns)
        return NotImplemented

    def __sub__(
        self, other: Union[ExactSpan, Instant, ZonedDateTime]
    ) -> Union[Instant, ExactSpan]:
        """Subtract a span, or calculate the exact time between two moments

        Example
        -------
        >>> d = Instant.from_utc(2020, 8, 15, hour=23, minute=12)
        >>> d - hours(24) - seconds(5)
        Instant(2020-08-14 23:11:55Z)
        >>> d - Instant.from_utc(2020, 8, 14)
        ExactSpan(47:12:00)
        """
        if isinstance(other, ExactSpan):
            return self._add_nanos(-other._total_ns)
        elif (parts := _instant_parts(other)) is not None:
            return ExactSpan._from_nanos_unchecked(
                self.timestamp_nanos() - parts[0] * NS_PER_SEC - parts[1]
            )
        return NotImplemented

    def __str__(self) -> str:
        days, secs = divmod(self._secs, SECS_PER_DAY)
        return (
            f"{Date._from_days_unchecked(days)}T"
            f"{Time._from_ns_unchecked(secs * NS_PER_SEC + self._nanos)}Z"
        )

    def __repr__(self) -> str:
        return f"Instant({str(self).replace('T', ' ', 1)})"

    def __eq__(self, other: object) -> bool:
        """Check if two moments are the same. Instants and ZonedDateTimes
        can be compared with each other.

        Example
        -------
        >>> Instant.from_utc(2020, 8, 15, hour=23) == Instant.from_utc(2020, 8, 15, hour=23)
        True
        >>> Instant.from_utc(2020, 8, 15, hour=23) == ZonedDateTime(2020, 8, 16, 1, tz="Europe/Paris")
        True
        """
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return (self._secs, self._nanos) == parts

    def __hash__(self) -> int:
        return hash((self._secs, self._nanos))

    def __lt__(self, other: Union[Instant, ZonedDateTime]) -> bool:
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return (self._secs, self._nanos) < parts

    def __le__(self, other: Union[Instant, ZonedDateTime]) -> bool:
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return (self._secs, self._nanos) <= parts

    def __gt__(self, other: Union[Instant, ZonedDateTime]) -> bool:
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return (self._secs, self._nanos) > parts

    def __ge__(self, other: Union[Instant, ZonedDateTime]) -> bool:
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return (self._secs, self._nanos) >= parts

    @classmethod
    def _from_parts_unchecked(cls, secs: int, nanos: int) -> Instant:
        new = _object_new(cls)
        new._secs = secs
        new._nanos = nanos
        return new

    @classmethod
    def _from_parts_checked(cls, secs: int, nanos: int) -> Instant:
        if not EPOCH_SECS_MIN <= secs <= EPOCH_SECS_MAX:
            raise Overflow("Instant out of range")
        return cls._from_parts_unchecked(secs, nanos)

    @no_type_check
    def __reduce__(self):
        return _unpkl_inst, (pack("<qL", self._secs, self._nanos),)


def _unpkl_inst(data: bytes) -> Instant:
    return Instant._from_parts_unchecked(*unpack("<qL", data))


Instant.MIN = Instant._from_parts_unchecked(EPOCH_SECS_MIN, 0)
Instant.MAX = Instant._from_parts_unchecked(EPOCH_SECS_MAX, NS_PER_SEC - 1)


class Candidate(NamedTuple):
    """A valid reading of a local time in a timezone"""

    offset: UtcOffset
    instant: Instant


@final
class ZonedDateTime(_ImmutableBase):
    """A date and time in a timezone: either one loaded from the IANA
    database, a :class:`TransitionTable`, or a fixed :class:`UtcOffset`.

    The offset is resolved once, on creation. By default, local times that
    are ambiguous or don't exist in the timezone are refused.

    Example
    -------
    >>> ZonedDateTime(2024, 12, 8, hour=11, tz="Europe/Paris")
    ZonedDateTime(2024-12-08 11:00:00+01:00[Europe/Paris])
    >>> # Explicitly resolve ambiguities during DST transitions
    >>> ZonedDateTime(2023, 10, 29, 1, 15, tz="Europe/London", disambiguate="earliest")
    ZonedDateTime(2023-10-29 01:15:00+01:00[Europe/London])
    """

    __slots__ = ("_date", "_time", "_zone", "_offset")

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        nanosecond: int = 0,
        tz: ZoneLike,
        disambiguate: Union[Disambiguate, str] = Disambiguate.REJECT,
    ) -> None:
        date = Date(year, month, day)
        time = Time(hour, minute, second, nanosecond=nanosecond)
        zone = _load_zone(tz)
        resolution, *_ = _resolutions(date, time, zone, disambiguate)
        self._date, self._time, self._offset = _apply_resolution(
            date, time, zone, resolution
        )
        self._zone = zone

    @classmethod
    def from_civil(
        cls,
        date: Date,
        time: Time,
        /,
        *,
        tz: ZoneLike,
        disambiguate: Union[Disambiguate, str] = Disambiguate.REJECT,
    ) -> ZonedDateTime:
        """Create from a date and time in the given timezone.

        If the policy allows two readings, the earliest is used.
        """
        zone = _load_zone(tz)
        resolution, *_ = _resolutions(date, time, zone, disambiguate)
        return cls._new_unchecked(
            *_apply_resolution(date, time, zone, resolution), zone
        )

    @classmethod
    def from_instant(cls, instant: Instant, /, *, tz: ZoneLike) -> ZonedDateTime:
        """Create from an instant, in the given timezone"""
        return cls._from_instant_parts(
            instant._secs, instant._nanos, _load_zone(tz)
        )

    @classmethod
    def now(cls, tz: ZoneLike, /) -> ZonedDateTime:
        """Create an instance from the current time in the given timezone."""
        secs, nanos = divmod(time_ns(), NS_PER_SEC)
        return cls._from_instant_parts(secs, nanos, _load_zone(tz))

    @classmethod
    def from_timestamp(cls, i: int, /, *, tz: ZoneLike) -> ZonedDateTime:
        """Create an instance from a UNIX timestamp (in seconds).

        The inverse of the ``timestamp()`` method.
        """
        return Instant.from_timestamp(i).to_zone(tz)

    @classmethod
    def from_timestamp_nanos(cls, i: int, /, *, tz: ZoneLike) -> ZonedDateTime:
        """Create an instance from a UNIX timestamp (in nanoseconds).

        The inverse of the ``timestamp_nanos()`` method.
        """
        return Instant.from_timestamp_nanos(i).to_zone(tz)

    def date(self) -> Date:
        return self._date

    def time(self) -> Time:
        return self._time

    @property
    def year(self) -> int:
        return self._date.year

    @property
    def month(self) -> int:
        return self._date.month

    @property
    def day(self) -> int:
        return self._date.day

    @property
    def hour(self) -> int:
        return self._time.hour

    @property
    def minute(self) -> int:
        return self._time.minute

    @property
    def second(self) -> int:
        return self._time.second

    @property
    def nanosecond(self) -> int:
        return self._time.nanosecond

    @property
    def offset(self) -> UtcOffset:
        """The UTC offset in effect at this moment"""
        return self._offset

    @property
    def zone(self) -> Zone:
        return self._zone

    @property
    def tz(self) -> Optional[str]:
        """The timezone ID, if the timezone has one"""
        return None if type(self._zone) is UtcOffset else self._zone.key

    def instant(self) -> Instant:
        """The moment in time this datetime represents

        Example
        -------
        >>> ZonedDateTime(2020, 8, 15, 23, tz="Europe/Paris").instant()
        Instant(2020-08-15 21:00:00Z)
        """
        return Instant._from_parts_unchecked(*self._instant_parts())

    def timestamp(self) -> int:
        """The UNIX timestamp, in whole seconds (rounded down)"""
        return self._instant_parts()[0]

    def timestamp_nanos(self) -> int:
        secs, nanos = self._instant_parts()
        return secs * NS_PER_SEC + nanos

    def is_dst(self) -> bool:
        """Whether daylight saving time is in effect.
        Always false for fixed offsets."""
        if type(self._zone) is UtcOffset:
            return False
        return self._zone.is_dst(self._instant_parts()[0])

    def designation(self) -> str:
        """The abbreviation of the local time, e.g. ``CEST``.
        For fixed offsets, this is the offset itself."""
        if type(self._zone) is UtcOffset:
            return str(self._zone)
        return self._zone.designation(self._instant_parts()[0])

    def is_ambiguous(self) -> bool:
        """Whether the local time is ambiguous, e.g. due to a DST transition.

        Example
        -------
        >>> ZonedDateTime(2020, 8, 15, 23, tz="Europe/London").is_ambiguous()
        False
        >>> ZonedDateTime(2023, 10, 29, 2, 15, tz="Europe/Amsterdam", disambiguate="earliest").is_ambiguous()
        True
        """
        return type(_ambiguity(self._zone, self._date, self._time)) is Fold

    def exact_eq(self, other: ZonedDateTime, /) -> bool:
        """Compare objects by their values, instead of whether they represent
        the same instant. Different types are never equal.

        Example
        -------
        >>> a = ZonedDateTime(2020, 8, 15, hour=12, tz="Europe/Amsterdam")
        >>> b = ZonedDateTime(2020, 8, 15, hour=6, tz="America/New_York")
        >>> a == b
        True
        >>> a.exact_eq(b)
        False
        """
        if type(other) is not ZonedDateTime:
            raise TypeError("Can't compare different types")
        return (
            self._date == other._date
            and self._time == other._time
            and self._offset == other._offset
            and self._zone == other._zone
        )

    def to_zone(self, tz: ZoneLike, /) -> ZonedDateTime:
        """Convert to another timezone, keeping the same instant

        Example
        -------
        >>> d = ZonedDateTime(2020, 8, 15, hour=23, tz="Europe/Paris")
        >>> d.to_zone("America/New_York")
        ZonedDateTime(2020-08-15 17:00:00-04:00[America/New_York])
        """
        return ZonedDateTime._from_instant_parts(
            *self._instant_parts(), _load_zone(tz)
        )

    def replace_date(
        self,
        date: Date,
        /,
        *,
        disambiguate: Union[Disambiguate, str, None] = None,
    ) -> ZonedDateTime:
        """Create a new instance with the date replaced.

        Without an explicit ``disambiguate`` policy, the current offset is
        kept if it's still valid.
        """
        return self._reresolve(date, self._time, self._zone, disambiguate)

    def replace_time(
        self,
        time: Time,
        /,
        *,
        disambiguate: Union[Disambiguate, str, None] = None,
    ) -> ZonedDateTime:
        """Create a new instance with the time replaced.

        Without an explicit ``disambiguate`` policy, the current offset is
        kept if it's still valid.
        """
        return self._reresolve(self._date, time, self._zone, disambiguate)

    def replace(
        self,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        day: Optional[int] = None,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        second: Optional[int] = None,
        nanosecond: Optional[int] = None,
        tz: Optional[ZoneLike] = None,
        disambiguate: Union[Disambiguate, str, None] = None,
    ) -> ZonedDateTime:
        """Construct a new instance with the given fields replaced.

        Without an explicit ``disambiguate`` policy, the current offset is
        kept if it's still valid.

        Example
        -------
        >>> d = ZonedDateTime(2020, 8, 15, 23, 12, tz="Europe/London")
        >>> d.replace(year=2021)
        ZonedDateTime(2021-08-15 23:12:00+01:00[Europe/London])
        """
        return self._reresolve(
            self._date.replace(year=year, month=month, day=day),
            self._time.replace(
                hour=hour, minute=minute, second=second, nanosecond=nanosecond
            ),
            self._zone if tz is None else _load_zone(tz),
            disambiguate,
        )

    def add(
        self,
        delta: Union[CalendarSpan, ExactSpan, None] = None,
        /,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
        disambiguate: Union[Disambiguate, str, None] = None,
    ) -> ZonedDateTime:
        """Add a span of time.

        Calendar units (years, months, weeks, days) are added to the local
        date first, after which the local time is resolved again in the
        timezone. Exact units (hours and smaller) are then added to the
        instant.

        Without an explicit ``disambiguate`` policy, the offset before the
        addition is kept if it's still valid. A local time that ends up in a
        gap is moved out of it.

        Example
        -------
        >>> d = ZonedDateTime(2023, 3, 25, 2, 30, tz="Europe/Amsterdam")
        >>> d.add(days=1)  # 02:30 doesn't exist on March 26th
        ZonedDateTime(2023-03-26 03:30:00+02:00[Europe/Amsterdam])
        >>> d.add(hours=24)
        ZonedDateTime(2023-03-26 03:30:00+02:00[Europe/Amsterdam])
        """
        return self._shift(
            delta,
            CalendarSpan(years=years, months=months, weeks=weeks, days=days),
            ExactSpan(
                hours=hours,
                minutes=minutes,
                seconds=seconds,
                milliseconds=milliseconds,
                microseconds=microseconds,
                nanoseconds=nanoseconds,
            ),
            disambiguate,
            negate=False,
        )

    def subtract(
        self,
        delta: Union[CalendarSpan, ExactSpan, None] = None,
        /,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
        disambiguate: Union[Disambiguate, str, None] = None,
    ) -> ZonedDateTime:
        """Subtract a span of time. Behaves like :meth:`add` with the
        negated span."""
        return self._shift(
            delta,
            CalendarSpan(years=years, months=months, weeks=weeks, days=days),
            ExactSpan(
                hours=hours,
                minutes=minutes,
                seconds=seconds,
                milliseconds=milliseconds,
                microseconds=microseconds,
                nanoseconds=nanoseconds,
            ),
            disambiguate,
            negate=True,
        )

    def _shift(
        self,
        delta: Union[CalendarSpan, ExactSpan, None],
        cal: CalendarSpan,
        exact: ExactSpan,
        disambiguate: Union[Disambiguate, str, None],
        *,
        negate: bool,
    ) -> ZonedDateTime:
        if delta is None:
            pass
        elif isinstance(delta, CalendarSpan):
            cal = cal + delta
        elif isinstance(delta, ExactSpan):
            exact = exact + delta
        else:
            raise TypeError(
                f"Expected CalendarSpan or ExactSpan, got {type(delta)!r}"
            )
        if negate:
            cal, exact = -cal, -exact

        result = self
        if cal:
            result = self._reresolve(
                self._date._add_span(cal), self._time, self._zone, disambiguate
            )
        if exact:
            secs, nanos = divmod(
                result.timestamp_nanos() + exact._total_ns, NS_PER_SEC
            )
            if not EPOCH_SECS_MIN <= secs <= EPOCH_SECS_MAX:
                raise Overflow("Instant out of range")
            result = ZonedDateTime._from_instant_parts(secs, nanos, self._zone)
        return result

    def __add__(self, delta: Union[CalendarSpan, ExactSpan]) -> ZonedDateTime:
        """Add a span of time. See :meth:`add` for the details.

        Example
        -------
        >>> d = ZonedDateTime(2020, 8, 15, hour=23, minute=12, tz="Europe/London")
        >>> d + hours(24) + seconds(5)
        ZonedDateTime(2020-08-16 23:12:05+01:00[Europe/London])
        """
        if isinstance(delta, (CalendarSpan, ExactSpan)):
            return self._shift(
                delta,
                CalendarSpan.ZERO,
                ExactSpan.ZERO,
                None,
                negate=False,
            )
        return NotImplemented

    def __sub__(
        self, other: Union[CalendarSpan, ExactSpan, Instant, ZonedDateTime]
    ) -> Union[ZonedDateTime, ExactSpan]:
        """Subtract a span, or calculate the exact time between two moments

        Example
        -------
        >>> d = ZonedDateTime(2023, 10, 29, 6, tz="Europe/Amsterdam")
        >>> d - ZonedDateTime(2023, 10, 28, 6, tz="Europe/Amsterdam")
        ExactSpan(25:00:00)
        """
        if isinstance(other, (CalendarSpan, ExactSpan)):
            return self._shift(
                other,
                CalendarSpan.ZERO,
                ExactSpan.ZERO,
                None,
                negate=True,
            )
        elif (parts := _instant_parts(other)) is not None:
            return ExactSpan._from_nanos_unchecked(
                self.timestamp_nanos() - parts[0] * NS_PER_SEC - parts[1]
            )
        return NotImplemented

    def calendar_difference(
        self, other: ZonedDateTime, /
    ) -> tuple[CalendarSpan, ExactSpan]:
        """The time from ``other`` to this datetime, in as many whole years,
        months, and days as fit, plus the exact remainder.

        ``other`` is first converted to this timezone. The result satisfies
        ``other.to_zone(self.zone).add(cal) + exact == self``, and both parts
        are negative if ``other`` comes later.

        Example
        -------
        >>> a = ZonedDateTime(2012, 4, 11, 9, tz="Europe/Paris")
        >>> b = ZonedDateTime(2014, 5, 12, 10, tz="Europe/Paris")
        >>> b.calendar_difference(a)
        (CalendarSpan(P2Y1M1D), ExactSpan(01:00:00))
        >>> a.calendar_difference(b)
        (CalendarSpan(P-2Y-1M-1D), ExactSpan(-01:00:00))
        """
        if type(other) is not ZonedDateTime:
            raise TypeError(
                f"Expected ZonedDateTime, got {type(other).__name__}"
            )
        start = other.to_zone(self._zone)
        forward = self >= start

        def overshoots(candidate: ZonedDateTime) -> bool:
            return candidate > self if forward else candidate < self

        months = (self.year - start.year) * 12 + self.month - start.month
        if months and overshoots(start.add(months=months)):
            months -= 1 if forward else -1

        days = self._date._days - start._date._add_span(
            CalendarSpan._from_parts_unchecked(0, months, 0)
        )._days
        if days and overshoots(start.add(months=months, days=days)):
            days -= 1 if forward else -1

        sign = -1 if months < 0 else 1
        years, months = divmod(abs(months), 12)
        cal = CalendarSpan._from_parts(sign * years, sign * months, days)
        return cal, ExactSpan._from_nanos_unchecked(
            self.timestamp_nanos() - start.add(cal).timestamp_nanos()
        )

    def __eq__(self, other: object) -> bool:
        """Check if two datetimes represent the same moment in time

        ``a == b`` is equivalent to ``a.instant() == b.instant()``

        Note
        ----
        If you want to exactly compare the values on their values
        instead, use :meth:`exact_eq`.
        """
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return self._instant_parts() == parts

    def __hash__(self) -> int:
        return hash(self._instant_parts())

    def __lt__(self, other: Union[Instant, ZonedDateTime]) -> bool:
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return self._instant_parts() < parts

    def __le__(self, other: Union[Instant, ZonedDateTime]) -> bool:
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return self._instant_parts() <= parts

    def __gt__(self, other: Union[Instant, ZonedDateTime]) -> bool:
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return self._instant_parts() > parts

    def __ge__(self, other: Union[Instant, ZonedDateTime]) -> bool:
        if (parts := _instant_parts(other)) is None:
            return NotImplemented
        return self._instant_parts() >= parts

    def __str__(self) -> str:
        key = self.tz
        return f"{self._date}T{self._time}{self._offset}" + (
            f"[{key}]" if key else ""
        )

    def __repr__(self) -> str:
        return f"ZonedDateTime({str(self).replace('T', ' ', 1)})"

    def _instant_parts(self) -> tuple[int, int]:
        secs, nanos = divmod(self._time._ns, NS_PER_SEC)
        return (
            self._date._days * SECS_PER_DAY + secs - self._offset._secs,
            nanos,
        )

    def _reresolve(
        self,
        date: Date,
        time: Time,
        zone: Zone,
        disambiguate: Union[Disambiguate, str, None],
    ) -> ZonedDateTime:
        if disambiguate is None:
            resolution = resolve_using_prev_offset(
                _ambiguity(zone, date, time), self._offset._secs
            )
        else:
            resolution, *_ = _resolutions(date, time, zone, disambiguate)
        return ZonedDateTime._new_unchecked(
            *_apply_resolution(date, time, zone, resolution), zone
        )

    @classmethod
    def _from_instant_parts(
        cls, secs: int, nanos: int, zone: Zone
    ) -> ZonedDateTime:
        if type(zone) is UtcOffset:
            offset = zone
        else:
            offset = UtcOffset._unchecked(zone.offset_for_instant(secs))
        days, secs_of_day = divmod(secs + offset._secs, SECS_PER_DAY)
        return cls._new_unchecked(
            Date.from_epoch_days(days),
            Time._from_ns_unchecked(secs_of_day * NS_PER_SEC + nanos),
            offset,
            zone,
        )

    @classmethod
    def _new_unchecked(
        cls, date: Date, time: Time, offset: UtcOffset, zone: Zone
    ) -> ZonedDateTime:
        self = _object_new(cls)
        self._date = date
        self._time = time
        self._offset = offset
        self._zone = zone
        return self

    # a custom pickle implementation with a smaller payload
    @no_type_check
    def __reduce__(self):
        if type(self._zone) is UtcOffset:
            zone = self._zone._secs
        elif self._zone.key is None:
            raise TypeError(
                "Cannot pickle a ZonedDateTime with a timezone without ID"
            )
        else:
            zone = self._zone.key
        return (
            _unpkl_zoned,
            (
                pack("<iql", self._date._days, self._time._ns, self._offset._secs),
                zone,
            ),
        )


# A separate function is needed for unpickling, because the
# constructor doesn't accept the resolved offset.
# Also, it allows backwards-compatible changes to the pickling format.
def _unpkl_zoned(data: bytes, zone: Union[str, int]) -> ZonedDateTime:
    days, ns, offset_secs = unpack("<iql", data)
    return ZonedDateTime._new_unchecked(
        Date._from_days_unchecked(days),
        Time._from_ns_unchecked(ns),
        UtcOffset._unchecked(offset_secs),
        get_tz(zone) if isinstance(zone, str) else UtcOffset._unchecked(zone),
    )


def resolve_local(
    tz: ZoneLike,
    date: Date,
    time: Time,
    /,
    disambiguate: Union[Disambiguate, str] = Disambiguate.REJECT,
) -> tuple[Candidate, ...]:
    """All readings of a local date and time in a timezone that the
    policy allows, earliest first.

    Example
    -------
    >>> resolve_local("America/New_York", Date(2021, 11, 7), Time(1, 30),
    ...               disambiguate="reject_gap")
    (Candidate(offset=UtcOffset(-04:00), instant=Instant(2021-11-07 05:30:00Z)),
     Candidate(offset=UtcOffset(-05:00), instant=Instant(2021-11-07 06:30:00Z)))
    >>> resolve_local("America/New_York", Date(2021, 3, 14), Time(2, 30),
    ...               disambiguate="shift_forward")
    (Candidate(offset=UtcOffset(-04:00), instant=Instant(2021-03-14 07:30:00Z)),)
    """
    zone = _load_zone(tz)
    local = _local_secs(date, time)
    nanos = time._ns % NS_PER_SEC
    return tuple(
        Candidate(
            UtcOffset._unchecked(offset),
            Instant._from_parts_checked(local + shift - offset, nanos),
        )
        for shift, offset in _resolutions(date, time, zone, disambiguate)
    )


def system_tz() -> TransitionTable:
    """The timezone of the system, as configured by the ``TZ`` environment
    variable or the operating system. Cached after the first call;
    use :func:`reset_system_tz` to reload it."""
    return get_system_tz()


def _load_zone(tz: ZoneLike) -> Zone:
    if type(tz) is str:
        return get_tz(tz)
    elif type(tz) is UtcOffset or type(tz) is TransitionTable:
        return tz
    raise TypeError(
        "tz must be a timezone ID, TransitionTable, or UtcOffset, "
        f"got {type(tz)!r}"
    )


def _local_secs(date: Date, time: Time) -> int:
    return date._days * SECS_PER_DAY + time._ns // NS_PER_SEC


def _ambiguity(zone: Zone, date: Date, time: Time) -> Ambiguity:
    if type(zone) is UtcOffset:
        return Unambiguous(zone._secs)
    return zone.ambiguity_for_local(_local_secs(date, time))


def _resolutions(
    date: Date,
    time: Time,
    zone: Zone,
    disambiguate: Union[Disambiguate, str],
) -> tuple[Resolution, ...]:
    return resolve_ambiguity(
        _ambiguity(zone, date, time),
        as_policy(disambiguate),
        f"{date} {time}",
        None if type(zone) is UtcOffset else zone.key,
    )


def _apply_resolution(
    date: Date, time: Time, zone: Zone, resolution: Resolution
) -> tuple[Date, Time, UtcOffset]:
    shift, offset_secs = resolution
    if shift:
        carry, ns = divmod(time._ns + shift * NS_PER_SEC, NS_PER_DAY)
        date = Date.from_epoch_days(date._days + carry)
        time = Time._from_ns_unchecked(ns)
    if not (
        EPOCH_SECS_MIN
        <= _local_secs(date, time) - offset_secs
        <= EPOCH_SECS_MAX
    ):
        raise Overflow("Instant out of range")
    offset = (
        zone
        if type(zone) is UtcOffset
        else UtcOffset._unchecked(offset_secs)
    )
    return date, time, offset


def _instant_parts(obj: object) -> Optional[tuple[int, int]]:
    if type(obj) is Instant:
        return (obj._secs, obj._nanos)
    elif type(obj) is ZonedDateTime:
        return obj._instant_parts()
    return None


def years(i: int, /) -> CalendarSpan:
    """Create a :class:`~CalendarSpan` with the given number of years.
    ``years(1) == CalendarSpan(years=1)``
    """
    return CalendarSpan(years=i)


def months(i: int, /) -> CalendarSpan:
    """Create a :class:`~CalendarSpan` with the given number of months.
    ``months(1) == CalendarSpan(months=1)``
    """
    return CalendarSpan(months=i)


def weeks(i: int, /) -> CalendarSpan:
    """Create a :class:`~CalendarSpan` with the given number of weeks.
    ``weeks(1) == CalendarSpan(weeks=1)``
    """
    return CalendarSpan(weeks=i)


def days(i: int, /) -> CalendarSpan:
    """Create a :class:`~CalendarSpan` with the given number of days.
    ``days(1) == CalendarSpan(days=1)``
    """
    return CalendarSpan(days=i)


def hours(i: int, /) -> ExactSpan:
    """Create an :class:`~ExactSpan` with the given number of hours.
    ``hours(1) == ExactSpan(hours=1)``
    """
    return ExactSpan(hours=i)


def minutes(i: int, /) -> ExactSpan:
    """Create an :class:`~ExactSpan` with the given number of minutes.
    ``minutes(1) == ExactSpan(minutes=1)``
    """
    return ExactSpan(minutes=i)


def seconds(i: int, /) -> ExactSpan:
    """Create an :class:`~ExactSpan` with the given number of seconds.
    ``seconds(1) == ExactSpan(seconds=1)``
    """
    return ExactSpan(seconds=i)


def milliseconds(i: int, /) -> ExactSpan:
    """Create an :class:`~ExactSpan` with the given number of milliseconds.
    ``milliseconds(1) == ExactSpan(milliseconds=1)``
    """
    return ExactSpan(milliseconds=i)


def microseconds(i: int, /) -> ExactSpan:
    """Create an :class:`~ExactSpan` with the given number of microseconds.
    ``microseconds(1) == ExactSpan(microseconds=1)``
    """
    return ExactSpan(microseconds=i)


def nanoseconds(i: int, /) -> ExactSpan:
    """Create an :class:`~ExactSpan` with the given number of nanoseconds.
    ``nanoseconds(1) == ExactSpan(nanoseconds=1)``
    """
    return ExactSpan(nanoseconds=i)


for _unpkl in (
    _unpkl_date,
    _unpkl_time,
    _unpkl_espan,
    _unpkl_cspan,
    _unpkl_offset,
    _unpkl_inst,
    _unpkl_zoned,
):
    _unpkl.__module__ = "zonedtime"
