"""POSIX TZ strings: parsing, rendering, and evaluation.

These strings describe a recurring yearly rule, e.g.
``CET-1CEST,M3.5.0,M10.5.0/3``. TZif files (version 2 and up) end with one,
to cover all instants after their last explicit transition.
"""

from __future__ import annotations

from typing import Optional, Union

from .._common import SECS_PER_DAY, EpochSecs, Offset
from .._math import (
    days_in_month,
    epoch_days_to_ymd,
    is_leap,
    iso_weekday,
    ymd_to_epoch_days,
)
from .common import (
    Ambiguity,
    FormatError,
    LocalTimeType,
    Unambiguous,
    ambiguity_at,
)

DEFAULT_DST = 3600
DEFAULT_RULE_TIME = 2 * 3600
MAX_OFFSET = 24 * 3600
MAX_RULE_HOURS = 167
Weekday = int  # Different than usual! Sunday=0, Saturday=6
EpochDays = int


def year_for_epoch(ts: EpochSecs) -> int:
    return epoch_days_to_ymd(ts // SECS_PER_DAY)[0]


def _posix_weekday(days: EpochDays) -> Weekday:
    return iso_weekday(days) % 7


class LastWeekday:
    """The last given weekday of a month (``Mm.5.d``)"""

    month: int
    weekday: Weekday

    __slots__ = ("month", "weekday")

    def __init__(self, month: int, weekday: Weekday):
        self.month = month
        self.weekday = weekday

    def apply(self, year: int) -> EpochDays:
        last = ymd_to_epoch_days(
            year, self.month, days_in_month(year, self.month)
        )
        return last - (_posix_weekday(last) - self.weekday) % 7

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LastWeekday):
            return NotImplemented
        return self.month == other.month and self.weekday == other.weekday

    def __str__(self) -> str:
        return f"M{self.month}.5.{self.weekday}"

    def __repr__(self) -> str:
        return f"LastWeekday({self.month}, {self.weekday})"


class NthWeekday:
    """The nth (1-4) given weekday of a month (``Mm.n.d``)"""

    month: int
    nth: int
    weekday: Weekday

    __slots__ = ("month", "nth", "weekday")

    def __init__(self, month: int, nth: int, weekday: Weekday):
        self.month = month
        self.nth = nth
        self.weekday = weekday

    def apply(self, year: int) -> EpochDays:
        first = ymd_to_epoch_days(year, self.month, 1)
        return (
            first
            + (self.weekday - _posix_weekday(first)) % 7
            + 7 * (self.nth - 1)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NthWeekday):
            return NotImplemented
        return (
            self.month == other.month
            and self.nth == other.nth
            and self.weekday == other.weekday
        )

    def __str__(self) -> str:
        return f"M{self.month}.{self.nth}.{self.weekday}"

    def __repr__(self) -> str:
        return f"NthWeekday({self.month}, {self.nth}, {self.weekday})"


class DayOfYear:
    """Zero-based day of the year, counting February 29th (``n``)"""

    nth: int  # 1-365, 366 for leap years

    __slots__ = ("nth",)

    def __init__(self, nth: int):
        self.nth = nth

    def apply(self, year: int) -> EpochDays:
        day = min(self.nth, 365 + is_leap(year))
        return ymd_to_epoch_days(year, 1, 1) + day - 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DayOfYear):
            return NotImplemented
        return self.nth == other.nth

    def __str__(self) -> str:
        return str(self.nth - 1)

    def __repr__(self) -> str:
        return f"DayOfYear({self.nth})"


class JulianDayOfYear:
    """One-based day of the year, never counting February 29th (``Jn``)"""

    nth: int  # 1-365

    __slots__ = ("nth",)

    def __init__(self, nth: int):
        self.nth = nth

    def apply(self, year: int) -> EpochDays:
        day = self.nth
        if is_leap(year) and day > 59:
            day += 1
        return ymd_to_epoch_days(year, 1, 1) + day - 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JulianDayOfYear):
            return NotImplemented
        return self.nth == other.nth

    def __str__(self) -> str:
        return f"J{self.nth}"

    def __repr__(self) -> str:
        return f"JulianDayOfYear({self.nth})"


Rule = Union[LastWeekday, NthWeekday, DayOfYear, JulianDayOfYear]


class Dst:
    """The daylight saving part of a POSIX TZ string.

    The start time is local time in the standard offset,
    the end time is local time in the DST offset.
    """

    name: str
    offset: Offset
    start: tuple[Rule, int]
    end: tuple[Rule, int]

    __slots__ = ("name", "offset", "start", "end")

    def __init__(
        self,
        name: str,
        offset: Offset,
        start: tuple[Rule, int],
        end: tuple[Rule, int],
    ):
        self.name = name
        self.offset = offset
        self.start = start
        self.end = end

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dst):
            return NotImplemented
        return (
            self.name == other.name
            and self.offset == other.offset
            and self.start == other.start
            and self.end == other.end
        )

    def __repr__(self) -> str:
        return (
            f"Dst({self.name!r}, offset={self.offset}, "
            f"start={self.start}, end={self.end})"
        )


class PosixRule:
    """A parsed POSIX TZ string

    Example
    -------
    >>> rule = PosixRule.parse("EST5EDT,M3.2.0,M11.1.0")
    >>> rule.std
    -18000
    >>> str(rule)
    'EST5EDT,M3.2.0,M11.1.0'
    """

    std_name: str
    std: Offset
    dst: Optional[Dst]

    __slots__ = ("std_name", "std", "dst")

    def __init__(self, std_name: str, std: Offset, dst: Optional[Dst] = None):
        self.std_name = std_name
        self.std = std
        self.dst = dst

    def _transitions_around(
        self, year: int
    ) -> list[tuple[EpochSecs, LocalTimeType]]:
        """The transitions of the given year and its neighbors, in UTC.

        Rule times may be up to a week outside the day they apply to,
        so a transition belonging to one year may fall in another.
        """
        assert self.dst is not None
        start_rule, start_time = self.dst.start
        end_rule, end_time = self.dst.end
        std = LocalTimeType(self.std, False, self.std_name)
        dst = LocalTimeType(self.dst.offset, True, self.dst.name)

        events = []
        for y in (year - 1, year, year + 1):
            events.append(
                (
                    start_rule.apply(y) * SECS_PER_DAY
                    + start_time
                    - self.std,
                    dst,
                )
            )
            events.append(
                (
                    end_rule.apply(y) * SECS_PER_DAY
                    + end_time
                    - self.dst.offset,
                    std,
                )
            )
        # A stable sort keeps the order of same-instant transitions,
        # e.g. rules like ``J365/25`` describing year-round DST.
        events.sort(key=lambda e: e[0])

        result: list[tuple[EpochSecs, LocalTimeType]] = []
        for at, ttype in events:
            if result and result[-1][0] == at:
                result.pop()
            if not result or result[-1][1] != ttype:
                result.append((at, ttype))
        return result

    def _initial_type(
        self, transitions: list[tuple[EpochSecs, LocalTimeType]]
    ) -> LocalTimeType:
        assert self.dst is not None
        if transitions[0][1].is_dst:
            return LocalTimeType(self.std, False, self.std_name)
        return LocalTimeType(self.dst.offset, True, self.dst.name)

    def local_type_for_instant(self, epoch: EpochSecs) -> LocalTimeType:
        if self.dst is None:
            return LocalTimeType(self.std, False, self.std_name)
        transitions = self._transitions_around(
            year_for_epoch(epoch + self.std)
        )
        result = self._initial_type(transitions)
        for at, ttype in transitions:
            if at > epoch:
                break
            result = ttype
        return result

    def offset_for_instant(self, epoch: EpochSecs) -> Offset:
        return self.local_type_for_instant(epoch).offset

    # NOTE: `epoch` is the datetime in seconds since the LOCAL epoch.
    def ambiguity_for_local(self, epoch: EpochSecs) -> Ambiguity:
        if self.dst is None:
            return Unambiguous(self.std)
        transitions = self._transitions_around(year_for_epoch(epoch))
        offset_prev = self._initial_type(transitions).offset
        for at, ttype in transitions:
            local_time = at + max(offset_prev, ttype.offset)
            if epoch < local_time:
                return ambiguity_at(
                    epoch, local_time, offset_prev, ttype.offset
                )
            offset_prev = ttype.offset
        return Unambiguous(offset_prev)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PosixRule):
            return NotImplemented
        return (
            self.std_name == other.std_name
            and self.std == other.std
            and self.dst == other.dst
        )

    def __hash__(self) -> int:
        # equal rules always render the same string
        return hash(str(self))

    def __repr__(self) -> str:
        return f"PosixRule({str(self)!r})"

    def __str__(self) -> str:
        s = _format_tzname(self.std_name) + _format_hms(-self.std)
        if self.dst is None:
            return s
        s += _format_tzname(self.dst.name)
        if self.dst.offset != self.std + DEFAULT_DST:
            s += _format_hms(-self.dst.offset)
        for rule, time in (self.dst.start, self.dst.end):
            s += f",{rule}"
            if time != DEFAULT_RULE_TIME:
                s += "/" + _format_hms(time)
        return s

    @classmethod
    def parse(cls, s: str) -> PosixRule:
        if not s.isascii():
            raise FormatError(
                "Invalid POSIX TZ string: non-ASCII characters found"
            )

        std_name, s = parse_tzname(s)
        std, s = parse_offset(s)

        # If there's nothing else, it's a fixed offset without DST
        if not s:
            return cls(std_name, std, dst=None)

        dst_name, s = parse_tzname(s)

        if s[:1] == ",":
            # No offset given, the default is std + 1hr
            s = s[1:]
            dst = std + DEFAULT_DST
            if dst >= MAX_OFFSET:
                raise FormatError(
                    "Invalid POSIX TZ string: DST offset out of range"
                )
        else:
            dst, s = parse_offset(s)
            s = expect_char(s, ",")

        start, s = parse_rule(s)
        s = expect_char(s, ",")
        end, s = parse_rule(s)

        if s:
            raise FormatError(
                f"Invalid POSIX TZ string: unexpected trailing '{s}'"
            )
        return cls(std_name, std, Dst(dst_name, dst, start, end))


def _format_tzname(name: str) -> str:
    return name if name.isalpha() else f"<{name}>"


def _format_hms(secs: int) -> str:
    sign = "-" if secs < 0 else ""
    hrs, rem = divmod(abs(secs), 3600)
    mins, secs = divmod(rem, 60)
    if secs:
        return f"{sign}{hrs}:{mins:02}:{secs:02}"
    elif mins:
        return f"{sign}{hrs}:{mins:02}"
    return f"{sign}{hrs}"


def parse_tzname(s: str) -> tuple[str, str]:
    """Parse the timezone name, returning it and the rest of the string."""
    if s[:1] == "<":  # bracketed format
        stop = s.find(">")
        if stop < 2:  # not found or empty name
            raise FormatError("Invalid TZ string: missing or empty name")
        name = s[1:stop]
        if not all(c.isalnum() or c in "+-" for c in name):
            raise FormatError(f"Invalid TZ string: invalid name {name!r}")
        return name, s[stop + 1 :]

    # unbracketed format only allows letters
    for stop, char in enumerate(s):
        if not char.isalpha():
            break
    else:
        # a name must be followed by an offset
        raise FormatError("Invalid TZ string: missing offset")

    if stop < 3:
        raise FormatError("Invalid TZ string: name too short")
    return s[:stop], s[stop:]


def expect_char(s: str, char: str) -> str:
    if s[:1] != char:
        raise FormatError(f"Invalid TZ string: expected '{char}'")
    return s[1:]


def parse_offset(s: str) -> tuple[Offset, str]:
    delta_s, s = parse_hms(s, max_hours=24)
    if abs(delta_s) >= MAX_OFFSET:
        raise FormatError("Invalid POSIX TZ string: offset out of range")
    # POSIX TZ strings use negative offsets, so we negate the parsed value
    return -delta_s, s


# Parse a time string in the format [+-]h[hh[:mm[:ss]]]
def parse_hms(s: str, max_hours: int = MAX_RULE_HOURS) -> tuple[int, str]:
    sign = 1
    if s[:1] == "+":
        s = s[1:]
    elif s[:1] == "-":
        s = s[1:]
        sign = -1

    hours, s = parse_digits(s, 3)
    if hours > max_hours:
        raise FormatError(f"Invalid TZ string: hour {hours} out of range")
    total = hours * 3600
    if s[:1] == ":":
        minute, s = parse_00_to_59(s[1:])
        total += minute * 60
        if s[:1] == ":":
            second, s = parse_00_to_59(s[1:])
            total += second

    return sign * total, s


def parse_digits(s: str, max_len: int) -> tuple[int, str]:
    """Parse between 1 and ``max_len`` digits"""
    stop = 0
    while stop < max_len and s[stop : stop + 1].isdigit():
        stop += 1
    if stop == 0:
        raise FormatError(f"Invalid TZ string: expected digit, got {s!r}")
    return int(s[:stop]), s[stop:]


def parse_00_to_59(s: str) -> tuple[int, str]:
    if len(s) < 2 or not s[:2].isdigit():
        raise FormatError(f"Invalid TZ string: expected 2 digits, got '{s}'")
    value = int(s[:2])
    if value > 59:
        raise FormatError(f"Invalid TZ string: expected 00-59, got '{s[:2]}'")
    return value, s[2:]


def parse_rule(s: str) -> tuple[tuple[Rule, int], str]:
    rule: Rule
    if s[:1] == "M":  # Mm.n.d format
        m, s = parse_digits(s[1:], 2)
        s = expect_char(s, ".")
        n, s = parse_digits(s, 1)
        s = expect_char(s, ".")
        d, s = parse_digits(s, 1)

        if m < 1 or m > 12 or n < 1 or n > 5 or d > 6:
            raise FormatError(f"Invalid DST rule: M{m}.{n}.{d}")

        rule = LastWeekday(m, d) if n == 5 else NthWeekday(m, n, d)
    elif s[:1] == "J":  # Jnnn format
        nth, s = parse_digits(s[1:], 3)
        if nth < 1 or nth > 365:
            raise FormatError(f"Invalid Julian day of year: {nth}")
        rule = JulianDayOfYear(nth)
    else:  # nnn format
        nth, s = parse_digits(s, 3)
        if nth > 365:
            raise FormatError(f"Invalid day of year: {nth}")
        rule = DayOfYear(nth + 1)

    if s[:1] == "/":
        # Optional time
        time, s = parse_hms(s[1:])
    else:
        time = DEFAULT_RULE_TIME

    return (rule, time), s
