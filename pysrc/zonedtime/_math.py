"""Calendar arithmetic on the proleptic Gregorian calendar.

Dates are handled as a plain day count from 1970-01-01 ("epoch days").
The conversions are Howard Hinnant's ``days_from_civil`` and
``civil_from_days`` algorithms, which work on 400-year eras so that
no intermediate value depends on the year being positive.
"""

YMD = tuple[int, int, int]

MIN_YEAR = -32768
MAX_YEAR = 32767

# Days from 0000-03-01 (the anchor of the algorithms) to 1970-01-01
DAYS_TO_EPOCH = 719_468
DAYS_PER_ERA = 146_097

_DAYS_IN_MONTH = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_DAYS_BEFORE_MONTH = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap(year) else 365


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap(year):
        return 29
    return _DAYS_IN_MONTH[month]


def days_before_month(year: int, month: int) -> int:
    return _DAYS_BEFORE_MONTH[month] + (month > 2 and is_leap(year))


def ymd_to_epoch_days(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01. No validation is done on the input."""
    # Treat January and February as the last months of the previous year,
    # so the leap day falls at the very end of the (shifted) year.
    y = year - (month <= 2)
    era = y // 400
    yoe = y - era * 400
    doy = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * DAYS_PER_ERA + doe - DAYS_TO_EPOCH


def epoch_days_to_ymd(days: int) -> YMD:
    """Inverse of :func:`ymd_to_epoch_days`"""
    days += DAYS_TO_EPOCH
    era = days // DAYS_PER_ERA
    doe = days - era * DAYS_PER_ERA
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    return yoe + era * 400 + (month <= 2), month, day


MIN_EPOCH_DAYS = ymd_to_epoch_days(MIN_YEAR, 1, 1)
MAX_EPOCH_DAYS = ymd_to_epoch_days(MAX_YEAR, 12, 31)


def iso_weekday(days: int) -> int:
    """ISO weekday (Monday=1, Sunday=7) of the given epoch day"""
    # 1970-01-01 was a Thursday
    return (days + 3) % 7 + 1


def day_of_year(year: int, month: int, day: int) -> int:
    return days_before_month(year, month) + day


def _iso_week_start(year: int) -> int:
    # Week 1 is the week containing January 4th
    jan4 = ymd_to_epoch_days(year, 1, 4)
    return jan4 - iso_weekday(jan4) + 1


def iso_week(days: int) -> YMD:
    """The ISO week date (year, week, weekday) of the given epoch day"""
    year = epoch_days_to_ymd(days)[0]
    start = _iso_week_start(year)
    if days < start:
        start = _iso_week_start(year - 1)
    elif days >= (next_start := _iso_week_start(year + 1)):
        start = next_start
    # The thursday of week 1 always lies in the ISO year itself
    iso_year = epoch_days_to_ymd(start + 3)[0]
    return iso_year, (days - start) // 7 + 1, iso_weekday(days)


def weeks_in_iso_year(year: int) -> int:
    return (_iso_week_start(year + 1) - _iso_week_start(year)) // 7


def iso_week_to_epoch_days(year: int, week: int, weekday: int) -> int:
    """Inverse of :func:`iso_week`. No validation is done on the input."""
    return _iso_week_start(year) + (week - 1) * 7 + weekday - 1


def add_months(year: int, month: int, day: int, months: int) -> YMD:
    """Shift by whole months, clamping the day to the end of the month"""
    year_delta, month0_new = divmod(month - 1 + months, 12)
    year_new = year + year_delta
    month_new = month0_new + 1
    return year_new, month_new, min(day, days_in_month(year_new, month_new))


def months_between(start: YMD, end: YMD) -> int:
    """The number of whole months that can be added to ``start``
    without passing ``end``. Negative if ``end`` comes first."""
    diff = (end[0] - start[0]) * 12 + (end[1] - start[1])
    shifted = add_months(*start, diff)

    # Check if we overshot
    if diff > 0 and shifted > end:
        diff -= 1
    elif diff < 0 and shifted < end:
        diff += 1
    return diff
