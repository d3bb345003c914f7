from zonedtime import Date, Time, ZonedDateTime, resolve_local


def test_new(benchmark):
    benchmark(
        ZonedDateTime,
        2020,
        3,
        20,
        12,
        30,
        45,
        nanosecond=450,
        tz="Europe/Amsterdam",
    )


def test_to_zone(benchmark):
    dt = ZonedDateTime(
        2020, 3, 20, 12, 30, 45, nanosecond=450, tz="Europe/Amsterdam"
    )
    benchmark(dt.to_zone, "America/New_York")


def test_add_days(benchmark):
    dt = ZonedDateTime(2023, 10, 28, 2, 30, tz="Europe/Amsterdam")
    benchmark(dt.add, days=1)


def test_add_hours(benchmark):
    dt = ZonedDateTime(2023, 10, 28, 2, 30, tz="Europe/Amsterdam")
    benchmark(dt.add, hours=24)


def test_resolve_fold(benchmark):
    benchmark(
        resolve_local,
        "Europe/Amsterdam",
        Date(2023, 10, 29),
        Time(2, 30),
        "reject_gap",
    )


# Beyond the last explicit transition, the POSIX rule is evaluated
def test_new_far_future(benchmark):
    benchmark(ZonedDateTime, 2200, 7, 1, 12, tz="America/New_York")
