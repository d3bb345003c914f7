"""
Resolve local times in folds and gaps from many threads at once, against a
single shared TransitionTable, while other threads keep clearing the zone
cache and switching the system timezone underneath them.

Every resolution is checked against the answer computed up front, so any
interference between threads shows up as a failed check rather than
just a crash.

Run it on a free-threaded interpreter to make it meaningful.
"""

import sys
import time
from os import environ
from threading import Event, Thread

from zonedtime import (
    Date,
    Time,
    ZonedDateTime,
    clear_tzcache,
    reset_system_tz,
    resolve_local,
    system_tz,
)
from zonedtime._tz.store import get_tz

if not hasattr(sys, "_is_gil_enabled") or sys._is_gil_enabled():
    print("WARNING: the GIL is enabled, so threads don't truly overlap.")

NUM_RESOLVERS = 12
NUM_ROUNDS = 2_000

SHARED = get_tz("America/New_York")

# (date, time, policy) for the 2023 transitions: the first two are folds,
# the last two are gaps.
CASES = [
    (Date(2023, 11, 5), Time(1, 30), "reject_gap"),
    (Date(2023, 11, 5), Time(1, 0), "latest"),
    (Date(2023, 3, 12), Time(2, 30), "shift_forward"),
    (Date(2023, 3, 12), Time(2, 0), "shift_forward"),
    # the same rules, far beyond the explicit transitions
    (Date(2400, 11, 5), Time(1, 30), "reject_gap"),
    (Date(2400, 3, 12), Time(2, 30), "shift_forward"),
]
EXPECTED = [resolve_local(SHARED, d, t, p) for d, t, p in CASES]

SYSTEM_TZS = [
    "Europe/Amsterdam",
    "Asia/Kolkata",
    "EST5EDT,M3.2.0,M11.1.0",
    "Australia/Lord_Howe",
    "UTC",
]


def resolve(failures: list[str]) -> None:
    for _ in range(NUM_ROUNDS):
        for (d, t, policy), expect in zip(CASES, EXPECTED):
            result = resolve_local(SHARED, d, t, policy)
            if result != expect:
                failures.append(f"{d} {t} {policy}: {result} != {expect}")
        # the same zone, freshly looked up while the cache is churning
        zdt = ZonedDateTime.from_civil(
            Date(2023, 11, 5),
            Time(1, 30),
            tz="America/New_York",
            disambiguate="latest",
        )
        if zdt.zone != SHARED or zdt.offset.total_seconds != -18_000:
            failures.append(f"lookup during cache clearing gave {zdt!r}")


def churn_cache(stop: Event) -> None:
    while not stop.is_set():
        clear_tzcache()
        clear_tzcache(only_keys=["America/New_York"])


def churn_system_tz(stop: Event) -> None:
    i = 0
    while not stop.is_set():
        environ["TZ"] = SYSTEM_TZS[i % len(SYSTEM_TZS)]
        reset_system_tz()
        system_tz().ambiguity_for_local(1_699_148_000)
        i += 1


def main() -> int:
    failures: list[str] = []
    stop = Event()
    churners = [
        Thread(target=churn_cache, args=(stop,)),
        Thread(target=churn_system_tz, args=(stop,)),
    ]
    resolvers = [
        Thread(target=resolve, args=(failures,)) for _ in range(NUM_RESOLVERS)
    ]

    start = time.perf_counter()
    for thread in churners + resolvers:
        thread.start()
    for thread in resolvers:
        thread.join()
    stop.set()
    for thread in churners:
        thread.join()
    print(f"{NUM_RESOLVERS} threads done in {time.perf_counter() - start:.2f}s")

    for failure in failures[:10]:
        print("FAILED:", failure)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
