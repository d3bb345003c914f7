import os
import struct
from contextlib import contextmanager
from typing import Sequence
from unittest.mock import patch

from zonedtime import TransitionTable, reset_system_tz

# The POSIX TZ string for the Amsterdam timezone.
AMS_TZ_POSIX = "CET-1CEST,M3.5.0,M10.5.0/3"
NYC_TZ_POSIX = "EST5EDT,M3.2.0,M11.1.0"

# Local time types of a New York-like zone
LMT = (-17762, 0, "LMT")
EST = (-18000, 0, "EST")
EDT = (-14400, 1, "EDT")

# 1883-11-18 17:00Z, 2021-03-14 07:00Z, 2021-11-07 06:00Z
NYC_TIMES = [-2717650800, 1615705200, 1636264800]


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


class AlwaysLarger:
    def __lt__(self, _):
        return False

    def __le__(self, _):
        return False

    def __gt__(self, _):
        return True

    def __ge__(self, _):
        return True


class AlwaysSmaller:
    def __lt__(self, _):
        return True

    def __le__(self, _):
        return True

    def __gt__(self, _):
        return False

    def __ge__(self, _):
        return False


@contextmanager
def system_tz(name):
    try:
        with patch.dict(os.environ, {"TZ": name}):
            reset_system_tz()
            yield
    finally:
        reset_system_tz()  # don't forget to reset the timezone after the patch!


def make_tzif(
    times: Sequence[int],
    indices: Sequence[int],
    types: Sequence[tuple[int, int, str]],
    footer: str = "",
    *,
    version: bytes = b"2",
    leapcnt: int = 0,
    indicators: bool = False,
) -> bytes:
    """Build the bytes of a TZif file.

    For version 2+ files, the legacy block only holds the transitions
    that fit in 32 bits, like zic does.
    """
    chars = b""
    ttinfos = []
    for offset, isdst, name in types:
        encoded = name.encode() + b"\0"
        if (idx := chars.find(encoded)) == -1:
            idx = len(chars)
            chars += encoded
        ttinfos.append((offset, isdst, idx))

    def block(time_size: int, ts: Sequence[int], ix: Sequence[int]) -> bytes:
        indicator_count = len(types) if indicators else 0
        counts = struct.pack(
            ">6L",
            indicator_count,
            indicator_count,
            leapcnt,
            len(ts),
            len(types),
            len(chars),
        )
        return (
            b"TZif"
            + version
            + b"\0" * 15
            + counts
            + struct.pack(f">{len(ts)}{'q' if time_size == 8 else 'l'}", *ts)
            + bytes(ix)
            + b"".join(struct.pack(">lBB", *t) for t in ttinfos)
            + chars
            + b"\0" * (leapcnt * (time_size + 4))
            + b"\0" * (2 * indicator_count)
        )

    if version == b"\0":
        return block(4, times, indices)

    legacy = [
        (t, i) for t, i in zip(times, indices) if -(2**31) <= t < 2**31
    ]
    return (
        block(4, [t for t, _ in legacy], [i for _, i in legacy])
        + block(8, times, indices)
        + b"\n"
        + footer.encode()
        + b"\n"
    )


NYC_TZIF = make_tzif(NYC_TIMES, [1, 2, 1], [LMT, EST, EDT], NYC_TZ_POSIX)


def nyc_table() -> TransitionTable:
    """A New York-like zone with explicit transitions for 2021,
    and a POSIX rule after that"""
    return TransitionTable.parse_tzif(NYC_TZIF, key="Test/New_York")
