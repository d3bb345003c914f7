"""Parsing and querying of TZif files (RFC 8536)"""

from __future__ import annotations

import struct
from io import BytesIO
from typing import IO, NamedTuple, Optional, Sequence, final

from .._common import (
    EPOCH_SECS_MAX,
    EPOCH_SECS_MIN,
    MAX_OFFSET_SECS,
    EpochSecs,
    Offset,
)
from .common import (
    Ambiguity,
    FormatError,
    LocalTimeType,
    Unambiguous,
    ambiguity_at,
)
from .posix import PosixRule

OffsetDelta = int

_SUPPORTED_VERSIONS = {b"\x00": 1, b"2": 2, b"3": 3, b"4": 4}


class Transition(NamedTuple):
    """From ``at`` (epoch seconds) onwards, the given local time type applies"""

    at: EpochSecs
    offset: Offset
    is_dst: bool
    designation: str

    def local_type(self) -> LocalTimeType:
        return LocalTimeType(self.offset, self.is_dst, self.designation)


@final
class TransitionTable:
    """A complete timezone definition, enough to represent a TZif file.

    Can also be used to represent a POSIX TZ string (if there are no explicit
    transitions) or an anonymous timezone (if ``key`` is ``None``).
    Instances are immutable and may be shared freely.
    """

    __slots__ = (
        "__weakref__",
        "key",
        "_by_utc",
        "_offsets_by_local",
        "_end",
    )

    # The IANA tz ID (e.g. "Europe/Amsterdam"). Not actually parsed from the
    # file, but we usually associate a file with the key it was loaded by.
    key: Optional[str]

    # For UTC -> local, the lookup is unambiguous and simple. The first entry
    # is the initial local time type, in effect "since the beginning of time".
    # The rest are the explicit transitions, strictly increasing.
    _by_utc: tuple[Transition, ...]

    # For local -> UTC, the transition may be ambiguous and therefore requires
    # extra information. Read Sequence[(X, (Y, Z))] as "UNTIL local time X
    # (in local epoch seconds) the offset is Y. At this point it shifts by Z".
    _offsets_by_local: tuple[tuple[EpochSecs, tuple[Offset, OffsetDelta]], ...]

    # Rule for instants after the last explicit transition
    _end: Optional[PosixRule]

    def __init__(
        self,
        key: Optional[str],
        _by_utc: tuple[Transition, ...],
        _end: Optional[PosixRule] = None,
    ):
        assert _by_utc, "an initial local time type is required"
        # Tables are shared through the cache, so they are frozen once built
        _set = object.__setattr__
        _set(self, "key", key)
        _set(self, "_by_utc", _by_utc)
        _set(self, "_offsets_by_local", tuple(_local_transitions(_by_utc)))
        _set(self, "_end", _end)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(
            f"can't set {name!r}: TransitionTable is immutable"
        )

    def __delattr__(self, name: str) -> None:
        raise AttributeError(
            f"can't delete {name!r}: TransitionTable is immutable"
        )

    @property
    def transitions(self) -> tuple[Transition, ...]:
        """The explicit transitions, in chronological order"""
        return self._by_utc[1:]

    @property
    def initial(self) -> LocalTimeType:
        """The local time type in effect before the first transition"""
        return self._by_utc[0].local_type()

    @property
    def posix_rule(self) -> Optional[PosixRule]:
        return self._end

    def local_type_for_instant(self, t: EpochSecs) -> LocalTimeType:
        """Get the offset, DST flag and designation at the given exact time"""
        idx = bisect(self._by_utc, t)
        if idx is not None:
            return self._by_utc[max(0, idx - 1)].local_type()

        # If the time is after the last transition, use the POSIX TZ string
        if self._end is not None:
            return self._end.local_type_for_instant(t)
        # If there's no POSIX TZ string, the last type persists.
        return self._by_utc[-1].local_type()

    def offset_for_instant(self, t: EpochSecs) -> Offset:
        """Get the UTC offset at the given exact time"""
        return self.local_type_for_instant(t).offset

    def is_dst(self, t: EpochSecs) -> bool:
        return self.local_type_for_instant(t).is_dst

    def designation(self, t: EpochSecs) -> str:
        return self.local_type_for_instant(t).designation

    def ambiguity_for_local(self, t: EpochSecs) -> Ambiguity:
        """Get the UTC offset(s) at the given local time (in epoch seconds)"""
        idx = bisect(self._offsets_by_local, t)
        if idx is not None:
            local_time, (offset, change) = self._offsets_by_local[idx]
            return ambiguity_at(t, local_time, offset, offset + change)

        # If the time is after the last transition, use the POSIX TZ string
        if self._end is not None:
            return self._end.ambiguity_for_local(t)
        return Unambiguous(self._by_utc[-1].offset)

    # NOTE: this equality check needs to be fast, since it's used in
    # some routines to check if the timezone is indeed changing.
    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        # Two different instances may represent the same timezone,
        # e.g. after the cache was cleared.
        elif type(other) is TransitionTable:
            return (
                self.key == other.key
                and self._by_utc == other._by_utc
                and self._end == other._end
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.key, self._by_utc, self._end))

    def __repr__(self) -> str:
        if self.key is None:
            return f"TransitionTable(<{len(self._by_utc) - 1} transitions>)"
        return f"TransitionTable({self.key!r})"

    @classmethod
    def parse_posix(cls, s: str) -> TransitionTable:
        """Create a table from a POSIX TZ string, e.g. ``EST5EDT,M3.2.0,M11.1.0``"""
        rule = PosixRule.parse(s)
        return cls(
            key=None,
            _by_utc=(
                Transition(
                    EPOCH_SECS_MIN,
                    *rule.local_type_for_instant(EPOCH_SECS_MIN),
                ),
            ),
            _end=rule,
        )

    @classmethod
    def parse_tzif(
        cls, data: bytes, key: Optional[str] = None
    ) -> TransitionTable:
        """Create a table from TZif file data

        Raises
        ------
        FormatError
            If the data is not a valid TZif file
        """
        read = BytesIO(data)
        header = _parse_header(read)
        return _parse_content(header, read, key)


def bisect(
    arr: Sequence[tuple[EpochSecs, object]], x: EpochSecs
) -> Optional[int]:
    """Bisect the array of (time, value) pairs to find the INDEX of the first
    entry after the given time. Return None if after the last entry.
    """
    size = len(arr)
    left = 0
    right = size

    while left < right:
        mid = left + size // 2

        if x >= arr[mid][0]:
            left = mid + 1
        else:
            right = mid
        size = right - left

    return left if left != len(arr) else None


class Header:
    """TZif file header"""

    __slots__ = (
        "version",
        "isutcnt",
        "isstdcnt",
        "leapcnt",
        "timecnt",
        "typecnt",
        "charcnt",
    )

    version: int
    isutcnt: int
    isstdcnt: int
    leapcnt: int
    timecnt: int
    typecnt: int
    charcnt: int

    def __init__(
        self,
        version: int,
        isutcnt: int,
        isstdcnt: int,
        leapcnt: int,
        timecnt: int,
        typecnt: int,
        charcnt: int,
    ):
        self.version = version
        self.isutcnt = isutcnt
        self.isstdcnt = isstdcnt
        self.leapcnt = leapcnt
        self.timecnt = timecnt
        self.typecnt = typecnt
        self.charcnt = charcnt

    def block_size(self, time_size: int) -> int:
        """Size of the data block following this header"""
        return (
            self.timecnt * (time_size + 1)
            + self.typecnt * 6
            + self.charcnt
            + self.leapcnt * (time_size + 4)
            + self.isstdcnt
            + self.isutcnt
        )


def _read_exact(data: IO[bytes], size: int) -> bytes:
    result = data.read(size)
    if len(result) != size:
        raise FormatError("Unexpected end of TZif data")
    return result


def _parse_header(data: IO[bytes]) -> Header:
    if data.read(4) != b"TZif":
        raise FormatError("Invalid TZif header: bad magic bytes")

    version = _SUPPORTED_VERSIONS.get(data.read(1))
    if version is None:
        raise FormatError("Invalid TZif header: unsupported version")

    _read_exact(data, 15)  # Skip reserved bytes
    return Header(version, *struct.unpack(">6L", _read_exact(data, 24)))


def _parse_content(
    header: Header, data: IO[bytes], key: Optional[str]
) -> TransitionTable:
    """Parse the data block (and footer) following the header"""
    time_size = 4
    if header.version >= 2:
        # Skip the legacy 32-bit data, and use the 64-bit block instead
        _read_exact(data, header.block_size(4))
        header = _parse_header(data)
        time_size = 8

    # Validate all counts upfront, so nothing is sliced past the end
    block = BytesIO(_read_exact(data, header.block_size(time_size)))

    if header.typecnt == 0:
        raise FormatError("Invalid TZif data: no local time types")
    for count, name in ((header.isstdcnt, "std"), (header.isutcnt, "ut")):
        if count not in (0, header.typecnt):
            raise FormatError(
                f"Invalid TZif data: {name} indicator count mismatch"
            )

    transition_times = struct.unpack(
        f">{header.timecnt}{'q' if time_size == 8 else 'l'}",
        block.read(header.timecnt * time_size),
    )
    type_indices = block.read(header.timecnt)
    ttinfos = list(struct.iter_unpack(">lBB", block.read(header.typecnt * 6)))
    designations = block.read(header.charcnt)
    # Leap second records and the std/wall and UT/local indicators don't
    # affect the mapping between UTC and local time. We've checked their
    # size, but otherwise ignore them.

    types = [_load_type(ttinfo, designations) for ttinfo in ttinfos]
    if any(i >= header.typecnt for i in type_indices):
        raise FormatError("Invalid TZif data: type index out of range")
    if any(a >= b for a, b in zip(transition_times, transition_times[1:])):
        raise FormatError("Invalid TZif data: transitions not increasing")

    end = None
    if header.version >= 2:
        end = _parse_footer(data)

    return TransitionTable(
        key=key,
        _by_utc=_load_transitions(
            transition_times, [types[i] for i in type_indices], types[0]
        ),
        _end=end,
    )


def _load_type(
    ttinfo: tuple[int, int, int], designations: bytes
) -> LocalTimeType:
    offset, isdst, desig_idx = ttinfo
    if abs(offset) > MAX_OFFSET_SECS:
        raise FormatError(f"Invalid TZif data: offset {offset} out of range")
    if isdst not in (0, 1):
        raise FormatError("Invalid TZif data: daylight flag must be 0 or 1")
    if desig_idx >= len(designations):
        raise FormatError("Invalid TZif data: designation index out of range")
    end = designations.find(b"\0", desig_idx)
    raw = designations[desig_idx : None if end == -1 else end]
    try:
        designation = raw.decode("ascii")
    except UnicodeDecodeError:
        raise FormatError("Invalid TZif data: non-ASCII designation")
    return LocalTimeType(offset, bool(isdst), designation)


def _parse_footer(data: IO[bytes]) -> Optional[PosixRule]:
    footer = data.read()
    if footer[:1] != b"\n" or (stop := footer.find(b"\n", 1)) == -1:
        raise FormatError("Invalid TZif footer: missing newlines")
    tz_string = footer[1:stop]
    if not tz_string:
        # An empty footer means the last transition persists
        return None
    try:
        return PosixRule.parse(tz_string.decode("ascii"))
    except UnicodeDecodeError:
        raise FormatError("Invalid TZif footer: non-ASCII characters found")


def _load_transitions(
    times: Sequence[EpochSecs],
    types: Sequence[LocalTimeType],
    initial: LocalTimeType,
) -> tuple[Transition, ...]:
    """Combine the parsed arrays into transitions, dropping any that don't
    change anything or fall outside the supported range"""
    result = [Transition(EPOCH_SECS_MIN, *initial)]
    for epoch, ttype in zip(times, types):
        if epoch <= EPOCH_SECS_MIN:
            # Only the most recent of these matters for our range
            result[0] = Transition(EPOCH_SECS_MIN, *ttype)
        elif epoch > EPOCH_SECS_MAX:
            break
        elif result[-1].local_type() != ttype:
            result.append(Transition(epoch, *ttype))
    return tuple(result)


# See the TransitionTable class definition for these data structures
def _local_transitions(
    transitions: Sequence[Transition],
) -> list[tuple[EpochSecs, tuple[Offset, OffsetDelta]]]:
    result: list[tuple[EpochSecs, tuple[Offset, OffsetDelta]]] = []
    offset_prev = transitions[0].offset
    for epoch, offset, *_ in transitions[1:]:
        result.append(
            (
                epoch + max(offset_prev, offset),
                (offset_prev, offset - offset_prev),
            )
        )
        offset_prev = offset
    return result
