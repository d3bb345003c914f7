"""Finding timezone data by key, and keeping loaded tables around.

A key is looked up in the ``TZPATH`` directories first, then in the
``tzdata`` package. Loaded tables are cached per key (see
:class:`TableCache`), and the system timezone is cached separately.
"""

from __future__ import annotations

import logging
import os.path
import sys
from collections import OrderedDict
from importlib.resources import files
from typing import TYPE_CHECKING, Callable, Iterable, NewType, Optional
from weakref import WeakValueDictionary

from . import system
from .tzif import TransitionTable

__all__ = [
    "UnknownTimeZone",
    "get_tz",
    "get_system_tz",
    "reset_system_tz",
    "clear_cache",
    "clear_cache_by_keys",
    "set_tzpath",
]

logger = logging.getLogger(__name__)

_NOGIL = hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()

# Free-threaded builds before 3.14 don't make OrderedDict operations atomic
if TYPE_CHECKING or (
    _NOGIL and sys.version_info < (3, 14)
):  # pragma: no cover
    from threading import Lock as _Lock
else:

    class _Lock:
        def __enter__(self) -> None:
            pass

        def __exit__(self, *args) -> None:
            pass


class TableCache:
    """Tables by key, in two tiers.

    The ``recent`` tier holds strong references to the last few keys used.
    The ``alive`` tier is a weak mapping: a table that dropped out of
    ``recent`` is still found there as long as some ``ZonedDateTime``
    (or anything else) refers to it, so a key never maps to two live
    tables at once.
    """

    __slots__ = ("size", "recent", "alive", "_lock")

    def __init__(self, size: int) -> None:
        self.size = size
        self.recent: OrderedDict[str, TransitionTable] = OrderedDict()
        self.alive: WeakValueDictionary[str, TransitionTable] = (
            WeakValueDictionary()
        )
        self._lock = _Lock()

    def get(
        self, key: str, load: Callable[[str], TransitionTable]
    ) -> TransitionTable:
        table = self.alive.get(key)
        if table is None:
            # Two threads may both load the key here. Only the table
            # stored first is ever handed out.
            table = self.alive.setdefault(key, load(key))

        with self._lock:
            self.recent[key] = self.recent.pop(key, table)
            if len(self.recent) > self.size:
                try:
                    self.recent.popitem(last=False)
                except KeyError:  # pragma: no cover
                    pass  # emptied by a concurrent clear()
        return table

    def clear(self) -> None:
        self.alive.clear()
        with self._lock:
            self.recent.clear()

    def discard(self, keys: Iterable[str]) -> None:
        with self._lock:
            for k in keys:
                self.alive.pop(k, None)
                self.recent.pop(k, None)


_TZPATH: tuple[str, ...] = ()
_cache = TableCache(size=8)


def set_tzpath(to: tuple[str, ...]) -> None:
    global _TZPATH
    _TZPATH = to


def clear_cache() -> None:
    logger.debug("Clearing timezone cache")
    _cache.clear()


def clear_cache_by_keys(keys: tuple[str, ...]) -> None:
    logger.debug("Clearing timezone cache for %s", keys)
    _cache.discard(keys)


def get_tz(key: str) -> TransitionTable:
    """Load the table for an IANA timezone ID, or get it from the cache

    Raises
    ------
    UnknownTimeZone
        If the key is invalid or no data is found for it
    """
    return _cache.get(key, _load_tz)


# A key that passed validate_tzid(), safe to use as a relative path
SafeTzId = NewType("SafeTzId", str)

_TZID_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_+/."
)


def validate_tzid(key: str) -> SafeTzId:
    """Refuse keys that could escape the search directories,
    or that no real timezone ID looks like."""
    if (
        type(key) is str
        # IANA sets no maximum, the longest real ID is about 30 characters
        and 0 < len(key) < 100
        and _TZID_CHARS.issuperset(key)
        and key[0] not in ".-+/"
        and key[-1] != "/"
        and not any(
            part in ("", ".", "..") for part in key.split("/")
        )
    ):
        return SafeTzId(key)
    raise UnknownTimeZone.for_key(key)


def _read_from_tzpath(key: SafeTzId) -> Optional[bytes]:
    for directory in _TZPATH:
        path = os.path.join(directory, key)
        if os.path.isfile(path):
            logger.debug("Loading %r from %s", key, path)
            with open(path, "rb") as f:
                return f.read()
    return None


def _read_from_tzdata(key: SafeTzId) -> bytes:
    try:
        resource = files("tzdata.zoneinfo").joinpath(*key.split("/"))
        # not every platform raises the same error for a missing resource
        if not resource.is_file():
            raise FileNotFoundError(key)
        logger.debug("Loading %r from the tzdata package", key)
        return resource.read_bytes()
    except (ImportError, FileNotFoundError):
        raise UnknownTimeZone.for_key(key) from None


def _load_tz(key: str) -> TransitionTable:
    safe_key = validate_tzid(key)
    tzif = _read_from_tzpath(safe_key) or _read_from_tzdata(safe_key)
    # a file that isn't TZif (e.g. a README in the search path) means
    # there's no timezone by this name
    if not tzif.startswith(b"TZif"):
        raise UnknownTimeZone.for_key(key)
    return TransitionTable.parse_tzif(tzif, key)


_system_tz: Optional[TransitionTable] = None


def get_system_tz() -> TransitionTable:
    global _system_tz
    # No lock: racing threads each read a valid table, one of them is kept.
    if _system_tz is None:
        _system_tz = _read_system_tz()
    return _system_tz


def reset_system_tz() -> None:
    """Read the system timezone again, e.g. after ``TZ`` was changed."""
    global _system_tz
    _system_tz = _read_system_tz()


def _read_system_tz() -> TransitionTable:
    source, value = system.get_tz()
    if source is system.Source.KEY:
        return get_tz(value)
    elif source is system.Source.KEY_OR_POSIX:
        try:
            return get_tz(value)
        except UnknownTimeZone:
            logger.debug("No timezone %r, trying it as a POSIX string", value)
            return TransitionTable.parse_posix(value)
    else:  # a TZif file without a key
        with open(value, "rb") as f:
            return TransitionTable.parse_tzif(f.read())


class UnknownTimeZone(ValueError):
    """No timezone with the given ID was found"""

    @classmethod
    def for_key(cls, key: str) -> UnknownTimeZone:
        return cls(f"No time zone found for key: {key!r}")
