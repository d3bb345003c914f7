from __future__ import annotations

from ._core import *
from ._core import (  # for pickling and the docs
    __all__,
    __version__,
    _unpkl_cspan,
    _unpkl_date,
    _unpkl_espan,
    _unpkl_inst,
    _unpkl_offset,
    _unpkl_time,
    _unpkl_zoned,
)
from ._tz.common import Fold, Gap, Unambiguous
from ._tz.posix import PosixRule
from ._tz.store import (
    clear_cache as _clear_tz_cache,
    clear_cache_by_keys as _clear_tz_cache_by_keys,
    reset_system_tz,
    set_tzpath as _set_tzpath,
)
from ._tz.tzif import Transition

import os as _os
import sysconfig as _sysconfig
from importlib.resources import files as _files
from pathlib import Path as _Path
from typing import Iterable as _Iterable, Iterator as _Iterator

__all__ = [
    *__all__,
    "Transition",
    "PosixRule",
    "Unambiguous",
    "Gap",
    "Fold",
    "TZPATH",
    "reset_tzpath",
    "reset_system_tz",
    "clear_tzcache",
    "available_timezones",
]

TZPATH: tuple[str, ...] = ()
"""The paths in which ``zonedtime`` will search for timezone data.
By default, this determined the same way as :data:`zoneinfo.TZPATH`,
although you can override it using :func:`zonedtime.reset_tzpath`.
"""


def reset_tzpath(target: _Iterable[str | _os.PathLike[str]] | None = None, /):
    """Reset or set the paths in which ``zonedtime`` will search for
    timezone data.

    It does not affect the :mod:`zoneinfo` module or other libraries.

    Note
    ----
    Due to caching, looking up a timezone after setting the tzpath may not
    load the data from the new path. Call :func:`clear_tzcache` to force
    loading *all* timezones again.

    Behaves similarly to :func:`zoneinfo.reset_tzpath`
    """
    global TZPATH

    if target is not None:
        # This is such a common mistake, that we raise a descriptive error
        if isinstance(target, (str, bytes)):
            raise TypeError("tzpath must be an iterable of paths")

        if not all(map(_os.path.isabs, target)):
            raise ValueError("tzpaths must be absolute paths")
        TZPATH = tuple(str(_Path(p)) for p in target)
    else:
        TZPATH = _tzpath_from_env()
    _set_tzpath(TZPATH)


def _tzpath_from_env() -> tuple[str, ...]:
    try:
        env_var = _os.environ["PYTHONTZPATH"]
    except KeyError:
        env_var = _sysconfig.get_config_var("TZPATH")

    if not env_var:
        return ()

    # invalid (relative) paths are silently ignored, like zoneinfo does
    return tuple(filter(_os.path.isabs, env_var.split(_os.pathsep)))


def clear_tzcache(*, only_keys: _Iterable[str] | None = None) -> None:
    """Clear the timezone cache. If ``only_keys`` is provided, only the
    cache for those keys will be cleared.

    Note
    ----
    Existing ``ZonedDateTime`` instances keep their loaded table,
    even if the timezone data on disk has changed since.
    """
    if only_keys is None:
        _clear_tz_cache()
    else:
        _clear_tz_cache_by_keys(tuple(only_keys))


def available_timezones() -> set[str]:
    """Gather the set of all available timezone IDs.

    Each call recalculates the names from the currently configured
    ``TZPATH`` and the ``tzdata`` package. The "special" files
    (``posixrules``, ``right/``, ``posix/``) are left out.

    Warning
    -------
    This function may open a large number of files, since the first few bytes
    of timezone files must be read to determine if they are valid.
    """
    zones = set()
    try:
        with _files("tzdata").joinpath("zones").open("r") as f:
            zones.update(filter(None, map(str.strip, f)))
    except (ImportError, FileNotFoundError):
        pass

    for base in TZPATH:
        zones.update(_find_all_tznames(_Path(base)))

    zones.discard("posixrules")
    return zones


# Recursion is safe here since the file tree is trusted, and nesting doesn't
# even approach the recursion limit.
def _find_all_tznames(base: _Path) -> _Iterator[str]:
    if not base.is_dir():
        return
    for entry in base.iterdir():
        if entry.is_dir():
            if entry.name in ("right", "posix"):
                continue
            for p in _find_nested_tzfiles(entry):
                yield p.relative_to(base).as_posix()
        elif _is_tzifile(entry):
            yield entry.name


def _find_nested_tzfiles(path: _Path) -> _Iterator[_Path]:
    for entry in path.iterdir():
        if entry.is_dir():
            yield from _find_nested_tzfiles(entry)
        elif _is_tzifile(entry):
            yield entry


def _is_tzifile(p: _Path) -> bool:
    try:
        with p.open("rb") as f:
            return f.read(4) == b"TZif"
    except OSError:
        return False


reset_tzpath()  # populate the tzpath once at startup
