"""Detecting the system timezone"""

from __future__ import annotations

import enum
import logging
import os
import os.path
import platform
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

SYSTEM = platform.system()
LOCALTIME = "/etc/localtime"


class Source(enum.Enum):
    KEY = "key"
    """An IANA timezone ID"""
    FILE = "file"
    """Path to a TZif file, of which the ID is unknown"""
    KEY_OR_POSIX = "key_or_posix"
    """Either an IANA timezone ID or a POSIX TZ string"""


class SystemTz(NamedTuple):
    source: Source
    value: str


# Getting the system timezone key and file depends on the platform.
# On unix-like systems it's relatively straightforward.
# On other platforms, we use the tzlocal package.
if SYSTEM in ("Linux", "Darwin"):  # pragma: no cover

    def _key_or_file() -> SystemTz:
        tzif_path = os.path.realpath(LOCALTIME)
        if tzif_path == LOCALTIME:
            # If the file is not a symlink, we can't determine the tzid
            return SystemTz(Source.FILE, LOCALTIME)

        if (tzid := tzid_from_path(tzif_path)) is None:
            return SystemTz(Source.FILE, tzif_path)
        return SystemTz(Source.KEY, tzid)

else:  # pragma: no cover
    import tzlocal

    def _key_or_file() -> SystemTz:
        return SystemTz(Source.KEY, tzlocal.get_localzone_name())


def tzid_from_path(path: str) -> Optional[str]:
    """Find the IANA timezone ID from a path to a zoneinfo file.
    Returns None if the path is not in a zoneinfo directory.
    """
    # Find the path segment containing 'zoneinfo',
    # e.g. `zoneinfo/` or `zoneinfo.default/`
    if (marker := path.rfind("zoneinfo")) == -1:
        return None
    if (index := path.find("/", marker)) == -1:
        return None
    return path[index + 1 :] or None


def get_tz() -> SystemTz:
    """Determine where the system timezone comes from: the ``TZ``
    environment variable if set, otherwise the platform's configuration."""
    try:
        tz_env = os.environ["TZ"]
    except KeyError:
        result = _key_or_file()
    else:
        if tz_env.startswith(":"):
            tz_env = tz_env[1:]  # strip leading colon
        # Unless it's an absolute path, there's no way to strictly determine
        # if this is a zoneinfo key or a posix TZ string.
        if os.path.isabs(tz_env):
            result = SystemTz(Source.FILE, tz_env)
        # If there's a digit, it may be a posix TZ string. Theoretically
        # a zoneinfo key could contain a digit too.
        elif any(c.isdigit() for c in tz_env):
            result = SystemTz(Source.KEY_OR_POSIX, tz_env)
        else:
            result = SystemTz(Source.KEY, tz_env)
    logger.debug("System timezone: %s %r", result.source.value, result.value)
    return result
