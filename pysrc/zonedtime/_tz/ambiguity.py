"""Turning a classified local time into concrete offsets.

Results are ``(shift, offset)`` pairs: the local time must be moved by
``shift`` seconds, after which it is valid with the given offset.
The shift is only non-zero for times in a gap.
"""

from __future__ import annotations

from typing import Optional, Union

from .._common import Offset
from .common import Ambiguity, Disambiguate, Fold, Gap, Unambiguous

Shift = int
Resolution = tuple[Shift, Offset]


class AmbiguousLocalTime(ValueError):
    """A local time occurs twice in a timezone, e.g. because clocks were
    set back at the end of DST"""

    @classmethod
    def _for_tz(cls, civil: str, key: Optional[str]) -> AmbiguousLocalTime:
        return cls(f"{civil} is ambiguous in {_tzid_display(key)}")


class NonExistentLocalTime(ValueError):
    """A local time doesn't occur in a timezone, e.g. because clocks were
    set forward at the start of DST"""

    @classmethod
    def _for_tz(cls, civil: str, key: Optional[str]) -> NonExistentLocalTime:
        return cls(f"{civil} doesn't exist in {_tzid_display(key)}")


def _tzid_display(key: Optional[str]) -> str:
    if key is None:
        return "timezone with unknown ID"
    else:
        return f"timezone '{key}'"


def as_policy(value: Union[Disambiguate, str]) -> Disambiguate:
    try:
        return Disambiguate(value)
    except ValueError:
        raise ValueError(
            "disambiguate must be one of "
            + ", ".join(repr(p.value) for p in Disambiguate)
            + f", got {value!r}"
        ) from None


def resolve_ambiguity(
    ambiguity: Ambiguity,
    policy: Disambiguate,
    civil: str,
    key: Optional[str],
) -> tuple[Resolution, ...]:
    """All valid resolutions under the given policy, earliest instant first.

    ``civil`` and ``key`` are only used in error messages.
    """
    if isinstance(ambiguity, Unambiguous):
        return ((0, ambiguity.offset),)
    elif isinstance(ambiguity, Fold):
        if policy is Disambiguate.EARLIEST:
            return ((0, ambiguity.before),)
        elif policy is Disambiguate.LATEST:
            return ((0, ambiguity.after),)
        elif policy is Disambiguate.REJECT:
            raise AmbiguousLocalTime._for_tz(civil, key)
        # The larger offset (before the transition) is the earlier instant
        return ((0, ambiguity.before), (0, ambiguity.after))
    else:  # isinstance(ambiguity, Gap)
        if policy is Disambiguate.SHIFT_FORWARD:
            return ((ambiguity.after - ambiguity.before, ambiguity.after),)
        raise NonExistentLocalTime._for_tz(civil, key)


def resolve_using_prev_offset(
    ambiguity: Ambiguity, prev_offset: Offset
) -> Resolution:
    """Resolve a shifted local time, sticking to the previous offset
    where possible."""
    if isinstance(ambiguity, Unambiguous):
        return (0, ambiguity.offset)
    elif isinstance(ambiguity, Fold):
        # If the offset is already valid, there's nothing to do
        # otherwise, always use the earlier offset
        if prev_offset == ambiguity.after:
            return (0, ambiguity.after)
        return (0, ambiguity.before)
    else:  # isinstance(ambiguity, Gap)
        gap = ambiguity.after - ambiguity.before
        # Leave the gap on the side we came from
        if prev_offset == ambiguity.after:
            return (-gap, ambiguity.before)
        return (gap, ambiguity.after)
