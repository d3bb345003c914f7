from __future__ import annotations

import enum
from typing import NamedTuple, Union

from .._common import Offset


class FormatError(ValueError):
    """Timezone data (TZif bytes or a POSIX TZ string) is malformed"""


class Disambiguate(enum.Enum):
    """How to resolve a local time that occurs twice (a *fold*)
    or not at all (a *gap*) in a timezone.

    ``EARLIEST``
        In a fold, use the offset in effect before the transition.
    ``LATEST``
        In a fold, use the offset in effect after the transition.
    ``REJECT``
        Refuse both folds and gaps.
    ``REJECT_GAP``
        Keep both readings of a fold; refuse gaps.
    ``SHIFT_FORWARD``
        Keep both readings of a fold; move a time in a gap forward
        by the size of the gap.

    The lowercase names (e.g. ``"earliest"``) are accepted wherever a policy
    is expected.
    """

    EARLIEST = "earliest"
    LATEST = "latest"
    REJECT = "reject"
    REJECT_GAP = "reject_gap"
    SHIFT_FORWARD = "shift_forward"


class LocalTimeType(NamedTuple):
    """The local time rules in effect over some period"""

    offset: Offset
    is_dst: bool
    designation: str


class Unambiguous:
    """The local time occurs exactly once, with the given offset"""

    __slots__ = ("offset",)

    offset: Offset

    def __init__(self, offset: Offset):
        self.offset = offset

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Unambiguous):
            return self.offset == other.offset
        return NotImplemented

    def __repr__(self) -> str:
        return f"Unambiguous({self.offset})"


class Gap:
    """The local time was skipped: the offset jumped from ``before`` to
    the larger ``after``"""

    __slots__ = ("before", "after")

    before: Offset
    after: Offset

    def __init__(self, before: Offset, after: Offset):
        self.before = before
        self.after = after

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Gap):
            return self.before == other.before and self.after == other.after
        return NotImplemented

    def __repr__(self) -> str:
        return f"Gap({self.before}, {self.after})"


class Fold:
    """The local time occurs twice: first with offset ``before``, then
    with the smaller ``after``"""

    __slots__ = ("before", "after")

    before: Offset
    after: Offset

    def __init__(self, before: Offset, after: Offset):
        self.before = before
        self.after = after

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Fold):
            return self.before == other.before and self.after == other.after
        return NotImplemented

    def __repr__(self) -> str:
        return f"Fold({self.before}, {self.after})"


Ambiguity = Union[Unambiguous, Gap, Fold]


def ambiguity_at(
    t: int, transition_local: int, before: Offset, after: Offset
) -> Ambiguity:
    """Classify local time ``t`` relative to a single transition, where
    ``transition_local`` is the transition expressed in the *larger* of the
    two offsets (i.e. the moment the overlap or gap ends in local time).

    The transition is half-open: the start of a gap or fold belongs to it,
    its end does not.
    """
    shift = after - before
    if t >= transition_local or t < transition_local - abs(shift):
        return Unambiguous(before if t < transition_local else after)
    elif shift > 0:
        return Gap(before, after)
    else:
        return Fold(before, after)
