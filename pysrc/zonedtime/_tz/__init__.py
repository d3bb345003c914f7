from .ambiguity import AmbiguousLocalTime, NonExistentLocalTime
from .common import Disambiguate, Fold, FormatError, Gap, Unambiguous
from .posix import PosixRule
from .store import UnknownTimeZone
from .tzif import Transition, TransitionTable

__all__ = [
    "TransitionTable",
    "Transition",
    "PosixRule",
    "Disambiguate",
    "Unambiguous",
    "Gap",
    "Fold",
    "FormatError",
    "UnknownTimeZone",
    "AmbiguousLocalTime",
    "NonExistentLocalTime",
]
