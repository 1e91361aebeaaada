from .base import Checker, CheckContext
from .basic import (
    MisplayChecker,
    BadDiscard5Checker,
    BadDiscardCriticalChecker,
    IllegalDiscardChecker,
    IllegalClueChecker,
)
from .clues import MCVPChecker, GoodTouchChecker, FiveStallChecker
from .saves import MissedSaveChecker, MisreadSaveChecker
from .prompts import MissedPromptChecker, WrongPromptChecker
from .finesse import (
    MissedFinesseChecker,
    BrokenFinesseChecker,
    StompedFinesseChecker,
    BadPlayClueChecker,
)
from .discards import (
    DoubleDiscardAvoidanceChecker,
    SarcasticDiscardChecker,
    InformationLockChecker,
)
from .advanced import FixClueChecker, MisplayCostChecker, WrongOnesOrderChecker

# registration order is also the order violations of one turn are reported in
ALL_CHECKERS: tuple[type[Checker], ...] = (
    MisplayChecker,
    BadDiscard5Checker,
    BadDiscardCriticalChecker,
    IllegalDiscardChecker,
    IllegalClueChecker,
    MCVPChecker,
    GoodTouchChecker,
    MissedSaveChecker,
    MisreadSaveChecker,
    MissedPromptChecker,
    MissedFinesseChecker,
    BrokenFinesseChecker,
    FiveStallChecker,
    DoubleDiscardAvoidanceChecker,
    StompedFinesseChecker,
    WrongPromptChecker,
    BadPlayClueChecker,
    FixClueChecker,
    SarcasticDiscardChecker,
    InformationLockChecker,
    WrongOnesOrderChecker,
    MisplayCostChecker,
)

__all__ = [
    "Checker",
    "CheckContext",
    "ALL_CHECKERS",
    "MisplayChecker",
    "BadDiscard5Checker",
    "BadDiscardCriticalChecker",
    "IllegalDiscardChecker",
    "IllegalClueChecker",
    "MCVPChecker",
    "GoodTouchChecker",
    "MissedSaveChecker",
    "MisreadSaveChecker",
    "MissedPromptChecker",
    "MissedFinesseChecker",
    "BrokenFinesseChecker",
    "FiveStallChecker",
    "DoubleDiscardAvoidanceChecker",
    "StompedFinesseChecker",
    "WrongPromptChecker",
    "BadPlayClueChecker",
    "FixClueChecker",
    "SarcasticDiscardChecker",
    "InformationLockChecker",
    "WrongOnesOrderChecker",
    "MisplayCostChecker",
]
