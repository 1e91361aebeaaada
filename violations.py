from dataclasses import dataclass
from enum import Enum, IntEnum, unique

from utils import Card


@unique
class Severity(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


@unique
class ViolationType(Enum):
    # basic rules
    MISPLAY = "Misplay"
    BAD_DISCARD_5 = "BadDiscard5"
    BAD_DISCARD_CRITICAL = "BadDiscardCritical"
    ILLEGAL_DISCARD = "IllegalDiscard"
    ILLEGAL_CLUE = "IllegalClue"

    # beginner
    GOOD_TOUCH = "GoodTouchViolation"
    MCVP = "MCVPViolation"
    MISSED_SAVE = "MissedSave"
    MISREAD_SAVE = "MisreadSave"
    MISSED_PROMPT = "MissedPrompt"
    MISSED_FINESSE = "MissedFinesse"
    BROKEN_FINESSE = "BrokenFinesse"

    # intermediate
    FIVE_STALL = "FiveStall"
    STOMPED_FINESSE = "StompedFinesse"
    WRONG_PROMPT = "WrongPrompt"
    DOUBLE_DISCARD_AVOIDANCE = "DoubleDiscardAvoidance"
    BAD_PLAY_CLUE = "BadPlayClue"

    # advanced
    FIX_CLUE = "FixClue"
    SARCASTIC_DISCARD = "SarcasticDiscard"
    WRONG_ONES_ORDER = "WrongOnesOrder"
    MISPLAY_COST = "MisplayCostViolation"
    INFORMATION_LOCK = "InformationLock"

    def __str__(self) -> str:
        return self.value


@unique
class ConventionLevel(IntEnum):
    BASIC = 0
    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3

    @property
    def display_name(self) -> str:
        return self.name.title()


@dataclass(frozen=True)
class Violation:
    type: ViolationType
    severity: Severity
    turn: int
    """1-indexed turn of the action on which the problem was detected"""
    player: str
    """The player who is to blame, not necessarily the one who just acted"""
    description: str
    card: Card | None = None

    def __str__(self) -> str:
        return f"Turn {self.turn} [{self.severity}] {self.type} ({self.player}): {self.description}"
