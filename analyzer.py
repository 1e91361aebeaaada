from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from conventions import ALL_CHECKERS, CheckContext, Checker
from export import GameExport
from game import GameState, simulate
from utils import NullStream
from violations import ConventionLevel, Violation


@dataclass(frozen=True)
class AnalyzerOptions:
    """
    The convention level and the checkers it switches on, resolved once.
    """

    level: ConventionLevel = ConventionLevel.ADVANCED
    checkers: tuple[Checker, ...] = field(init=False, compare=False)

    def __post_init__(self):
        level = ConventionLevel(self.level)
        object.__setattr__(self, "level", level)
        object.__setattr__(
            self,
            "checkers",
            tuple(checker() for checker in ALL_CHECKERS if checker.level <= level),
        )

    @property
    def checker_ids(self) -> frozenset[str]:
        return frozenset(checker.id for checker in self.checkers)


@dataclass(frozen=True)
class Summary:
    total: int
    by_type: dict[str, int]
    by_severity: dict[str, int]


def analyze_game(
    game: GameExport,
    states: Sequence[GameState],
    options: AnalyzerOptions | None = None,
    log=NullStream(),
) -> list[Violation]:
    """
    Run every active checker once per action and collect what they report,
    ordered by turn and then by checker registration order.
    """
    if options is None:
        options = AnalyzerOptions()
    assert len(states) == len(game.actions) + 1, "states do not belong to this game"

    violations: list[Violation] = []
    for i, action in enumerate(game.actions):
        ctx = CheckContext(game=game, states=states, action_index=i, level=options.level)
        for checker in options.checkers:
            if not checker.applies_to(action):
                continue
            found = checker.check(ctx)
            for violation in found:
                print("Turn", i + 1, checker.id + ":", violation.description, file=log)
            violations.extend(found)
    print(
        "Analyzed",
        len(game.actions),
        "actions at level",
        options.level.display_name + ",",
        len(violations),
        "violations",
        file=log,
    )
    return violations


def create_summary(violations: Sequence[Violation]) -> Summary:
    by_type = Counter(str(v.type) for v in violations)
    by_severity = Counter(str(v.severity) for v in violations)
    return Summary(
        total=len(violations),
        by_type=dict(by_type),
        by_severity=dict(by_severity),
    )


def review(
    game: GameExport,
    level: ConventionLevel = ConventionLevel.ADVANCED,
    log=NullStream(),
) -> tuple[list[GameState], list[Violation]]:
    """Replay a game and analyze it in one go."""
    states = simulate(game.deck, game.players, game.actions, log=log)
    return states, analyze_game(game, states, AnalyzerOptions(level), log=log)
