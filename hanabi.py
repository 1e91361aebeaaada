import argparse
import sys
from typing import Any

from analyzer import AnalyzerOptions, analyze_game, create_summary
from export import load_export
from game import simulate
from utils import NullStream, format_hand, format_stacks
from violations import ConventionLevel


def print_states(game, states):
    for state in states:
        print(
            f"Turn {state.turn_number}:",
            "clues",
            state.clue_tokens,
            "strikes",
            state.strikes,
            "| board:",
            format_stacks(state.play_stacks),
        )
        for name, hand in zip(game.players, state.hands):
            print("   ", name, "has", format_hand(hand))


def main(args):
    parser = argparse.ArgumentParser(
        description="Replay a hanab.live game export and report convention violations"
    )
    parser.add_argument("game", help="Path to the game export (hanab.live JSON)")
    parser.add_argument(
        "--level",
        type=int,
        choices=[level.value for level in ConventionLevel],
        default=ConventionLevel.ADVANCED.value,
        help="Convention level: 0 basic, 1 beginner, 2 intermediate, 3 advanced",
    )
    parser.add_argument(
        "--states", action="store_true", help="Print every replayed game state"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Narrate the replay and the analysis"
    )
    parsed = parser.parse_args(args)

    out: Any = NullStream()
    if parsed.verbose:
        out = sys.stdout

    game = load_export(parsed.game)
    states = simulate(game.deck, game.players, game.actions, log=out)
    if parsed.states:
        print_states(game, states)

    violations = analyze_game(
        game, states, AnalyzerOptions(ConventionLevel(parsed.level)), log=out
    )
    for violation in violations:
        print(violation)

    summary = create_summary(violations)
    print("total:", summary.total)
    print("by severity:", summary.by_severity)
    print("by type:", summary.by_type)
    print("score:", states[-1].score)
    return 0


def cli():
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
