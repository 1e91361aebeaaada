from typing import override

from utils import MAX_CLUE_TOKENS, NUM_RANKS, format_card, is_critical, is_playable
from violations import ConventionLevel, Severity, Violation, ViolationType

from .base import CLUES, DISCARDS, PLAYS, CheckContext, Checker


class MisplayChecker(Checker):
    id = "Misplay"
    level = ConventionLevel.BASIC
    action_types = PLAYS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        acted = ctx.acted_card()
        if acted is None:
            return []
        _, card = acted
        if is_playable(card, ctx.state_before):
            return []
        stack = ctx.state_before.play_stacks[card.suit]
        return [
            ctx.violation(
                ViolationType.MISPLAY,
                Severity.CRITICAL,
                f"Played {format_card(card)} but {card.suit.display_name} {stack} "
                f"was on the stack (needed {stack + 1})",
                card=card,
            )
        ]


class BadDiscard5Checker(Checker):
    id = "BadDiscard5"
    level = ConventionLevel.BASIC
    action_types = DISCARDS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        acted = ctx.acted_card()
        if acted is None:
            return []
        _, card = acted
        if card.rank != NUM_RANKS or ctx.state_before.play_stacks[card.suit] == NUM_RANKS:
            return []
        return [
            ctx.violation(
                ViolationType.BAD_DISCARD_5,
                Severity.CRITICAL,
                f"Discarded {card.suit.display_name} 5 - fives are always critical!",
                card=card,
            )
        ]


class BadDiscardCriticalChecker(Checker):
    id = "BadDiscardCritical"
    level = ConventionLevel.BASIC
    action_types = DISCARDS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        acted = ctx.acted_card()
        if acted is None:
            return []
        _, card = acted
        # fives have their own checker
        if card.rank == NUM_RANKS or not is_critical(card, ctx.state_before):
            return []
        return [
            ctx.violation(
                ViolationType.BAD_DISCARD_CRITICAL,
                Severity.CRITICAL,
                f"Discarded {format_card(card)} - it was the last copy!",
                card=card,
            )
        ]


class IllegalDiscardChecker(Checker):
    id = "IllegalDiscard"
    level = ConventionLevel.BASIC
    action_types = DISCARDS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        if ctx.state_before.clue_tokens < MAX_CLUE_TOKENS:
            return []
        return [
            ctx.violation(
                ViolationType.ILLEGAL_DISCARD,
                Severity.CRITICAL,
                f"Discarded at {MAX_CLUE_TOKENS} clue tokens - must clue or play instead",
            )
        ]


class IllegalClueChecker(Checker):
    id = "IllegalClue"
    level = ConventionLevel.BASIC
    action_types = CLUES

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        if ctx.state_before.clue_tokens > 0:
            return []
        return [
            ctx.violation(
                ViolationType.ILLEGAL_CLUE,
                Severity.CRITICAL,
                f"Clue ({ctx.action.clue_name()}) given with no clue tokens left",
            )
        ]
