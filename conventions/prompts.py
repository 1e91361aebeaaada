from typing import override

from utils import format_card, is_playable, known_playable
from violations import ConventionLevel, Severity, Violation, ViolationType

from .base import DISCARDS, PLAYS, CheckContext, Checker
from .deductions import wrong_prompt_clue


class MissedPromptChecker(Checker):
    id = "MissedPrompt"
    level = ConventionLevel.BEGINNER
    action_types = DISCARDS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        state = ctx.state_before
        for card in state.hands[ctx.acting_player_index]:
            if card.deck_index == ctx.action.target:
                continue
            if known_playable(card, state):
                return [
                    ctx.violation(
                        ViolationType.MISSED_PROMPT,
                        Severity.WARNING,
                        f"Discarded but had a playable clued card ({format_card(card)})",
                        card=card,
                    )
                ]
        return []


class WrongPromptChecker(Checker):
    """
    A clued card misplays because a later clue to someone else looked like it
    was prompting it. The giver of that clue should have accounted for the
    clued card that would answer the prompt.
    """

    id = "WrongPrompt"
    level = ConventionLevel.INTERMEDIATE
    action_types = PLAYS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        acted = ctx.acted_card()
        if acted is None:
            return []
        _, card = acted
        if not card.touched or is_playable(card, ctx.state_before):
            return []
        setup = wrong_prompt_clue(ctx, ctx.action_index, card)
        if setup is None:
            return []
        focus = setup.clue.focus
        assert focus is not None
        return [
            ctx.violation(
                ViolationType.WRONG_PROMPT,
                Severity.WARNING,
                f"Wrong prompt: clue to {ctx.name(setup.clue.target)} for {format_card(focus)} "
                f"caused {ctx.acting_player} to play {format_card(card)} as a prompt, "
                "but it was the wrong card. Should have accounted for the existing clued card.",
                player=setup.clue.giver,
                card=card,
            )
        ]
