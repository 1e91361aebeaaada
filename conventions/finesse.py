from typing import override

from utils import Action, format_card, is_playable, touched_indices
from violations import ConventionLevel, Severity, Violation, ViolationType

from .base import ALL_ACTIONS, CLUES, PLAYS, CheckContext, Checker
from .deductions import (
    FinesseSetup,
    blind_play,
    deduction_floor,
    is_bluff,
    is_five_stall,
    last_clue_touching,
    one_away_setup,
    players_between,
    wrong_prompt_clue,
)


def recent_setups(ctx: CheckContext, pnr: int):
    """
    One-away clues given since the player's previous turn, newest first,
    skipping anything a strike has wiped since.
    """
    previous = ctx.previous_action_of(pnr, ctx.action_index)
    start = max(
        -1 if previous is None else previous,
        deduction_floor(ctx, ctx.action_index) - 1,
    )
    for i in range(ctx.action_index - 1, start, -1):
        setup = one_away_setup(ctx, i)
        if setup is not None:
            yield setup


class MissedFinesseChecker(Checker):
    """
    A one-away clue is answered by a finesse: the first player between giver
    and target with the connecting card in finesse position must blind-play it
    on their next turn.
    """

    id = "MissedFinesse"
    level = ConventionLevel.BEGINNER
    action_types = ALL_ACTIONS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        if ctx.action.action_type == Action.ActionType.PLAY:
            return []
        actor = ctx.acting_player_index
        for setup in recent_setups(ctx, actor):
            if not setup.valid or setup.finesse_player != actor:
                continue
            if ctx.state_before.play_stacks[setup.suit] >= setup.needed_rank:
                continue
            if is_bluff(ctx, setup.clue.index):
                continue
            return [
                ctx.violation(
                    ViolationType.MISSED_FINESSE,
                    Severity.INFO,
                    f"Possible finesse for {setup.suit.display_name} {setup.needed_rank} "
                    "was set up but not followed",
                    card=setup.finesse_card,
                )
            ]
        return []


class BrokenFinesseChecker(Checker):
    """
    A player answers a one-away clue by blind-playing from finesse position,
    but nobody held the connecting card there: the clue giver set up a
    finesse that could not work.
    """

    id = "BrokenFinesse"
    level = ConventionLevel.BEGINNER
    action_types = PLAYS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        card = blind_play(ctx, ctx.action_index)
        if card is None or is_playable(card, ctx.state_before):
            return []
        actor = ctx.acting_player_index
        for setup in recent_setups(ctx, actor):
            if actor not in players_between(
                setup.clue.giver, setup.clue.target, ctx.player_count
            ):
                continue
            if setup.prompted or setup.finesse_player is not None:
                continue
            return [
                ctx.violation(
                    ViolationType.BROKEN_FINESSE,
                    Severity.WARNING,
                    f"{ctx.acting_player} blind-played {format_card(card)} from finesse "
                    f"position but needed {setup.suit.display_name} {setup.needed_rank}",
                    player=setup.clue.giver,
                    card=card,
                )
            ]
        return []


class StompedFinesseChecker(Checker):
    id = "StompedFinesse"
    level = ConventionLevel.INTERMEDIATE
    action_types = CLUES

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        target = ctx.action.target
        hand = ctx.state_before.hands[target]
        touched = {hand[i].deck_index for i in touched_indices(hand, ctx.action)}
        start = max(
            deduction_floor(ctx, ctx.action_index),
            ctx.action_index - ctx.player_count + 1,
        )
        for i in range(ctx.action_index - 1, start - 1, -1):
            setup = one_away_setup(ctx, i)
            if setup is None or not self._pending_on(ctx, setup, target):
                continue
            assert setup.finesse_card is not None
            if setup.finesse_card.deck_index not in touched:
                continue
            return [
                ctx.violation(
                    ViolationType.STOMPED_FINESSE,
                    Severity.WARNING,
                    f"Stomped on finesse: directly clued {setup.suit.display_name} "
                    f"{setup.needed_rank} in {ctx.name(target)}'s hand that was set up "
                    f"for blind play on turn {setup.clue.index + 1}",
                    card=setup.finesse_card,
                )
            ]
        return []

    @staticmethod
    def _pending_on(ctx: CheckContext, setup: FinesseSetup, pnr: int) -> bool:
        if not setup.valid or setup.finesse_player != pnr:
            return False
        answered = ctx.next_action_of(pnr, setup.clue.index)
        return answered is None or answered >= ctx.action_index


class BadPlayClueChecker(Checker):
    """
    A clued card misplays and nothing but the clue itself can explain why the
    player thought it was playable, so the clue giver takes the blame.
    """

    id = "BadPlayClue"
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
        actor = ctx.acting_player_index
        clue = last_clue_touching(ctx, actor, card.deck_index, ctx.action_index)
        if clue is None or clue.index < deduction_floor(ctx, ctx.action_index):
            return []
        if clue.focus is None or clue.focus.deck_index != card.deck_index:
            return []
        # a chop focus is a save clue, misreading it is on the player
        if clue.focus_on_chop or is_playable(card, ctx.states[clue.index]):
            return []
        setup = one_away_setup(ctx, clue.index)
        if setup is not None and (setup.valid or setup.prompted):
            return []
        if is_five_stall(ctx, clue.index) or is_bluff(ctx, clue.index):
            return []
        if wrong_prompt_clue(ctx, ctx.action_index, card) is not None:
            return []
        needed = ctx.state_before.play_stacks[card.suit] + 1
        return [
            ctx.violation(
                ViolationType.BAD_PLAY_CLUE,
                Severity.CRITICAL,
                f"Clue ({clue.action.clue_name()}) to {ctx.acting_player} caused misplay "
                f"of {format_card(card)} (needed {needed})",
                player=clue.giver,
                card=card,
            )
        ]
