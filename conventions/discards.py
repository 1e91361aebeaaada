from typing import override

from utils import (
    Action,
    chop_index,
    clued_copies,
    format_card,
    is_playable,
    is_trash,
    known_playable,
)
from violations import ConventionLevel, Severity, Violation, ViolationType

from .base import DISCARDS, CheckContext, Checker


class DoubleDiscardAvoidanceChecker(Checker):
    """
    After a teammate discards an unknown chop card, the next player should not
    discard their own chop too if they had anything else to do.
    """

    id = "DoubleDiscardAvoidance"
    level = ConventionLevel.INTERMEDIATE
    action_types = DISCARDS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        i = ctx.action_index
        if i == 0:
            return []
        previous = ctx.game.actions[i - 1]
        if previous.action_type != Action.ActionType.DISCARD:
            return []
        previous_player = ctx.actor_of(i - 1)
        previous_hand = ctx.states[i - 1].hands[previous_player]
        previous_chop = chop_index(previous_hand)
        if previous_chop is None or previous_hand[previous_chop].deck_index != previous.target:
            return []
        if is_trash(previous_hand[previous_chop], ctx.states[i - 1]):
            return []

        state = ctx.state_before
        hand = state.hands[ctx.acting_player_index]
        chop = chop_index(hand)
        if chop is None or hand[chop].deck_index != ctx.action.target:
            return []
        if is_trash(hand[chop], state):
            return []
        if state.clue_tokens == 0 and not any(known_playable(card, state) for card in hand):
            return []
        return [
            ctx.violation(
                ViolationType.DOUBLE_DISCARD_AVOIDANCE,
                Severity.WARNING,
                f"Discarded {format_card(hand[chop])} from chop after "
                f"{ctx.name(previous_player)} discarded from chop - should avoid double discard",
                card=hand[chop],
            )
        ]


class SarcasticDiscardChecker(Checker):
    id = "SarcasticDiscard"
    level = ConventionLevel.ADVANCED
    action_types = DISCARDS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        state = ctx.state_before
        actor = ctx.acting_player_index
        acted = ctx.acted_card()
        if acted is None:
            return []
        _, discarded = acted
        for card in state.hands[actor]:
            if card.deck_index == discarded.deck_index:
                continue
            if not card.touched or not card.knowledge.is_fully_known():
                continue
            if is_playable(card, state) or is_trash(card, state):
                continue
            if card.suit == discarded.suit and card.rank == discarded.rank:
                continue
            copies = clued_copies(card.suit, card.rank, state, skip=[actor])
            if not copies:
                continue
            owner, _ = copies[0]
            return [
                ctx.violation(
                    ViolationType.SARCASTIC_DISCARD,
                    Severity.WARNING,
                    f"Should have sarcastic-discarded {format_card(card)} "
                    f"(duplicate of clued card in {ctx.name(owner)}'s hand)",
                    card=card,
                )
            ]
        return []


class InformationLockChecker(Checker):
    id = "InformationLock"
    level = ConventionLevel.ADVANCED
    action_types = DISCARDS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        acted = ctx.acted_card()
        if acted is None:
            return []
        _, card = acted
        if not card.touched or not card.knowledge.is_fully_known():
            return []
        if not is_playable(card, ctx.state_before):
            return []
        return [
            ctx.violation(
                ViolationType.INFORMATION_LOCK,
                Severity.WARNING,
                f"Discarded fully known {format_card(card)} which was playable "
                "- locked information should be acted on",
                card=card,
            )
        ]
