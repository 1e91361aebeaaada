from typing import override

from utils import (
    HandCard,
    clued_copies,
    format_card,
    is_playable,
    is_trash,
    touched_indices,
)
from violations import ConventionLevel, Severity, Violation, ViolationType

from .base import PLAYS, CheckContext, Checker


def clued_misplay(ctx: CheckContext) -> HandCard | None:
    """The clued card misplayed by the acting player, if that is what happened."""
    acted = ctx.acted_card()
    if acted is None:
        return None
    _, card = acted
    if not card.touched or is_playable(card, ctx.state_before):
        return None
    return card


class FixClueChecker(Checker):
    """
    The player before a misplay spent their turn on some other clue while a
    clued card that could never play was about to be played.
    """

    id = "FixClue"
    level = ConventionLevel.ADVANCED
    action_types = PLAYS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        i = ctx.action_index
        card = clued_misplay(ctx)
        if card is None or i == 0:
            return []
        previous = ctx.game.actions[i - 1]
        if not previous.is_clue or ctx.states[i - 1].clue_tokens == 0:
            return []
        actor = ctx.acting_player_index
        giver = ctx.actor_of(i - 1)
        state = ctx.states[i - 1]
        if previous.target == actor:
            hand = state.hands[actor]
            if any(hand[s].deck_index == card.deck_index for s in touched_indices(hand, previous)):
                return []

        if state.play_stacks[card.suit] >= card.rank:
            reason = "it was already played"
        elif is_trash(card, state):
            reason = "it can never be played"
        else:
            others = [
                other
                for _, other in clued_copies(card.suit, card.rank, state, skip=[giver])
                if other.deck_index != card.deck_index
            ]
            if not others:
                return []
            reason = "it duplicates another clued card"
        return [
            ctx.violation(
                ViolationType.FIX_CLUE,
                Severity.WARNING,
                f"Could have given fix clue to prevent {ctx.acting_player}'s misplay "
                f"of {format_card(card)} ({reason})",
                player=giver,
                card=card,
            )
        ]


class MisplayCostChecker(Checker):
    """
    The player before a misplay played or discarded with a clue token in hand
    when one clue would have stopped it.
    """

    id = "MisplayCost"
    level = ConventionLevel.ADVANCED
    action_types = PLAYS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        i = ctx.action_index
        card = clued_misplay(ctx)
        if card is None or i == 0:
            return []
        if ctx.game.actions[i - 1].is_clue or ctx.states[i - 1].clue_tokens == 0:
            return []
        return [
            ctx.violation(
                ViolationType.MISPLAY_COST,
                Severity.WARNING,
                f"Could have spent 1 clue to prevent {ctx.acting_player}'s misplay "
                f"of {format_card(card)}",
                player=ctx.actor_of(i - 1),
                card=card,
            )
        ]


class WrongOnesOrderChecker(Checker):
    """Several 1s clued together are played oldest first."""

    id = "WrongOnesOrder"
    level = ConventionLevel.ADVANCED
    action_types = PLAYS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        acted = ctx.acted_card()
        if acted is None:
            return []
        slot, card = acted
        state = ctx.state_before
        if not self._clued_one(card) or not is_playable(card, state):
            return []
        hand = state.hands[ctx.acting_player_index]
        for older in range(slot):
            other = hand[older]
            if self._clued_one(other) and is_playable(other, state):
                return [
                    ctx.violation(
                        ViolationType.WRONG_ONES_ORDER,
                        Severity.WARNING,
                        f"Played {format_card(card)} from slot {slot + 1} but should play "
                        f"oldest clued 1 from slot {older + 1} first",
                        card=card,
                    )
                ]
        return []

    @staticmethod
    def _clued_one(card: HandCard) -> bool:
        return card.rank == 1 and bool(card.knowledge.clued_ranks[0])
