from typing import override

from game import GameState
from utils import (
    NUM_RANKS,
    Action,
    HandCard,
    chop_index,
    format_card,
    is_critical,
    is_playable,
    touched_indices,
    visible_copies,
)
from violations import ConventionLevel, Severity, Violation, ViolationType

from .base import DISCARDS, PLAYS, CheckContext, Checker
from .deductions import last_clue_touching


def save_reason(card: HandCard, state: GameState, observer: int) -> str | None:
    """Why a chop card must be saved, as seen by the observer, or None."""
    stack = state.play_stacks[card.suit]
    if card.rank == NUM_RANKS and stack < NUM_RANKS:
        return "it's a 5"
    if is_critical(card, state):
        return "it's critical (last copy)"
    if card.rank == 2 and stack < 2:
        if visible_copies(card, state, observer, exclude_deck_index=card.deck_index) == 0:
            return "it's a 2 with no other copies visible"
    return None


class MissedSaveChecker(Checker):
    """
    A teammate's chop holds a card that has to be saved and the acting player
    plays or discards instead of spending a clue on it.

    Only the first player in turn order who could have saved the card is
    blamed, and nobody is blamed if another teammate saves it before its owner
    gets to act.
    """

    id = "MissedSave"
    level = ConventionLevel.BEGINNER
    action_types = PLAYS | DISCARDS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        if not self._could_save(ctx, ctx.action_index):
            return []
        actor = ctx.acting_player_index
        state = ctx.state_before
        violations = []
        for offset in range(1, ctx.player_count):
            owner = (actor + offset) % ctx.player_count
            chop = chop_index(state.hands[owner])
            if chop is None:
                continue
            card = state.hands[owner][chop]
            reason = save_reason(card, state, actor)
            if reason is None:
                continue
            if self._missed_earlier(ctx, owner, card) or self._saved_later(ctx, owner, card):
                continue
            verb = "Played" if ctx.action.action_type == Action.ActionType.PLAY else "Discarded"
            violations.append(
                ctx.violation(
                    ViolationType.MISSED_SAVE,
                    Severity.WARNING,
                    f"{verb} instead of saving {ctx.name(owner)}'s {format_card(card)} "
                    f"on chop ({reason})",
                    card=card,
                )
            )
        return violations

    @staticmethod
    def _could_save(ctx: CheckContext, index: int) -> bool:
        """A play or discard of an unclued card while a clue token was available."""
        action = ctx.game.actions[index]
        state = ctx.states[index]
        if action.is_clue or state.clue_tokens == 0:
            return False
        for card in state.hands[ctx.actor_of(index)]:
            if card.deck_index == action.target:
                return not card.touched
        return False

    def _missed_earlier(self, ctx: CheckContext, owner: int, card: HandCard) -> bool:
        last_owner_turn = ctx.previous_action_of(owner, ctx.action_index)
        start = -1 if last_owner_turn is None else last_owner_turn
        for i in range(ctx.action_index - 1, start, -1):
            state = ctx.states[i]
            chop = chop_index(state.hands[owner])
            if chop is None or state.hands[owner][chop].deck_index != card.deck_index:
                continue
            if not self._could_save(ctx, i):
                continue
            if save_reason(state.hands[owner][chop], state, ctx.actor_of(i)) is not None:
                return True
        return False

    @staticmethod
    def _saved_later(ctx: CheckContext, owner: int, card: HandCard) -> bool:
        owner_turn = ctx.next_action_of(owner, ctx.action_index)
        end = len(ctx.game.actions) if owner_turn is None else owner_turn
        for i in range(ctx.action_index + 1, end):
            action = ctx.game.actions[i]
            if action.is_clue and action.target == owner:
                hand = ctx.states[i].hands[owner]
                if any(hand[slot].deck_index == card.deck_index for slot in touched_indices(hand, action)):
                    return True
        return False


class MisreadSaveChecker(Checker):
    """
    A clued card misplays although it sat on chop when it was clued: the
    player read a save clue as a play clue.
    """

    id = "MisreadSave"
    level = ConventionLevel.BEGINNER
    action_types = PLAYS

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        acted = ctx.acted_card()
        if acted is None:
            return []
        _, card = acted
        if not card.touched or is_playable(card, ctx.state_before):
            return []
        clue = last_clue_touching(ctx, ctx.acting_player_index, card.deck_index, ctx.action_index)
        if clue is None or not clue.focus_on_chop or clue.focus is None:
            return []
        if clue.focus.deck_index != card.deck_index:
            return []
        if is_playable(card, ctx.states[clue.index]):
            return []
        needed = ctx.state_before.play_stacks[card.suit] + 1
        return [
            ctx.violation(
                ViolationType.MISREAD_SAVE,
                Severity.WARNING,
                f"Misread save clue as play clue: played {format_card(card)} "
                f"but it was on chop when clued (needed {needed})",
                card=card,
            )
        ]
