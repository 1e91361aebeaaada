from typing import override

from utils import (
    NUM_RANKS,
    Action,
    HandCard,
    chop_index,
    format_card,
    is_playable,
    is_trash,
    touched_indices,
)
from violations import ConventionLevel, Severity, Violation, ViolationType

from .base import CLUES, CheckContext, Checker
from .deductions import early_game_over, five_clue_off_chop


class MCVPChecker(Checker):
    """
    Minimum clue value: every clue must touch at least one new card.

    From the intermediate level a re-touch of a card that is playable right now
    is a tempo clue and is allowed.
    """

    id = "MCVP"
    level = ConventionLevel.BEGINNER
    action_types = CLUES

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        action = ctx.action
        hand = ctx.state_before.hands[action.target]
        touched = [hand[i] for i in touched_indices(hand, action)]
        if any(not card.touched for card in touched):
            return []
        if ctx.level >= ConventionLevel.INTERMEDIATE and any(
            is_playable(card, ctx.state_before) for card in touched
        ):
            return []
        if touched:
            description = (
                f"Clue ({action.clue_name()}) only touched already-clued cards "
                "- no new information given"
            )
        else:
            description = f"Clue ({action.clue_name()}) touched no cards - no new information given"
        return [ctx.violation(ViolationType.MCVP, Severity.WARNING, description)]


def _resolved_harmlessly(ctx: CheckContext, fresh: HandCard, other: HandCard) -> bool:
    """
    Whether a duplicate touch ended up costing nothing: the newly clued copy was
    played cleanly, or the copy that was clued first got thrown away.
    """
    for i in range(ctx.action_index + 1, len(ctx.game.actions)):
        action = ctx.game.actions[i]
        if action.is_clue:
            continue
        if action.target == fresh.deck_index:
            return action.action_type == Action.ActionType.PLAY and is_playable(
                fresh, ctx.states[i]
            )
        if action.target == other.deck_index:
            return action.action_type == Action.ActionType.DISCARD
    return False


class GoodTouchChecker(Checker):
    id = "GoodTouch"
    level = ConventionLevel.BEGINNER
    action_types = CLUES

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        action = ctx.action
        state = ctx.state_before
        target = action.target
        giver = ctx.acting_player_index
        hand = state.hands[target]
        touched = [hand[i] for i in touched_indices(hand, action)]
        violations = []
        seen: dict[tuple, HandCard] = {}
        for card in hand:
            if card.touched:
                seen.setdefault((card.suit, card.rank), card)

        for card in touched:
            if card.touched:
                continue

            if state.play_stacks[card.suit] >= card.rank:
                # a color clue cannot avoid the cards of a finished suit
                complete = state.play_stacks[card.suit] == NUM_RANKS
                if not (complete and action.action_type == Action.ActionType.COLOR_CLUE):
                    violations.append(
                        ctx.violation(
                            ViolationType.GOOD_TOUCH,
                            Severity.WARNING,
                            f"Clue touched {format_card(card)} which is already played (trash card)",
                            card=card,
                        )
                    )
                continue

            if is_trash(card, state):
                violations.append(
                    ctx.violation(
                        ViolationType.GOOD_TOUCH,
                        Severity.WARNING,
                        f"Clue touched {format_card(card)} which can never be played (suit is dead)",
                        card=card,
                    )
                )
                continue

            duplicate, owner = self._clued_elsewhere(state, card, target, giver)
            if duplicate is not None and not _resolved_harmlessly(ctx, card, duplicate):
                violations.append(
                    ctx.violation(
                        ViolationType.GOOD_TOUCH,
                        Severity.WARNING,
                        f"Clue touched {format_card(card)} which duplicates "
                        f"a clued card in {ctx.name(owner)}'s hand",
                        card=card,
                    )
                )
                continue

            earlier = seen.get((card.suit, card.rank))
            if earlier is not None and not _resolved_harmlessly(ctx, card, earlier):
                violations.append(
                    ctx.violation(
                        ViolationType.GOOD_TOUCH,
                        Severity.WARNING,
                        f"Clue touched duplicate {format_card(card)} in same hand",
                        card=card,
                    )
                )
            seen.setdefault((card.suit, card.rank), card)

        return violations

    @staticmethod
    def _clued_elsewhere(state, card, target, giver) -> tuple[HandCard | None, int]:
        for pnr, other_hand in enumerate(state.hands):
            # the giver cannot see their own hand
            if pnr in (target, giver):
                continue
            for other in other_hand:
                if other.touched and other.suit == card.suit and other.rank == card.rank:
                    return other, pnr
        return None, -1


class FiveStallChecker(Checker):
    """
    An off-chop 5 clue is a stall in the Early Game or from a locked hand.
    Anywhere else it wastes a clue on a card that was never in danger.
    """

    id = "FiveStall"
    level = ConventionLevel.INTERMEDIATE
    action_types = CLUES

    @override
    def check(self, ctx: CheckContext) -> list[Violation]:
        record = five_clue_off_chop(ctx, ctx.action_index)
        if record is None:
            return []
        giver_hand = ctx.state_before.hands[record.giver]
        if chop_index(giver_hand) is None or not early_game_over(ctx, ctx.action_index):
            return []
        assert record.focus is not None
        return [
            ctx.violation(
                ViolationType.FIVE_STALL,
                Severity.WARNING,
                f"Clued 5 to {ctx.name(record.target)}'s {format_card(record.focus)} "
                "(off-chop, not playable) outside of the Early Game "
                "- 5 Stall is only valid in the Early Game",
                card=record.focus,
            )
        ]
