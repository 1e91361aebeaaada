"""
Readings of earlier clues that more than one convention depends on.

Every function here is a pure query over the replayed history. Checkers that
need the same reading call the same function instead of asking each other.
"""

from dataclasses import dataclass

from utils import (
    NUM_RANKS,
    Action,
    HandCard,
    Suit,
    chop_index,
    clued_copies,
    finesse_position_index,
    focus_index,
    is_playable,
    known_playable,
    touched_indices,
)
from violations import ConventionLevel

from .base import CheckContext


@dataclass(frozen=True)
class ClueRecord:
    index: int
    giver: int
    target: int
    action: Action
    touched: tuple[HandCard, ...]
    fresh: tuple[HandCard, ...]
    focus: HandCard | None
    focus_on_chop: bool

    def touches(self, deck_index: int) -> bool:
        return any(card.deck_index == deck_index for card in self.touched)

    @property
    def focus_is_fresh(self) -> bool:
        return self.focus is not None and any(
            card.deck_index == self.focus.deck_index for card in self.fresh
        )


def clue_record(ctx: CheckContext, index: int) -> ClueRecord | None:
    action = ctx.game.actions[index]
    if not action.is_clue:
        return None
    hand = ctx.states[index].hands[action.target]
    slots = touched_indices(hand, action)
    chop = chop_index(hand)
    focus = focus_index(hand, slots, chop)
    return ClueRecord(
        index=index,
        giver=ctx.actor_of(index),
        target=action.target,
        action=action,
        touched=tuple(hand[i] for i in slots),
        fresh=tuple(hand[i] for i in slots if not hand[i].touched),
        focus=None if focus is None else hand[focus],
        focus_on_chop=focus is not None and focus == chop,
    )


def last_clue_touching(
    ctx: CheckContext, pnr: int, deck_index: int, before: int
) -> ClueRecord | None:
    for i in range(before - 1, -1, -1):
        action = ctx.game.actions[i]
        if action.is_clue and action.target == pnr:
            record = clue_record(ctx, i)
            if record is not None and record.touches(deck_index):
                return record
    return None


def struck(ctx: CheckContext, index: int) -> bool:
    return ctx.states[index + 1].strikes > ctx.states[index].strikes


def deduction_floor(ctx: CheckContext, until: int) -> int:
    """
    First action index whose clues may still be read for finesses and prompts.

    From the intermediate level on, a strike wipes what was deduced from the
    clues given before it; the clue marks themselves stay.
    """
    if ctx.level < ConventionLevel.INTERMEDIATE:
        return 0
    for i in range(until - 1, -1, -1):
        if struck(ctx, i):
            return i + 1
    return 0


def players_between(giver: int, target: int, player_count: int) -> list[int]:
    """Players who act after the giver and before the target, in turn order."""
    between = []
    pnr = (giver + 1) % player_count
    while pnr != target and pnr != giver:
        between.append(pnr)
        pnr = (pnr + 1) % player_count
    return between


@dataclass(frozen=True)
class FinesseSetup:
    clue: ClueRecord
    suit: Suit
    needed_rank: int
    prompted: bool
    finesse_player: int | None
    finesse_card: HandCard | None

    @property
    def valid(self) -> bool:
        return not self.prompted and self.finesse_player is not None


def one_away_setup(ctx: CheckContext, index: int) -> FinesseSetup | None:
    """
    Read a clue whose focus is one card away from playable.

    The connecting card can come from a clued copy somewhere (a prompt) or
    from the first player between giver and target who holds it in finesse
    position.
    """
    record = clue_record(ctx, index)
    if record is None or record.focus is None or not record.focus_is_fresh:
        return None
    state = ctx.states[index]
    focus = record.focus
    needed = state.play_stacks[focus.suit] + 1
    if focus.rank != needed + 1:
        return None

    prompted = bool(clued_copies(focus.suit, needed, state, skip=[record.giver]))
    finesse_player = None
    finesse_card = None
    for pnr in players_between(record.giver, record.target, ctx.player_count):
        hand = state.hands[pnr]
        slot = finesse_position_index(hand)
        if slot is None:
            continue
        candidate = hand[slot]
        if candidate.suit == focus.suit and candidate.rank == needed:
            finesse_player = pnr
            finesse_card = candidate
            break
    return FinesseSetup(
        clue=record,
        suit=focus.suit,
        needed_rank=needed,
        prompted=prompted,
        finesse_player=finesse_player,
        finesse_card=finesse_card,
    )


def blind_play(ctx: CheckContext, index: int) -> HandCard | None:
    """The card played at this index if it was an unclued card from finesse position."""
    action = ctx.game.actions[index]
    if action.action_type != Action.ActionType.PLAY:
        return None
    hand = ctx.states[index].hands[ctx.actor_of(index)]
    slot = finesse_position_index(hand)
    if slot is None or hand[slot].deck_index != action.target:
        return None
    return hand[slot]


def is_bluff(ctx: CheckContext, index: int) -> bool:
    """
    A one-away clue answered by the very next player blind-playing some other
    card that happened to be playable.
    """
    if ctx.level < ConventionLevel.INTERMEDIATE:
        return False
    setup = one_away_setup(ctx, index)
    if setup is None or setup.prompted:
        return False
    responder = (setup.clue.giver + 1) % ctx.player_count
    if responder == setup.clue.target or index + 1 >= len(ctx.game.actions):
        return False
    card = blind_play(ctx, index + 1)
    if card is None:
        return False
    if card.suit == setup.suit and card.rank == setup.needed_rank:
        return False
    return is_playable(card, ctx.states[index + 1])


def forced_discard(ctx: CheckContext, index: int) -> bool:
    """A discard at 0 clue tokens by a player with nothing known to be playable."""
    state = ctx.states[index]
    hand = state.hands[ctx.actor_of(index)]
    return state.clue_tokens == 0 and not any(
        known_playable(card, state) for card in hand
    )


def early_game_over(ctx: CheckContext, before: int) -> bool:
    """The Early Game ends with the first chop discard that was not forced."""
    for i in range(before):
        action = ctx.game.actions[i]
        if action.action_type != Action.ActionType.DISCARD:
            continue
        hand = ctx.states[i].hands[ctx.actor_of(i)]
        chop = chop_index(hand)
        if chop is not None and hand[chop].deck_index == action.target:
            if not forced_discard(ctx, i):
                return True
    return False


def five_clue_off_chop(ctx: CheckContext, index: int) -> ClueRecord | None:
    """A 5 clue whose new focus is an unplayable 5 away from chop."""
    record = clue_record(ctx, index)
    if record is None or record.action.action_type != Action.ActionType.RANK_CLUE:
        return None
    if record.action.value != NUM_RANKS or not record.focus_is_fresh:
        return None
    if record.focus_on_chop or is_playable(record.focus, ctx.states[index]):
        return None
    return record


def is_five_stall(ctx: CheckContext, index: int) -> bool:
    if ctx.level < ConventionLevel.INTERMEDIATE:
        return False
    record = five_clue_off_chop(ctx, index)
    if record is None:
        return False
    giver_hand = ctx.states[index].hands[record.giver]
    locked = chop_index(giver_hand) is None
    return locked or not early_game_over(ctx, index)


def wrong_prompt_clue(
    ctx: CheckContext, misplay_index: int, card: HandCard
) -> FinesseSetup | None:
    """
    The clue that made a player misplay a clued card as if it were a prompt.

    Looks for a one-away clue to someone else since the player's last turn,
    after the card's own clue, that passed through the player while the card
    was their oldest clued card that could be the connecting card.
    """
    pnr = ctx.actor_of(misplay_index)
    own_clue = last_clue_touching(ctx, pnr, card.deck_index, misplay_index)
    start = max(
        deduction_floor(ctx, misplay_index),
        misplay_index - ctx.player_count + 1,
        0 if own_clue is None else own_clue.index + 1,
    )
    for i in range(misplay_index - 1, start - 1, -1):
        setup = one_away_setup(ctx, i)
        if setup is None or setup.clue.target == pnr:
            continue
        if pnr not in players_between(setup.clue.giver, setup.clue.target, ctx.player_count):
            continue
        if card.suit == setup.suit and card.rank == setup.needed_rank:
            continue
        hand = ctx.states[i].hands[pnr]
        candidates = [
            other
            for other in hand
            if other.touched
            and (setup.suit, setup.needed_rank) in other.knowledge.get_possible()
        ]
        if candidates and candidates[0].deck_index == card.deck_index:
            return setup
    return None
