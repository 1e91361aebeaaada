import random
from dataclasses import dataclass
from enum import Enum, IntEnum, unique
from typing import TYPE_CHECKING, Final, Iterable, Sequence

import numpy as np

if TYPE_CHECKING:
    from game import GameState


COUNTS: Final[list[int]] = [3, 2, 2, 2, 1]
NUM_RANKS: Final[int] = len(COUNTS)
MAX_CLUE_TOKENS: Final[int] = 8
MAX_STRIKES: Final[int] = 3


@unique
class Suit(IntEnum):
    RED = 0
    YELLOW = 1
    GREEN = 2
    BLUE = 3
    PURPLE = 4

    @property
    def display_name(self) -> str:
        return self.name.title()

    @property
    def letter(self) -> str:
        return self.name[0]

    def __str__(self) -> str:
        return str(self.value)


LETTER_TO_SUIT: Final[dict[str, Suit]] = {suit.letter: suit for suit in Suit}


class Action:
    @unique
    class ActionType(Enum):
        # numbering follows the hanab.live export format
        PLAY = 0
        DISCARD = 1
        COLOR_CLUE = 2
        RANK_CLUE = 3

        @property
        def display_name(self) -> str:
            return self.name.replace("_", " ").title()

        @property
        def is_clue(self) -> bool:
            return self in (Action.ActionType.COLOR_CLUE, Action.ActionType.RANK_CLUE)

        def __str__(self) -> str:
            return str(self.value)

    action_type: ActionType

    def __init__(
        self,
        action_type: ActionType,
        target: int,
        value: int | None = None,
    ) -> None:
        self.action_type = action_type
        self.target = target  # deck index for play/discard, player index for clues
        self.value = value

    @classmethod
    def play(cls, deck_index: int) -> "Action":
        return cls(cls.ActionType.PLAY, deck_index)

    @classmethod
    def discard(cls, deck_index: int) -> "Action":
        return cls(cls.ActionType.DISCARD, deck_index)

    @classmethod
    def color_clue(cls, pnr: int, suit: int) -> "Action":
        return cls(cls.ActionType.COLOR_CLUE, pnr, int(suit))

    @classmethod
    def rank_clue(cls, pnr: int, rank: int) -> "Action":
        return cls(cls.ActionType.RANK_CLUE, pnr, rank)

    @property
    def is_clue(self) -> bool:
        return isinstance(self.action_type, Action.ActionType) and self.action_type.is_clue

    def clue_name(self) -> str:
        """Human readable clue value, e.g. "Red" or "5"."""
        if self.action_type == Action.ActionType.COLOR_CLUE:
            assert self.value is not None
            return Suit(self.value).display_name
        return str(self.value)

    def __str__(self):
        if self.action_type == Action.ActionType.COLOR_CLUE:
            return (
                "clues player "
                + str(self.target)
                + " about all their "
                + self.clue_name()
                + " cards"
            )
        if self.action_type == Action.ActionType.RANK_CLUE:
            return "clues player " + str(self.target) + " about all their " + str(self.value)
        if self.action_type == Action.ActionType.PLAY:
            return "plays card " + str(self.target)
        return "discards card " + str(self.target)

    def __repr__(self):
        return f"Action({self.action_type.name}, target={self.target}, value={self.value})"

    def __eq__(self, other):
        if not isinstance(other, Action):
            return NotImplemented
        return (self.action_type, self.target, self.value) == (
            other.action_type,
            other.target,
            other.value,
        )

    def __hash__(self):
        return hash((self.action_type, self.target, self.value))


@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: int
    deck_index: int = -1

    @property
    def identity(self) -> tuple[Suit, int]:
        return self.suit, self.rank

    def __str__(self) -> str:
        return format_card(self)


def _frozen(values: Iterable[bool]) -> np.ndarray:
    array = np.array(values, dtype=bool)
    array.setflags(write=False)
    return array


class Knowledge:
    """
    What a card's holder has been told about it.

    `clued_colors` / `clued_ranks` record positive touches and are never cleared.
    `possible_colors` / `possible_ranks` record what the holder can still believe,
    narrowed by touching clues and by negative information from clues that missed.
    The holder's identity matrix is the outer product of the two possible axes.
    """

    __slots__ = ("clued_colors", "clued_ranks", "possible_colors", "possible_ranks")

    def __init__(
        self,
        clued_colors: Iterable[bool] | None = None,
        clued_ranks: Iterable[bool] | None = None,
        possible_colors: Iterable[bool] | None = None,
        possible_ranks: Iterable[bool] | None = None,
    ) -> None:
        self.clued_colors = _frozen(
            [False] * len(Suit) if clued_colors is None else clued_colors
        )
        self.clued_ranks = _frozen(
            [False] * NUM_RANKS if clued_ranks is None else clued_ranks
        )
        self.possible_colors = _frozen(
            [True] * len(Suit) if possible_colors is None else possible_colors
        )
        self.possible_ranks = _frozen(
            [True] * NUM_RANKS if possible_ranks is None else possible_ranks
        )

    def hint_color(self, color: int, truth: bool) -> "Knowledge":
        clued = self.clued_colors.copy()
        if truth:
            clued[color] = True
            possible = np.zeros(len(Suit), dtype=bool)
            possible[color] = True
        else:
            possible = self.possible_colors.copy()
            possible[color] = False
        return Knowledge(clued, self.clued_ranks, possible, self.possible_ranks)

    def hint_rank(self, rank: int, truth: bool) -> "Knowledge":
        clued = self.clued_ranks.copy()
        if truth:
            clued[rank - 1] = True
            possible = np.zeros(NUM_RANKS, dtype=bool)
            possible[rank - 1] = True
        else:
            possible = self.possible_ranks.copy()
            possible[rank - 1] = False
        return Knowledge(self.clued_colors, clued, self.possible_colors, possible)

    @property
    def touched(self) -> bool:
        return bool(self.clued_colors.any() or self.clued_ranks.any())

    @property
    def color_clued(self) -> bool:
        return bool(self.clued_colors.any())

    @property
    def rank_clued(self) -> bool:
        return bool(self.clued_ranks.any())

    def possible(self) -> np.ndarray:
        return np.outer(self.possible_colors, self.possible_ranks)

    def get_possible(self) -> list[tuple[Suit, int]]:
        """
        Get all the possible identities for a card given the current knowledge.
        """
        colors, ranks = np.nonzero(self.possible())
        return [(Suit(int(c)), int(r) + 1) for c, r in zip(colors, ranks)]

    def is_fully_known(self) -> bool:
        return (
            int(self.possible_colors.sum()) == 1 and int(self.possible_ranks.sum()) == 1
        )

    def __eq__(self, other):
        if not isinstance(other, Knowledge):
            return NotImplemented
        return all(
            np.array_equal(getattr(self, name), getattr(other, name))
            for name in self.__slots__
        )

    def __hash__(self):
        return hash(tuple(getattr(self, name).tobytes() for name in self.__slots__))

    def __repr__(self):
        return (
            f"Knowledge(clued_colors={self.clued_colors.tolist()}, "
            f"clued_ranks={self.clued_ranks.tolist()})"
        )


@dataclass(frozen=True)
class HandCard:
    card: Card
    knowledge: Knowledge

    @property
    def suit(self) -> Suit:
        return self.card.suit

    @property
    def rank(self) -> int:
        return self.card.rank

    @property
    def deck_index(self) -> int:
        return self.card.deck_index

    @property
    def touched(self) -> bool:
        return self.knowledge.touched

    def __str__(self) -> str:
        return format_card(self.card)


type Hand = Sequence[HandCard]


def make_deck(shuffle: bool = True) -> list[Card]:
    deck = []
    for suit in Suit:
        for num, cnt in enumerate(COUNTS):
            for _ in range(cnt):
                deck.append((suit, num + 1))
    if shuffle:
        random.shuffle(deck)
    return [Card(suit, rank, i) for i, (suit, rank) in enumerate(deck)]


def parse_card(notation: str, deck_index: int = -1) -> Card:
    """
    Parse short card notation such as "R1" or "p5".
    """
    notation = notation.strip().upper()
    if len(notation) != 2 or notation[0] not in LETTER_TO_SUIT or not notation[1].isdigit():
        raise ValueError(f"Invalid card notation: {notation!r}")
    rank = int(notation[1])
    if not 1 <= rank <= NUM_RANKS:
        raise ValueError(f"Invalid card rank in {notation!r}")
    return Card(LETTER_TO_SUIT[notation[0]], rank, deck_index)


def parse_deck(notation: str) -> list[Card]:
    """
    Parse a comma separated deck such as "R1,R2,Y1" in deck order.
    """
    cards = [part for part in notation.split(",") if part.strip()]
    return [parse_card(card, i) for i, card in enumerate(cards)]


def format_card(card: Card | HandCard) -> str:
    return card.suit.display_name + " " + str(card.rank)


def format_hand(hand: Iterable[Card | HandCard]) -> str:
    return ", ".join(map(format_card, hand))


def format_stacks(play_stacks: Sequence[int]) -> str:
    return ", ".join(
        suit.display_name + " " + str(rank) for suit, rank in zip(Suit, play_stacks)
    )


def format_knowledge(knowledge: Knowledge) -> str:
    return ", ".join(format_card(Card(col, num)) for col, num in knowledge.get_possible())


def hand_size_for(player_count: int) -> int:
    return 5 if player_count < 4 else 4


def chop_index(hand: Hand) -> int | None:
    """
    Index of the oldest card with no clue on it, or None when every card is clued.
    """
    for i, card in enumerate(hand):
        if not card.touched:
            return i
    return None


def finesse_position_index(hand: Hand) -> int | None:
    """
    Index of the newest card with no clue on it, or None when every card is clued.
    """
    for i in range(len(hand) - 1, -1, -1):
        if not hand[i].touched:
            return i
    return None


def touched_indices(hand: Hand, action: Action) -> list[int]:
    if action.action_type == Action.ActionType.COLOR_CLUE:
        return [i for i, card in enumerate(hand) if card.suit == action.value]
    if action.action_type == Action.ActionType.RANK_CLUE:
        return [i for i, card in enumerate(hand) if card.rank == action.value]
    return []


def focus_index(hand: Hand, touched: Sequence[int], chop: int | None) -> int | None:
    """
    Which touched card carries the meaning of a clue.

    The chop wins if it was touched. Otherwise the leftmost card that had no
    clue before, and for a pure re-touch the leftmost touched card.
    """
    if not touched:
        return None
    if chop is not None and chop in touched:
        return chop
    fresh = [i for i in touched if not hand[i].touched]
    if fresh:
        return min(fresh)
    return min(touched)


def copies_discarded(suit: int, rank: int, discard_pile: Iterable[Card]) -> int:
    return sum(1 for card in discard_pile if card.suit == suit and card.rank == rank)


def highest_playable_cards(
    play_stacks: Sequence[int], discard_pile: Sequence[Card]
) -> dict[Suit, int]:
    """
    Identifies "dead" suits. A suit is dead past some rank when all copies of a
    card it still needs have been discarded.

    Returns a mapping of suits to the highest rank that can still be played,
    given the current discard pile.
    """
    highest = {}
    for suit in Suit:
        highest[suit] = NUM_RANKS
        for nr in range(play_stacks[suit] + 1, NUM_RANKS + 1):
            if copies_discarded(suit, nr, discard_pile) == COUNTS[nr - 1]:
                highest[suit] = nr - 1
                break
    return highest


def is_playable(card: Card | HandCard, state: "GameState") -> bool:
    return state.play_stacks[card.suit] == card.rank - 1


def is_suit_dead(suit: int, state: "GameState") -> bool:
    """
    True when the suit can never advance again: every copy of the next rank it
    needs is in the discard pile.
    """
    stack = state.play_stacks[suit]
    if stack >= NUM_RANKS:
        return False
    return copies_discarded(suit, stack + 1, state.discard_pile) == COUNTS[stack]


def is_dead(card: Card | HandCard, state: "GameState") -> bool:
    """True when a lower rank of the card's suit is gone for good."""
    highest = highest_playable_cards(state.play_stacks, state.discard_pile)
    return card.rank > highest[card.suit] and card.rank > state.play_stacks[card.suit]


def is_trash(card: Card | HandCard, state: "GameState") -> bool:
    return state.play_stacks[card.suit] >= card.rank or is_dead(card, state)


def is_critical(card: Card | HandCard, state: "GameState") -> bool:
    """
    True when this is the last copy of a card that is still needed.
    """
    if is_trash(card, state):
        return False
    remaining = COUNTS[card.rank - 1] - copies_discarded(
        card.suit, card.rank, state.discard_pile
    )
    return remaining <= 1


def visible_copies(
    card: Card | HandCard,
    state: "GameState",
    observer: int,
    exclude_deck_index: int | None = None,
) -> int:
    """
    Count copies of the card's identity in every hand the observer can see.
    """
    count = 0
    for pnr, hand in enumerate(state.hands):
        if pnr == observer:
            continue
        for other in hand:
            if other.deck_index == exclude_deck_index:
                continue
            if other.suit == card.suit and other.rank == card.rank:
                count += 1
    return count


def known_playable(card: HandCard, state: "GameState") -> bool:
    """
    Whether the holder can tell from their clues alone that the card is playable.

    Either every identity left in their knowledge is playable, or the card is
    color clued and really is the next card of that suit.
    """
    if not card.touched or not is_playable(card, state):
        return False
    if all(
        state.play_stacks[col] == num - 1 for col, num in card.knowledge.get_possible()
    ):
        return True
    return card.knowledge.color_clued


def clued_copies(
    suit: int, rank: int, state: "GameState", skip: Iterable[int] = ()
) -> list[tuple[int, HandCard]]:
    """(player, card) for every clued copy of an identity in the players' hands."""
    skipped = set(skip)
    found = []
    for pnr, hand in enumerate(state.hands):
        if pnr in skipped:
            continue
        for other in hand:
            if other.touched and other.suit == suit and other.rank == rank:
                found.append((pnr, other))
    return found


class NullStream:
    def write(self, _):
        pass

    def flush(self):
        pass

    def writelines(self, _):
        pass
