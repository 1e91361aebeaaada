from collections import Counter
from dataclasses import dataclass
from typing import Final, Sequence

from utils import (
    COUNTS,
    MAX_CLUE_TOKENS,
    MAX_STRIKES,
    NUM_RANKS,
    Action,
    Card,
    HandCard,
    Knowledge,
    NullStream,
    Suit,
    format_card,
    format_hand,
    format_stacks,
    hand_size_for,
)

MAX_PLAYERS: Final[int] = 5
MIN_PLAYERS: Final[int] = 2
DECK_SIZE: Final[int] = len(Suit) * sum(COUNTS)


class MalformedGameError(ValueError):
    """The deck or player list cannot describe a standard game."""


class IllegalActionError(ValueError):
    """An action that cannot be carried out at all, e.g. playing a card not in hand."""

    def __init__(self, action_index: int, message: str) -> None:
        super().__init__(f"Action {action_index}: {message}")
        self.action_index = action_index


@dataclass(frozen=True)
class GameState:
    hands: tuple[tuple[HandCard, ...], ...]
    play_stacks: tuple[int, ...]
    discard_pile: tuple[Card, ...]
    clue_tokens: int
    strikes: int
    turn_number: int
    current_player_index: int
    deck_index: int
    deck_size: int
    deck_exhausted: bool
    turns_left: int | None = None

    @property
    def player_count(self) -> int:
        return len(self.hands)

    @property
    def cards_left(self) -> int:
        return self.deck_size - self.deck_index

    @property
    def score(self) -> int:
        return sum(self.play_stacks)

    @property
    def game_over(self) -> bool:
        return (
            self.strikes >= MAX_STRIKES
            or self.turns_left == 0
            or all(stack == NUM_RANKS for stack in self.play_stacks)
        )

    def locate(self, deck_index: int) -> tuple[int, int] | None:
        """(player, slot) holding the card with this deck index, if it is in a hand."""
        for pnr, hand in enumerate(self.hands):
            for slot, card in enumerate(hand):
                if card.deck_index == deck_index:
                    return pnr, slot
        return None


class Replay:
    """
    Steps through a recorded game one action at a time.

    Mechanical rules only: nothing here judges whether a move was sensible, and
    a log with misplays, empty clue pools or actions after the game ended is
    replayed all the same.
    """

    def __init__(
        self,
        deck: Sequence[Card],
        players: Sequence[str],
        log=NullStream(),
        bonus_clue_on_five: bool = False,
    ) -> None:
        if not (MIN_PLAYERS <= len(players) <= MAX_PLAYERS):
            raise MalformedGameError(
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}"
            )
        self.players = list(players)
        self.deck = _validate_deck(deck, hand_size_for(len(players)) * len(players))
        self.log = log
        self.bonus_clue_on_five = bonus_clue_on_five
        self.hints = MAX_CLUE_TOKENS
        self.hits = 0
        self.current_player = 0
        self.board = [0 for _ in Suit]
        self.trash: list[Card] = []
        self.hands: list[list[Card]] = []
        self.knowledge: list[list[Knowledge]] = []
        self.drawn = 0
        self.turn = 0
        self.turns_left: int | None = None
        self.make_hands()

    def make_hands(self):
        handsize = hand_size_for(len(self.players))
        for i, _ in enumerate(self.players):
            self.hands.append([])
            self.knowledge.append([])
            for _ in range(handsize):
                self.draw_card(i)
        print(
            "Dealt",
            handsize,
            "cards to",
            len(self.players),
            "players,",
            len(self.deck) - self.drawn,
            "left in the deck",
            file=self.log,
        )

    def draw_card(self, pnr=None):
        if pnr is None:
            pnr = self.current_player
        if self.drawn >= len(self.deck):
            return
        self.hands[pnr].append(self.deck[self.drawn])
        self.knowledge[pnr].append(Knowledge())
        self.drawn += 1
        if self.drawn == len(self.deck) and self.turns_left is None:
            # every player, including the one who drew the last card, gets one more turn
            self.turns_left = len(self.players)
            print("The deck is empty, final round begins", file=self.log)

    def snapshot(self) -> GameState:
        return GameState(
            hands=tuple(
                tuple(HandCard(card, k) for card, k in zip(hand, knowledge))
                for hand, knowledge in zip(self.hands, self.knowledge)
            ),
            play_stacks=tuple(self.board),
            discard_pile=tuple(self.trash),
            clue_tokens=self.hints,
            strikes=self.hits,
            turn_number=self.turn,
            current_player_index=self.current_player,
            deck_index=self.drawn,
            deck_size=len(self.deck),
            deck_exhausted=self.drawn >= len(self.deck),
            turns_left=self.turns_left,
        )

    def perform(self, action: Action):
        index = self.turn
        name = self.players[self.current_player]
        if self.turns_left is not None:
            self.turns_left = max(0, self.turns_left - 1)

        if not isinstance(action.action_type, Action.ActionType):
            raise IllegalActionError(index, f"unknown action type {action.action_type!r}")

        if action.is_clue:
            self._validate_clue(index, action)
            self.hints = max(0, self.hints - 1)
            print(
                name,
                "clues",
                self.players[action.target],
                "about all their",
                action.clue_name(),
                "hints remaining:",
                self.hints,
                file=self.log,
            )
            print(
                self.players[action.target],
                "has",
                format_hand(self.hands[action.target]),
                file=self.log,
            )
            hand = self.hands[action.target]
            knowledge = self.knowledge[action.target]
            for i, card in enumerate(hand):
                assert action.value is not None
                if action.action_type == Action.ActionType.COLOR_CLUE:
                    knowledge[i] = knowledge[i].hint_color(
                        action.value, card.suit == action.value
                    )
                else:
                    knowledge[i] = knowledge[i].hint_rank(
                        action.value, card.rank == action.value
                    )
        else:
            slot = self._find_slot(index, action)
            card = self.hands[self.current_player][slot]
            if action.action_type == Action.ActionType.PLAY:
                print(name, "plays", format_card(card), file=self.log)
                if self.board[card.suit] == card.rank - 1:
                    self.board[card.suit] = card.rank
                    if card.rank == NUM_RANKS and self.bonus_clue_on_five:
                        self.hints = min(self.hints + 1, MAX_CLUE_TOKENS)
                    print(
                        "successfully! Board is now",
                        format_stacks(self.board),
                        file=self.log,
                    )
                else:
                    self.trash.append(card)
                    self.hits += 1
                    print(
                        "and fails. Board was",
                        format_stacks(self.board),
                        "strikes:",
                        self.hits,
                        file=self.log,
                    )
            else:
                self.hints = min(self.hints + 1, MAX_CLUE_TOKENS)
                self.trash.append(card)
                print(name, "discards", format_card(card), file=self.log)
                print("trash is now", format_hand(self.trash), file=self.log)
            del self.hands[self.current_player][slot]
            del self.knowledge[self.current_player][slot]
            self.draw_card()
            print(
                name,
                "now has",
                format_hand(self.hands[self.current_player]),
                file=self.log,
            )

        self.turn += 1
        self.current_player = self.turn % len(self.players)

    def _find_slot(self, index: int, action: Action) -> int:
        for slot, card in enumerate(self.hands[self.current_player]):
            if card.deck_index == action.target:
                return slot
        raise IllegalActionError(
            index,
            f"card {action.target} is not in {self.players[self.current_player]}'s hand",
        )

    def _validate_clue(self, index: int, action: Action) -> None:
        if not isinstance(action.target, int) or not (
            0 <= action.target < len(self.players)
        ):
            raise IllegalActionError(index, f"clue target {action.target} is not a player")
        if action.target == self.current_player:
            raise IllegalActionError(index, "players cannot clue themselves")
        if action.action_type == Action.ActionType.COLOR_CLUE:
            valid = action.value is not None and 0 <= action.value < len(Suit)
        else:
            valid = action.value is not None and 1 <= action.value <= NUM_RANKS
        if not valid:
            raise IllegalActionError(index, f"invalid clue value {action.value}")


def _validate_deck(deck: Sequence[Card], min_size: int) -> list[Card]:
    if len(deck) < min_size:
        raise MalformedGameError(
            f"Deck has {len(deck)} cards, {min_size} are needed to deal the opening hands"
        )
    if len(deck) > DECK_SIZE:
        raise MalformedGameError(f"Deck has {len(deck)} cards, at most {DECK_SIZE} exist")
    cards = []
    for i, card in enumerate(deck):
        if not (0 <= card.suit < len(Suit)) or not (1 <= card.rank <= NUM_RANKS):
            raise MalformedGameError(f"Card {i} has no valid suit and rank: {card!r}")
        cards.append(Card(Suit(card.suit), card.rank, i))
    for (suit, rank), count in Counter(card.identity for card in cards).items():
        if count > COUNTS[rank - 1]:
            raise MalformedGameError(
                f"Deck holds {count} copies of {format_card(Card(suit, rank))}, "
                f"only {COUNTS[rank - 1]} exist"
            )
    return cards


def simulate(
    deck: Sequence[Card],
    players: Sequence[str],
    actions: Sequence[Action],
    log=NullStream(),
    bonus_clue_on_five: bool = False,
) -> list[GameState]:
    """
    Replay a game and return the state after the deal followed by the state
    after each action, len(actions) + 1 states in all.
    """
    replay = Replay(deck, players, log=log, bonus_clue_on_five=bonus_clue_on_five)
    states = [replay.snapshot()]
    for action in actions:
        replay.perform(action)
        states.append(replay.snapshot())
    print(
        "Replay done, strikes:",
        replay.hits,
        "score:",
        states[-1].score,
        file=log,
    )
    return states
