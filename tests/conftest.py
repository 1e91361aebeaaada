import random

import pytest

from analyzer import review
from export import GameExport
from game import Replay
from utils import Action, make_deck, parse_deck
from violations import ConventionLevel


@pytest.fixture
def play_game():
    """
    Replay a game given in deck notation and analyze it.

    Returns (game, states, violations).
    """

    def _play_game(deck, players, actions, level=ConventionLevel.ADVANCED):
        game = GameExport(players=list(players), deck=parse_deck(deck), actions=list(actions))
        states, violations = review(game, level)
        return game, states, violations

    return _play_game


def random_game(seed: int, player_count: int, max_actions: int = 80) -> GameExport:
    """
    A full game of legal but careless moves: blind plays, random discards and
    random clues, so it is full of strikes and runs the deck out.
    """
    rng = random.Random(seed)
    random.seed(seed)
    players = ["Alice", "Bob", "Cathy", "Donald", "Emily"][:player_count]
    deck = make_deck()
    replay = Replay(deck, players)
    actions = []
    while len(actions) < max_actions:
        pnr = replay.current_player
        hand = replay.hands[pnr]
        others = [p for p in range(player_count) if p != pnr]
        roll = rng.random()
        if hand and roll < 0.35:
            action = Action.play(rng.choice(hand).deck_index)
        elif hand and roll < 0.7:
            action = Action.discard(rng.choice(hand).deck_index)
        elif rng.random() < 0.5:
            action = Action.color_clue(rng.choice(others), rng.randrange(5))
        else:
            action = Action.rank_clue(rng.choice(others), rng.randrange(1, 6))
        replay.perform(action)
        actions.append(action)
    return GameExport(players=players, deck=deck, actions=actions)


@pytest.fixture
def careless_game():
    return random_game
