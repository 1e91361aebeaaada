import io

import pytest

from game import (
    DECK_SIZE,
    IllegalActionError,
    MalformedGameError,
    simulate,
)
from utils import Action, Card, Suit, parse_deck

SAVE_DECK = "R1,R2,Y1,B1,G1,R5,Y2,B2,G2,P1,R3,Y3"


def conserved(state) -> int:
    return (
        sum(state.play_stacks)
        + len(state.discard_pile)
        + sum(len(hand) for hand in state.hands)
        + state.cards_left
    )


def test_deal_gives_each_player_a_block_of_cards():
    states = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], [])
    start = states[0]

    assert [str(card) for card in start.hands[0]] == [
        "Red 1",
        "Red 2",
        "Yellow 1",
        "Blue 1",
        "Green 1",
    ]
    assert [card.deck_index for card in start.hands[1]] == [5, 6, 7, 8, 9]
    assert start.clue_tokens == 8
    assert start.strikes == 0
    assert start.deck_index == 10
    assert start.cards_left == 2
    assert start.current_player_index == 0
    assert not start.deck_exhausted


def test_four_players_get_four_cards():
    deck = parse_deck("R1,R1,R1,Y1,Y1,Y1,B1,B1,B1,G1,G1,G1,P1,P1,P1,R2")
    states = simulate(deck, ["Alice", "Bob", "Cathy", "Donald"], [])

    assert [len(hand) for hand in states[0].hands] == [4, 4, 4, 4]


def test_state_count_and_conservation(careless_game):
    game = careless_game(7, 3)
    states = simulate(game.deck, game.players, game.actions)

    assert len(states) == len(game.actions) + 1
    for state in states:
        assert conserved(state) == DECK_SIZE
        assert 0 <= state.clue_tokens <= 8


def test_turns_rotate():
    actions = [Action.rank_clue(1, 1), Action.rank_clue(2, 1), Action.rank_clue(0, 1)]
    deck = parse_deck("R1,R1,R1,Y1,Y1,Y1,B1,B1,B1,G1,G1,G1,P1,P1,P1")
    states = simulate(deck, ["Alice", "Bob", "Cathy"], actions)

    assert [s.current_player_index for s in states] == [0, 1, 2, 0]
    assert [s.turn_number for s in states] == [0, 1, 2, 3]


def test_successful_play_advances_stack_and_draws():
    states = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], [Action.play(0)])
    after = states[1]

    assert after.play_stacks[Suit.RED] == 1
    assert after.strikes == 0
    assert after.discard_pile == ()
    assert after.hands[0][-1].deck_index == 10
    assert len(after.hands[0]) == 5


def test_misplay_adds_strike_and_discards():
    states = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], [Action.play(1)])
    after = states[1]

    assert after.play_stacks[Suit.RED] == 0
    assert after.strikes == 1
    assert after.discard_pile == (Card(Suit.RED, 2, 1),)
    assert after.clue_tokens == 8


def test_discard_gives_back_a_clue_token_up_to_eight():
    actions = [Action.rank_clue(1, 5), Action.discard(5), Action.discard(0)]
    states = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], actions)

    assert [s.clue_tokens for s in states] == [8, 7, 8, 8]
    assert len(states[-1].discard_pile) == 2


def test_clue_marks_touched_cards_and_narrows_the_rest():
    states = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], [Action.rank_clue(1, 2)])
    hand = states[1].hands[1]

    touched = [card for card in hand if card.touched]
    assert [str(card) for card in touched] == ["Yellow 2", "Blue 2", "Green 2"]
    for card in touched:
        assert card.knowledge.possible_ranks.tolist() == [False, True, False, False, False]
    for card in hand:
        if not card.touched:
            assert not card.knowledge.possible_ranks[1]
            assert card.knowledge.possible_ranks[0]
    assert states[1].clue_tokens == 7


def test_color_and_rank_clues_make_a_card_fully_known():
    actions = [Action.color_clue(1, Suit.RED), Action.rank_clue(0, 1), Action.rank_clue(1, 5)]
    states = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], actions)
    red_five = states[-1].hands[1][0]

    assert red_five.knowledge.is_fully_known()
    assert red_five.knowledge.get_possible() == [(Suit.RED, 5)]


def test_clue_tokens_never_go_below_zero():
    actions = [Action.rank_clue((i + 1) % 2, 1) for i in range(10)]
    states = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], actions)

    assert [s.clue_tokens for s in states][-3:] == [0, 0, 0]


def test_bonus_clue_on_five_is_off_by_default():
    deck = parse_deck("R1,R2,R3,R4,R5,Y1,Y2,Y3,Y4,Y5,B1")
    actions = [
        Action.rank_clue(1, 1),
        Action.rank_clue(0, 1),
        Action.play(0),
        Action.rank_clue(0, 2),
        Action.play(1),
        Action.rank_clue(0, 3),
        Action.play(2),
        Action.rank_clue(0, 4),
        Action.play(3),
        Action.rank_clue(0, 5),
        Action.play(4),
    ]
    plain = simulate(deck, ["Alice", "Bob"], actions)
    bonus = simulate(deck, ["Alice", "Bob"], actions, bonus_clue_on_five=True)

    assert plain[-1].play_stacks[Suit.RED] == 5
    assert plain[-1].clue_tokens == plain[-2].clue_tokens
    assert bonus[-1].clue_tokens == bonus[-2].clue_tokens + 1


def test_final_round_counts_down_after_last_draw():
    deck = parse_deck("R1,R2,Y1,B1,G1,R3,Y2,B2,G2,P1,B3")
    actions = [Action.discard(0), Action.discard(5), Action.discard(1), Action.discard(6)]
    states = simulate(deck, ["Alice", "Bob"], actions)

    assert states[0].turns_left is None
    assert states[1].deck_exhausted
    assert states[1].turns_left == 2
    assert states[2].turns_left == 1
    assert states[3].turns_left == 0
    assert states[3].game_over
    # the replay keeps going past the end of the game
    assert len(states) == 5
    assert len(states[4].hands[1]) == 3


def test_three_strikes_end_the_game_without_stopping_the_replay():
    deck = parse_deck("R2,R3,R4,Y2,Y3,B2,B3,B4,G2,G3,R1")
    actions = [Action.play(0), Action.play(5), Action.play(1), Action.play(6)]
    states = simulate(deck, ["Alice", "Bob"], actions)

    assert states[3].strikes == 3
    assert states[3].game_over
    assert states[4].strikes == 4


def test_log_narrates_moves():
    log = io.StringIO()
    simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], [Action.play(1)], log=log)

    assert "Alice plays Red 2" in log.getvalue()
    assert "and fails" in log.getvalue()


def test_states_are_not_shared_between_turns():
    states = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], [Action.rank_clue(1, 5)])

    assert not states[0].hands[1][0].touched
    assert states[1].hands[1][0].touched
    with pytest.raises(ValueError):
        states[1].hands[1][0].knowledge.clued_ranks[0] = True


@pytest.mark.parametrize(
    "action, index",
    [
        (Action.play(7), 0),
        (Action.discard(42), 0),
        (Action.rank_clue(0, 1), 0),
        (Action.rank_clue(2, 1), 0),
        (Action.rank_clue(1, 6), 0),
        (Action.color_clue(1, 5), 0),
    ],
)
def test_structurally_impossible_actions_are_rejected(action, index):
    with pytest.raises(IllegalActionError) as e:
        simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], [action])

    assert e.value.action_index == index


def test_error_names_the_offending_action():
    actions = [Action.rank_clue(1, 5), Action.play(0)]
    with pytest.raises(IllegalActionError) as e:
        simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], actions)

    assert e.value.action_index == 1
    assert "Action 1" in str(e.value)


def test_unknown_action_type_is_rejected():
    with pytest.raises(IllegalActionError):
        simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], [Action("shout", 1)])


@pytest.mark.parametrize(
    "deck, players",
    [
        (SAVE_DECK, ["Alice"]),
        (SAVE_DECK, ["A", "B", "C", "D", "E", "F"]),
        ("R1,R2,Y1", ["Alice", "Bob"]),
        ("R5,R5,Y1,B1,G1,R3,Y2,B2,G2,P1", ["Alice", "Bob"]),
    ],
)
def test_malformed_games_are_rejected(deck, players):
    with pytest.raises(MalformedGameError):
        simulate(parse_deck(deck), players, [])


def test_deterministic():
    actions = [Action.rank_clue(1, 2), Action.play(5), Action.discard(1)]
    first = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], actions)
    second = simulate(parse_deck(SAVE_DECK), ["Alice", "Bob"], actions)

    assert first == second
