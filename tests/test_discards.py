from utils import Action, Suit
from violations import ConventionLevel, ViolationType


def of_type(violations, violation_type):
    return [v for v in violations if v.type == violation_type]


# Alice: Y4 R2 Y1 B1 G1 / Bob: B4 Y2 B2 G2 P1
DOUBLE_DISCARD_DECK = "Y4,R2,Y1,B1,G1,B4,Y2,B2,G2,P1,R3,Y3"
DOUBLE_DISCARD_ACTIONS = [
    Action.rank_clue(1, 2),
    Action.rank_clue(0, 1),
    Action.discard(0),
    Action.discard(5),
]


def test_second_chop_discard_in_a_row(play_game):
    _, _, violations = play_game(DOUBLE_DISCARD_DECK, ["Alice", "Bob"], DOUBLE_DISCARD_ACTIONS)

    dda = of_type(violations, ViolationType.DOUBLE_DISCARD_AVOIDANCE)
    assert len(dda) == 1
    assert dda[0].turn == 4
    assert dda[0].player == "Bob"
    assert dda[0].description == (
        "Discarded Blue 4 from chop after Alice discarded from chop - should avoid double discard"
    )


def test_double_discard_avoidance_is_an_intermediate_convention(play_game):
    _, _, violations = play_game(
        DOUBLE_DISCARD_DECK,
        ["Alice", "Bob"],
        DOUBLE_DISCARD_ACTIONS,
        level=ConventionLevel.BEGINNER,
    )

    assert of_type(violations, ViolationType.DOUBLE_DISCARD_AVOIDANCE) == []


def test_clue_instead_of_the_second_discard(play_game):
    actions = DOUBLE_DISCARD_ACTIONS[:3] + [Action.rank_clue(0, 3)]
    _, _, violations = play_game(DOUBLE_DISCARD_DECK, ["Alice", "Bob"], actions)

    assert of_type(violations, ViolationType.DOUBLE_DISCARD_AVOIDANCE) == []


# Alice: R1 G1 P1 B1 Y1 / Bob: B4 Y3 G4 P4 R4 / Cathy: Y3 B2 G2 P2 R2
SARCASTIC_DECK = "R1,G1,P1,B1,Y1,B4,Y3,G4,P4,R4,Y3,B2,G2,P2,R2,R3,B3"
SARCASTIC_ACTIONS = [
    Action.color_clue(1, Suit.YELLOW),
    Action.rank_clue(2, 3),
    Action.rank_clue(1, 3),
    Action.play(0),
    Action.discard(5),
]


def test_keeping_a_known_duplicate_instead_of_discarding_it(play_game):
    _, states, violations = play_game(
        SARCASTIC_DECK, ["Alice", "Bob", "Cathy"], SARCASTIC_ACTIONS
    )

    assert states[4].hands[1][1].knowledge.is_fully_known()
    sarcastic = of_type(violations, ViolationType.SARCASTIC_DISCARD)
    assert len(sarcastic) == 1
    assert sarcastic[0].turn == 5
    assert sarcastic[0].player == "Bob"
    assert sarcastic[0].description == (
        "Should have sarcastic-discarded Yellow 3 (duplicate of clued card in Cathy's hand)"
    )


def test_discarding_the_known_duplicate(play_game):
    actions = SARCASTIC_ACTIONS[:4] + [Action.discard(6)]
    _, _, violations = play_game(SARCASTIC_DECK, ["Alice", "Bob", "Cathy"], actions)

    assert of_type(violations, ViolationType.SARCASTIC_DISCARD) == []


def test_sarcastic_discard_is_an_advanced_convention(play_game):
    _, _, violations = play_game(
        SARCASTIC_DECK,
        ["Alice", "Bob", "Cathy"],
        SARCASTIC_ACTIONS,
        level=ConventionLevel.INTERMEDIATE,
    )

    assert of_type(violations, ViolationType.SARCASTIC_DISCARD) == []


# Alice: R1 Y1 B1 G1 P1 / Bob: Y2 B2 G2 P2 R3
LOCK_DECK = "R1,Y1,B1,G1,P1,Y2,B2,G2,P2,R3,Y3"
LOCK_ACTIONS = [
    Action.rank_clue(1, 2),
    Action.color_clue(0, Suit.RED),
    Action.rank_clue(1, 3),
    Action.rank_clue(0, 1),
    Action.discard(0),
]


def test_discarding_a_fully_known_playable_card(play_game):
    _, _, violations = play_game(LOCK_DECK, ["Alice", "Bob"], LOCK_ACTIONS)

    lock = of_type(violations, ViolationType.INFORMATION_LOCK)
    assert len(lock) == 1
    assert lock[0].turn == 5
    assert lock[0].player == "Alice"
    assert lock[0].description == (
        "Discarded fully known Red 1 which was playable - locked information should be acted on"
    )


def test_information_lock_is_an_advanced_convention(play_game):
    _, _, violations = play_game(
        LOCK_DECK, ["Alice", "Bob"], LOCK_ACTIONS, level=ConventionLevel.INTERMEDIATE
    )

    assert of_type(violations, ViolationType.INFORMATION_LOCK) == []
