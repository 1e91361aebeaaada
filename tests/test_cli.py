from export import GameExport, dump_export
from hanabi import main
from utils import Action, parse_deck


def write_game(tmp_path, deck, actions):
    game = GameExport(players=["Alice", "Bob"], deck=parse_deck(deck), actions=actions)
    path = tmp_path / "game.json"
    dump_export(game, str(path))
    return str(path)


def test_report(tmp_path, capsys):
    path = write_game(tmp_path, "R1,R2,Y1,B1,G1,R3,Y2,B2,G2,P1", [Action.discard(0)])

    assert main([path, "--level", "0"]) == 0
    out = capsys.readouterr().out
    assert (
        "Turn 1 [critical] IllegalDiscard (Alice): "
        "Discarded at 8 clue tokens - must clue or play instead"
    ) in out
    assert "total: 1" in out
    assert "score: 0" in out


def test_states_and_narration(tmp_path, capsys):
    path = write_game(tmp_path, "R1,R2,Y1,B1,G1,R3,Y2,B2,G2,P1", [Action.play(0)])

    assert main([path, "--states", "--verbose"]) == 0
    out = capsys.readouterr().out
    assert "Alice plays Red 1" in out
    assert "Turn 1: clues 8 strikes 0 | board: Red 1, Yellow 0" in out
    assert "Bob has Red 3, Yellow 2, Blue 2, Green 2, Purple 1" in out
    assert "score: 1" in out
