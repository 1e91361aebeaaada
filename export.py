import json
import os
from dataclasses import dataclass, field
from typing import Any, Final, Mapping

from game import MalformedGameError
from utils import Action, Card, Suit

STANDARD_VARIANT: Final[str] = "No Variant"

ACTION_TYPE_TO_INDEX = {
    "play": 0,
    "discard": 1,
    "color-clue": 2,
    "rank-clue": 3,
    "end-game": 4,
}


class UnsupportedVariantError(ValueError):
    """Only the standard five suit game can be replayed."""


@dataclass
class GameExport:
    """A recorded game as exported by hanab.live."""

    players: list[str]
    deck: list[Card]
    actions: list[Action]
    id: int | None = None
    options: dict[str, Any] = field(default_factory=lambda: {"variant": STANDARD_VARIANT})

    @property
    def variant(self) -> str:
        return self.options.get("variant", STANDARD_VARIANT)

    def to_json(self) -> dict[str, Any]:
        actions = []
        for action in self.actions:
            entry = {"type": action.action_type.value, "target": action.target}
            if action.value is not None:
                entry["value"] = action.value
            actions.append(entry)
        return {
            "id": self.id,
            "players": list(self.players),
            "deck": [{"suitIndex": int(c.suit), "rank": c.rank} for c in self.deck],
            "actions": actions,
            "options": dict(self.options),
        }


def parse_export(data: Mapping[str, Any]) -> GameExport:
    """Build a GameExport from the hanab.live JSON structure.

    @parameters:
    - data: the decoded JSON object, with "players", "deck" and "actions" keys

    @returns: the game, with the trailing end-game marker dropped from the actions
    """
    try:
        players = [str(name) for name in data["players"]]
        raw_deck = data["deck"]
        raw_actions = data["actions"]
    except KeyError as e:
        raise MalformedGameError(f"Game export is missing the {e.args[0]!r} field") from e

    options = dict(data.get("options") or {})
    variant = options.setdefault("variant", STANDARD_VARIANT)
    if variant != STANDARD_VARIANT:
        raise UnsupportedVariantError(f"Variant {variant!r} is not supported")

    deck = []
    for i, entry in enumerate(raw_deck):
        try:
            deck.append(Card(Suit(int(entry["suitIndex"])), int(entry["rank"]), i))
        except (KeyError, ValueError, TypeError) as e:
            raise MalformedGameError(f"Deck entry {i} is not a card: {entry!r}") from e

    actions = []
    for i, entry in enumerate(raw_actions):
        try:
            type_index = int(entry["type"])
            target = int(entry["target"])
            value = entry.get("value")
        except (KeyError, ValueError, TypeError) as e:
            raise MalformedGameError(f"Action {i} is not an action: {entry!r}") from e
        if type_index == ACTION_TYPE_TO_INDEX["end-game"]:
            continue
        try:
            action_type = Action.ActionType(type_index)
        except ValueError as e:
            raise MalformedGameError(f"Action {i} has unknown type {type_index}") from e
        if action_type.is_clue:
            actions.append(Action(action_type, target, None if value is None else int(value)))
        else:
            actions.append(Action(action_type, target))

    return GameExport(
        players=players,
        deck=deck,
        actions=actions,
        id=data.get("id"),
        options=options,
    )


def load_export(path: str) -> GameExport:
    assert os.path.isfile(path), f"{path} does not exist. Please provide a valid path."
    with open(path, "r") as f:
        return parse_export(json.load(f))


def dump_export(game: GameExport, path: str) -> None:
    with open(path, "w") as f:
        json.dump(game.to_json(), f)
