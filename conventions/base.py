from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Sequence

from game import GameState
from utils import Action, Card, HandCard
from violations import ConventionLevel, Severity, Violation, ViolationType

if TYPE_CHECKING:
    from export import GameExport

PLAYS: frozenset[Action.ActionType] = frozenset({Action.ActionType.PLAY})
DISCARDS: frozenset[Action.ActionType] = frozenset({Action.ActionType.DISCARD})
CLUES: frozenset[Action.ActionType] = frozenset(
    {Action.ActionType.COLOR_CLUE, Action.ActionType.RANK_CLUE}
)
ALL_ACTIONS: frozenset[Action.ActionType] = frozenset(Action.ActionType)


@dataclass(frozen=True)
class CheckContext:
    """
    Everything a checker may look at for one action: the game, every state the
    replay produced, and which action is under review.
    """

    game: "GameExport"
    states: Sequence[GameState]
    action_index: int
    level: ConventionLevel

    @property
    def action(self) -> Action:
        return self.game.actions[self.action_index]

    @property
    def state_before(self) -> GameState:
        return self.states[self.action_index]

    @property
    def state_after(self) -> GameState:
        return self.states[self.action_index + 1]

    @property
    def turn(self) -> int:
        return self.action_index + 1

    @property
    def player_count(self) -> int:
        return len(self.game.players)

    @property
    def acting_player_index(self) -> int:
        return self.actor_of(self.action_index)

    @property
    def acting_player(self) -> str:
        return self.game.players[self.acting_player_index]

    def actor_of(self, action_index: int) -> int:
        return action_index % self.player_count

    def name(self, pnr: int) -> str:
        return self.game.players[pnr]

    def acted_card(self) -> tuple[int, HandCard] | None:
        """(slot, card) the acting player plays or discards, taken from the state before."""
        if self.action.is_clue:
            return None
        hand = self.state_before.hands[self.acting_player_index]
        for slot, card in enumerate(hand):
            if card.deck_index == self.action.target:
                return slot, card
        return None

    def next_action_of(self, pnr: int, after: int) -> int | None:
        """Index of the first action by a player strictly after the given index."""
        for i in range(after + 1, len(self.game.actions)):
            if self.actor_of(i) == pnr:
                return i
        return None

    def previous_action_of(self, pnr: int, before: int) -> int | None:
        for i in range(before - 1, -1, -1):
            if self.actor_of(i) == pnr:
                return i
        return None

    def violation(
        self,
        violation_type: ViolationType,
        severity: Severity,
        description: str,
        player: int | None = None,
        card: Card | HandCard | None = None,
    ) -> Violation:
        if isinstance(card, HandCard):
            card = card.card
        pnr = self.acting_player_index if player is None else player
        return Violation(
            type=violation_type,
            severity=severity,
            turn=self.turn,
            player=self.name(pnr),
            description=description,
            card=card,
        )


class Checker:
    """
    One convention. Subclasses override `check` and return the violations they
    find for the action under review; they never mutate the context and never
    look at what other checkers reported.
    """

    id: ClassVar[str] = "Checker"
    level: ClassVar[ConventionLevel] = ConventionLevel.BASIC
    action_types: ClassVar[frozenset[Action.ActionType]] = ALL_ACTIONS

    def applies_to(self, action: Action) -> bool:
        return action.action_type in self.action_types

    def check(self, ctx: CheckContext) -> list[Violation]:
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(level={self.level.name})"
