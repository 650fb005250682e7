"""Turn-indexed snapshots of a game and the agent's view of that history."""

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from .actions import Action
from .cards import Card
from .errors import ReplayError

Hand = tuple[Optional[Card], ...]


@dataclass(frozen=True)
class Snapshot:
    """Public state after ``order`` actions have been taken.

    ``last_action`` is the action that led from ``order - 1`` to this state.
    A hand the viewer cannot see is ``None``.
    """

    order: int
    current_player: int
    hands: tuple[Optional[Hand], ...]
    fireworks: dict[str, int]
    discard_pile: tuple[Card, ...] = ()
    info_tokens: int = 8
    life_tokens: int = 3
    deck_count: int = 0
    final_round_turns: Optional[int] = None
    is_complete: bool = False
    last_action: Optional[Action] = field(default=None, compare=False)

    @property
    def is_final_round(self) -> bool:
        return self.final_round_turns is not None

    def hidden_from(self, seat: int) -> "Snapshot":
        hands = tuple(None if i == seat else hand for i, hand in enumerate(self.hands))
        return replace(self, hands=hands)


class GameView:
    """One seat's window onto the game history.

    Snapshots are looked up by turn index; the seat's own hand is hidden in
    every one of them.
    """

    def __init__(self, seat: int, players: Sequence[str], snapshots: Sequence[Snapshot]):
        if not snapshots:
            raise ValueError("GameView needs at least one snapshot")
        self.seat = seat
        self.players = tuple(players)
        self._snapshots = {snapshot.order: snapshot.hidden_from(seat) for snapshot in snapshots}
        self._latest = max(self._snapshots)

    @property
    def order(self) -> int:
        return self._latest

    @property
    def current(self) -> Snapshot:
        return self._snapshots[self._latest]

    @property
    def num_players(self) -> int:
        return len(self.players)

    def state_at(self, order: int) -> Snapshot:
        try:
            return self._snapshots[order]
        except KeyError:
            raise ReplayError(f"No snapshot recorded for turn {order}") from None

    def previous_action(self, seat: int, order: Optional[int] = None) -> Optional[Action]:
        """Most recent action ``seat`` took before turn ``order`` (default: now)."""
        if order is None:
            order = self._latest
        for past in range(order, 0, -1):
            snapshot = self._snapshots.get(past)
            if snapshot is None:
                continue
            action = snapshot.last_action
            if action is not None and action.actor == seat:
                return action
        return None
