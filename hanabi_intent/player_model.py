import logging
from typing import Optional, Sequence

import numpy as np

from .belief import CardBelief
from .cards import Card, card_to_str
from .hints import Hint

logger = logging.getLogger(__name__)


class PlayerModel:
    """What the agent knows about one seat, its own seat included.

    ``potential`` counts the cards this player could still be holding from
    their own point of view: unplayed cards they have not seen anywhere.
    Trust fields are only written by the action interpreter.
    """

    def __init__(
        self,
        seat: int,
        name: str,
        potential: np.ndarray,
        hand_size: int,
        hand: Optional[Sequence[Optional[Card]]] = None,
        initial_intent: float = 0.5,
    ):
        self.seat = seat
        self.name = name
        # None for the agent's own seat
        self.hand: Optional[list[Optional[Card]]] = list(hand) if hand is not None else None
        self.potential = np.array(potential, dtype=np.int64, copy=True)
        self.beliefs: list[Optional[CardBelief]] = [CardBelief(self.potential) for _ in range(hand_size)]
        self.trustworthy = True
        self.intent = initial_intent
        self.hints: list[Hint] = []

    def observe_card(self, card: Card) -> None:
        """This player has seen ``card`` somewhere other than their own hand.

        Call exactly once per observer per physical card.
        """
        if self.potential[card] > 0:
            self.potential[card] -= 1
        else:
            logger.warning("Player %s potential already empty for %s", self.seat, card_to_str(card))
        for belief in self.beliefs:
            if belief is not None:
                belief.remove(*card)

    def replace_slot(self, slot: int, drawn: bool = True) -> None:
        """The card at ``slot`` left the hand; start over for whatever replaced it."""
        self.beliefs[slot] = CardBelief(self.potential) if drawn else None
        narrowed = [hint.without_slot(slot) if slot in hint.positions else hint for hint in self.hints]
        self.hints = [hint for hint in narrowed if hint.positions]

    def record_hint(self, hint: Hint) -> None:
        self.hints.append(hint)

    def hints_on_slot(self, slot: int) -> list[Hint]:
        return [hint for hint in self.hints if slot in hint.positions]

    def live_slots(self) -> list[int]:
        return [slot for slot, belief in enumerate(self.beliefs) if belief is not None]

    def __repr__(self) -> str:
        return f"PlayerModel(seat={self.seat}, name={self.name!r}, trustworthy={self.trustworthy}, intent={self.intent:.3f})"
