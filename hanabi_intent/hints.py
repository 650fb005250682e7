"""Hint records and the playable/useless/ambiguous classification of hints."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

import numpy as np

from .actions import ColorHint, HintAction
from .cards import Card, is_dead, is_playable
from .config import AgentConfig


class HintKind(Enum):
    COLOR = "color"
    RANK = "rank"


class HintQuality(Enum):
    PLAYABLE = "playable"
    USELESS = "useless"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class Hint:
    kind: HintKind
    value: int
    positions: frozenset[int]
    hinter: int
    recipient: int

    @classmethod
    def from_action(cls, action: HintAction) -> "Hint":
        if isinstance(action, ColorHint):
            return cls(HintKind.COLOR, action.color, action.positions, action.actor, action.target)
        return cls(HintKind.RANK, action.rank, action.positions, action.actor, action.target)

    def matches(self, card: Card) -> bool:
        color_idx, rank_idx = card
        if self.kind is HintKind.COLOR:
            return color_idx == self.value
        return rank_idx == self.value

    def without_slot(self, slot: int) -> "Hint":
        """The same hint once the card at ``slot`` has left the hand."""
        return replace(self, positions=self.positions - {slot})


def classify_hint(cards: Iterable[Card], board: np.ndarray, available: np.ndarray) -> HintQuality:
    """Judge what a hint on ``cards`` tells its recipient to do.

    PLAYABLE if every card is the next one on its firework, USELESS if every
    card can never be played, AMBIGUOUS otherwise.
    """
    cards = list(cards)
    if cards and all(is_playable(card, board) for card in cards):
        return HintQuality.PLAYABLE
    if cards and all(is_dead(card, board, available) for card in cards):
        return HintQuality.USELESS
    return HintQuality.AMBIGUOUS


def intent_increment(quality: HintQuality, config: AgentConfig) -> float:
    if quality is HintQuality.PLAYABLE:
        return config.playable_hint_increment
    if quality is HintQuality.USELESS:
        return config.useless_hint_increment
    return config.ambiguous_hint_increment


def fold_intent(score: float, increment: float) -> float:
    """Exponential smoothing: the newest observation weighs as much as all prior ones."""
    return (score + increment) / 2
