"""Counts of every card identity not yet played or discarded."""

import logging

import numpy as np

from .cards import Card, card_to_str
from .config import CONFIG, GameConfig

logger = logging.getLogger(__name__)


class Ledger:
    """Unplayed-card counts shared by every player model of one agent.

    Counts only ever go down. A cell at zero means that identity is gone for
    the rest of the game.
    """

    def __init__(self, config: GameConfig = CONFIG):
        self.config = config
        self._counts = config.card_spread()

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the counts."""
        view = self._counts.view()
        view.flags.writeable = False
        return view

    def count(self, card: Card) -> int:
        return int(self._counts[card])

    def is_exhausted(self, card: Card) -> bool:
        return self._counts[card] == 0

    def remove(self, card: Card) -> None:
        if self._counts[card] == 0:
            logger.warning("Ledger already exhausted for %s; ignoring removal", card_to_str(card, self.config))
            return
        self._counts[card] -= 1

    def copy_counts(self) -> np.ndarray:
        return self._counts.copy()
