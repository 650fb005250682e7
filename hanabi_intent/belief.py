"""Per-slot belief over the identity of a hidden card."""

import logging
from typing import Optional

import numpy as np

from .errors import InconsistentBeliefError

logger = logging.getLogger(__name__)


class CardBelief:
    """Frequency grid over the (color, rank) identities one hand slot can hold.

    ``grid[c, r]`` counts the copies of color ``c`` rank index ``r`` that are
    still consistent with everything known about the slot. Cells ruled out by
    a hint stay at zero for the lifetime of the belief.
    """

    def __init__(self, potential: np.ndarray):
        self.grid = np.array(potential, dtype=np.int64, copy=True)
        self.known_color: Optional[int] = None
        self.known_rank: Optional[int] = None
        self._refresh_known()

    @property
    def mass(self) -> int:
        return int(self.grid.sum())

    @property
    def is_known(self) -> bool:
        return self.known_color is not None and self.known_rank is not None

    def apply_color_hint(self, color_idx: int) -> None:
        keep = np.zeros_like(self.grid, dtype=bool)
        keep[color_idx, :] = True
        self.grid[~keep] = 0
        self.known_color = color_idx
        self._refresh_known()

    def apply_rank_hint(self, rank_idx: int) -> None:
        keep = np.zeros_like(self.grid, dtype=bool)
        keep[:, rank_idx] = True
        self.grid[~keep] = 0
        self.known_rank = rank_idx
        self._refresh_known()

    def remove(self, color_idx: int, rank_idx: int) -> None:
        """Account for one publicly seen copy of a card elsewhere."""
        # several beliefs may see the same physical card, so clamp at zero
        if self.grid[color_idx, rank_idx] > 0:
            self.grid[color_idx, rank_idx] -= 1
            self._refresh_known()

    def is_useless(self, board: np.ndarray, available: np.ndarray) -> bool:
        """True when no identity this card could be is still playable.

        A candidate keeps the card useful if its rank is above the color's
        board height and copies of it remain in ``available``. A belief whose
        candidates are all exhausted is vacuously useless.
        """
        num_ranks = self.grid.shape[1]
        above = np.arange(num_ranks)[np.newaxis, :] >= board[:, np.newaxis]
        useful = (self.grid > 0) & above & (available > 0)
        return not bool(useful.any())

    def safety_probability(self, board: np.ndarray) -> float:
        """Share of the belief mass sitting on the next playable rank of each color."""
        total = self.mass
        if total == 0:
            logger.error("Belief has no remaining mass: known_color=%s known_rank=%s grid=%s",
                         self.known_color, self.known_rank, self.grid.tolist())
            raise InconsistentBeliefError(
                "Card belief has zero mass; every identity was ruled out. "
                f"known_color={self.known_color} known_rank={self.known_rank}"
            )

        num_ranks = self.grid.shape[1]
        playable = 0
        for color_idx, height in enumerate(board):
            if height < num_ranks:
                playable += int(self.grid[color_idx, height])
        return playable / total

    def _refresh_known(self) -> None:
        # a dimension becomes known when only one of its values has mass left
        colors = np.flatnonzero(self.grid.sum(axis=1))
        if len(colors) == 1:
            self.known_color = int(colors[0])
        ranks = np.flatnonzero(self.grid.sum(axis=0))
        if len(ranks) == 1:
            self.known_rank = int(ranks[0])

    def __repr__(self) -> str:
        return f"CardBelief(mass={self.mass}, color={self.known_color}, rank={self.known_rank})"
