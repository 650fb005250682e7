"""Card and firework helpers shared by the agent and the engine."""

from typing import TYPE_CHECKING, Mapping, Optional

import numpy as np

from .config import CONFIG

if TYPE_CHECKING:
    from .config import GameConfig

# (color_idx, rank_idx); None marks an empty hand slot
Card = tuple[int, int]


def card_to_str(card: Optional[Card], config: "GameConfig | None" = None) -> str:
    """Convert a card tuple to a human-readable string (e.g., 'R1', 'G5').

    Args:
        card: Tuple of (color_idx, rank_idx) or None for empty slot.
        config: Game configuration (uses default if not provided).

    Returns:
        Card string like 'R1' or '--' for empty slots.
    """
    if card is None:
        return "--"
    if config is None:
        config = CONFIG
    color_idx, rank_idx = card
    return f"{config.colors[color_idx]}{config.ranks[rank_idx]}"


def board_heights(fireworks: Mapping[str, int], config: "GameConfig | None" = None) -> np.ndarray:
    """Highest played rank per color index, 0 when nothing was played yet.

    A card of rank index ``r`` is the next playable card of its color exactly
    when ``r`` equals the color's height.
    """
    if config is None:
        config = CONFIG
    return np.array([fireworks.get(color, 0) for color in config.colors], dtype=np.int64)


def is_playable(card: Card, board: np.ndarray) -> bool:
    color_idx, rank_idx = card
    return rank_idx == int(board[color_idx])


def is_dead(card: Card, board: np.ndarray, available: np.ndarray) -> bool:
    """True if the card can never be played.

    Either its rank was already played on its color, or one of the ranks
    between the current height and the card is exhausted in ``available``.
    """
    color_idx, rank_idx = card
    height = int(board[color_idx])
    if rank_idx < height:
        return True
    return bool(np.any(available[color_idx, height:rank_idx] == 0))
