from dataclasses import dataclass
from typing import Optional

import numpy as np

# Valid colors and ranks - configs must be subsets of these
VALID_COLORS = ("R", "Y", "G", "W", "B")
VALID_RANKS = (1, 2, 3, 4, 5)


def _default_card_distribution(ranks: tuple[int, ...]) -> tuple[int, ...]:
    """Generate default card distribution based on ranks.

    Standard Hanabi distribution:
    - Lowest rank: 3 copies per color
    - Middle ranks: 2 copies per color
    - Highest rank: 1 copy per color (irreplaceable!)

    For 5 ranks: (1,1,1,2,2,3,3,4,4,5) = 10 cards per color
    For 3 ranks: (1,1,1,2,2,3) = 6 cards per color
    """
    distribution: list[int] = []
    for i, rank in enumerate(ranks):
        if i == 0:  # Lowest rank: 3 copies
            distribution.extend([rank, rank, rank])
        elif i == len(ranks) - 1:  # Highest rank: 1 copy
            distribution.append(rank)
        else:  # Middle ranks: 2 copies
            distribution.extend([rank, rank])
    return tuple(distribution)


@dataclass(frozen=True)
class GameConfig:
    colors: tuple[str, ...] = VALID_COLORS
    ranks: tuple[int, ...] = VALID_RANKS
    hand_size: Optional[int] = None
    card_distribution: Optional[tuple[int, ...]] = None
    max_info_tokens: int = 8
    max_life_tokens: int = 3

    def __post_init__(self) -> None:
        for color in self.colors:
            if color not in VALID_COLORS:
                raise ValueError(f"Invalid color '{color}'. Must be one of {VALID_COLORS}")

        if len(self.ranks) < 2:
            raise ValueError("Must have at least 2 ranks")
        for rank in self.ranks:
            if rank not in VALID_RANKS:
                raise ValueError(f"Invalid rank {rank}. Must be one of {VALID_RANKS}")
        # firework heights double as rank indices, so ranks must run 1..n
        if self.ranks != tuple(range(1, len(self.ranks) + 1)):
            raise ValueError(f"Ranks must be consecutive from 1, got {self.ranks}")

        # None means "depends on the number of players"
        if self.hand_size is not None and self.hand_size < 1:
            raise ValueError("hand_size must be at least 1")

        if self.card_distribution is None:
            object.__setattr__(self, "card_distribution", _default_card_distribution(self.ranks))

    @property
    def num_colors(self) -> int:
        return len(self.colors)

    @property
    def num_ranks(self) -> int:
        return len(self.ranks)

    @property
    def max_rank(self) -> int:
        return max(self.ranks)

    @property
    def deck_size(self) -> int:
        assert self.card_distribution is not None
        return self.num_colors * len(self.card_distribution)

    @property
    def max_score(self) -> int:
        """Perfect score: all fireworks completed to max rank."""
        return self.num_colors * self.max_rank

    def hand_size_for(self, num_players: int) -> int:
        """Cards per hand: 5 for two or three players, 4 for larger tables."""
        if self.hand_size is not None:
            return self.hand_size
        return 5 if num_players <= 3 else 4

    def card_spread(self) -> np.ndarray:
        """Copies of every (color, rank) identity in a fresh deck."""
        assert self.card_distribution is not None
        per_rank = [self.card_distribution.count(rank) for rank in self.ranks]
        return np.tile(np.array(per_rank, dtype=np.int64), (self.num_colors, 1))


@dataclass(frozen=True)
class AgentConfig:
    """Tuning constants of the intent agent.

    The thresholds are heuristics, not rules of the game; every one of them
    can be overridden per agent instance.
    """

    safe_play_threshold: float = 0.99
    likely_play_threshold: float = 0.6
    trust_threshold: float = 0.8
    hint_low_water: int = 2
    initial_intent: float = 0.5
    playable_hint_increment: float = 1.0
    useless_hint_increment: float = 1.0
    ambiguous_hint_increment: float = 0.5
    score_plays: bool = True
    successful_play_increment: float = 1.0
    failed_play_increment: float = 0.0

    def __post_init__(self) -> None:
        unit_fields = (
            "safe_play_threshold",
            "likely_play_threshold",
            "trust_threshold",
            "initial_intent",
            "playable_hint_increment",
            "useless_hint_increment",
            "ambiguous_hint_increment",
            "successful_play_increment",
            "failed_play_increment",
        )
        for name in unit_fields:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

        if self.likely_play_threshold > self.safe_play_threshold:
            raise ValueError("likely_play_threshold cannot exceed safe_play_threshold")

        if self.hint_low_water < 0:
            raise ValueError("hint_low_water must be non-negative")


# Default configs (standard Hanabi: 5 colors, ranks 1-5)
CONFIG = GameConfig()
AGENT_CONFIG = AgentConfig()
