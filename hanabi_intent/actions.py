"""Actions a seat can take, as a small tagged union of frozen dataclasses."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from .config import CONFIG

if TYPE_CHECKING:
    from .config import GameConfig


@dataclass(frozen=True)
class Play:
    actor: int
    position: int


@dataclass(frozen=True)
class Discard:
    actor: int
    position: int


@dataclass(frozen=True)
class ColorHint:
    actor: int
    target: int
    color: int
    positions: frozenset[int]


@dataclass(frozen=True)
class RankHint:
    actor: int
    target: int
    rank: int
    positions: frozenset[int]


Action = Union[Play, Discard, ColorHint, RankHint]
HintAction = Union[ColorHint, RankHint]


def action_to_str(action: Action, config: "GameConfig | None" = None) -> str:
    """Render an action in compact notation: P0, D3, 1HR, 2H3."""
    if config is None:
        config = CONFIG
    if isinstance(action, Play):
        return f"P{action.position}"
    if isinstance(action, Discard):
        return f"D{action.position}"
    if isinstance(action, ColorHint):
        return f"{action.target}H{config.colors[action.color]}"
    if isinstance(action, RankHint):
        return f"{action.target}H{config.ranks[action.rank]}"
    raise TypeError(f"Unknown action type: {type(action).__name__}")
