"""Pytest fixtures for the intent agent tests."""
import random

import pytest

from hanabi_intent.config import AGENT_CONFIG, CONFIG
from hanabi_intent.context import BeliefState
from hanabi_intent.engine import HanabiGame
from hanabi_intent.state import Snapshot

# Four-player opening hands, cards as (color_idx, rank_idx); colors R Y G W B
HANDS_4P = [
    [(0, 1), (1, 0), (2, 2), (3, 4)],   # seat 0: R2 Y1 G3 W5
    [(0, 0), (1, 1), (4, 2), (2, 0)],   # seat 1: R1 Y2 B3 G1
    [(0, 0), (2, 3), (0, 0), (3, 1)],   # seat 2: R1 G4 R1 W2
    [(4, 0), (4, 3), (1, 3), (2, 1)],   # seat 3: B1 B4 Y4 G2
]


@pytest.fixture
def spread():
    """Card counts of a fresh standard deck."""
    return CONFIG.card_spread()


@pytest.fixture
def make_snapshot():
    """Build a Snapshot with sensible defaults; fireworks only list non-zero colors."""
    def _make(order=0, hands=None, fireworks=None, **kwargs):
        if hands is None:
            hands = HANDS_4P
        levels = {color: 0 for color in CONFIG.colors}
        levels.update(fireworks or {})
        kwargs.setdefault("deck_count", 20)
        return Snapshot(
            order=order,
            current_player=order % len(hands),
            hands=tuple(tuple(hand) if hand is not None else None for hand in hands),
            fireworks=levels,
            **kwargs,
        )
    return _make


@pytest.fixture
def ctx4():
    """Belief state of seat 0 in a four-player game, before any replay."""
    return BeliefState.create(0, ["Alice", "Bob", "Charlie", "Dana"], CONFIG, AGENT_CONFIG)


@pytest.fixture
def rng():
    return random.Random(7)


@pytest.fixture
def hands4():
    return [list(hand) for hand in HANDS_4P]


@pytest.fixture
def play_game():
    """Drive one game with one agent per seat and return the final score."""
    def _play(agents, seed=None, config=CONFIG):
        game = HanabiGame([f"p{seat}" for seat in range(len(agents))], seed=seed, config=config)
        while not game.is_complete:
            seat = game.current_player
            game.step(agents[seat].do_action(game.view_for(seat)))
        return game.score
    return _play
