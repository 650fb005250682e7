"""Minimal Hanabi rules engine that records a snapshot after every turn.

Agents only ever see it through :class:`~hanabi_intent.state.GameView`.
A played or discarded card is replaced in the same hand slot; once the deck
is empty the slot stays empty.
"""

import logging
import random
from typing import Any, Optional, Sequence

import numpy as np

from .actions import Action, ColorHint, Discard, Play, RankHint, action_to_str
from .cards import Card, card_to_str
from .config import CONFIG, GameConfig
from .errors import InvalidActionError
from .state import GameView, Snapshot

logger = logging.getLogger(__name__)


class HanabiGame:
    def __init__(self, players: Sequence[str], seed: Optional[int] = None, config: GameConfig = CONFIG):
        assert len(players) > 1, "Number of players must be greater than 1"
        self.config = config
        self.players = tuple(players)
        self.num_players = len(players)
        self.state = self._initialize_game(random.Random(seed))
        self.snapshots: list[Snapshot] = [self._snapshot(None)]

    def _initialize_game(self, rng: random.Random) -> dict[str, Any]:
        """Build and shuffle the deck, deal hands, and set up tokens and fireworks."""
        config = self.config
        assert config.card_distribution is not None
        rank_index = {rank: i for i, rank in enumerate(config.ranks)}
        deck: list[Card] = [(c, rank_index[n]) for c in range(config.num_colors) for n in config.card_distribution]
        rng.shuffle(deck)

        hand_size = config.hand_size_for(self.num_players)
        hands: list[list[Optional[Card]]] = []
        for _ in range(self.num_players):
            hands.append([deck.pop() for _ in range(hand_size)])

        return {
            "deck": deck,
            "hands": hands,
            # highest completed rank per color (0 = none started)
            "fireworks": {color: 0 for color in config.colors},
            "info_tokens": config.max_info_tokens,
            "life_tokens": config.max_life_tokens,
            "discard_pile": [],
            "current_player": 0,
            "order": 0,
            "score": 0,
            "final_round_turns": None,
            "is_complete": False,
        }

    @property
    def current_player(self) -> int:
        return self.state["current_player"]

    @property
    def is_complete(self) -> bool:
        return self.state["is_complete"]

    @property
    def score(self) -> int:
        return self.state["score"]

    def view_for(self, seat: int) -> GameView:
        return GameView(seat, self.players, self.snapshots)

    def unplayed_counts(self) -> np.ndarray:
        """Copies of each card identity neither played nor discarded."""
        counts = self.config.card_spread()
        for card in self.state["discard_pile"]:
            counts[card] -= 1
        for color_idx, color in enumerate(self.config.colors):
            counts[color_idx, : self.state["fireworks"][color]] -= 1
        return counts

    def step(self, action: Action) -> str:
        """Apply ``action`` for the current player and record the resulting snapshot.

        Returns:
            Feedback message describing the action result.
        """
        if self.is_complete:
            raise InvalidActionError("The game is already over.")
        if action.actor != self.current_player:
            raise InvalidActionError(f"Not player {action.actor}'s turn (current: {self.current_player}).")

        if isinstance(action, Play):
            feedback = self._play_card(action.actor, action.position)
        elif isinstance(action, Discard):
            feedback = self._discard_card(action.actor, action.position)
        elif isinstance(action, (ColorHint, RankHint)):
            feedback = self._give_hint(action)
        else:
            raise InvalidActionError(f"Unknown action {action!r}")

        logger.info("Player %s: %s", action.actor, feedback)
        self._end_turn()
        self.snapshots.append(self._snapshot(action))
        if self.is_complete:
            logger.info("Game over after %s turns with score %s", self.state["order"], self.score)
        return feedback

    def _card_at(self, player_id: int, position: int) -> Card:
        hand = self.state["hands"][player_id]
        if position < 0 or position >= len(hand):
            raise InvalidActionError(f"Invalid position {position}. Must be 0-{len(hand) - 1}.")
        card = hand[position]
        if card is None:
            raise InvalidActionError(f"Position {position} has no card.")
        return card

    def _play_card(self, player_id: int, position: int) -> str:
        """Play a card onto the fireworks; a card that does not fit costs a life."""
        state = self.state
        card = self._card_at(player_id, position)
        color = self.config.colors[card[0]]
        rank = self.config.ranks[card[1]]
        current_firework_level = state["fireworks"][color]

        if current_firework_level + 1 == rank:
            state["fireworks"][color] = rank
            state["score"] += 1
            feedback = f"Successfully played {card_to_str(card, self.config)}."

            if rank == self.config.max_rank and state["info_tokens"] < self.config.max_info_tokens:
                state["info_tokens"] += 1
                feedback += f" [+1 info token for completing {color}]"

            if state["score"] == self.config.max_score:
                state["is_complete"] = True
                feedback += " Perfect Game! All fireworks completed!"
        else:
            state["life_tokens"] -= 1
            state["discard_pile"].append(card)
            expected = current_firework_level + 1
            feedback = f"Played {card_to_str(card, self.config)}, but {color} needs {expected}. Lost 1 life."

            if state["life_tokens"] <= 0:
                state["is_complete"] = True
                feedback += " Game Over"

        self._draw_into(player_id, position)
        return feedback

    def _discard_card(self, player_id: int, position: int) -> str:
        """Discard a card and regain one info token."""
        state = self.state
        if state["info_tokens"] >= self.config.max_info_tokens:
            raise InvalidActionError(f"Cannot discard at {self.config.max_info_tokens} info tokens.")
        card = self._card_at(player_id, position)

        state["discard_pile"].append(card)
        state["info_tokens"] += 1
        self._draw_into(player_id, position)
        return f"Discarded {card_to_str(card, self.config)}. Gained 1 info token."

    def _give_hint(self, action: ColorHint | RankHint) -> str:
        state = self.state
        if state["info_tokens"] <= 0:
            raise InvalidActionError("No info tokens available for a hint.")
        if not 0 <= action.target < self.num_players:
            raise InvalidActionError(f"Invalid target player {action.target}.")
        if action.target == action.actor:
            raise InvalidActionError("Cannot give a hint to yourself.")

        if isinstance(action, ColorHint):
            index, value = 0, action.color
        else:
            index, value = 1, action.rank
        hand = state["hands"][action.target]
        matching = frozenset(i for i, card in enumerate(hand) if card is not None and card[index] == value)

        hint_str = action_to_str(action, self.config)
        if not matching:
            raise InvalidActionError(f"Hint {hint_str} touches no card of player {action.target}.")
        if matching != action.positions:
            raise InvalidActionError(f"Hint {hint_str} must point at positions {sorted(matching)}.")

        state["info_tokens"] -= 1
        positions_str = ", ".join(str(p) for p in sorted(matching))
        return f"Gave hint to Player {action.target}: {hint_str} at positions [{positions_str}]"

    def _draw_into(self, player_id: int, position: int) -> None:
        state = self.state
        hand = state["hands"][player_id]
        if state["deck"]:
            hand[position] = state["deck"].pop()
            if not state["deck"] and state["final_round_turns"] is None:
                state["final_round_turns"] = self.num_players
        else:
            hand[position] = None

    def _end_turn(self) -> None:
        state = self.state
        state["order"] += 1
        state["current_player"] = (state["current_player"] + 1) % self.num_players
        if state["final_round_turns"] is not None:
            state["final_round_turns"] -= 1
            if state["final_round_turns"] <= 0:
                state["is_complete"] = True

    def _snapshot(self, last_action: Optional[Action]) -> Snapshot:
        state = self.state
        return Snapshot(
            order=state["order"],
            current_player=state["current_player"],
            hands=tuple(tuple(hand) for hand in state["hands"]),
            fireworks=dict(state["fireworks"]),
            discard_pile=tuple(state["discard_pile"]),
            info_tokens=state["info_tokens"],
            life_tokens=state["life_tokens"],
            deck_count=len(state["deck"]),
            final_round_turns=state["final_round_turns"],
            is_complete=state["is_complete"],
            last_action=last_action,
        )

