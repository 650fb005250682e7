"""Greedy, tiered action selection on top of the belief state."""

import logging
import random
from typing import Callable, Optional

import numpy as np

from .actions import Action, ColorHint, Discard, HintAction, Play, RankHint, action_to_str
from .cards import board_heights
from .context import BeliefState
from .errors import NoCandidateError
from .hints import HintKind, HintQuality, classify_hint
from .state import Snapshot

logger = logging.getLogger(__name__)

Tier = Callable[[Snapshot, np.ndarray, dict[int, float]], list[Action]]


class Policy:
    """Picks one action per turn, trying candidate tiers in a fixed order.

    The first tier that yields anything wins; ties inside a tier are broken
    with ``rng``. Informative hints come before useless discards while info
    tokens are above the low-water mark, and after them otherwise.
    """

    def __init__(self, ctx: BeliefState, rng: Optional[random.Random] = None):
        self.ctx = ctx
        self.rng = rng if rng is not None else random.Random()

    def tiers(self, snapshot: Snapshot) -> list[tuple[str, Tier]]:
        tiers: list[tuple[str, Tier]] = [
            ("safe play", self._safe_plays),
            ("final round play", self._desperate_plays),
            ("trusted play", self._trusted_plays),
        ]
        if snapshot.info_tokens > self.ctx.agent_config.hint_low_water:
            tiers += [("informative hint", self._informative_hints), ("useless discard", self._useless_discards)]
        else:
            tiers += [("useless discard", self._useless_discards), ("informative hint", self._informative_hints)]
        tiers += [
            ("random hint", self._random_hint),
            ("random discard", self._random_discards),
            ("any hint", self._any_hints),
        ]
        return tiers

    def choose(self, snapshot: Snapshot) -> Action:
        board = board_heights(snapshot.fireworks, self.ctx.config)
        me = self.ctx.me
        safety = {slot: me.beliefs[slot].safety_probability(board) for slot in me.live_slots()}

        for name, tier in self.tiers(snapshot):
            candidates = tier(snapshot, board, safety)
            if candidates:
                action = self.rng.choice(candidates)
                logger.debug("Chose %s (%s) from %s candidates", action_to_str(action, self.ctx.config), name, len(candidates))
                return action

        raise NoCandidateError(f"No action available for seat {self.ctx.self_seat} at turn {snapshot.order}")

    def _safe_plays(self, snapshot: Snapshot, board: np.ndarray, safety: dict[int, float]) -> list[Action]:
        threshold = self.ctx.agent_config.safe_play_threshold
        return [self._play(slot) for slot, p in safety.items() if p > threshold]

    def _desperate_plays(self, snapshot: Snapshot, board: np.ndarray, safety: dict[int, float]) -> list[Action]:
        if not snapshot.is_final_round or snapshot.life_tokens <= 1 or not safety:
            return []
        best = max(safety.values())
        return [self._play(slot) for slot, p in safety.items() if p == best]

    def _trusted_plays(self, snapshot: Snapshot, board: np.ndarray, safety: dict[int, float]) -> list[Action]:
        cfg = self.ctx.agent_config
        likely = [slot for slot, p in safety.items() if p > cfg.likely_play_threshold]
        backed = [slot for slot in likely if self._endorsed(slot)]
        if backed:
            return [self._play(slot) for slot in backed]
        if snapshot.life_tokens > 1:
            return [self._play(slot) for slot in likely]
        return []

    def _endorsed(self, slot: int) -> bool:
        """Whether a player we believe hints deliberately pointed at ``slot``."""
        cfg = self.ctx.agent_config
        for hint in self.ctx.me.hints_on_slot(slot):
            hinter = self.ctx.players[hint.hinter]
            if hinter.trustworthy and hinter.intent >= cfg.trust_threshold:
                return True
        return False

    def _informative_hints(self, snapshot: Snapshot, board: np.ndarray, safety: dict[int, float]) -> list[Action]:
        if snapshot.info_tokens <= 0:
            return []
        ctx = self.ctx
        candidates: list[Action] = []
        for target in ctx.others(ctx.self_seat):
            hand = snapshot.hands[target.seat]
            if hand is None:
                continue
            for kind, num_values in ((HintKind.COLOR, ctx.config.num_colors), (HintKind.RANK, ctx.config.num_ranks)):
                for value in range(num_values):
                    hint = self._build_hint(snapshot, target.seat, kind, value)
                    if hint is None:
                        continue
                    # the hint names every match, but only the news is judged
                    news = self._news_positions(hint)
                    if not news:
                        continue
                    cards = [hand[slot] for slot in news]
                    quality = classify_hint(cards, board, ctx.ledger.grid)
                    if quality is not HintQuality.AMBIGUOUS:
                        candidates.append(hint)
        return candidates

    def _useless_discards(self, snapshot: Snapshot, board: np.ndarray, safety: dict[int, float]) -> list[Action]:
        if snapshot.info_tokens >= self.ctx.config.max_info_tokens:
            return []
        me = self.ctx.me
        available = self.ctx.ledger.grid
        return [
            Discard(self.ctx.self_seat, slot)
            for slot in me.live_slots()
            if me.beliefs[slot].is_useless(board, available)
        ]

    def _random_hint(self, snapshot: Snapshot, board: np.ndarray, safety: dict[int, float]) -> list[Action]:
        if snapshot.info_tokens <= 0:
            return []
        ctx = self.ctx
        spots = [
            (target.seat, slot)
            for target in ctx.others(ctx.self_seat)
            if snapshot.hands[target.seat] is not None
            for slot, card in enumerate(snapshot.hands[target.seat])
            if card is not None
        ]
        self.rng.shuffle(spots)
        for seat, slot in spots:
            belief = ctx.players[seat].beliefs[slot] if slot < len(ctx.players[seat].beliefs) else None
            unknown = []
            if belief is None or belief.known_color is None:
                unknown.append(HintKind.COLOR)
            if belief is None or belief.known_rank is None:
                unknown.append(HintKind.RANK)
            if not unknown:
                continue
            kind = self.rng.choice(unknown)
            card = snapshot.hands[seat][slot]
            value = card[0] if kind is HintKind.COLOR else card[1]
            hint = self._build_hint(snapshot, seat, kind, value)
            if hint is not None:
                return [hint]
        return []

    def _random_discards(self, snapshot: Snapshot, board: np.ndarray, safety: dict[int, float]) -> list[Action]:
        if snapshot.info_tokens >= self.ctx.config.max_info_tokens:
            return []
        return [Discard(self.ctx.self_seat, slot) for slot in self.ctx.me.live_slots()]

    def _any_hints(self, snapshot: Snapshot, board: np.ndarray, safety: dict[int, float]) -> list[Action]:
        # only reached when discarding is illegal, i.e. info tokens are full
        if snapshot.info_tokens <= 0:
            return []
        ctx = self.ctx
        candidates: list[Action] = []
        for target in ctx.others(ctx.self_seat):
            for value in range(ctx.config.num_colors):
                hint = self._build_hint(snapshot, target.seat, HintKind.COLOR, value)
                if hint is not None:
                    candidates.append(hint)
        return candidates

    def _play(self, slot: int) -> Play:
        return Play(self.ctx.self_seat, slot)

    def _build_hint(self, snapshot: Snapshot, target: int, kind: HintKind, value: int) -> Optional[HintAction]:
        """The hint naming every card of ``target`` that matches, or None if none does."""
        hand = snapshot.hands[target]
        if hand is None:
            return None
        index = 0 if kind is HintKind.COLOR else 1
        positions = frozenset(slot for slot, card in enumerate(hand) if card is not None and card[index] == value)
        if not positions:
            return None
        if kind is HintKind.COLOR:
            return ColorHint(self.ctx.self_seat, target, value, positions)
        return RankHint(self.ctx.self_seat, target, value, positions)

    def _news_positions(self, hint: HintAction) -> list[int]:
        """Targeted slots whose hinted attribute the recipient does not know yet."""
        beliefs = self.ctx.players[hint.target].beliefs
        news = []
        for slot in sorted(hint.positions):
            belief = beliefs[slot] if slot < len(beliefs) else None
            if belief is None:
                news.append(slot)
                continue
            known = belief.known_color if isinstance(hint, ColorHint) else belief.known_rank
            if known is None:
                news.append(slot)
        return news
