"""Applies one observed action to the agent's belief state."""

import logging
from typing import Callable

import numpy as np

from .actions import Action, ColorHint, Discard, HintAction, Play, RankHint, action_to_str
from .cards import Card, board_heights, card_to_str
from .context import BeliefState
from .errors import ReplayError
from .hints import Hint, HintKind, classify_hint, fold_intent, intent_increment
from .player_model import PlayerModel
from .state import Snapshot

logger = logging.getLogger(__name__)


class ActionInterpreter:
    """Mutates player models and the ledger for each kind of action.

    Every handler receives the snapshot the action was taken from and the
    snapshot right after it.
    """

    def __init__(self, ctx: BeliefState):
        self.ctx = ctx
        self._handlers: dict[type, Callable[[Action, Snapshot, Snapshot], None]] = {
            Play: self._apply_play,
            Discard: self._apply_discard,
            ColorHint: self._apply_hint,
            RankHint: self._apply_hint,
        }

    def apply(self, action: Action, before: Snapshot, after: Snapshot) -> None:
        handler = self._handlers.get(type(action))
        if handler is None:
            raise ReplayError(f"Unrecognised action {action!r}")
        if not 0 <= action.actor < self.ctx.num_players:
            raise ReplayError(f"Action from unknown seat {action.actor}")
        logger.debug("Turn %s: seat %s %s", before.order, action.actor, action_to_str(action, self.ctx.config))
        handler(action, before, after)

    def _apply_discard(self, action: Discard, before: Snapshot, after: Snapshot) -> None:
        if len(after.discard_pile) != len(before.discard_pile) + 1:
            raise ReplayError(f"Discard at turn {before.order} did not grow the discard pile")
        self._retire_card(action.actor, action.position, after.discard_pile[-1], before, after)

    def _apply_play(self, action: Play, before: Snapshot, after: Snapshot) -> None:
        before_board = board_heights(before.fireworks, self.ctx.config)
        after_board = board_heights(after.fireworks, self.ctx.config)
        changed = np.flatnonzero(after_board != before_board)

        if len(changed) == 0:
            # failed play: the card went to the discard pile
            if len(after.discard_pile) != len(before.discard_pile) + 1:
                raise ReplayError(f"Play at turn {before.order} changed neither fireworks nor discards")
            card = after.discard_pile[-1]
            succeeded = False
        elif len(changed) == 1:
            color_idx = int(changed[0])
            card = (color_idx, int(after_board[color_idx]) - 1)
            succeeded = True
        else:
            raise ReplayError(f"Play at turn {before.order} changed {len(changed)} fireworks")

        self._retire_card(action.actor, action.position, card, before, after)

        actor = self.ctx.players[action.actor]
        cfg = self.ctx.agent_config
        if cfg.score_plays and action.actor != self.ctx.self_seat and actor.trustworthy:
            increment = cfg.successful_play_increment if succeeded else cfg.failed_play_increment
            actor.intent = fold_intent(actor.intent, increment)
            logger.debug("Seat %s play %s -> intent %.3f", actor.seat, "landed" if succeeded else "failed", actor.intent)

    def _retire_card(self, seat: int, slot: int, card: Card, before: Snapshot, after: Snapshot) -> None:
        """Bookkeeping shared by plays and discards of ``card`` from ``seat``'s ``slot``."""
        ctx = self.ctx
        actor = ctx.players[seat]
        is_self = seat == ctx.self_seat
        if not 0 <= slot < len(actor.beliefs):
            raise ReplayError(f"Seat {seat} acted on slot {slot} outside its hand")
        if not is_self and after.hands[seat] is None:
            raise ReplayError(f"Hand of seat {seat} missing after turn {before.order}")

        ctx.ledger.remove(card)
        actor.observe_card(card)
        if is_self:
            # everyone else saw this card in our hand all along
            for other in ctx.others(seat):
                other.observe_card(card)

        drawn = before.deck_count > 0
        actor.replace_slot(slot, drawn)
        if is_self:
            return

        actor.hand = list(after.hands[seat])
        new_card = actor.hand[slot] if drawn else None
        if new_card is not None:
            for other in ctx.others(seat):
                other.observe_card(new_card)
        logger.debug("Seat %s lost %s, drew %s", seat, card_to_str(card, ctx.config), card_to_str(new_card, ctx.config))

    def _apply_hint(self, action: HintAction, before: Snapshot, after: Snapshot) -> None:
        ctx = self.ctx
        if not 0 <= action.target < ctx.num_players or action.target == action.actor:
            raise ReplayError(f"Hint at turn {before.order} has invalid target {action.target}")

        hint = Hint.from_action(action)
        hinter = ctx.players[action.actor]
        recipient = ctx.players[action.target]

        if not hinter.trustworthy:
            logger.debug("Ignoring hint from untrustworthy seat %s", hinter.seat)
            return

        if action.target == ctx.self_seat:
            # our own hand cannot be checked, so take the hint at its word
            recipient.record_hint(hint)
            self._constrain(recipient, hint)
            return

        hand = before.hands[action.target]
        if hand is None:
            raise ReplayError(f"Hand of seat {action.target} missing at turn {before.order}")

        matching = {slot for slot, card in enumerate(hand) if card is not None and hint.matches(card)}
        if matching != set(hint.positions):
            hinter.trustworthy = False
            logger.warning(
                "Seat %s gave a false hint to seat %s at turn %s (claimed %s, actual %s)",
                hinter.seat, recipient.seat, before.order, sorted(hint.positions), sorted(matching),
            )
            return

        if action.actor != ctx.self_seat:
            cards = [hand[slot] for slot in sorted(hint.positions)]
            quality = classify_hint(cards, board_heights(before.fireworks, ctx.config), ctx.ledger.grid)
            hinter.intent = fold_intent(hinter.intent, intent_increment(quality, ctx.agent_config))
            logger.debug("Seat %s hint judged %s -> intent %.3f", hinter.seat, quality.value, hinter.intent)

        recipient.record_hint(hint)
        self._constrain(recipient, hint)

    @staticmethod
    def _constrain(recipient: PlayerModel, hint: Hint) -> None:
        for slot in hint.positions:
            if not 0 <= slot < len(recipient.beliefs):
                continue
            belief = recipient.beliefs[slot]
            if belief is None:
                continue
            if hint.kind is HintKind.COLOR:
                belief.apply_color_hint(hint.value)
            else:
                belief.apply_rank_hint(hint.value)
