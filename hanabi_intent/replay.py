"""Brings the belief state up to date with the game history."""

import logging
from typing import Optional

from .context import BeliefState
from .errors import ReplayError
from .interpreter import ActionInterpreter
from .state import GameView

logger = logging.getLogger(__name__)


class HistoryReplay:
    """Replays every action taken since the agent last looked at the game.

    On the first call the player models are seeded from the opening deal and
    every action from turn 0 is replayed. Afterwards each call starts at the
    turn of the previous call, so the agent's own last move is replayed too.
    """

    def __init__(self, ctx: BeliefState):
        self.ctx = ctx
        self.interpreter = ActionInterpreter(ctx)
        self.last_order: Optional[int] = None
        self.skipped: list[int] = []

    def advance(self, view: GameView) -> None:
        if self.last_order is None:
            try:
                self._seed(view)
            except ReplayError as exc:
                logger.warning("Could not seed from the opening deal: %s", exc)
            start = 0
        else:
            start = self.last_order

        for order in range(start, view.order):
            self._replay_turn(view, order)
        self.last_order = view.order

    def _seed(self, view: GameView) -> None:
        opening = view.state_at(0)
        ctx = self.ctx
        for visible in ctx.players:
            if visible.seat == ctx.self_seat:
                continue
            hand = opening.hands[visible.seat]
            if hand is None:
                raise ReplayError(f"Opening hand of seat {visible.seat} is not visible")
            visible.hand = list(hand)
            for viewer in ctx.others(visible.seat):
                for card in hand:
                    if card is not None:
                        viewer.observe_card(card)
        logger.debug("Seeded %s player models from the opening deal", ctx.num_players)

    def _replay_turn(self, view: GameView, order: int) -> None:
        try:
            before = view.state_at(order)
            after = view.state_at(order + 1)
            action = after.last_action
            if action is None:
                raise ReplayError(f"No action recorded for turn {order}")
            self.interpreter.apply(action, before, after)
        except ReplayError as exc:
            # belief for this one event stays stale; the rest of the replay goes on
            logger.warning("Skipping turn %s: %s", order, exc)
            self.skipped.append(order)
