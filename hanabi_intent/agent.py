import logging
import random
from typing import Optional

from .actions import Action
from .config import AGENT_CONFIG, CONFIG, AgentConfig, GameConfig
from .context import BeliefState
from .policy import Policy
from .replay import HistoryReplay
from .state import GameView

logger = logging.getLogger(__name__)


class IntentAgent:
    """Hanabi agent that tracks card beliefs and how deliberate each teammate seems.

    One instance plays one seat for one game; its belief state is private.
    """

    def __init__(
        self,
        config: GameConfig = CONFIG,
        agent_config: AgentConfig = AGENT_CONFIG,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.agent_config = agent_config
        self.rng = rng if rng is not None else random.Random(seed)
        self.state: Optional[BeliefState] = None
        self._replay: Optional[HistoryReplay] = None
        self._policy: Optional[Policy] = None

    def do_action(self, view: GameView) -> Action:
        """Catch up on everything that happened since our last turn, then act."""
        if self.state is None:
            self._init(view)
        assert self._replay is not None and self._policy is not None

        self._replay.advance(view)
        action = self._policy.choose(view.current)
        logger.debug("Seat %s acts at turn %s: %s", view.seat, view.order, action)
        return action

    def _init(self, view: GameView) -> None:
        self.state = BeliefState.create(view.seat, view.players, self.config, self.agent_config)
        self._replay = HistoryReplay(self.state)
        self._policy = Policy(self.state, self.rng)

    def __str__(self) -> str:
        return "IntentAgent"
