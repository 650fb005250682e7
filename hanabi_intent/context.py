from dataclasses import dataclass
from typing import Sequence

from .config import AGENT_CONFIG, CONFIG, AgentConfig, GameConfig
from .ledger import Ledger
from .player_model import PlayerModel


@dataclass
class BeliefState:
    """Everything one agent instance tracks about the game it is playing."""

    config: GameConfig
    agent_config: AgentConfig
    self_seat: int
    players: list[PlayerModel]
    ledger: Ledger

    @classmethod
    def create(
        cls,
        self_seat: int,
        names: Sequence[str],
        config: GameConfig = CONFIG,
        agent_config: AgentConfig = AGENT_CONFIG,
    ) -> "BeliefState":
        ledger = Ledger(config)
        hand_size = config.hand_size_for(len(names))
        players = [
            PlayerModel(seat, name, ledger.copy_counts(), hand_size, initial_intent=agent_config.initial_intent)
            for seat, name in enumerate(names)
        ]
        return cls(config, agent_config, self_seat, players, ledger)

    @property
    def me(self) -> PlayerModel:
        return self.players[self.self_seat]

    @property
    def num_players(self) -> int:
        return len(self.players)

    def others(self, seat: int) -> list[PlayerModel]:
        return [player for player in self.players if player.seat != seat]
