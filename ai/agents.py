"""
决策提供者

人类与电脑座位共用同一个 Player 数据类型，区别只在于如何得到决策:
- HeuristicAgent: 同步计算
- HumanAgent: 返回 None，引擎挂起等待外部输入
"""
from typing import Dict, List, Optional, Sequence
import logging
import numpy as np

from core.actions import Move, MoveGenerator
from core.agent import Agent
from core.cards import Card
from core.config import AIParams
from core.exchange import select_weakest, select_strongest
from core.state import Player, PlayerView

from .scorer import MoveScorer

logger = logging.getLogger(__name__)


class HumanAgent(Agent):
    """人类座位: 所有决策都由外部提交"""

    def __init__(self, name: str = "human"):
        super().__init__(name)

    def select_move(self, view: PlayerView) -> Optional[Move]:
        return None

    def select_exchange(self, view: PlayerView, count: int) -> Optional[List[Card]]:
        return None


class HeuristicAgent(Agent):
    """启发式 AI: 枚举合法出牌并用 MoveScorer 打分"""

    def __init__(
        self,
        params: Optional[AIParams] = None,
        rng: Optional[np.random.Generator] = None,
        name: str = "heuristic",
    ):
        super().__init__(name)
        self.params = params
        self.scorer = MoveScorer(rng)

    def select_move(self, view: PlayerView) -> Optional[Move]:
        params = self.params or view.params or AIParams()
        moves = MoveGenerator(view.hand, view.field_cards, view.is_revolution).generate()
        move, scores = self.scorer.select(
            moves, view.hand, view.field_cards, view.is_revolution, params
        )
        logger.debug(f"{self.name} chose {move.move_type.name} rank={move.rank} "
                     f"x{move.count} (score {scores.max():.1f})")
        return move

    def select_exchange(self, view: PlayerView, count: int) -> Optional[List[Card]]:
        return select_weakest(view.hand, count)


class RandomAgent(Agent):
    """随机选择合法出牌"""

    def __init__(self, rng: Optional[np.random.Generator] = None, name: str = "random"):
        super().__init__(name)
        self.rng = rng if rng is not None else np.random.default_rng()

    def select_move(self, view: PlayerView) -> Optional[Move]:
        moves = MoveGenerator(view.hand, view.field_cards, view.is_revolution).generate()
        idx = int(self.rng.integers(len(moves)))
        return moves[idx]

    def select_exchange(self, view: PlayerView, count: int) -> Optional[List[Card]]:
        return select_weakest(view.hand, count)


def default_agents(
    players: Sequence[Player],
    rng: Optional[np.random.Generator] = None,
) -> Dict[int, Agent]:
    """
    按座位类型创建默认决策提供者

    Args:
        players: 玩家列表
        rng: 共享随机源

    Returns:
        座位号 -> Agent
    """
    agents: Dict[int, Agent] = {}
    for player in players:
        if player.is_ai:
            agents[player.seat] = HeuristicAgent(player.params, rng=rng, name=player.name)
        else:
            agents[player.seat] = HumanAgent(name=player.name)
    return agents
