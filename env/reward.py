"""
奖励函数

终局按名次给予奖励，过程中为 0
"""
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class RewardConfig:
    """奖励配置"""
    rank_rewards: Dict[int, float] = field(
        default_factory=lambda: {1: 1.0, 2: 0.5, 3: -0.5, 4: -1.0}
    )
    invalid_penalty: float = -1.0


class RewardCalculator:
    """
    奖励计算器
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def compute(self, finish_rank: int, round_over: bool) -> float:
        """
        Args:
            finish_rank: 视角玩家的名次 (0 = 未出完)
            round_over: 本局是否结束

        Returns:
            奖励值
        """
        if not round_over or finish_rank == 0:
            return 0.0
        return self.config.rank_rewards.get(finish_rank, 0.0)

    def invalid(self) -> float:
        return self.config.invalid_penalty
