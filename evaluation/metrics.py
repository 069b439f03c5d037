"""
评估指标

按角色统计名次分布
"""
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
from collections import defaultdict
import numpy as np


@dataclass
class MatchResult:
    """
    单局结果

    Attributes:
        session: 会话编号
        round_number: 会话内局数
        ranking: 按名次排列的角色名
        revolutions: 革命次数
        eight_cuts: 八切次数
        plays: 出牌次数
        passes: 过牌次数
    """
    session: int
    round_number: int
    ranking: Tuple[str, ...]
    revolutions: int = 0
    eight_cuts: int = 0
    plays: int = 0
    passes: int = 0

    def rank_of(self, name: str) -> int:
        return self.ranking.index(name) + 1


class MetricsCollector:
    """
    指标收集器
    """

    def __init__(self, num_players: int = 4):
        self.num_players = num_players
        self.results: List[MatchResult] = []
        self._ranks: Dict[str, List[int]] = defaultdict(list)

    def add_result(self, result: MatchResult):
        """添加一局结果"""
        self.results.append(result)
        for idx, name in enumerate(result.ranking):
            self._ranks[name].append(idx + 1)

    def rank_distribution(self, name: str) -> np.ndarray:
        """名次分布 (长度为玩家数，和为 1)"""
        ranks = np.array(self._ranks.get(name, []), dtype=np.int64)
        counts = np.bincount(ranks, minlength=self.num_players + 1)[1:]
        total = counts.sum()
        if total == 0:
            return np.zeros(self.num_players, dtype=np.float64)
        return counts / total

    def compute_metrics(self, name: Optional[str] = None) -> Dict[str, float]:
        """
        计算指标

        Args:
            name: 指定角色，None 表示全局

        Returns:
            指标字典
        """
        if name is not None:
            ranks = self._ranks.get(name, [])
            if not ranks:
                return {}
            dist = self.rank_distribution(name)
            return {
                "games": len(ranks),
                "avg_rank": float(np.mean(ranks)),
                "daifugo_rate": float(dist[0]),
                "daihinmin_rate": float(dist[-1]),
            }

        n_games = len(self.results)
        if n_games == 0:
            return {}
        return {
            "games": n_games,
            "avg_revolutions": float(np.mean([r.revolutions for r in self.results])),
            "avg_eight_cuts": float(np.mean([r.eight_cuts for r in self.results])),
            "avg_plays": float(np.mean([r.plays for r in self.results])),
            "avg_passes": float(np.mean([r.passes for r in self.results])),
        }

    def standings(self) -> List[Tuple[str, float]]:
        """按平均名次升序"""
        return sorted(
            ((name, float(np.mean(ranks))) for name, ranks in self._ranks.items()),
            key=lambda x: x[1],
        )

    def reset(self):
        self.results.clear()
        self._ranks.clear()
