"""
出牌评估函数

score = 噪声 + 基础出牌动力 + 冲击力 + 特殊牌奖励 - 风险成本 + 特殊奖励
噪声每个候选独立采样，得分相同的情况几乎不会出现
"""
from typing import Optional, Sequence, Tuple
import logging
import numpy as np

from core.actions import Move
from core.cards import Card
from core.config import AIParams
from core.rules import RuleEngine

logger = logging.getLogger(__name__)


# 噪声幅度
NOISE_SCALE = 50.0

# 出完牌的奖励，必须压过所有普通得分
FINISH_BONUS = 10000.0

# 王牌惩罚针对的强度值
TRUMP_STRENGTH = 12

# 终局度的参考手牌数
FULL_HAND = 13


class MoveScorer:
    """
    启发式出牌评估器

    所有随机性来自注入的 numpy Generator，便于复现
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def noise(self, params: AIParams) -> float:
        """uniform(-1, 1) * 50 * epsilon"""
        return float(self.rng.uniform(-1.0, 1.0)) * NOISE_SCALE * params.epsilon

    def score(
        self,
        move: Move,
        hand: Sequence[Card],
        field: Sequence[Card],
        is_revolution: bool,
        params: AIParams,
    ) -> float:
        """
        计算单个候选的得分

        Args:
            move: 候选出牌
            hand: 完整手牌
            field: 场上的牌
            is_revolution: 是否处于革命状态
            params: AI 参数

        Returns:
            得分 (越高越好)
        """
        score = self.noise(params)

        if move.is_pass:
            return score

        return score + self.evaluate(move, hand, params)

    @staticmethod
    def evaluate(move: Move, hand: Sequence[Card], params: AIParams) -> float:
        """不含噪声的确定性部分"""
        count = move.count
        move_strength = move.strength

        # 基础出牌动力
        score = 100 * params.w_attack

        # 冲击力
        score += 5 * move_strength
        score += 20 * (count - 1)

        # 八切
        if RuleEngine.triggers_eight_cut(move.cards):
            score += 50 * (params.w_attack + params.w_defense)

        # 终局度: 0 (开局) -> 接近 1 (快出完)
        endgame_factor = (FULL_HAND - len(hand)) / FULL_HAND

        # 过早消耗王牌
        if move_strength == TRUMP_STRENGTH:
            score -= 100 * params.w_trump * (1.0 - endgame_factor)

        # 拆组合
        same_rank_total = sum(1 for c in hand if c.rank == move.rank)
        if same_rank_total > count:
            score -= 60 * params.w_defense

        # 革命
        if RuleEngine.triggers_revolution(move.cards):
            score += 150 * params.w_revolution

        # 出完
        if len(hand) == count:
            score += FINISH_BONUS

        return score

    def score_all(
        self,
        moves: Sequence[Move],
        hand: Sequence[Card],
        field: Sequence[Card],
        is_revolution: bool,
        params: AIParams,
    ) -> np.ndarray:
        """按枚举顺序为所有候选打分"""
        return np.array(
            [self.score(m, hand, field, is_revolution, params) for m in moves],
            dtype=np.float64,
        )

    def select(
        self,
        moves: Sequence[Move],
        hand: Sequence[Card],
        field: Sequence[Card],
        is_revolution: bool,
        params: AIParams,
    ) -> Tuple[Move, np.ndarray]:
        """
        选出得分最高的候选

        并列时取枚举顺序靠前的 (np.argmax 返回第一个最大值)

        Returns:
            (选中的出牌, 全部得分)
        """
        if not moves:
            raise ValueError("No candidate moves to select from")

        scores = self.score_all(moves, hand, field, is_revolution, params)
        best = int(np.argmax(scores))

        if logger.isEnabledFor(logging.DEBUG):
            summary = ", ".join(
                f"{m.move_type.name}:{m.rank}x{m.count}={s:.1f}" for m, s in zip(moves, scores)
            )
            logger.debug(f"Candidates: {summary}")

        return moves[best], scores
