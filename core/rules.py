"""
规则引擎 - 合法性验证、特殊规则判定

所有方法都是纯函数，无状态
"""
from typing import Sequence

from .cards import Card, EIGHT, strength


# 触发革命的最少张数
REVOLUTION_COUNT = 4

# 各名次换牌张数 (1/4 名换 2 张，2/3 名换 1 张)
EXCHANGE_COUNTS = {1: 2, 2: 1, 3: 1, 4: 2}


class RuleEngine:
    """
    大富豪规则引擎

    革命与八切是两个独立的判定，同一次出牌可以同时触发
    """

    @staticmethod
    def is_same_rank(cards: Sequence[Card]) -> bool:
        """检查所有牌点数相同"""
        if not cards:
            return False
        first_rank = cards[0].rank
        return all(c.rank == first_rank for c in cards)

    @staticmethod
    def is_valid_play(
        cards: Sequence[Card],
        field: Sequence[Card],
        is_revolution: bool = False,
    ) -> bool:
        """
        验证出牌是否合法 (不检查手牌归属)

        Args:
            cards: 要出的牌
            field: 场上的牌
            is_revolution: 是否处于革命状态

        Returns:
            是否合法
        """
        if not RuleEngine.is_same_rank(cards):
            return False

        # 主动出牌: 同点数即可
        if not field:
            return True

        if len(cards) != len(field):
            return False

        my_strength = strength(cards[0].rank, is_revolution)
        field_strength = strength(field[0].rank, is_revolution)
        return my_strength > field_strength

    @staticmethod
    def triggers_revolution(cards: Sequence[Card]) -> bool:
        """4 张及以上触发革命 (再次触发则反转回来)"""
        return len(cards) >= REVOLUTION_COUNT

    @staticmethod
    def triggers_eight_cut(cards: Sequence[Card]) -> bool:
        """含 8 则清场，同一玩家继续出牌"""
        return any(c.rank == EIGHT for c in cards)

    @staticmethod
    def exchange_count(finish_rank: int) -> int:
        """指定名次需要交换的张数"""
        return EXCHANGE_COUNTS.get(finish_rank, 0)
