"""
出牌类型定义与合法出牌生成器

大富豪只有同点数组合 (单张 / 多张)，不含顺子
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .cards import Card, EIGHT, strength


class MoveType(IntEnum):
    """出牌类型"""
    PASS = 0    # 过
    SINGLE = 1  # 单张
    SET = 2     # 同点数多张


@dataclass(frozen=True, slots=True)
class Move:
    """
    不可变出牌表示

    Attributes:
        move_type: 出牌类型
        cards: 出的牌 (PASS 为空)
        rank: 点数 (PASS 为 0)
        strength: 生成时的强度 (PASS 为 -1)
    """
    move_type: MoveType
    cards: Tuple[Card, ...] = ()
    rank: int = 0
    strength: int = -1

    @classmethod
    def pass_move(cls) -> 'Move':
        """创建 PASS"""
        return cls(move_type=MoveType.PASS)

    @classmethod
    def from_cards(cls, cards: Sequence[Card], is_revolution: bool = False) -> 'Move':
        """
        从牌列表创建出牌

        不做合法性检查，同点数约束由 RuleEngine 验证
        """
        if not cards:
            return cls.pass_move()
        rank = cards[0].rank
        return cls(
            move_type=MoveType.SINGLE if len(cards) == 1 else MoveType.SET,
            cards=tuple(cards),
            rank=rank,
            strength=strength(rank, is_revolution),
        )

    @property
    def is_pass(self) -> bool:
        return self.move_type == MoveType.PASS

    @property
    def count(self) -> int:
        return len(self.cards)

    @property
    def has_eight(self) -> bool:
        return any(c.rank == EIGHT for c in self.cards)

    def __len__(self) -> int:
        return len(self.cards)


def group_by_rank(hand: Sequence[Card]) -> Dict[int, List[Card]]:
    """按点数分组，保持手牌中的出现顺序"""
    groups: Dict[int, List[Card]] = {}
    for card in hand:
        groups.setdefault(card.rank, []).append(card)
    return groups


class MoveGenerator:
    """
    合法出牌生成器

    根据手牌与场上的牌生成所有候选出牌 (含 PASS)
    """

    def __init__(
        self,
        hand: Sequence[Card],
        field: Sequence[Card] = (),
        is_revolution: bool = False,
    ):
        """
        Args:
            hand: 手牌
            field: 场上的牌 (空表示自由出牌)
            is_revolution: 是否处于革命状态
        """
        self.hand = list(hand)
        self.field = list(field)
        self.is_revolution = is_revolution
        self.groups = group_by_rank(self.hand)

    def generate(self) -> List[Move]:
        """
        生成所有候选出牌

        Returns:
            出牌列表，第一个总是 PASS
        """
        moves = [Move.pass_move()]
        if self.field:
            moves.extend(self.gen_responses())
        else:
            moves.extend(self.gen_leads())
        return moves

    def gen_leads(self) -> List[Move]:
        """场上为空: 每个点数组生成 1..k 张的出牌，使用该组前 n 张"""
        moves = []
        for rank, cards in self.groups.items():
            rank_strength = strength(rank, self.is_revolution)
            for n in range(1, len(cards) + 1):
                moves.append(self._make(cards[:n], rank, rank_strength))
        return moves

    def gen_responses(self) -> List[Move]:
        """跟牌: 张数必须与场上相同，且强度严格更高"""
        req_count = len(self.field)
        min_strength = strength(self.field[0].rank, self.is_revolution)

        moves = []
        for rank, cards in self.groups.items():
            rank_strength = strength(rank, self.is_revolution)
            if len(cards) >= req_count and rank_strength > min_strength:
                moves.append(self._make(cards[:req_count], rank, rank_strength))
        return moves

    @staticmethod
    def _make(cards: List[Card], rank: int, rank_strength: int) -> Move:
        return Move(
            move_type=MoveType.SINGLE if len(cards) == 1 else MoveType.SET,
            cards=tuple(cards),
            rank=rank,
            strength=rank_strength,
        )
