"""
换牌 (第二局起)

根据上一局名次:
- 大贫民 (4) 交出最强 2 张给大富豪 (1)，大富豪自选 2 张还给大贫民
- 贫民 (3) 交出最强 1 张给富豪 (2)，富豪自选 1 张还给贫民

所有选择都基于换牌前的手牌，四次转移一次性完成
"""
from dataclasses import dataclass
from typing import Dict, List, Sequence
import logging

from .cards import Card, cards_to_str, strength
from .errors import ExchangeSelectionCountError, InvalidMoveError
from .rules import RuleEngine
from .state import Player

logger = logging.getLogger(__name__)


def select_weakest(hand: Sequence[Card], count: int) -> List[Card]:
    """按基础强度 (不考虑革命) 升序稳定排序，取最弱的 count 张"""
    if count <= 0:
        return []
    ordered = sorted(hand, key=lambda c: strength(c.rank, False))
    return ordered[:count]


def select_strongest(hand: Sequence[Card], count: int) -> List[Card]:
    """按基础强度升序稳定排序，取最强的 count 张"""
    if count <= 0:
        return []
    ordered = sorted(hand, key=lambda c: strength(c.rank, False))
    return ordered[-count:]


@dataclass(frozen=True)
class Transfer:
    """
    一次单向转移

    Attributes:
        giver: 交出方座位
        receiver: 接收方座位
        count: 张数
        forced: True 表示强制交出最强牌，False 表示由交出方自选
    """
    giver: int
    receiver: int
    count: int
    forced: bool


def plan_exchange(players: Sequence[Player]) -> List[Transfer]:
    """
    根据上一局名次生成换牌计划

    名次不完整 (如第一局) 时返回空列表
    """
    by_rank: Dict[int, Player] = {p.last_rank: p for p in players if p.last_rank}
    if not all(r in by_rank for r in (1, 2, 3, 4)):
        return []

    top, second, third, bottom = (by_rank[r].seat for r in (1, 2, 3, 4))
    return [
        Transfer(giver=bottom, receiver=top, count=RuleEngine.exchange_count(4), forced=True),
        Transfer(giver=third, receiver=second, count=RuleEngine.exchange_count(3), forced=True),
        Transfer(giver=top, receiver=bottom, count=RuleEngine.exchange_count(1), forced=False),
        Transfer(giver=second, receiver=third, count=RuleEngine.exchange_count(2), forced=False),
    ]


class ExchangeResolver:
    """
    收集换牌选择并一次性执行

    强制部分在创建时立即确定；自选部分由 submit 提交 (AI 或外部输入)
    """

    def __init__(self, players: Sequence[Player]):
        self.players = {p.seat: p for p in players}
        self.transfers = plan_exchange(players)
        self.selections: Dict[int, List[Card]] = {}

        for t in self.transfers:
            if t.forced:
                giver = self.players[t.giver]
                self.selections[t.giver] = select_strongest(list(giver.hand), t.count)

    @property
    def is_needed(self) -> bool:
        return bool(self.transfers)

    @property
    def pending_seats(self) -> List[int]:
        """尚未提交自选牌的座位"""
        return [
            t.giver for t in self.transfers
            if not t.forced and t.giver not in self.selections
        ]

    @property
    def is_complete(self) -> bool:
        return all(t.giver in self.selections for t in self.transfers)

    def required_count(self, seat: int) -> int:
        for t in self.transfers:
            if t.giver == seat and not t.forced:
                return t.count
        return 0

    def submit(self, seat: int, cards: Sequence[Card]) -> None:
        """
        提交自选换出的牌

        Raises:
            InvalidMoveError: 该座位不需要选择，或牌不在手中
            ExchangeSelectionCountError: 张数不对
        """
        if seat not in self.pending_seats:
            raise InvalidMoveError(f"Seat {seat} has no pending exchange selection", seat)

        cards = list(cards)
        expected = self.required_count(seat)
        if len(cards) != expected:
            raise ExchangeSelectionCountError(expected, len(cards), seat)

        if not self.players[seat].hand.contains(cards):
            raise InvalidMoveError(
                f"Seat {seat} does not hold {cards_to_str(cards)}", seat
            )

        self.selections[seat] = cards

    def apply(self) -> List[Transfer]:
        """
        执行全部转移: 先全部移除，再全部加入，最后整理手牌

        Returns:
            已执行的转移
        """
        if not self.is_complete:
            raise RuntimeError(f"Exchange incomplete, waiting for seats {self.pending_seats}")

        for t in self.transfers:
            if not self.players[t.giver].hand.contains(self.selections[t.giver]):
                raise RuntimeError(f"Seat {t.giver} no longer holds its exchange cards")

        for t in self.transfers:
            self.players[t.giver].hand.remove(self.selections[t.giver])
        for t in self.transfers:
            self.players[t.receiver].hand.add(self.selections[t.giver])
            logger.info(
                f"Exchange: {self.players[t.giver].name} -> {self.players[t.receiver].name} "
                f"({cards_to_str(self.selections[t.giver])})"
            )

        for player in self.players.values():
            player.sort_hand()

        return list(self.transfers)
