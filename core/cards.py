"""
牌的定义与编码

大富豪使用 52 张牌 (无王)：
- 4 种花色 × 13 种点数
- 点数 1 = A, 11/12/13 = J/Q/K
- 强弱: 3 < 4 < ... < K < A < 2，革命时反转
"""
from enum import Enum
from dataclasses import dataclass
from typing import List, Tuple, Dict, Iterable, Optional
import numpy as np


class Suit(Enum):
    """花色"""
    SPADE = 's'
    HEART = 'h'
    DIAMOND = 'd'
    CLUB = 'c'


SUITS: Tuple[Suit, ...] = (Suit.SPADE, Suit.HEART, Suit.DIAMOND, Suit.CLUB)

RANKS: Tuple[int, ...] = tuple(range(1, 14))

ACE = 1
TWO = 2
THREE = 3
EIGHT = 8

# 最大强度值 (2 的强度)
MAX_STRENGTH = 13

SUIT_TO_SYMBOL: Dict[Suit, str] = {
    Suit.SPADE: '♠',
    Suit.HEART: '♥',
    Suit.DIAMOND: '♦',
    Suit.CLUB: '♣',
}

RANK_TO_STR: Dict[int, str] = {
    1: 'A', 2: '2', 3: '3', 4: '4', 5: '5', 6: '6', 7: '7',
    8: '8', 9: '9', 10: '10', 11: 'J', 12: 'Q', 13: 'K',
}

STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}

STR_TO_SUIT: Dict[str, Suit] = {s.value: s for s in SUITS}

# 点数到数组列索引的映射 (按基础强度排列: 3 -> 0, K -> 10, A -> 11, 2 -> 12)
RANK_TO_COLUMN: Dict[int, int] = {
    3: 0, 4: 1, 5: 2, 6: 3, 7: 4, 8: 5, 9: 6,
    10: 7, 11: 8, 12: 9, 13: 10, 1: 11, 2: 12
}


def strength(rank: int, is_revolution: bool = False) -> int:
    """
    点数的强度 (0-13)

    基础顺序: base(3)=0 ... base(K)=10, base(A)=12, base(2)=13
    革命时: 13 - base

    Args:
        rank: 点数 1-13 (由调用方保证范围)
        is_revolution: 是否处于革命状态

    Returns:
        强度值
    """
    if rank == ACE:
        base = 12
    elif rank == TWO:
        base = 13
    else:
        base = rank - 3

    if is_revolution:
        return MAX_STRENGTH - base
    return base


@dataclass(frozen=True, slots=True)
class Card:
    """
    不可变的单张牌

    Attributes:
        suit: 花色
        rank: 点数 1-13
    """
    suit: Suit
    rank: int

    def strength(self, is_revolution: bool = False) -> int:
        return strength(self.rank, is_revolution)

    def __str__(self) -> str:
        return card_to_str(self)


# 完整牌组 (52 张，按花色 s/h/d/c、点数 1-13 排列)
FULL_DECK: Tuple[Card, ...] = tuple(
    Card(suit, rank) for suit in SUITS for rank in RANKS
)

DIAMOND_THREE = Card(Suit.DIAMOND, THREE)


class Deck:
    """
    一副牌

    每局新建，发牌为破坏性抽取
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cards: List[Card] = list(FULL_DECK)

    def shuffle(self) -> None:
        """就地洗牌"""
        order = self.rng.permutation(len(self.cards))
        self.cards = [self.cards[i] for i in order]

    def deal(self, count: int) -> List[Card]:
        """
        从牌堆顶部抽取若干张

        Args:
            count: 张数

        Returns:
            抽到的牌 (已从牌堆移除)
        """
        if count > len(self.cards):
            raise ValueError(f"Cannot deal {count} cards, only {len(self.cards)} left")
        dealt = self.cards[:count]
        del self.cards[:count]
        return dealt

    def __len__(self) -> int:
        return len(self.cards)


def card_to_str(card: Card) -> str:
    """如 '♠3', '♥A'"""
    return SUIT_TO_SYMBOL[card.suit] + RANK_TO_STR[card.rank]


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "♠3 ♥3 ♣8"，空列表返回 "Pass"
    """
    cards = list(cards)
    if not cards:
        return "Pass"
    return ' '.join(card_to_str(c) for c in cards)


def str_to_cards(s: str) -> List[Card]:
    """
    将紧凑字符串转换为牌列表

    Args:
        s: 空格分隔的 "点数+花色"，如 "3s 3h 10c Ad"

    Returns:
        牌列表
    """
    cards = []
    for token in s.split():
        rank_str, suit_str = token[:-1].upper(), token[-1].lower()
        if rank_str not in STR_TO_RANK or suit_str not in STR_TO_SUIT:
            raise ValueError(f"Unknown card token: {token!r}")
        cards.append(Card(STR_TO_SUIT[suit_str], STR_TO_RANK[rank_str]))
    return cards


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 52 维 one-hot 向量

    编码方式: 4 (花色) × 13 (按基础强度排列的点数)，按行展开

    Args:
        cards: 牌列表

    Returns:
        52 维 numpy 数组
    """
    matrix = np.zeros((4, 13), dtype=np.float32)
    for card in cards:
        matrix[SUITS.index(card.suit), RANK_TO_COLUMN[card.rank]] = 1
    return matrix.flatten()
