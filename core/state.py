"""
游戏状态定义

- Hand: 手牌的独占容器，出牌/换牌都是原子的"先移除再加入"
- Player: 座位信息 + 手牌 + 名次
- RoundState: 单局状态 (每局重新初始化)
- PlayerView: 玩家决策时可见的信息 (不含其他人的手牌)
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from enum import Enum

from .cards import Card, cards_to_str, strength
from .config import AIParams, CharacterSpec
from .errors import MalformedCharacterDataError


class Phase(Enum):
    """局面阶段"""
    DEALING = "dealing"          # 发牌
    EXCHANGING = "exchanging"    # 换牌 (第二局起)
    PLAYING = "playing"          # 出牌
    ROUND_OVER = "round_over"    # 本局结束


class GameEvent(Enum):
    """通知渲染层的事件类型"""
    DEAL = "deal"
    EXCHANGE = "exchange"
    PLAY = "play"
    PASS = "pass"
    REVOLUTION = "revolution"
    FIELD_CLEAR = "field_clear"
    FINISH = "finish"
    ROUND_OVER = "round_over"
    REJECTED = "rejected"


# 名次称号
RANK_TITLES: Dict[int, str] = {
    1: "Daifugo",
    2: "Fugo",
    3: "Hinmin",
    4: "Daihinmin",
}


class Hand:
    """
    手牌容器

    一张牌只能属于一个 Hand；移除后不能再出现在同一手牌中，
    除非通过 add 重新转入
    """

    def __init__(self, cards: Iterable[Card] = ()):
        self._cards: List[Card] = []
        self.add(cards)

    def add(self, cards: Iterable[Card]) -> None:
        """加入牌，重复的牌会被拒绝"""
        cards = list(cards)
        if len(set(cards)) != len(cards):
            raise ValueError(f"Duplicate cards in transfer: {cards_to_str(cards)}")
        owned = set(self._cards)
        for card in cards:
            if card in owned:
                raise ValueError(f"Card {card} is already in this hand")
        self._cards.extend(cards)

    def remove(self, cards: Iterable[Card]) -> List[Card]:
        """
        原子移除: 要么全部移除，要么不变

        Args:
            cards: 要移除的牌

        Returns:
            被移除的牌
        """
        cards = list(cards)
        if not self.contains(cards):
            raise ValueError(f"Hand does not hold all of: {cards_to_str(cards)}")
        removing = set(cards)
        self._cards = [c for c in self._cards if c not in removing]
        return cards

    def contains(self, cards: Iterable[Card]) -> bool:
        """检查牌都在手中且不重复"""
        cards = list(cards)
        if len(set(cards)) != len(cards):
            return False
        owned = set(self._cards)
        return all(c in owned for c in cards)

    def rank_count(self, rank: int) -> int:
        return sum(1 for c in self._cards if c.rank == rank)

    def sort(self, is_revolution: bool = False) -> None:
        """按强度升序稳定排序"""
        self._cards.sort(key=lambda c: strength(c.rank, is_revolution))

    def clear(self) -> None:
        self._cards = []

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(tuple(self._cards))

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card: Card) -> bool:
        return card in self._cards

    def __repr__(self) -> str:
        return f"Hand({cards_to_str(self._cards)})"


@dataclass
class Player:
    """
    座位

    Attributes:
        seat: 座位号 (0 = 人类，1-3 = AI，按出牌顺序)
        name: 名字
        is_ai: 是否 AI
        params: AI 参数 (AI 座位缺省时使用默认值)
        hand: 手牌
        has_passed: 本轮是否已过
        finish_rank: 本局名次 (0 = 仍在出牌)
        rank_history: 历局名次
    """
    seat: int
    name: str
    is_ai: bool = False
    params: Optional[AIParams] = None
    hand: Hand = field(default_factory=Hand)
    has_passed: bool = False
    finish_rank: int = 0
    rank_history: List[int] = field(default_factory=list)

    def __post_init__(self):
        if self.is_ai and self.params is None:
            self.params = AIParams()

    @property
    def is_finished(self) -> bool:
        return self.finish_rank > 0

    @property
    def last_rank(self) -> int:
        """上一局名次 (0 表示还没有完成过的局)"""
        return self.rank_history[-1] if self.rank_history else 0

    def sort_hand(self, is_revolution: bool = False) -> None:
        self.hand.sort(is_revolution)


@dataclass
class RoundState:
    """
    单局状态

    Attributes:
        field_cards: 场上的牌 (同点数)
        is_revolution: 革命状态
        consecutive_passes: 连续过牌数
        turn_index: 当前行动座位
        finish_order: 出完牌的座位顺序
        round_number: 局数 (从 1 开始)
        last_player: 最近出牌的座位
    """
    field_cards: Tuple[Card, ...] = ()
    is_revolution: bool = False
    consecutive_passes: int = 0
    turn_index: int = 0
    finish_order: List[int] = field(default_factory=list)
    round_number: int = 0
    last_player: Optional[int] = None

    def clear_field(self) -> None:
        self.field_cards = ()
        self.consecutive_passes = 0


@dataclass(frozen=True)
class PlayerView:
    """
    玩家决策视角

    只包含自己的手牌与公开信息 (场上的牌、各家剩余张数、名次)
    """
    seat: int
    hand: Tuple[Card, ...]
    field_cards: Tuple[Card, ...]
    is_revolution: bool
    cards_left: Tuple[int, ...]
    finish_ranks: Tuple[int, ...]
    last_ranks: Tuple[int, ...]
    params: Optional[AIParams] = None


@dataclass(frozen=True)
class GameSnapshot:
    """渲染层使用的状态快照"""
    phase: Phase
    round_number: int
    turn_index: int
    field_cards: Tuple[Card, ...]
    is_revolution: bool
    consecutive_passes: int
    hands: Tuple[Tuple[Card, ...], ...]
    finish_order: Tuple[int, ...]
    finish_ranks: Tuple[int, ...]
    detail: Dict[str, object] = field(default_factory=dict)

    @property
    def hand_sizes(self) -> Tuple[int, ...]:
        return tuple(len(h) for h in self.hands)


def create_players(
    characters: Dict[str, CharacterSpec],
    opponent_ids: List[str],
    player_id: str = "player",
) -> List[Player]:
    """
    创建四个座位

    座位 0 固定为人类玩家，1-3 按 opponent_ids 顺序 (即出牌顺序)

    Args:
        characters: load_characters 的结果
        opponent_ids: 三个对手的角色 ID
        player_id: 人类玩家的角色 ID

    Returns:
        玩家列表 (按座位号)
    """
    if len(opponent_ids) != 3:
        raise MalformedCharacterDataError(
            f"Exactly 3 opponents are required, got {len(opponent_ids)}"
        )

    missing = [cid for cid in [player_id, *opponent_ids] if cid not in characters]
    if missing:
        raise MalformedCharacterDataError(f"Unknown character ids: {missing}")

    human = characters[player_id]
    players = [Player(seat=0, name=human.name, is_ai=False, params=human.params)]

    for idx, char_id in enumerate(opponent_ids):
        spec = characters[char_id]
        players.append(Player(seat=idx + 1, name=spec.name, is_ai=True, params=spec.params))

    return players
