"""
观察空间编码

将玩家视角 (PlayerView) 转换为 numpy 特征；只使用公开信息与自己的手牌
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
import numpy as np

from core.actions import Move, MoveType
from core.cards import Card, RANKS, cards_to_array, strength
from core.state import PlayerView


# 0 = PASS, 1 + (rank - 1) * 4 + (count - 1)
MAX_SET_SIZE = 4
NUM_ACTIONS = 1 + len(RANKS) * MAX_SET_SIZE


@dataclass
class Observation:
    """
    结构化观测

    Attributes:
        hand: 自己的手牌 (52,)
        field: 场上的牌 (52,)
        revolution: 革命标志 (1,)
        cards_left: 各座位剩余张数 / 13 (4,)
        finish_ranks: 各座位本局名次 / 4 (4,)
        position: 自己的座位 one-hot (4,)
        legal_moves: 合法出牌
    """
    hand: np.ndarray
    field: np.ndarray
    revolution: np.ndarray
    cards_left: np.ndarray
    finish_ranks: np.ndarray
    position: np.ndarray
    legal_moves: List[Move]

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "hand": self.hand,
            "field": self.field,
            "revolution": self.revolution,
            "cards_left": self.cards_left,
            "finish_ranks": self.finish_ranks,
            "position": self.position,
        }

    def to_flat_array(self) -> np.ndarray:
        return np.concatenate([
            self.hand,
            self.field,
            self.revolution,
            self.cards_left,
            self.finish_ranks,
            self.position,
        ])


class MoveEncoder:
    """
    出牌 <-> 动作索引

    同点数的牌在合法性上可以互换，所以动作只编码 (点数, 张数)
    """

    num_actions = NUM_ACTIONS

    def encode(self, move: Move) -> int:
        if move.is_pass:
            return 0
        return 1 + (move.rank - 1) * MAX_SET_SIZE + (move.count - 1)

    def decode(self, index: int) -> Optional[tuple]:
        """
        Returns:
            (rank, count)，PASS 返回 None
        """
        if not 0 <= index < self.num_actions:
            raise ValueError(f"Invalid action index: {index}. Valid range: 0-{self.num_actions - 1}")
        if index == 0:
            return None
        rank = (index - 1) // MAX_SET_SIZE + 1
        count = (index - 1) % MAX_SET_SIZE + 1
        return rank, count

    def to_move(
        self,
        index: int,
        hand: Sequence[Card],
        is_revolution: bool = False,
    ) -> Move:
        """
        在手牌中取该点数的前 count 张构造出牌

        Raises:
            ValueError: 手牌中该点数不足
        """
        decoded = self.decode(index)
        if decoded is None:
            return Move.pass_move()
        rank, count = decoded
        cards = [c for c in hand if c.rank == rank][:count]
        if len(cards) < count:
            raise ValueError(f"Hand holds fewer than {count} cards of rank {rank}")
        return Move(
            move_type=MoveType.SINGLE if count == 1 else MoveType.SET,
            cards=tuple(cards),
            rank=rank,
            strength=strength(rank, is_revolution),
        )

    def build_legal_mask(self, moves: Sequence[Move]) -> np.ndarray:
        mask = np.zeros(self.num_actions, dtype=np.int8)
        for move in moves:
            mask[self.encode(move)] = 1
        return mask

    def get_legal_action_indices(self, moves: Sequence[Move]) -> List[int]:
        return [self.encode(m) for m in moves]


class ObservationBuilder:
    """
    观测构建器

    只接受 PlayerView，不会读到其他座位的手牌
    """

    def __init__(self, num_players: int = 4, hand_size: int = 13):
        self.num_players = num_players
        self.hand_size = hand_size

    def build(self, view: PlayerView, legal_moves: Sequence[Move] = ()) -> Observation:
        position = np.zeros(self.num_players, dtype=np.float32)
        position[view.seat] = 1

        return Observation(
            hand=cards_to_array(view.hand),
            field=cards_to_array(view.field_cards),
            revolution=np.array([float(view.is_revolution)], dtype=np.float32),
            cards_left=np.array(view.cards_left, dtype=np.float32) / self.hand_size,
            finish_ranks=np.array(view.finish_ranks, dtype=np.float32) / self.num_players,
            position=position,
            legal_moves=list(legal_moves),
        )


_encoder: Optional[MoveEncoder] = None


def get_move_encoder() -> MoveEncoder:
    """获取全局编码器"""
    global _encoder
    if _encoder is None:
        _encoder = MoveEncoder()
    return _encoder
