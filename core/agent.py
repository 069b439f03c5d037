"""
决策提供者接口

GameMaster 只依赖这个接口；具体实现 (启发式 AI、人类输入) 在 ai 层
"""
from typing import List, Optional

from .actions import Move
from .cards import Card
from .state import PlayerView


class Agent:
    """决策提供者基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def select_move(self, view: PlayerView) -> Optional[Move]:
        """选择出牌，返回 None 表示等待外部输入"""
        raise NotImplementedError

    def select_exchange(self, view: PlayerView, count: int) -> Optional[List[Card]]:
        """选择换出的牌，返回 None 表示等待外部输入"""
        raise NotImplementedError

    def reset(self):
        """重置状态"""
        pass
