"""
AI Layer - 启发式出牌 AI

Modules:
    scorer: 出牌评估函数
    agents: 决策提供者 (AI / 人类 / 随机)
"""
from core.config import AIParams

from .scorer import (
    MoveScorer,
    NOISE_SCALE,
    FINISH_BONUS,
    TRUMP_STRENGTH,
)

from .agents import (
    Agent,
    HumanAgent,
    HeuristicAgent,
    RandomAgent,
    select_weakest,
    select_strongest,
    default_agents,
)

__all__ = [
    # params
    "AIParams",
    # scorer
    "MoveScorer",
    "NOISE_SCALE",
    "FINISH_BONUS",
    "TRUMP_STRENGTH",
    # agents
    "Agent",
    "HumanAgent",
    "HeuristicAgent",
    "RandomAgent",
    "select_weakest",
    "select_strongest",
    "default_agents",
]
