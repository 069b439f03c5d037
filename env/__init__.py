"""
Environment Layer - Gymnasium 兼容环境

Modules:
    daifugo_env: 主环境类
    observation: 观测与动作编码
    reward: 奖励函数
"""
from .daifugo_env import (
    DaifugoEnv,
    ExternalAgent,
    make_env,
)

from .observation import (
    Observation,
    ObservationBuilder,
    MoveEncoder,
    get_move_encoder,
    NUM_ACTIONS,
)

from .reward import (
    RewardConfig,
    RewardCalculator,
)

__all__ = [
    # env
    "DaifugoEnv",
    "ExternalAgent",
    "make_env",
    # observation
    "Observation",
    "ObservationBuilder",
    "MoveEncoder",
    "get_move_encoder",
    "NUM_ACTIONS",
    # reward
    "RewardConfig",
    "RewardCalculator",
]
