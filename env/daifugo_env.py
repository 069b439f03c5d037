"""
大富豪 Gymnasium 环境

智能体控制座位 0，其余座位由启发式 AI 同步行动
"""
from typing import Dict, Any, Tuple, Optional, List, Sequence
import logging
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from ai.agents import HeuristicAgent, HumanAgent
from core.cards import Card, cards_to_str
from core.config import AIParams, GameConfig
from core.errors import InvalidMoveError
from core.exchange import select_weakest
from core.game import GameMaster
from core.state import Phase, Player, PlayerView, RANK_TITLES

from .observation import ObservationBuilder, MoveEncoder, get_move_encoder, NUM_ACTIONS
from .reward import RewardCalculator, RewardConfig

logger = logging.getLogger(__name__)


class ExternalAgent(HumanAgent):
    """出牌由 step() 提交；换牌自动交出最弱的牌"""

    def select_exchange(self, view: PlayerView, count: int) -> Optional[List[Card]]:
        return select_weakest(view.hand, count)


class DaifugoEnv(gym.Env):
    """
    大富豪 Gymnasium 环境

    一个 episode 是一局；同一会话内连续 reset 会带着上一局名次进入换牌。

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "Daifugo-v0",
    }

    AGENT_SEAT = 0

    def __init__(
        self,
        render_mode: Optional[str] = None,
        opponent_params: Optional[Sequence[AIParams]] = None,
        config: Optional[GameConfig] = None,
        reward_config: Optional[RewardConfig] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            render_mode: 渲染模式 ("human", "ansi", None)
            opponent_params: 三个 AI 的参数 (默认参数)
            config: 牌局配置
            reward_config: 奖励配置
            seed: 随机种子
        """
        super().__init__()

        self.render_mode = render_mode
        self._seed = seed
        self._config = config or GameConfig()
        self._opponent_params = list(opponent_params or [AIParams()] * (self._config.num_players - 1))
        if len(self._opponent_params) != self._config.num_players - 1:
            raise ValueError(f"Need {self._config.num_players - 1} opponent params")

        self._obs_builder = ObservationBuilder(self._config.num_players, self._config.hand_size)
        self._move_encoder: MoveEncoder = get_move_encoder()
        self._reward_calculator = RewardCalculator(reward_config)

        self._gm: Optional[GameMaster] = None

        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        n = self._config.num_players
        self.action_space = spaces.Discrete(NUM_ACTIONS)
        self.observation_space = spaces.Dict({
            "hand": spaces.Box(0, 1, shape=(52,), dtype=np.float32),
            "field": spaces.Box(0, 1, shape=(52,), dtype=np.float32),
            "revolution": spaces.Box(0, 1, shape=(1,), dtype=np.float32),
            "cards_left": spaces.Box(0, 1, shape=(n,), dtype=np.float32),
            "finish_ranks": spaces.Box(0, 1, shape=(n,), dtype=np.float32),
            "position": spaces.Box(0, 1, shape=(n,), dtype=np.float32),
        })

    def _new_session(self, seed: Optional[int]) -> GameMaster:
        rng = np.random.default_rng(seed)
        players = [Player(seat=0, name="player", is_ai=False)]
        agents = {0: ExternalAgent("player")}
        for idx, params in enumerate(self._opponent_params):
            seat = idx + 1
            players.append(Player(seat=seat, name=f"cpu{seat}", is_ai=True, params=params))
            agents[seat] = HeuristicAgent(params, rng=rng, name=f"cpu{seat}")
        return GameMaster(players, agents=agents, config=self._config, rng=rng)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        开始新的一局

        传入 seed、首次调用或上一局未结束时，开始新的会话 (不换牌)
        """
        super().reset(seed=seed)

        game_seed = seed if seed is not None else self._seed
        if (
            self._gm is None
            or seed is not None
            or self._gm.phase not in (Phase.DEALING, Phase.ROUND_OVER)
        ):
            self._gm = self._new_session(game_seed)

        self._gm.start_round()
        self._gm.advance()

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: int,
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行座位 0 的动作，然后让 AI 座位行动直到再次轮到座位 0 或本局结束
        """
        if self._gm is None:
            raise RuntimeError("Environment not reset. Call reset() first.")
        if self._gm.phase == Phase.ROUND_OVER:
            raise RuntimeError("Round is over. Call reset() first.")

        seat = self.AGENT_SEAT
        legal = self._move_encoder.get_legal_action_indices(self._gm.legal_moves(seat))
        if int(action) not in legal:
            logger.debug(f"Illegal action {action}, legal: {legal}")
            obs = self._build_observation()
            info = self._build_info()
            info["error"] = f"Invalid action {action}"
            return obs, self._reward_calculator.invalid(), False, False, info

        view = self._gm.view_for(seat)
        move = self._move_encoder.to_move(int(action), view.hand, view.is_revolution)
        try:
            if move.is_pass:
                self._gm.submit_pass(seat)
            else:
                self._gm.submit_move(seat, move.cards)
        except InvalidMoveError as e:
            obs = self._build_observation()
            info = self._build_info()
            info["error"] = str(e)
            return obs, self._reward_calculator.invalid(), False, False, info

        self._gm.advance()

        terminated = self._gm.phase == Phase.ROUND_OVER
        reward = self._reward_calculator.compute(
            self._gm.players[seat].finish_rank, terminated
        )

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, False, info

    def _build_observation(self) -> Dict[str, np.ndarray]:
        view = self._gm.view_for(self.AGENT_SEAT)
        return self._obs_builder.build(view).to_dict()

    def _build_info(self) -> Dict[str, Any]:
        gm = self._gm
        info: Dict[str, Any] = {
            "phase": gm.phase.value,
            "round": gm.round_count,
            "current_player": gm.state.turn_index,
            "is_revolution": gm.state.is_revolution,
            "finish_ranks": tuple(p.finish_rank for p in gm.players),
        }

        if gm.phase == Phase.PLAYING:
            legal_moves = gm.legal_moves(self.AGENT_SEAT)
            info["legal_moves"] = legal_moves
            info["legal_action_mask"] = self._move_encoder.build_legal_mask(legal_moves)
            info["legal_action_indices"] = self._move_encoder.get_legal_action_indices(legal_moves)

        if gm.phase == Phase.ROUND_OVER:
            info["ranking"] = tuple(gm.state.finish_order)

        return info

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode == "ansi" or self.render_mode == "human":
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        gm = self._gm
        lines = []
        lines.append("=" * 50)
        lines.append(f"Round {gm.round_count} | Phase: {gm.phase.value}")
        lines.append(f"Revolution: {'ON' if gm.state.is_revolution else 'off'}")
        lines.append(f"Field: {cards_to_str(gm.state.field_cards) if gm.state.field_cards else '-'}")

        for player in gm.players:
            marker = ">" if player.seat == gm.state.turn_index else " "
            if player.seat == self.AGENT_SEAT:
                hand_str = cards_to_str(player.hand.cards) if len(player.hand) else "-"
            else:
                hand_str = f"[{len(player.hand)} cards]"
            rank = f" ({RANK_TITLES[player.finish_rank]})" if player.finish_rank else ""
            lines.append(f"{marker} {player.name}: {hand_str}{rank}")

        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    def close(self):
        """关闭环境"""
        pass

    @property
    def game(self) -> Optional[GameMaster]:
        """当前主控 (用于调试)"""
        return self._gm

    def sample_action(self) -> int:
        """随机采样一个合法动作"""
        indices = self._move_encoder.get_legal_action_indices(
            self._gm.legal_moves(self.AGENT_SEAT)
        )
        return int(self.np_random.choice(indices))


def make_env(env_id: str = "Daifugo-v0", **kwargs) -> DaifugoEnv:
    """
    工厂函数：创建环境

    Args:
        env_id: 环境 ID
        **kwargs: 环境参数

    Returns:
        DaifugoEnv 实例
    """
    return DaifugoEnv(**kwargs)
