"""
对战竞技场

四个 AI 角色连续对局 (含局间换牌)，统计名次
"""
from typing import Dict, List, Optional, Mapping, Sequence
from dataclasses import dataclass
import logging
import numpy as np

from ai.agents import HeuristicAgent
from core.config import AIParams, CharacterSpec, GameConfig
from core.game import GameMaster
from core.rules import RuleEngine
from core.state import GameEvent, GameSnapshot, Player

from .metrics import MatchResult, MetricsCollector

logger = logging.getLogger(__name__)


@dataclass
class TournamentResult:
    """锦标赛结果"""
    standings: Dict[str, Dict[str, float]]
    summary: Dict[str, float]
    total_games: int
    matches: List[MatchResult]

    def get_ranking(self) -> List[tuple]:
        """按平均名次排序"""
        return sorted(
            [(name, stats["avg_rank"]) for name, stats in self.standings.items()],
            key=lambda x: x[1],
        )

    def __repr__(self) -> str:
        lines = [f"Tournament Results ({self.total_games} games):"]
        for i, (name, avg_rank) in enumerate(self.get_ranking()):
            lines.append(f"  {i+1}. {name}: avg rank {avg_rank:.2f}")
        return "\n".join(lines)


class _EventCounter:
    """统计单局中的事件"""

    def __init__(self):
        self.reset()

    def reset(self):
        self.revolutions = 0
        self.eight_cuts = 0
        self.plays = 0
        self.passes = 0

    def __call__(self, event: GameEvent, snapshot: GameSnapshot):
        if event == GameEvent.PLAY:
            self.plays += 1
            if RuleEngine.triggers_eight_cut(snapshot.detail.get("cards", ())):
                self.eight_cuts += 1
        elif event == GameEvent.PASS:
            self.passes += 1
        elif event == GameEvent.REVOLUTION:
            self.revolutions += 1


class Arena:
    """
    对战竞技场

    每个会话随机排座，然后连续进行若干局
    """

    def __init__(
        self,
        entrants: Mapping[str, AIParams],
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            entrants: 角色名 -> AI 参数 (需要与玩家数一致)
            config: 牌局配置
            seed: 随机种子
        """
        self.config = config or GameConfig()
        if len(entrants) != self.config.num_players:
            raise ValueError(
                f"Arena needs exactly {self.config.num_players} entrants, got {len(entrants)}"
            )
        self.entrants = dict(entrants)
        self.rng = np.random.default_rng(seed if seed is not None else self.config.seed)

    @classmethod
    def from_characters(
        cls,
        characters: Mapping[str, CharacterSpec],
        ids: Sequence[str],
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
    ) -> "Arena":
        """按角色 id 组建竞技场，统计以角色名为键，所以名字不能重复"""
        unknown = [cid for cid in ids if cid not in characters]
        if unknown:
            raise ValueError(f"Unknown character ids: {unknown}")

        entrants: Dict[str, AIParams] = {}
        for cid in ids:
            spec = characters[cid]
            if spec.name in entrants:
                raise ValueError(f"Duplicate entrant name: {spec.name} ({cid})")
            entrants[spec.name] = spec.params
        return cls(entrants, config=config, seed=seed)

    def _build_game(self, seating: List[str]) -> GameMaster:
        players = []
        agents = {}
        for seat, name in enumerate(seating):
            params = self.entrants[name]
            players.append(Player(seat=seat, name=name, is_ai=True, params=params))
            agents[seat] = HeuristicAgent(params, rng=self.rng, name=name)
        return GameMaster(players, agents=agents, config=self.config, rng=self.rng)

    def play_session(self, n_rounds: int, session: int = 0) -> List[MatchResult]:
        """
        进行一个会话

        Args:
            n_rounds: 局数
            session: 会话编号

        Returns:
            每局结果
        """
        names = list(self.entrants)
        seating = [names[i] for i in self.rng.permutation(len(names))]
        gm = self._build_game(seating)
        counter = _EventCounter()
        gm.add_listener(counter)

        results = []
        for _ in range(n_rounds):
            counter.reset()
            ranking = gm.play_round()
            results.append(MatchResult(
                session=session,
                round_number=gm.round_count,
                ranking=tuple(p.name for p in ranking),
                revolutions=counter.revolutions,
                eight_cuts=counter.eight_cuts,
                plays=counter.plays,
                passes=counter.passes,
            ))
        return results

    def run(self, n_sessions: int = 10, rounds_per_session: int = 5) -> TournamentResult:
        """
        多个会话的锦标赛

        Returns:
            锦标赛结果
        """
        collector = MetricsCollector(self.config.num_players)

        for session in range(n_sessions):
            for result in self.play_session(rounds_per_session, session):
                collector.add_result(result)
            logger.info(f"Session {session + 1}/{n_sessions} done")

        return TournamentResult(
            standings={name: collector.compute_metrics(name) for name in self.entrants},
            summary=collector.compute_metrics(),
            total_games=len(collector.results),
            matches=list(collector.results),
        )
