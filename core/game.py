"""
游戏主控 (回合状态机)

DEALING -> EXCHANGING (第二局起) -> PLAYING -> ROUND_OVER

单线程、逐座位推进。AI 座位的决策同步完成；人类座位的决策提供者返回 None 时，
advance() 停在当前位置，等待 submit_move / submit_pass / submit_exchange，
之后再次调用 advance() 继续。挂起期间没有其他状态变更。
"""
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple
import logging
import numpy as np

from .actions import Move, MoveGenerator
from .agent import Agent
from .cards import Card, Deck, DIAMOND_THREE, cards_to_str
from .config import GameConfig
from .errors import DaifugoError, InvalidMoveError
from .exchange import ExchangeResolver
from .rules import RuleEngine
from .state import (
    GameEvent,
    GameSnapshot,
    Phase,
    Player,
    PlayerView,
    RoundState,
    RANK_TITLES,
)

logger = logging.getLogger(__name__)

Listener = Callable[[GameEvent, GameSnapshot], None]


class GameMaster:
    """
    大富豪游戏主控

    持有场上状态、革命标志、过牌计数、轮转与名次；
    通过决策提供者 (Agent) 获取每个座位的出牌与换牌选择
    """

    def __init__(
        self,
        players: Sequence[Player],
        agents: Mapping[int, Agent],
        config: Optional[GameConfig] = None,
        rng: Optional[np.random.Generator] = None,
        listeners: Iterable[Listener] = (),
    ):
        """
        Args:
            players: 按座位号排列的玩家
            agents: 座位号 -> 决策提供者 (每个座位都需要)
            config: 牌局配置
            rng: 随机源 (洗牌、随机先手、AI 噪声共用)
            listeners: 状态变更回调 (event, snapshot)
        """
        self.config = config or GameConfig()
        if len(players) != self.config.num_players:
            raise ValueError(
                f"Expected {self.config.num_players} players, got {len(players)}"
            )
        for idx, player in enumerate(players):
            if player.seat != idx:
                raise ValueError(f"Player {player.name} has seat {player.seat}, expected {idx}")

        self.players: List[Player] = list(players)
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        missing = [p.seat for p in self.players if p.seat not in agents]
        if missing:
            raise ValueError(f"No decision provider for seats {missing}")
        self.agents = dict(agents)

        self.listeners: List[Listener] = list(listeners)
        self.state = RoundState()
        self.phase = Phase.DEALING
        self.round_count = 0
        self.exchange: Optional[ExchangeResolver] = None
        self._awaiting: Optional[Tuple[str, int]] = None

    # ------------------------------------------------------------------
    # 局的生命周期
    # ------------------------------------------------------------------

    def start_round(self) -> Phase:
        """
        开始新的一局: 发牌，必要时进入换牌阶段，否则确定先手

        Returns:
            开局后的阶段 (EXCHANGING 或 PLAYING)
        """
        if self.phase not in (Phase.DEALING, Phase.ROUND_OVER):
            raise RuntimeError(f"Cannot start a round during {self.phase.value}")

        self.round_count += 1
        self.state = RoundState(round_number=self.round_count)
        self.phase = Phase.DEALING
        self.exchange = None
        self._awaiting = None

        deck = Deck(self.rng)
        deck.shuffle()
        for player in self.players:
            player.hand.clear()
            player.has_passed = False
            player.finish_rank = 0
        for player in self.players:
            player.hand.add(deck.deal(self.config.hand_size))
            player.sort_hand()

        logger.info(f"Round {self.round_count} dealt")
        self._notify(GameEvent.DEAL)

        if self.round_count > 1:
            resolver = ExchangeResolver(self.players)
            if resolver.is_needed:
                self.exchange = resolver
                self.phase = Phase.EXCHANGING
                return self.phase

        self._begin_play()
        return self.phase

    def advance(self) -> Phase:
        """
        推进状态机，直到本局结束或需要外部输入

        Returns:
            当前阶段
        """
        self._awaiting = None
        while True:
            if self.phase == Phase.EXCHANGING:
                if not self._collect_exchange():
                    return self.phase
                self._finish_exchange()
                continue

            if self.phase != Phase.PLAYING:
                return self.phase

            seat = self.state.turn_index
            move = self.agents[seat].select_move(self.view_for(seat))
            if move is None:
                self._awaiting = ("move", seat)
                return self.phase

            self._apply_move(seat, move)

    def play_round(self) -> List[Player]:
        """
        完整进行一局 (所有座位都能同步决策时使用)

        Returns:
            按名次排列的玩家
        """
        self.start_round()
        phase = self.advance()
        if phase != Phase.ROUND_OVER:
            raise RuntimeError(f"Round suspended, awaiting {self._awaiting}")
        return self.ranking()

    # ------------------------------------------------------------------
    # 外部输入
    # ------------------------------------------------------------------

    def submit_move(self, seat: int, cards: Sequence[Card]) -> None:
        """
        外部提交出牌 (人类座位)

        Raises:
            InvalidMoveError: 不是该座位的回合，或出牌不合法 (状态不变)
        """
        self._check_turn(seat)
        cards = list(cards)
        if not cards:
            self._reject(seat, "Empty selection, use submit_pass to pass")
        self._apply_play(seat, cards)
        self._awaiting = None

    def submit_pass(self, seat: int) -> None:
        """外部提交过牌 (过牌总是合法)"""
        self._check_turn(seat)
        self._apply_pass(seat)
        self._awaiting = None

    def submit_exchange(self, seat: int, cards: Sequence[Card]) -> None:
        """
        外部提交换出的牌

        Raises:
            ExchangeSelectionCountError: 张数不对 (状态不变，可重新选择)
            InvalidMoveError: 不在换牌阶段、该座位无需选择或牌不在手中
        """
        if self.phase != Phase.EXCHANGING or self.exchange is None:
            self._reject(seat, f"Not in exchange phase ({self.phase.value})")
        try:
            self.exchange.submit(seat, cards)
        except DaifugoError as e:
            logger.warning(f"Rejected exchange from seat {seat}: {e}")
            self._notify(GameEvent.REJECTED, seat=seat, reason=str(e))
            raise
        self._awaiting = None

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    @property
    def awaiting(self) -> Optional[Tuple[str, int]]:
        """挂起时返回 ("move" | "exchange", 座位号)"""
        return self._awaiting

    @property
    def current_player(self) -> Player:
        return self.players[self.state.turn_index]

    @property
    def active_players(self) -> List[Player]:
        return [p for p in self.players if not p.is_finished]

    def view_for(self, seat: int) -> PlayerView:
        """座位可见的信息 (只含自己的手牌)"""
        player = self.players[seat]
        return PlayerView(
            seat=seat,
            hand=player.hand.cards,
            field_cards=self.state.field_cards,
            is_revolution=self.state.is_revolution,
            cards_left=tuple(len(p.hand) for p in self.players),
            finish_ranks=tuple(p.finish_rank for p in self.players),
            last_ranks=tuple(p.last_rank for p in self.players),
            params=player.params,
        )

    def legal_moves(self, seat: int) -> List[Move]:
        player = self.players[seat]
        return MoveGenerator(
            player.hand.cards, self.state.field_cards, self.state.is_revolution
        ).generate()

    def ranking(self) -> List[Player]:
        return [self.players[s] for s in self.state.finish_order]

    def snapshot(self, **detail) -> GameSnapshot:
        return GameSnapshot(
            phase=self.phase,
            round_number=self.state.round_number,
            turn_index=self.state.turn_index,
            field_cards=self.state.field_cards,
            is_revolution=self.state.is_revolution,
            consecutive_passes=self.state.consecutive_passes,
            hands=tuple(p.hand.cards for p in self.players),
            finish_order=tuple(self.state.finish_order),
            finish_ranks=tuple(p.finish_rank for p in self.players),
            detail=dict(detail),
        )

    def add_listener(self, listener: Listener) -> None:
        self.listeners.append(listener)

    # ------------------------------------------------------------------
    # 内部: 换牌
    # ------------------------------------------------------------------

    def _collect_exchange(self) -> bool:
        """向自选方索取换牌，遇到需要外部输入的座位时返回 False"""
        for seat in self.exchange.pending_seats:
            count = self.exchange.required_count(seat)
            choice = self.agents[seat].select_exchange(self.view_for(seat), count)
            if choice is None:
                self._awaiting = ("exchange", seat)
                return False
            self.exchange.submit(seat, choice)
        return True

    def _finish_exchange(self) -> None:
        transfers = self.exchange.apply()
        self.exchange = None
        self._notify(
            GameEvent.EXCHANGE,
            transfers=[(t.giver, t.receiver, t.count) for t in transfers],
        )
        self._begin_play()

    # ------------------------------------------------------------------
    # 内部: 出牌
    # ------------------------------------------------------------------

    def _begin_play(self) -> None:
        """持有方块 3 的座位先出，找不到时随机"""
        starter = -1
        for player in self.players:
            if DIAMOND_THREE in player.hand:
                starter = player.seat
                break

        if starter == -1:
            starter = int(self.rng.integers(len(self.players)))
            logger.warning(f"No seat holds the 3 of diamonds, random start at seat {starter}")

        self.state.turn_index = starter
        self.phase = Phase.PLAYING
        logger.info(f"Round {self.round_count}: {self.players[starter].name} starts")

    def _apply_move(self, seat: int, move: Move) -> None:
        if move.is_pass:
            self._apply_pass(seat)
        else:
            self._apply_play(seat, list(move.cards))

    def _apply_play(self, seat: int, cards: List[Card]) -> None:
        state = self.state
        player = self.players[seat]

        if not player.hand.contains(cards):
            self._reject(seat, f"{player.name} does not hold {cards_to_str(cards)}")
        if not RuleEngine.is_valid_play(cards, state.field_cards, state.is_revolution):
            self._reject(
                seat,
                f"{cards_to_str(cards)} cannot be played on {cards_to_str(state.field_cards)}",
            )

        player.hand.remove(cards)
        state.field_cards = tuple(cards)
        state.consecutive_passes = 0
        state.last_player = seat
        logger.debug(f"{player.name} played {cards_to_str(cards)} ({len(cards)} cards)")
        self._notify(GameEvent.PLAY, seat=seat, cards=tuple(cards))

        finished = False
        if not player.hand:
            finished = True
            self._handle_finish(player)
            if self.phase == Phase.ROUND_OVER:
                return

        # 革命与八切相互独立，依次判定
        if RuleEngine.triggers_revolution(cards):
            state.is_revolution = not state.is_revolution
            logger.info(
                f"{player.name}: {'revolution' if state.is_revolution else 'counter-revolution'}"
            )
            self._notify(GameEvent.REVOLUTION, seat=seat, is_revolution=state.is_revolution)

        if RuleEngine.triggers_eight_cut(cards):
            logger.info(f"{player.name}: eight-cut")
            self._clear_field()
            if not finished:
                # 同一座位继续出牌
                return

        self._next_turn()

    def _apply_pass(self, seat: int) -> None:
        state = self.state
        player = self.players[seat]

        player.has_passed = True
        state.consecutive_passes += 1
        logger.debug(f"{player.name} passed ({state.consecutive_passes})")
        self._notify(GameEvent.PASS, seat=seat)

        if state.consecutive_passes >= self._pass_threshold():
            self._clear_field()

        self._next_turn()

    def _pass_threshold(self) -> int:
        """清场所需的连续过牌数"""
        if self.config.pass_rule == "active":
            others = [
                p for p in self.players
                if not p.is_finished and p.seat != self.state.last_player
            ]
            return max(1, len(others))
        return self.config.num_players - 1

    def _clear_field(self) -> None:
        self.state.clear_field()
        for player in self.players:
            player.has_passed = False
        self._notify(GameEvent.FIELD_CLEAR)

    def _next_turn(self) -> None:
        """按 0 -> 1 -> 2 -> 3 -> 0 轮转，跳过已出完的座位"""
        if self.phase != Phase.PLAYING:
            return
        n = len(self.players)
        idx = self.state.turn_index
        for _ in range(n):
            idx = (idx + 1) % n
            if not self.players[idx].is_finished:
                self.state.turn_index = idx
                return

    def _handle_finish(self, player: Player) -> None:
        state = self.state
        state.finish_order.append(player.seat)
        player.finish_rank = len(state.finish_order)
        logger.info(f"{player.name} finished as {RANK_TITLES[player.finish_rank]}")
        self._notify(GameEvent.FINISH, seat=player.seat, rank=player.finish_rank)

        if len(state.finish_order) == len(self.players) - 1:
            last = next(p for p in self.players if not p.is_finished)
            state.finish_order.append(last.seat)
            last.finish_rank = len(self.players)
            self._notify(GameEvent.FINISH, seat=last.seat, rank=last.finish_rank)
            self._end_round()

    def _end_round(self) -> None:
        self.phase = Phase.ROUND_OVER
        for player in self.players:
            player.rank_history.append(player.finish_rank)

        standings = ", ".join(
            f"{p.finish_rank}. {p.name}" for p in self.ranking()
        )
        logger.info(f"Round {self.round_count} over: {standings}")
        self._notify(GameEvent.ROUND_OVER, ranking=tuple(self.state.finish_order))

    # ------------------------------------------------------------------
    # 内部: 校验与通知
    # ------------------------------------------------------------------

    def _check_turn(self, seat: int) -> None:
        if self.phase != Phase.PLAYING:
            self._reject(seat, f"Not in playing phase ({self.phase.value})")
        if seat != self.state.turn_index:
            self._reject(seat, f"Not seat {seat}'s turn (current: {self.state.turn_index})")

    def _reject(self, seat: int, reason: str) -> None:
        """记录并抛出，状态保持不变"""
        logger.warning(f"Rejected action from seat {seat}: {reason}")
        self._notify(GameEvent.REJECTED, seat=seat, reason=reason)
        raise InvalidMoveError(reason, seat)

    def _notify(self, event: GameEvent, **detail) -> None:
        if not self.listeners:
            return
        snapshot = self.snapshot(**detail)
        for listener in self.listeners:
            try:
                listener(event, snapshot)
            except Exception:
                logger.exception(f"Listener failed on {event.value}")
