"""决策提供者测试"""
import pytest
import numpy as np

from ai.agents import HeuristicAgent, HumanAgent, RandomAgent, default_agents
from core.actions import MoveGenerator
from core.cards import str_to_cards
from core.config import AIParams
from core.rules import RuleEngine
from core.state import Player, PlayerView


def make_view(hand, field="", is_revolution=False, params=None):
    hand = tuple(str_to_cards(hand))
    return PlayerView(
        seat=1,
        hand=hand,
        field_cards=tuple(str_to_cards(field)),
        is_revolution=is_revolution,
        cards_left=(13, len(hand), 13, 13),
        finish_ranks=(0, 0, 0, 0),
        last_ranks=(0, 0, 0, 0),
        params=params,
    )


class TestHumanAgent:
    """HumanAgent 测试"""

    def test_suspends(self):
        agent = HumanAgent()
        view = make_view("3s 4h")
        assert agent.select_move(view) is None
        assert agent.select_exchange(view, 2) is None


class TestHeuristicAgent:
    """HeuristicAgent 测试"""

    def test_lead(self):
        agent = HeuristicAgent(AIParams(epsilon=0.0), rng=np.random.default_rng(0))
        move = agent.select_move(make_view("3s 3h 8c"))
        assert move.cards == tuple(str_to_cards("8c"))

    def test_response(self):
        agent = HeuristicAgent(AIParams(epsilon=0.0), rng=np.random.default_rng(0))
        move = agent.select_move(make_view("3s As", field="Kd"))
        assert move.cards == tuple(str_to_cards("As"))

    def test_pass_when_nothing_beats(self):
        agent = HeuristicAgent(AIParams(epsilon=1.0), rng=np.random.default_rng(0))
        move = agent.select_move(make_view("3s 4h", field="2d"))
        assert move.is_pass

    def test_uses_view_params(self):
        agent = HeuristicAgent(rng=np.random.default_rng(0))
        move = agent.select_move(make_view("3s 3h 8c", params=AIParams(epsilon=0.0)))
        assert move.cards == tuple(str_to_cards("8c"))

    def test_always_legal(self):
        rng = np.random.default_rng(3)
        agent = HeuristicAgent(AIParams(epsilon=1.0), rng=rng)
        for field in ("", "5d", "9s 9h"):
            view = make_view("3s 3h 6d 9c Jd Js As 2h", field=field)
            move = agent.select_move(view)
            if not move.is_pass:
                assert RuleEngine.is_valid_play(move.cards, view.field_cards)

    def test_exchange_gives_weakest(self):
        agent = HeuristicAgent()
        cards = agent.select_exchange(make_view("2s Kd 3h As 4c"), 2)
        assert cards == str_to_cards("3h 4c")


class TestRandomAgent:
    """RandomAgent 测试"""

    def test_legal(self):
        agent = RandomAgent(np.random.default_rng(0))
        view = make_view("3s 3h 6d 9c", field="5s")
        legal = MoveGenerator(view.hand, view.field_cards).generate()
        for _ in range(20):
            assert agent.select_move(view) in legal


class TestDefaultAgents:
    """default_agents 测试"""

    def test_by_seat_type(self):
        players = [Player(seat=0, name="you")] + [
            Player(seat=i, name=f"cpu{i}", is_ai=True) for i in range(1, 4)
        ]
        agents = default_agents(players, np.random.default_rng(0))
        assert isinstance(agents[0], HumanAgent)
        assert all(isinstance(agents[i], HeuristicAgent) for i in range(1, 4))
        assert agents[2].name == "cpu2"
