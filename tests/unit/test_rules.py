"""规则引擎测试"""
import pytest

from core.cards import str_to_cards
from core.rules import RuleEngine, EXCHANGE_COUNTS


class TestIsValidPlay:
    """合法性验证测试"""

    def test_lead_any_same_rank(self):
        assert RuleEngine.is_valid_play(str_to_cards("3s"), [])
        assert RuleEngine.is_valid_play(str_to_cards("9s 9h 9d"), [])

    def test_mixed_ranks_invalid(self):
        assert not RuleEngine.is_valid_play(str_to_cards("3s 4s"), [])

    def test_empty_invalid(self):
        assert not RuleEngine.is_valid_play([], [])
        assert not RuleEngine.is_valid_play([], str_to_cards("3s"))

    def test_must_beat(self):
        field = str_to_cards("9d")
        assert RuleEngine.is_valid_play(str_to_cards("10s"), field)
        assert not RuleEngine.is_valid_play(str_to_cards("9s"), field)
        assert not RuleEngine.is_valid_play(str_to_cards("8s"), field)

    def test_count_must_match(self):
        field = str_to_cards("5d 5h")
        assert RuleEngine.is_valid_play(str_to_cards("7s 7h"), field)
        assert not RuleEngine.is_valid_play(str_to_cards("7s"), field)
        assert not RuleEngine.is_valid_play(str_to_cards("7s 7h 7d"), field)

    def test_two_beats_ace(self):
        assert RuleEngine.is_valid_play(str_to_cards("2s"), str_to_cards("Ad"))
        assert not RuleEngine.is_valid_play(str_to_cards("Ad"), str_to_cards("2s"))

    def test_revolution(self):
        field = str_to_cards("9d")
        assert RuleEngine.is_valid_play(str_to_cards("4s"), field, is_revolution=True)
        assert not RuleEngine.is_valid_play(str_to_cards("2s"), field, is_revolution=True)


class TestSpecialRules:
    """革命与八切测试"""

    def test_revolution_trigger(self):
        assert RuleEngine.triggers_revolution(str_to_cards("9s 9h 9d 9c"))
        assert not RuleEngine.triggers_revolution(str_to_cards("9s 9h 9d"))

    def test_eight_cut_trigger(self):
        assert RuleEngine.triggers_eight_cut(str_to_cards("8s"))
        assert RuleEngine.triggers_eight_cut(str_to_cards("8s 8h"))
        assert not RuleEngine.triggers_eight_cut(str_to_cards("9s"))

    def test_both_triggers(self):
        # 4 张 8 同时满足两个判定
        cards = str_to_cards("8s 8h 8d 8c")
        assert RuleEngine.triggers_revolution(cards)
        assert RuleEngine.triggers_eight_cut(cards)

    def test_same_rank(self):
        assert RuleEngine.is_same_rank(str_to_cards("Qs Qh"))
        assert not RuleEngine.is_same_rank(str_to_cards("Qs Kh"))


class TestExchangeCount:
    """换牌张数测试"""

    def test_counts(self):
        assert RuleEngine.exchange_count(1) == 2
        assert RuleEngine.exchange_count(2) == 1
        assert RuleEngine.exchange_count(3) == 1
        assert RuleEngine.exchange_count(4) == 2
        assert RuleEngine.exchange_count(0) == 0

    def test_symmetric(self):
        assert EXCHANGE_COUNTS[1] == EXCHANGE_COUNTS[4]
        assert EXCHANGE_COUNTS[2] == EXCHANGE_COUNTS[3]
