"""出牌生成测试"""
import pytest

from core.actions import Move, MoveType, MoveGenerator, group_by_rank
from core.cards import str_to_cards, strength
from core.rules import RuleEngine


def card_sets(moves):
    return [m.cards for m in moves]


class TestMove:
    """Move 测试"""

    def test_pass(self):
        move = Move.pass_move()
        assert move.is_pass
        assert move.count == 0
        assert move.cards == ()

    def test_from_cards(self):
        move = Move.from_cards(str_to_cards("9s 9h"))
        assert move.move_type == MoveType.SET
        assert move.rank == 9
        assert move.count == 2
        assert move.strength == strength(9)

    def test_from_cards_revolution(self):
        move = Move.from_cards(str_to_cards("2s"), is_revolution=True)
        assert move.move_type == MoveType.SINGLE
        assert move.strength == 0

    def test_from_empty_is_pass(self):
        assert Move.from_cards([]).is_pass

    def test_has_eight(self):
        assert Move.from_cards(str_to_cards("8d")).has_eight
        assert not Move.from_cards(str_to_cards("9d")).has_eight


class TestGroupByRank:
    """分组测试"""

    def test_first_appearance_order(self):
        groups = group_by_rank(str_to_cards("9s 3h 9d 3c 5s"))
        assert list(groups) == [9, 3, 5]
        assert groups[9] == str_to_cards("9s 9d")


class TestMoveGenerator:
    """合法出牌生成测试"""

    def test_lead_scenario(self):
        # 自由出牌: 每组取前 n 张
        moves = MoveGenerator(str_to_cards("3s 3h 8c")).generate()
        assert card_sets(moves) == [
            (),
            tuple(str_to_cards("3s")),
            tuple(str_to_cards("3s 3h")),
            tuple(str_to_cards("8c")),
        ]

    def test_response_scenario(self):
        # 场上 ♦5: 4 太弱，6 只能出 1 张
        moves = MoveGenerator(
            str_to_cards("6s 6h 4c"), str_to_cards("5d")
        ).generate()
        assert len(moves) == 2
        assert moves[0].is_pass
        assert moves[1].cards == tuple(str_to_cards("6s"))

    def test_pass_always_first(self):
        for field in ("", "2s", "5d 5h"):
            moves = MoveGenerator(str_to_cards("3s 4h"), str_to_cards(field)).generate()
            assert moves[0].is_pass

    def test_empty_hand(self):
        moves = MoveGenerator([]).generate()
        assert len(moves) == 1
        assert moves[0].is_pass

    def test_nothing_beats_two(self):
        moves = MoveGenerator(str_to_cards("As Kh 3d"), str_to_cards("2c")).generate()
        assert len(moves) == 1

    def test_equal_strength_excluded(self):
        moves = MoveGenerator(str_to_cards("7s"), str_to_cards("7h")).generate()
        assert len(moves) == 1

    def test_count_must_match(self):
        moves = MoveGenerator(
            str_to_cards("9s 9h 9d Ks"), str_to_cards("5d 5h")
        ).generate()
        assert card_sets(moves[1:]) == [tuple(str_to_cards("9s 9h"))]

    def test_revolution_response(self):
        # 革命时 4 比 5 强，K 比 5 弱
        moves = MoveGenerator(
            str_to_cards("4s Kh"), str_to_cards("5d"), is_revolution=True
        ).generate()
        assert card_sets(moves[1:]) == [tuple(str_to_cards("4s"))]

    def test_lead_move_count(self):
        # 每组 k 张产生 k 个候选
        hand = str_to_cards("3s 3h 3d 9c 9s Qh")
        moves = MoveGenerator(hand).generate()
        assert len(moves) == 1 + 3 + 2 + 1

    def test_all_moves_valid(self):
        hand = str_to_cards("3s 3h 5d 8c 8s 8h Js As 2d 2h")
        for field in ("", "4d", "7s 7h", "Kd Kh Kc"):
            for is_rev in (False, True):
                field_cards = str_to_cards(field)
                moves = MoveGenerator(hand, field_cards, is_rev).generate()
                for move in moves[1:]:
                    assert RuleEngine.is_valid_play(move.cards, field_cards, is_rev)
                    assert all(c in hand for c in move.cards)

    def test_generator_complete(self):
        # 每个合法的 (点数, 张数) 组合都出现一次
        hand = str_to_cards("4s 4h 6d 9c 9s 2h")
        field = str_to_cards("5c")
        moves = MoveGenerator(hand, field).generate()
        produced = {(m.rank, m.count) for m in moves[1:]}
        assert produced == {(6, 1), (9, 1), (2, 1)}
