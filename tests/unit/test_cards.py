"""牌定义测试"""
import pytest
import numpy as np

from core.cards import (
    Card,
    Deck,
    Suit,
    FULL_DECK,
    DIAMOND_THREE,
    strength,
    card_to_str,
    cards_to_str,
    str_to_cards,
    cards_to_array,
)


class TestStrength:
    """强度测试"""

    def test_base_order(self):
        assert strength(3) == 0
        assert strength(4) == 1
        assert strength(10) == 7
        assert strength(13) == 10  # K
        assert strength(1) == 12   # A
        assert strength(2) == 13

    def test_ordering(self):
        # 3 < 4 < ... < K < A < 2
        order = [3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 1, 2]
        values = [strength(r) for r in order]
        assert values == sorted(values)
        assert len(set(values)) == 13

    def test_revolution_inverts(self):
        assert strength(3, True) == 13
        assert strength(2, True) == 0
        assert strength(1, True) == 1
        for rank in range(1, 14):
            assert strength(rank, True) == 13 - strength(rank)

    def test_card_strength(self):
        assert Card(Suit.HEART, 1).strength() == 12
        assert Card(Suit.HEART, 1).strength(is_revolution=True) == 1


class TestCard:
    """Card 测试"""

    def test_immutable(self):
        card = Card(Suit.SPADE, 3)
        with pytest.raises(AttributeError):
            card.rank = 4

    def test_hashable_identity(self):
        assert Card(Suit.SPADE, 3) == Card(Suit.SPADE, 3)
        assert Card(Suit.SPADE, 3) != Card(Suit.HEART, 3)
        assert len({Card(Suit.SPADE, 3), Card(Suit.SPADE, 3)}) == 1

    def test_str(self):
        assert card_to_str(Card(Suit.SPADE, 3)) == "♠3"
        assert str(Card(Suit.HEART, 1)) == "♥A"
        assert str(Card(Suit.CLUB, 10)) == "♣10"

    def test_diamond_three(self):
        assert DIAMOND_THREE.suit == Suit.DIAMOND
        assert DIAMOND_THREE.rank == 3


class TestDeck:
    """Deck 测试"""

    def test_full_deck(self):
        assert len(FULL_DECK) == 52
        assert len(set(FULL_DECK)) == 52

    def test_shuffle_deterministic(self):
        a = Deck(np.random.default_rng(42))
        b = Deck(np.random.default_rng(42))
        a.shuffle()
        b.shuffle()
        assert a.cards == b.cards
        assert sorted(a.cards, key=str) == sorted(FULL_DECK, key=str)

    def test_deal(self):
        deck = Deck(np.random.default_rng(0))
        deck.shuffle()
        top = deck.cards[:13]
        dealt = deck.deal(13)

        assert dealt == top
        assert len(deck) == 39
        assert not set(dealt) & set(deck.cards)

    def test_deal_too_many(self):
        deck = Deck(np.random.default_rng(0))
        deck.deal(50)
        with pytest.raises(ValueError):
            deck.deal(3)


class TestConversion:
    """转换函数测试"""

    def test_str_to_cards(self):
        cards = str_to_cards("3s 10c Ad Kh")
        assert cards == [
            Card(Suit.SPADE, 3),
            Card(Suit.CLUB, 10),
            Card(Suit.DIAMOND, 1),
            Card(Suit.HEART, 13),
        ]

    def test_str_to_cards_invalid(self):
        with pytest.raises(ValueError):
            str_to_cards("1s")
        with pytest.raises(ValueError):
            str_to_cards("3x")

    def test_cards_to_str(self):
        assert cards_to_str(str_to_cards("3s 3h")) == "♠3 ♥3"
        assert cards_to_str([]) == "Pass"

    def test_cards_to_array(self):
        arr = cards_to_array(str_to_cards("3s 2c Ah"))
        assert arr.shape == (52,)
        assert arr.dtype == np.float32
        assert arr.sum() == 3
        # ♠3 在第 0 行第 0 列，♣2 在第 3 行最后一列
        assert arr[0] == 1
        assert arr[51] == 1

    def test_cards_to_array_empty(self):
        assert cards_to_array([]).sum() == 0
