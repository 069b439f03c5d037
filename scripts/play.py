#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --mode watch             # 观看 AI 对战
    python scripts/play.py --mode play --rounds 3   # 与 AI 对战
    python scripts/play.py --opponents shiina saki yuka --seed 7
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

import numpy as np

from ai.agents import HeuristicAgent, default_agents
from core.cards import Card, cards_to_str
from core.config import GameConfig, load_characters
from core.errors import DaifugoError, ExchangeSelectionCountError, InvalidMoveError
from core.game import GameMaster
from core.state import GameEvent, GameSnapshot, Phase, RANK_TITLES, create_players

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Daifugo Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="watch",
        choices=["watch", "play"],
        help="Mode: watch AI or play against AI",
    )
    parser.add_argument(
        "--characters",
        type=str,
        default=str(ROOT / "data" / "characters.json"),
        help="Character data (JSON)",
    )
    parser.add_argument("--opponents", nargs=3, type=str, help="Opponent ids in seat order")
    parser.add_argument("--rounds", type=int, default=1, help="Number of rounds")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--pass-rule",
        type=str,
        default="literal",
        choices=["literal", "active"],
        help="Field clear rule after passes",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    return parser.parse_args()


class ConsoleRenderer:
    """把引擎事件打印到终端"""

    def __init__(self, names: List[str]):
        self.names = names

    def __call__(self, event: GameEvent, snapshot: GameSnapshot):
        d = snapshot.detail
        if event == GameEvent.PLAY:
            print(f"  {self.names[d['seat']]}: {cards_to_str(d['cards'])}")
        elif event == GameEvent.PASS:
            print(f"  {self.names[d['seat']]}: pass")
        elif event == GameEvent.REVOLUTION:
            print("  *** Revolution! ***" if d["is_revolution"] else "  *** Counter-revolution! ***")
        elif event == GameEvent.FIELD_CLEAR:
            print("  -- field cleared --")
        elif event == GameEvent.FINISH:
            print(f"  {self.names[d['seat']]} finished: {RANK_TITLES[d['rank']]}")
        elif event == GameEvent.EXCHANGE:
            for giver, receiver, count in d["transfers"]:
                print(f"  exchange: {self.names[giver]} -> {self.names[receiver]} ({count})")
        elif event == GameEvent.REJECTED:
            print(f"  rejected: {d['reason']}")


def print_hand(cards: List[Card]):
    print("Your hand:")
    print("  " + "  ".join(f"[{i}]{c}" for i, c in enumerate(cards)))


def read_selection(cards: List[Card], prompt: str) -> List[Card]:
    """读取下标选择，'p' 返回空列表"""
    while True:
        raw = input(prompt).strip().lower()
        if raw in ("p", "pass"):
            return []
        try:
            indices = [int(x) for x in raw.replace(",", " ").split()]
            return [cards[i] for i in indices]
        except (ValueError, IndexError):
            print("Enter card indices separated by spaces, or 'p' to pass")


def human_turn(gm: GameMaster):
    state = gm.state
    print(f"\nField: {cards_to_str(state.field_cards) if state.field_cards else '-'}"
          f"{'  [REVOLUTION]' if state.is_revolution else ''}")
    print("Cards left: " + ", ".join(f"{p.name} {len(p.hand)}" for p in gm.players))
    hand = list(gm.players[0].hand)
    print_hand(hand)

    while True:
        selection = read_selection(hand, "Play (indices) or 'p': ")
        try:
            if selection:
                gm.submit_move(0, selection)
            else:
                gm.submit_pass(0)
            return
        except InvalidMoveError as e:
            print(f"Invalid move: {e}")


def human_exchange(gm: GameMaster, seat: int):
    count = gm.exchange.required_count(seat)
    hand = list(gm.players[seat].hand)
    print(f"\nExchange: choose {count} card(s) to give away")
    print_hand(hand)

    while True:
        selection = read_selection(hand, f"Give {count} (indices): ")
        try:
            gm.submit_exchange(seat, selection)
            return
        except ExchangeSelectionCountError as e:
            print(f"{e}")
        except InvalidMoveError as e:
            print(f"Invalid selection: {e}")


def run_round(gm: GameMaster):
    gm.start_round()
    while True:
        phase = gm.advance()
        if phase == Phase.ROUND_OVER:
            return
        kind, seat = gm.awaiting
        if kind == "exchange":
            human_exchange(gm, seat)
        else:
            human_turn(gm)


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        characters = load_characters(args.characters)
        opponents = args.opponents or [cid for cid, c in characters.items() if c.is_ai][:3]
        players = create_players(characters, opponents)
    except (OSError, DaifugoError) as e:
        logger.error(f"Setup failed: {e}")
        return 1

    rng = np.random.default_rng(args.seed)
    agents = default_agents(players, rng)
    if args.mode == "watch":
        agents[0] = HeuristicAgent(players[0].params, rng=rng, name=players[0].name)

    config = GameConfig(pass_rule=args.pass_rule, seed=args.seed)
    gm = GameMaster(
        players,
        agents=agents,
        config=config,
        rng=rng,
        listeners=[ConsoleRenderer([p.name for p in players])],
    )

    for _ in range(args.rounds):
        print("\n" + "=" * 60)
        print(f"Round {gm.round_count + 1}")
        print("=" * 60)
        run_round(gm)

        print("\nResult:")
        for player in gm.ranking():
            print(f"  {player.finish_rank}. {RANK_TITLES[player.finish_rank]:<10} {player.name}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
