#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --sessions 20 --rounds 5
    python scripts/evaluate.py --entrants shiina saki yuka player --output results.json
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.config import GameConfig, load_characters
from core.errors import DaifugoError
from evaluation import Arena

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Daifugo AI Evaluation")

    parser.add_argument(
        "--characters",
        type=str,
        default=str(ROOT / "data" / "characters.json"),
        help="Character data (JSON)",
    )
    parser.add_argument("--entrants", nargs=4, type=str, help="Four character ids")
    parser.add_argument("--sessions", type=int, default=10, help="Number of sessions")
    parser.add_argument("--rounds", type=int, default=5, help="Rounds per session")
    parser.add_argument(
        "--pass-rule",
        type=str,
        default="literal",
        choices=["literal", "active"],
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--output", type=str, help="Output file for results")

    return parser.parse_args()


def main():
    args = parse_args()

    try:
        characters = load_characters(args.characters)
    except (OSError, DaifugoError) as e:
        logger.error(f"Failed to load characters: {e}")
        return 1

    ids = args.entrants or list(characters)[:4]
    config = GameConfig(pass_rule=args.pass_rule, seed=args.seed)
    try:
        arena = Arena.from_characters(characters, ids, config=config, seed=args.seed)
    except ValueError as e:
        logger.error(f"Invalid entrants: {e}")
        return 1

    logger.info(f"Running {args.sessions} sessions x {args.rounds} rounds")
    result = arena.run(n_sessions=args.sessions, rounds_per_session=args.rounds)

    logger.info("=" * 50)
    logger.info("Tournament Results")
    logger.info("=" * 50)
    for i, (name, avg_rank) in enumerate(result.get_ranking()):
        stats = result.standings[name]
        logger.info(
            f"{i+1}. {name}: avg rank {avg_rank:.2f}, "
            f"daifugo {stats['daifugo_rate']:.2%}, daihinmin {stats['daihinmin_rate']:.2%}"
        )
    logger.info(f"Revolutions per round: {result.summary['avg_revolutions']:.2f}")
    logger.info(f"Eight-cuts per round: {result.summary['avg_eight_cuts']:.2f}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(
                {"standings": result.standings, "summary": result.summary,
                 "total_games": result.total_games},
                f,
                indent=2,
                ensure_ascii=False,
            )
        logger.info(f"Results saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
