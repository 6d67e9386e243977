#!/usr/bin/env python3
"""Simulate many Skull matches between bot lineups and summarize win rates."""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from collections import Counter
from pathlib import Path
from statistics import mean
from typing import Dict, List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from bots.bot_arena import BOT_REGISTRY, build_bots, play_match
from skull.rules_schema import RuleSet, load_rules

logger = logging.getLogger("eval_matches")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate Skull bots over many matches.")
    parser.add_argument(
        "--lineup",
        nargs="+",
        default=["cautious", "random", "random", "random"],
        choices=BOT_REGISTRY.keys(),
        help="One bot name per seat (3 to 6).",
    )
    parser.add_argument("--matches", type=int, default=200, help="Number of matches to simulate.")
    parser.add_argument("--seed", type=int, default=0, help="Base seed; match i uses seed + i.")
    parser.add_argument("--rules", type=Path, default=None, help="Optional JSON rule file.")
    parser.add_argument("--rotate", action="store_true", help="Rotate the lineup every match.")
    parser.add_argument("--csv", type=Path, default=None, help="Write one row per match here.")
    parser.add_argument("--check-invariants", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)
    if args.matches < 1:
        parser.error("--matches must be at least 1")
    if not 3 <= len(args.lineup) <= 6:
        parser.error("--lineup needs 3 to 6 bots")
    return args


def rotated(lineup: List[str], shift: int) -> List[str]:
    shift %= len(lineup)
    return lineup[shift:] + lineup[:shift]


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    rules = load_rules(args.rules) if args.rules else RuleSet()

    wins: Counter = Counter()
    draws = 0
    rounds: List[int] = []
    voids: List[int] = []
    rows: List[Dict[str, object]] = []

    for index in range(args.matches):
        seed = args.seed + index
        lineup = rotated(list(args.lineup), index) if args.rotate else list(args.lineup)
        bots = build_bots(lineup, seed=seed)
        result = play_match(bots, seed=seed, rules=rules, check_invariants=args.check_invariants)
        winner = result["winner"]
        winner_bot = bots[winner].name if winner is not None else None
        if winner_bot is None:
            draws += 1
        else:
            wins[winner_bot] += 1
        rounds.append(result["rounds"])
        voids.append(result["voided_rounds"])
        rows.append(
            {
                "match": index,
                "seed": seed,
                "lineup": " ".join(lineup),
                "winner_seat": winner,
                "winner_bot": winner_bot,
                "rounds": result["rounds"],
                "voided_rounds": result["voided_rounds"],
                "eliminated": " ".join(result["eliminated"]),
            }
        )
        logger.info("Match %s won by %s (%s).", index, winner, winner_bot)

    seats_per_bot = Counter(args.lineup)
    print(f"Matches: {args.matches}  draws: {draws}")
    print(f"Mean rounds: {mean(rounds):.2f}  mean voided rounds: {mean(voids):.2f}")
    for name, seats in sorted(seats_per_bot.items()):
        rate = wins[name] / (args.matches * seats) if args.matches else 0.0
        print(f"{name:<10} seats={seats} wins={wins[name]} win rate per seat={rate:.3f}")

    if args.csv is not None:
        args.csv.parent.mkdir(parents=True, exist_ok=True)
        with args.csv.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)
        print(f"Wrote {len(rows)} rows to {args.csv}")


if __name__ == "__main__":
    main()
