"""Simple bot arena for Skull."""

from __future__ import annotations

import argparse
from random import Random
from typing import Dict, Iterable, Mapping, Optional

from skull.discs import Disc
from skull.match import MatchController
from skull.player import PlayerState
from skull.rules_schema import RuleSet

from .base import BotStrategy
from .cautious_bot import CautiousBot
from .random_bot import RandomBot

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "random": RandomBot,
    "cautious": CautiousBot,
}

MAX_ACTIONS = 2000


def seat_names(count: int) -> list[str]:
    return [f"P{index + 1}" for index in range(count)]


def play_match(
    bots: Mapping[str, BotStrategy],
    *,
    seed: Optional[int] = None,
    rules: Optional[RuleSet] = None,
    max_actions: int = MAX_ACTIONS,
    check_invariants: bool = False,
) -> dict:
    """Play one full match with one bot per seat and summarize it."""

    def discard(player: PlayerState, rng: Random) -> Disc:
        return bots[player.seat_id].choose_discard(player)

    controller = MatchController(
        list(bots),
        rng_seed=seed,
        rules=rules,
        discard_strategy=discard,
        check_invariants=check_invariants,
    )
    for seat, bot in bots.items():
        bot.on_match_start(controller, seat)

    actions = 0
    while not controller.is_over:
        if actions >= max_actions:
            raise RuntimeError(f"Match did not finish within {max_actions} actions.")
        seat = controller.current_seat()
        assert seat is not None
        controller.apply_action(seat, bots[seat].choose_action(controller, seat))
        actions += 1

    state = controller.state
    return {
        "winner": state.winner,
        "scores": dict(state.scores),
        "rounds": state.round_number,
        "voided_rounds": state.voided_rounds,
        "actions": actions,
        "eliminated": [player.seat_id for player in state.players if player.eliminated],
    }


def build_bots(names: Iterable[str], *, seed: Optional[int] = None) -> Dict[str, BotStrategy]:
    names = list(names)
    bots: Dict[str, BotStrategy] = {}
    for index, (seat, name) in enumerate(zip(seat_names(len(names)), names)):
        bot_seed = None if seed is None else seed * 101 + index
        bots[seat] = BOT_REGISTRY[name](seed=bot_seed)
    return bots


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a single Skull bot match.")
    parser.add_argument(
        "--bots",
        nargs="+",
        default=["cautious", "random", "cautious", "random"],
        choices=BOT_REGISTRY.keys(),
        help="One bot name per seat (3 to 6).",
    )
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args(argv)

    bots = build_bots(args.bots, seed=args.seed)
    result = play_match(bots, seed=args.seed)

    lineup = ", ".join(f"{seat}={bot.name}" for seat, bot in bots.items())
    print(f"Lineup: {lineup}")
    print(f"Winner: {result['winner'] or 'none'} after {result['rounds']} rounds")
    print(f"Scores: {result['scores']}  eliminated: {result['eliminated'] or 'none'}")


if __name__ == "__main__":
    main()
