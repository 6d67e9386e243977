"""Heuristic bot that only bids on a clean stack and bluffs now and then."""

from __future__ import annotations

import random
from typing import List, Optional

from skull.actions import Action, ChooseFlip, DeclareBid, Pass, Place, Raise
from skull.discs import Disc
from skull.match import MatchController
from skull.player import PlayerState
from skull.view import MatchView, PlayerView

from .base import BotStrategy


def _stack_is_clean(me: PlayerView) -> bool:
    return all(name == "flower" for name in me.stack)


def _bidders(view: MatchView, seat: str) -> List[str]:
    """Other seats that declared or raised this round, most recent first."""
    seen: List[str] = []
    for entry in reversed(view.history):
        if entry["action"] in ("bid", "raise") and entry["seat"] != seat and entry["seat"] not in seen:
            seen.append(entry["seat"])
    return seen


class CautiousBot(BotStrategy):
    name = "Cautious"

    def __init__(self, bluff_rate: float = 0.2, seed: Optional[int] = None) -> None:
        self.bluff_rate = bluff_rate
        self._rng = random.Random(seed)

    def choose_action(self, controller: MatchController, seat: str) -> Action:
        view = self.observe(controller, seat)
        me = view.player(seat)
        expected = view.expected_input

        if expected == "place":
            return Place(self._pick_disc(me))
        if expected == "bid_or_pass":
            passes = sum(1 for entry in view.history if entry["action"] == "pass")
            last_to_speak = passes == len(view.turn_order) - 1
            return DeclareBid(1) if _stack_is_clean(me) or last_to_speak else Pass()
        if expected == "raise_or_pass":
            assert view.current_bid is not None
            target = view.current_bid.value + 1
            comfort = len(me.stack) + len(_bidders(view, seat))
            if _stack_is_clean(me) and target <= min(comfort, view.table_count):
                return Raise(target)
            return Pass()
        return self._pick_flip(controller, view, seat)

    def choose_discard(self, player: PlayerState) -> Disc:
        # The skull is the only way to defend a stack, so give up flowers first.
        owned = player.owned()
        return Disc.FLOWER if Disc.FLOWER in owned else Disc.SKULL

    def _pick_disc(self, me: PlayerView) -> Disc:
        hand = me.hand or []
        has_flower = "flower" in hand
        has_skull = "skull" in hand
        if has_skull and (not has_flower or self._rng.random() < self.bluff_rate):
            return Disc.SKULL
        return Disc.FLOWER

    def _pick_flip(self, controller: MatchController, view: MatchView, seat: str) -> Action:
        targets = [action.target for action in controller.legal_actions() if isinstance(action, ChooseFlip)]
        if not targets:
            raise RuntimeError("No stack left to flip.")
        for bidder in _bidders(view, seat):
            if bidder in targets:
                return ChooseFlip(bidder)
        return ChooseFlip(targets[0])
