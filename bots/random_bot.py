"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional

from skull.actions import Action
from skull.discs import Disc
from skull.match import MatchController
from skull.player import PlayerState

from .base import BotStrategy


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_action(self, controller: MatchController, seat: str) -> Action:
        legal = controller.legal_actions()
        if not legal:
            raise RuntimeError("No legal actions available for bot.")
        return self._rng.choice(legal)

    def choose_discard(self, player: PlayerState) -> Disc:
        return self._rng.choice(player.owned())
