"""Common bot strategy interfaces."""

from __future__ import annotations

from skull.actions import Action
from skull.discs import Disc
from skull.match import MatchController
from skull.player import PlayerState
from skull.view import MatchView, public_view


class BotStrategy:
    """Base class for bot policies.

    Bots only ever look at the match through ``observe``, the same redacted
    projection a human seat would get.
    """

    name: str = "BaseBot"

    def on_match_start(self, controller: MatchController, seat: str) -> None:
        """Optional hook invoked once before the first action."""
        return None

    def observe(self, controller: MatchController, seat: str) -> MatchView:
        return public_view(controller.state, seat)

    def choose_action(self, controller: MatchController, seat: str) -> Action:
        """Return the next action for ``seat``; defaults to the first legal one."""
        legal = controller.legal_actions()
        if not legal:
            raise RuntimeError("No legal actions available for bot.")
        return legal[0]

    def choose_discard(self, player: PlayerState) -> Disc:
        """Pick which owned disc to lose after a failed challenge."""
        owned = player.owned()
        return Disc.FLOWER if Disc.FLOWER in owned else owned[0]
