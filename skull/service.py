"""Convenience service layer for UI and network consumers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .actions import action_label, parse_action, serialize_action
from .errors import InvalidMove
from .match import DiscardStrategy, MatchController
from .rules_schema import RuleSet
from .view import MatchView, public_view


@dataclass
class ActionResult:
    events: List[Dict[str, Any]]
    view: MatchView


class MatchService:
    """Facade around MatchController that speaks JSON-like payloads."""

    def __init__(self, controller: Optional[MatchController] = None) -> None:
        self.controller = controller

    # Match lifecycle ---------------------------------------------------

    def start_match(
        self,
        seat_ids: Sequence[str],
        *,
        seed: Optional[int] = None,
        rules: Optional[RuleSet] = None,
        discard_strategy: Optional[DiscardStrategy] = None,
    ) -> MatchView:
        self.controller = MatchController(
            seat_ids, rng_seed=seed, rules=rules, discard_strategy=discard_strategy
        )
        return self.get_view()

    def has_active_match(self) -> bool:
        return self.controller is not None and not self.controller.is_over

    # Actions -----------------------------------------------------------

    def submit(self, seat: str, payload: Mapping[str, Any]) -> ActionResult:
        controller = self._require_match()
        action = parse_action(payload)
        events = controller.apply_action(seat, action)
        return ActionResult(events=[event.to_dict() for event in events], view=self.get_view(seat))

    # Views -------------------------------------------------------------

    def get_view(self, perspective: Optional[str] = None) -> MatchView:
        return public_view(self._require_match().state, perspective)

    def events_since(self, index: int = 0) -> List[Dict[str, Any]]:
        events = self._require_match().state.events
        return [event.to_dict() for event in events[max(index, 0):]]

    def legal_actions(self, seat: str) -> List[Dict[str, Any]]:
        """Serialized legal actions for ``seat``; empty when it is not their turn."""
        controller = self._require_match()
        if controller.current_seat() != seat:
            return []
        return [
            dict(serialize_action(action), label=action_label(action))
            for action in controller.legal_actions()
        ]

    # Helpers -----------------------------------------------------------

    def _require_match(self) -> MatchController:
        if self.controller is None:
            raise InvalidMove("No match has been started.")
        return self.controller
