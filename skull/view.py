"""Redacted projections of the match state for a single seat."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .discs import Disc, serialize_disc
from .errors import InvalidMove
from .match import MatchState
from .player import PlayerState


@dataclass
class PlayerView:
    seat_id: str
    score: int
    eliminated: bool
    hand_size: int
    stack: List[Optional[str]]
    discarded_count: int
    hand: Optional[List[str]] = None
    discarded: Optional[List[str]] = None


@dataclass
class BidView:
    value: int
    holder: str


@dataclass
class MatchView:
    perspective: Optional[str]
    round_number: int
    voided_rounds: int
    phase: str
    current_seat: Optional[str]
    expected_input: Optional[str]
    turn_order: List[str]
    current_bid: Optional[BidView]
    active_bidders: List[str]
    table_count: int
    players: List[PlayerView]
    history: List[Dict[str, Any]]
    finished: bool
    winner: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def player(self, seat: str) -> PlayerView:
        for player in self.players:
            if player.seat_id == seat:
                return player
        raise KeyError(seat)


def public_view(state: MatchState, perspective: Optional[str] = None) -> MatchView:
    """Project ``state`` for ``perspective``; ``None`` is the spectator seat.

    This is the only place disc identities leave the engine. Face-down discs
    are shown to their owner alone; everybody else gets ``None`` placeholders.
    """
    if perspective is not None and perspective not in state.scores:
        raise InvalidMove(f"Unknown seat {perspective!r}.")

    round_state = state.round
    phase = round_state.phase.name.lower() if round_state is not None else "setup"
    current_seat = None
    expected = None
    turn_order: List[str] = []
    current_bid = None
    active_bidders: List[str] = []
    history: List[Dict[str, Any]] = []

    if round_state is not None:
        turn_order = list(round_state.turn_order)
        history = [
            {"seat": seat, "action": action, "value": value}
            for seat, action, value in round_state.history
        ]
        if not state.finished:
            current_seat = round_state.current_seat
            expected_input = round_state.expected_input()
            expected = expected_input.name.lower() if expected_input is not None else None
        if round_state.current_bid is not None:
            current_bid = BidView(round_state.current_bid.value, round_state.current_bid.holder)
        active_bidders = [seat for seat in turn_order if seat in round_state.active_bidders]

    return MatchView(
        perspective=perspective,
        round_number=state.round_number,
        voided_rounds=state.voided_rounds,
        phase=phase,
        current_seat=current_seat,
        expected_input=expected,
        turn_order=turn_order,
        current_bid=current_bid,
        active_bidders=active_bidders,
        table_count=state.table_count(),
        players=[_player_view(state, player, perspective) for player in state.players],
        history=history,
        finished=state.finished,
        winner=state.winner,
    )


def _player_view(state: MatchState, player: PlayerState, perspective: Optional[str]) -> PlayerView:
    is_owner = player.seat_id == perspective
    stack = [
        serialize_disc(entry.disc) if entry.revealed or is_owner else None
        for entry in player.stack
    ]
    view = PlayerView(
        seat_id=player.seat_id,
        score=state.scores[player.seat_id],
        eliminated=player.eliminated,
        hand_size=len(player.hand),
        stack=stack,
        discarded_count=len(player.discarded),
    )
    if is_owner:
        view.hand = _sorted_names(player.hand)
        view.discarded = _sorted_names(player.discarded)
    return view


def _sorted_names(discs: List[Disc]) -> List[str]:
    return [serialize_disc(disc) for disc in sorted(discs, key=lambda disc: disc.value)]
