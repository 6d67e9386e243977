"""Placement and bidding state machine for a single round of Skull."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Mapping, Optional, Set, Tuple

from .discs import Disc
from .errors import InvalidMove, NoValidBidder
from .events import EventKind, RoundEvent
from .player import PlayerState


class Phase(Enum):
    PLACEMENT = auto()
    BIDDING = auto()
    CHALLENGE = auto()
    RESOLVED = auto()


class InputType(Enum):
    PLACE = auto()
    BID_OR_PASS = auto()
    RAISE_OR_PASS = auto()
    FLIP = auto()


@dataclass(frozen=True)
class Bid:
    value: int
    holder: str


@dataclass
class RoundState:
    """Everything one round needs; rebuilt from scratch every round."""

    turn_order: List[str]
    phase: Phase = Phase.PLACEMENT
    cursor: int = 0
    placed: Set[str] = field(default_factory=set)
    opening_passes: Set[str] = field(default_factory=set)
    active_bidders: Set[str] = field(default_factory=set)
    current_bid: Optional[Bid] = None
    history: List[Tuple[str, str, Optional[int]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.turn_order:
            raise ValueError("A round needs at least one seat.")
        self.turn_order = list(self.turn_order)

    @property
    def current_seat(self) -> str:
        return self.turn_order[self.cursor]

    @property
    def starting_seat(self) -> str:
        return self.turn_order[0]

    @property
    def placements_open(self) -> bool:
        return self.phase is Phase.PLACEMENT and len(self.placed) < len(self.turn_order)

    def expected_input(self) -> Optional[InputType]:
        if self.phase is Phase.PLACEMENT:
            return InputType.PLACE if self.placements_open else InputType.BID_OR_PASS
        if self.phase is Phase.BIDDING:
            return InputType.RAISE_OR_PASS
        if self.phase is Phase.CHALLENGE:
            return InputType.FLIP
        return None


class RoundEngine:
    """Validate and apply placement and bidding actions for one round.

    Every public method checks the whole action before touching any state, so
    a raised ``InvalidMove`` or ``NoValidBidder`` leaves the round untouched.
    """

    def __init__(self, state: RoundState, players: Mapping[str, PlayerState]) -> None:
        self.state = state
        self.players = players

    # Placement ---------------------------------------------------------

    def place(self, seat: str, disc: Disc) -> List[RoundEvent]:
        self._ensure_turn(seat, Phase.PLACEMENT)
        if not self.state.placements_open:
            raise InvalidMove("Every seat has placed; open the bidding or pass.")

        self.players[seat].place(disc)
        self.state.placed.add(seat)
        self.state.history.append((seat, "place", None))
        self.state.cursor = (self.state.cursor + 1) % len(self.state.turn_order)
        return [RoundEvent(EventKind.DISC_PLACED, seat=seat)]

    def declare_bid(self, seat: str, value: int) -> List[RoundEvent]:
        self._ensure_turn(seat, Phase.PLACEMENT)
        if self.state.placements_open:
            raise InvalidMove("No bid may be declared before every seat has placed a disc.")
        self._check_bid_value(value, minimum=1)

        state = self.state
        state.current_bid = Bid(value=value, holder=seat)
        state.active_bidders = set(state.placed)
        state.history.append((seat, "bid", value))
        state.phase = Phase.BIDDING
        if value == self.table_count():
            self._close_bidding()
        else:
            state.cursor = self._next_active(state.cursor)
        return [RoundEvent(EventKind.BID_DECLARED, seat=seat, value=value)]

    # Bidding -----------------------------------------------------------

    def raise_bid(self, seat: str, value: int) -> List[RoundEvent]:
        self._ensure_turn(seat, Phase.BIDDING)
        current = self.state.current_bid
        assert current is not None
        self._check_bid_value(value, minimum=current.value + 1)

        state = self.state
        state.current_bid = Bid(value=value, holder=seat)
        state.history.append((seat, "raise", value))
        if value == self.table_count():
            self._close_bidding()
        else:
            state.cursor = self._next_active(state.cursor)
        return [RoundEvent(EventKind.BID_RAISED, seat=seat, value=value)]

    def pass_turn(self, seat: str) -> List[RoundEvent]:
        self._ensure_turn(seat, Phase.PLACEMENT, Phase.BIDDING)
        if self.state.phase is Phase.PLACEMENT:
            return self._pass_opening(seat)

        state = self.state
        assert state.current_bid is not None
        if seat == state.current_bid.holder:
            raise InvalidMove("The current bid holder may not pass.")
        remaining = state.active_bidders - {seat}
        if not remaining:
            raise NoValidBidder("Every bidder has passed.")

        state.active_bidders = remaining
        state.history.append((seat, "pass", None))
        if len(remaining) == 1:
            self._close_bidding()
        else:
            state.cursor = self._next_active(state.cursor)
        return [RoundEvent(EventKind.PASSED, seat=seat)]

    def _pass_opening(self, seat: str) -> List[RoundEvent]:
        state = self.state
        if state.placements_open:
            raise InvalidMove("Every seat must place a disc before anyone may pass.")
        if state.opening_passes | {seat} >= set(state.turn_order):
            raise NoValidBidder("Every seat declined to open the bidding.")

        state.opening_passes.add(seat)
        state.history.append((seat, "pass", None))
        state.cursor = (state.cursor + 1) % len(state.turn_order)
        return [RoundEvent(EventKind.PASSED, seat=seat)]

    # Round end ---------------------------------------------------------

    def finish(self) -> None:
        if self.state.phase is not Phase.CHALLENGE:
            raise InvalidMove(f"Cannot resolve a round in phase {self.state.phase.name}.")
        self.state.phase = Phase.RESOLVED

    # Queries -----------------------------------------------------------

    def table_count(self) -> int:
        return sum(self.players[seat].stack_size() for seat in self.state.turn_order)

    def expected_input(self) -> Optional[InputType]:
        return self.state.expected_input()

    # Helpers -----------------------------------------------------------

    def _close_bidding(self) -> None:
        state = self.state
        assert state.current_bid is not None
        holder = state.current_bid.holder
        state.active_bidders = {holder}
        state.phase = Phase.CHALLENGE
        state.cursor = state.turn_order.index(holder)

    def _next_active(self, index: int) -> int:
        order = self.state.turn_order
        for step in range(1, len(order) + 1):
            candidate = (index + step) % len(order)
            if order[candidate] in self.state.active_bidders:
                return candidate
        raise NoValidBidder("No active bidder left to take a turn.")

    def _check_bid_value(self, value: int, *, minimum: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidMove(f"Bid must be an integer, got {value!r}.")
        maximum = self.table_count()
        if value < minimum:
            raise InvalidMove(f"Bid too low, needs to be at least {minimum}.")
        if value > maximum:
            raise InvalidMove(f"Bid too high, needs to be at most {maximum}.")

    def _ensure_turn(self, seat: str, *phases: Phase) -> None:
        if self.state.phase not in phases:
            raise InvalidMove(f"Action not allowed in phase {self.state.phase.name}.")
        if self.players.get(seat) is None or seat not in self.state.turn_order:
            raise InvalidMove(f"Seat {seat!r} is not playing this round.")
        if seat != self.state.current_seat:
            raise InvalidMove(f"Not {seat}'s turn; waiting on {self.state.current_seat}.")
