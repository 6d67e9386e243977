"""Reveal algorithm run by the winning bidder once bidding closes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from .discs import Disc
from .errors import InvalidMove
from .events import EventKind, RoundEvent
from .player import PlayerState
from .round import Bid


@dataclass(frozen=True)
class ChallengeOutcome:
    holder: str
    bid: int
    success: bool
    skull_owner: Optional[str]
    revealed: Tuple[Tuple[str, Disc], ...]


class ChallengeResolver:
    """Flip discs one at a time until the bid is met or a Skull shows.

    The holder's own stack is always flipped first, top to bottom, and that
    part happens in ``start``. Every further flip names another seat.
    """

    def __init__(self, bid: Bid, players: Mapping[str, PlayerState], seats: Sequence[str]) -> None:
        self.bid = bid
        self.players = players
        self.seats = list(seats)
        self.flowers = 0
        self.revealed: List[Tuple[str, Disc]] = []
        self.outcome: Optional[ChallengeOutcome] = None
        self._started = False

    @classmethod
    def resume(
        cls, bid: Bid, players: Mapping[str, PlayerState], seats: Sequence[str]
    ) -> "ChallengeResolver":
        """Rebuild a challenge in progress from the face-up discs on the table."""
        resolver = cls(bid, players, seats)
        resolver._started = True
        for seat in [bid.holder] + [seat for seat in seats if seat != bid.holder]:
            for entry in reversed(players[seat].stack):
                if entry.revealed:
                    resolver.revealed.append((seat, entry.disc))
        resolver.flowers = sum(1 for _, disc in resolver.revealed if disc is Disc.FLOWER)
        return resolver

    @property
    def holder(self) -> str:
        return self.bid.holder

    def start(self) -> List[RoundEvent]:
        if self._started:
            raise InvalidMove("Challenge already started.")
        self._started = True
        events = [RoundEvent(EventKind.CHALLENGE_STARTED, seat=self.holder, value=self.bid.value)]
        own = self.players[self.holder]
        while self.outcome is None and own.unrevealed_count() > 0:
            events.append(self._flip(self.holder))
        return events

    def flip(self, seat: str, target: str) -> List[RoundEvent]:
        if not self._started:
            raise InvalidMove("Challenge has not started.")
        if self.outcome is not None:
            raise InvalidMove("Challenge already resolved.")
        if seat != self.holder:
            raise InvalidMove(f"Only {self.holder} may flip discs.")
        if target == self.holder:
            raise InvalidMove("Your own stack is flipped automatically.")
        if target not in self.seats:
            raise InvalidMove(f"Seat {target!r} has no stack in this round.")
        if self.players[target].unrevealed_count() == 0:
            raise InvalidMove(f"Seat {target} has no face-down disc left.")
        return [self._flip(target)]

    def flippable_targets(self) -> List[str]:
        if self.outcome is not None:
            return []
        return [
            seat
            for seat in self.seats
            if seat != self.holder and self.players[seat].unrevealed_count() > 0
        ]

    def is_resolved(self) -> bool:
        return self.outcome is not None

    def _flip(self, target: str) -> RoundEvent:
        disc = self.players[target].reveal_next()
        self.revealed.append((target, disc))
        if disc is Disc.SKULL:
            self._conclude(success=False, skull_owner=target)
        else:
            self.flowers += 1
            if self.flowers >= self.bid.value:
                self._conclude(success=True, skull_owner=None)
        return RoundEvent(
            EventKind.DISC_REVEALED,
            seat=self.holder,
            value=self.flowers,
            disc=disc,
            target=target,
        )

    def _conclude(self, *, success: bool, skull_owner: Optional[str]) -> None:
        self.outcome = ChallengeOutcome(
            holder=self.holder,
            bid=self.bid.value,
            success=success,
            skull_owner=skull_owner,
            revealed=tuple(self.revealed),
        )
