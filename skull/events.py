"""Public notifications emitted while a match advances."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional

from .discs import Disc, serialize_disc


class EventKind(Enum):
    ROUND_STARTED = auto()
    DISC_PLACED = auto()
    BID_DECLARED = auto()
    BID_RAISED = auto()
    PASSED = auto()
    CHALLENGE_STARTED = auto()
    DISC_REVEALED = auto()
    CHALLENGE_WON = auto()
    CHALLENGE_LOST = auto()
    DISC_DISCARDED = auto()
    PLAYER_ELIMINATED = auto()
    ROUND_VOIDED = auto()
    MATCH_WON = auto()
    MATCH_DRAWN = auto()


@dataclass(frozen=True)
class RoundEvent:
    """A single ordered notification.

    Events never carry the identity of a face-down disc: ``disc`` is only set
    for reveals and for a discarded Skull that was shown during the challenge.
    """

    kind: EventKind
    seat: Optional[str] = None
    value: Optional[int] = None
    disc: Optional[Disc] = None
    target: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.name.lower(),
            "seat": self.seat,
            "value": self.value,
            "disc": serialize_disc(self.disc) if self.disc is not None else None,
            "target": self.target,
        }

    def describe(self) -> str:
        kind = self.kind
        if kind is EventKind.ROUND_STARTED:
            return f"Round {self.value} starts with {self.seat}."
        if kind is EventKind.DISC_PLACED:
            return f"{self.seat} places a disc."
        if kind is EventKind.BID_DECLARED:
            return f"{self.seat} opens the bidding at {self.value}."
        if kind is EventKind.BID_RAISED:
            return f"{self.seat} raises to {self.value}."
        if kind is EventKind.PASSED:
            return f"{self.seat} passes."
        if kind is EventKind.CHALLENGE_STARTED:
            return f"{self.seat} must reveal {self.value} flowers."
        if kind is EventKind.DISC_REVEALED:
            return f"{self.seat} reveals a {self.disc} from {self.target}."
        if kind is EventKind.CHALLENGE_WON:
            return f"{self.seat} wins the challenge and now has {self.value} point(s)."
        if kind is EventKind.CHALLENGE_LOST:
            return f"{self.seat} hit {self.target}'s skull."
        if kind is EventKind.DISC_DISCARDED:
            shown = f"their {self.disc}" if self.disc is not None else "a disc"
            return f"{self.seat} loses {shown}."
        if kind is EventKind.PLAYER_ELIMINATED:
            return f"{self.seat} is out of the match."
        if kind is EventKind.ROUND_VOIDED:
            return "Nobody opened the bidding; the round is replayed."
        if kind is EventKind.MATCH_WON:
            return f"{self.seat} wins the match."
        return "The match ends without a winner."
