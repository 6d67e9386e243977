"""Per-seat disc bookkeeping for Skull."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from .discs import Disc
from .errors import InvalidMove

# Receives the discs a player still owns and returns the kind to lose.
DiscardChoice = Callable[[Sequence[Disc]], Disc]


@dataclass
class StackedDisc:
    disc: Disc
    revealed: bool = False


@dataclass
class PlayerState:
    """One seat's hand, played stack and discards for the whole match."""

    seat_id: str
    hand: List[Disc]
    stack: List[StackedDisc] = field(default_factory=list)
    discarded: List[Disc] = field(default_factory=list)
    eliminated: bool = False

    def place(self, disc: Disc) -> None:
        if self.eliminated:
            raise InvalidMove(f"Seat {self.seat_id} is eliminated.")
        if disc not in self.hand:
            raise InvalidMove(f"Seat {self.seat_id} has no {disc} left in hand.")
        self.hand.remove(disc)
        self.stack.append(StackedDisc(disc))

    def reveal_next(self) -> Disc:
        """Flip the topmost face-down disc of the stack and return it."""
        for entry in reversed(self.stack):
            if not entry.revealed:
                entry.revealed = True
                return entry.disc
        raise InvalidMove(f"Seat {self.seat_id} has no face-down disc left to reveal.")

    def return_stack(self) -> None:
        self.hand.extend(entry.disc for entry in self.stack)
        self.stack = []

    def discard(self, strategy: DiscardChoice) -> Disc:
        """Permanently lose one owned disc picked by ``strategy``.

        The stack is searched before the hand so that a revealed own Skull is
        the disc taken out of play. Losing the last disc eliminates the seat.
        """
        owned = self.owned()
        if not owned:
            raise InvalidMove(f"Seat {self.seat_id} has nothing left to discard.")
        choice = strategy(owned)
        if not self.owns(choice):
            raise InvalidMove(f"Seat {self.seat_id} does not own a {choice} to discard.")

        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index].disc is choice:
                del self.stack[index]
                break
        else:
            self.hand.remove(choice)

        self.discarded.append(choice)
        if self.disc_count() == 0:
            self.eliminated = True
        return choice

    def owned(self) -> List[Disc]:
        return list(self.hand) + [entry.disc for entry in self.stack]

    def owns(self, disc: Disc) -> bool:
        return disc in self.hand or any(entry.disc is disc for entry in self.stack)

    def disc_count(self) -> int:
        return len(self.hand) + len(self.stack)

    def unrevealed_count(self) -> int:
        return sum(1 for entry in self.stack if not entry.revealed)

    def stack_size(self) -> int:
        return len(self.stack)
