"""Disc definitions and helpers for Skull."""

from __future__ import annotations

from enum import Enum, auto
from typing import Dict, Iterable, List, Sequence

FLOWERS_PER_PLAYER = 3
SKULLS_PER_PLAYER = 1


class Disc(Enum):
    FLOWER = auto()
    SKULL = auto()

    def __str__(self) -> str:
        return self.name.lower()


def starting_hand(flowers: int = FLOWERS_PER_PLAYER, skulls: int = SKULLS_PER_PLAYER) -> List[Disc]:
    """Return the discs every player is dealt once per match."""
    return [Disc.FLOWER] * flowers + [Disc.SKULL] * skulls


def deal_hands(
    seat_ids: Sequence[str],
    *,
    flowers: int = FLOWERS_PER_PLAYER,
    skulls: int = SKULLS_PER_PLAYER,
) -> Dict[str, List[Disc]]:
    return {seat: starting_hand(flowers, skulls) for seat in seat_ids}


def count_discs(discs: Iterable[Disc]) -> Dict[Disc, int]:
    counts = {disc: 0 for disc in Disc}
    for disc in discs:
        counts[disc] += 1
    return counts


def serialize_disc(disc: Disc) -> str:
    return disc.name.lower()


def deserialize_disc(payload: str) -> Disc:
    return Disc[payload.upper()]
