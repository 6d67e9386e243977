"""Player decisions accepted by the match controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from .discs import Disc, deserialize_disc, serialize_disc
from .errors import InvalidMove


@dataclass(frozen=True)
class Place:
    disc: Disc


@dataclass(frozen=True)
class DeclareBid:
    value: int


@dataclass(frozen=True)
class Raise:
    value: int


@dataclass(frozen=True)
class Pass:
    pass


@dataclass(frozen=True)
class ChooseFlip:
    target: str


Action = Union[Place, DeclareBid, Raise, Pass, ChooseFlip]


def serialize_action(action: Action) -> Dict[str, Any]:
    if isinstance(action, Place):
        return {"type": "place", "disc": serialize_disc(action.disc)}
    if isinstance(action, DeclareBid):
        return {"type": "declare_bid", "value": action.value}
    if isinstance(action, Raise):
        return {"type": "raise", "value": action.value}
    if isinstance(action, Pass):
        return {"type": "pass"}
    if isinstance(action, ChooseFlip):
        return {"type": "choose_flip", "target": action.target}
    raise InvalidMove(f"Unknown action {action!r}.")


def parse_action(payload: Mapping[str, Any]) -> Action:
    """Build an action from a JSON-like mapping.

    Raises:
        InvalidMove: unknown type, missing field or malformed value.
    """
    kind = payload.get("type")
    try:
        if kind == "place":
            name = str(payload["disc"])
            try:
                return Place(deserialize_disc(name))
            except KeyError as exc:
                raise InvalidMove(f"Unknown disc {name!r}.") from exc
        if kind == "declare_bid":
            return DeclareBid(_as_int(payload["value"]))
        if kind == "raise":
            return Raise(_as_int(payload["value"]))
        if kind == "pass":
            return Pass()
        if kind == "choose_flip":
            return ChooseFlip(str(payload["target"]))
    except KeyError as exc:
        raise InvalidMove(f"Action {kind!r} is missing field {exc.args[0]!r}.") from exc
    raise InvalidMove(f"Unknown action type {kind!r}.")


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidMove(f"Bid value must be an integer, got {value!r}.")
    return value


def action_label(action: Action) -> str:
    if isinstance(action, Place):
        return f"Place {action.disc}"
    if isinstance(action, DeclareBid):
        return f"Bid {action.value}"
    if isinstance(action, Raise):
        return f"Raise to {action.value}"
    if isinstance(action, ChooseFlip):
        return f"Flip {action.target}"
    return "Pass"
