import pytest

from skull.actions import ChooseFlip, DeclareBid, Pass, Place, Raise, action_label, parse_action, serialize_action
from skull.discs import Disc
from skull.errors import InvalidMove


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"type": "place", "disc": "skull"}, Place(Disc.SKULL)),
        ({"type": "place", "disc": "FLOWER"}, Place(Disc.FLOWER)),
        ({"type": "declare_bid", "value": 2}, DeclareBid(2)),
        ({"type": "raise", "value": 5}, Raise(5)),
        ({"type": "pass"}, Pass()),
        ({"type": "choose_flip", "target": "B"}, ChooseFlip("B")),
    ],
)
def test_parse_action(payload, expected):
    assert parse_action(payload) == expected


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"type": "shout"},
        {"type": "place"},
        {"type": "place", "disc": "rose"},
        {"type": "declare_bid"},
        {"type": "declare_bid", "value": "3"},
        {"type": "raise", "value": True},
        {"type": "raise", "value": 2.5},
        {"type": "choose_flip"},
    ],
)
def test_parse_action_rejects_bad_payloads(payload):
    with pytest.raises(InvalidMove):
        parse_action(payload)


def test_serialized_actions_parse_back():
    for action in [Place(Disc.FLOWER), DeclareBid(1), Raise(3), Pass(), ChooseFlip("C")]:
        assert parse_action(serialize_action(action)) == action


def test_action_labels():
    assert action_label(Place(Disc.SKULL)) == "Place skull"
    assert action_label(DeclareBid(2)) == "Bid 2"
    assert action_label(Raise(4)) == "Raise to 4"
    assert action_label(Pass()) == "Pass"
    assert action_label(ChooseFlip("B")) == "Flip B"
