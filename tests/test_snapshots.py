import copy

import pytest

from skull.actions import ChooseFlip, DeclareBid, Pass, Place, Raise
from skull.discs import Disc
from skull.events import EventKind
from skull.match import MatchController, StateCorrupted, verify_invariants
from skull.round import InputType
from skull.rules_schema import RuleSet

SEATS = ["A", "B", "C", "D"]


def place_all(controller, discs):
    for seat in list(controller.state.round.turn_order):
        controller.apply_action(seat, Place(discs[seat]))


def test_snapshot_taken_mid_bidding_replays_identically():
    controller = MatchController(SEATS, rng_seed=8)
    place_all(controller, {"A": Disc.FLOWER, "B": Disc.FLOWER, "C": Disc.SKULL, "D": Disc.FLOWER})
    controller.apply_action("A", DeclareBid(1))
    controller.apply_action("B", Raise(2))

    resumed = MatchController.from_state(
        copy.deepcopy(controller.state), rng=copy.deepcopy(controller.rng), check_invariants=True
    )
    assert resumed.current_seat() == "C"
    assert resumed.expected_input() is InputType.RAISE_OR_PASS
    assert resumed.legal_actions() == controller.legal_actions()

    for match in (controller, resumed):
        match.apply_action("C", Pass())
        match.apply_action("D", Pass())
        match.apply_action("A", Pass())
        match.apply_action("B", ChooseFlip("C"))

    assert resumed.state == controller.state
    assert resumed.state.player("B").disc_count() == 3
    assert resumed.state.round_number == 2


def test_snapshot_taken_mid_challenge_keeps_the_flip_count():
    controller = MatchController(SEATS, rng_seed=8)
    place_all(controller, {seat: Disc.FLOWER for seat in SEATS})
    controller.apply_action("A", DeclareBid(3))
    for seat in ["B", "C", "D"]:
        controller.apply_action(seat, Pass())
    controller.apply_action("A", ChooseFlip("B"))

    resumed = MatchController.from_state(copy.deepcopy(controller.state))

    assert resumed.resolver.flowers == 2
    assert resumed.resolver.revealed == [("A", Disc.FLOWER), ("B", Disc.FLOWER)]
    assert resumed.legal_actions() == [ChooseFlip("C"), ChooseFlip("D")]
    events = resumed.apply_action("A", ChooseFlip("D"))
    assert EventKind.CHALLENGE_WON in [event.kind for event in events]
    assert resumed.state.scores["A"] == 1


def test_snapshot_of_a_finished_match_stays_finished():
    controller = MatchController(SEATS, rng_seed=8, rules=RuleSet(wins_to_match=1))
    place_all(controller, {seat: Disc.FLOWER for seat in SEATS})
    controller.apply_action("A", DeclareBid(4))
    for seat in ["B", "C", "D"]:
        controller.apply_action("A", ChooseFlip(seat))
    assert controller.winner == "A"

    resumed = MatchController.from_state(copy.deepcopy(controller.state), rules=RuleSet(wins_to_match=1))

    assert resumed.is_over
    assert resumed.current_seat() is None


def test_corrupted_snapshot_is_rejected():
    controller = MatchController(SEATS, rng_seed=8)
    snapshot = copy.deepcopy(controller.state)
    snapshot.player("B").hand.remove(Disc.SKULL)

    with pytest.raises(StateCorrupted):
        MatchController.from_state(snapshot)


def test_face_up_disc_outside_a_challenge_is_corrupt():
    controller = MatchController(SEATS, rng_seed=8)
    controller.apply_action("A", Place(Disc.FLOWER))
    verify_invariants(controller.state, controller.rules)

    controller.state.player("A").stack[0].revealed = True
    with pytest.raises(StateCorrupted):
        verify_invariants(controller.state, controller.rules)
