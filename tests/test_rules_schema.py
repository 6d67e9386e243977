import pytest
from pydantic import ValidationError

from skull.match import MatchController
from skull.rules_schema import RuleSet, load_rules


def test_default_rules():
    rules = RuleSet()
    assert rules.min_players == 3
    assert rules.max_players == 6
    assert rules.discs_per_player == 4
    assert rules.wins_to_match == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_players": 7},
        {"min_players": 5, "max_players": 4},
        {"flowers_per_player": 0},
        {"skulls_per_player": 0},
        {"wins_to_match": 0},
    ],
)
def test_invalid_rules(overrides):
    with pytest.raises(ValidationError):
        RuleSet(**overrides)


def test_load_rules_from_json(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text('{"wins_to_match": 1, "min_players": 4}', encoding="utf-8")

    rules = load_rules(path)

    assert rules.wins_to_match == 1
    assert rules.min_players == 4
    assert rules.flowers_per_player == 3


def test_custom_rules_drive_the_match():
    rules = RuleSet(flowers_per_player=2, wins_to_match=1)
    controller = MatchController(["A", "B", "C"], rng_seed=0, rules=rules)
    assert all(player.disc_count() == 3 for player in controller.state.players)
