import pytest

from bots.bot_arena import build_bots, main, play_match
from bots.cautious_bot import CautiousBot
from bots.random_bot import RandomBot


@pytest.mark.parametrize("seats", [3, 4, 5, 6])
@pytest.mark.parametrize("seed", [1, 7, 23])
def test_random_matches_finish_with_intact_state(seats, seed):
    bots = build_bots(["random"] * seats, seed=seed)
    result = play_match(bots, seed=seed, check_invariants=True)

    assert result["winner"] in bots
    assert set(result["scores"]) == set(bots)
    assert result["winner"] not in result["eliminated"]
    assert result["rounds"] >= 1


def test_mixed_lineup_is_reproducible():
    lineup = ["cautious", "random", "cautious", "random", "random"]
    first = play_match(build_bots(lineup, seed=5), seed=5, check_invariants=True)
    second = play_match(build_bots(lineup, seed=5), seed=5, check_invariants=True)
    assert first == second


def test_build_bots_assigns_seats_in_order():
    bots = build_bots(["cautious", "random", "random"], seed=0)
    assert list(bots) == ["P1", "P2", "P3"]
    assert isinstance(bots["P1"], CautiousBot)
    assert isinstance(bots["P3"], RandomBot)


def test_action_cap_stops_a_runaway_match():
    bots = build_bots(["random"] * 4, seed=2)
    with pytest.raises(RuntimeError):
        play_match(bots, seed=2, max_actions=3)


def test_main_prints_summary(capsys):
    main(["--bots", "random", "cautious", "random", "--seed", "3"])
    out = capsys.readouterr().out
    assert "Lineup: P1=Random, P2=Cautious, P3=Random" in out
    assert "Winner:" in out
