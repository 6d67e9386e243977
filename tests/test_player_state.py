import pytest

from skull.discs import Disc, starting_hand
from skull.errors import InvalidMove
from skull.player import PlayerState


def fresh_player(seat="A"):
    return PlayerState(seat_id=seat, hand=starting_hand())


def test_place_moves_disc_to_top_of_stack():
    player = fresh_player()
    player.place(Disc.FLOWER)
    player.place(Disc.SKULL)

    assert [entry.disc for entry in player.stack] == [Disc.FLOWER, Disc.SKULL]
    assert player.hand == [Disc.FLOWER, Disc.FLOWER]
    assert player.disc_count() == 4


def test_place_rejects_missing_kind_without_mutation():
    player = fresh_player()
    player.place(Disc.SKULL)

    with pytest.raises(InvalidMove):
        player.place(Disc.SKULL)

    assert player.hand == [Disc.FLOWER] * 3
    assert len(player.stack) == 1


def test_eliminated_player_cannot_place():
    player = PlayerState(seat_id="A", hand=[], discarded=starting_hand(), eliminated=True)
    with pytest.raises(InvalidMove):
        player.place(Disc.FLOWER)


def test_reveal_next_flips_top_to_bottom():
    player = fresh_player()
    player.place(Disc.FLOWER)
    player.place(Disc.SKULL)

    assert player.reveal_next() is Disc.SKULL
    assert player.unrevealed_count() == 1
    assert player.reveal_next() is Disc.FLOWER
    with pytest.raises(InvalidMove):
        player.reveal_next()


def test_return_stack_hides_discs_again():
    player = fresh_player()
    player.place(Disc.SKULL)
    player.reveal_next()
    player.return_stack()

    assert player.stack == []
    assert sorted(player.hand, key=lambda disc: disc.value) == starting_hand()


def test_discard_prefers_the_revealed_stack_disc():
    player = fresh_player()
    player.place(Disc.SKULL)
    player.reveal_next()

    lost = player.discard(lambda owned: Disc.SKULL)

    assert lost is Disc.SKULL
    assert player.stack == []
    assert player.hand == [Disc.FLOWER] * 3
    assert player.discarded == [Disc.SKULL]
    assert not player.eliminated


def test_discard_of_last_disc_eliminates():
    player = PlayerState(seat_id="A", hand=[Disc.FLOWER], discarded=[Disc.FLOWER, Disc.FLOWER, Disc.SKULL])

    player.discard(lambda owned: owned[0])

    assert player.eliminated
    assert player.disc_count() == 0
    assert len(player.discarded) == 4


def test_discard_rejects_a_disc_not_owned():
    player = PlayerState(seat_id="A", hand=[Disc.FLOWER] * 3, discarded=[Disc.SKULL])

    with pytest.raises(InvalidMove):
        player.discard(lambda owned: Disc.SKULL)

    assert player.hand == [Disc.FLOWER] * 3
    assert player.discarded == [Disc.SKULL]
