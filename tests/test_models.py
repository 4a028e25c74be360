import pytest

from manaflow.models import Card, Creep, Player


def _counter(obj):
    calls = []
    obj.subscribe(lambda: calls.append(1))
    return calls


def test_card_defaults():
    card = Card()
    assert card.name == "???"
    assert card.tooltip == "???"
    assert (card.id, card.mana, card.energy) == (0, 0, 0)


def test_creep_changes_notify():
    creep = Creep()
    calls = _counter(creep)
    creep.hp = 5
    creep.attack = 3
    assert creep.hp == 5
    assert creep.attack == 3
    assert len(calls) == 2


def test_player_new_board_is_empty():
    player = Player()
    assert [player.creep_at(i) for i in range(6)] == [None] * 6


def test_player_resources_notify():
    player = Player()
    calls = _counter(player)
    player.hp = 20
    player.mana = 4
    player.name = "Me"
    assert (player.hp, player.mana, player.name) == (20, 4, "Me")
    assert len(calls) == 3


def test_ready_and_unready():
    player = Player()
    calls = _counter(player)
    assert player.is_ready is False
    player.ready()
    assert player.is_ready is True
    player.unready()
    assert player.is_ready is False
    assert len(calls) == 2


def test_creep_updates_propagate_until_replaced():
    player = Player()
    creep = Creep(hp=3)
    player.replace_creep(2, creep)
    assert player.creep_at(2) is creep
    calls = _counter(player)
    creep.hp = 1
    assert len(calls) == 1
    player.replace_creep(2, None)
    assert player.creep_at(2) is None
    creep.hp = 0
    assert len(calls) == 2


def test_slot_out_of_range():
    player = Player()
    with pytest.raises(IndexError):
        player.creep_at(6)
    with pytest.raises(IndexError):
        player.replace_creep(-1, Creep())