"""Game state objects seen by the client: cards, creeps and players."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

Listener = Callable[[], None]

BOARD_SIZE = 6


class _Observable:
    """Calls registered listeners whenever the object changes."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()


class _Notifying:
    """Attribute that notifies its owner's listeners when assigned."""

    def __set_name__(self, owner: type, name: str) -> None:
        self._attr = "_" + name

    def __get__(self, obj: Any, owner: type) -> Any:
        if obj is None:
            return self
        return getattr(obj, self._attr)

    def __set__(self, obj: Any, value: Any) -> None:
        setattr(obj, self._attr, value)
        obj._changed()


@dataclass
class Card:
    """A card the player can play."""

    id: int = 0
    type: int = 0
    speed: int = 0
    mana: int = 0
    energy: int = 0
    tooltip: str = "???"
    name: str = "???"


class Creep(_Observable):
    """A creature on a player's board."""

    hp = _Notifying()
    attack = _Notifying()
    id = _Notifying()
    image = _Notifying()

    def __init__(self, hp: int = 0, attack: int = 0, id: int = 0, image: Any = None) -> None:
        super().__init__()
        self._hp = hp
        self._attack = attack
        self._id = id
        self._image = image


class Player(_Observable):
    """A player with resources and a board of creep slots."""

    name = _Notifying()
    hp = _Notifying()
    mana = _Notifying()
    energy = _Notifying()

    def __init__(self, id: int = 0, name: str = "") -> None:
        super().__init__()
        self.id = id
        self._name = name
        self._hp = 0
        self._mana = 0
        self._energy = 0
        self._ready = False
        self._board: list[Optional[Creep]] = [None] * BOARD_SIZE

    @property
    def is_ready(self) -> bool:
        return self._ready

    def ready(self) -> None:
        self._ready = True
        self._changed()

    def unready(self) -> None:
        self._ready = False
        self._changed()

    def _check_slot(self, slot: int) -> None:
        if not 0 <= slot < BOARD_SIZE:
            raise IndexError(f"board slot {slot} out of range")

    def replace_creep(self, slot: int, creep: Optional[Creep]) -> None:
        """Put a creep (or nothing) in a slot, discarding the previous one."""
        self._check_slot(slot)
        old = self._board[slot]
        if old is not None:
            old.unsubscribe(self._changed)
        self._board[slot] = creep
        if creep is not None:
            creep.subscribe(self._changed)
        self._changed()

    def creep_at(self, slot: int) -> Optional[Creep]:
        self._check_slot(slot)
        return self._board[slot]