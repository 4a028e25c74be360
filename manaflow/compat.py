"""Client side of the text protocol spoken by older game servers."""

from __future__ import annotations

import codecs
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence, Union

from manaflow.models import Card, Creep, Player

log = logging.getLogger(__name__)

_INTEGER = re.compile(r"\s*[+-]?\d+\s*")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_PLAYER_SLOT = 4


class GameMode(Enum):
    """How the client treats cards it receives."""

    CLASSIC = "classic"
    STANDARD = "standard"


class CardEvent(Enum):
    """Changes to a card that the user interface should show."""

    ENABLE = "enable"
    DISABLE = "disable"
    REMOVE = "remove"


MessageListener = Callable[[str], None]
CardListener = Callable[[CardEvent, Card], None]


@dataclass
class GameState:
    """Cards, players and the local player as known by the client."""

    mode: GameMode = GameMode.CLASSIC
    player_id: int = 0
    cards: dict[int, Card] = field(default_factory=dict)
    players: dict[int, Player] = field(default_factory=dict)
    hand: list[Card] = field(default_factory=list)
    on_message: Optional[MessageListener] = None
    on_card_event: Optional[CardListener] = None

    def card(self, card_id: int) -> Card:
        """The card with this id, created on first use."""
        found = self.cards.get(card_id)
        if found is None:
            found = self.cards[card_id] = Card(id=card_id)
        return found

    def player(self, player_id: int) -> Player:
        """The player with this id, created on first use."""
        found = self.players.get(player_id)
        if found is None:
            found = self.players[player_id] = Player(id=player_id)
        return found

    @property
    def player_data(self) -> Player:
        """The local player."""
        return self.player(self.player_id)

    def append_card(self, card: Card) -> None:
        """Add a card to the local player's hand."""
        self.hand.append(card)

    def _receive_message(self, message: str) -> None:
        if self.on_message is not None:
            self.on_message(message)

    def _change_ui(self, event: CardEvent, card: Card) -> None:
        if self.on_card_event is not None:
            self.on_card_event(event, card)


def _to_int(text: str) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value


def _ints(params: Sequence[str], first: int, last: int) -> Optional[list[int]]:
    values = [_to_int(text) for text in params[first : last + 1]]
    if any(value is None for value in values):
        return None
    return values  # type: ignore[return-value]


Handler = Callable[[str, int, list], None]


class CompatibilityProtocol:
    """Parses ``;``-terminated text commands and applies them to a game state."""

    def __init__(self, game: GameState, buffer: str = "") -> None:
        self.game = game
        self.buffer = buffer
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        exactly = lambda n: (lambda size: size == n)  # noqa: E731
        more_than = lambda n: (lambda size: size > n)  # noqa: E731
        anything = lambda size: True  # noqa: E731
        self._handlers: dict[str, tuple[Callable[[int], bool], Handler]] = {
            "SAY": (anything, self._say),
            "DISP": (anything, self._say),
            "ADDACTION": (exactly(2), self._add_action),
            "START": (exactly(3), self._start),
            "ACTIONON": (exactly(2), self._action_on),
            "ACTIONOFF": (exactly(2), self._action_off),
            "RENAME": (more_than(2), self._rename),
            "CCREATE": (exactly(7), self._creep_create),
            "CKILL": (exactly(3), self._creep_kill),
            "DMG": (exactly(4), self._damage),
            "HP": (exactly(4), self._hp),
            "MANA": (exactly(3), self._mana),
            "ENERGY": (exactly(3), self._energy),
            "READY": (exactly(2), self._ready),
            "UNREADY": (exactly(2), self._unready),
            "REMOVE": (exactly(3), self._remove),
            "TOOLTIP": (more_than(2), self._tooltip),
            "ACTIONNAME": (more_than(2), self._action_name),
            "ACTIONSTATS": (exactly(6), self._action_stats),
        }

    def feed(self, data: Union[bytes, str]) -> list[str]:
        """Add received data and run every complete command; return those run."""
        if isinstance(data, bytes):
            data = self._decoder.decode(data)
        self.buffer += data
        *complete, self.buffer = self.buffer.split(";")
        for command in complete:
            self.handle_command(command)
        return complete

    def handle_command(self, command: str) -> None:
        """Apply one command (without its terminating ``;``)."""
        id_pos = command.find(" ")
        name = command[:id_pos] if id_pos != -1 else command
        params = command.split(" ")
        entry = self._handlers.get(name)
        if entry is None or not entry[0](len(params)):
            log.debug("Unknown command [%d] %s", len(params), command)
            return
        entry[1](command, id_pos, params)

    def encode_message(self, message: str) -> bytes:
        """Bytes that send a chat message to the server."""
        return f"SAY {message};".encode("utf-8")

    def _say(self, command: str, id_pos: int, params: list) -> None:
        self.game._receive_message(command[id_pos + 1 :] if id_pos != -1 else command)

    def _add_action(self, command: str, id_pos: int, params: list) -> None:
        card_id = _to_int(params[1])
        if card_id is None:
            log.error("Card id invalid: %s", params[1])
            return
        card = self.game.card(card_id)
        self.game.append_card(card)
        if self.game.mode is GameMode.CLASSIC:
            self.game._change_ui(CardEvent.DISABLE, card)

    def _start(self, command: str, id_pos: int, params: list) -> None:
        player_id = _to_int(params[2])
        self.game.player_id = 0 if player_id is None else player_id
        if player_id is None:
            log.error("Player id invalid: %s", params[2])
            return
        player = self.game.player_data
        if player.name == "":
            player.name = "Me"

    def _card_event(self, params: list, event: CardEvent) -> None:
        card_id = _to_int(params[1])
        if card_id is None:
            log.error("Card id invalid: %s", params[1])
            return
        self.game._change_ui(event, self.game.card(card_id))

    def _action_on(self, command: str, id_pos: int, params: list) -> None:
        self._card_event(params, CardEvent.ENABLE)

    def _action_off(self, command: str, id_pos: int, params: list) -> None:
        self._card_event(params, CardEvent.DISABLE)

    def _rename(self, command: str, id_pos: int, params: list) -> None:
        player_id = _to_int(params[1])
        if player_id is None:
            log.error("Player id invalid: %s", params[1])
            return
        self.game.player(player_id).name = command[id_pos + 2 + len(params[1]) :]

    def _creep_create(self, command: str, id_pos: int, params: list) -> None:
        values = _ints(params, 1, 6)
        if values is None:
            log.error("Invalid command: %s", params)
            return
        player_id, slot, index, damage, hp, image = values
        creep = Creep(hp=hp, attack=damage, id=index, image=f":/creature/{image}.png")
        self.game.player(player_id).replace_creep(slot, creep)

    def _creep_kill(self, command: str, id_pos: int, params: list) -> None:
        values = _ints(params, 1, 2)
        if values is None:
            log.error("Invalid command: %s", params)
            return
        player_id, slot = values
        self.game.player(player_id).replace_creep(slot, None)

    def _damage(self, command: str, id_pos: int, params: list) -> None:
        values = _ints(params, 1, 3)
        if values is None:
            log.error("Player id invalid: %s", params[1])
            return
        player_id, slot, damage = values
        player = self.game.player(player_id)
        if slot == _PLAYER_SLOT:
            log.debug("Can't change damage of a player")
            return
        creep = player.creep_at(slot)
        if creep is None:
            log.error("Dead creep on slot %d", slot)
        else:
            creep.attack = damage

    def _hp(self, command: str, id_pos: int, params: list) -> None:
        values = _ints(params, 1, 3)
        if values is None:
            log.error("Player id invalid: %s", params[1])
            return
        player_id, slot, hp = values
        player = self.game.player(player_id)
        if slot == _PLAYER_SLOT:
            player.hp = hp
            return
        creep = player.creep_at(slot)
        if creep is None:
            log.error("Dead creep on slot %d", slot)
        else:
            creep.hp = hp

    def _mana(self, command: str, id_pos: int, params: list) -> None:
        values = _ints(params, 1, 2)
        if values is None:
            log.error("Player id invalid: %s", params[1])
            return
        self.game.player(values[0]).mana = values[1]

    def _energy(self, command: str, id_pos: int, params: list) -> None:
        values = _ints(params, 1, 2)
        if values is None:
            log.error("Player id invalid: %s", params[1])
            return
        self.game.player(values[0]).energy = values[1]

    def _ready(self, command: str, id_pos: int, params: list) -> None:
        player_id = _to_int(params[1])
        if player_id is None:
            log.error("Player id invalid: %s", params[1])
            return
        self.game.player(player_id).ready()

    def _unready(self, command: str, id_pos: int, params: list) -> None:
        player_id = _to_int(params[1])
        if player_id is None:
            log.error("Player id invalid: %s", params[1])
            return
        self.game.player(player_id).unready()

    def _remove(self, command: str, id_pos: int, params: list) -> None:
        values = _ints(params, 1, 2)
        if values is None:
            return
        player_id, card_id = values
        if player_id == self.game.player_data.id:
            self.game._change_ui(CardEvent.REMOVE, self.game.card(card_id))

    def _tooltip(self, command: str, id_pos: int, params: list) -> None:
        card_id = _to_int(params[1])
        if card_id is None:
            log.error("Card id invalid: %s", params[1])
            return
        card = self.game.card(card_id)
        start = id_pos + 1 + len(params[1])
        name_end = command.find("\n")
        type_end = command.find("\n", name_end + 1) if name_end != -1 else -1
        card.name = command[start:name_end] if name_end >= start else command[start:]
        card.tooltip = command[type_end + 1 :]

    def _action_name(self, command: str, id_pos: int, params: list) -> None:
        card_id = _to_int(params[1])
        if card_id is None:
            log.error("Card id invalid: %s", params[1])
            return
        self.game.card(card_id).name = command[id_pos + 2 + len(params[1]) :]

    def _action_stats(self, command: str, id_pos: int, params: list) -> None:
        values = _ints(params, 1, 5)
        if values is None:
            return
        card_id, card_type, speed, mana, energy = values
        card = self.game.card(card_id)
        card.type = card_type
        card.speed = speed
        card.mana = mana
        card.energy = energy