"""Table of the packets known to the server and the client."""

from __future__ import annotations

from typing import Optional

from manaflow.packet import Packet, PacketType

_CLIENT_OFFSET = 0x100

T = PacketType


def default_packets() -> dict[int, Packet]:
    """Build the packet table; client packets are stored at id + 0x100."""
    one_int16 = (T.INT16,)
    one_int32 = (T.INT32,)
    array_int32 = (T.ARRAY | T.INT32,)
    one_str = (T.STRING,)
    two_str = (T.STRING, T.STRING)
    player_str = (T.INT32, T.STRING)
    player_int16 = (T.INT32, T.INT16)
    creature = (T.INT32,) + (T.INT8,) * 5
    remove_creature = (T.INT8, T.INT8)
    creature_stats = (T.INT8, T.INT8, T.INT8)

    layouts = [
        # Sent by the server
        (0x01, two_str),  # Message
        (0x02, one_str),  # Information
        (0x0F, one_int32),  # Start signal
        (0x10, array_int32),  # Add card
        (0x11, one_int16),  # Card info
        (0x18, one_int16),  # Enable card
        (0x19, one_int16),  # Disable card
        (0x20, player_str),  # Rename
        (0x21, one_int32),  # Player ready
        (0x22, one_int32),  # Player unprepared
        (0x28, player_int16),  # Player mana
        (0x29, player_int16),  # Player energy
        (0x30, creature),  # Creature
        (0x31, remove_creature),  # Remove creature
        (0x38, creature_stats),  # Creature damage
        (0x39, creature_stats),  # Creature hp
        # Sent by the client
        (0x101, one_str),  # Message
        (0x120, one_str),  # Rename
    ]
    return {packet_id: Packet(packet_id, args) for packet_id, args in layouts}


def _check_id(packet_id: int) -> None:
    if not 0 <= packet_id <= 0xFF:
        raise ValueError(f"packet id {packet_id} is not a byte")


class PacketManager:
    """Looks up packet layouts by the id byte read from the wire."""

    def __init__(self, packets: Optional[dict[int, Packet]] = None) -> None:
        self.packets = default_packets() if packets is None else packets

    def client_packet(self, packet_id: int) -> Optional[Packet]:
        """Packet sent by a client with this id, or None if unknown."""
        _check_id(packet_id)
        return self.packets.get(packet_id + _CLIENT_OFFSET)

    def server_packet(self, packet_id: int) -> Optional[Packet]:
        """Packet sent by the server with this id, or None if unknown."""
        _check_id(packet_id)
        return self.packets.get(packet_id)