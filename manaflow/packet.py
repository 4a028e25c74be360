"""Binary packets exchanged between the game server and its clients."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Any, BinaryIO, Callable, Iterable, Mapping, Optional, Sequence

PacketHandler = Callable[[list, Any], None]


class PacketType(IntEnum):
    """Wire types of packet fields; ARRAY is combined with a scalar type."""

    INT8 = 0x01
    INT16 = 0x02
    INT32 = 0x03
    INT64 = 0x04
    STRING = 0x10
    ARRAY = 0x20


class PacketError(Exception):
    """Raised when a packet cannot be encoded or decoded."""


_INT_FORMATS = {
    PacketType.INT8: ">B",
    PacketType.INT16: ">H",
    PacketType.INT32: ">I",
    PacketType.INT64: ">Q",
}

_MAX_ARRAY = 0xFF
_MAX_HEADER_ENTRIES = 0xFFFF
_UINT32_MAX = 0xFFFFFFFF


def _scalar(field_type: int) -> PacketType:
    """Element type of a field; unknown types are treated as strings."""
    try:
        return PacketType(field_type & ~PacketType.ARRAY)
    except ValueError:
        return PacketType.STRING


def _encode_value(field_type: PacketType, value: Any) -> bytes:
    fmt = _INT_FORMATS.get(field_type)
    if fmt is None:
        data = str(value).encode("utf-8")
        return struct.pack(">I", len(data)) + data
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise PacketError(f"cannot encode {value!r} as {field_type.name}") from exc
    mask = (1 << (8 * struct.calcsize(fmt))) - 1
    return struct.pack(fmt, number & mask)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            raise PacketError(f"expected {size} bytes, got {size - remaining}")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _decode_value(stream: BinaryIO, field_type: PacketType) -> Any:
    fmt = _INT_FORMATS.get(field_type)
    if fmt is None:
        (length,) = struct.unpack(">I", _read_exact(stream, 4))
        raw = _read_exact(stream, length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PacketError("string field is not valid UTF-8") from exc
    (number,) = struct.unpack(fmt, _read_exact(stream, struct.calcsize(fmt)))
    return number


class Packet:
    """A packet layout: an id, the field types and an optional read handler."""

    def __init__(
        self,
        packet_id: int = 0,
        arguments: Iterable[int] = (),
        handler: Optional[PacketHandler] = None,
    ) -> None:
        self.id = packet_id
        self.arguments = tuple(arguments)
        self.handler = handler

    def __repr__(self) -> str:
        return f"Packet(id={self.id:#x}, arguments={self.arguments!r})"

    def encode(self, values: Sequence[Any]) -> bytes:
        """Encode the values as a packet: the id byte followed by each field."""
        if len(values) != len(self.arguments):
            raise PacketError(
                f"packet {self.id:#x} takes {len(self.arguments)} values, "
                f"got {len(values)}"
            )
        parts = [bytes([self.id & 0xFF])]
        for field_type, value in zip(self.arguments, values):
            element = _scalar(field_type)
            if not field_type & PacketType.ARRAY:
                parts.append(_encode_value(element, value))
                continue
            if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                raise PacketError(f"array field expects a sequence, got {value!r}")
            if len(value) > _MAX_ARRAY:
                raise PacketError(f"array of {len(value)} items exceeds {_MAX_ARRAY}")
            parts.append(_encode_value(PacketType.INT8, len(value)))
            parts.extend(_encode_value(element, item) for item in value)
        return b"".join(parts)

    def write_packet(self, stream: BinaryIO, values: Sequence[Any]) -> None:
        """Encode the values and write the packet to the stream."""
        stream.write(self.encode(values))

    def decode(self, stream: BinaryIO) -> list:
        """Read the packet's fields (without the id byte) from the stream."""
        values: list = []
        for field_type in self.arguments:
            element = _scalar(field_type)
            if field_type & PacketType.ARRAY:
                count = _decode_value(stream, PacketType.INT8)
                values.append([_decode_value(stream, element) for _ in range(count)])
            else:
                values.append(_decode_value(stream, element))
        return values

    def bytes_to_read(self, stream: BinaryIO, client: Any) -> None:
        """Decode the fields and pass them to the handler with the client.

        Nothing is read when the packet has no handler.
        """
        if self.handler is None:
            return
        self.handler(self.decode(stream), client)


def _header_type(value: Any) -> PacketType:
    if isinstance(value, int) and not isinstance(value, bool):
        return PacketType.INT32 if 0 <= value <= _UINT32_MAX else PacketType.INT64
    return PacketType.STRING


def encode_header(header: Mapping[str, Any]) -> bytes:
    """Encode a header: entry count, then name, type byte and value of each."""
    if len(header) > _MAX_HEADER_ENTRIES:
        raise PacketError(f"header has too many entries: {len(header)}")
    parts = [_encode_value(PacketType.INT16, len(header))]
    for name, value in header.items():
        field_type = _header_type(value)
        parts.append(_encode_value(PacketType.STRING, name))
        parts.append(_encode_value(PacketType.INT8, field_type))
        parts.append(_encode_value(field_type, value))
    return b"".join(parts)


def write_header(stream: BinaryIO, header: Mapping[str, Any]) -> None:
    """Write an encoded header to the stream."""
    stream.write(encode_header(header))


def read_header(stream: BinaryIO) -> dict:
    """Read a header written by write_header."""
    count = _decode_value(stream, PacketType.INT16)
    header = {}
    for _ in range(count):
        name = _decode_value(stream, PacketType.STRING)
        field_type = _scalar(_decode_value(stream, PacketType.INT8))
        header[name] = _decode_value(stream, field_type)
    return header