import io

import pytest

from manaflow.packet import (
    Packet,
    PacketError,
    PacketType,
    encode_header,
    read_header,
    write_header,
)

T = PacketType


@pytest.mark.parametrize(
    "kind, value, expected",
    [
        (T.INT8, 5, b"\x05"),
        (T.INT16, 5, b"\x00\x05"),
        (T.INT32, 5, b"\x00\x00\x00\x05"),
        (T.INT64, 5, b"\x00\x00\x00\x00\x00\x00\x00\x05"),
        (T.STRING, "ab", b"\x00\x00\x00\x02ab"),
    ],
)
def test_type_codes_set_field_width(kind, value, expected):
    packet = Packet(0x01, [kind])
    assert packet.encode([value]) == b"\x01" + expected


def test_array_is_prefixed_with_one_byte_count():
    packet = Packet(0x01, [T.ARRAY | T.INT16])
    assert packet.encode([[1, 2]]) == b"\x01\x02\x00\x01\x00\x02"


def test_string_wire_format():
    packet = Packet(0x02, [T.STRING])
    assert packet.encode(["hi"]) == b"\x02\x00\x00\x00\x02hi"


def test_integers_are_big_endian():
    packet = Packet(0x28, [T.INT32, T.INT16])
    assert packet.encode([1, 2]) == b"\x28\x00\x00\x00\x01\x00\x02"


def test_id_is_written_as_a_single_byte():
    packet = Packet(0x101, [T.STRING])
    assert packet.encode(["x"])[0] == 0x01


@pytest.mark.parametrize(
    "arguments, values",
    [
        ([T.INT8, T.INT16, T.INT32, T.INT64], [255, 65535, 2**32 - 1, 2**64 - 1]),
        ([T.STRING, T.STRING], ["player", "héllo wörld"]),
        ([T.INT32, T.STRING], [7, ""]),
        ([T.ARRAY | T.INT32], [[1, 2, 3]]),
        ([T.ARRAY | T.STRING, T.INT8], [["a", "bc"], 4]),
        ([T.ARRAY | T.INT16], [[]]),
    ],
)
def test_round_trip(arguments, values):
    packet = Packet(0x10, arguments)
    data = packet.encode(values)
    stream = io.BytesIO(data[1:])
    assert packet.decode(stream) == values
    assert stream.read() == b""


def test_integers_are_truncated_to_width():
    packet = Packet(1, [T.INT8])
    decoded = packet.decode(io.BytesIO(packet.encode([0x1FF])[1:]))
    assert decoded == [0xFF]


def test_negative_int64_wraps():
    packet = Packet(1, [T.INT64])
    decoded = packet.decode(io.BytesIO(packet.encode([-1])[1:]))
    assert decoded == [2**64 - 1]


def test_unknown_type_is_a_string():
    packet = Packet(1, [0x07])
    decoded = packet.decode(io.BytesIO(packet.encode([42])[1:]))
    assert decoded == ["42"]


def test_wrong_value_count_raises():
    with pytest.raises(PacketError):
        Packet(0x01, [T.STRING, T.STRING]).encode(["only one"])


def test_array_requires_sequence():
    with pytest.raises(PacketError):
        Packet(1, [T.ARRAY | T.INT32]).encode([5])


def test_array_too_long_raises():
    with pytest.raises(PacketError):
        Packet(1, [T.ARRAY | T.INT8]).encode([list(range(256))])


def test_non_numeric_int_raises():
    with pytest.raises(PacketError):
        Packet(1, [T.INT32]).encode(["abc"])


def test_truncated_stream_raises():
    packet = Packet(1, [T.INT32])
    with pytest.raises(PacketError):
        packet.decode(io.BytesIO(b"\x00\x01"))


def test_write_packet_writes_encoding():
    packet = Packet(0x20, [T.INT32, T.STRING])
    out = io.BytesIO()
    packet.write_packet(out, [3, "name"])
    assert out.getvalue() == packet.encode([3, "name"])


def test_bytes_to_read_calls_handler():
    received = []
    packet = Packet(0x20, [T.STRING], lambda values, client: received.append((values, client)))
    stream = io.BytesIO(packet.encode(["bob"])[1:])
    packet.bytes_to_read(stream, "client-1")
    assert received == [(["bob"], "client-1")]


def test_bytes_to_read_without_handler_reads_nothing():
    packet = Packet(0x20, [T.STRING])
    stream = io.BytesIO(packet.encode(["bob"])[1:])
    packet.bytes_to_read(stream, None)
    assert stream.tell() == 0


def test_header_round_trip():
    header = {"name": "Mana Flow", "version": 1, "big": 2**40}
    stream = io.BytesIO(encode_header(header))
    assert read_header(stream) == header


def test_write_header_matches_encode():
    header = {"a": "b"}
    out = io.BytesIO()
    write_header(out, header)
    assert out.getvalue() == encode_header(header)


def test_empty_header():
    assert encode_header({}) == b"\x00\x00"
    assert read_header(io.BytesIO(b"\x00\x00")) == {}


def test_header_non_int_values_become_strings():
    stream = io.BytesIO(encode_header({"flag": 1.5}))
    assert read_header(stream) == {"flag": "1.5"}