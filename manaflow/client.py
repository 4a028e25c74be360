"""Client-side connection helpers: addresses, protocol detection and errors."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, BinaryIO, Optional, Union
from urllib.parse import urlsplit

from manaflow.packet import PacketError, read_header

DEFAULT_PORT = 6112
DEFAULT_APPLICATION_NAME = "Mana Flow"


class SocketErrorKind(IntEnum):
    """Kinds of socket failure that end a game."""

    UNKNOWN = -1
    CONNECTION_REFUSED = 0
    REMOTE_HOST_CLOSED = 1
    HOST_NOT_FOUND = 2
    SOCKET_ACCESS = 3
    SOCKET_RESOURCE = 4
    SOCKET_TIMEOUT = 5
    DATAGRAM_TOO_LARGE = 6
    NETWORK = 7
    ADDRESS_IN_USE = 8
    SOCKET_ADDRESS_NOT_AVAILABLE = 9
    UNSUPPORTED_SOCKET_OPERATION = 10
    UNFINISHED_SOCKET_OPERATION = 11
    PROXY_AUTHENTICATION_REQUIRED = 12
    SSL_HANDSHAKE_FAILED = 13
    PROXY_CONNECTION_REFUSED = 14
    PROXY_CONNECTION_CLOSED = 15
    PROXY_CONNECTION_TIMEOUT = 16
    PROXY_NOT_FOUND = 17
    PROXY_PROTOCOL = 18
    OPERATION = 19
    SSL_INTERNAL = 20
    SSL_INVALID_USER_DATA = 21
    TEMPORARY = 22


class ProtocolKind(Enum):
    """Protocol spoken by a server, chosen from the first bytes it sends."""

    OLD = "old"
    FANCY = "fancy"


_UNIDENTIFIED = "An unidentified error occurred."

_REASONS = {
    SocketErrorKind.CONNECTION_REFUSED: "The connection was refused by the server",
    SocketErrorKind.REMOTE_HOST_CLOSED: "The remote host closed the connection",
    SocketErrorKind.HOST_NOT_FOUND: "The host address was not found",
    SocketErrorKind.SOCKET_ACCESS: (
        "The socket operation failed because the application lacked the "
        "required privileges"
    ),
    SocketErrorKind.SOCKET_RESOURCE: (
        "The local system ran out of resources (e.g., too many sockets)"
    ),
    SocketErrorKind.SOCKET_TIMEOUT: "The socket operation timed out.",
    SocketErrorKind.DATAGRAM_TOO_LARGE: (
        "The datagram was larger than the operating system's limit "
        "(which can be as low as 8192 bytes)"
    ),
    SocketErrorKind.NETWORK: (
        "An error occurred with the network (e.g., the network cable was "
        "accidentally plugged out)"
    ),
    SocketErrorKind.ADDRESS_IN_USE: "The address specified is already in use",
    SocketErrorKind.SOCKET_ADDRESS_NOT_AVAILABLE: (
        "The address specified does not belong to the host"
    ),
    SocketErrorKind.UNSUPPORTED_SOCKET_OPERATION: (
        "The requested socket operation is not supported by the local "
        "operating system (e.g., lack of IPv6 support)."
    ),
    SocketErrorKind.PROXY_AUTHENTICATION_REQUIRED: (
        "The proxy requires authentication."
    ),
    SocketErrorKind.SSL_HANDSHAKE_FAILED: (
        "The SSL/TLS handshake failed, so the connection was closed"
    ),
    SocketErrorKind.UNFINISHED_SOCKET_OPERATION: (
        "The last operation attempted has not finished yet"
    ),
    SocketErrorKind.PROXY_CONNECTION_REFUSED: (
        "Could not contact the proxy server because the connection to that "
        "server was denied"
    ),
    SocketErrorKind.PROXY_CONNECTION_CLOSED: (
        "The connection to the proxy server was closed unexpectedly"
    ),
    SocketErrorKind.PROXY_CONNECTION_TIMEOUT: (
        "The connection to the proxy server timed out or the proxy server "
        "stopped responding in the authentication phase"
    ),
    SocketErrorKind.PROXY_NOT_FOUND: "The proxy address set was not found",
    SocketErrorKind.PROXY_PROTOCOL: (
        "The connection negotiation with the proxy server failed, because the "
        "response from the proxy server could not be understood"
    ),
    SocketErrorKind.OPERATION: (
        "An operation was attempted while the socket was in a state that did "
        "not permit it"
    ),
    SocketErrorKind.SSL_INTERNAL: (
        "The SSL library being used reported an internal error. This is "
        "probably the result of a bad installation or misconfiguration of the "
        "library."
    ),
    SocketErrorKind.SSL_INVALID_USER_DATA: (
        "Invalid data (certificate, key, cypher, etc.) was provided and its use "
        "resulted in an error in the SSL library."
    ),
    SocketErrorKind.TEMPORARY: (
        "A temporary error occurred (e.g., operation would block and socket is "
        "non-blocking)"
    ),
}


def closed_reason(error: Any) -> str:
    """Human readable reason for a game closed by a socket error."""
    try:
        kind = SocketErrorKind(error)
    except ValueError:
        return _UNIDENTIFIED
    return _REASONS.get(kind, _UNIDENTIFIED)


def parse_address(address: str) -> tuple[str, int]:
    """Split a server address into host and port; the port defaults to 6112."""
    text = address.strip()
    if "//" not in text:
        text = "//" + text
    parts = urlsplit(text)
    host = parts.hostname
    if not host:
        raise ValueError(f"no host in address {address!r}")
    port = parts.port  # raises ValueError when out of range
    return host, DEFAULT_PORT if port is None else port


def detect_protocol(
    data: Union[bytes, bytearray], application_name: str = DEFAULT_APPLICATION_NAME
) -> Optional[tuple[ProtocolKind, bytes]]:
    """Choose the protocol from the first bytes a server sent.

    Returns None until as many bytes as the application name have arrived.
    Otherwise returns the protocol and the bytes it should go on to read:
    for the old text protocol that is everything received, for the newer
    binary protocol what follows the application name.
    """
    expected = application_name.encode("utf-8")
    received = bytes(data)
    if len(received) < len(expected):
        return None
    if received[: len(expected)] == expected:
        return ProtocolKind.FANCY, received[len(expected) :]
    return ProtocolKind.OLD, received


def read_server_banner(
    stream: BinaryIO, application_name: str = DEFAULT_APPLICATION_NAME
) -> tuple[str, dict]:
    """Read the rest of the server's banner line, then its protocol header.

    The application name has already been consumed from the stream; it is
    prefixed to what is read up to the newline to give the server type.
    """
    name = bytearray(application_name.encode("utf-8"))
    while True:
        byte = stream.read(1)
        if not byte:
            raise PacketError("connection ended before the server banner")
        if byte == b"\n":
            break
        name += byte
    server_type = name.decode("utf-8", errors="replace")
    return server_type, read_header(stream)