"""The game server: accepts players, relays chat and runs console commands."""

from __future__ import annotations

import argparse
import asyncio
import io
import logging
import sys
from typing import Any, Callable, Optional, Sequence

from manaflow.commandhelper import CommandHelper
from manaflow.config import DEFAULT_PATH, ServerConfig, missing_options
from manaflow.packet import PacketError
from manaflow.packetmanager import PacketManager

log = logging.getLogger(__name__)

APPLICATION_NAME = "Mana Flow"
APPLICATION_VERSION = "0.0.1"

_MESSAGE_PACKET = 0x01
_RENAME_PACKET = 0x20
_READ_SIZE = 4096

SessionListener = Callable[["ClientSession"], None]


def _html_escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _result_text(result: Any) -> str:
    if isinstance(result, bool):
        return "true" if result else "false"
    return str(result)


class ClientSession:
    """A connected player: identity, selected card and readiness."""

    def __init__(
        self,
        session_id: int,
        writer: Any = None,
        name: str = "",
        server: Optional["GameServer"] = None,
        on_ready: Optional[SessionListener] = None,
    ) -> None:
        self.id = session_id
        self.name = name
        self.server = server
        self.on_ready = on_ready
        self.card = 0
        self.ready = False
        self._writer = writer

    def __repr__(self) -> str:
        return f"ClientSession(id={self.id}, name={self.name!r})"

    def _became_ready(self) -> None:
        if self.on_ready is not None:
            self.on_ready(self)

    def _set_ready(self, ready: bool) -> None:
        if ready and not self.ready:
            self._became_ready()
        self.ready = ready

    def set_card(self, card: int) -> None:
        """Select a card; selecting card 0 means no card and not ready."""
        if not 0 <= card <= 0xFFFF:
            raise ValueError(f"card id {card} is out of range")
        self.card = card
        self._set_ready(card != 0)

    def unselect_card(self) -> None:
        self.card = 0
        self.unprepared()

    def mark_ready(self) -> None:
        self.ready = True
        self._became_ready()

    def unprepared(self) -> None:
        self.ready = False

    def write(self, data: bytes) -> int:
        """Send bytes to the player; return how many were queued."""
        if self._writer is None:
            raise RuntimeError(f"session {self.id} has no connection")
        self._writer.write(bytes(data))
        return len(data)

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()


class _BroadcastWriter:
    """Write-only stream that sends everything to every client."""

    def __init__(self, server: "GameServer") -> None:
        self._server = server

    def write(self, data: bytes) -> int:
        return self._server.broadcast(data)


class GameServer:
    """Listens for players, relays their packets and keeps chat and console logs."""

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        host: str = "0.0.0.0",
        application_name: str = APPLICATION_NAME,
        version: str = APPLICATION_VERSION,
        packets: Optional[PacketManager] = None,
    ) -> None:
        self.config = config if config is not None else ServerConfig()
        self.host = host
        self.application_name = application_name
        self.version = version
        self.packets = packets if packets is not None else PacketManager()
        self.commands = CommandHelper()
        self.commands.add_help()
        self.chat_log: list[str] = []
        self.console_log: list[str] = []
        self.status = ""
        self.on_client_connected: Optional[SessionListener] = None
        self.on_client_disconnected: Optional[SessionListener] = None
        self._clients: dict[int, ClientSession] = {}
        self._next_id = 0
        self._server: Optional[asyncio.AbstractServer] = None
        self._broadcast = _BroadcastWriter(self)
        self._install_handlers()

    def _install_handlers(self) -> None:
        for packet_id, handler in (
            (_MESSAGE_PACKET, self._on_chat),
            (_RENAME_PACKET, self._on_rename),
        ):
            packet = self.packets.client_packet(packet_id)
            if packet is not None:
                packet.handler = handler

    def _on_chat(self, values: list, session: ClientSession) -> None:
        self.send_message(str(values[0]), session.name)

    def _on_rename(self, values: list, session: ClientSession) -> None:
        session.name = str(values[0])

    @property
    def port(self) -> int:
        """Port the server listens on once started."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("server is not running")
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """Start listening on the configured port; a second call does nothing."""
        if self._server is not None:
            return
        self._next_id = 0
        self._server = await asyncio.start_server(
            self._handle_connection, self.host, self.config.port
        )
        self.status = "Server ready!"

    async def stop(self) -> None:
        """Close every connection and stop listening."""
        if self._server is None:
            return
        server, self._server = self._server, None
        server.close()
        for session in list(self._clients.values()):
            session.close()
        await server.wait_closed()

    async def _serve(self) -> None:
        await self.start()
        assert self._server is not None
        try:
            await self._server.serve_forever()
        finally:
            await self.stop()

    def clients(self) -> dict[int, ClientSession]:
        return dict(self._clients)

    def broadcast(self, data: bytes) -> int:
        """Send the bytes to every connected client."""
        for session in list(self._clients.values()):
            session.write(data)
        return len(data)

    def send_message(self, message: str, player_name: Optional[str] = None) -> str:
        """Post a chat message; return the entry added to the chat log.

        Messages from a player are broadcast. Server notices have no player
        name, which the message packet requires, so they stay in the log.
        """
        if player_name is None:
            entry = f"<i>{_html_escape(message)}</i>"
        else:
            packet = self.packets.server_packet(_MESSAGE_PACKET)
            if packet is not None:
                packet.write_packet(self._broadcast, [player_name, message])
            entry = (
                f"<b style='color:#6a6;'>&lt;{_html_escape(player_name)}&gt;</b> "
                f"{_html_escape(message)}"
            )
        self.chat_log.append(entry)
        return entry

    def handle_chat_input(self, text: str) -> str:
        """Run a ``/command`` or send the text as the server; return the chat entry."""
        if not text.startswith("/"):
            return self.send_message(text, "Server")
        result = self.commands.execute(text[1:])
        entry = "<i>Unknow command</i>" if result is None else _result_text(result)
        self.chat_log.append(entry)
        return entry

    def log(self, message: str) -> None:
        self.console_log.append(message)

    def warn(self, message: str) -> None:
        self.console_log.append(f"<pre style='color:#FB3;'>{_html_escape(message)}</pre>")

    def error(self, message: str) -> None:
        self.console_log.append(f"<pre style='color:#F22;'>{_html_escape(message)}</pre>")

    def _accept(self, writer: Any) -> ClientSession:
        self.send_message("A new player joined the game")
        session_id = self._next_id
        session = ClientSession(session_id, writer, name=f"Player-{session_id}", server=self)
        session.write(f"{self.application_name} v{self.version}\n".encode("utf-8"))
        self._clients[session_id] = session
        self.status = f"Connected client: {len(self._clients)}"
        self._next_id += 1
        if self.on_client_connected is not None:
            self.on_client_connected(session)
        return session

    def _disconnected(self, session: ClientSession) -> None:
        self.send_message(f"{session.name} left the game")
        if self.on_client_disconnected is not None:
            self.on_client_disconnected(session)
        self._clients.pop(session.id, None)
        self.status = f"Connected client: {len(self._clients)}"

    def _process(self, session: ClientSession, buffer: bytearray) -> bool:
        """Handle every complete packet in the buffer; False means drop the client."""
        while buffer:
            packet = self.packets.client_packet(buffer[0])
            if packet is None:
                return False
            stream = io.BytesIO(bytes(buffer[1:]))
            try:
                values = packet.decode(stream)
            except PacketError as exc:
                if isinstance(exc.__cause__, UnicodeDecodeError):
                    return False
                return True  # incomplete: wait for more bytes
            del buffer[: 1 + stream.tell()]
            if packet.handler is not None:
                packet.handler(values, session)
        return True

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        session = self._accept(writer)
        buffer = bytearray()
        try:
            while chunk := await reader.read(_READ_SIZE):
                buffer += chunk
                if not self._process(session, buffer):
                    break
        except ConnectionError:
            pass
        finally:
            writer.close()
            self._disconnected(session)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the game server from the settings file."""
    parser = argparse.ArgumentParser(prog="manaflow-server", description="Run the game server.")
    parser.add_argument("--config", default=DEFAULT_PATH, help="settings file")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--start", action="store_true", help="start even if autohost is off")
    args = parser.parse_args(argv)

    missing = missing_options(args.config)
    if missing:
        for option in missing:
            print(f"Option missing : {option}", file=sys.stderr)
        ServerConfig.load(args.config).save(args.config)
        print(f"Review {args.config} and start again.", file=sys.stderr)
        return 1

    config = ServerConfig.load(args.config)
    if not (config.autohost or args.start):
        print("Autohost is off; use --start to run the server.", file=sys.stderr)
        return 0

    print("Starting server...", file=sys.stderr)
    server = GameServer(config, host=args.host)
    try:
        asyncio.run(server._serve())
    except OSError:
        print("Can't start the server, exiting now...", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())