# manaflow

The network side of the Mana Flow card game. It contains:

- an asyncio game server that accepts players and relays chat
- the binary packet format that clients and the server exchange
- a parser for the older semicolon-terminated text protocol
- the slash-command dispatcher used for server commands

## Installing

    pip install .

To install the test tools as well:

    pip install ".[test]"

## Running the server

    manaflow-server [--config PATH] [--host ADDRESS] [--start]

- `--config`: the settings file. The default is `config.ini` in the working directory.
- `--host`: the address to listen on. The default is `0.0.0.0`.
- `--start`: start even when `autohost` is off.

The settings file is an INI file with a `[General]` section:

- `port`: the TCP port to listen on. The default is 6112.
- `autohost`: whether the server starts on its own. The default is `true`.
- `scriptfolder`: a folder name that is stored with the settings. The default is `data`.

The server checks the file before it starts. If any setting is missing, it names the missing
ones, writes the file with the defaults filled in, and exits with status 1. If `autohost` is off
and `--start` is not given, it exits without starting. If it cannot listen on the port, it
prints "Can't start the server, exiting now..." and exits with status 1.

### On the wire

1. When a player connects, the server sends the banner line `Mana Flow v0.0.1` and names the
   player `Player-<n>`, counting from 0.
2. The server then reads client packets:
   - `0x01` (message): the server relays it to every player as a server message packet
     `0x01` carrying the player name and the text.
   - `0x20` (rename): changes the player's name.
3. An unknown packet id, or a string that is not valid UTF-8, makes the server drop the
   connection.
4. Join and leave notices are kept in the server's chat log. They are not broadcast.

## Library use

- `manaflow.config`:
  - `ServerConfig` with `load(path)` and `save(path)`. `save` keeps any other entries
    already in the file.
  - `missing_options(path)` and `should_autostart(path)`.
- `manaflow.server`:
  - `GameServer`, with `start()` and `stop()` (both coroutines), `broadcast(data)`,
    `send_message(message, player_name)`, `handle_chat_input(text)` and `clients()`.
    It also has the `chat_log`, `console_log` and `status` attributes, and the
    `on_client_connected` and `on_client_disconnected` callbacks.
  - `ClientSession` describes one connected player: `set_card`, `unselect_card`,
    `mark_ready`, `unprepared` and `write`.
  - `handle_chat_input` runs text that starts with `/` as a command, such as `/help` or
    `/help 2`. It sends any other text to every player as a message from `Server`.
- `manaflow.packet`:
  - `Packet` encodes and decodes packets from a tuple of `PacketType` field types. It
    provides `encode`, `write_packet`, `decode` and `bytes_to_read`.
  - Integers are big-endian and unsigned. Strings are a 32-bit length followed by UTF-8.
    Arrays are an 8-bit count followed by their items.
  - `encode_header`, `write_header` and `read_header` handle the key/value protocol header.
  - Errors raise `PacketError`.
- `manaflow.packetmanager`:
  - `default_packets()` builds the packet table.
  - `PacketManager.client_packet(id)` and `PacketManager.server_packet(id)` look packets
    up by id.
- `manaflow.commands`:
  - `Command` is the base class.
  - `ObjectCommand` calls an executor with a bound object.
  - `FunctionCommand` calls a plain callable.
- `manaflow.commandhelper`:
  - `CommandHelper` registers commands with `add_command` and `add_help`.
  - It runs a line with `execute`, which returns the first result that is not `None`.
- `manaflow.helpcommand`:
  - `HelpCommand` shows a paged list of commands, ten per page, or the commands that have a
    given name.
  - `short_description` gives the shortened description that the list uses.
- `manaflow.compat`:
  - `CompatibilityProtocol.feed(data)` parses text commands into a `GameState`. The
    commands include `SAY`, `START`, `ADDACTION`, `CCREATE`, `HP` and `MANA`.
  - `encode_message` builds an outgoing `SAY` command.
  - `GameState` reports card changes through its `on_card_event` callback as `CardEvent`
    values, and chat through its `on_message` callback.
- `manaflow.models`:
  - `Card`, `Creep` and `Player`. A player has six creep slots, accessed with
    `replace_creep` and `creep_at`.
  - Creeps and players call their subscribed listeners whenever they change.
- `manaflow.layout`:
  - `grid_columns`, `grid_rows`, `cell_geometry`, `size_hint` and `minimum_size` place
    cards in a near-square grid.
  - Positions and sizes are given as `Rect` and `Size`.
- `manaflow.client`:
  - `parse_address` returns host and port. The port defaults to 6112.
  - `detect_protocol` tells the old text protocol from the binary one, using the server's
    first bytes.
  - `read_server_banner` reads the banner line and the protocol header.
  - `closed_reason` maps a `SocketErrorKind` to a readable message.

## What it does not do

- There is no game client program and no graphical interface. `manaflow.client` and
  `manaflow.compat` give a client the pieces to connect and track game state, but nothing
  here opens a connection to a server or draws anything.
- The server does not run game rules or card scripts. `scriptfolder` is only stored in the
  settings.
- `manaflow-server` does not read commands from the terminal. Slash commands are run through
  `GameServer.handle_chat_input`.

## Tests

    pytest