"""Registry that dispatches command lines to registered commands."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Optional

from manaflow.commands import Command
from manaflow.helpcommand import HelpCommand


class CommandHelper:
    """Holds commands by lower-cased name and runs command lines."""

    def __init__(self) -> None:
        self._commands: defaultdict[str, list[Command]] = defaultdict(list)
        self._sorted: Optional[tuple[Command, ...]] = None

    def add_command(self, command: Optional[Command]) -> None:
        """Register a command; newer commands of the same name are tried first."""
        if command is None:
            return
        self._commands[command.name.lower()].insert(0, command)
        self._sorted = None

    def add_help(self) -> HelpCommand:
        """Register the help command and return it."""
        help_cmd = HelpCommand(self)
        self.add_command(help_cmd)
        return help_cmd

    def commands_by_name(self, name: str) -> list[Command]:
        return list(self._commands.get(name.lower(), ()))

    def sorted_commands(self) -> tuple[Command, ...]:
        if self._sorted is None:
            everything = [cmd for cmds in self._commands.values() for cmd in cmds]
            self._sorted = tuple(sorted(everything, key=lambda cmd: cmd.name))
        return self._sorted

    def execute(self, line: str) -> Any:
        """Run a command line; return the first non-None result, or None."""
        name, *args = line.split(" ")
        name = name.lower()
        for cmd in self._commands.get(name, ()):
            result = cmd.parse(name, args)
            if result is not None:
                return result
        return None