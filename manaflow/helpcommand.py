"""The built-in help command listing registered commands."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Sequence

from manaflow.commands import Command

if TYPE_CHECKING:
    from manaflow.commandhelper import CommandHelper

_HIGHLIGHT = "<b style='color:#C95;'>/"
_INTEGER = re.compile(r"[+-]?\d+")

HELP_DESCRIPTION = (
    "Obtain information about command <br><br> Usage: "
    "<b style='color:#C95;'>/help</b> [name]"
)


def short_description(command: Command) -> str:
    """First line of a command's description, shortened past 50 characters."""
    desc = command.description
    cut = desc.find("<br")
    if cut != -1:
        desc = desc[:cut]
    if len(desc) > 50:
        space = desc.find(" ", 30)
        if space != -1:
            desc = desc[:space]
        desc += "..."
    return desc


class HelpCommand(Command):
    """Shows paged command lists or the details of commands by name."""

    def __init__(self, helper: "CommandHelper") -> None:
        super().__init__("help", HELP_DESCRIPTION)
        self._helper = helper

    def show_page(self, page: int = 1, count: int = 10) -> str:
        commands = self._helper.sorted_commands()
        if len(commands) < (page - 1) * count or page < 1:
            return "Invalid page number"

        pages = (len(commands) + count - 1) // count
        parts = [f"--- Help [{page}/{pages}] ---"]
        for cmd in commands[(page - 1) * count : page * count]:
            parts.append(f"<br/> {_HIGHLIGHT}{cmd.name}</b> - {short_description(cmd)}")
        parts.append("</b>")
        return "".join(parts)

    def show_command(self, name: str) -> str:
        commands = self._helper.commands_by_name(name)
        if not commands:
            return "No command found"
        lines = [f"Command by name [{name}]<br/>"]
        lines.extend(
            f"{_HIGHLIGHT}{cmd.name}</b> - {cmd.description}<br/>" for cmd in commands
        )
        return "".join(lines)

    def execute(self, args: Sequence[str]) -> Any:
        if not args:
            return self.show_page()
        if len(args) == 1:
            (arg,) = args
            if _INTEGER.fullmatch(arg):
                return self.show_page(int(arg))
            return self.show_command(arg)
        return None