"""Server settings stored in an INI file."""

from __future__ import annotations

import configparser
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]

DEFAULT_PATH = "config.ini"
OPTIONS = ("port", "autohost", "scriptfolder")

_SECTION = "General"


def _parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keys are case sensitive
    return parser


def _read(path: PathLike) -> configparser.ConfigParser:
    parser = _parser()
    parser.read(path, encoding="utf-8")
    return parser


@dataclass
class ServerConfig:
    """Settings of the game server: autostart, listening port and script folder."""

    autohost: bool = True
    port: int = 6112
    scriptfolder: str = "data"

    @classmethod
    def load(cls, path: PathLike = DEFAULT_PATH) -> "ServerConfig":
        """Read the settings; options absent from the file keep their defaults."""
        defaults = cls()
        parser = _read(path)
        autohost = parser.getboolean(_SECTION, "autohost", fallback=defaults.autohost)
        port = parser.getint(_SECTION, "port", fallback=defaults.port)
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port {port} is out of range")
        scriptfolder = parser.get(_SECTION, "scriptfolder", fallback=defaults.scriptfolder)
        return cls(autohost=autohost, port=port, scriptfolder=scriptfolder)

    def save(self, path: PathLike = DEFAULT_PATH) -> None:
        """Write the settings, keeping any other entries already in the file."""
        parser = _read(path)
        if not parser.has_section(_SECTION):
            parser.add_section(_SECTION)
        section = parser[_SECTION]
        section["autohost"] = "true" if self.autohost else "false"
        section["port"] = str(self.port)
        section["scriptfolder"] = self.scriptfolder
        with open(path, "w", encoding="utf-8") as handle:
            parser.write(handle, space_around_delimiters=False)


def missing_options(path: PathLike = DEFAULT_PATH) -> list[str]:
    """Names of the required options that the file does not set."""
    parser = _read(path)
    return [name for name in OPTIONS if not parser.has_option(_SECTION, name)]


def should_autostart(path: PathLike = DEFAULT_PATH) -> bool:
    """True when every option is set and the server is to start on its own."""
    return not missing_options(path) and ServerConfig.load(path).autohost