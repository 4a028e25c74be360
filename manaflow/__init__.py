"""Game server, packet format, text protocol and chat commands for the Mana Flow card game."""

__version__ = "0.0.1"