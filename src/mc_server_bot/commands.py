"""Closed set of chat commands understood by the bot."""

from __future__ import annotations

from enum import Enum


class Command(str, Enum):
    START = "start"
    HELP = "help"
    STATUS = "status"
    BOOT = "boot"
    SHUTDOWN = "shutdown"
    REBOOT = "reboot"
    ABORT = "abort"

    @property
    def disruptive(self) -> bool:
        """Whether the command changes server/instance state and is gated."""
        return self in _DISRUPTIVE

    @classmethod
    def match(cls, text: str) -> Command | None:
        lowered = text.lower()
        for command in cls:
            if command.value == lowered:
                return command
        return None


_DISRUPTIVE = frozenset({Command.BOOT, Command.SHUTDOWN, Command.REBOOT})
