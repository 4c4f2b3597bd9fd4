"""Boundary for the external control planes the bot drives."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class AdapterError(RuntimeError):
    """Raised when an external control call fails or returns malformed data."""


class InstanceState(str, Enum):
    """EC2 instance lifecycle names as reported by ``describe_instances``."""

    PENDING = "pending"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"
    STOPPING = "stopping"
    STOPPED = "stopped"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, name: str) -> InstanceState:
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


class InstanceAdapter(Protocol):
    """Cloud instance manager scoped to a single host instance."""

    async def get_state(self) -> InstanceState:
        """Return the current lifecycle state of the instance."""

    async def start(self) -> None:
        """Request the instance to start."""

    async def stop(self) -> None:
        """Request the instance to stop."""


class ServerControlAdapter(Protocol):
    """Control API running next to the Minecraft server process."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    async def reboot(self) -> None: ...

    async def get_player_count(self) -> int:
        """Return the number of players currently online."""
