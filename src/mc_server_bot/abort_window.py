"""Cancellable grace period that precedes every disruptive command."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")


class AbortStatus(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(slots=True)
class AbortOutcome(Generic[T]):
    status: AbortStatus
    result: T | None = None

    @property
    def aborted(self) -> bool:
        return self.status is AbortStatus.ABORTED


class AbortWindow:
    """Waits out a grace period during which an operator may veto the operation.

    ``request_abort`` only has an effect while a countdown is active. Once the
    grace period expires the operation starts and can no longer be aborted.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._abort_requested = asyncio.Event()
        self._active = False
        self._logger = logger or logging.getLogger("mc_server_bot.abort_window")

    @property
    def active(self) -> bool:
        return self._active

    def request_abort(self) -> bool:
        """Signal the active countdown. Returns False when nothing is counting down."""
        if not self._active:
            self._logger.info("abort_ignored_no_countdown")
            return False
        self._abort_requested.set()
        self._logger.info("abort_requested")
        return True

    async def run(
        self,
        grace_seconds: float,
        operation: Callable[[], Awaitable[T]],
        *,
        on_start: Callable[[float], None] | None = None,
        on_abort: Callable[[], None] | None = None,
    ) -> AbortOutcome[T]:
        self._abort_requested.clear()
        self._active = True
        if on_start is not None:
            on_start(grace_seconds)
        self._logger.info("abort_window_opened", extra={"grace_seconds": grace_seconds})

        try:
            await asyncio.wait_for(self._abort_requested.wait(), timeout=grace_seconds)
        except asyncio.TimeoutError:
            aborted = False
        else:
            aborted = True
        finally:
            self._active = False
            # A late request from this window must not leak into the next one.
            self._abort_requested.clear()

        if aborted:
            self._logger.info("command_aborted")
            if on_abort is not None:
                on_abort()
            return AbortOutcome(status=AbortStatus.ABORTED)

        self._logger.info("abort_window_expired", extra={"grace_seconds": grace_seconds})
        return AbortOutcome(status=AbortStatus.COMPLETED, result=await operation())
