"""Mutual-exclusion gate for disruptive commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")


class GateStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(slots=True)
class GateOutcome(Generic[T]):
    status: GateStatus
    result: T | None = None

    @property
    def rejected(self) -> bool:
        return self.status is GateStatus.REJECTED


class ExecutionGate:
    """Lets at most one operation run at a time; callers arriving while busy are turned away.

    There is no queue: a rejected caller gets an immediate outcome and the
    operation is never invoked. The busy flag is only touched from the event
    loop thread, so a plain attribute is enough.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._busy = False
        self._logger = logger or logging.getLogger("mc_server_bot.gate")

    @property
    def busy(self) -> bool:
        return self._busy

    async def run_exclusive(self, operation: Callable[[], Awaitable[T]]) -> GateOutcome[T]:
        if self._busy:
            self._logger.info("gate_rejected")
            return GateOutcome(status=GateStatus.REJECTED)

        self._busy = True
        self._logger.debug("gate_acquired")
        try:
            result = await operation()
        finally:
            self._busy = False
            self._logger.debug("gate_released")
        return GateOutcome(status=GateStatus.ACCEPTED, result=result)
