"""Bounded polling of external state."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

_logger = logging.getLogger("mc_server_bot.polling")


class PollOutcome(str, Enum):
    SATISFIED = "satisfied"
    TIMED_OUT = "timed_out"


async def poll_until(
    predicate: Callable[[], Awaitable[bool]],
    interval_seconds: float,
    timeout_seconds: float,
    *,
    logger: logging.Logger | None = None,
) -> PollOutcome:
    """Query ``predicate`` every ``interval_seconds`` until it holds or ``timeout_seconds`` elapse.

    The first query happens one interval after the call. Queries are issued on a
    fixed cadence measured from the start, so a slow query delays only its own
    tick. A query that raises counts as "not yet". When the deadline passes the
    in-flight query is cancelled and ``TIMED_OUT`` is returned.
    """
    if interval_seconds <= 0:
        raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
    log = logger or _logger
    loop = asyncio.get_running_loop()
    started = loop.time()

    async def _poll() -> None:
        attempt = 0
        while True:
            attempt += 1
            next_tick = started + attempt * interval_seconds
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            try:
                if await predicate():
                    log.info("poll_satisfied", extra={"attempt": attempt})
                    return
            except Exception as exc:  # noqa: BLE001 - a failed query is just another miss.
                log.warning("poll_query_failed", extra={"attempt": attempt, "error": f"{type(exc).__name__}: {exc}"})

            # Skip ticks a slow query overran so queries never pile up.
            elapsed_ticks = int((loop.time() - started) // interval_seconds)
            attempt = max(attempt, elapsed_ticks)

    try:
        await asyncio.wait_for(_poll(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        log.warning("poll_timed_out", extra={"timeout_seconds": timeout_seconds})
        return PollOutcome.TIMED_OUT
    return PollOutcome.SATISFIED
