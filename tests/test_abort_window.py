from __future__ import annotations

import asyncio

from mc_server_bot.abort_window import AbortStatus, AbortWindow


def test_operation_runs_after_grace_period() -> None:
    window = AbortWindow()
    notices: list[float] = []

    async def _operation() -> str:
        return "ran"

    outcome = asyncio.run(window.run(0.02, _operation, on_start=notices.append))

    assert outcome.status == AbortStatus.COMPLETED
    assert outcome.result == "ran"
    assert notices == [0.02]
    assert window.active is False


def test_abort_during_grace_period_skips_operation() -> None:
    window = AbortWindow()
    calls: list[str] = []
    aborted: list[bool] = []

    async def _operation() -> None:
        calls.append("ran")

    async def _run():
        task = asyncio.create_task(window.run(5, _operation, on_abort=lambda: aborted.append(True)))
        await asyncio.sleep(0.01)
        assert window.active is True
        assert window.request_abort() is True
        return await asyncio.wait_for(task, timeout=1)

    outcome = asyncio.run(_run())

    assert outcome.aborted
    assert calls == []
    assert aborted == [True]
    assert window.active is False


def test_abort_without_countdown_is_ignored_and_does_not_leak() -> None:
    window = AbortWindow()
    calls: list[str] = []

    async def _operation() -> None:
        calls.append("ran")

    assert window.request_abort() is False
    outcome = asyncio.run(window.run(0.01, _operation))

    assert outcome.status == AbortStatus.COMPLETED
    assert calls == ["ran"]


def test_abort_after_expiry_has_no_effect_on_running_operation() -> None:
    window = AbortWindow()
    steps: list[str] = []

    async def _operation() -> str:
        steps.append("started")
        await asyncio.sleep(0.05)
        steps.append("finished")
        return "ok"

    async def _run():
        task = asyncio.create_task(window.run(0.01, _operation))
        await asyncio.sleep(0.03)
        accepted = window.request_abort()
        return accepted, await task

    accepted, outcome = asyncio.run(_run())

    assert accepted is False
    assert outcome.status == AbortStatus.COMPLETED
    assert steps == ["started", "finished"]
