"""Multi-step protocols behind each chat command."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from mc_server_bot.abort_window import AbortWindow
from mc_server_bot.adapters import AdapterError, InstanceAdapter, InstanceState, ServerControlAdapter
from mc_server_bot.channels.base import Messenger
from mc_server_bot.commands import Command
from mc_server_bot.gate import ExecutionGate
from mc_server_bot.polling import PollOutcome, poll_until

GREETING = (
    "Hello, I'm ready for your next command. Use /help for a list of commands. "
    "If the server is outdated, use /reboot to update it."
)
GENERIC_FAILURE = "Something went wrong."
BUSY = "There is another command being executed."
ABORTED = "Command aborted."
NOTHING_TO_ABORT = "There is no command to abort."


@dataclass(slots=True, frozen=True)
class CommandTimings:
    """Grace periods and waits, in seconds."""

    boot_grace_seconds: float = 10.0
    shutdown_grace_seconds: float = 30.0
    reboot_grace_seconds: float = 30.0
    instance_poll_interval_seconds: float = 5.0
    instance_poll_timeout_seconds: float = 120.0
    boot_settle_seconds: float = 30.0

    def grace_seconds(self, command: Command) -> float:
        return {
            Command.BOOT: self.boot_grace_seconds,
            Command.SHUTDOWN: self.shutdown_grace_seconds,
            Command.REBOOT: self.reboot_grace_seconds,
        }[command]


Handler = Callable[[int], Awaitable[None]]


class CommandOrchestrator:
    """Owns the execution gate and abort window and runs each command's protocol.

    Every external step reports a command-specific message and ends the
    command when its adapter raises ``AdapterError``. Nothing is rolled back.
    """

    def __init__(
        self,
        *,
        instance: InstanceAdapter,
        server: ServerControlAdapter,
        messenger: Messenger,
        timings: CommandTimings | None = None,
        gate: ExecutionGate | None = None,
        abort_window: AbortWindow | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._instance = instance
        self._server = server
        self._messenger = messenger
        self._timings = timings or CommandTimings()
        self._gate = gate or ExecutionGate()
        self._abort_window = abort_window or AbortWindow()
        self._logger = logger or logging.getLogger("mc_server_bot.orchestrator")

        self._bodies: dict[Command, Handler] = {
            Command.START: self.handle_start,
            Command.HELP: self.handle_help,
            Command.STATUS: self.handle_status,
            Command.BOOT: self.handle_boot,
            Command.SHUTDOWN: self.handle_shutdown,
            Command.REBOOT: self.handle_reboot,
            Command.ABORT: self.handle_abort,
        }

    @property
    def gate(self) -> ExecutionGate:
        return self._gate

    @property
    def abort_window(self) -> AbortWindow:
        return self._abort_window

    async def run(self, command: Command, chat_id: int) -> None:
        """Run ``command`` to completion, gated and behind an abort window when disruptive."""
        body = self._bodies[command]
        self._logger.info("command_started", extra={"command": command.value, "chat_id": chat_id})
        if not command.disruptive:
            await body(chat_id)
            return

        grace_seconds = self._timings.grace_seconds(command)

        async def _abortable() -> None:
            await self._abort_window.run(
                grace_seconds,
                lambda: body(chat_id),
                on_start=lambda seconds: self._send(
                    chat_id, f"You have {seconds:g} seconds to abort this command."
                ),
                on_abort=lambda: self._send(chat_id, ABORTED),
            )

        outcome = await self._gate.run_exclusive(_abortable)
        if outcome.rejected:
            self._send(chat_id, BUSY)

    async def handle_start(self, chat_id: int) -> None:
        self._send(chat_id, GREETING)

    async def handle_help(self, chat_id: int) -> None:
        self._send(chat_id, "\n".join(f"{index}. /{command.value}" for index, command in enumerate(Command, start=1)))

    async def handle_status(self, chat_id: int) -> None:
        try:
            state = await self._instance.get_state()
        except AdapterError:
            self._logger.warning("status_query_failed", exc_info=True)
            self._send(chat_id, "Failed to retrieve server status.")
            state = InstanceState.UNKNOWN

        report = f"The server is {state.value}."
        if state is InstanceState.RUNNING:
            try:
                player_count = await self._server.get_player_count()
            except AdapterError:
                self._logger.debug("player_count_unavailable", exc_info=True)
            else:
                report += f" There is/are {player_count} player(s) online."
        self._send(chat_id, report)

    async def handle_boot(self, chat_id: int) -> None:
        state = await self._query_state(chat_id)
        if state is None:
            return
        if state not in (InstanceState.RUNNING, InstanceState.STOPPED):
            self._send(chat_id, "Failed to initialize boot. Use /status to check if the server is stopped.")
            return

        self._send(chat_id, "Server is booting up.")

        if state is InstanceState.STOPPED and not await self._step(chat_id, self._instance.start, GENERIC_FAILURE):
            return

        outcome = await poll_until(
            self._instance_running,
            self._timings.instance_poll_interval_seconds,
            self._timings.instance_poll_timeout_seconds,
        )
        if outcome is PollOutcome.TIMED_OUT:
            self._send(
                chat_id,
                "Something went wrong. Wait until /status says the server is running before using /reboot.",
            )
            return

        # Give the host OS time to finish booting before the server process starts.
        await asyncio.sleep(self._timings.boot_settle_seconds)

        if not await self._step(chat_id, self._server.start, "Something went wrong. Use /reboot."):
            return

        self._send(chat_id, "Successfully booted up.")

    async def handle_shutdown(self, chat_id: int) -> None:
        state = await self._query_state(chat_id)
        if state is None:
            return
        if state not in (InstanceState.RUNNING, InstanceState.STOPPED):
            self._send(chat_id, "Failed to initialize shut down. Use /status to check if the server is running.")
            return
        if state is InstanceState.STOPPED:
            self._send(chat_id, "Server is already shut down.")
            return

        self._send(chat_id, "Server is shutting down.")

        if not await self._step(chat_id, self._server.stop, GENERIC_FAILURE):
            return
        if not await self._step(chat_id, self._instance.stop, GENERIC_FAILURE):
            return

        self._send(chat_id, "Successfully shut down.")

    async def handle_reboot(self, chat_id: int) -> None:
        state = await self._query_state(chat_id)
        if state is None:
            return
        if state is not InstanceState.RUNNING:
            self._send(chat_id, "Failed to reboot the server as it is not running.")
            return

        self._send(chat_id, "Server is rebooting.")

        if not await self._step(chat_id, self._server.reboot, GENERIC_FAILURE):
            return

        self._send(chat_id, "Successfully rebooted.")

    async def handle_abort(self, chat_id: int) -> None:
        if not self._abort_window.request_abort():
            self._send(chat_id, NOTHING_TO_ABORT)

    async def _query_state(self, chat_id: int) -> InstanceState | None:
        try:
            return await self._instance.get_state()
        except AdapterError:
            self._logger.warning("instance_state_query_failed", exc_info=True)
            self._send(chat_id, GENERIC_FAILURE)
            return None

    async def _step(self, chat_id: int, call: Callable[[], Awaitable[None]], failure_message: str) -> bool:
        try:
            await call()
        except AdapterError:
            self._logger.warning("command_step_failed", extra={"step": getattr(call, "__name__", repr(call))}, exc_info=True)
            self._send(chat_id, failure_message)
            return False
        return True

    async def _instance_running(self) -> bool:
        return await self._instance.get_state() is InstanceState.RUNNING

    def _send(self, chat_id: int, text: str) -> None:
        self._messenger.send_message(chat_id, text)
