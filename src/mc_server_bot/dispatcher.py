"""Maps raw chat command text to orchestrator handlers."""

from __future__ import annotations

import logging

from mc_server_bot.channels.base import Messenger
from mc_server_bot.commands import Command
from mc_server_bot.orchestrator import GENERIC_FAILURE, CommandOrchestrator


class CommandDispatcher:
    """Stateless front door for every inbound command."""

    def __init__(
        self,
        orchestrator: CommandOrchestrator,
        messenger: Messenger,
        logger: logging.Logger | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._messenger = messenger
        self._logger = logger or logging.getLogger("mc_server_bot.dispatcher")

    async def dispatch(self, chat_id: int, raw_text: str) -> None:
        command = Command.match(raw_text)
        if command is None:
            self._logger.info("invalid_command", extra={"chat_id": chat_id, "command": raw_text})
            self._messenger.send_message(chat_id, f"{raw_text} is an invalid command.")
            return

        try:
            await self._orchestrator.run(command, chat_id)
        except Exception:  # noqa: BLE001 - nothing may escape a chat command.
            self._logger.exception("command_crashed", extra={"chat_id": chat_id, "command": command.value})
            self._messenger.send_message(chat_id, GENERIC_FAILURE)
        else:
            self._logger.info("command_finished", extra={"chat_id": chat_id, "command": command.value})
