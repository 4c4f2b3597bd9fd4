"""Telegram Bot API channel: long-polling intake and ordered outbound delivery."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Awaitable, Callable, Protocol

import httpx

TELEGRAM_API_URL = "https://api.telegram.org"

_COMMAND_RE = re.compile(r"/(.+)")
_MENTION_RE = re.compile(r"@\w+$")


class TelegramApiError(RuntimeError):
    """Raised when the Bot API is unreachable or answers with ``ok: false``."""


class CommandSink(Protocol):
    async def dispatch(self, chat_id: int, raw_text: str) -> None: ...


class TelegramBotApi:
    """Minimal async client for the Bot API methods the bot needs."""

    def __init__(
        self,
        token: str,
        *,
        timeout_seconds: float = 10.0,
        base_url: str = TELEGRAM_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=f"{base_url}/bot{token}",
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def call(self, method: str, payload: dict[str, Any], *, timeout_seconds: float | None = None) -> Any:
        timeout = httpx.Timeout(timeout_seconds) if timeout_seconds is not None else httpx.USE_CLIENT_DEFAULT
        try:
            response = await self._client.post(f"/{method}", json=payload, timeout=timeout)
        except httpx.HTTPError as exc:
            raise TelegramApiError(f"Telegram API transport error ({method}): {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise TelegramApiError(f"Telegram API invalid JSON ({method}): {response.text[:300]}") from exc

        if not isinstance(data, dict) or not data.get("ok"):
            raise TelegramApiError(f"Telegram API error ({method}): {data}")
        return data.get("result")

    async def get_me(self) -> dict[str, Any]:
        return await self.call("getMe", {})

    async def get_updates(self, offset: int, poll_timeout_seconds: int) -> list[dict[str, Any]]:
        result = await self.call(
            "getUpdates",
            {"offset": offset, "timeout": poll_timeout_seconds, "allowed_updates": ["message"]},
            timeout_seconds=poll_timeout_seconds + self._timeout_seconds,
        )
        if not isinstance(result, list):
            return []
        return [update for update in result if isinstance(update, dict)]

    async def send_message(self, chat_id: int, text: str) -> None:
        await self.call("sendMessage", {"chat_id": chat_id, "text": text, "disable_web_page_preview": True})

    async def aclose(self) -> None:
        await self._client.aclose()


class TelegramMessenger:
    """Queue-backed sender: callers never wait, messages leave in submission order."""

    def __init__(
        self,
        api: TelegramBotApi,
        *,
        max_queue_size: int = 1_000,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api = api
        self._logger = logger or logging.getLogger("mc_server_bot.channels.telegram")
        self._queue: asyncio.Queue[tuple[int, str]] = asyncio.Queue(maxsize=max_queue_size)
        self._worker_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the delivery worker once for this messenger."""
        if self._worker_task and not self._worker_task.done():
            return
        self._worker_task = asyncio.create_task(self._worker_loop(), name="telegram-messenger-worker")

    async def stop(self) -> None:
        """Flush queued messages, then stop the worker."""
        if not self._worker_task:
            return
        await self._queue.join()
        self._worker_task.cancel()
        try:
            await self._worker_task
        except asyncio.CancelledError:
            pass
        finally:
            self._worker_task = None

    def send_message(self, chat_id: int, text: str) -> None:
        try:
            self._queue.put_nowait((chat_id, text))
        except asyncio.QueueFull:
            self._logger.error("message_dropped_queue_full", extra={"chat_id": chat_id})

    async def _worker_loop(self) -> None:
        while True:
            chat_id, text = await self._queue.get()
            try:
                await self._api.send_message(chat_id, text)
            except TelegramApiError:
                self._logger.exception("message_delivery_failed", extra={"chat_id": chat_id})
            finally:
                self._queue.task_done()


def extract_command(text: str) -> str | None:
    """Return the command text after the first ``/``, without a trailing ``@BotName``."""
    match = _COMMAND_RE.search(text)
    if match is None:
        return None
    command = _MENTION_RE.sub("", match.group(1).strip())
    return command or None


class TelegramCommandPoller:
    """Long-polls ``getUpdates`` and hands each fresh command to the dispatcher as its own task.

    Commands run concurrently so that ``/abort`` and ``/status`` are served while a
    gated command is still in progress.
    """

    def __init__(
        self,
        api: TelegramBotApi,
        dispatcher: CommandSink,
        *,
        max_message_age_seconds: float = 30.0,
        poll_timeout_seconds: int = 30,
        retry_delay_seconds: float = 2.0,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api = api
        self._dispatcher = dispatcher
        self._max_message_age_seconds = max_message_age_seconds
        self._poll_timeout_seconds = poll_timeout_seconds
        self._retry_delay_seconds = retry_delay_seconds
        self._clock = clock
        self._logger = logger or logging.getLogger("mc_server_bot.channels.telegram")
        self._offset = 0
        self._tasks: set[asyncio.Task[None]] = set()
        self._run_task: asyncio.Task | None = None

    @property
    def offset(self) -> int:
        return self._offset

    async def run(self) -> None:
        """Poll until cancelled or until ``stop`` is called."""
        self._run_task = asyncio.current_task()
        self._logger.info("telegram_polling_started")
        try:
            while True:
                await self.poll_once()
        finally:
            self._run_task = None
            self._logger.info("telegram_polling_stopped")

    async def stop(self, timeout_seconds: float | None = None) -> None:
        """Stop polling, then wait for in-flight commands.

        Commands still running after ``timeout_seconds`` are cancelled.
        """
        if self._run_task is not None and self._run_task is not asyncio.current_task():
            self._run_task.cancel()

        pending = set(self._tasks)
        if not pending:
            return
        self._logger.info("waiting_for_commands", extra={"in_flight": len(pending)})
        _, still_running = await asyncio.wait(pending, timeout=timeout_seconds)
        for task in still_running:
            task.cancel()
        if still_running:
            self._logger.warning("commands_cancelled_on_shutdown", extra={"cancelled": len(still_running)})
            await asyncio.gather(*still_running, return_exceptions=True)

    async def poll_once(self) -> None:
        try:
            updates = await self._api.get_updates(self._offset, self._poll_timeout_seconds)
        except TelegramApiError:
            self._logger.warning("telegram_get_updates_failed", exc_info=True)
            await asyncio.sleep(self._retry_delay_seconds)
            return

        for update in updates:
            update_id = update.get("update_id")
            if isinstance(update_id, int):
                self._offset = max(self._offset, update_id + 1)
            self.handle_update(update)

    def handle_update(self, update: dict[str, Any]) -> asyncio.Task[None] | None:
        message = update.get("message")
        if not isinstance(message, dict):
            return None

        text = message.get("text")
        chat_id = (message.get("chat") or {}).get("id")
        sent_at = message.get("date")
        if not isinstance(text, str) or not isinstance(chat_id, int):
            return None

        if not isinstance(sent_at, (int, float)) or self._clock() - sent_at > self._max_message_age_seconds:
            self._logger.info("stale_message_dropped", extra={"chat_id": chat_id, "sent_at": sent_at})
            return None

        command = extract_command(text)
        if command is None:
            return None

        self._logger.info("command_received", extra={"chat_id": chat_id, "command": command})
        return self._spawn(self._dispatcher.dispatch(chat_id, command))

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task[None]:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
