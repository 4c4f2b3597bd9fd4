"""HTTP adapter for the control API that runs beside the Minecraft server."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mc_server_bot.adapters.base import AdapterError


class HttpServerControlAdapter:
    """Sends lifecycle actions and reads the player list over plain HTTP.

    Actions are ``POST /`` with a ``{"action": ...}`` JSON body; players come
    from ``GET /players`` as ``{"players": [{"name": ...}, ...]}``.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._base_url = f"http://{host}:{port}"
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport
        self._logger = logger or logging.getLogger("mc_server_bot.adapters.server_api")

    async def start(self) -> None:
        await self._request_action("start")

    async def stop(self) -> None:
        await self._request_action("stop")

    async def reboot(self) -> None:
        await self._request_action("reboot")

    async def get_player_count(self) -> int:
        try:
            async with self._client() as client:
                response = await client.get("/players")
        except httpx.HTTPError as exc:
            raise AdapterError(f"Player list request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise AdapterError(f"Player list request returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise AdapterError("Invalid data.") from exc

        players = data.get("players") if isinstance(data, dict) else None
        if not isinstance(players, list) or not all(_is_player_record(player) for player in players):
            raise AdapterError("Invalid data.")
        return len(players)

    async def _request_action(self, action: str) -> None:
        try:
            async with self._client() as client:
                response = await client.post("/", json={"action": action})
        except httpx.HTTPError as exc:
            self._logger.warning("server_action_failed", extra={"action": action, "error": str(exc)})
            raise AdapterError(f"Server action '{action}' failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            self._logger.warning(
                "server_action_rejected",
                extra={"action": action, "status_code": response.status_code},
            )
            raise AdapterError(f"Server action '{action}' returned HTTP {response.status_code}")

        self._logger.info("server_action_succeeded", extra={"action": action})

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout, transport=self._transport)


def _is_player_record(player: Any) -> bool:
    return isinstance(player, dict) and isinstance(player.get("name"), str)
