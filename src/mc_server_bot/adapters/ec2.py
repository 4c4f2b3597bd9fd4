"""AWS EC2 adapter for the instance hosting the Minecraft server.

boto3 clients are blocking, so every call is pushed to a worker thread with
``asyncio.to_thread`` to keep the event loop free for ``/abort`` and
``/status`` while a long command is in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from mc_server_bot.adapters.base import AdapterError, InstanceState

_EC2_API_VERSION = "2016-11-15"


class Ec2InstanceAdapter:
    """Queries and toggles one EC2 instance."""

    def __init__(
        self,
        *,
        instance_id: str,
        client: Any | None = None,
        region_name: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        timeout_seconds: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._instance_id = instance_id
        self._logger = logger or logging.getLogger("mc_server_bot.adapters.ec2")
        if client is None:
            config = None
            if timeout_seconds is not None:
                config = Config(connect_timeout=timeout_seconds, read_timeout=timeout_seconds)
            client = boto3.client(
                "ec2",
                api_version=_EC2_API_VERSION,
                region_name=region_name,
                aws_access_key_id=aws_access_key_id,
                aws_secret_access_key=aws_secret_access_key,
                config=config,
            )
        self._client = client

    @property
    def instance_id(self) -> str:
        return self._instance_id

    async def get_state(self) -> InstanceState:
        response = await self._call("describe_instances", InstanceIds=[self._instance_id])
        try:
            name = response["Reservations"][0]["Instances"][0]["State"]["Name"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AdapterError("Invalid AWS data.") from exc
        if not isinstance(name, str):
            raise AdapterError("Invalid AWS data.")

        state = InstanceState.parse(name)
        self._logger.debug("instance_state", extra={"instance_id": self._instance_id, "state": name})
        return state

    async def start(self) -> None:
        await self._call("start_instances", InstanceIds=[self._instance_id])
        self._logger.info("instance_start_requested", extra={"instance_id": self._instance_id})

    async def stop(self) -> None:
        await self._call("stop_instances", InstanceIds=[self._instance_id])
        self._logger.info("instance_stop_requested", extra={"instance_id": self._instance_id})

    async def _call(self, operation: str, **kwargs: Any) -> dict:
        method = getattr(self._client, operation)
        try:
            response = await asyncio.to_thread(method, **kwargs)
        except (BotoCoreError, ClientError) as exc:
            self._logger.warning(
                "ec2_call_failed",
                extra={"operation": operation, "instance_id": self._instance_id, "error": str(exc)},
            )
            raise AdapterError("Invalid AWS data.") from exc
        if not isinstance(response, dict):
            raise AdapterError("Invalid AWS data.")
        return response
