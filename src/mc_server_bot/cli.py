"""Builders shared by the CLI commands."""

from __future__ import annotations

from mc_server_bot.adapters import Ec2InstanceAdapter, HttpServerControlAdapter
from mc_server_bot.channels.base import Messenger
from mc_server_bot.config import Settings
from mc_server_bot.dispatcher import CommandDispatcher
from mc_server_bot.orchestrator import CommandOrchestrator, CommandTimings

LOCAL_CHAT_ID = 0


def build_timings(settings: Settings) -> CommandTimings:
    return CommandTimings(
        boot_grace_seconds=settings.boot_grace_seconds,
        shutdown_grace_seconds=settings.shutdown_grace_seconds,
        reboot_grace_seconds=settings.reboot_grace_seconds,
        instance_poll_interval_seconds=settings.instance_poll_interval_seconds,
        instance_poll_timeout_seconds=settings.instance_poll_timeout_seconds,
        boot_settle_seconds=settings.boot_settle_seconds,
    )


def build_dispatcher(settings: Settings, messenger: Messenger) -> CommandDispatcher:
    instance = Ec2InstanceAdapter(
        instance_id=settings.aws_instance_id,
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_access_key_secret.get_secret_value(),
        timeout_seconds=settings.http_timeout_seconds,
    )
    server = HttpServerControlAdapter(
        host=settings.mc_host,
        port=settings.mc_port,
        timeout_seconds=settings.http_timeout_seconds,
    )
    orchestrator = CommandOrchestrator(
        instance=instance,
        server=server,
        messenger=messenger,
        timings=build_timings(settings),
    )
    return CommandDispatcher(orchestrator, messenger)


class CliCommandHandler:
    """Runs single commands from the terminal, as if typed into the chat."""

    def __init__(self, dispatcher: CommandDispatcher, chat_id: int = LOCAL_CHAT_ID) -> None:
        self._dispatcher = dispatcher
        self._chat_id = chat_id

    async def run_command(self, command: str) -> None:
        await self._dispatcher.dispatch(self._chat_id, command.lstrip("/"))
