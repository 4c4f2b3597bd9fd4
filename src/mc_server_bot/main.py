"""CLI startup entrypoint for the Minecraft server bot."""

from __future__ import annotations

import asyncio
import logging

import typer
from rich import print

from mc_server_bot.channels import ConsoleMessenger, TelegramApiError, TelegramBotApi, TelegramCommandPoller, TelegramMessenger
from mc_server_bot.cli import CliCommandHandler, build_dispatcher
from mc_server_bot.config import ConfigurationError, Settings, load_settings
from mc_server_bot.telemetry import configure_logging

app = typer.Typer(help="Telegram remote control for a Minecraft server host")

_logger = logging.getLogger("mc_server_bot.main")
_SHUTDOWN_FLUSH_SECONDS = 5.0


def _load_settings_or_exit() -> Settings:
    try:
        return load_settings()
    except ConfigurationError as exc:
        print({"error": "configuration", "problems": exc.problems})
        raise typer.Exit(code=1)


async def _serve(settings: Settings) -> None:
    api = TelegramBotApi(settings.telegram_token.get_secret_value(), timeout_seconds=settings.http_timeout_seconds)
    messenger = TelegramMessenger(api)
    poller = TelegramCommandPoller(
        api,
        build_dispatcher(settings, messenger),
        max_message_age_seconds=settings.message_max_age_seconds,
        poll_timeout_seconds=settings.telegram_poll_timeout_seconds,
    )

    try:
        me = await api.get_me()
        _logger.info("bot_started", extra={"username": me.get("username"), "instance_id": settings.aws_instance_id})
        await messenger.start()
        await poller.run()
    finally:
        await poller.stop(timeout_seconds=settings.shutdown_timeout_seconds)
        try:
            await asyncio.wait_for(messenger.stop(), timeout=_SHUTDOWN_FLUSH_SECONDS)
        except asyncio.TimeoutError:
            _logger.warning("outbound_messages_not_flushed")
        await api.aclose()


@app.command()
def run() -> None:
    """Start the Telegram bot and serve commands until interrupted."""
    settings = _load_settings_or_exit()
    configure_logging(settings.log_level)
    try:
        asyncio.run(_serve(settings))
    except TelegramApiError as exc:
        print({"error": "telegram", "detail": str(exc)})
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        print({"bot": "stopped"})


@app.command("exec")
def exec_command(command: str = typer.Argument(..., help="Command to run, e.g. status or /boot")) -> None:
    """Run one command locally against the real instance and server, printing the replies."""
    settings = _load_settings_or_exit()
    configure_logging(settings.log_level)
    handler = CliCommandHandler(build_dispatcher(settings, ConsoleMessenger()))
    try:
        asyncio.run(handler.run_command(command))
    except KeyboardInterrupt:
        print({"command": command, "result": "interrupted"})
        raise typer.Exit(code=130)


@app.command()
def config() -> None:
    """Show the effective configuration with secrets masked."""
    print(_load_settings_or_exit().masked())


if __name__ == "__main__":
    app()
