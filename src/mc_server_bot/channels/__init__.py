"""Chat channels the bot talks through."""

from .base import Messenger
from .console import ConsoleMessenger
from .telegram import (
    TelegramApiError,
    TelegramBotApi,
    TelegramCommandPoller,
    TelegramMessenger,
    extract_command,
)

__all__ = [
    "ConsoleMessenger",
    "Messenger",
    "TelegramApiError",
    "TelegramBotApi",
    "TelegramCommandPoller",
    "TelegramMessenger",
    "extract_command",
]
