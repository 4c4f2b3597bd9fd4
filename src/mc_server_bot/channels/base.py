"""Outbound messaging contract."""

from typing import Protocol


class Messenger(Protocol):
    """Delivers text to a chat without waiting for confirmation."""

    def send_message(self, chat_id: int, text: str) -> None:
        """Queue ``text`` for delivery to ``chat_id``."""
