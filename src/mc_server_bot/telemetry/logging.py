"""Logging setup for the bot process."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Appends ``extra=`` fields to the event name as ``key=value`` pairs."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = super().formatMessage(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if not context:
            return message
        return message + " " + " ".join(f"{key}={value!r}" for key, value in sorted(context.items()))


def configure_logging(level: str = "INFO") -> None:
    """Route all ``mc_server_bot`` loggers through a rich console handler."""
    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(ContextFormatter("%(message)s", datefmt="[%X]"))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)
    # httpx logs every request at INFO, which floods the console during long polling.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
