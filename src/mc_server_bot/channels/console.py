"""Console messenger for running commands locally from the CLI."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape


class ConsoleMessenger:
    """Prints bot replies to the terminal instead of a chat."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def send_message(self, chat_id: int, text: str) -> None:
        self._console.print(f"[bold cyan]bot[/bold cyan] [dim]({chat_id})[/dim] {escape(text)}", highlight=False)
