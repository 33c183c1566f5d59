"""
User notifications.

Notifications are fire-and-forget: a notifier never raises into the
import pipeline and never blocks waiting for the user.
"""

from __future__ import annotations

import logging
from typing import Protocol

from rich.console import Console
from rich.markup import escape


class Notifier(Protocol):
    def notify(self, message: str) -> None:
        ...


class ConsoleNotifier:
    """Prints notifications to a rich Console and mirrors them to the log."""

    def __init__(self, console: Console | None = None, logger: logging.Logger | None = None):
        self.console = console or Console()
        self.logger = logger

    def notify(self, message: str) -> None:
        self.console.print(f"[bold cyan]RSS Blog Importer:[/] {escape(message)}", highlight=False)
        if self.logger is not None:
            self.logger.debug("Notification: %s", message, extra={"event": "notification"})


class NullNotifier:
    """Discards notifications."""

    def notify(self, message: str) -> None:
        return None
