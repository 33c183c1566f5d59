"""
Shared utility functions.

This package contains logging and notification helpers used across
pipeline stages.
"""

from .logging import JsonlFormatter, log_event, setup_logging
from .notify import ConsoleNotifier, Notifier, NullNotifier

__all__ = [
    "setup_logging",
    "log_event",
    "JsonlFormatter",
    "ConsoleNotifier",
    "Notifier",
    "NullNotifier",
]
