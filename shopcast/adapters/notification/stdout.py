"""Stdout notification adapter.

Implements NotificationPort by printing notifications to terminal with
human-readable formatting. Useful for local development without a chat
channel.
"""

import asyncio
import logging

from shopcast.core.models import NotificationContent
from shopcast.core.ports import NotificationPort

from .rendering import render_plain

logger = logging.getLogger(__name__)


class StdoutNotificationAdapter(NotificationPort):
    """Prints notifications to stdout with human-readable formatting."""

    def __init__(self, verbose: bool = False):
        """Initialize stdout notification adapter.

        Args:
            verbose: If True, include a separator footer after each message.
        """
        self.verbose = verbose

    async def send(self, content: NotificationContent) -> None:
        """Print one notification to stdout."""
        await asyncio.to_thread(print, self._format_header())
        await asyncio.to_thread(print, render_plain(content))
        if self.verbose:
            await asyncio.to_thread(print, self._format_footer())

    @staticmethod
    def _format_header() -> str:
        """Format the message header."""
        return "=" * 60

    @staticmethod
    def _format_footer() -> str:
        """Format the message footer."""
        return "=" * 60 + "\n"
