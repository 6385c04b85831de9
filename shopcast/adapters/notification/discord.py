"""Discord webhook notification adapter.

Implements NotificationPort by posting notifications to a Discord channel
webhook, either as a rich embed or as plain markdown content.
"""

import logging
from typing import Any

import httpx

from shopcast.core.errors import DispatchError
from shopcast.core.models import NotificationContent
from shopcast.core.ports import NotificationPort

from .rendering import render_markdown

logger = logging.getLogger(__name__)

# Discord API limits
MAX_CONTENT_LENGTH = 2000
MAX_TITLE_LENGTH = 256
MAX_DESCRIPTION_LENGTH = 4096
MAX_FIELDS = 25
MAX_FIELD_NAME_LENGTH = 256
MAX_FIELD_VALUE_LENGTH = 1024

DEFAULT_EMBED_COLOR = 0x2B6CB0


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


class DiscordNotificationAdapter(NotificationPort):
    """Posts notifications to a Discord webhook."""

    def __init__(
        self,
        webhook_url: str,
        username: str | None = None,
        use_embeds: bool = True,
        timeout_seconds: float = 10.0,
        embed_color: int = DEFAULT_EMBED_COLOR,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize Discord notification adapter.

        Args:
            webhook_url: Full Discord webhook URL (including id and token).
            username: Optional display name overriding the webhook's default.
            use_embeds: Send a rich embed if True, plain markdown content if False.
            timeout_seconds: Request timeout for each delivery.
            embed_color: Sidebar colour of the embed as a 24-bit integer.
            client: Optional pre-built HTTP client (used by tests).
        """
        if not webhook_url:
            raise ValueError("webhook_url must be a non-empty string")
        self.webhook_url = webhook_url
        self.username = username
        self.use_embeds = use_embeds
        self.timeout_seconds = timeout_seconds
        self.embed_color = embed_color
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client.

        Returns:
            httpx.AsyncClient configured with the delivery timeout.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_payload(self, content: NotificationContent) -> dict[str, Any]:
        """Serialize content into a Discord execute-webhook request body."""
        payload: dict[str, Any] = {}
        if self.username:
            payload["username"] = self.username

        if not self.use_embeds:
            payload["content"] = _truncate(render_markdown(content), MAX_CONTENT_LENGTH)
            return payload

        embed: dict[str, Any] = {
            "title": _truncate(content.title, MAX_TITLE_LENGTH),
            "description": _truncate(content.body, MAX_DESCRIPTION_LENGTH),
            "color": self.embed_color,
        }
        if content.fields:
            embed["fields"] = [
                {
                    "name": _truncate(label, MAX_FIELD_NAME_LENGTH),
                    "value": _truncate(value or "-", MAX_FIELD_VALUE_LENGTH),
                    "inline": True,
                }
                for label, value in content.fields[:MAX_FIELDS]
            ]
        payload["embeds"] = [embed]
        return payload

    async def send(self, content: NotificationContent) -> None:
        """Deliver one notification to the Discord webhook.

        Raises:
            DispatchError: If Discord answers with a non-2xx status.
            httpx.HTTPError: If the request cannot be completed.
        """
        client = await self._get_client()
        try:
            response = await client.post(self.webhook_url, json=self.build_payload(content))
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach Discord webhook: {e}")
            raise

        if response.is_success:
            logger.debug(
                "Delivered Discord notification",
                extra={"status_code": response.status_code, "title": content.title},
            )
            return

        logger.error(
            f"Discord rejected notification: {response.status_code}",
            extra={"response": response.text[:500]},
        )
        raise DispatchError(
            f"Discord webhook returned HTTP {response.status_code}",
            status_code=response.status_code,
        )
