"""Port interfaces for the shopcast notification system.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - NotificationPort: Deliver formatted notifications to a chat channel

2. **Driving Ports** (adapters/external systems call into core)
   - EventIntakePort: Entry point for inbound webhook events
"""

from abc import ABC, abstractmethod

from .models import NotificationContent, ProcessingResult, RawEvent


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class NotificationPort(ABC):
    """Port for delivering notifications to a chat channel.

    Adapters implementing this port serialize NotificationContent into
    the medium's own format (Discord embed, plain text, etc.) and
    perform the network call.

    Implementations must not retry on their own; the core treats a
    failed delivery as final and only logs it.
    """

    @abstractmethod
    async def send(self, content: NotificationContent) -> None:
        """Deliver one notification.

        Args:
            content: Rendered notification.

        Raises:
            Exception: If the channel is unavailable or rejects the message.
                The caller logs the error and carries on.
        """

    async def close(self) -> None:
        """Release any transport resources. Default is a no-op."""


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class EventIntakePort(ABC):
    """Port for processing inbound shop-management events.

    Driving port: the webhook receiver invokes this once per delivery.
    Implementations live in the core (event_service.py).
    """

    @abstractmethod
    async def handle_event(self, event: RawEvent) -> ProcessingResult:
        """Classify, resolve, format and dispatch one event.

        Args:
            event: The decoded inbound event.

        Returns:
            Summary of what was done. Never raises for malformed input
            or dispatch failures.
        """
