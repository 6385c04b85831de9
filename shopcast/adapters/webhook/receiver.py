"""HTTP webhook receiver for shop-management events.

Translates decoded webhook bodies into RawEvent values and forwards them
to the EventIntakePort, shaping the result into a JSON-ready response.
"""

import logging
from typing import Any

from shopcast.core.models import RawEvent
from shopcast.core.ports import EventIntakePort

logger = logging.getLogger(__name__)


class WebhookReceiver:
    """Receives shop-management webhook deliveries.

    Forwards each delivery to an EventIntakePort for processing.
    """

    def __init__(self, intake: EventIntakePort):
        """Initialize the webhook receiver.

        Args:
            intake: EventIntakePort implementation that runs the pipeline.
        """
        self.intake = intake

    async def handle_event(self, body: Any) -> dict[str, Any]:
        """Handle one webhook delivery.

        Args:
            body: Decoded JSON body, expected as ``{"event": str, "data": {...}}``
                but accepted in any shape.

        Returns:
            Dictionary describing how the event was handled. Dispatch
            failures are reported here rather than raised, so the emitter
            never sees an error and never redelivers.
        """
        event = RawEvent.from_body(body)
        logger.info("Received webhook event", extra={"tag": event.tag})

        result = await self.intake.handle_event(event)
        kind_name = type(result.kind).__name__

        if result.ignored:
            return {
                "status": "ignored",
                "operation": "event",
                "event_kind": kind_name,
            }

        return {
            "status": "success",
            "operation": "event",
            "event_kind": kind_name,
            "result": {
                "customer_name": str(result.identity.customer_name),
                "repair_order_number": str(result.identity.repair_order_number),
                "notified": result.notified,
            },
        }
