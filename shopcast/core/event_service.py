"""Event pipeline orchestration for the notification system.

This module wires the pure core pieces together for one inbound event:
classify -> resolve identity -> format -> dispatch.
"""

import logging

from .classifier import EventClassifier
from .formatter import NotificationFormatter
from .identity import IdentityResolver
from .models import ProcessingResult, RawEvent, Unrecognized
from .ports import EventIntakePort, NotificationPort

logger = logging.getLogger(__name__)


class EventService(EventIntakePort):
    """Implements the per-event notification pipeline.

    Uses ports but contains no adapter-specific logic. Each call is
    independent; only the resolver's identity cache is shared, and it is
    never held across the dispatch.
    """

    def __init__(
        self,
        classifier: EventClassifier,
        resolver: IdentityResolver,
        formatter: NotificationFormatter,
        notification: NotificationPort,
    ):
        self.classifier = classifier
        self.resolver = resolver
        self.formatter = formatter
        self.notification = notification

    async def handle_event(self, event: RawEvent) -> ProcessingResult:
        """Turn one webhook event into at most one notification.

        Steps:
        1. Classify the tag and payload
        2. Resolve customer and repair-order identity (updates the cache)
        3. Render notification content
        4. Dispatch, unless the event was unrecognized

        A failed dispatch is logged and reported in the result; it is
        never retried and never raised.
        """
        kind = self.classifier.classify(event.tag, event.payload)
        identity = self.resolver.resolve(event.payload, event.tag)
        content = self.formatter.format(kind, identity)

        if content is None:
            logger.info(
                "Ignoring unrecognized event",
                extra={"tag": kind.raw_tag if isinstance(kind, Unrecognized) else event.tag},
            )
            return ProcessingResult(
                kind=kind, identity=identity, content=None, notified=False
            )

        logger.info(
            f"Dispatching {type(kind).__name__} notification",
            extra={
                "event_kind": type(kind).__name__,
                "repair_order_number": str(identity.repair_order_number),
            },
        )

        try:
            await self.notification.send(content)
        except Exception as e:
            logger.error(
                f"Failed to dispatch {type(kind).__name__} notification: {e}",
                exc_info=True,
            )
            return ProcessingResult(
                kind=kind,
                identity=identity,
                content=content,
                notified=False,
                dispatch_error=str(e),
            )

        return ProcessingResult(kind=kind, identity=identity, content=content, notified=True)
