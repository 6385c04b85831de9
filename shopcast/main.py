"""Composition root for the shopcast notification system.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Dependency injection
- Webhook server start-up
"""

import asyncio
import logging
import sys

from shopcast.adapters.notification.discord import DiscordNotificationAdapter
from shopcast.adapters.notification.stdout import StdoutNotificationAdapter
from shopcast.adapters.webhook.http_server import WebhookHTTPServer
from shopcast.adapters.webhook.receiver import WebhookReceiver
from shopcast.config import Settings, load_settings
from shopcast.core.classifier import EventClassifier
from shopcast.core.event_service import EventService
from shopcast.core.formatter import NotificationFormatter
from shopcast.core.identity import IdentityCache, IdentityResolver
from shopcast.core.ports import NotificationPort


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def create_notification_adapter(settings: Settings) -> NotificationPort:
    """Instantiate the configured notification adapter.

    Raises:
        ValueError: If the Discord backend is selected without a webhook URL.
    """
    if settings.notification_backend == "discord":
        if not settings.discord_webhook_url:
            raise ValueError(
                "Discord backend selected but DISCORD_WEBHOOK_URL not set"
            )
        return DiscordNotificationAdapter(
            webhook_url=settings.discord_webhook_url,
            username=settings.discord_username or None,
            use_embeds=settings.discord_use_embeds,
            timeout_seconds=settings.discord_timeout_seconds,
        )
    if settings.notification_backend == "stdout":
        return StdoutNotificationAdapter(verbose=settings.debug)
    raise ValueError(f"Unknown notification backend: {settings.notification_backend}")


def create_event_service(
    notification: NotificationPort, cache: IdentityCache | None = None
) -> EventService:
    """Wire the core pipeline around a notification adapter.

    The identity cache is created here, once per process, unless one is
    supplied.
    """
    return EventService(
        classifier=EventClassifier(),
        resolver=IdentityResolver(cache if cache is not None else IdentityCache()),
        formatter=NotificationFormatter(),
        notification=notification,
    )


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the webhook server.

    This is the composition root: the single place where all components
    are instantiated and wired together.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate the notification adapter
    4. Initialize core services
    5. Start the webhook HTTP server

    Raises:
        SystemExit: On fatal errors (configuration, adapter initialization)
        asyncio.CancelledError: On graceful shutdown signal
    """
    # Step 1: Load configuration
    settings = load_settings()

    # Step 2: Configure logging
    configure_logging("DEBUG" if settings.debug else settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading shopcast notification service...")

    # Step 3: Instantiate adapters
    try:
        notification = create_notification_adapter(settings)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"Notification adapter: {type(notification).__name__}")

    # Step 4: Initialize core services
    event_service = create_event_service(notification)
    webhook_receiver = WebhookReceiver(intake=event_service)

    # Step 5: Start HTTP server
    http_server = WebhookHTTPServer(
        webhook_receiver=webhook_receiver,
        host=settings.webhook_host,
        port=settings.webhook_port,
        webhook_path=settings.webhook_path,
        max_body_bytes=settings.max_body_bytes,
        request_timeout_seconds=settings.request_timeout_seconds,
    )

    try:
        await http_server.start()
        # Keep the server running
        while True:
            await asyncio.sleep(1)
    finally:
        await http_server.stop()
        await notification.close()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
