"""HTTP server adapter for webhook receiver.

Provides a threaded HTTP server using Python's built-in http.server module
and asyncio for handling webhook requests. Each delivery is served on its
own thread and its pipeline runs as a coroutine on the application's event
loop, so a slow chat dispatch for one event never blocks another.
"""

import asyncio
import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Coroutine

from shopcast.adapters.webhook.receiver import WebhookReceiver

logger = logging.getLogger(__name__)

DEFAULT_MAX_BODY_BYTES = 1024 * 1024


def make_webhook_handler(
    webhook_receiver: WebhookReceiver,
    event_loop: asyncio.AbstractEventLoop,
    webhook_path: str,
    max_body_bytes: int,
    request_timeout_seconds: float,
) -> type[BaseHTTPRequestHandler]:
    """Factory to create a WebhookHTTPHandler class with instance-specific state.

    Implements proper dependency injection by creating a handler class with
    closure-captured dependencies instead of using class-level mutable state.

    Args:
        webhook_receiver: Receiver for webhook deliveries
        event_loop: Event loop the pipeline coroutines run on
        webhook_path: Path that accepts event deliveries
        max_body_bytes: Largest accepted request body
        request_timeout_seconds: How long a handler waits for the pipeline

    Returns:
        A WebhookHTTPHandler class configured with the provided dependencies
    """

    class WebhookHTTPHandler(BaseHTTPRequestHandler):
        """HTTP request handler for webhook endpoints."""

        def do_POST(self) -> None:
            """Handle POST requests.

            Routes to appropriate handler based on path.
            """
            if self.path.split("?", 1)[0] != webhook_path:
                self.send_error(404, "Not found")
                return

            try:
                content_length = int(self.headers.get("Content-Length", 0))
            except ValueError:
                self.send_error(400, "Invalid Content-Length")
                return

            if content_length > max_body_bytes:
                self.send_error(413, "Request body too large")
                return

            body = self.rfile.read(content_length) if content_length > 0 else b""

            try:
                data = json.loads(body) if body else {}
            except (json.JSONDecodeError, UnicodeDecodeError):
                self.send_error(400, "Invalid JSON body")
                return

            self._run_async(webhook_receiver.handle_event(data))

        def do_GET(self) -> None:
            """Handle GET requests.

            Supports health check via GET.
            """
            if self.path == "/health":
                self._send_response({"status": "healthy"})
            else:
                self.send_error(404, "Not found")

        def _run_async(self, coro: Coroutine[Any, Any, dict[str, Any]]) -> None:
            """Run the pipeline coroutine on the event loop and answer with its result."""
            future = asyncio.run_coroutine_threadsafe(coro, event_loop)
            try:
                result = future.result(timeout=request_timeout_seconds)
            except Exception as e:
                future.cancel()
                # Log full exception server-side for debugging
                logger.error(f"Error handling webhook request: {e}", exc_info=True)
                # Return generic error to client without details
                self.send_error(500, "Internal server error")
                return
            self._send_response(result)

        def _send_response(self, data: dict[str, Any]) -> None:
            """Send JSON response."""
            encoded = json.dumps(data).encode()
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(encoded)))
            self.end_headers()
            self.wfile.write(encoded)

        def log_message(self, format: str, *args: Any) -> None:
            """Log HTTP request."""
            logger.debug(f"HTTP {self.client_address[0]}: {format % args}")

    return WebhookHTTPHandler


class WebhookHTTPServer:
    """Webhook HTTP server adapter.

    Provides the event delivery endpoint and a public health check.
    """

    def __init__(
        self,
        webhook_receiver: WebhookReceiver,
        host: str = "0.0.0.0",
        port: int = 3000,
        webhook_path: str = "/webhook",
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
        request_timeout_seconds: float = 30.0,
    ):
        """Initialize the HTTP server.

        Args:
            webhook_receiver: WebhookReceiver instance to handle requests.
            host: Host to listen on (default 0.0.0.0).
            port: Port to listen on (default 3000; 0 picks a free port).
            webhook_path: Path accepting event deliveries (default /webhook).
            max_body_bytes: Largest accepted request body in bytes.
            request_timeout_seconds: Upper bound on one pipeline run.
        """
        if not webhook_path.startswith("/"):
            raise ValueError(f"webhook_path must start with '/', got {webhook_path!r}")
        self.webhook_receiver = webhook_receiver
        self.host = host
        self.port = port
        self.webhook_path = webhook_path
        self.max_body_bytes = max_body_bytes
        self.request_timeout_seconds = request_timeout_seconds
        self.server: ThreadingHTTPServer | None = None
        self._server_task: asyncio.Task[None] | None = None

    @property
    def bound_port(self) -> int:
        """The port actually listened on, once started."""
        if self.server is None:
            return self.port
        return self.server.server_address[1]

    async def start(self) -> None:
        """Start the HTTP server."""
        logger.info(
            f"Starting webhook HTTP server on {self.host}:{self.port}{self.webhook_path}"
        )

        handler_class = make_webhook_handler(
            webhook_receiver=self.webhook_receiver,
            event_loop=asyncio.get_running_loop(),
            webhook_path=self.webhook_path,
            max_body_bytes=self.max_body_bytes,
            request_timeout_seconds=self.request_timeout_seconds,
        )

        self.server = ThreadingHTTPServer((self.host, self.port), handler_class)
        self.server.daemon_threads = True

        self._server_task = asyncio.create_task(self._run_server())
        logger.info(f"Webhook HTTP server started on port {self.bound_port}")

    async def _run_server(self) -> None:
        """Run the HTTP server loop in a thread pool."""
        if not self.server:
            return

        try:
            # Run the blocking server loop in a thread pool to avoid blocking the event loop
            await asyncio.to_thread(self.server.serve_forever)
        except asyncio.CancelledError:
            # Normal shutdown
            pass
        except Exception as e:
            logger.error(f"Webhook HTTP server error: {e}", exc_info=True)

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self.server:
            await asyncio.to_thread(self.server.shutdown)
            self.server.server_close()
        if self._server_task:
            self._server_task.cancel()
            try:
                await self._server_task
            except asyncio.CancelledError:
                pass
        logger.info("Webhook HTTP server stopped")
