"""Tests for WebhookHTTPServer over a real socket."""

import asyncio
import json
from http.client import HTTPConnection
from typing import Any

import pytest

from shopcast.adapters.webhook.http_server import WebhookHTTPServer
from shopcast.adapters.webhook.receiver import WebhookReceiver
from shopcast.core.identity import IdentityCache
from shopcast.main import create_event_service
from shopcast.tests.fakes import FakeEventIntakePort, FakeNotificationPort


def _request(
    port: int,
    method: str,
    path: str,
    body: bytes | None = None,
    headers: dict[str, str] | None = None,
) -> tuple[int, bytes]:
    """Issue one blocking request; run through asyncio.to_thread in tests."""
    connection = HTTPConnection("127.0.0.1", port, timeout=5)
    try:
        if headers is None:
            headers = {"Content-Type": "application/json"} if body is not None else {}
        connection.request(method, path, body=body, headers=headers)
        response = connection.getresponse()
        return response.status, response.read()
    finally:
        connection.close()


async def _post_json(port: int, path: str, data: Any) -> tuple[int, dict[str, Any]]:
    status, raw = await asyncio.to_thread(
        _request, port, "POST", path, json.dumps(data).encode()
    )
    return status, json.loads(raw)


@pytest.fixture
def notification() -> FakeNotificationPort:
    return FakeNotificationPort()


@pytest.fixture
def cache() -> IdentityCache:
    return IdentityCache()


@pytest.fixture
async def server(notification: FakeNotificationPort, cache: IdentityCache):
    """Start a server on a free port wired to the real pipeline."""
    receiver = WebhookReceiver(intake=create_event_service(notification, cache))
    http_server = WebhookHTTPServer(
        webhook_receiver=receiver,
        host="127.0.0.1",
        port=0,
        max_body_bytes=256,
    )
    await http_server.start()
    try:
        yield http_server
    finally:
        await http_server.stop()


class TestWebhookHTTPServerInitialization:
    def test_relative_webhook_path_raises_value_error(self) -> None:
        receiver = WebhookReceiver(intake=FakeEventIntakePort())

        with pytest.raises(ValueError) as exc_info:
            WebhookHTTPServer(webhook_receiver=receiver, webhook_path="webhook")

        assert "must start with '/'" in str(exc_info.value)

    def test_defaults(self) -> None:
        server = WebhookHTTPServer(webhook_receiver=WebhookReceiver(intake=FakeEventIntakePort()))

        assert server.port == 3000
        assert server.webhook_path == "/webhook"
        assert server.bound_port == 3000


class TestRouting:
    @pytest.mark.asyncio
    async def test_health_check(self, server: WebhookHTTPServer) -> None:
        status, raw = await asyncio.to_thread(_request, server.bound_port, "GET", "/health")

        assert status == 200
        assert json.loads(raw) == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_unknown_get_path(self, server: WebhookHTTPServer) -> None:
        status, _ = await asyncio.to_thread(_request, server.bound_port, "GET", "/metrics")
        assert status == 404

    @pytest.mark.asyncio
    async def test_unknown_post_path(self, server: WebhookHTTPServer) -> None:
        status, _ = await asyncio.to_thread(
            _request, server.bound_port, "POST", "/other"
        )
        assert status == 404

    @pytest.mark.asyncio
    async def test_invalid_json(self, server: WebhookHTTPServer) -> None:
        status, _ = await asyncio.to_thread(
            _request, server.bound_port, "POST", "/webhook", b"{not json"
        )
        assert status == 400

    @pytest.mark.asyncio
    async def test_oversized_body(self, server: WebhookHTTPServer) -> None:
        status, _ = await asyncio.to_thread(
            _request,
            server.bound_port,
            "POST",
            "/webhook",
            None,
            {"Content-Type": "application/json", "Content-Length": "300"},
        )
        assert status == 413


class TestDeliveries:
    @pytest.mark.asyncio
    async def test_estimate_viewed_is_dispatched(
        self, server: WebhookHTTPServer, notification: FakeNotificationPort
    ) -> None:
        status, response = await _post_json(
            server.bound_port,
            "/webhook?source=shop",
            {
                "event": "Grant Bodmer viewed estimate for Repair Order #12558",
                "data": {
                    "repairOrderNumber": 12558,
                    "customer": {"firstName": "Grant", "lastName": "Bodmer"},
                },
            },
        )

        assert status == 200
        assert response["status"] == "success"
        assert response["event_kind"] == "EstimateViewed"
        assert response["result"]["notified"] is True
        assert notification.get_last_notification().title == "👀 Repair Order #12558 - Grant Bodmer"

    @pytest.mark.asyncio
    async def test_unrecognized_event_is_acknowledged(
        self, server: WebhookHTTPServer, notification: FakeNotificationPort
    ) -> None:
        status, response = await _post_json(
            server.bound_port, "/webhook", {"event": "Vehicle checked in", "data": {}}
        )

        assert status == 200
        assert response["status"] == "ignored"
        assert notification.send_call_count == 0

    @pytest.mark.asyncio
    async def test_dispatch_failure_still_acknowledged(
        self, server: WebhookHTTPServer, notification: FakeNotificationPort
    ) -> None:
        notification.set_should_fail(True, "Discord unavailable")

        status, response = await _post_json(
            server.bound_port, "/webhook", {"event": "Estimate viewed", "data": {}}
        )

        assert status == 200
        assert response["result"]["notified"] is False

    @pytest.mark.asyncio
    async def test_identity_carries_across_deliveries(
        self, server: WebhookHTTPServer, notification: FakeNotificationPort
    ) -> None:
        await _post_json(
            server.bound_port,
            "/webhook",
            {
                "event": "Grant Bodmer viewed estimate for Repair Order #12558",
                "data": {
                    "id": 77,
                    "repairOrderNumber": 12558,
                    "customer": {"firstName": "Grant", "lastName": "Bodmer"},
                },
            },
        )
        status, response = await _post_json(
            server.bound_port,
            "/webhook",
            {"event": "Payment made", "data": {"amount": 27000, "repairOrderId": 77}},
        )

        assert status == 200
        assert response["result"]["customer_name"] == "Grant Bodmer"
        assert response["result"]["repair_order_number"] == "12558"
        assert "$270.00" in notification.get_last_notification().body

    @pytest.mark.asyncio
    async def test_concurrent_deliveries(
        self, server: WebhookHTTPServer, notification: FakeNotificationPort
    ) -> None:
        notification.delay_seconds = 0.2

        results = await asyncio.gather(
            *(
                _post_json(server.bound_port, "/webhook", {"event": "Estimate viewed", "data": {}})
                for _ in range(5)
            )
        )

        assert all(status == 200 for status, _ in results)
        assert len(notification.sent) == 5
