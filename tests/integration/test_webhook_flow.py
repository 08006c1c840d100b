"""
Module: test_webhook_flow.py
Description: End-to-end tests for receiving and relaying webhooks.

Drives the ASGI app with httpx.AsyncClient so the relay's background
tasks run on the test's event loop. Destinations are mocked with
pytest-httpx where real forwarding is exercised.
"""

import httpx
import pytest

from webhook_relay.main import create_app

PRIMARY_URL = "https://primary.example.com/api/webhooks/stubhub"
DEV_URL = "https://dev.example.com/api/webhooks/stubhub"
POLL_SECRET = "test-poll-secret"
WEBHOOK_HEADERS = {
    "content-type": "application/json",
    "vgg-topic": "order.created",
    "vgg-deliveryid": "abc-123",
}


def _client(asgi_app) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=asgi_app),
        base_url="http://relay.test"
    )


def _recording(app, events: list):
    """Wrap ``app`` so the moment the response body is sent is recorded."""

    async def wrapped(scope, receive, send):
        async def recording_send(message):
            await send(message)
            if message["type"] == "http.response.body" and not message.get("more_body", False):
                events.append("ack")

        await app(scope, receive, recording_send)

    return wrapped


class TestWebhookFanOut:
    """End-to-end cases for fan-out mode."""

    @pytest.mark.asyncio
    async def test_acknowledges_and_forwards_to_primary(self, fanout_settings, httpx_mock):
        httpx_mock.add_response(method="POST", url=PRIMARY_URL, status_code=200, json={"ok": True})
        app = create_app(fanout_settings)

        async with _client(app) as client:
            response = await client.post(
                "/api/webhooks/stubhub",
                content=b'{"x":1}',
                headers=WEBHOOK_HEADERS
            )
        await app.state.relay.join()

        assert response.status_code == 200
        assert response.json() == {"received": True, "deliveryId": "abc-123"}

        forwarded = httpx_mock.get_request()
        assert forwarded.content == b'{"x":1}'
        assert forwarded.headers["vgg-topic"] == "order.created"
        assert forwarded.headers["vgg-deliveryid"] == "abc-123"
        assert forwarded.headers["host"] == "primary.example.com"
        assert forwarded.headers["content-length"] == "7"

    @pytest.mark.asyncio
    async def test_acknowledgment_precedes_forwarding(self, fanout_settings, recording_forwarder):
        events = recording_forwarder.events
        app = create_app(fanout_settings, forwarder=recording_forwarder)
        app.state.registry.add(DEV_URL)

        async with _client(_recording(app, events)) as client:
            await client.post("/api/webhooks/stubhub", content=b'{"x":1}', headers=WEBHOOK_HEADERS)
        await app.state.relay.join()

        assert events == ["ack", f"forward:{PRIMARY_URL}", f"forward:{DEV_URL}"]

    @pytest.mark.asyncio
    async def test_downstream_failures_never_reach_sender(self, fanout_settings, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"), url=PRIMARY_URL)
        httpx_mock.add_exception(httpx.ReadTimeout("Read timed out"), url=DEV_URL)
        app = create_app(fanout_settings)
        app.state.registry.add(DEV_URL)

        async with _client(app) as client:
            response = await client.post(
                "/api/webhooks/stubhub",
                content=b'{"x":1}',
                headers=WEBHOOK_HEADERS
            )
        await app.state.relay.join()

        assert response.status_code == 200
        assert response.json()["deliveryId"] == "abc-123"
        assert [str(r.url) for r in httpx_mock.get_requests()] == [PRIMARY_URL, DEV_URL]

    @pytest.mark.asyncio
    async def test_missing_identity_headers(self, fanout_settings, recording_forwarder):
        app = create_app(fanout_settings, forwarder=recording_forwarder)

        async with _client(app) as client:
            response = await client.post("/api/webhooks/stubhub", content=b"{}")
        await app.state.relay.join()

        assert response.json() == {"received": True, "deliveryId": "unknown"}
        assert recording_forwarder.urls == [PRIMARY_URL]

    @pytest.mark.asyncio
    async def test_registered_secondary_receives_delivery(self, fanout_settings, recording_forwarder):
        app = create_app(fanout_settings, forwarder=recording_forwarder)

        async with _client(app) as client:
            await client.post("/dev/register", json={"url": DEV_URL, "action": "add"})
            await client.post("/api/webhooks/stubhub", content=b'{"x":1}', headers=WEBHOOK_HEADERS)
            await app.state.relay.join()
            await client.post("/dev/register", json={"url": DEV_URL, "action": "remove"})
            await client.post("/api/webhooks/stubhub", content=b'{"x":2}', headers=WEBHOOK_HEADERS)
            await app.state.relay.join()

        assert recording_forwarder.urls == [PRIMARY_URL, DEV_URL, PRIMARY_URL]
        assert recording_forwarder.calls[1]["body"] == b'{"x":1}'


class TestWebhookRetention:
    """End-to-end cases for retention mode."""

    @pytest.mark.asyncio
    async def test_retained_delivery_can_be_polled_once(self, retention_settings, recording_forwarder):
        app = create_app(retention_settings, forwarder=recording_forwarder)
        auth = {"Authorization": f"Bearer {POLL_SECRET}"}

        async with _client(app) as client:
            ack = await client.post(
                "/api/webhooks/stubhub",
                content=b'{"x":1}',
                headers=WEBHOOK_HEADERS
            )
            await app.state.relay.join()

            status = await client.get("/dev/status")
            polled = await client.get("/dev/poll", headers=auth)
            again = await client.get("/dev/poll", headers=auth)

        assert ack.json() == {"received": True, "deliveryId": "abc-123"}
        assert recording_forwarder.urls == [PRIMARY_URL]
        assert status.json()["queueSize"] == 1

        webhooks = polled.json()["webhooks"]
        assert len(webhooks) == 1
        assert webhooks[0]["id"] == "abc-123"
        assert webhooks[0]["topic"] == "order.created"
        assert webhooks[0]["body"] == '{"x":1}'
        assert webhooks[0]["headers"]["vgg-topic"] == "order.created"
        assert "host" not in webhooks[0]["headers"]
        assert "content-length" not in webhooks[0]["headers"]
        assert again.json() == {"webhooks": []}

    @pytest.mark.asyncio
    async def test_unauthorized_poll_does_not_drain(self, retention_settings, recording_forwarder):
        app = create_app(retention_settings, forwarder=recording_forwarder)

        async with _client(app) as client:
            await client.post("/api/webhooks/stubhub", content=b'{"x":1}', headers=WEBHOOK_HEADERS)
            await app.state.relay.join()

            rejected = await client.get("/dev/poll")
            status = await client.get("/dev/status")

        assert rejected.status_code == 401
        assert rejected.json() == {"error": "Unauthorized"}
        assert status.json()["queueSize"] == 1
