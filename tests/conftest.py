"""
Module: conftest.py
Description: Shared pytest fixtures for webhook relay tests.

Provides settings for both distribution modes, sample deliveries, a
controllable clock for retention expiry, and a recording forwarder
that stands in for real HTTP in orchestrator tests.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Mapping, Optional, Set

import pytest

from webhook_relay.config.settings import Settings
from webhook_relay.delivery.forwarder import Forwarder
from webhook_relay.models.delivery import Delivery
from webhook_relay.models.outcome import ForwardOutcome

PRIMARY_URL = "https://primary.example.com/api/webhooks/stubhub"
POLL_SECRET = "test-poll-secret"


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class RecordingForwarder(Forwarder):
    """
    Forwarder that records attempts instead of sending them.

    URLs in ``failing`` resolve to a failure outcome; URLs in
    ``raising`` raise, to exercise the orchestrator's guards.
    """

    def __init__(self, events: Optional[list] = None):
        super().__init__(timeout_seconds=10.0)
        self.calls: List[dict] = []
        self.events = events if events is not None else []
        self.failing: Set[str] = set()
        self.raising: Set[str] = set()

    async def forward(
        self,
        destination_url: str,
        headers: Mapping[str, str],
        body: bytes,
        label: str
    ) -> ForwardOutcome:
        self.calls.append({
            "url": destination_url,
            "headers": dict(headers),
            "body": body,
            "label": label,
        })
        self.events.append(f"forward:{destination_url}")
        if destination_url in self.raising:
            raise RuntimeError("forwarder exploded")
        if destination_url in self.failing:
            return ForwardOutcome.failed(destination_url, label, "Connection refused")
        return ForwardOutcome.succeeded(destination_url, label, 200)

    @property
    def urls(self) -> List[str]:
        return [call["url"] for call in self.calls]


@pytest.fixture
def fanout_settings():
    """Settings for fan-out mode without reading the environment."""
    return Settings(
        _env_file=None,
        production_url=PRIMARY_URL,
        distribution_mode="fanout",
        log_level="DEBUG"
    )


@pytest.fixture
def retention_settings():
    """Settings for retention mode with a known poll secret."""
    return Settings(
        _env_file=None,
        production_url=PRIMARY_URL,
        distribution_mode="retention",
        poll_secret=POLL_SECRET,
        log_level="DEBUG"
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recording_forwarder():
    return RecordingForwarder()


@pytest.fixture
def sample_headers():
    """
    Inbound headers as the upstream sender sends them.

    Includes the transport-only headers that must never be forwarded.
    """
    return {
        "host": "relay.example.com",
        "content-length": "7",
        "connection": "keep-alive",
        "content-type": "application/json",
        "vgg-topic": "order.created",
        "vgg-deliveryid": "abc-123",
        "user-agent": "upstream-webhooks/1.0",
    }


@pytest.fixture
def sample_body():
    return b'{"x":1}'


@pytest.fixture
def make_delivery(fake_clock):
    """Factory for deliveries received at the fake clock's current time."""
    counter = {"n": 0}

    def _make(delivery_id: Optional[str] = None, topic: str = "order.created", body: bytes = b'{"x":1}') -> Delivery:
        counter["n"] += 1
        return Delivery(
            delivery_id=delivery_id or f"dlv-{counter['n']}",
            topic=topic,
            headers={"content-type": "application/json", "vgg-topic": topic},
            body=body,
            received_at=fake_clock(),
        )

    return _make
