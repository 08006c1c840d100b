"""
Module: delivery.py
Description: Delivery data model for the webhook relay.

Defines the Delivery model: one received webhook with its identifier,
topic, forwardable headers, and the raw body exactly as received.

Key Components:
- Delivery: Immutable received webhook
- extract_identity(): Delivery id and topic from inbound headers
- Header names and the "unknown" fallback used by the upstream source

Dependencies: pydantic, datetime, typing
Author: Webhook Relay Team
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from webhook_relay.utils.headers import sanitize_headers

TOPIC_HEADER = "vgg-topic"
DELIVERY_ID_HEADER = "vgg-deliveryid"
UNKNOWN = "unknown"


def _header_value(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def extract_identity(headers: Mapping[str, str]) -> Tuple[str, str]:
    """
    Read the delivery id and topic from inbound headers.

    Missing or empty headers fall back to "unknown"; they are never
    treated as an error.

    Args:
        headers: Inbound headers (any case)

    Returns:
        Tuple of (delivery_id, topic)
    """
    delivery_id = _header_value(headers, DELIVERY_ID_HEADER) or UNKNOWN
    topic = _header_value(headers, TOPIC_HEADER) or UNKNOWN
    return delivery_id, topic


class Delivery(BaseModel):
    """
    A received webhook.

    Attributes:
        delivery_id: Source-provided identifier, "unknown" if absent
        topic: Source-provided event classification, "unknown" if absent
        headers: Inbound headers minus host, content-length and connection
        body: Raw payload bytes, forwarded unmodified
        received_at: Arrival time, used for retention expiry
    """

    model_config = ConfigDict(frozen=True)

    delivery_id: str = Field(default=UNKNOWN, description="Delivery identifier")
    topic: str = Field(default=UNKNOWN, description="Event topic")
    headers: Dict[str, str] = Field(default_factory=dict, description="Forwardable headers")
    body: bytes = Field(default=b"", description="Raw payload")
    received_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Arrival timestamp"
    )

    @field_validator('headers')
    @classmethod
    def strip_transport_headers(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Transport-only headers never survive into a Delivery."""
        return sanitize_headers(v)

    @field_validator('delivery_id', 'topic', mode='before')
    @classmethod
    def default_unknown(cls, v: Optional[str]) -> str:
        """Fall back to "unknown" for missing identifiers."""
        return v or UNKNOWN

    @classmethod
    def from_inbound(
        cls,
        headers: Mapping[str, str],
        body: bytes,
        received_at: Optional[datetime] = None
    ) -> "Delivery":
        """
        Build a Delivery from a raw inbound request.

        Args:
            headers: Flattened inbound headers
            body: Complete request body
            received_at: Arrival time (defaults to now, UTC)

        Returns:
            Delivery with sanitized headers
        """
        delivery_id, topic = extract_identity(headers)
        return cls(
            delivery_id=delivery_id,
            topic=topic,
            headers=dict(headers),
            body=body,
            received_at=received_at or datetime.now(timezone.utc),
        )

    @property
    def size(self) -> int:
        """Payload size in bytes."""
        return len(self.body)

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        """Check whether the delivery is at least ``ttl`` old at ``now``."""
        return now - self.received_at >= ttl
