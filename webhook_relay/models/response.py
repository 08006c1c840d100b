"""
Module: response.py
Description: API response models for the webhook relay.

Defines the JSON bodies returned by the relay's endpoints. Field
names on the wire are camelCase to match what the upstream sender
and the polling consumers already expect.

Key Components:
- WebhookAckResponse: Acknowledgment sent to the upstream sender
- HealthResponse: Status snapshot for GET /health
- RegisterEndpointResponse, EndpointListResponse: Fan-out routes
- PolledWebhook, PollResponse, QueueStatusResponse: Retention routes

Dependencies: pydantic, datetime, typing
Author: Webhook Relay Team
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from webhook_relay.models.delivery import Delivery


class WebhookAckResponse(BaseModel):
    """Acknowledgment echoed to the upstream sender."""

    model_config = ConfigDict(populate_by_name=True)

    received: bool = Field(default=True, description="Always true once the body is read")
    delivery_id: str = Field(..., alias="deliveryId", description="Echoed delivery id")


class HealthResponse(BaseModel):
    """
    Status snapshot.

    Exactly one of dev_endpoints and queue_size is set, depending on the
    distribution mode.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(default="ok", description="Service status")
    service: str = Field(..., description="Service name")
    production: str = Field(..., description="Primary destination URL")
    mode: str = Field(..., description="Distribution mode")
    dev_endpoints: Optional[int] = Field(
        default=None,
        alias="devEndpoints",
        description="Registered secondary destinations (fan-out)"
    )
    queue_size: Optional[int] = Field(
        default=None,
        alias="queueSize",
        description="Deliveries waiting to be polled (retention)"
    )
    timestamp: datetime = Field(..., description="Snapshot time")


class RegisterEndpointResponse(BaseModel):
    success: bool = Field(default=True)
    endpoints: List[str] = Field(..., description="Registered destinations in order")


class EndpointListResponse(BaseModel):
    endpoints: List[str] = Field(..., description="Registered destinations in order")


class PolledWebhook(BaseModel):
    """
    A drained delivery as handed to a polling consumer.

    The body is decoded as UTF-8; undecodable bytes are replaced.
    """

    id: str = Field(..., description="Delivery id")
    topic: str = Field(..., description="Event topic")
    headers: Dict[str, str] = Field(..., description="Forwardable headers")
    body: str = Field(..., description="Raw payload as text")
    timestamp: datetime = Field(..., description="Arrival time")

    @classmethod
    def from_delivery(cls, delivery: Delivery) -> "PolledWebhook":
        return cls(
            id=delivery.delivery_id,
            topic=delivery.topic,
            headers=dict(delivery.headers),
            body=delivery.body.decode("utf-8", errors="replace"),
            timestamp=delivery.received_at,
        )


class PollResponse(BaseModel):
    webhooks: List[PolledWebhook] = Field(default_factory=list)


class QueueStatusResponse(BaseModel):
    """Retention queue status for GET /dev/status."""

    model_config = ConfigDict(populate_by_name=True)

    queue_size: int = Field(..., alias="queueSize", description="Current queue length")
    max_size: int = Field(..., alias="maxSize", description="Queue capacity")
    ttl_minutes: float = Field(..., alias="ttlMinutes", description="Retention time-to-live")
