"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains all data models used by the relay:
- Delivery: A received webhook with sanitized headers and raw body
- ForwardOutcome: Result of one forwarding attempt
- Request and response bodies for the HTTP surface

All models are exported here for convenient importing.
"""

from .delivery import Delivery, extract_identity
from .outcome import ForwardOutcome
from .request import RegisterEndpointRequest
from .response import (
    EndpointListResponse,
    HealthResponse,
    PolledWebhook,
    PollResponse,
    QueueStatusResponse,
    RegisterEndpointResponse,
    WebhookAckResponse,
)

__all__ = [
    "Delivery",
    "extract_identity",
    "ForwardOutcome",
    "RegisterEndpointRequest",
    "EndpointListResponse",
    "HealthResponse",
    "PolledWebhook",
    "PollResponse",
    "QueueStatusResponse",
    "RegisterEndpointResponse",
    "WebhookAckResponse",
]
