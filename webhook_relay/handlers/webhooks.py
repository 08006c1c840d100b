"""
Module: webhooks.py
Description: Upstream webhook receiver.

Implements POST /api/webhooks/stubhub. The full body is read, the
sender is acknowledged, and relaying starts only after the
acknowledgment has been written.

Key Components:
- receive_webhook(): Acknowledge and schedule relaying
- get_relay(): Dependency injection for the orchestrator

Dependencies: FastAPI, datetime
Author: Webhook Relay Team
"""

from datetime import datetime, timezone
from typing import Mapping

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from webhook_relay.delivery.relay import RelayOrchestrator
from webhook_relay.models.delivery import extract_identity
from webhook_relay.models.response import WebhookAckResponse
from webhook_relay.utils.headers import flatten_headers
from webhook_relay.utils.logger import get_logger

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])
logger = get_logger(__name__)


def get_relay(request: Request) -> RelayOrchestrator:
    """Dependency to get the application's relay orchestrator."""
    return request.app.state.relay


async def _start_relay(
    relay: RelayOrchestrator,
    headers: Mapping[str, str],
    body: bytes,
    received_at: datetime
) -> None:
    # Runs after the acknowledgment is sent; the relay task outlives the request
    relay.dispatch(headers, body, received_at)


@router.post("/stubhub", response_model=WebhookAckResponse)
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    relay: RelayOrchestrator = Depends(get_relay)
) -> WebhookAckResponse:
    """
    Receive a webhook delivery.

    Responds 200 as soon as the body has been read, whatever happens
    downstream. Forwarding to the primary and distribution start once
    the response has been written.

    Example:
        POST /api/webhooks/stubhub
        vgg-topic: order.created
        vgg-deliveryid: abc-123

        {"x": 1}

        Response (200):
        {"received": true, "deliveryId": "abc-123"}
    """
    body = await request.body()
    received_at = datetime.now(timezone.utc)
    headers = flatten_headers(request.headers.items())
    delivery_id, topic = extract_identity(headers)

    logger.info(
        "Webhook received",
        topic=topic,
        delivery_id=delivery_id,
        size=len(body),
        received_at=received_at.isoformat()
    )

    background_tasks.add_task(_start_relay, relay, headers, body, received_at)

    return WebhookAckResponse(delivery_id=delivery_id)
