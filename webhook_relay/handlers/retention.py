"""
Module: retention.py
Description: Poll endpoints for retention mode.

Allows a consumer to pull retained deliveries, implementing the pull
side of the relay when deliveries are not fanned out.

Key Components:
- poll_webhooks(): Authenticated drain of the retention queue
- queue_status(): Unauthenticated queue size and limits
- require_poll_auth(): Bearer secret check

Dependencies: FastAPI, typing
Author: Webhook Relay Team
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from webhook_relay.auth.poll_token import verify_poll_token
from webhook_relay.models.response import PolledWebhook, PollResponse, QueueStatusResponse
from webhook_relay.storage.retention_queue import RetentionQueue
from webhook_relay.utils.exceptions import AuthError
from webhook_relay.utils.logger import get_logger

router = APIRouter(prefix="/dev", tags=["dev"])
logger = get_logger(__name__)


def get_queue(request: Request) -> RetentionQueue:
    """Dependency to get the retention queue."""
    return request.app.state.queue


def require_poll_auth(
    request: Request,
    authorization: Optional[str] = Header(default=None)
) -> None:
    """
    Reject the request unless it carries the poll secret.

    Raises:
        AuthError: 401 on a missing or mismatched bearer token
    """
    if not verify_poll_token(authorization, request.app.state.settings.poll_secret):
        raise AuthError()


@router.get("/poll", response_model=PollResponse, dependencies=[Depends(require_poll_auth)])
async def poll_webhooks(
    queue: RetentionQueue = Depends(get_queue)
) -> PollResponse:
    """
    Drain every retained delivery.

    Deliveries are returned oldest first and removed from the queue;
    a second poll with nothing new in between returns an empty list.

    Example:
        GET /dev/poll
        Authorization: Bearer <secret>

        Response (200):
        {
            "webhooks": [
                {
                    "id": "abc-123",
                    "topic": "order.created",
                    "headers": {"vgg-topic": "order.created", ...},
                    "body": "{\"x\":1}",
                    "timestamp": "2024-01-15T10:30:01Z"
                }
            ]
        }
    """
    drained = queue.drain_all()

    logger.info("Retention queue drained", count=len(drained))

    return PollResponse(webhooks=[PolledWebhook.from_delivery(d) for d in drained])


@router.get("/status", response_model=QueueStatusResponse)
async def queue_status(
    queue: RetentionQueue = Depends(get_queue)
) -> QueueStatusResponse:
    """Report queue size and limits."""
    return QueueStatusResponse(
        queue_size=queue.size(),
        max_size=queue.max_size,
        ttl_minutes=queue.ttl_minutes
    )
