"""
Module: relay.py
Description: Drives a received delivery from acknowledgment to completion.

The HTTP handler acknowledges the upstream sender first and only then
hands the raw request to the orchestrator. The orchestrator runs each
delivery as an independent asyncio task:

    sanitize headers -> forward to primary -> distribute (fan-out or retain)

A failure at any step is logged and never reaches the request handler.
The primary forward always happens before distribution, and a primary
failure does not stop distribution.

Key Components:
- RelayOrchestrator.dispatch(): Start relaying in the background
- RelayOrchestrator.relay(): The relay steps for one delivery
- RelayOrchestrator.join(): Wait for in-flight deliveries

Dependencies: asyncio, structlog
Author: Webhook Relay Team
"""

import asyncio
from datetime import datetime
from typing import List, Mapping, Optional, Set

import structlog

from webhook_relay.delivery.forwarder import Forwarder
from webhook_relay.delivery.strategies import DistributionStrategy
from webhook_relay.models.delivery import Delivery, extract_identity
from webhook_relay.models.outcome import ForwardOutcome
from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)

PRIMARY_LABEL = "primary"


class RelayOrchestrator:
    """
    Relays deliveries to the primary destination and then applies the
    configured distribution strategy.
    """

    def __init__(
        self,
        primary_url: str,
        forwarder: Forwarder,
        strategy: DistributionStrategy
    ):
        """
        Initialize orchestrator.

        Args:
            primary_url: Destination every delivery is forwarded to first
            forwarder: Forwarder used for all outbound attempts
            strategy: Distribution applied after the primary forward
        """
        self.primary_url = primary_url
        self.forwarder = forwarder
        self.strategy = strategy
        self._tasks: Set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        """Number of deliveries still being relayed."""
        return len(self._tasks)

    def dispatch(
        self,
        headers: Mapping[str, str],
        body: bytes,
        received_at: Optional[datetime] = None
    ) -> asyncio.Task:
        """
        Start relaying a delivery without waiting for it.

        The task is owned by the orchestrator, not the request, so a
        cancelled or closed request does not cancel forwarding.

        Args:
            headers: Flattened inbound headers
            body: Complete inbound body
            received_at: Arrival time

        Returns:
            The background task
        """
        task = asyncio.create_task(self.relay(headers, body, received_at))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def relay(
        self,
        headers: Mapping[str, str],
        body: bytes,
        received_at: Optional[datetime] = None
    ) -> List[ForwardOutcome]:
        """
        Relay one delivery.

        Args:
            headers: Flattened inbound headers
            body: Complete inbound body
            received_at: Arrival time

        Returns:
            Outcomes of every outbound attempt, primary first
        """
        delivery_id, topic = extract_identity(headers)
        with structlog.contextvars.bound_contextvars(delivery_id=delivery_id, topic=topic):
            try:
                delivery = Delivery.from_inbound(headers, body, received_at)
            except Exception as e:
                logger.error(
                    "Could not build delivery, dropping",
                    error=str(e),
                    error_type=type(e).__name__
                )
                return []

            outcomes = [await self._forward_primary(delivery)]

            try:
                outcomes.extend(await self.strategy.distribute(delivery, self.forwarder))
            except Exception as e:
                logger.error(
                    "Distribution failed",
                    mode=self.strategy.mode.value,
                    error=str(e),
                    error_type=type(e).__name__
                )

            logger.info(
                "Relay complete",
                attempts=len(outcomes),
                failures=sum(1 for outcome in outcomes if not outcome.success)
            )
            return outcomes

    async def _forward_primary(self, delivery: Delivery) -> ForwardOutcome:
        logger.info("Forwarding to primary", destination=self.primary_url)
        try:
            return await self.forwarder.forward_delivery(delivery, self.primary_url, PRIMARY_LABEL)
        except Exception as e:
            logger.error(
                "Primary forward raised",
                destination=self.primary_url,
                error=str(e),
                error_type=type(e).__name__
            )
            return ForwardOutcome.failed(self.primary_url, PRIMARY_LABEL, str(e) or type(e).__name__)

    async def join(self, timeout: Optional[float] = None) -> None:
        """
        Wait for every in-flight delivery to finish.

        Args:
            timeout: Give up after this many seconds (None waits forever)
        """
        if not self._tasks:
            return
        pending = list(self._tasks)
        done, not_done = await asyncio.wait(pending, timeout=timeout)
        if not_done:
            logger.warning("Deliveries still in flight", count=len(not_done))
