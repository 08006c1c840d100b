"""
Module: strategies.py
Description: What happens to a delivery after the primary forward.

Two strategies are supported and one is selected at startup:

- FanOutStrategy: forward to every registered secondary destination,
  one after another in registration order
- RetentionPollStrategy: keep the delivery in the retention queue
  until a consumer polls for it

Key Components:
- DistributionStrategy: Common interface used by the orchestrator
- build_strategy(): Strategy selection from settings

Dependencies: abc, typing
Author: Webhook Relay Team
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List

from webhook_relay.config.settings import DistributionMode, Settings
from webhook_relay.delivery.forwarder import Forwarder
from webhook_relay.models.delivery import Delivery
from webhook_relay.models.outcome import ForwardOutcome
from webhook_relay.storage.destinations import DestinationRegistry
from webhook_relay.storage.retention_queue import RetentionQueue
from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)

SECONDARY_LABEL = "secondary"


class DistributionStrategy(ABC):
    """Distribution applied to every delivery after the primary forward."""

    mode: DistributionMode

    @abstractmethod
    async def distribute(self, delivery: Delivery, forwarder: Forwarder) -> List[ForwardOutcome]:
        """
        Distribute one delivery.

        Args:
            delivery: Delivery already forwarded to the primary
            forwarder: Forwarder to use for any outbound attempts

        Returns:
            Outcomes of the outbound attempts made (may be empty)
        """

    @abstractmethod
    def health_fields(self) -> Dict[str, Any]:
        """Mode-specific fields for the health snapshot."""


class FanOutStrategy(DistributionStrategy):
    """Forward to every registered secondary destination."""

    mode = DistributionMode.FANOUT

    def __init__(self, registry: DestinationRegistry):
        self.registry = registry

    async def distribute(self, delivery: Delivery, forwarder: Forwarder) -> List[ForwardOutcome]:
        destinations = self.registry.snapshot()
        if not destinations:
            return []

        logger.info("Forwarding to secondary destinations", count=len(destinations))

        outcomes = []
        for url in destinations:
            try:
                outcome = await forwarder.forward_delivery(delivery, url, SECONDARY_LABEL)
            except Exception as e:
                # One destination never stops the rest
                logger.error(
                    "Secondary forward raised",
                    destination=url,
                    error=str(e),
                    error_type=type(e).__name__
                )
                outcome = ForwardOutcome.failed(url, SECONDARY_LABEL, str(e) or type(e).__name__)
            outcomes.append(outcome)
        return outcomes

    def health_fields(self) -> Dict[str, Any]:
        return {"dev_endpoints": len(self.registry)}


class RetentionPollStrategy(DistributionStrategy):
    """Retain the delivery for pull-based retrieval."""

    mode = DistributionMode.RETENTION

    def __init__(self, queue: RetentionQueue):
        self.queue = queue

    async def distribute(self, delivery: Delivery, forwarder: Forwarder) -> List[ForwardOutcome]:
        self.queue.append(delivery)
        logger.info(
            "Delivery retained for polling",
            queue_size=self.queue.size(),
            max_size=self.queue.max_size
        )
        return []

    def health_fields(self) -> Dict[str, Any]:
        return {"queue_size": self.queue.size()}


def build_strategy(settings: Settings) -> DistributionStrategy:
    """
    Create the strategy selected by ``settings.distribution_mode``.

    Args:
        settings: Relay settings

    Returns:
        Strategy owning a fresh registry or retention queue
    """
    if settings.distribution_mode == DistributionMode.RETENTION:
        queue = RetentionQueue(
            max_size=settings.retention_max_size,
            ttl=timedelta(seconds=settings.retention_ttl_seconds)
        )
        return RetentionPollStrategy(queue)

    return FanOutStrategy(DestinationRegistry(settings.initial_secondaries))
