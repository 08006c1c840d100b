"""
Package: delivery
Description: Forwarding and distribution for the webhook relay.

Provides the HTTP forwarder, the distribution strategies applied after
the primary forward, and the orchestrator that drives a delivery from
acknowledgment to completion.
"""

from .forwarder import Forwarder
from .relay import RelayOrchestrator
from .strategies import DistributionStrategy, FanOutStrategy, RetentionPollStrategy

__all__ = [
    "Forwarder",
    "RelayOrchestrator",
    "DistributionStrategy",
    "FanOutStrategy",
    "RetentionPollStrategy",
]
