"""
Module: retention_queue.py
Description: Bounded, time-expiring queue of deliveries awaiting a poll.

Deliveries are held oldest-first. Expiry is lazy: every access sweeps
out entries older than the TTL before doing anything else. When the
queue is full the oldest entry is evicted to make room, so appends
never fail.

Key Components:
- RetentionQueue: append(), drain_all(), size(), expire_sweep()
- Injectable clock so expiry can be tested without sleeping

Dependencies: threading, collections, datetime
Author: Webhook Relay Team
"""

import threading
from collections import deque
from datetime import datetime, timedelta, timezone
from typing import Callable, Deque, List, Optional

from webhook_relay.models.delivery import Delivery
from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RetentionQueue:
    """
    FIFO buffer of deliveries with capacity and TTL bounds.

    All public operations take the same lock, so append, eviction and
    drain never interleave.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl: timedelta = DEFAULT_TTL,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize an empty retention queue.

        Args:
            max_size: Maximum number of retained deliveries
            ttl: Age at which a delivery expires
            clock: Returns the current time (UTC); defaults to the wall clock

        Raises:
            ValueError: If max_size or ttl is not positive
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")

        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock or _utcnow
        self._entries: Deque[Delivery] = deque()
        self._lock = threading.Lock()

    @property
    def ttl_minutes(self) -> float:
        return self.ttl.total_seconds() / 60

    def _sweep(self) -> int:
        # Appends can land out of received_at order, so check every entry
        now = self._clock()
        live = deque(d for d in self._entries if not d.is_expired(now, self.ttl))
        removed = len(self._entries) - len(live)
        if removed:
            self._entries = live
            logger.debug("Expired retained deliveries", removed=removed)
        return removed

    def expire_sweep(self) -> int:
        """
        Remove every delivery whose age is at least the TTL.

        Returns:
            Number of deliveries removed
        """
        with self._lock:
            return self._sweep()

    def append(self, delivery: Delivery) -> None:
        """
        Add a delivery at the newest end, evicting the oldest if full.

        Args:
            delivery: Delivery to retain
        """
        with self._lock:
            self._sweep()
            if len(self._entries) >= self.max_size:
                evicted = self._entries.popleft()
                logger.debug(
                    "Evicted oldest retained delivery",
                    evicted_delivery_id=evicted.delivery_id,
                    max_size=self.max_size
                )
            self._entries.append(delivery)

    def drain_all(self) -> List[Delivery]:
        """
        Return every live delivery, oldest first, and empty the queue.

        Returns:
            Snapshot of the drained deliveries
        """
        with self._lock:
            self._sweep()
            drained = list(self._entries)
            self._entries.clear()
            return drained

    def size(self) -> int:
        """Return the number of live deliveries."""
        with self._lock:
            self._sweep()
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()
