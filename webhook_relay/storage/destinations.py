"""
Module: destinations.py
Description: Registry of secondary destinations for fan-out.

Holds a set of distinct URLs in registration order. Registration is
driven by an operator at runtime and is lost on restart.
"""

import threading
from typing import Iterable, List, Optional

from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)


class DestinationRegistry:
    """Ordered set of secondary destination URLs."""

    def __init__(self, initial: Optional[Iterable[str]] = None):
        self._urls: List[str] = []
        self._lock = threading.Lock()
        for url in initial or ():
            self.add(url)

    def add(self, url: str) -> bool:
        """
        Register a destination.

        Args:
            url: Destination URL

        Returns:
            True if added, False if it was already registered
        """
        with self._lock:
            if url in self._urls:
                return False
            self._urls.append(url)

        logger.info("Secondary destination registered", url=url)
        return True

    def remove(self, url: str) -> bool:
        """
        Unregister a destination. Unknown URLs are ignored.

        Returns:
            True if something was removed
        """
        with self._lock:
            before = len(self._urls)
            self._urls = [existing for existing in self._urls if existing != url]
            removed = len(self._urls) != before

        if removed:
            logger.info("Secondary destination removed", url=url)
        return removed

    def snapshot(self) -> List[str]:
        """Return a copy of the registered URLs in registration order."""
        with self._lock:
            return list(self._urls)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
