"""
Module: storage
Description: In-memory state owned by the relay process.

- retention_queue: Bounded, expiring buffer of deliveries awaiting a poll
- destinations: Registered secondary destinations for fan-out

Nothing here survives a restart.
"""

from .destinations import DestinationRegistry
from .retention_queue import RetentionQueue

__all__ = ["DestinationRegistry", "RetentionQueue"]
