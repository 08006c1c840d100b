"""
Package: config
Description: Process configuration for the webhook relay.
"""

from .settings import DistributionMode, Settings, settings

__all__ = ["DistributionMode", "Settings", "settings"]
