"""
Package: webhook_relay
Description: Webhook relay service.

Receives webhook deliveries from a single upstream source, acknowledges
them immediately, and relays them to a primary consumer plus either a
set of registered secondary consumers (fan-out) or an in-memory
retention queue drained by polling (retention).
"""

__version__ = "1.0.0"
