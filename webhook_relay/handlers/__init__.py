"""
Module: handlers
Description: Package initialization for API endpoint handlers.

This package contains FastAPI route handlers for the relay:
- webhooks: Upstream webhook receiver
- fanout: Secondary destination registration (fan-out mode)
- retention: Poll and queue status (retention mode)

Handlers read shared components from ``request.app.state`` through
dependency functions, so tests can swap them per application.
"""

__all__ = []
