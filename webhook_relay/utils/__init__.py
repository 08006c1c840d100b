"""
Module: utils
Description: Package initialization for utility functions.

This package contains shared helpers used throughout the relay:
- logger: Structured logging configuration and helpers
- headers: Header flattening and sanitization
- exceptions: Errors surfaced as HTTP responses
"""

__all__ = []
