"""
Module: auth
Description: Package initialization for authentication.

- poll_token: Shared-secret bearer check for the poll endpoint
"""

from .poll_token import extract_bearer_token, verify_poll_token

__all__ = ["extract_bearer_token", "verify_poll_token"]
