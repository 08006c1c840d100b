"""
Module: poll_token.py
Description: Shared-secret bearer authentication for polling consumers.

Polling consumers send "Authorization: Bearer <secret>". The secret is
compared in constant time against the configured poll secret. When no
secret is configured every request is rejected.

Key Components:
- extract_bearer_token(): Token from an Authorization header value
- verify_poll_token(): Constant-time comparison against the secret

Dependencies: secrets, typing
Author: Webhook Relay Team
"""

import secrets
from typing import Optional

from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """
    Extract the token from a Bearer Authorization header.

    Args:
        auth_header: Raw Authorization header value

    Returns:
        Token string if the header is a non-empty Bearer token, None otherwise
    """
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None

    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None


def verify_poll_token(auth_header: Optional[str], poll_secret: Optional[str]) -> bool:
    """
    Check an Authorization header against the poll secret.

    Args:
        auth_header: Raw Authorization header value
        poll_secret: Configured shared secret (None rejects everything)

    Returns:
        True if the header carries the secret as a Bearer token
    """
    if not poll_secret:
        logger.warning("Poll rejected, no poll secret configured")
        return False

    token = extract_bearer_token(auth_header)
    if token is None:
        logger.warning("Poll rejected, missing bearer token")
        return False

    is_valid = secrets.compare_digest(token.encode("utf-8"), poll_secret.encode("utf-8"))
    if not is_valid:
        logger.warning("Poll rejected, bearer token mismatch")
    return is_valid
