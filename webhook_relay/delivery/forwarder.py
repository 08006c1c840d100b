"""
Module: forwarder.py
Description: Forward a delivery to one destination over HTTP.

Implements a single POST attempt with a bounded timeout. Every failure
mode is reduced to a ForwardOutcome; nothing is raised to the caller
and nothing is retried.
"""

import asyncio
from typing import Mapping

import httpx

from webhook_relay.models.delivery import Delivery
from webhook_relay.models.outcome import TIMEOUT_REASON, ForwardOutcome
from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class Forwarder:
    """
    HTTP client for relaying deliveries.

    Sends the raw body with the delivery's headers, re-framed for the
    destination: Host is the destination's host and Content-Length is
    the exact body length.
    """

    def __init__(self, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        """
        Initialize forwarder.

        Args:
            timeout_seconds: Upper bound for one attempt, in seconds

        Raises:
            ValueError: If timeout_seconds is not positive
        """
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self.timeout_seconds = timeout_seconds
        self.timeout = httpx.Timeout(timeout_seconds, connect=timeout_seconds)

    @staticmethod
    def build_headers(url: httpx.URL, headers: Mapping[str, str], body: bytes) -> httpx.Headers:
        """
        Build outbound headers for ``url``.

        Args:
            url: Destination URL
            headers: Sanitized delivery headers
            body: Raw payload

        Returns:
            Headers with host and content-length overridden
        """
        outbound = httpx.Headers(dict(headers))
        # Body is sent with an exact length, never chunked
        outbound.pop("transfer-encoding", None)
        outbound["host"] = url.netloc.decode("ascii")
        outbound["content-length"] = str(len(body))
        return outbound

    async def forward(
        self,
        destination_url: str,
        headers: Mapping[str, str],
        body: bytes,
        label: str
    ) -> ForwardOutcome:
        """
        POST ``body`` to ``destination_url``.

        Args:
            destination_url: Absolute http(s) URL
            headers: Sanitized headers to send
            body: Raw payload
            label: Observability tag (e.g. "primary", "secondary")

        Returns:
            Success with the response status code, or failure with the
            error message ("timeout" when the attempt ran out of time)
        """
        try:
            url = httpx.URL(destination_url)
            if url.scheme not in ("http", "https") or not url.host:
                raise ValueError(f"not an absolute http(s) URL: {destination_url}")
            outbound = self.build_headers(url, headers, body)
        except (ValueError, httpx.InvalidURL, TypeError) as e:
            logger.warning(
                "Forward skipped, invalid destination",
                destination=destination_url,
                label=label,
                error=str(e)
            )
            return ForwardOutcome.failed(destination_url, label, f"invalid destination: {e}")

        try:
            status_code = await asyncio.wait_for(
                self._post(url, outbound, body),
                timeout=self.timeout_seconds
            )

        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.warning(
                "Forward timeout",
                destination=destination_url,
                label=label,
                timeout_seconds=self.timeout_seconds
            )
            return ForwardOutcome.failed(destination_url, label, TIMEOUT_REASON)

        except httpx.HTTPError as e:
            logger.warning(
                "Forward network error",
                destination=destination_url,
                label=label,
                error=str(e),
                error_type=type(e).__name__
            )
            return ForwardOutcome.failed(destination_url, label, str(e) or type(e).__name__)

        except Exception as e:
            logger.error(
                "Forward failed",
                destination=destination_url,
                label=label,
                error=str(e),
                error_type=type(e).__name__
            )
            return ForwardOutcome.failed(destination_url, label, str(e) or type(e).__name__)

        logger.info(
            "Forwarded delivery",
            destination=destination_url,
            label=label,
            status_code=status_code
        )
        return ForwardOutcome.succeeded(destination_url, label, status_code)

    async def forward_delivery(self, delivery: Delivery, destination_url: str, label: str) -> ForwardOutcome:
        """Forward a Delivery's headers and body to one destination."""
        return await self.forward(destination_url, delivery.headers, delivery.body, label)

    async def _post(self, url: httpx.URL, headers: httpx.Headers, body: bytes) -> int:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            # The response body is read in full and discarded
            response = await client.post(url, content=body, headers=headers)
            return response.status_code
