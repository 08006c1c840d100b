"""
Module: cors.py
Description: Permissive cross-origin headers on every response.

Unlike Starlette's CORSMiddleware, which only answers requests that
carry an Origin header, this adds the headers unconditionally and
answers every OPTIONS request with an empty 200. Unexpected errors
are rendered here through ``error_handler`` so that 500 responses
carry the headers too.
"""

from typing import Awaitable, Callable, Dict, Iterable, Optional

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

ErrorHandler = Callable[[Request, Exception], Awaitable[Response]]


class PermissiveCORSMiddleware:
    """ASGI middleware adding Access-Control-Allow-* headers."""

    def __init__(
        self,
        app: ASGIApp,
        allow_methods: Iterable[str] = ("GET", "POST", "DELETE", "OPTIONS"),
        allow_headers: Iterable[str] = ("Content-Type",),
        error_handler: Optional[ErrorHandler] = None
    ):
        self.app = app
        self.error_handler = error_handler
        self.cors_headers: Dict[str, str] = {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": ", ".join(allow_methods),
            "Access-Control-Allow-Headers": ", ".join(allow_headers),
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=200, headers=self.cors_headers)
            await response(scope, receive, send)
            return

        response_started = False

        async def send_with_cors(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = MutableHeaders(scope=message)
                headers.update(self.cors_headers)
            await send(message)

        try:
            await self.app(scope, receive, send_with_cors)
        except Exception as exc:
            if response_started or self.error_handler is None:
                raise
            response = await self.error_handler(Request(scope), exc)
            await response(scope, receive, send_with_cors)
