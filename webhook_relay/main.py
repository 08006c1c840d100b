"""
Module: main.py
Description: FastAPI application entry point for the webhook relay.

Builds the application for the configured distribution mode: the
webhook receiver and health routes are always mounted; the fan-out
registration routes or the retention poll routes are mounted
depending on the mode.

Key Components:
- create_app(): Application factory wiring settings, forwarder,
  strategy, and orchestrator into ``app.state``
- Health snapshot on GET /health and GET /
- Error handlers rendering ``{"error": ...}`` bodies
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from webhook_relay.config.settings import Settings, settings as default_settings
from webhook_relay.delivery.forwarder import Forwarder
from webhook_relay.delivery.relay import RelayOrchestrator
from webhook_relay.delivery.strategies import (
    FanOutStrategy,
    RetentionPollStrategy,
    build_strategy,
)
from webhook_relay.handlers import fanout, retention, webhooks
from webhook_relay.models.response import HealthResponse
from webhook_relay.utils.cors import PermissiveCORSMiddleware
from webhook_relay.utils.exceptions import NotFoundError, RelayException
from webhook_relay.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

health_router = APIRouter(tags=["health"])


@health_router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
@health_router.get("/", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    Reports the primary destination and either the number of
    registered secondaries (fan-out) or the retention queue size.
    """
    app_settings: Settings = request.app.state.settings
    relay: RelayOrchestrator = request.app.state.relay

    return HealthResponse(
        service=app_settings.service_name,
        production=app_settings.production_url,
        mode=relay.strategy.mode.value,
        timestamp=datetime.now(timezone.utc),
        **relay.strategy.health_fields()
    )


def _route_summary(app_settings: Settings) -> list:
    routes = [
        "POST /api/webhooks/stubhub (webhook receiver)",
        "GET  /health (health check)",
    ]
    if app_settings.is_retention:
        routes += [
            "GET  /dev/poll (drain retained webhooks, bearer auth)",
            "GET  /dev/status (retention queue status)",
        ]
    else:
        routes += [
            "POST /dev/register (add/remove secondary endpoints)",
            "GET  /dev/list (list secondary endpoints)",
        ]
    return routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.
    Logs the startup banner and waits for in-flight relays on shutdown.
    """
    app_settings: Settings = app.state.settings
    logger.info(
        f"Starting {app_settings.app_name} v{app_settings.app_version}",
        port=app_settings.port,
        production=app_settings.production_url,
        mode=app_settings.distribution_mode.value,
        routes=_route_summary(app_settings)
    )

    yield

    relay: RelayOrchestrator = app.state.relay
    logger.info("Shutting down, waiting for in-flight relays", in_flight=relay.in_flight)
    await relay.join(timeout=app_settings.forward_timeout)
    logger.info("Application shutdown complete")


async def relay_exception_handler(request: Request, exc: RelayException):
    """Render errors surfaced to the caller as ``{"error": message}``."""
    logger.warning(
        "Request rejected",
        status_code=exc.status_code,
        error=exc.to_dict(),
        path=request.url.path,
        method=request.method
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Unmatched routes and methods both answer 404 ``{"error": "Not found"}``.
    """
    if exc.status_code in (404, 405):
        return await relay_exception_handler(request, NotFoundError())

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.
    """
    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    app_settings: Optional[Settings] = None,
    forwarder: Optional[Forwarder] = None
) -> FastAPI:
    """
    Build the relay application.

    Args:
        app_settings: Settings to use (defaults to the environment)
        forwarder: Forwarder to use (defaults to one with the configured timeout)

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or default_settings
    configure_logging(app_settings.log_level)

    forwarder = forwarder or Forwarder(timeout_seconds=app_settings.forward_timeout)
    strategy = build_strategy(app_settings)
    relay = RelayOrchestrator(
        primary_url=app_settings.production_url,
        forwarder=forwarder,
        strategy=strategy
    )

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="Acknowledges upstream webhooks and relays them to downstream consumers",
        lifespan=lifespan
    )
    app.state.settings = app_settings
    app.state.relay = relay

    allow_headers = ["Content-Type"]
    if isinstance(strategy, RetentionPollStrategy):
        if not app_settings.poll_secret:
            logger.warning("Retention mode without POLL_SECRET, every poll will be rejected")
        app.state.queue = strategy.queue
        app.include_router(retention.router)
        allow_headers.append("Authorization")
    elif isinstance(strategy, FanOutStrategy):
        app.state.registry = strategy.registry
        app.include_router(fanout.router)

    app.add_middleware(
        PermissiveCORSMiddleware,
        allow_headers=allow_headers,
        error_handler=general_exception_handler
    )

    app.add_exception_handler(RelayException, relay_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(webhooks.router)
    app.include_router(health_router)

    return app


app = create_app()


def run() -> None:
    """Run the relay with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        app,
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower()
    )


if __name__ == "__main__":
    run()
