"""
Module: fanout.py
Description: Secondary destination registration for fan-out mode.

- POST /dev/register: Add or remove a secondary destination
- GET /dev/list: List registered destinations in registration order
"""

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from webhook_relay.models.request import ACTION_ADD, ACTION_REMOVE, RegisterEndpointRequest
from webhook_relay.models.response import EndpointListResponse, RegisterEndpointResponse
from webhook_relay.storage.destinations import DestinationRegistry
from webhook_relay.utils.exceptions import MalformedRequestError
from webhook_relay.utils.logger import get_logger

router = APIRouter(prefix="/dev", tags=["dev"])
logger = get_logger(__name__)


def get_registry(request: Request) -> DestinationRegistry:
    """Dependency to get the secondary destination registry."""
    return request.app.state.registry


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request body")
    return f"{location}: {message}" if location else message


@router.post("/register", response_model=RegisterEndpointResponse)
async def register_endpoint(
    request: Request,
    registry: DestinationRegistry = Depends(get_registry)
) -> RegisterEndpointResponse:
    """
    Add or remove a secondary destination.

    Adding a registered URL and removing an unknown one are both
    no-ops. Any other action leaves the registry unchanged.

    Raises:
        MalformedRequestError: 400 if the body is not valid JSON or
            lacks a valid url/action

    Example:
        POST /dev/register
        {"url": "https://dev.example.com/hook", "action": "add"}

        Response (200):
        {"success": true, "endpoints": ["https://dev.example.com/hook"]}
    """
    raw = await request.body()
    try:
        registration = RegisterEndpointRequest.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Rejected registration request", error=_validation_message(e))
        raise MalformedRequestError(_validation_message(e))

    if registration.action == ACTION_ADD:
        registry.add(registration.url)
    elif registration.action == ACTION_REMOVE:
        registry.remove(registration.url)
    else:
        logger.info(
            "Ignored registration with unknown action",
            action=registration.action,
            url=registration.url
        )

    return RegisterEndpointResponse(endpoints=registry.snapshot())


@router.get("/list", response_model=EndpointListResponse)
async def list_endpoints(
    registry: DestinationRegistry = Depends(get_registry)
) -> EndpointListResponse:
    """List registered secondary destinations."""
    return EndpointListResponse(endpoints=registry.snapshot())
