"""
Module: request.py
Description: API request models for the webhook relay.

Key Components:
- RegisterEndpointRequest: Body of POST /dev/register

Dependencies: pydantic
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ACTION_ADD = "add"
ACTION_REMOVE = "remove"


class RegisterEndpointRequest(BaseModel):
    """
    Request model for registering or unregistering a secondary destination.

    Attributes:
        url: Absolute HTTP(S) URL of the secondary destination
        action: "add" or "remove"; anything else, or none, leaves the set unchanged
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    url: str = Field(..., min_length=1, description="Secondary destination URL")
    action: Optional[str] = Field(None, description="add or remove")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the destination is an absolute HTTP(S) URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("url must be a valid HTTP/HTTPS URL")
        return v
