"""
Module: outcome.py
Description: Result of a single forwarding attempt.
"""

from typing import Optional

from pydantic import BaseModel, Field

TIMEOUT_REASON = "timeout"


class ForwardOutcome(BaseModel):
    """
    Outcome of one POST to one destination.

    A success carries the destination's status code, whatever it was;
    a failure carries the reason (a network error message or "timeout").
    """

    destination: str = Field(..., description="Destination URL")
    label: str = Field(..., description="Observability tag, e.g. primary")
    success: bool = Field(..., description="Whether a response was received")
    status_code: Optional[int] = Field(default=None, description="Response status code")
    error: Optional[str] = Field(default=None, description="Failure reason")

    @classmethod
    def succeeded(cls, destination: str, label: str, status_code: int) -> "ForwardOutcome":
        return cls(destination=destination, label=label, success=True, status_code=status_code)

    @classmethod
    def failed(cls, destination: str, label: str, reason: str) -> "ForwardOutcome":
        return cls(destination=destination, label=label, success=False, error=reason)

    @property
    def timed_out(self) -> bool:
        return not self.success and self.error == TIMEOUT_REASON
