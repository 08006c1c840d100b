"""
Custom Exception Classes

Errors that are surfaced directly to the caller as HTTP responses.
Forwarding errors are never raised this way; they become outcomes.
"""

from typing import Any, Dict, Optional


class RelayException(Exception):
    """Base exception for errors answered with an HTTP error response"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "RELAY_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class MalformedRequestError(RelayException):
    """Request body could not be parsed or validated"""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="MALFORMED_REQUEST", details=details)


class AuthError(RelayException):
    """Poll secret missing or mismatched"""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, error_code="UNAUTHORIZED")


class NotFoundError(RelayException):
    """No route matches the request"""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message, error_code="NOT_FOUND")
