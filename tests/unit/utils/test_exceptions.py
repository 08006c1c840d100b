"""
Module: test_exceptions.py
Description: Unit tests for the caller-facing error taxonomy.
"""

import pytest

from webhook_relay.utils.exceptions import (
    AuthError,
    MalformedRequestError,
    NotFoundError,
    RelayException,
)


class TestRelayExceptions:
    """Test cases for status codes and defaults."""

    @pytest.mark.parametrize("exc,status_code,error_code", [
        (MalformedRequestError("bad body"), 400, "MALFORMED_REQUEST"),
        (AuthError(), 401, "UNAUTHORIZED"),
        (NotFoundError(), 404, "NOT_FOUND"),
    ])
    def test_status_codes(self, exc, status_code, error_code):
        assert isinstance(exc, RelayException)
        assert exc.status_code == status_code
        assert exc.error_code == error_code

    def test_not_found_default_message(self):
        exc = NotFoundError()

        assert exc.message == "Not found"
        assert exc.to_dict() == {
            "error_code": "NOT_FOUND",
            "message": "Not found",
            "details": {},
        }

    def test_malformed_request_details(self):
        exc = MalformedRequestError("bad body", details={"field": "url"})

        assert exc.to_dict()["details"] == {"field": "url"}
