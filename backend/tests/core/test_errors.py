"""Error hierarchy — codes, HTTP statuses, and the REST error shape.

Tests:
    - Every upstream error is an UpstreamError and an EmployeeApiError
    - UpstreamHttpError keeps status and raw body; body not in the message
    - UpstreamUnavailable keeps the last error
    - to_response() exposes code, category, severity, context
"""

import pytest

from employee_api.core.domain_types import ResponseStatus
from employee_api.core.errors import (
    EmployeeApiError,
    ErrorCategory,
    ErrorContext,
    ResourceNotFoundError,
    UpstreamConnectionError,
    UpstreamDecodeError,
    UpstreamError,
    UpstreamHttpError,
    UpstreamLogicalError,
    UpstreamTimeoutError,
    UpstreamUnavailable,
)
from employee_api.schemas.envelope import Envelope


def _error_envelope(message: str) -> Envelope:
    return Envelope(status=ResponseStatus.ERROR, error=message)


@pytest.mark.parametrize("error,code,status", [
    (UpstreamHttpError(500, "body"), "UPSTREAM_HTTP_ERROR", 502),
    (UpstreamLogicalError(_error_envelope("x")), "UPSTREAM_LOGICAL_ERROR", 502),
    (UpstreamDecodeError("bad", "body"), "UPSTREAM_DECODE_ERROR", 502),
    (UpstreamUnavailable(6, UpstreamHttpError(429, "")), "UPSTREAM_UNAVAILABLE", 503),
    (UpstreamConnectionError("refused"), "UPSTREAM_CONNECTION_ERROR", 503),
    (UpstreamTimeoutError("ReadTimeout"), "UPSTREAM_TIMEOUT", 504),
])
def test_upstream_errors_codes_and_statuses(error, code, status):
    assert isinstance(error, UpstreamError)
    assert isinstance(error, EmployeeApiError)
    assert error.code == code
    assert error.http_status == status


def test_http_error_keeps_body_out_of_message():
    error = UpstreamHttpError(500, "secret stack trace")
    assert error.body == "secret stack trace"
    assert error.status_code == 500
    assert error.context.status_code == 500
    assert "secret" not in error.message


def test_logical_error_message_includes_upstream_detail():
    error = UpstreamLogicalError(_error_envelope("duplicate name"))
    assert "duplicate name" in error.message
    assert error.envelope.error == "duplicate name"


def test_unavailable_keeps_last_error():
    last = UpstreamHttpError(429, "slow down")
    error = UpstreamUnavailable(6, last)
    assert error.last_error is last
    assert error.attempts == 6


def test_timeout_category():
    assert UpstreamTimeoutError("deadline").category == ErrorCategory.TIMEOUT


def test_not_found_to_response_shape():
    error = ResourceNotFoundError(
        "Employee", "u1", ErrorContext(operation="get_by_id", employee_id="u1"),
    )

    body = error.to_response()["error"]

    assert error.http_status == 404
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["message"] == "Employee 'u1' not found"
    assert body["category"] == "resource_not_found"
    assert body["context"]["employee_id"] == "u1"
    assert body["context"]["operation"] == "get_by_id"
