"""
Unit tests for Gatekeeper error types.
"""

import pytest
from opentelemetry.sdk.trace import TracerProvider

from gatekeeper.errors import (
    ErrorResponse,
    GatekeeperError,
    GatekeeperUnauthorizedError,
    RuleConfigurationError,
    as_exception,
)


class TestGatekeeperUnauthorizedError:
    """Test cases for GatekeeperUnauthorizedError."""

    def test_preserves_reason_identity(self):
        """Test the original exception is attached unchanged."""
        reason = ValueError("x")

        error = GatekeeperUnauthorizedError("UNAUTHORIZED", reason, "a")

        assert error.reason is reason
        assert error.rule == "a"
        assert error.message == "UNAUTHORIZED"
        assert str(error) == "UNAUTHORIZED"

    def test_coerces_non_exception_reason(self):
        """Test a non-exception reason is wrapped into an exception."""
        error = GatekeeperUnauthorizedError("UNAUTHORIZED", "plain string", "a")

        assert isinstance(error.reason, Exception)
        assert str(error.reason) == "plain string"

    def test_is_gatekeeper_error(self):
        """Test the failure type is catchable through the base class."""
        error = GatekeeperUnauthorizedError("UNAUTHORIZED", ValueError("x"), "a")

        assert isinstance(error, GatekeeperError)
        assert error.code == "UNAUTHORIZED"

    def test_details(self):
        """Test details describe the failing rule and reason."""
        error = GatekeeperUnauthorizedError("UNAUTHORIZED", ValueError("x"), "a")

        assert error.details == {"rule": "a", "reason": "x", "reason_type": "ValueError"}

    def test_repr(self):
        """Test repr names the rule and reason."""
        error = GatekeeperUnauthorizedError("UNAUTHORIZED", ValueError("x"), "a")

        assert repr(error) == "GatekeeperUnauthorizedError(rule='a', reason=ValueError('x'))"


class TestErrorResponse:
    """Test cases for error responses."""

    def test_to_response_without_span(self):
        """Test responses outside of a span have no trace id."""
        response = RuleConfigurationError("Duplicate rule names: a", {"duplicates": ["a"]}).to_response()

        assert isinstance(response, ErrorResponse)
        assert response.trace_id is None
        assert response.code == "RULE_CONFIGURATION_ERROR"
        assert response.details == {"duplicates": ["a"]}

    def test_to_response_with_recording_span(self):
        """Test the trace id of the current span is included."""
        tracer = TracerProvider().get_tracer(__name__)
        error = GatekeeperUnauthorizedError("UNAUTHORIZED", ValueError("x"), "a")

        with tracer.start_as_current_span("request") as span:
            response = error.to_response()
            expected = f"{span.get_span_context().trace_id:032x}"

        assert response.trace_id == expected
        assert response.details["rule"] == "a"


@pytest.mark.parametrize("value, expected", [
    ("text", "text"),
    (42, "42"),
    (None, "None"),
])
def test_as_exception_wraps_values(value, expected):
    """Test non-exception values become exceptions carrying their text."""
    result = as_exception(value)

    assert isinstance(result, Exception)
    assert str(result) == expected


def test_as_exception_keeps_exceptions():
    """Test exceptions are returned unchanged."""
    error = KeyError("k")

    assert as_exception(error) is error
