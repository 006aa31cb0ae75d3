"""
Error types for the Gatekeeper authorization pipeline.
"""

from typing import Dict, Any, Optional

from opentelemetry import trace
from pydantic import BaseModel, Field


UNAUTHORIZED_MESSAGE = "UNAUTHORIZED"
FALLBACK_RULE = "failcheck"


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class GatekeeperError(Exception):
    """Base exception for Gatekeeper."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


def as_exception(value: Any) -> BaseException:
    """Return ``value`` unchanged if it is an exception, else wrap its text."""
    if isinstance(value, BaseException):
        return value
    return Exception(str(value))


class GatekeeperUnauthorizedError(GatekeeperError):
    """Raised when a rule fails during an invocation.

    ``rule`` names the rule that was executing and ``reason`` holds the
    exception it raised, untouched.
    """

    def __init__(self, message: str, reason: Any, rule: Optional[str] = None):
        self.reason = as_exception(reason)
        self.rule = rule or FALLBACK_RULE
        super().__init__(
            "UNAUTHORIZED",
            message,
            {
                "rule": self.rule,
                "reason": str(self.reason),
                "reason_type": type(self.reason).__name__,
            }
        )

    def __repr__(self) -> str:
        return f"GatekeeperUnauthorizedError(rule={self.rule!r}, reason={self.reason!r})"


class RuleConfigurationError(GatekeeperError):
    """Raised at construction time when a rule set is invalid."""

    def __init__(self, message: str = "Invalid rule configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("RULE_CONFIGURATION_ERROR", message, details)
