"""
Structured logging configuration for Gatekeeper.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Dict, Optional
from contextvars import ContextVar, Token

from opentelemetry import trace

from .config import get_settings

# Library loggers stay silent until the application configures logging
logging.getLogger("gatekeeper").addHandler(logging.NullHandler())

# Context variables for correlation IDs
invocation_id_var: ContextVar[Optional[str]] = ContextVar('invocation_id', default=None)
rule_var: ContextVar[Optional[str]] = ContextVar('rule', default=None)


def configure_logging(service_name: str = "gatekeeper", log_level: Optional[str] = None,
                      json_logs: Optional[bool] = None) -> None:
    """Configure structured logging for an application embedding Gatekeeper.

    ``log_level`` and ``json_logs`` default to the ``GATEKEEPER_LOG_LEVEL``
    and ``GATEKEEPER_LOG_JSON`` settings.
    """
    settings = get_settings()
    if log_level is None:
        log_level = settings.log_level
    if json_logs is None:
        json_logs = settings.log_json

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _service_context(service_name, settings.env),
            add_trace_context,
            add_correlation_context,
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def _service_context(service_name: str, env: str):
    def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("env", env)
        return event_dict
    return add_service_context


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add trace context to log events."""
    current_span = trace.get_current_span()
    if current_span and current_span.is_recording():
        span_context = current_span.get_span_context()
        if span_context.trace_id != 0:
            event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        if span_context.span_id != 0:
            event_dict["span_id"] = f"{span_context.span_id:016x}"

    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add invocation and rule correlation to log events."""
    invocation_id = invocation_id_var.get()
    if invocation_id:
        event_dict.setdefault("invocation_id", invocation_id)

    rule = rule_var.get()
    if rule:
        event_dict.setdefault("rule", rule)

    return event_dict


def set_invocation_id(invocation_id: Optional[str] = None) -> Token:
    """Set the invocation ID in context and return the reset token."""
    if invocation_id is None:
        invocation_id = uuid.uuid4().hex
    return invocation_id_var.set(invocation_id)


def reset_invocation_id(token: Token) -> None:
    invocation_id_var.reset(token)


def bind_rule(name: str) -> Token:
    """Mark ``name`` as the rule currently executing in this task."""
    return rule_var.set(name)


def reset_rule(token: Token) -> None:
    rule_var.reset(token)


def clear_context() -> None:
    """Clear all context variables."""
    invocation_id_var.set(None)
    rule_var.set(None)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger backed by the stdlib logger ``name``.

    Events go through stdlib logging, so nothing is printed until the
    application adds handlers (see ``configure_logging``).
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
