"""Tracing helpers built on the OpenTelemetry API.

Provider and exporter setup belong to the embedding application; without
one, every span here is a no-op.
"""

from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode


def get_tracer(name: str):
    """Get a tracer instance."""
    return trace.get_tracer(name)



@contextmanager
def trace_operation(operation_name: str, **attributes):
    """Context manager to trace an operation."""
    tracer = get_tracer("gatekeeper")
    with tracer.start_as_current_span(
        operation_name,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        for key, value in attributes.items():
            span.set_attribute(key, value)

        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(exc).__name__)
            raise
