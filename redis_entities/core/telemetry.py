"""
OpenTelemetry helpers for store operations.

Only the OpenTelemetry API is used. Exporters and SDK setup belong to the
host application; without them every span here is a no-op.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode


def get_tracer(name: str, version: Optional[str] = None):
    """
    Get tracer instance for manual instrumentation.

    Args:
        name: Instrumentation name (usually the module name)
        version: Instrumentation version
    """
    return trace.get_tracer(name, version)


def add_span_attribute(key: str, value: Any) -> None:
    """
    Add attribute to current span.

    Args:
        key: Attribute key
        value: Attribute value
    """
    span = trace.get_current_span()
    if span and span.is_recording():
        span.set_attribute(key, value)


@contextmanager
def traced_operation(
    tracer, span_name: str, attributes: Optional[Dict[str, Any]] = None
) -> Iterator[Span]:
    """
    Run a store operation inside a span.

    Errors mark the span and propagate unchanged.
    """
    with tracer.start_as_current_span(span_name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise
        else:
            span.set_status(Status(StatusCode.OK))
