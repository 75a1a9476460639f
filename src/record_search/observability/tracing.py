"""OpenTelemetry tracing for search calls, with trace ids shared with log records."""

from __future__ import annotations

from contextlib import contextmanager, nullcontext
from contextvars import ContextVar
import logging
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import SpanKind, Status, StatusCode


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

_tracer_holder: dict[str, Tracer | None] = {"tracer": None}

# Correlates log lines with the active span
trace_context: ContextVar[dict | None] = ContextVar("record_search_trace_context", default=None)


def get_trace_context() -> dict:
    """Get current trace context, generating ids when none is active."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": uuid4().hex, "span_id": uuid4().hex[:16]}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def init_tracing(
    service_name: str = "record-search",
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider:
    """Initialize an OpenTelemetry tracer provider for this process."""
    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    provider = TracerProvider(resource=Resource.create(attributes))
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = trace.get_tracer(__name__)
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def get_tracer() -> Tracer:
    """Get the configured tracer, falling back to the global provider."""
    if _tracer_holder["tracer"] is None:
        _tracer_holder["tracer"] = trace.get_tracer(__name__)
    return _tracer_holder["tracer"]  # type: ignore[return-value]


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a traced span and expose its ids to the logging context."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=kind) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        span_ctx = span.get_span_context()
        if span_ctx.is_valid:
            set_trace_context(format(span_ctx.trace_id, "032x"), format(span_ctx.span_id, "016x"))

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise


def maybe_span(enabled: bool, name: str, attributes: dict[str, Any] | None = None):
    """Return create_span(...) when enabled, otherwise a no-op context manager."""
    if enabled:
        return create_span(name, attributes=attributes)
    return nullcontext()
