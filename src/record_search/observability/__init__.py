"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from record_search.observability.logging import JsonFormatter, configure_logging
from record_search.observability.metrics import (
    RECORDS_SCANNED,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    track_latency,
)
from record_search.observability.tracing import (
    create_span,
    get_trace_context,
    get_tracer,
    init_tracing,
    maybe_span,
    set_trace_context,
)


__all__ = [
    "RECORDS_SCANNED",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "maybe_span",
    "set_trace_context",
    "track_latency",
]
