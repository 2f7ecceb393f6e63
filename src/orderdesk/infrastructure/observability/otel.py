from __future__ import annotations

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

_tracer_provider: TracerProvider | None = None
logger = logging.getLogger(__name__)


def _span_processor() -> SpanProcessor | None:
    if os.getenv("OTEL_TRACES_EXPORTER", "").lower() == "console":
        return SimpleSpanProcessor(ConsoleSpanExporter())

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        return None
    try:
        exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    except Exception:
        logger.exception("otel_exporter_setup_failed", extra={"path": endpoint})
        return None
    return BatchSpanProcessor(exporter)


def configure_tracing() -> TracerProvider:
    """Install the POS tracer provider once.

    Spans go to the OTLP collector at ``OTEL_EXPORTER_OTLP_ENDPOINT``, or to stdout
    with ``OTEL_TRACES_EXPORTER=console``; with neither set they are only used for
    the trace ids in log lines and the ``traceparent`` header on backend calls.
    """
    global _tracer_provider
    if _tracer_provider is not None:
        return _tracer_provider

    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: os.getenv("OTEL_SERVICE_NAME", "orderdesk-pos")})
    )
    processor = _span_processor()
    if processor is not None:
        provider.add_span_processor(processor)

    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    _tracer_provider = provider
    return provider
