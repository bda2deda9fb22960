"""
OpenTelemetry integration: one span per send_email invocation.

Spans carry the tracking id and outcome, never message content or
credentials. Console export is opt-in (OTEL_CONSOLE_EXPORT=true).
"""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from app.config import settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "mailrelay"

# Span attribute keys
TRACKING_ID_KEY = "email.tracking_id"
STATUS_KEY = "email.status"
FAILURE_KIND_KEY = "email.failure_kind"

_tracer: Optional[trace.Tracer] = None


def init_telemetry() -> trace.Tracer:
    """Initialize OTel tracer provider. Call once at startup."""
    global _tracer
    provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    if settings.otel_console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer("mailrelay.email")
    logger.info("OpenTelemetry initialized (console export=%s)", settings.otel_console_export)
    return _tracer


def get_tracer() -> trace.Tracer:
    if _tracer is None:
        return trace.get_tracer("mailrelay.email")
    return _tracer
