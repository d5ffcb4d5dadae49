# src/apidrift/tracing.py

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    SimpleSpanProcessor,
    ConsoleSpanExporter,
)

from apidrift.config import get_settings


def configure_tracing(service_name: str | None = None) -> None:
    """
    Configure OpenTelemetry tracing with a console exporter.

    Spans are printed to stdout; swap ConsoleSpanExporter for an OTLP
    exporter to ship them elsewhere without changing callers.
    """
    settings = get_settings()
    if not settings.tracing_enabled:
        return

    # If there's already a provider, don't reconfigure
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return

    provider = TracerProvider(
        resource=Resource.create({"service.name": service_name or settings.service_name})
    )
    # SimpleSpanProcessor exports synchronously. BatchSpanProcessor's worker
    # thread can write to stdout after pytest has closed its capture file.
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
