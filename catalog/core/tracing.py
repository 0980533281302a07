"""
OpenTelemetry distributed tracing configuration.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from fastapi import FastAPI
from loguru import logger
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio
from opentelemetry.trace import Span, SpanKind

from catalog.core.config import settings
from catalog.db.session import engine

TRACER_NAME = "catalog"


def configure_tracer() -> TracerProvider:
    """
    Configure the global tracer provider.

    Spans go to the console in development and to ``OTLP_ENDPOINT`` when set.

    Returns:
        The configured tracer provider
    """
    resource = Resource.create(
        {
            "service.name": settings.PROJECT_NAME,
            "service.version": settings.VERSION,
            "deployment.environment": settings.ENVIRONMENT,
        }
    )

    tracer_provider = TracerProvider(resource=resource, sampler=ParentBasedTraceIdRatio(settings.TRACE_SAMPLE_RATE))

    if settings.ENVIRONMENT == "development":
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    if settings.OTLP_ENDPOINT:
        tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.OTLP_ENDPOINT)))

    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def setup_tracing(app: FastAPI) -> None:
    """
    Instrument FastAPI and SQLAlchemy when tracing is enabled.

    Health and metrics requests are not traced. Failures are logged and
    leave the application running untraced.

    Args:
        app: The FastAPI application to instrument
    """
    if not settings.ENABLE_TRACING:
        return

    try:
        tracer_provider = configure_tracer()

        FastAPIInstrumentor.instrument_app(
            app,
            tracer_provider=tracer_provider,
            excluded_urls=f"{settings.API_PREFIX.strip('/')}/health,metrics",
        )
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, tracer_provider=tracer_provider)

        logger.info("OpenTelemetry tracing configured successfully")
    except Exception as e:
        logger.error(f"Failed to setup OpenTelemetry tracing: {e}")


@contextmanager
def create_span(
    name: str, attributes: Optional[Dict[str, Any]] = None, kind: Optional[SpanKind] = None
) -> Generator[Span, None, None]:
    """
    Run a block inside a new span.

    Without a configured provider the global no-op tracer is used, so this is
    safe to call from code paths that run in tests.

    Example usage:
        with create_span("category.cascade_inactive", {"category.id": category_id}) as span:
            span.set_attribute("category.descendants", len(descendant_ids))

    Args:
        name: The name of the span
        attributes: Optional attributes to add to the span
        kind: Optional span kind, internal when omitted

    Returns:
        A span context manager
    """
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(
        name, attributes=attributes, kind=kind if kind is not None else SpanKind.INTERNAL
    ) as span:
        yield span
