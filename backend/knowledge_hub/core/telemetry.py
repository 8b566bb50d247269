"""
OpenTelemetry setup

Spans are always created through ``get_tracer``; without ``setup_telemetry``
they go to the no-op provider and cost next to nothing. When
``TELEMETRY_ENABLED`` is set, the FastAPI app, SQLAlchemy and httpx (which the
OpenAI SDK uses for upstream calls) are instrumented automatically and spans
are exported to the console.
"""
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from ..config import settings
from .database import engine
import logging

logger = logging.getLogger(__name__)


def setup_telemetry(app):
    """
    Install a tracer provider and instrument the app, the database engine and httpx

    Args:
        app: FastAPI application instance

    Returns:
        The configured TracerProvider
    """
    resource = Resource.create({
        "service.name": "knowledge-hub-api",
        "service.version": "1.0.0",
        "service.namespace": "knowledge-hub",
    })

    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    exporter_type = settings.telemetry_exporter.lower()
    if exporter_type == "console":
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console span exporter enabled")
    else:
        logger.warning(f"Unknown telemetry exporter '{exporter_type}', spans will not be exported")

    FastAPIInstrumentor.instrument_app(app)
    SQLAlchemyInstrumentor().instrument(engine=engine)
    HTTPXClientInstrumentor().instrument()

    logger.info("OpenTelemetry instrumentation enabled for FastAPI, SQLAlchemy and httpx")
    return tracer_provider


def get_tracer(name: str):
    """
    Get a tracer for custom spans

    Args:
        name: Name of the tracer (usually __name__)

    Returns:
        Tracer instance
    """
    return trace.get_tracer(name)
