"""
OpenTelemetry Tracing
=====================

Distributed tracing for the chat request and its extraction attempts.
"""

import os
from typing import Optional

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from data_agent import __version__

logger = structlog.get_logger(__name__)


def setup_tracing(
    app: FastAPI,
    service_name: str = "er-data-agent",
    otlp_endpoint: Optional[str] = None,
    environment: str = "development",
) -> None:
    """
    Set up OpenTelemetry tracing for the application.

    Must run before the application starts serving.

    Args:
        app: FastAPI application instance
        service_name: Name of the service for traces
        otlp_endpoint: OTLP collector endpoint (default: OTEL_EXPORTER_OTLP_ENDPOINT env)
        environment: Deployment environment attribute
    """
    endpoint = otlp_endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")

    resource = Resource.create({
        SERVICE_NAME: service_name,
        "service.version": __version__,
        "deployment.environment": environment,
    })

    provider = TracerProvider(resource=resource)

    if endpoint and endpoint != "disabled":
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
        )
        logger.info("otlp_exporter_configured", endpoint=endpoint)

    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)
