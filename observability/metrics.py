"""
Prometheus Metrics
==================

Extraction-loop and HTTP metrics for monitoring and alerting.
"""

import time
from collections import Counter as TallyCounter
from typing import Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
    multiprocess,
)

from data_agent import AttemptOutcome, ExtractionResult, __version__

REGISTRY = CollectorRegistry()

APP_INFO = Info(
    "data_agent",
    "ER data agent application information",
    registry=REGISTRY,
)

EXTRACTIONS_TOTAL = Counter(
    "data_agent_extractions_total",
    "Extraction loops run, by terminal state",
    ["status"],  # success, exhausted
    registry=REGISTRY,
)

EXTRACTION_ATTEMPTS = Histogram(
    "data_agent_extraction_attempts",
    "Attempts used per extraction",
    buckets=[1, 2, 3, 4, 5],
    registry=REGISTRY,
)

ATTEMPT_FAILURES = Counter(
    "data_agent_attempt_failures_total",
    "Failed attempts by kind",
    ["kind"],
    registry=REGISTRY,
)

EXTRACTION_DURATION = Histogram(
    "data_agent_extraction_duration_seconds",
    "Extraction loop duration in seconds",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
    registry=REGISTRY,
)

CHAT_REQUESTS_TOTAL = Counter(
    "data_agent_chat_requests_total",
    "Dashboard chat messages answered",
    ["status", "artifact"],
    registry=REGISTRY,
)

CHAT_DURATION = Histogram(
    "data_agent_chat_duration_seconds",
    "Dashboard chat end-to-end duration in seconds",
    buckets=[1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
    registry=REGISTRY,
)

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 30.0],
    registry=REGISTRY,
)

ACTIVE_CHATS = Gauge(
    "data_agent_active_chats",
    "Chat messages currently being processed",
    registry=REGISTRY,
)

CHAT_PATH = "/api/v1/intelligent-dashboard/chat"


def setup_metrics(app: FastAPI, environment: str = "development") -> None:
    """
    Set up Prometheus metrics for the FastAPI application.

    Args:
        app: FastAPI application instance
        environment: Deployment environment label
    """
    APP_INFO.info({
        "version": __version__,
        "environment": environment,
    })

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next: Callable) -> Response:
        """Middleware to track HTTP metrics."""
        start_time = time.perf_counter()

        is_chat = request.url.path == CHAT_PATH
        if is_chat:
            ACTIVE_CHATS.inc()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code,
            ).inc()

            HTTP_REQUEST_DURATION.labels(
                method=request.method,
                endpoint=request.url.path,
            ).observe(duration)

            return response
        finally:
            if is_chat:
                ACTIVE_CHATS.dec()


def track_extraction_metrics(result: ExtractionResult, duration_seconds: float) -> None:
    """
    Record one finished extraction loop.

    Args:
        result: Terminal value of the loop
        duration_seconds: Time spent in the loop
    """
    EXTRACTIONS_TOTAL.labels(status="success" if result.succeeded else "exhausted").inc()
    EXTRACTION_ATTEMPTS.observe(result.attempts_used)
    EXTRACTION_DURATION.observe(duration_seconds)

    failures = TallyCounter(
        attempt.outcome.value
        for attempt in result.attempts
        if attempt.outcome != AttemptOutcome.SUCCEEDED
    )
    for kind, count in failures.items():
        ATTEMPT_FAILURES.labels(kind=kind).inc(count)


def track_chat_metrics(success: bool, has_artifact: bool, duration_seconds: float) -> None:
    """Record one answered (or failed) chat message."""
    CHAT_REQUESTS_TOTAL.labels(
        status="success" if success else "error",
        artifact="yes" if has_artifact else "no",
    ).inc()
    CHAT_DURATION.observe(duration_seconds)


async def metrics_endpoint(request: Request) -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    # Handle multiprocess mode if using gunicorn
    try:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        metrics = generate_latest(registry)
    except ValueError:
        # Not in multiprocess mode
        metrics = generate_latest(REGISTRY)

    return Response(
        content=metrics,
        media_type=CONTENT_TYPE_LATEST,
    )
