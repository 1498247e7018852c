"""
FastAPI Application
===================

HTTP service exposing the intelligent dashboard chat and the extraction agent.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.middleware.telemetry import TelemetryMiddleware
from api.routes.dashboard import router as dashboard_router
from api.routes.extract import router as extract_router
from api.routes.health import router as health_router
from api.schemas import ErrorDetail, ErrorResponse
from data_agent import DashboardService
from data_agent.config import Settings, get_settings
from observability.logging_config import setup_logging
from observability.metrics import metrics_endpoint, setup_metrics
from observability.tracing import setup_tracing

logger = structlog.get_logger(__name__)


def _error_response(
    request: Request, status_code: int, code: str, message: str
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=code,
                message=message,
                request_id=getattr(request.state, "request_id", None),
            )
        ).model_dump(),
    )


def create_app(
    settings: Settings | None = None,
    dashboard_service: DashboardService | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings (default: from environment)
        dashboard_service: Prebuilt service, mainly for tests. Built from
                           settings at startup when omitted.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        setup_logging(level=settings.log_level, json_format=settings.json_logs)
        logger.info(
            "starting_api",
            version=__version__,
            model=settings.model,
            max_retries=settings.max_retries,
        )

        service = dashboard_service or DashboardService.from_settings(settings)
        app.state.dashboard_service = service

        yield

        logger.info("shutting_down_api")
        if dashboard_service is None:
            service.agent.executor.dispose()

    app = FastAPI(
        title="ER Data Agent API",
        description=(
            "Answers analytical questions about enhancement requests with "
            "self-repairing, read-only SQL and a visualization artifact."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(dashboard_router)
    app.include_router(extract_router)

    setup_metrics(app, environment=settings.environment)
    app.add_route("/metrics", metrics_endpoint)

    if settings.tracing_enabled:
        setup_tracing(
            app,
            otlp_endpoint=settings.otlp_endpoint,
            environment=settings.environment,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Reject malformed bodies with the dashboard's error envelope."""
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return _error_response(request, 400, "INVALID_INPUT", message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.exception("unhandled_error", path=request.url.path)
        return _error_response(
            request, 500, "INTERNAL_ERROR", "An unexpected error occurred"
        )

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
