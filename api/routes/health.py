"""
Health Check Routes
===================

Kubernetes-compatible probes. Readiness pings the relational store, since an
unreachable database turns every chat message into an exhausted extraction.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Request, Response
from starlette.concurrency import run_in_threadpool

from api import __version__
from api.schemas import HealthResponse, HealthStatus, ReadinessResponse
from data_agent.executor import ExecutionError

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])

PING_QUERY = "SELECT 1"


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check(request: Request) -> HealthResponse:
    """Report the service version and the schema/prompt revisions in use."""
    service = getattr(request.app.state, "dashboard_service", None)
    checks = {"api": True, "dashboard_service": service is not None}

    return HealthResponse(
        status=HealthStatus.HEALTHY if all(checks.values()) else HealthStatus.DEGRADED,
        version=__version__,
        schema_version=service.agent.schema.version if service else None,
        prompt_version=service.agent.prompts.version if service else None,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness check")
async def readiness_check(request: Request, response: Response) -> ReadinessResponse:
    service = getattr(request.app.state, "dashboard_service", None)
    checks = {"agent_configured": service is not None, "database_reachable": False}

    if service is not None:
        try:
            await run_in_threadpool(service.agent.executor.execute, PING_QUERY)
            checks["database_reachable"] = True
        except ExecutionError as e:
            logger.warning("readiness_ping_failed", error=e.message)

    ready = all(checks.values())
    if not ready:
        response.status_code = 503

    return ReadinessResponse(ready=ready, checks=checks)


@router.get("/live", summary="Liveness check")
async def liveness_check() -> dict:
    return {"status": "ok"}
