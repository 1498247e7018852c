"""
Dashboard Routes
================

Intelligent dashboard chat endpoint.
"""

import time

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.schemas import ChatRequest, ChatResponse, DebugInfo, ErrorDetail, ErrorResponse
from data_agent import ChatMessage, DashboardService
from observability.metrics import track_chat_metrics, track_extraction_metrics

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Dashboard"])


def get_dashboard_service(request: Request) -> DashboardService:
    """Dependency to get the configured service from app state."""
    return request.app.state.dashboard_service


@router.post(
    "/intelligent-dashboard/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Failed to process dashboard query"},
    },
    summary="Answer an analytical question about enhancement requests",
)
async def dashboard_chat(
    body: ChatRequest,
    request: Request,
    service: DashboardService = Depends(get_dashboard_service),
) -> ChatResponse | JSONResponse:
    """
    Answer one dashboard chat message.

    The endpoint:
    1. Extracts data with the self-repairing SQL agent
    2. Has the analyst write prose and a visualization artifact
    3. Returns both, plus the query and attempt count used
    """
    start_time = time.perf_counter()
    history = [ChatMessage(role=turn.role, content=turn.content) for turn in body.history]

    try:
        reply = await run_in_threadpool(service.process, body.message, history)
    except Exception:
        logger.exception("dashboard_chat_failed")
        track_chat_metrics(
            success=False,
            has_artifact=False,
            duration_seconds=time.perf_counter() - start_time,
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=ErrorDetail(
                    code="INTERNAL_ERROR",
                    message="Failed to process dashboard query",
                    request_id=getattr(request.state, "request_id", None),
                )
            ).model_dump(),
        )

    track_extraction_metrics(reply.extraction, reply.extraction_seconds)
    track_chat_metrics(
        success=True,
        has_artifact=reply.artifact is not None,
        duration_seconds=time.perf_counter() - start_time,
    )

    return ChatResponse(
        text=reply.text,
        artifact=reply.artifact.to_json() if reply.artifact else None,
        debug=DebugInfo(**reply.debug),
    )
