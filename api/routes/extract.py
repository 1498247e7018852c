"""
Extraction Routes
=================

Debug surface exposing the raw extraction result for a question.
"""

import time

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from api.routes.dashboard import get_dashboard_service
from api.schemas import AttemptResponse, ErrorResponse, ExtractRequest, ExtractResponse
from data_agent import DashboardService, ExtractionSuccess
from observability.metrics import track_extraction_metrics

router = APIRouter(prefix="/api/v1", tags=["Extraction"])


@router.post(
    "/extract",
    response_model=ExtractResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid request"}},
    summary="Run the SQL extraction loop only",
)
async def extract(
    body: ExtractRequest,
    request: Request,
    service: DashboardService = Depends(get_dashboard_service),
) -> ExtractResponse:
    """Return the rows, final query and attempt log for a question."""
    start_time = time.perf_counter()

    result = await run_in_threadpool(service.agent.extract, body.question)

    processing_time = time.perf_counter() - start_time
    track_extraction_metrics(result, processing_time)

    return ExtractResponse(
        success=result.succeeded,
        query=result.query,
        error=result.error,
        attempts=result.attempts_used,
        rows=result.rows if isinstance(result, ExtractionSuccess) else [],
        attempt_log=[AttemptResponse(**attempt.to_dict()) for attempt in result.attempts],
        request_id=getattr(request.state, "request_id", ""),
        processing_time_ms=processing_time * 1000,
    )
