"""
API Schemas
===========

Pydantic models for API request/response validation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class HistoryTurn(BaseModel):
    """A previous message in the dashboard conversation."""

    role: Literal["user", "assistant", "system"] = Field(
        ..., description="Who sent the turn; system turns are client notices"
    )
    content: str = Field(..., description="Turn text")


class ChatRequest(BaseModel):
    """Request body for the intelligent dashboard chat."""

    message: str = Field(
        ...,
        max_length=4000,
        description="Analytical question about enhancement requests",
        examples=["How many ERs were accepted per release?"],
    )
    history: list[HistoryTurn] = Field(
        default_factory=list,
        description="Prior conversation turns, oldest first",
    )

    @field_validator("history", mode="before")
    @classmethod
    def history_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message is required")
        return value


class DebugInfo(BaseModel):
    """Extraction details surfaced next to the answer."""

    query: str = Field(..., description="Final (or last attempted) SQL")
    error: str | None = Field(None, description="Last error when extraction failed")
    attempts: int = Field(..., description="Attempts used by the extraction loop")


class ChatResponse(BaseModel):
    """Response body for the intelligent dashboard chat."""

    text: str = Field(..., description="Markdown analysis")
    artifact: dict[str, Any] | None = Field(
        None, description="Chart, table or scorecard descriptor"
    )
    debug: DebugInfo


class ExtractRequest(BaseModel):
    """Request body for a bare extraction run."""

    question: str = Field(..., min_length=1, max_length=4000)

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Question is required")
        return value


class AttemptResponse(BaseModel):
    """One attempt of the extraction loop."""

    index: int
    sql: str
    outcome: str
    timestamp: str
    error: str | None = None
    diagnosis: str | None = None
    row_count: int | None = None


class ExtractResponse(BaseModel):
    """Raw extraction result."""

    success: bool
    query: str
    error: str | None = None
    attempts: int
    rows: list[dict[str, Any]] = Field(default_factory=list)
    attempt_log: list[AttemptResponse] = Field(default_factory=list)
    request_id: str
    processing_time_ms: float


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus = Field(..., description="Overall health status")
    version: str = Field(..., description="API version")
    schema_version: str | None = Field(None, description="Schema descriptor revision")
    prompt_version: str | None = Field(None, description="Prompt set revision")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual component health checks",
    )


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(..., description="Whether the service is ready to handle requests")
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual readiness checks",
    )


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    request_id: str | None = Field(None, description="Request ID if available")


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: ErrorDetail
