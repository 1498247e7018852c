"""
Data Models
===========

Core data structures for the dashboard data-extraction agent.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from data_agent.artifacts import Artifact


@dataclass(frozen=True)
class ChatMessage:
    """One turn of a model conversation."""

    role: str
    content: str


@dataclass
class LLMResponse:
    """Response from an LLM call."""

    content: str
    model: str
    tokens_used: int = 0


@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of the read-only query policy check."""

    safe: bool
    reason: Optional[str] = None


class VerificationStatus(Enum):
    """Status of a verification check."""

    PASSED = "passed"
    FAILED = "failed"


@dataclass
class VerificationResult:
    """Result of a single verification step."""

    verifier_name: str
    status: VerificationStatus
    message: str
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Correction:
    """Repair guidance carried from one failed attempt into the next."""

    failed_query: str
    error_message: str
    instructions: str


class AttemptOutcome(Enum):
    """How a single generate/validate/execute cycle ended."""

    SUCCEEDED = "succeeded"
    GENERATION_EMPTY = "generation_empty"
    GENERATION_FAILED = "generation_failed"
    SECURITY_BLOCKED = "security_blocked"
    EXECUTION_FAILED = "execution_failed"


@dataclass
class Attempt:
    """One iteration of the extraction loop."""

    index: int
    sql: str
    outcome: AttemptOutcome
    timestamp: str
    error: Optional[str] = None
    verification_results: list[VerificationResult] = field(default_factory=list)
    diagnosis: Optional[str] = None
    row_count: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "sql": self.sql,
            "outcome": self.outcome.value,
            "timestamp": self.timestamp,
            "error": self.error,
            "diagnosis": self.diagnosis,
            "row_count": self.row_count,
        }


@dataclass(frozen=True)
class ExtractionResult(ABC):
    """Terminal value of the extraction loop: ExtractionSuccess or ExtractionFailure."""

    attempts_used: int
    attempts: list[Attempt]

    @property
    def succeeded(self) -> bool:
        return isinstance(self, ExtractionSuccess)

    @property
    @abstractmethod
    def query(self) -> str:
        """Final query on success, last attempted query on failure."""

    @property
    @abstractmethod
    def error(self) -> Optional[str]:
        """Last error, or None on success."""

    def to_debug(self) -> dict[str, Any]:
        """Shape exposed on debug surfaces."""
        return {
            "query": self.query,
            "error": self.error,
            "attempts": self.attempts_used,
        }


@dataclass(frozen=True)
class ExtractionSuccess(ExtractionResult):
    """Rows fetched by a validated, executed query."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    final_query: str = ""

    @property
    def query(self) -> str:
        return self.final_query

    @property
    def error(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class ExtractionFailure(ExtractionResult):
    """The loop stopped without a working query."""

    last_query: str = ""
    last_error: str = ""

    @property
    def query(self) -> str:
        return self.last_query

    @property
    def error(self) -> Optional[str]:
        return self.last_error


@dataclass
class SynthesisResult:
    """Narrative and optional visualization produced by the analyst."""

    text: str
    artifact: Optional["Artifact"] = None


@dataclass
class DashboardReply:
    """Full answer to one dashboard chat message."""

    text: str
    artifact: Optional["Artifact"]
    extraction: ExtractionResult
    extraction_seconds: float = 0.0

    @property
    def debug(self) -> dict[str, Any]:
        return self.extraction.to_debug()
