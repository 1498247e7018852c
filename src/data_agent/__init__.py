"""
ER Data Agent
=============

Natural-language-to-SQL data extraction with iterative self-repair, backing
the ER review intelligent dashboard.
"""

from data_agent.models import (
    Attempt,
    AttemptOutcome,
    ChatMessage,
    Correction,
    DashboardReply,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    LLMResponse,
    SafetyVerdict,
    SynthesisResult,
    VerificationResult,
    VerificationStatus,
)
from data_agent.agent import MAX_RETRIES, DataExtractionAgent
from data_agent.analyst import DashboardAnalyst
from data_agent.artifacts import Artifact, extract_artifact, strip_artifact_block
from data_agent.coder import SQLCoder
from data_agent.dashboard import DashboardService
from data_agent.doctor import QueryDoctor
from data_agent.executor import ExecutionError, QueryExecutor, serialize_rows, to_json_safe
from data_agent.llm import LLMCallError, LLMInterface, MockLLM, OpenAILLM
from data_agent.prompts import DEFAULT_PROMPTS, PromptSet
from data_agent.schema import DEFAULT_SCHEMA, SchemaDescriptor, build_schema_descriptor
from data_agent.verifiers import (
    ReadOnlyQueryVerifier,
    VerificationChain,
    Verifier,
    validate_query,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "Attempt",
    "AttemptOutcome",
    "ChatMessage",
    "Correction",
    "DashboardReply",
    "ExtractionFailure",
    "ExtractionResult",
    "ExtractionSuccess",
    "LLMResponse",
    "SafetyVerdict",
    "SynthesisResult",
    "VerificationResult",
    "VerificationStatus",
    # Agent and steps
    "MAX_RETRIES",
    "DataExtractionAgent",
    "SQLCoder",
    "QueryDoctor",
    "DashboardAnalyst",
    "DashboardService",
    # Execution
    "ExecutionError",
    "QueryExecutor",
    "serialize_rows",
    "to_json_safe",
    # Artifacts
    "Artifact",
    "extract_artifact",
    "strip_artifact_block",
    # Configuration data
    "DEFAULT_PROMPTS",
    "PromptSet",
    "DEFAULT_SCHEMA",
    "SchemaDescriptor",
    "build_schema_descriptor",
    # Verifiers
    "Verifier",
    "VerificationChain",
    "ReadOnlyQueryVerifier",
    "validate_query",
    # LLM
    "LLMCallError",
    "LLMInterface",
    "MockLLM",
    "OpenAILLM",
]
