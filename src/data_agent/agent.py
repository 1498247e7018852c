"""
Data Extraction Agent
=====================

Bounded generate -> validate -> execute -> diagnose loop that turns a question
into rows fetched by a read-only query.
"""

import time
from datetime import datetime, timezone

import structlog
from opentelemetry import trace

from data_agent.coder import SQLCoder
from data_agent.doctor import QueryDoctor
from data_agent.executor import ExecutionError, QueryExecutor
from data_agent.llm.base import LLMCallError, LLMInterface
from data_agent.models import (
    Attempt,
    AttemptOutcome,
    Correction,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    VerificationResult,
)
from data_agent.prompts import DEFAULT_PROMPTS, SECURITY_BLOCK_INSTRUCTIONS, PromptSet
from data_agent.schema import DEFAULT_SCHEMA, SchemaDescriptor
from data_agent.verifiers.base import VerificationChain

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

MAX_RETRIES = 3
EXHAUSTED_MESSAGE = "Failed to generate a valid working query after multiple attempts."


class DataExtractionAgent:
    """
    Orchestrates SQL generation with self-repair.

    Each attempt:
    1. Asks the Coder for a statement (with the previous attempt's correction)
    2. Runs it through the verification chain; a rejection costs the attempt
    3. Executes it; on failure the Doctor writes the next correction plan

    The loop stops on the first success, on an empty generation, or after
    ``max_retries`` attempts, and always returns an ExtractionResult.
    """

    def __init__(
        self,
        llm: LLMInterface,
        executor: QueryExecutor,
        schema: SchemaDescriptor = DEFAULT_SCHEMA,
        prompts: PromptSet = DEFAULT_PROMPTS,
        verification_chain: VerificationChain | None = None,
        max_retries: int = MAX_RETRIES,
        total_timeout_seconds: float | None = None,
        retry_backoff_seconds: float = 0.0,
    ) -> None:
        """
        Initialize the agent.

        Args:
            llm: Text-completion capability shared by the Coder and Doctor
            executor: Anything with ``execute(sql) -> list[dict]`` raising ExecutionError
            schema: Schema descriptor given to the model
            prompts: Versioned system prompts
            verification_chain: Pre-execution checks (defaults to the read-only policy)
            max_retries: Maximum number of attempts per request
            total_timeout_seconds: Deadline for the whole loop, checked between attempts
            retry_backoff_seconds: Pause before each retry
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.llm = llm
        self.executor = executor
        self.schema = schema
        self.prompts = prompts
        self.coder = SQLCoder(llm, prompts, schema)
        self.doctor = QueryDoctor(llm, prompts, schema)
        self.verification_chain = verification_chain or VerificationChain()
        self.max_retries = max_retries
        self.total_timeout_seconds = total_timeout_seconds
        self.retry_backoff_seconds = retry_backoff_seconds

    def _record(
        self,
        attempts: list[Attempt],
        index: int,
        sql: str,
        outcome: AttemptOutcome,
        error: str | None = None,
        verification_results: list[VerificationResult] | None = None,
        diagnosis: str | None = None,
        row_count: int | None = None,
    ) -> None:
        attempts.append(
            Attempt(
                index=index,
                sql=sql,
                outcome=outcome,
                timestamp=datetime.now(timezone.utc).isoformat(),
                error=error,
                verification_results=verification_results or [],
                diagnosis=diagnosis,
                row_count=row_count,
            )
        )

    def _timed_out(self, started: float) -> bool:
        if self.total_timeout_seconds is None:
            return False
        return time.monotonic() - started >= self.total_timeout_seconds

    def extract(self, request: str) -> ExtractionResult:
        """
        Main entry point: fetch the data a natural-language request asks for.

        Args:
            request: The user's question

        Returns:
            ExtractionSuccess with rows, or ExtractionFailure with the last
            query and error. Never raises for model or database failures.
        """
        log = logger.bind(request=request[:200])
        attempts: list[Attempt] = []
        correction: Correction | None = None
        last_query = ""
        last_error = ""
        started = time.monotonic()

        context = {
            "original_request": request,
            "schema": self.schema,
        }

        with tracer.start_as_current_span("data_agent.extract") as extract_span:
            for index in range(1, self.max_retries + 1):
                if index > 1:
                    if self._timed_out(started):
                        last_error = (
                            f"Extraction timed out after {self.total_timeout_seconds}s"
                        )
                        log.warning("extraction_timed_out", attempts=len(attempts))
                        break
                    if self.retry_backoff_seconds > 0:
                        time.sleep(self.retry_backoff_seconds)

                with tracer.start_as_current_span("data_agent.attempt") as span:
                    span.set_attribute("attempt.index", index)

                    # 1. Generate
                    try:
                        sql = self.coder.generate(request, correction)
                    except LLMCallError as e:
                        last_error = f"Query generation failed: {e}"
                        log.warning("generation_failed", attempt=index, error=str(e))
                        self._record(
                            attempts, index, "", AttemptOutcome.GENERATION_FAILED,
                            error=last_error,
                        )
                        span.set_attribute("attempt.outcome", "generation_failed")
                        continue

                    if not sql:
                        log.warning("generation_empty", attempt=index)
                        self._record(attempts, index, "", AttemptOutcome.GENERATION_EMPTY)
                        span.set_attribute("attempt.outcome", "generation_empty")
                        break

                    last_query = sql

                    # 2. Safety check
                    passed, results = self.verification_chain.run(sql, context)
                    if not passed:
                        last_error = f"Security Block: {results[-1].message}"
                        correction = Correction(
                            failed_query=sql,
                            error_message=last_error,
                            instructions=SECURITY_BLOCK_INSTRUCTIONS,
                        )
                        log.warning("query_blocked", attempt=index, reason=results[-1].message)
                        self._record(
                            attempts, index, sql, AttemptOutcome.SECURITY_BLOCKED,
                            error=last_error, verification_results=results,
                        )
                        span.set_attribute("attempt.outcome", "security_blocked")
                        continue

                    # 3. Execute
                    try:
                        rows = self.executor.execute(sql)
                    except ExecutionError as e:
                        last_error = e.message or "Unknown SQL Error"
                        log.warning("execution_failed", attempt=index, error=last_error)

                        # 4. Diagnose this failure only
                        diagnosis = self.doctor.diagnose(sql, last_error)
                        correction = Correction(
                            failed_query=sql,
                            error_message=last_error,
                            instructions=diagnosis,
                        )
                        self._record(
                            attempts, index, sql, AttemptOutcome.EXECUTION_FAILED,
                            error=last_error, verification_results=results,
                            diagnosis=diagnosis,
                        )
                        span.set_attribute("attempt.outcome", "execution_failed")
                        continue

                    self._record(
                        attempts, index, sql, AttemptOutcome.SUCCEEDED,
                        verification_results=results, row_count=len(rows),
                    )
                    span.set_attribute("attempt.outcome", "succeeded")

                log.info("extraction_succeeded", attempts=index, row_count=len(rows))
                extract_span.set_attribute("extraction.attempts", index)
                extract_span.set_attribute("extraction.success", True)
                return ExtractionSuccess(
                    attempts_used=index,
                    attempts=attempts,
                    rows=rows,
                    final_query=sql,
                )

            extract_span.set_attribute("extraction.attempts", len(attempts))
            extract_span.set_attribute("extraction.success", False)

        log.warning("extraction_exhausted", attempts=len(attempts), error=last_error)
        return ExtractionFailure(
            attempts_used=len(attempts),
            attempts=attempts,
            last_query=last_query,
            last_error=last_error or EXHAUSTED_MESSAGE,
        )
