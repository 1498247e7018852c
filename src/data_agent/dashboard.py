"""
Dashboard Service
=================

One chat message in, one answer out: extraction followed by synthesis.
"""

import time
from typing import TYPE_CHECKING

import structlog

from data_agent.agent import DataExtractionAgent
from data_agent.analyst import DashboardAnalyst
from data_agent.models import ChatMessage, DashboardReply

if TYPE_CHECKING:
    from data_agent.config import Settings

logger = structlog.get_logger(__name__)


class DashboardService:
    """Runs the extraction agent and the analyst for each message."""

    def __init__(self, agent: DataExtractionAgent, analyst: DashboardAnalyst) -> None:
        self.agent = agent
        self.analyst = analyst

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DashboardService":
        """Wire the OpenAI provider and the SQL store described by settings."""
        from data_agent.executor import QueryExecutor
        from data_agent.llm.openai_llm import OpenAILLM

        llm = OpenAILLM(
            model=settings.model,
            api_key=settings.openai_api_key,
            timeout=settings.attempt_timeout_seconds,
            base_url=settings.openai_base_url,
        )
        executor = QueryExecutor(settings.database_url, read_only=settings.read_only)
        agent = DataExtractionAgent(
            llm=llm,
            executor=executor,
            max_retries=settings.max_retries,
            total_timeout_seconds=settings.total_timeout_seconds,
            retry_backoff_seconds=settings.retry_backoff_seconds,
        )
        return cls(agent=agent, analyst=DashboardAnalyst(llm))

    def process(self, message: str, history: list[ChatMessage] | None = None) -> DashboardReply:
        """
        Answer a dashboard question.

        The analyst always runs, with an error marker when no data was fetched.
        """
        started = time.perf_counter()
        extraction = self.agent.extract(message)
        extraction_seconds = time.perf_counter() - started
        if not extraction.succeeded:
            logger.info("answering_without_data", error=extraction.error)

        synthesis = self.analyst.synthesize(message, history or [], extraction)
        return DashboardReply(
            text=synthesis.text,
            artifact=synthesis.artifact,
            extraction=extraction,
            extraction_seconds=extraction_seconds,
        )
