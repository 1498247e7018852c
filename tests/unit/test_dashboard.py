"""
Unit Tests for DashboardService
===============================
"""

import pytest

from conftest import ANALYST, CODER, FakeExecutor
from data_agent.agent import DataExtractionAgent
from data_agent.analyst import DashboardAnalyst
from data_agent.config import Settings
from data_agent.dashboard import DashboardService
from data_agent.executor import QueryExecutor
from data_agent.llm.base import LLMCallError
from data_agent.llm.mock import MockLLM
from data_agent.llm.openai_llm import OpenAILLM
from data_agent.models import ChatMessage, ExtractionFailure, ExtractionSuccess


def make_service(llm: MockLLM, executor) -> DashboardService:
    return DashboardService(
        agent=DataExtractionAgent(llm=llm, executor=executor),
        analyst=DashboardAnalyst(llm),
    )


class TestDashboardService:
    """Tests for the extraction + synthesis pipeline."""

    def test_answer_with_artifact(self, chart_response: str, rows_executor: FakeExecutor) -> None:
        llm = MockLLM(
            responses={
                CODER: ['SELECT status, COUNT(*) AS "count" FROM ER GROUP BY status'],
                ANALYST: [chart_response],
            }
        )
        service = make_service(llm, rows_executor)

        reply = service.process("How many ERs per status?")

        assert isinstance(reply.extraction, ExtractionSuccess)
        assert reply.artifact is not None
        assert reply.text.startswith("## ER status overview")
        assert reply.debug == {
            "query": 'SELECT status, COUNT(*) AS "count" FROM ER GROUP BY status',
            "error": None,
            "attempts": 1,
        }
        assert reply.extraction_seconds >= 0

        _, analyst_messages = llm.calls_matching(ANALYST)[0]
        assert "RAW DATA FROM DATABASE:" in analyst_messages[-1].content

    def test_analyst_runs_after_failed_extraction(self, failing_executor: FakeExecutor) -> None:
        llm = MockLLM(
            responses={
                CODER: ["SELECT title FROM ER"],
                ANALYST: ["I could not fetch the data for this question."],
            }
        )
        service = make_service(llm, failing_executor)

        reply = service.process("List ER titles")

        assert isinstance(reply.extraction, ExtractionFailure)
        assert reply.artifact is None
        assert reply.text == "I could not fetch the data for this question."
        assert reply.debug["attempts"] == 3
        assert reply.debug["error"] == "no such column: ER.title"

        _, analyst_messages = llm.calls_matching(ANALYST)[0]
        assert analyst_messages[-1].content.endswith(
            "ERROR FETCHING DATA: no such column: ER.title"
        )

    def test_history_is_forwarded(self, rows_executor: FakeExecutor) -> None:
        llm = MockLLM(responses={CODER: ["SELECT id FROM ER"], ANALYST: ["ok"]})
        service = make_service(llm, rows_executor)
        history = [
            ChatMessage(role="user", content="Show ERs"),
            ChatMessage(role="assistant", content="Here they are."),
        ]

        service.process("Only accepted ones", history)

        _, analyst_messages = llm.calls_matching(ANALYST)[0]
        assert [m.content for m in analyst_messages[:2]] == ["Show ERs", "Here they are."]

        # The extraction step only sees the current message
        _, coder_messages = llm.calls_matching(CODER)[0]
        assert coder_messages[0].content == "Original Request: Only accepted ones"

    def test_analyst_error_propagates(self, rows_executor: FakeExecutor) -> None:
        llm = MockLLM(
            responses={CODER: ["SELECT id FROM ER"], ANALYST: [LLMCallError("upstream down")]}
        )
        service = make_service(llm, rows_executor)

        with pytest.raises(LLMCallError):
            service.process("List ERs")


class TestFromSettings:
    """Tests for wiring from configuration."""

    def test_builds_openai_pipeline(self, er_database_url: str) -> None:
        settings = Settings(
            database_url=er_database_url,
            openai_api_key="sk-test",
            model="gpt-4.1-mini",
            max_retries=4,
            total_timeout_seconds=30.0,
        )

        service = DashboardService.from_settings(settings)

        try:
            assert isinstance(service.agent.llm, OpenAILLM)
            assert service.agent.llm.model == "gpt-4.1-mini"
            assert isinstance(service.agent.executor, QueryExecutor)
            assert service.agent.max_retries == 4
            assert service.agent.total_timeout_seconds == 30.0
            assert service.analyst.llm is service.agent.llm
        finally:
            service.agent.executor.dispose()
