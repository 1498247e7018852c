"""
Pytest Fixtures
===============

Shared fixtures for data agent tests.
"""

from typing import Any, Union

import pytest
from sqlalchemy import create_engine

from data_agent.agent import DataExtractionAgent
from data_agent.executor import ExecutionError, QueryExecutor
from data_agent.llm.mock import MockLLM
from data_agent.models import VerificationStatus
from data_agent.schema import DEFAULT_SCHEMA, SchemaDescriptor, schema_ddl

# Substrings identifying each model-call step by its system prompt
CODER = "SQL Coder"
DOCTOR = "Database Doctor"
ANALYST = "UI Analyst"

Outcome = Union[list[dict[str, Any]], Exception]


class FakeExecutor:
    """Scripted executor: returns rows or raises, in sequence, repeating the last."""

    def __init__(self, outcomes: list[Outcome] | None = None) -> None:
        self.outcomes = outcomes or [[]]
        self.executed: list[str] = []

    def execute(self, sql: str) -> list[dict[str, Any]]:
        outcome = self.outcomes[min(len(self.executed), len(self.outcomes) - 1)]
        self.executed.append(sql)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def sample_schema() -> SchemaDescriptor:
    """Return the ER schema descriptor."""
    return DEFAULT_SCHEMA


@pytest.fixture
def er_database_url(tmp_path) -> str:
    """Create a small SQLite ER database and return its URL."""
    url = f"sqlite:///{tmp_path / 'er.db'}"
    engine = create_engine(url)

    with engine.begin() as conn:
        for statement in schema_ddl():
            conn.exec_driver_sql(statement)

        conn.exec_driver_sql(
            'INSERT INTO "Company" ("id", "name") VALUES (?, ?)',
            [("c1", "Acme"), ("c2", "Globex")],
        )
        conn.exec_driver_sql(
            'INSERT INTO "Release" ("id", "name") VALUES (?, ?)',
            [("r1", "2024.1"), ("r2", "2024.2")],
        )
        conn.exec_driver_sql(
            'INSERT INTO "ER" ("id", "subject", "companyId", "status", "source", '
            '"releaseId", "strategic", "impact") VALUES (?, ?, ?, ?, ?, ?, ?, ?)',
            [
                ("er1", "SSO support", "c1", "ACCEPTED", "CSV", "r1", 8, 7),
                ("er2", "Dark mode", "c1", "OPEN", "ZENDESK", None, 3, None),
                ("er3", "Bulk export", "c2", "ACCEPTED", "ZENDESK", "r2", 6, 9),
                ("er4", "Audit log", "c2", "DELIVERED", "CSV", "r1", 9, 8),
            ],
        )

    engine.dispose()
    return url


@pytest.fixture
def query_executor(er_database_url: str) -> QueryExecutor:
    """Create a read-only executor on the sample database."""
    executor = QueryExecutor(er_database_url, read_only=True)
    yield executor
    executor.dispose()


@pytest.fixture
def failing_executor() -> FakeExecutor:
    """Executor whose store rejects every statement."""
    return FakeExecutor([ExecutionError("no such column: ER.title")])


@pytest.fixture
def rows_executor() -> FakeExecutor:
    """Executor that always returns two status rows."""
    return FakeExecutor([[{"status": "ACCEPTED", "count": 2}, {"status": "OPEN", "count": 1}]])


@pytest.fixture
def mock_llm_simple() -> MockLLM:
    """Mock LLM whose Coder answers with one valid query."""
    return MockLLM(
        responses={
            CODER: ['SELECT status, COUNT(*) AS "count" FROM ER GROUP BY status'],
            DOCTOR: ["Check the column names against the ER table."],
        }
    )


@pytest.fixture
def agent_simple(mock_llm_simple: MockLLM, rows_executor: FakeExecutor) -> DataExtractionAgent:
    """Create an agent with a simple mock LLM and a succeeding store."""
    return DataExtractionAgent(llm=mock_llm_simple, executor=rows_executor)


@pytest.fixture
def chart_response() -> str:
    """Analyst output with prose and a well-formed chart artifact."""
    return (
        "## ER status overview\n"
        "Two requests are accepted and one is still open.\n\n"
        "```json\n"
        "{\n"
        '  "type": "chart",\n'
        '  "title": "ERs by status",\n'
        '  "chartType": "bar",\n'
        '  "data": {\n'
        '    "labels": ["ACCEPTED", "OPEN"],\n'
        '    "datasets": [{"label": "Count", "data": [2, 1]}]\n'
        "  },\n"
        '  "insights": [{"title": "Backlog", "description": "One ER awaits review.", '
        '"type": "action"}],\n'
        '  "followUpQuestions": ["Which companies raised the open ERs?"]\n'
        "}\n"
        "```"
    )


def assert_verification_passed(result) -> None:
    """Helper assertion for verification results."""
    assert result.status == VerificationStatus.PASSED, f"Expected PASSED, got: {result.message}"


def assert_verification_failed(result) -> None:
    """Helper assertion for verification failures."""
    assert result.status == VerificationStatus.FAILED, f"Expected FAILED, got: {result.message}"
