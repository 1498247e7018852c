"""
Unit Tests for LLM Providers
============================
"""

from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from data_agent.llm.base import LLMCallError
from data_agent.llm.mock import MockLLM
from data_agent.llm.openai_llm import OpenAILLM
from data_agent.models import ChatMessage


class StubCompletions:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[dict] = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def stub_client(completions: StubCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def completion(content: str | None, total_tokens: int = 42) -> SimpleNamespace:
    return SimpleNamespace(
        model="gpt-4.1-mini-2025",
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )


class TestOpenAILLM:
    """Tests for the OpenAI provider with a stubbed client."""

    def test_system_prompt_first(self) -> None:
        completions = StubCompletions(response=completion("  SELECT 1  "))
        llm = OpenAILLM(model="gpt-4.1-mini", client=stub_client(completions))

        response = llm.complete("You are a SQL Coder.", [ChatMessage("user", "Original Request: hi")])

        assert response.content == "SELECT 1"
        assert response.tokens_used == 42
        assert response.model == "gpt-4.1-mini-2025"
        assert completions.requests[0]["model"] == "gpt-4.1-mini"
        assert completions.requests[0]["messages"] == [
            {"role": "system", "content": "You are a SQL Coder."},
            {"role": "user", "content": "Original Request: hi"},
        ]

    def test_null_content_is_empty(self) -> None:
        llm = OpenAILLM(model="m", client=stub_client(StubCompletions(response=completion(None))))
        assert llm.complete("sys", []).content == ""

    def test_no_choices(self) -> None:
        response = SimpleNamespace(model="m", choices=[], usage=None)
        llm = OpenAILLM(model="m", client=stub_client(StubCompletions(response=response)))

        with pytest.raises(LLMCallError):
            llm.complete("sys", [])

    def test_sdk_error_is_wrapped(self) -> None:
        error = APIConnectionError(request=httpx.Request("POST", "http://x"))
        llm = OpenAILLM(model="m", client=stub_client(StubCompletions(error=error)))

        with pytest.raises(LLMCallError):
            llm.complete("sys", [])


class TestMockLLM:
    """Tests for the scripted provider."""

    def test_sequence_then_repeat(self) -> None:
        llm = MockLLM(responses={"coder": ["a", "b"]})

        contents = [llm.complete("SQL Coder", []).content for _ in range(3)]

        assert contents == ["a", "b", "b"]

    def test_system_prompt_wins_over_messages(self) -> None:
        llm = MockLLM(responses={"doctor": ["diagnosis"], "coder": ["query"]})

        response = llm.complete("SQL Coder", [ChatMessage("user", "ask the doctor")])

        assert response.content == "query"

    def test_default_and_reset(self) -> None:
        llm = MockLLM(default="fallback")

        assert llm.complete("anything", []).content == "fallback"
        assert len(llm.calls) == 1

        llm.reset()
        assert llm.calls == []

    def test_scripted_exception(self) -> None:
        llm = MockLLM(responses={"coder": [LLMCallError("boom")]})

        with pytest.raises(LLMCallError):
            llm.complete("SQL Coder", [])
