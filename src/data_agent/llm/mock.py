"""
Mock LLM
========

Scripted LLM implementation for testing and local demos.
"""

from typing import Union

from data_agent.llm.base import LLMInterface
from data_agent.models import ChatMessage, LLMResponse

ScriptedResponse = Union[str, Exception]


class MockLLM(LLMInterface):
    """
    Mock LLM returning canned responses.

    In production, replace with OpenAILLM or another provider.
    """

    def __init__(
        self,
        responses: dict[str, list[ScriptedResponse]] | None = None,
        default: str = "",
    ) -> None:
        """
        Initialize with canned responses.

        Args:
            responses: Dict mapping prompt substrings to a list of responses.
                       Each response is returned in sequence and the last one
                       repeats. Exception entries are raised instead.
            default: Content returned when no key matches
        """
        self.responses = responses or {}
        self.default = default
        self.call_counts: dict[str, int] = {}
        self.calls: list[tuple[str, list[ChatMessage]]] = []

    def complete(self, system_prompt: str, messages: list[ChatMessage]) -> LLMResponse:
        """
        Return the next scripted response.

        Keys are matched case-insensitively, first against the system prompt
        and then against the messages, in insertion order.
        """
        self.calls.append((system_prompt, list(messages)))
        conversation = "\n".join(m.content for m in messages)

        for haystack in (system_prompt.lower(), conversation.lower()):
            for key, scripted in self.responses.items():
                if key.lower() in haystack:
                    return self._next_response(key, scripted)

        return LLMResponse(content=self.default, model="mock-llm-v1")

    def _next_response(self, key: str, scripted: list[ScriptedResponse]) -> LLMResponse:
        count = self.call_counts.get(key, 0)
        self.call_counts[key] = count + 1

        # Return successive responses, then keep repeating the last one
        response = scripted[min(count, len(scripted) - 1)]
        if isinstance(response, Exception):
            raise response
        return LLMResponse(content=response, model="mock-llm-v1")

    def calls_matching(self, key: str) -> list[tuple[str, list[ChatMessage]]]:
        """Recorded calls whose system prompt contains ``key``."""
        return [call for call in self.calls if key.lower() in call[0].lower()]

    def reset(self) -> None:
        """Reset call counts and the call log for fresh test runs."""
        self.call_counts = {}
        self.calls = []
