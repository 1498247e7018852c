"""
Base LLM Interface
==================

Abstract text-completion capability shared by the Coder, Doctor and Analyst.
"""

from abc import ABC, abstractmethod

from data_agent.models import ChatMessage, LLMResponse


class LLMCallError(Exception):
    """A provider call failed (transport, timeout, rate limit, bad response)."""


class LLMInterface(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    def complete(self, system_prompt: str, messages: list[ChatMessage]) -> LLMResponse:
        """
        Run one completion.

        Args:
            system_prompt: Instructions for the model
            messages: Conversation turns, oldest first

        Returns:
            LLMResponse with generated content

        Raises:
            LLMCallError: If the provider call fails
        """
        pass
