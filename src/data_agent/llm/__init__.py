"""
LLM Module
==========

Pluggable LLM interfaces for the extraction and analysis steps.
"""

from data_agent.llm.base import LLMCallError, LLMInterface
from data_agent.llm.mock import MockLLM
from data_agent.llm.openai_llm import OpenAILLM

__all__ = [
    "LLMCallError",
    "LLMInterface",
    "MockLLM",
    "OpenAILLM",
]
