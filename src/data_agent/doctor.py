"""
Query Doctor
============

Model-call step that explains a failed query and plans its repair in prose.
"""

import structlog

from data_agent.llm.base import LLMCallError, LLMInterface
from data_agent.models import ChatMessage
from data_agent.prompts import DEFAULT_DIAGNOSIS, DEFAULT_PROMPTS, PromptSet
from data_agent.schema import DEFAULT_SCHEMA, SchemaDescriptor

logger = structlog.get_logger(__name__)


class QueryDoctor:
    """Diagnoses execution failures for the next Coder attempt."""

    def __init__(
        self,
        llm: LLMInterface,
        prompts: PromptSet = DEFAULT_PROMPTS,
        schema: SchemaDescriptor = DEFAULT_SCHEMA,
    ) -> None:
        self.llm = llm
        self.system_prompt = prompts.doctor_prompt(schema)

    def diagnose(self, failed_query: str, error_message: str) -> str:
        """
        Produce correction instructions for a failed query.

        The output is free text and is never parsed. Falls back to a generic
        instruction when the model returns nothing or the call fails.
        """
        messages = [
            ChatMessage(
                role="user",
                content=f"FAILED QUERY: {failed_query}\nERROR: {error_message}",
            )
        ]

        try:
            response = self.llm.complete(self.system_prompt, messages)
        except LLMCallError as e:
            logger.warning("diagnosis_failed", error=str(e))
            return DEFAULT_DIAGNOSIS

        return response.content.strip() or DEFAULT_DIAGNOSIS
