"""
SQL Coder
=========

Model-call step turning a natural-language request into one SQL statement.
"""

from data_agent.llm.base import LLMInterface
from data_agent.models import ChatMessage, Correction
from data_agent.prompts import DEFAULT_PROMPTS, PromptSet
from data_agent.schema import DEFAULT_SCHEMA, SchemaDescriptor


class SQLCoder:
    """Generates candidate SQL, optionally guided by a correction plan."""

    def __init__(
        self,
        llm: LLMInterface,
        prompts: PromptSet = DEFAULT_PROMPTS,
        schema: SchemaDescriptor = DEFAULT_SCHEMA,
    ) -> None:
        self.llm = llm
        self.system_prompt = prompts.coder_prompt(schema)

    def build_messages(
        self, request: str, correction: Correction | None = None
    ) -> list[ChatMessage]:
        messages = [ChatMessage(role="user", content=f"Original Request: {request}")]

        if correction is not None:
            messages.append(
                ChatMessage(
                    role="user",
                    content=(
                        f"Your previous query was:\n{correction.failed_query}\n"
                        f'It failed with this error: "{correction.error_message}".\n'
                        f"FOLLOW THIS CORRECTION PLAN: {correction.instructions}"
                    ),
                )
            )

        return messages

    def generate(self, request: str, correction: Correction | None = None) -> str:
        """
        Ask the model for one SQL statement.

        Returns the trimmed model output verbatim; an empty string means the
        model produced nothing.

        Raises:
            LLMCallError: If the model call fails
        """
        response = self.llm.complete(
            self.system_prompt, self.build_messages(request, correction)
        )
        return response.content.strip()
