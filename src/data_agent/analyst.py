"""
Dashboard Analyst
=================

Final model-call step: turns an extraction result into narrative text and a
visualization artifact.
"""

from data_agent.artifacts import extract_artifact, strip_artifact_block
from data_agent.executor import serialize_rows
from data_agent.llm.base import LLMInterface
from data_agent.models import (
    ChatMessage,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    SynthesisResult,
)
from data_agent.prompts import DEFAULT_PROMPTS, PromptSet

# Client-side system notices (error banners) are not forwarded to the model
HISTORY_ROLES = ("user", "assistant")


def build_data_context(extraction: ExtractionResult) -> str:
    """Describe the fetched data, or its absence, for the analyst prompt."""
    if isinstance(extraction, ExtractionSuccess):
        return f"RAW DATA FROM DATABASE: {serialize_rows(extraction.rows)}"
    if isinstance(extraction, ExtractionFailure):
        return f"ERROR FETCHING DATA: {extraction.last_error}"
    raise TypeError(f"Unsupported extraction result: {type(extraction).__name__}")


class DashboardAnalyst:
    """Synthesizes the user-facing answer from extracted data."""

    def __init__(self, llm: LLMInterface, prompts: PromptSet = DEFAULT_PROMPTS) -> None:
        self.llm = llm
        self.system_prompt = prompts.analyst

    def build_messages(
        self,
        message: str,
        history: list[ChatMessage],
        extraction: ExtractionResult,
    ) -> list[ChatMessage]:
        messages = [
            ChatMessage(role=turn.role, content=turn.content)
            for turn in history
            if turn.role in HISTORY_ROLES
        ]
        messages.append(
            ChatMessage(
                role="user",
                content=f'USER REQUEST: "{message}"\n\n{build_data_context(extraction)}',
            )
        )
        return messages

    def synthesize(
        self,
        message: str,
        history: list[ChatMessage],
        extraction: ExtractionResult,
    ) -> SynthesisResult:
        """
        Produce the answer for one chat message.

        A malformed artifact block is dropped; the prose is still returned.

        Raises:
            LLMCallError: If the model call fails
        """
        response = self.llm.complete(
            self.system_prompt, self.build_messages(message, history, extraction)
        )
        content = response.content

        return SynthesisResult(
            text=strip_artifact_block(content),
            artifact=extract_artifact(content),
        )
