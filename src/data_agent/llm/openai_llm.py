"""
OpenAI LLM
==========

Chat-completions provider backed by the official openai SDK.
"""

import structlog
from openai import OpenAI, OpenAIError

from data_agent.llm.base import LLMCallError, LLMInterface
from data_agent.models import ChatMessage, LLMResponse

logger = structlog.get_logger(__name__)


class OpenAILLM(LLMInterface):
    """LLM provider using OpenAI chat completions."""

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        timeout: float | None = None,
        base_url: str | None = None,
        client: OpenAI | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            model: Model name sent with every request
            api_key: API key (falls back to OPENAI_API_KEY in the environment)
            timeout: Per-request timeout in seconds
            base_url: Optional compatible endpoint
            client: Preconfigured client, mainly for tests
        """
        self.model = model
        # SDK retries are disabled: the extraction loop owns the attempt budget.
        self.client = client or OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    def complete(self, system_prompt: str, messages: list[ChatMessage]) -> LLMResponse:
        payload = [{"role": "system", "content": system_prompt}]
        payload.extend({"role": m.role, "content": m.content} for m in messages)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=payload,
            )
        except OpenAIError as e:
            logger.warning("llm_call_failed", model=self.model, error=str(e))
            raise LLMCallError(str(e)) from e

        if not response.choices:
            raise LLMCallError("Provider returned no choices")

        content = (response.choices[0].message.content or "").strip()
        tokens_used = response.usage.total_tokens if response.usage else 0
        logger.debug(
            "llm_call_completed",
            model=response.model,
            tokens_used=tokens_used,
        )

        return LLMResponse(
            content=content,
            model=response.model or self.model,
            tokens_used=tokens_used,
        )
