from __future__ import annotations

import logging
from typing import Optional, Sequence

from openai import OpenAI, OpenAIError

from app.ai.types import ChatMessage
from app.core.errors import LLMRequestError, LLMUnavailableError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    name = "openai"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 0,
    ):
        key = (api_key or "").strip()
        if not key:
            raise LLMUnavailableError("OPENAI_API_KEY is missing")

        self.model = model
        self._client = OpenAI(
            api_key=key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float = 0.2,
        max_tokens: int = 1500,
    ) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=payload,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as exc:
            logger.warning("openai_completion_failed model=%s: %s", self.model, exc)
            raise LLMRequestError(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content or not content.strip():
            raise LLMRequestError("No response content from OpenAI")
        return content.strip()
