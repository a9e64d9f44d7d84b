from __future__ import annotations

import logging
from typing import Optional, Sequence

from anthropic import Anthropic, AnthropicError

from app.ai.types import ChatMessage
from app.core.errors import LLMRequestError, LLMUnavailableError

logger = logging.getLogger(__name__)


class ClaudeProvider:
    name = "anthropic"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 0,
    ):
        key = (api_key or "").strip()
        if not key:
            raise LLMUnavailableError("ANTHROPIC_API_KEY is missing")

        self.model = model
        self._client = Anthropic(api_key=key, timeout=timeout_s, max_retries=max_retries)

    def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float = 0.2,
        max_tokens: int = 1500,
    ) -> str:
        # Anthropic takes the system prompt as a separate argument.
        system = "\n\n".join(m.content for m in messages if m.role == "system")
        turns = [{"role": m.role, "content": m.content} for m in messages if m.role != "system"]

        create_kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": turns,
        }
        if system:
            create_kwargs["system"] = system

        try:
            response = self._client.messages.create(**create_kwargs)
        except AnthropicError as exc:
            logger.warning("anthropic_completion_failed model=%s: %s", self.model, exc)
            raise LLMRequestError(f"Anthropic request failed: {exc}") from exc

        blocks = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        content = "".join(blocks).strip()
        if not content:
            raise LLMRequestError("No valid text response from Anthropic")
        return content
