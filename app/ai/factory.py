from __future__ import annotations

import logging
from typing import Sequence

from app.ai.config import AIConfig, load_ai_config
from app.ai.types import AIClient, ChatMessage
from app.core.errors import LLMError, LLMUnavailableError

from app.ai.providers.openai_provider import OpenAIProvider
from app.ai.providers.claude_provider import ClaudeProvider

logger = logging.getLogger(__name__)


def _openai(cfg: AIConfig) -> AIClient:
    return OpenAIProvider(
        model=cfg.openai_model,
        api_key=cfg.openai_api_key,
        base_url=cfg.openai_base_url,
        timeout_s=cfg.timeout_s,
        max_retries=cfg.max_retries,
    )


def _claude(cfg: AIConfig) -> AIClient:
    return ClaudeProvider(
        model=cfg.anthropic_model,
        api_key=cfg.anthropic_api_key,
        timeout_s=cfg.timeout_s,
        max_retries=cfg.max_retries,
    )


def get_ai_client(cfg: AIConfig | None = None) -> AIClient:
    """Build the single provider used for analysis requests.

    OpenAI wins over Anthropic when both keys are present and the provider is
    ``auto``. Raises ``LLMUnavailableError`` when no usable credential exists.
    """
    cfg = cfg or load_ai_config()
    if not cfg.enabled:
        raise LLMUnavailableError("LLM analysis is disabled (LLM_ENABLED=0).")

    if cfg.provider == "openai":
        return _openai(cfg)

    if cfg.provider in {"anthropic", "claude"}:
        return _claude(cfg)

    if cfg.provider != "auto":
        raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")

    if cfg.openai_api_key:
        return _openai(cfg)
    if cfg.anthropic_api_key:
        return _claude(cfg)
    raise LLMUnavailableError()


def check_connection(client: AIClient | None) -> bool:
    if client is None:
        return False
    messages: Sequence[ChatMessage] = [
        ChatMessage(role="user", content='Say "Hello" if you can see this message.'),
    ]
    try:
        reply = client.complete(messages, temperature=0.0, max_tokens=10)
    except LLMError as exc:
        logger.warning("llm_connection_check_failed provider=%s: %s", client.name, exc)
        return False
    logger.info("llm_connection_check_ok provider=%s reply_len=%s", client.name, len(reply))
    return True
