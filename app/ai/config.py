from __future__ import annotations

import os
from dataclasses import dataclass


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def _clean_key(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    if not value or _looks_like_placeholder(value):
        return None
    return value


@dataclass(frozen=True)
class AIConfig:
    provider: str
    enabled: bool
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str | None
    anthropic_api_key: str | None
    anthropic_model: str
    timeout_s: float
    max_retries: int
    text_budget: int


def load_ai_config() -> AIConfig:
    provider = (os.getenv("AI_PROVIDER") or "auto").strip().lower()
    enabled = (os.getenv("LLM_ENABLED") or "1").strip().lower() in {"1", "true", "yes", "y", "on"}
    return AIConfig(
        provider=provider,
        enabled=enabled,
        openai_api_key=_clean_key("OPENAI_API_KEY"),
        openai_model=(os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip(),
        openai_base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        anthropic_api_key=_clean_key("ANTHROPIC_API_KEY"),
        anthropic_model=(os.getenv("ANTHROPIC_MODEL") or "claude-3-5-sonnet-20241022").strip(),
        timeout_s=float(os.getenv("LLM_TIMEOUT_S", "30")),
        max_retries=int(os.getenv("LLM_MAX_RETRIES", "0")),
        text_budget=int(os.getenv("LLM_TEXT_BUDGET", "4000")),
    )
