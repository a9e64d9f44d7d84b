from __future__ import annotations


class ExtractionError(ValueError):
    """Raised when no text can be extracted from an uploaded document."""


class LLMError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_error"):
        super().__init__(message)
        self.code = code


class LLMUnavailableError(LLMError):
    def __init__(self, message: str = "No LLM API key configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY."):
        super().__init__(message, code="llm_unavailable")


class LLMRequestError(LLMError):
    def __init__(self, message: str):
        super().__init__(message, code="llm_request_failed")


class ParseDegradedWarning(UserWarning):
    """Some fields of an LLM reply were missing or mistyped and were defaulted."""
