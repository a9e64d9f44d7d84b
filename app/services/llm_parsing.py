from __future__ import annotations

import json
import logging
import re
import warnings
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, TypeAdapter, ValidationError

from app.core.errors import ParseDegradedWarning

logger = logging.getLogger(__name__)

PayloadSource = Literal["llm_json", "llm_fenced", "llm_braces"]

_FENCED_JSON_RE = re.compile(r"```(?:json|JSON)?\s*(\{[\s\S]*?\})\s*```")
_GREEDY_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_JSON_CLEANUPS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r",\s*}"), "}"),
    (re.compile(r",\s*]"), "]"),
    (re.compile(r"\n\s*"), " "),
    (re.compile(r"\r"), ""),
    (re.compile(r"\t"), " "),
    (re.compile(r'\\"'), '"'),
    (re.compile(r"\\'"), "'"),
)

_STR_LIST = TypeAdapter(list[str])


def cleanup_json(candidate: str) -> str:
    for pattern, replacement in _JSON_CLEANUPS:
        candidate = pattern.sub(replacement, candidate)
    return candidate.strip()


def _loads_object(candidate: str) -> dict[str, Any] | None:
    for attempt in (candidate, cleanup_json(candidate)):
        try:
            parsed = json.loads(attempt)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def extract_json_payload(reply: str) -> tuple[dict[str, Any], PayloadSource] | None:
    """Pull a JSON object out of a free-text LLM reply.

    A reply that is itself a JSON object wins. Otherwise a fenced code
    block is tried, then the greedy first-``{`` to last-``}`` span.
    Returns ``None`` when nothing yields an object.
    """
    if not reply or not reply.strip():
        return None

    whole = reply.strip()
    if whole.startswith("{"):
        try:
            parsed = json.loads(whole)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed, "llm_json"

    fenced = _FENCED_JSON_RE.search(reply)
    if fenced:
        payload = _loads_object(fenced.group(1))
        if payload is not None:
            return payload, "llm_fenced"
        logger.info("llm_reply_fenced_block_unparseable len=%s", len(fenced.group(1)))

    greedy = _GREEDY_OBJECT_RE.search(reply)
    if greedy:
        payload = _loads_object(greedy.group(0))
        if payload is not None:
            return payload, "llm_braces"

    logger.info("llm_reply_without_json preview=%r", reply[:200])
    return None


@dataclass(frozen=True)
class FieldIssue:
    field: str
    reason: Literal["missing", "invalid"]


@dataclass
class FieldReader:
    """Reads fields from an untrusted mapping, defaulting each one independently."""

    payload: Any
    prefix: str = ""
    issues: list[FieldIssue] = field(default_factory=list)

    def _path(self, key: str) -> str:
        return f"{self.prefix}.{key}" if self.prefix else key

    def _raw(self, key: str) -> tuple[bool, Any]:
        if not isinstance(self.payload, dict) or key not in self.payload:
            self.issues.append(FieldIssue(self._path(key), "missing"))
            return False, None
        return True, self.payload[key]

    def child(self, key: str) -> "FieldReader":
        present, value = self._raw(key)
        if present and not isinstance(value, dict):
            self.issues.append(FieldIssue(self._path(key), "invalid"))
        # Issues of the child are shared so callers see one flat list.
        return FieldReader(payload=value if isinstance(value, dict) else {}, prefix=self._path(key), issues=self.issues)

    def string(self, key: str, default: str) -> str:
        present, value = self._raw(key)
        if not present:
            return default
        if not isinstance(value, str) or not value.strip():
            self.issues.append(FieldIssue(self._path(key), "invalid"))
            return default
        return value.strip()

    def string_list(self, key: str) -> list[str]:
        present, value = self._raw(key)
        if not present:
            return []
        try:
            items = _STR_LIST.validate_python(value)
        except ValidationError:
            self.issues.append(FieldIssue(self._path(key), "invalid"))
            return []
        return [item.strip() for item in items if item.strip()]

    def number(self, key: str, default: float) -> float:
        present, value = self._raw(key)
        if not present:
            return default
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
            self.issues.append(FieldIssue(self._path(key), "invalid"))
            return default
        return float(value)

    def model_list(self, key: str, model: type[BaseModel]) -> list[Any]:
        present, value = self._raw(key)
        if not present:
            return []
        if not isinstance(value, list):
            self.issues.append(FieldIssue(self._path(key), "invalid"))
            return []
        items: list[Any] = []
        for index, item in enumerate(value):
            try:
                items.append(model.model_validate(item))
            except ValidationError:
                self.issues.append(FieldIssue(f"{self._path(key)}[{index}]", "invalid"))
        return items

    def degraded_fields(self) -> list[str]:
        return sorted({issue.field for issue in self.issues})


def report_degraded(kind: str, reader: FieldReader) -> list[str]:
    fields = reader.degraded_fields()
    if fields:
        logger.info("llm_reply_degraded kind=%s fields=%s", kind, ",".join(fields))
        warnings.warn(
            f"{kind} reply was partially malformed; defaulted: {', '.join(fields)}",
            ParseDegradedWarning,
            stacklevel=3,
        )
    return fields


def truncate_for_prompt(text: str, budget: int) -> str:
    if budget <= 0 or len(text) <= budget:
        return text
    return text[:budget]
