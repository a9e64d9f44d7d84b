from __future__ import annotations

import re

CANONICAL_BULLET = "- "

_PAGE_MARKER_RE = re.compile(r"--- Page \d+ ---")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_MULTI_SPACE_RE = re.compile(r" {2,}")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E\n\t]")
_BULLET_RE = re.compile(r"^[ \t]*[*\-][ \t]+", re.MULTILINE)
_NUMBER_ONLY_LINE_RE = re.compile(r"^[ \t]*\d+[ \t]*$", re.MULTILINE)
_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_URL_RE = re.compile(r"https?://\S+")

# Order matters: each substitution sees the output of the previous one.
_PIPELINE: tuple[tuple[re.Pattern[str], str], ...] = (
    (_PAGE_MARKER_RE, ""),
    (_EXCESS_NEWLINES_RE, "\n\n"),
    (_MULTI_SPACE_RE, " "),
    (_NON_PRINTABLE_RE, " "),
    (_BULLET_RE, CANONICAL_BULLET),
    (_NUMBER_ONLY_LINE_RE, ""),
    (_EMAIL_RE, ""),
    (_URL_RE, ""),
)


def _clean_once(text: str) -> str:
    for pattern, replacement in _PIPELINE:
        text = pattern.sub(replacement, text)
    return text.strip()


def clean_text(text: str) -> str:
    """Strip PDF artifacts and normalize whitespace.

    The pipeline is repeated until the output stops changing: removals in
    later steps (emails, number-only lines) can leave behind whitespace runs
    that earlier steps collapse. Every pass after the first only shortens the
    text or rewrites bullets into their final form, so the loop terminates.
    """
    if not text:
        return ""
    current = _clean_once(text)
    while True:
        cleaned = _clean_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned
