from __future__ import annotations

import re

from pydantic import BaseModel, Field

_STRUCTURE_MARKERS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("TOC", re.compile(r"table\s+of\s+contents|contents|\btoc\b", re.IGNORECASE)),
    ("References", re.compile(r"references?|bibliography|works\s+cited", re.IGNORECASE)),
    ("Abstract", re.compile(r"abstract|summary|executive\s+summary", re.IGNORECASE)),
    ("Figures", re.compile(r"figure\s+\d+|fig\.\s*\d+", re.IGNORECASE)),
    ("Tables", re.compile(r"table\s+\d+|tab\.\s*\d+", re.IGNORECASE)),
)


class DocumentStats(BaseModel):
    word_count: int = Field(ge=0)
    readable_words: int = Field(ge=0)
    readability_score: int = Field(ge=0, le=100)
    structure: list[str] = Field(default_factory=list)


def document_words(text: str) -> list[str]:
    return [word for word in text.split() if len(word) > 1]


def compute_document_stats(text: str) -> DocumentStats:
    words = document_words(text)
    readable = [word for word in words if word[0].isascii() and word[0].isalpha()]
    readability = round(len(readable) / len(words) * 100) if words else 0
    structure = [label for label, pattern in _STRUCTURE_MARKERS if pattern.search(text)]
    return DocumentStats(
        word_count=len(words),
        readable_words=len(readable),
        readability_score=readability,
        structure=structure,
    )


def describe_extraction(method: str, stats: DocumentStats) -> str:
    if not stats.structure:
        return method
    return f"{method} ({', '.join(stats.structure)})"


def quality_warning(stats: DocumentStats, keyword_count: int) -> str | None:
    if stats.readability_score < 50:
        return "Text quality is low. This may be a scanned document or contain many formatting artifacts."
    if stats.readability_score < 70:
        return "Text quality is moderate. Some formatting may be lost during extraction."
    if keyword_count < 5:
        return "Limited technical content detected. This may not be an engineering document."
    return None
