from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field, field_validator

SourceType = Literal["pdf", "docx", "txt"]
ExtractionMethod = Literal["pypdf", "pdfplumber", "byte-scan", "python-docx", "utf-8"]


@dataclass(frozen=True)
class UploadedDocument:
    filename: str
    content: bytes
    media_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


class ExtractedText(BaseModel):
    text: str
    source_type: SourceType
    method: ExtractionMethod
    pages: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @field_validator("source_type", mode="before")
    @classmethod
    def _validate_source_type(cls, value: str) -> str:
        normalized = str(value).strip().lower()
        if normalized not in {"pdf", "docx", "txt"}:
            raise ValueError("source_type must be one of: pdf, docx, txt")
        return normalized

    @property
    def page_count(self) -> int:
        return len(self.pages) or 1

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def line_count(self) -> int:
        return len([line for line in self.text.splitlines() if line.strip()])
