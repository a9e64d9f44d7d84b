from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import CamelModel

Complexity = Literal["Basic", "Intermediate", "Advanced", "Expert"]
AnalysisSource = Literal["llm_fenced", "llm_braces", "llm_json", "basic"]

COMPLEXITY_LEVELS: tuple[Complexity, ...] = ("Basic", "Intermediate", "Advanced", "Expert")
DEFAULT_COMPLEXITY: Complexity = "Intermediate"
DEFAULT_DOCUMENT_TYPE = "Technical Document"
DEFAULT_PRIMARY_DISCIPLINE = "General Engineering"


class EngineeringAnalysisRequest(CamelModel):
    text: str = Field(default="", max_length=200000)


class AnalysisSummary(CamelModel):
    total_terms: int = Field(ge=0)
    primary_discipline: str
    technical_level: Complexity
    document_category: str


class AnalysisResult(CamelModel):
    disciplines: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    specializations: list[str] = Field(default_factory=list)
    technical_terms: list[str] = Field(default_factory=list)
    complexity: Complexity = DEFAULT_COMPLEXITY
    document_type: str = DEFAULT_DOCUMENT_TYPE
    confidence: float = Field(ge=0.0, le=1.0)
    engineering_score: int = Field(default=0, ge=0, le=100)
    analysis_source: AnalysisSource = "basic"
    degraded_fields: list[str] = Field(default_factory=list)
    analysis_summary: AnalysisSummary


class DocumentExtraction(CamelModel):
    file_name: str
    file_size: int = Field(ge=0)
    extracted_text: str
    text_length: int = Field(ge=0)
    page_count: int = Field(ge=1)
    word_count: int = Field(ge=0)
    readable_words: int = Field(ge=0)
    readability_score: int = Field(ge=0, le=100)
    extraction_method: str
    quality_warning: str | None = None
    warnings: list[str] = Field(default_factory=list)
    engineering_disciplines: list[str] = Field(default_factory=list)
    engineering_keywords: list[str] = Field(default_factory=list)
    technical_terms: list[str] = Field(default_factory=list)
    engineering_score: int = Field(ge=0, le=100)
    complexity: Complexity = DEFAULT_COMPLEXITY
    document_type: str = DEFAULT_DOCUMENT_TYPE
    confidence: float = Field(ge=0.0, le=1.0)
    analysis_source: AnalysisSource = "basic"
    analysis_summary: AnalysisSummary
