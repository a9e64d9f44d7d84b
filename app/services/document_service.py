from __future__ import annotations

import logging

from app.ai.types import AIClient
from app.features.document_stats import compute_document_stats, describe_extraction, quality_warning
from app.features.resume_heuristics import build_parsed_resume
from app.parsing.cleaner import clean_text
from app.parsing.models import UploadedDocument
from app.parsing.parse import extract_document
from app.schemas.analysis import DocumentExtraction
from app.schemas.resume import ParsedResume

from .engineering_analyzer import analyze_engineering
from .resume_analyzer import analyze_resume

logger = logging.getLogger(__name__)


def extract_engineering_document(document: UploadedDocument, client: AIClient | None) -> DocumentExtraction:
    """Extract, clean, measure and analyze one uploaded engineering document.

    Raises ``ValueError`` for uploads that fail format checks and
    ``ExtractionError`` when no text could be recovered.
    """
    extracted = extract_document(document)
    cleaned = clean_text(extracted.text)
    stats = compute_document_stats(cleaned)
    analysis = analyze_engineering(cleaned, client, page_count=extracted.page_count)

    return DocumentExtraction(
        file_name=document.filename,
        file_size=document.size,
        extracted_text=cleaned,
        text_length=len(cleaned),
        page_count=extracted.page_count,
        word_count=stats.word_count,
        readable_words=stats.readable_words,
        readability_score=stats.readability_score,
        extraction_method=describe_extraction(extracted.method, stats),
        quality_warning=quality_warning(stats, len(analysis.keywords)),
        warnings=list(extracted.warnings),
        engineering_disciplines=analysis.disciplines,
        engineering_keywords=analysis.keywords,
        technical_terms=analysis.technical_terms,
        engineering_score=analysis.engineering_score,
        complexity=analysis.complexity,
        document_type=analysis.document_type,
        confidence=analysis.confidence,
        analysis_source=analysis.analysis_source,
        analysis_summary=analysis.analysis_summary,
    )


def parse_resume_document(
    document: UploadedDocument,
    client: AIClient | None,
    target_role: str | None = None,
) -> ParsedResume:
    """Run resume heuristics and analysis on the raw extracted text.

    Contact lines and profile URLs are kept.
    """
    extracted = extract_document(document)
    parsed = build_parsed_resume(extracted.text)
    parsed.llm_analysis = analyze_resume(extracted.text, target_role, client)
    logger.info(
        "resume_parsed file=%s skills=%s experience=%s education=%s source=%s",
        document.filename,
        len(parsed.skills),
        len(parsed.experience),
        len(parsed.education),
        parsed.llm_analysis.analysis_source,
    )
    return parsed
