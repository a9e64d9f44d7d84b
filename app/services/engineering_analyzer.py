from __future__ import annotations

import logging

from app.ai.config import load_ai_config
from app.ai.types import AIClient, ChatMessage
from app.core.config.scoring import get_scoring_value
from app.core.errors import LLMError, LLMUnavailableError
from app.features.document_stats import document_words
from app.features.scoring import engineering_score, keyword_density
from app.features.term_extractor import dedupe_terms, extract_terms, fallback_terms
from app.parsing.cleaner import clean_text
from app.schemas.analysis import (
    COMPLEXITY_LEVELS,
    DEFAULT_COMPLEXITY,
    DEFAULT_DOCUMENT_TYPE,
    DEFAULT_PRIMARY_DISCIPLINE,
    AnalysisResult,
    AnalysisSummary,
    Complexity,
)

from .llm_parsing import FieldReader, extract_json_payload, report_degraded, truncate_for_prompt

logger = logging.getLogger(__name__)

ENGINEERING_TEMPERATURE = 0.1
ENGINEERING_MAX_TOKENS = 1500
MIN_TERM_LENGTH = 3

SYSTEM_PROMPT = """You are an expert engineering document analyzer with deep knowledge across all engineering disciplines. Your task is to analyze technical documents and extract comprehensive engineering information.

ANALYSIS REQUIREMENTS:

1. ENGINEERING DISCIPLINES: Identify specific engineering fields mentioned (e.g., "Mechanical Engineering", "Civil Engineering", "Electrical Engineering", "Software Engineering", "Chemical Engineering", "Biomedical Engineering", "Aerospace Engineering", "Computer Engineering", "Industrial Engineering", "Materials Engineering", "Nuclear Engineering", "Environmental Engineering", "Structural Engineering", "Systems Engineering", "Robotics Engineering", etc.)

2. TECHNICAL KEYWORDS: Extract important technical terms, technologies, methodologies, standards, tools, and concepts related to engineering. Include:
   - Programming languages and frameworks (Python, Java, C++, React, Angular, etc.)
   - Engineering software (CAD, SolidWorks, MATLAB, ANSYS, etc.)
   - Hardware and electronics (Arduino, Raspberry Pi, FPGA, PCB, etc.)
   - AI/ML technologies (Machine Learning, Neural Networks, Computer Vision, etc.)
   - Engineering standards (ISO, ASTM, ASME, IEEE, etc.)
   - Manufacturing processes (Lean, Six Sigma, Agile, etc.)
   - Analysis methods (FEA, CFD, Stress Analysis, etc.)

3. SPECIALIZATIONS: Identify sub-specializations or specific areas within engineering disciplines (e.g., "Control Systems", "Power Electronics", "Structural Analysis", "Machine Learning", "Robotics", "Thermal Management", "Fluid Dynamics", etc.)

4. TECHNICAL COMPLEXITY: Assess the technical complexity level (Basic, Intermediate, Advanced, Expert)

5. DOCUMENT TYPE: Identify the type of engineering document (Research Paper, Technical Specification, Design Document, User Manual, Standards Document, Patent, etc.)

RESPONSE FORMAT (JSON only):
{
  "disciplines": ["discipline1", "discipline2", ...],
  "keywords": ["keyword1", "keyword2", ...],
  "specializations": ["specialization1", "specialization2", ...],
  "complexity": "Basic|Intermediate|Advanced|Expert",
  "documentType": "document_type",
  "confidence": 0.85
}

Be thorough but only include terms that are clearly engineering-related. Avoid generic words. Provide accurate, specific technical terms."""


def build_engineering_prompt(text: str, *, budget: int | None = None) -> list[ChatMessage]:
    if budget is None:
        budget = load_ai_config().text_budget
    excerpt = truncate_for_prompt(text, budget)
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(
            role="user",
            content=f"Analyze this engineering document and extract comprehensive technical information:\n\n{excerpt}",
        ),
    ]


def normalize_complexity(value: str | None) -> Complexity:
    if value:
        lowered = value.strip().lower()
        for level in COMPLEXITY_LEVELS:
            if level.lower() == lowered:
                return level
    return DEFAULT_COMPLEXITY


def _clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, value))


def _summary(
    disciplines: list[str],
    keywords: list[str],
    specializations: list[str],
    complexity: Complexity,
    document_type: str,
) -> AnalysisSummary:
    return AnalysisSummary(
        total_terms=len(disciplines) + len(keywords) + len(specializations),
        primary_discipline=disciplines[0] if disciplines else DEFAULT_PRIMARY_DISCIPLINE,
        technical_level=complexity,
        document_category=document_type,
    )


def parse_engineering_reply(reply: str) -> AnalysisResult | None:
    """Validated LLM result, or ``None`` when the reply holds no JSON object."""
    extracted = extract_json_payload(reply)
    if extracted is None:
        return None

    payload, source = extracted
    reader = FieldReader(payload)
    disciplines = dedupe_terms(reader.string_list("disciplines"), min_length=MIN_TERM_LENGTH)
    keywords = dedupe_terms(reader.string_list("keywords"), min_length=MIN_TERM_LENGTH)
    specializations = dedupe_terms(reader.string_list("specializations"), min_length=MIN_TERM_LENGTH)
    complexity = normalize_complexity(reader.string("complexity", DEFAULT_COMPLEXITY))
    document_type = reader.string("documentType", DEFAULT_DOCUMENT_TYPE)
    confidence = _clamp_confidence(
        reader.number("confidence", float(get_scoring_value("analysis.confidence.llm_default", 0.8)))
    )

    result = AnalysisResult(
        disciplines=disciplines,
        keywords=keywords,
        specializations=specializations,
        technical_terms=list(keywords),
        complexity=complexity,
        document_type=document_type,
        confidence=confidence,
        analysis_source=source,
        analysis_summary=_summary(disciplines, keywords, specializations, complexity, document_type),
    )
    result.degraded_fields = report_degraded("engineering", reader)
    return result


def basic_engineering_analysis(text: str) -> AnalysisResult:
    disciplines, keywords = fallback_terms(text)
    return AnalysisResult(
        disciplines=disciplines,
        keywords=keywords,
        specializations=[],
        technical_terms=list(keywords),
        complexity=DEFAULT_COMPLEXITY,
        document_type=DEFAULT_DOCUMENT_TYPE,
        confidence=float(get_scoring_value("analysis.confidence.basic", 0.6)),
        analysis_source="basic",
        analysis_summary=_summary(disciplines, keywords, [], DEFAULT_COMPLEXITY, DEFAULT_DOCUMENT_TYPE),
    )


def request_engineering_analysis(text: str, client: AIClient | None) -> AnalysisResult:
    """Single LLM round trip; any failure lands on the basic analysis."""
    try:
        if client is None:
            raise LLMUnavailableError()
        reply = client.complete(
            build_engineering_prompt(text),
            temperature=ENGINEERING_TEMPERATURE,
            max_tokens=ENGINEERING_MAX_TOKENS,
        )
    except LLMError as exc:
        logger.warning("engineering_analysis_degraded code=%s: %s", exc.code, exc)
        return basic_engineering_analysis(text)

    parsed = parse_engineering_reply(reply)
    if parsed is None:
        logger.info("engineering_reply_unparseable using_basic_analysis=1")
        return basic_engineering_analysis(text)
    return parsed


def analyze_engineering(text: str, client: AIClient | None, page_count: int = 1) -> AnalysisResult:
    cleaned = clean_text(text)
    analysis = request_engineering_analysis(cleaned, client)
    bucket = extract_terms(cleaned)

    disciplines = dedupe_terms(analysis.disciplines + bucket.discipline_titles())
    keywords = dedupe_terms(analysis.keywords + bucket.keywords())
    density = keyword_density(len(keywords), len(document_words(cleaned)))
    score = engineering_score(len(disciplines), len(keywords), page_count, density)

    logger.info(
        "engineering_analysis_done source=%s disciplines=%s keywords=%s score=%.1f",
        analysis.analysis_source,
        len(disciplines),
        len(keywords),
        score,
    )
    return analysis.model_copy(
        update={
            "disciplines": disciplines,
            "keywords": keywords,
            "engineering_score": round(score),
            "analysis_summary": _summary(
                disciplines,
                keywords,
                analysis.specializations,
                analysis.complexity,
                analysis.document_type,
            ),
        }
    )
