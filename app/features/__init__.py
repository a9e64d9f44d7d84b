from .document_stats import DocumentStats, compute_document_stats, describe_extraction, quality_warning
from .resume_heuristics import build_parsed_resume
from .scoring import engineering_score, keyword_density
from .term_extractor import TermBucket, extract_terms, fallback_terms

__all__ = [
    "DocumentStats",
    "compute_document_stats",
    "describe_extraction",
    "quality_warning",
    "build_parsed_resume",
    "engineering_score",
    "keyword_density",
    "TermBucket",
    "extract_terms",
    "fallback_terms",
]
