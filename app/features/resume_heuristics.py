from __future__ import annotations

import re

from app.core.config.scoring import get_scoring_value
from app.schemas.resume import EducationItem, ExperienceItem, ParsedResume, ResumeGap

from .term_extractor import dedupe_terms

COMMON_SKILLS = (
    "JavaScript",
    "Python",
    "Java",
    "React",
    "Node.js",
    "SQL",
    "MongoDB",
    "AWS",
    "Docker",
    "Kubernetes",
    "Git",
    "TypeScript",
    "Angular",
    "Vue.js",
    "Machine Learning",
    "AI",
    "Data Analysis",
    "Project Management",
    "Leadership",
)

_DURATION = r"(?P<duration>(?:19|20)\d{2}\s*[-–]\s*(?:(?:19|20)\d{2}|present|current)|present)"
_EXPERIENCE_PATTERNS = (
    re.compile(rf"^(?P<title>.+?)\s+[-–|]\s+(?P<company>.+?)[\s,(]+{_DURATION}\)?\s*$", re.IGNORECASE),
    re.compile(rf"^(?P<title>.+?)\s+at\s+(?P<company>.+?)[\s,(]+{_DURATION}\)?\s*$", re.IGNORECASE),
)
_EDUCATION_PATTERNS = (
    re.compile(
        r"^(?P<degree>.+?)\s+(?:[-–|]|from)\s+(?P<institution>.+?)[\s,(]+(?P<year>(?:19|20)\d{2})\)?\s*$",
        re.IGNORECASE,
    ),
)
_SKILL_LIST_RE = re.compile(
    r"^\s*(?:technical\s+)?(?:skills?|technologies|languages?)\s*[:\-]\s*(?P<items>.+)$",
    re.IGNORECASE | re.MULTILINE,
)
_ACHIEVEMENT_RE = re.compile(r"\b(?:achieved|improved|increased|decreased|led|managed)\b", re.IGNORECASE)


def _contains_term(lowered_text: str, term: str) -> bool:
    return re.search(rf"(?<![\w.+]){re.escape(term.lower())}(?![\w+])", lowered_text) is not None


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def extract_skills(text: str) -> list[str]:
    lowered = text.lower()
    found = [skill for skill in COMMON_SKILLS if _contains_term(lowered, skill)]
    for match in _SKILL_LIST_RE.finditer(text):
        items = re.split(r"[,;|]", match.group("items").split(".")[0])
        found.extend(item.strip() for item in items if len(item.strip()) > 2)
    return dedupe_terms(found)


def extract_experience(text: str) -> list[ExperienceItem]:
    items: list[ExperienceItem] = []
    for line in _lines(text):
        for pattern in _EXPERIENCE_PATTERNS:
            match = pattern.match(line)
            if match:
                items.append(
                    ExperienceItem(
                        title=match.group("title").strip(),
                        company=match.group("company").strip(" ,-–|"),
                        duration=match.group("duration").strip(),
                    )
                )
                break
    return items


def extract_education(text: str) -> list[EducationItem]:
    items: list[EducationItem] = []
    for line in _lines(text):
        if any(pattern.match(line) for pattern in _EXPERIENCE_PATTERNS):
            continue
        for pattern in _EDUCATION_PATTERNS:
            match = pattern.match(line)
            if match:
                items.append(
                    EducationItem(
                        degree=match.group("degree").strip(),
                        institution=match.group("institution").strip(" ,-–|"),
                        year=match.group("year"),
                    )
                )
                break
    return items


def extract_achievements(text: str, limit: int | None = None) -> list[str]:
    achievements = [line for line in _lines(text) if _ACHIEVEMENT_RE.search(line)]
    return achievements[:limit] if limit is not None else achievements


def analyze_gaps(text: str, experience: list[ExperienceItem] | None = None) -> list[ResumeGap]:
    lowered = text.lower()
    gaps: list[ResumeGap] = []

    missing = [skill for skill in COMMON_SKILLS if not _contains_term(lowered, skill)]
    if missing:
        gaps.append(
            ResumeGap(
                type="skill",
                description=f"Missing common skills: {', '.join(missing[:5])}",
                severity="high" if len(missing) > 3 else "medium",
            )
        )

    if experience is None:
        experience = extract_experience(text)
    if not experience:
        gaps.append(ResumeGap(type="experience", description="No work experience found", severity="high"))
    return gaps


def generate_suggestions(text: str) -> list[str]:
    lowered = text.lower()
    suggestions: list[str] = []
    if "linkedin" not in lowered:
        suggestions.append("Add LinkedIn profile URL")
    if "github" not in lowered:
        suggestions.append("Add GitHub profile URL")
    if "achievement" not in lowered and "result" not in lowered:
        suggestions.append("Add quantifiable achievements and results")
    if len(lowered.split()) < int(get_scoring_value("resume.min_words", 200)):
        suggestions.append("Consider adding more detailed descriptions")
    return suggestions


def build_parsed_resume(text: str) -> ParsedResume:
    experience = extract_experience(text)
    return ParsedResume(
        text=text,
        skills=extract_skills(text),
        experience=experience,
        education=extract_education(text),
        achievements=extract_achievements(text),
        gaps=analyze_gaps(text, experience),
        suggestions=generate_suggestions(text),
    )
