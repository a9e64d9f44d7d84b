from __future__ import annotations

import logging
import re

from app.ai.config import load_ai_config
from app.ai.types import AIClient, ChatMessage
from app.core.config.scoring import get_scoring_value
from app.core.errors import LLMError, LLMUnavailableError
from app.features.resume_heuristics import extract_achievements
from app.schemas.resume import (
    AchievementsAssessment,
    EducationAssessment,
    EducationGap,
    ExperienceAssessment,
    ExperienceGap,
    GapsAssessment,
    OverallAssessment,
    ResumeAnalysis,
    SkillGap,
    SkillsAssessment,
)

from .llm_parsing import FieldReader, extract_json_payload, report_degraded, truncate_for_prompt

logger = logging.getLogger(__name__)

RESUME_TEMPERATURE = 0.3
RESUME_MAX_TOKENS = 4000

SYSTEM_PROMPT = (
    "You are an expert resume analyst and career advisor. "
    "Analyze resumes and provide detailed, actionable feedback in JSON format."
)

RESPONSE_SCHEMA = """{
  "skills": {
    "technical": ["skill1", "skill2"],
    "soft": ["skill1", "skill2"],
    "missing": ["skill1", "skill2"],
    "recommendations": ["recommendation1", "recommendation2"]
  },
  "experience": {
    "summary": "Brief summary of experience",
    "strengths": ["strength1", "strength2"],
    "weaknesses": ["weakness1", "weakness2"],
    "suggestions": ["suggestion1", "suggestion2"]
  },
  "education": {
    "analysis": "Analysis of education background",
    "relevance": "How relevant is the education to the target role",
    "suggestions": ["suggestion1", "suggestion2"]
  },
  "achievements": {
    "identified": ["achievement1", "achievement2"],
    "missed": ["missed achievement1", "missed achievement2"],
    "impact": "Overall impact assessment"
  },
  "gaps": {
    "skillGaps": [{"skill": "skill name", "severity": "high", "reason": "why this gap exists"}],
    "experienceGaps": [{"gap": "gap description", "severity": "medium", "suggestion": "how to address"}],
    "educationGaps": [{"gap": "gap description", "severity": "low", "suggestion": "how to address"}]
  },
  "overall": {
    "score": 85,
    "strengths": ["strength1", "strength2"],
    "weaknesses": ["weakness1", "weakness2"],
    "recommendations": ["recommendation1", "recommendation2"],
    "industryFit": "How well does this resume fit the industry",
    "jobFit": "How well does this resume fit the target role"
  }
}"""

BASIC_SKILLS = (
    "javascript",
    "python",
    "java",
    "react",
    "node.js",
    "sql",
    "mongodb",
    "aws",
    "docker",
    "kubernetes",
    "git",
    "agile",
    "scrum",
    "typescript",
    "html",
    "css",
    "angular",
    "vue.js",
    "php",
    "ruby",
    "go",
    "rust",
    "machine learning",
    "ai",
    "data science",
    "tableau",
    "power bi",
)
NON_TECHNICAL_SKILLS = frozenset({"agile", "scrum"})
CORE_SOFT_SKILLS = ("Communication", "Leadership", "Problem Solving")


def build_resume_prompt(resume_text: str, target_role: str | None = None, *, budget: int | None = None) -> list[ChatMessage]:
    role = (target_role or "").strip()
    if role:
        role_context = (
            f"Analyze this resume specifically for a {role} position. Focus on how well the candidate "
            "fits this role and what improvements would make them more competitive."
        )
    else:
        role_context = "Analyze this resume for general career opportunities."

    if budget is None:
        budget = load_ai_config().text_budget
    excerpt = truncate_for_prompt(resume_text, budget)

    user_prompt = f"""You are an expert resume analyst and career advisor. {role_context}

RESUME TEXT:
{excerpt}

Please analyze this resume and provide a comprehensive assessment. Respond ONLY with valid JSON in the following format:

{RESPONSE_SCHEMA}

IMPORTANT:
- Respond ONLY with valid JSON. Do not include any explanatory text before or after the JSON.
- Ensure all arrays contain at least 2-3 items where applicable.
- Provide specific, actionable feedback.
- Score should be 0-100 based on overall resume quality and fit for the target role.
- Be honest but constructive in your assessment."""

    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=user_prompt),
    ]


def _clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))


def parse_resume_reply(reply: str, resume_text: str) -> ResumeAnalysis:
    extracted = extract_json_payload(reply)
    if extracted is None:
        logger.info("resume_reply_unparseable using_basic_analysis=1")
        return generate_basic_analysis(resume_text)

    payload, source = extracted
    reader = FieldReader(payload)
    skills = reader.child("skills")
    experience = reader.child("experience")
    education = reader.child("education")
    achievements = reader.child("achievements")
    gaps = reader.child("gaps")
    overall = reader.child("overall")
    default_score = float(get_scoring_value("resume.score.llm_default", 70))

    analysis = ResumeAnalysis(
        skills=SkillsAssessment(
            technical=skills.string_list("technical"),
            soft=skills.string_list("soft"),
            missing=skills.string_list("missing"),
            recommendations=skills.string_list("recommendations"),
        ),
        experience=ExperienceAssessment(
            summary=experience.string("summary", "No experience summary provided"),
            strengths=experience.string_list("strengths"),
            weaknesses=experience.string_list("weaknesses"),
            suggestions=experience.string_list("suggestions"),
        ),
        education=EducationAssessment(
            analysis=education.string("analysis", "No education analysis provided"),
            relevance=education.string("relevance", "No relevance assessment provided"),
            suggestions=education.string_list("suggestions"),
        ),
        achievements=AchievementsAssessment(
            identified=achievements.string_list("identified"),
            missed=achievements.string_list("missed"),
            impact=achievements.string("impact", "No impact assessment provided"),
        ),
        gaps=GapsAssessment(
            skill_gaps=gaps.model_list("skillGaps", SkillGap),
            experience_gaps=gaps.model_list("experienceGaps", ExperienceGap),
            education_gaps=gaps.model_list("educationGaps", EducationGap),
        ),
        overall=OverallAssessment(
            score=_clamp_score(overall.number("score", default_score)),
            strengths=overall.string_list("strengths"),
            weaknesses=overall.string_list("weaknesses"),
            recommendations=overall.string_list("recommendations"),
            industry_fit=overall.string("industryFit", "No industry fit assessment provided"),
            job_fit=overall.string("jobFit", "No job fit assessment provided"),
        ),
        analysis_source=source,
    )
    analysis.degraded_fields = report_degraded("resume", reader)
    return analysis


def _basic_skills(lowered: str) -> list[str]:
    return [
        skill
        for skill in BASIC_SKILLS
        if re.search(rf"(?<![\w.+]){re.escape(skill)}(?![\w+])", lowered)
    ]


def generate_basic_analysis(resume_text: str) -> ResumeAnalysis:
    """Deterministic analysis used whenever the LLM path yields nothing usable."""
    lowered = resume_text.lower()
    skills = _basic_skills(lowered)
    return ResumeAnalysis(
        skills=SkillsAssessment(
            technical=[skill for skill in skills if skill not in NON_TECHNICAL_SKILLS],
            soft=[skill for skill in skills if skill in NON_TECHNICAL_SKILLS],
            missing=[skill for skill in CORE_SOFT_SKILLS if skill.lower() not in lowered],
            recommendations=["Add quantifiable achievements", "Include specific metrics"],
        ),
        experience=ExperienceAssessment(
            summary="Basic experience analysis completed",
            strengths=["Experience detected"],
            weaknesses=["Limited detail in analysis"],
            suggestions=["Consider using AI-powered analysis for detailed insights"],
        ),
        education=EducationAssessment(
            analysis="Education section detected",
            relevance="Standard education assessment",
            suggestions=["Highlight relevant coursework"],
        ),
        achievements=AchievementsAssessment(
            identified=extract_achievements(resume_text, limit=3),
            missed=["Quantifiable results", "Specific metrics"],
            impact="Limited impact assessment available",
        ),
        gaps=GapsAssessment(),
        overall=OverallAssessment(
            score=float(get_scoring_value("resume.score.basic", 60)),
            strengths=["Resume structure detected"],
            weaknesses=["Limited detailed analysis"],
            recommendations=["Use AI-powered analysis for comprehensive insights"],
            industry_fit="Standard industry assessment",
            job_fit="Standard job fit assessment",
        ),
        analysis_source="basic",
    )


def analyze_resume(resume_text: str, target_role: str | None, client: AIClient | None) -> ResumeAnalysis:
    logger.info(
        "resume_analysis_start chars=%s role=%s provider=%s",
        len(resume_text),
        target_role or "general",
        client.name if client else "none",
    )
    try:
        if client is None:
            raise LLMUnavailableError()
        reply = client.complete(
            build_resume_prompt(resume_text, target_role),
            temperature=RESUME_TEMPERATURE,
            max_tokens=RESUME_MAX_TOKENS,
        )
    except LLMError as exc:
        logger.warning("resume_analysis_degraded code=%s: %s", exc.code, exc)
        return generate_basic_analysis(resume_text)

    return parse_resume_reply(reply, resume_text)
