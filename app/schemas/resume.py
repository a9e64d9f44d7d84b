from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from .analysis import AnalysisSource
from .base import CamelModel

Severity = Literal["low", "medium", "high"]
GapType = Literal["skill", "experience", "education"]


class ResumeAnalysisRequest(CamelModel):
    text: str = Field(min_length=1, max_length=120000)
    target_role: str | None = Field(default=None, max_length=200)


class SkillsAssessment(CamelModel):
    technical: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ExperienceAssessment(CamelModel):
    summary: str = "No experience summary provided"
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class EducationAssessment(CamelModel):
    analysis: str = "No education analysis provided"
    relevance: str = "No relevance assessment provided"
    suggestions: list[str] = Field(default_factory=list)


class AchievementsAssessment(CamelModel):
    identified: list[str] = Field(default_factory=list)
    missed: list[str] = Field(default_factory=list)
    impact: str = "No impact assessment provided"


class _GapItem(CamelModel):
    severity: Severity = "medium"

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class SkillGap(_GapItem):
    skill: str
    reason: str = ""


class ExperienceGap(_GapItem):
    gap: str
    suggestion: str = ""


class EducationGap(_GapItem):
    gap: str
    suggestion: str = ""


class GapsAssessment(CamelModel):
    skill_gaps: list[SkillGap] = Field(default_factory=list)
    experience_gaps: list[ExperienceGap] = Field(default_factory=list)
    education_gaps: list[EducationGap] = Field(default_factory=list)


class OverallAssessment(CamelModel):
    score: float = Field(default=70, ge=0, le=100)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    industry_fit: str = "No industry fit assessment provided"
    job_fit: str = "No job fit assessment provided"


class ResumeAnalysis(CamelModel):
    skills: SkillsAssessment = Field(default_factory=SkillsAssessment)
    experience: ExperienceAssessment = Field(default_factory=ExperienceAssessment)
    education: EducationAssessment = Field(default_factory=EducationAssessment)
    achievements: AchievementsAssessment = Field(default_factory=AchievementsAssessment)
    gaps: GapsAssessment = Field(default_factory=GapsAssessment)
    overall: OverallAssessment = Field(default_factory=OverallAssessment)
    analysis_source: AnalysisSource = "basic"
    degraded_fields: list[str] = Field(default_factory=list)


class ExperienceItem(CamelModel):
    title: str
    company: str
    duration: str
    description: str = ""
    skills: list[str] = Field(default_factory=list)


class EducationItem(CamelModel):
    degree: str
    institution: str
    year: str
    gpa: str | None = None


class ResumeGap(CamelModel):
    type: GapType
    description: str
    severity: Severity


class ParsedResume(CamelModel):
    text: str
    skills: list[str] = Field(default_factory=list)
    experience: list[ExperienceItem] = Field(default_factory=list)
    education: list[EducationItem] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    gaps: list[ResumeGap] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    llm_analysis: ResumeAnalysis | None = None
