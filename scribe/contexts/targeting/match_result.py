"""
Job match result data structure.

MatchResult is returned to callers, never persisted. to_dict() produces the
camelCase JSON shape the API layer serializes directly.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from scribe.contexts.targeting.content_quality import ContentQuality

MODES = ("ai", "fallback")
CONFIDENCE_LEVELS = ("high", "medium", "low")


@dataclass
class MatchResult:
    """
    Resume/job fit estimate, capped by content quality.

    Attributes:
        overall_match: 0-100 overall fit
        skills_match: 0-100 skills fit
        experience_match: 0-100 experience fit
        ats_compatibility: 0-100 ATS compatibility estimate
        matching_skills: Job skills the resume covers
        missing_skills: Job skills the resume lacks
        strong_points: Candidate strengths
        recommendations: Actionable advice (quality issues appended as "Improve: ...")
        keyword_alignment: Job keywords the resume already uses
        competitive_advantage: Differentiators beyond the job requirements
        strategic_insights: Higher-level positioning advice
        mode: "ai" or "fallback" (which path produced the scores)
        confidence: "high", "medium" or "low"
        failure_reason: Classified AI failure when mode is "fallback"
        provider_failures: Provider-tagged failure codes (e.g., "openai_quota")
        content_quality: Quality assessment that gated the scores
    """

    overall_match: int = 0
    skills_match: int = 0
    experience_match: int = 0
    ats_compatibility: int = 0
    matching_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    strong_points: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    keyword_alignment: List[str] = field(default_factory=list)
    competitive_advantage: List[str] = field(default_factory=list)
    strategic_insights: List[str] = field(default_factory=list)
    mode: str = "fallback"
    confidence: str = "low"
    failure_reason: Optional[str] = None
    provider_failures: List[str] = field(default_factory=list)
    content_quality: Optional[ContentQuality] = None

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.confidence not in CONFIDENCE_LEVELS:
            raise ValueError(f"confidence must be one of {CONFIDENCE_LEVELS}, got {self.confidence!r}")

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the API JSON shape.

        Includes overallScore (alias of overallMatch), missingKeywords (alias of
        missingSkills) and addedKeywords (alias of keywordAlignment).
        """
        data: Dict[str, Any] = {
            "overallMatch": self.overall_match,
            "overallScore": self.overall_match,
            "skillsMatch": self.skills_match,
            "experienceMatch": self.experience_match,
            "matchingSkills": list(self.matching_skills),
            "missingSkills": list(self.missing_skills),
            "missingKeywords": list(self.missing_skills),
            "addedKeywords": list(self.keyword_alignment),
            "strongPoints": list(self.strong_points),
            "recommendations": list(self.recommendations),
            "atsCompatibility": self.ats_compatibility,
            "competitiveAdvantage": list(self.competitive_advantage),
            "keywordAlignment": list(self.keyword_alignment),
            "strategicInsights": list(self.strategic_insights),
            "mode": self.mode,
            "confidence": self.confidence,
        }
        if self.failure_reason:
            data["failureReason"] = self.failure_reason
            data["providerFailures"] = list(self.provider_failures)
        if self.content_quality is not None:
            data["contentQuality"] = self.content_quality.to_dict()
        return data
