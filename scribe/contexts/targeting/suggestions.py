"""
Suggestion generation for optimized resumes.

Two pure functions compare an original resume with its AI-optimized version:

- generate_enhancement_suggestions(): per-section diff records
  ({field, type, original, suggested, reason}) for a review UI
- generate_optimization_suggestions(): prioritized section-level advice, including
  job skills the resume still lacks

Neither function has side effects; both accept raw mappings or ResumeRecords.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from scribe.contexts.intake.job_data_structure import JobRequirement
from scribe.contexts.intake.normalizer import normalize_resume_record
from scribe.contexts.targeting.match_scoring import find_matching_skills
from scribe.contexts.templating.resume_data_structure import ResumeRecord

ResumeInput = Union[ResumeRecord, Mapping[str, Any]]

SUGGESTION_TYPES = ("improvement", "addition", "removal")

# (API section name, record attribute) in review order
REVIEWED_SECTIONS = (
    ("personalInfo", "personal_info"),
    ("professionalSummary", "professional_summary"),
    ("workExperience", "work_experience"),
    ("education", "education"),
    ("skills", "skills"),
    ("projects", "projects"),
)

SECTION_REASONS = {
    "personalInfo": {
        "improvement": "Refined contact details and professional title for the target role",
        "addition": "Added missing contact details",
        "removal": "Removed contact details irrelevant to the application",
    },
    "professionalSummary": {
        "improvement": "Rewrote summary to lead with job-relevant keywords and measurable results",
        "addition": "Added a professional summary tailored to the target role",
        "removal": "Removed summary that did not support the target role",
    },
    "workExperience": {
        "improvement": "Enhanced achievements with measurable impact and stronger action verbs",
        "addition": "Added experience entry relevant to the target role",
        "removal": "Removed experience entry with little relevance to the target role",
    },
    "education": {
        "improvement": "Clarified degree details and highlighted relevant coursework",
        "addition": "Added education entry supporting the role requirements",
        "removal": "Removed redundant education entry",
    },
    "skills": {
        "improvement": "Aligned skill naming with job posting terminology",
        "addition": "Added skill mentioned in the job posting",
        "removal": "Removed skill unrelated to the target role",
    },
    "projects": {
        "improvement": "Highlighted technologies and outcomes relevant to the target role",
        "addition": "Added project demonstrating required skills",
        "removal": "Removed project with little relevance to the target role",
    },
}

MAX_SUGGESTED_SKILLS = 5


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class EnhancementSuggestion:
    """
    One reviewable change between original and optimized content.

    Attributes:
        field: Location of the change (e.g., "workExperience[0]", "personalInfo.email")
        type: "improvement", "addition" or "removal"
        original: Original value (None for additions)
        suggested: Optimized value (None for removals)
        reason: Human-readable explanation of the change
    """

    field: str
    type: str
    original: Any
    suggested: Any
    reason: str

    def __post_init__(self):
        if self.type not in SUGGESTION_TYPES:
            raise ValueError(f"Suggestion type must be one of {SUGGESTION_TYPES}, got {self.type!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "type": self.type,
            "original": self.original,
            "suggested": self.suggested,
            "reason": self.reason,
        }


@dataclass
class SectionSuggestions:
    suggestions: List[EnhancementSuggestion] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.suggestions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestions": [suggestion.to_dict() for suggestion in self.suggestions],
            "hasChanges": self.has_changes,
        }


@dataclass
class OptimizationSuggestion:
    """
    Section-level optimization advice.

    Attributes:
        section: Resume section the advice targets ("summary", "experience", ...)
        priority: "high", "medium" or "low"
        suggestion: What changed or should change
        reasoning: Why it matters
        impact: "increase_match", "boost_ranking" or "improve_ats"
        applied: True when the optimized resume already contains the change
    """

    section: str
    priority: str
    suggestion: str
    reasoning: str
    impact: str
    applied: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "section": self.section,
            "priority": self.priority,
            "suggestion": self.suggestion,
            "reasoning": self.reasoning,
            "impact": self.impact,
            "applied": self.applied,
        }


# =============================================================================
# ENHANCEMENT DIFF
# =============================================================================


def _suggestion(section: str, location: str, change_type: str, original: Any, suggested: Any):
    return EnhancementSuggestion(
        field=location,
        type=change_type,
        original=original,
        suggested=suggested,
        reason=SECTION_REASONS[section][change_type],
    )


def _diff_mapping(section: str, original: Dict[str, Any], optimized: Dict[str, Any]):
    """Field-by-field diff of a flat mapping (used for personalInfo)."""
    suggestions = []
    for key in list(original) + [key for key in optimized if key not in original]:
        before = original.get(key) or ""
        after = optimized.get(key) or ""
        if before == after:
            continue
        if not before:
            change_type = "addition"
        elif not after:
            change_type = "removal"
        else:
            change_type = "improvement"
        suggestions.append(
            _suggestion(section, f"{section}.{key}", change_type, before or None, after or None)
        )
    return suggestions


def _diff_text(section: str, original: str, optimized: str):
    original, optimized = original.strip(), optimized.strip()
    if original == optimized:
        return []
    if not original:
        return [_suggestion(section, section, "addition", None, optimized)]
    if not optimized:
        return [_suggestion(section, section, "removal", original, None)]
    return [_suggestion(section, section, "improvement", original, optimized)]


def _diff_entries(section: str, original: List[Dict], optimized: List[Dict]):
    """Position-by-position diff of an entry collection."""
    suggestions = []
    for index in range(max(len(original), len(optimized))):
        location = f"{section}[{index}]"
        if index >= len(original):
            suggestions.append(_suggestion(section, location, "addition", None, optimized[index]))
        elif index >= len(optimized):
            suggestions.append(_suggestion(section, location, "removal", original[index], None))
        elif original[index] != optimized[index]:
            suggestions.append(
                _suggestion(section, location, "improvement", original[index], optimized[index])
            )
    return suggestions


def _diff_skills(original: List[Dict], optimized: List[Dict]):
    """Diff skills by name so reordering alone is not reported as a change."""
    section = "skills"
    before = OrderedDict((skill["name"].strip().lower(), skill) for skill in original if skill["name"].strip())
    after = OrderedDict((skill["name"].strip().lower(), skill) for skill in optimized if skill["name"].strip())

    suggestions = []
    for key, skill in after.items():
        if key not in before:
            suggestions.append(_suggestion(section, f"skills.{skill['name']}", "addition", None, skill))
        elif before[key] != skill:
            suggestions.append(
                _suggestion(section, f"skills.{skill['name']}", "improvement", before[key], skill)
            )
    for key, skill in before.items():
        if key not in after:
            suggestions.append(_suggestion(section, f"skills.{skill['name']}", "removal", skill, None))
    return suggestions


def generate_enhancement_suggestions(
    original: ResumeInput, optimized: ResumeInput
) -> "OrderedDict[str, SectionSuggestions]":
    """
    Compare original and optimized resumes section by section.

    Args:
        original: Resume before optimization
        optimized: Resume after optimization

    Returns:
        Ordered mapping of section name (personalInfo, professionalSummary,
        workExperience, education, skills, projects) to SectionSuggestions.
        Every section is present; unchanged sections have has_changes False.
    """
    before = normalize_resume_record(original).to_dict()
    after = normalize_resume_record(optimized).to_dict()

    result: "OrderedDict[str, SectionSuggestions]" = OrderedDict()
    for section, _ in REVIEWED_SECTIONS:
        if section == "personalInfo":
            suggestions = _diff_mapping(section, before[section], after[section])
        elif section == "professionalSummary":
            suggestions = _diff_text(section, before[section], after[section])
        elif section == "skills":
            suggestions = _diff_skills(before[section], after[section])
        else:
            suggestions = _diff_entries(section, before[section], after[section])
        result[section] = SectionSuggestions(suggestions=suggestions)
    return result


# =============================================================================
# OPTIMIZATION ADVICE
# =============================================================================


def generate_optimization_suggestions(
    original: ResumeInput,
    optimized: ResumeInput,
    requirement: Optional[JobRequirement] = None,
) -> List[OptimizationSuggestion]:
    """
    Prioritized section-level advice for a job-targeted optimization.

    Changed summary, experience and projects sections are reported as applied
    improvements. Required job skills missing from the optimized resume are
    reported as a not-yet-applied skills suggestion (top five).
    A general ATS note is always included.
    """
    before = normalize_resume_record(original)
    after = normalize_resume_record(optimized)
    requirement = requirement or JobRequirement.empty()
    suggestions: List[OptimizationSuggestion] = []

    if after.professional_summary.strip() != before.professional_summary.strip():
        suggestions.append(
            OptimizationSuggestion(
                section="summary",
                priority="high",
                suggestion="Enhanced professional summary with job-relevant keywords and quantifiable achievements",
                reasoning="AI optimization improved summary to better match job requirements and include industry keywords",
                impact="increase_match",
                applied=True,
            )
        )

    if after.to_dict()["workExperience"] != before.to_dict()["workExperience"]:
        suggestions.append(
            OptimizationSuggestion(
                section="experience",
                priority="high",
                suggestion="Optimized work experience bullet points with stronger action verbs and quantified results",
                reasoning="Enhanced achievements to better align with job requirements and demonstrate impact",
                impact="boost_ranking",
                applied=True,
            )
        )

    _, missing = find_matching_skills(requirement.required_skills, after.skill_names())
    if missing:
        suggestions.append(
            OptimizationSuggestion(
                section="skills",
                priority="medium",
                suggestion=f"Consider adding these relevant skills: {', '.join(missing[:MAX_SUGGESTED_SKILLS])}",
                reasoning="These skills are mentioned in the job posting but not prominently featured in your resume",
                impact="improve_ats",
                applied=False,
            )
        )

    if after.to_dict()["projects"] != before.to_dict()["projects"]:
        suggestions.append(
            OptimizationSuggestion(
                section="projects",
                priority="medium",
                suggestion="Enhanced project descriptions to highlight relevant technologies and outcomes",
                reasoning="Project descriptions were optimized to better showcase skills relevant to the target role",
                impact="increase_match",
                applied=True,
            )
        )

    suggestions.append(
        OptimizationSuggestion(
            section="general",
            priority="high",
            suggestion="Applied ATS optimization techniques including keyword integration and formatting improvements",
            reasoning="Standardized template ensures ATS compatibility while AI enhancement adds relevant keywords",
            impact="improve_ats",
            applied=True,
        )
    )
    return suggestions
