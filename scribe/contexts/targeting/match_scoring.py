"""
Job match scoring.

Computes overall/skills/experience fit between a resume and a job posting via one
of two strategies:

1. AI path: a harsh-rubric prompt asks the AI collaborator for a fixed JSON shape,
   parsed leniently (code fences, outermost object, one brace-repair attempt)
2. Fallback path: substring skill matching plus a years-vs-tier experience table

Both paths multiply every sub-score by min(1, content_quality / threshold) and
round half-up, so no amount of AI optimism or keyword overlap lets a
structurally thin resume score high.

Nothing here raises to the caller: AI failures are classified into a
failure_reason and the heuristic result is returned instead.
"""

import json
import math
import re
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Union

from scribe.contexts.intake.job_analysis import analyze_job_posting
from scribe.contexts.intake.job_data_structure import JobRequirement
from scribe.contexts.intake.normalizer import normalize_resume_record
from scribe.contexts.targeting.content_quality import (
    ContentQuality,
    assess_content_quality,
    count_content_items,
)
from scribe.contexts.targeting.logger import (
    _log_debug,
    _log_warning,
    log_ai_failure,
    log_match_result,
    log_quality_assessment,
)
from scribe.contexts.targeting.match_result import MatchResult
from scribe.contexts.targeting.scoring_config import ScoringConfig, get_scoring_config
from scribe.contexts.templating.resume_data_structure import ResumeRecord
from scribe.utils.llm import (
    DEFAULT_FAILURE_REASON,
    LLMProvider,
    classify_failure,
    coerce_string_list,
    parse_json_response,
    strip_markdown_emphasis,
)

_YEAR_PATTERN = re.compile(r"(?<!\d)(\d{4})(?!\d)")
_LEADERSHIP_PATTERN = re.compile(r"lead|manage|supervise|direct|coordinate", re.IGNORECASE)
_QUANTIFIED_PATTERN = re.compile(r"\d+[%+\-$]")

FALLBACK_STRATEGIC_INSIGHTS = (
    "Optimize technical keywords for better ATS visibility",
    "Highlight specific metrics in recent work experience",
    "Align project descriptions with role-specific requirements",
)

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_SYSTEM_PROMPT = """\
You are a professional resume evaluator. Score resumes against job requirements with STRICT STANDARDS.
Return ONLY valid JSON, with no text before or after the object."""

_USER_PROMPT_TEMPLATE = """\
Analyze this resume against the job requirements with STRICT STANDARDS.

IMPORTANT SCORING GUIDELINES:
- Minimal content = LOW scores (10-30%)
- Missing experience = MAJOR penalty
- Generic content = PENALTY
- Strong content + perfect match = High scores (70-90%)
- Be harsh but fair - this is for production use

RESUME CONTENT:
{resume_json}

JOB REQUIREMENTS:
{job_description}

REQUIRED SKILLS: {required_skills}
EXPERIENCE LEVEL: {experience_level}

CONTENT QUALITY ASSESSMENT:
- Work Experience Entries: {experience_count}
- Skills Listed: {skill_count}
- Education Entries: {education_count}
- Total Responsibility/Achievement Items: {content_items}

EVALUATE STRICTLY:
1. If content is minimal (few experiences, generic descriptions) = LOW scores
2. If skills don't match job requirements = PENALTY
3. If experience level is insufficient = MAJOR penalty
4. If resume looks incomplete/template-like = VERY LOW scores

Return ONLY valid JSON (no text before/after):
{{
  "overallMatch": [SCORE 0-100 - BE STRICT],
  "skillsMatch": [SCORE 0-100 - COUNT ACTUAL SKILL MATCHES],
  "experienceMatch": [SCORE 0-100 - ASSESS REAL EXPERIENCE RELEVANCE],
  "matchingSkills": ["only skills that ACTUALLY match"],
  "missingSkills": ["critical skills the resume lacks"],
  "strongPoints": ["genuine strengths found"],
  "improvements": ["specific improvements needed"],
  "keywordAlignment": ["keywords that align"],
  "atsCompatibility": [SCORE 0-100 - BASED ON REAL CONTENT]
}}"""


def build_match_prompt(
    record: ResumeRecord,
    job_description: str,
    requirement: JobRequirement,
    config: ScoringConfig,
) -> str:
    """Build the user prompt for AI match scoring."""
    return _USER_PROMPT_TEMPLATE.format(
        resume_json=json.dumps(record.to_dict(), indent=2),
        job_description=(job_description or "Not provided")[: config.max_prompt_job_chars],
        required_skills=", ".join(requirement.required_skills) or "Not specified",
        experience_level=requirement.experience_level or "Not specified",
        experience_count=len(record.work_experience),
        skill_count=len(record.skills),
        education_count=len(record.education),
        content_items=count_content_items(record, config),
    )


# =============================================================================
# SCORE ARITHMETIC
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative input."""
    return int(math.floor(value + 0.5))


def quality_multiplier(quality_score: float, threshold: float = 70.0) -> float:
    """
    Score multiplier implied by content quality: min(1, quality / threshold).

    Example:
        >>> quality_multiplier(35)
        0.5
    """
    if threshold <= 0:
        return 1.0
    return max(0.0, min(1.0, quality_score / threshold))


def cap_score(raw_score: float, multiplier: float) -> int:
    """Apply the quality multiplier to a raw 0-100 score and round half-up."""
    return round_half_up(raw_score * multiplier)


def coerce_score(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Read an AI-reported score clamped to [0, 100]; booleans and infinities take default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    try:
        score = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(score):
        return default
    return max(0.0, min(100.0, score))


# =============================================================================
# HEURISTIC FALLBACK
# =============================================================================


def find_matching_skills(job_skills: Iterable[str], resume_skills: Iterable[str]):
    """
    Split job skills into (matching, missing).

    A job skill matches when it is a case-insensitive substring of any resume skill.
    """
    resume_lower = [skill.lower() for skill in resume_skills]
    matching, missing = [], []
    for skill in job_skills:
        if any(skill.lower() in resume_skill for resume_skill in resume_lower):
            matching.append(skill)
        else:
            missing.append(skill)
    return matching, missing


def _year_of(value: str) -> Optional[int]:
    matches = _YEAR_PATTERN.findall(value or "")
    return int(matches[-1]) if matches else None


def years_of_experience(record: ResumeRecord, today: Optional[date] = None) -> int:
    """
    Total years worked, summed per work entry as end year minus start year.

    Current roles end this year; entries without a parseable start year count 0.
    """
    today = today or date.today()
    total = 0
    for entry in record.work_experience:
        start_year = _year_of(entry.start_date)
        if start_year is None:
            continue
        end_year = today.year if entry.is_current_job else (_year_of(entry.end_date) or start_year)
        total += max(0, end_year - start_year)
    return total


def calculate_experience_match(
    record: ResumeRecord,
    experience_level: str,
    config: ScoringConfig = None,
    today: Optional[date] = None,
) -> float:
    """
    Experience fit from years worked versus the tier's required years.

    actual >= required: min(100, base + bonus * (actual - required))
    actual <  required: max(floor, actual / required * base)
    """
    config = config or get_scoring_config()
    required = config.tier_years.get(experience_level, config.default_required_years)
    actual = years_of_experience(record, today)
    if actual >= required:
        return min(100, config.experience_base_score + config.experience_bonus_per_year * (actual - required))
    return max(config.experience_floor, actual / required * config.experience_base_score)


def identify_strengths(record: ResumeRecord) -> List[str]:
    strengths = []
    if any(
        _LEADERSHIP_PATTERN.search(responsibility)
        for entry in record.work_experience
        for responsibility in entry.responsibilities
    ):
        strengths.append("Leadership experience")
    if any(
        _QUANTIFIED_PATTERN.search(achievement)
        for entry in record.work_experience
        for achievement in entry.achievements
    ):
        strengths.append("Quantified achievements")
    if record.certifications:
        strengths.append("Professional certifications")
    if record.projects:
        strengths.append("Hands-on project experience")
    if record.education:
        strengths.append("Relevant educational background")
    return strengths


def identify_competitive_advantages(record: ResumeRecord) -> List[str]:
    advantages = []
    if len(record.skills) > 10:
        advantages.append("Diverse skill set")
    if len(record.languages) > 1:
        advantages.append("Multilingual capabilities")
    if record.volunteer_experience:
        advantages.append("Community involvement")
    if record.publications or record.awards:
        advantages.append("Thought leadership and recognition")
    return advantages


def generate_recommendations(
    overall_match: int,
    missing_skills: List[str],
    strong_points: List[str],
) -> List[str]:
    """Actionable advice for the heuristic path."""
    recommendations = []
    if overall_match < 60:
        recommendations.append(
            "Consider gaining experience in the missing skills through projects or training"
        )
    if len(missing_skills) > 5:
        recommendations.append(
            f"Focus on acquiring these high-priority skills: {', '.join(missing_skills[:3])}"
        )
    if strong_points:
        recommendations.append(f"Emphasize your strong points: {', '.join(strong_points)}")
    recommendations.append("Apply to similar roles to increase your chances of success")
    return recommendations


def _quality_recommendations(quality: ContentQuality) -> List[str]:
    return [f"Improve: {issue}" for issue in quality.issues]


def _fallback_result(
    record: ResumeRecord,
    requirement: JobRequirement,
    quality: ContentQuality,
    config: ScoringConfig,
    failure_reason: str,
    provider_failures: List[str],
    today: Optional[date] = None,
) -> MatchResult:
    multiplier = quality_multiplier(quality.score, config.quality_threshold)

    job_skills = requirement.skills
    matching, missing = find_matching_skills(job_skills, record.skill_names())
    raw_skills = round_half_up(len(matching) / len(job_skills) * 100) if job_skills else 0
    raw_experience = calculate_experience_match(record, requirement.experience_level, config, today)
    raw_overall = round_half_up((raw_skills + raw_experience) / 2)

    overall = cap_score(raw_overall, multiplier)
    strengths = identify_strengths(record)

    return MatchResult(
        overall_match=overall,
        skills_match=cap_score(raw_skills, multiplier),
        experience_match=cap_score(raw_experience, multiplier),
        ats_compatibility=cap_score(config.fallback_ats, multiplier),
        matching_skills=matching,
        missing_skills=missing[: config.max_missing_skills],
        strong_points=strengths,
        recommendations=generate_recommendations(overall, missing, strengths)
        + _quality_recommendations(quality),
        keyword_alignment=list(matching),
        competitive_advantage=identify_competitive_advantages(record),
        strategic_insights=list(FALLBACK_STRATEGIC_INSIGHTS),
        mode="fallback",
        confidence="low",
        failure_reason=failure_reason,
        provider_failures=provider_failures,
        content_quality=quality,
    )


# =============================================================================
# AI PATH
# =============================================================================


def _ai_result(data: Mapping[str, Any], quality: ContentQuality, config: ScoringConfig) -> MatchResult:
    """Build a MatchResult from a parsed AI response, validating every field."""
    multiplier = quality_multiplier(quality.score, config.quality_threshold)
    cleaned = strip_markdown_emphasis(dict(data))

    improvements = coerce_string_list(cleaned.get("improvements"))
    strong_points = coerce_string_list(cleaned.get("strongPoints"))
    insights = (
        coerce_string_list(cleaned.get("strategicInsights"))
        or improvements
        or coerce_string_list(cleaned.get("recommendations"))
    )

    return MatchResult(
        overall_match=cap_score(coerce_score(cleaned.get("overallMatch")), multiplier),
        skills_match=cap_score(coerce_score(cleaned.get("skillsMatch")), multiplier),
        experience_match=cap_score(coerce_score(cleaned.get("experienceMatch")), multiplier),
        ats_compatibility=cap_score(
            coerce_score(cleaned.get("atsCompatibility"), config.default_ai_ats), multiplier
        ),
        matching_skills=coerce_string_list(cleaned.get("matchingSkills")),
        missing_skills=coerce_string_list(cleaned.get("missingSkills")),
        strong_points=strong_points,
        recommendations=improvements + _quality_recommendations(quality),
        keyword_alignment=coerce_string_list(cleaned.get("keywordAlignment")),
        competitive_advantage=list(strong_points),
        strategic_insights=insights,
        mode="ai",
        confidence="high" if quality.score >= config.quality_threshold else "medium",
        content_quality=quality,
    )


def _empty_input_result(quality: ContentQuality, missing: str) -> MatchResult:
    return MatchResult(
        recommendations=[
            f"Provide {missing} to calculate a job match score",
            *_quality_recommendations(quality),
        ],
        mode="fallback",
        confidence="low",
        content_quality=quality,
    )


# =============================================================================
# PUBLIC API
# =============================================================================


async def calculate_job_match(
    resume: Union[ResumeRecord, Mapping[str, Any]],
    job_description: str,
    job_requirement: Optional[JobRequirement] = None,
    provider: Optional[LLMProvider] = None,
    config: Optional[ScoringConfig] = None,
    today: Optional[date] = None,
) -> MatchResult:
    """
    Score how well a resume matches a job posting.

    Args:
        resume: ResumeRecord or raw resume mapping
        job_description: Raw job posting text
        job_requirement: Pre-extracted requirements (extracted from job_description
                         through the AI collaborator when omitted)
        provider: AI collaborator; None selects the heuristic path
        config: Scoring calibration (default: process-wide config)
        today: Reference date for years-of-experience (default: date.today())

    Returns:
        MatchResult (never raises)
    """
    config = config or get_scoring_config()
    record = normalize_resume_record(resume)
    quality = assess_content_quality(record, config)
    log_quality_assessment(quality, quality_multiplier(quality.score, config.quality_threshold))

    job_text = (job_description or "").strip()
    if record.is_empty():
        _log_warning("Job match requested for an empty resume; returning score 0")
        return _empty_input_result(quality, "resume content")
    if not job_text and (job_requirement is None or job_requirement.is_empty()):
        _log_warning("Job match requested without job input; returning score 0")
        return _empty_input_result(quality, "a job description")

    if job_requirement is None:
        job_requirement = await analyze_job_posting(job_text, provider=provider)

    if provider is None:
        result = _fallback_result(
            record, job_requirement, quality, config, DEFAULT_FAILURE_REASON, [], today
        )
        log_match_result(result)
        return result

    try:
        response = await provider.generate(
            system_prompt=_SYSTEM_PROMPT,
            user_prompt=build_match_prompt(record, job_text, job_requirement, config),
        )
    except Exception as e:
        failure_reason, provider_failures = classify_failure(e, provider.provider_prefix)
        log_ai_failure(failure_reason, provider_failures, e)
        result = _fallback_result(
            record, job_requirement, quality, config, failure_reason, provider_failures, today
        )
        log_match_result(result)
        return result

    parsed = parse_json_response(response.content)
    if not parsed.ok:
        provider_failures = [f"{provider.provider_prefix}_malformed_response"]
        log_ai_failure(DEFAULT_FAILURE_REASON, provider_failures, parsed.error)
        result = _fallback_result(
            record, job_requirement, quality, config, DEFAULT_FAILURE_REASON, provider_failures, today
        )
        log_match_result(result)
        return result

    if parsed.repaired:
        _log_debug("AI match response required brace repair")
    result = _ai_result(parsed.data, quality, config)
    log_match_result(result)
    return result


async def get_job_match_score(
    resume: Union[ResumeRecord, Mapping[str, Any]],
    job_description: str,
    provider: Optional[LLMProvider] = None,
    config: Optional[ScoringConfig] = None,
) -> dict:
    """
    Quick match summary without a full optimization run.

    Returns:
        Dict with matchScore, keyFindings, keywordAlignment, missingKeywords,
        recommendations, skillsMatch, experienceMatch, mode and confidence
    """
    requirement = await analyze_job_posting(job_description or "", provider=provider)
    match = await calculate_job_match(
        resume, job_description, job_requirement=requirement, provider=provider, config=config
    )
    return {
        "matchScore": match.overall_match,
        "keyFindings": [
            f"Skills match: {match.skills_match}%",
            f"Experience match: {match.experience_match}%",
            f"Missing {len(match.missing_skills)} key skills",
            f"{len(match.competitive_advantage)} competitive advantages identified",
        ],
        "keywordAlignment": match.keyword_alignment,
        "missingKeywords": match.missing_skills,
        "recommendations": match.recommendations,
        "skillsMatch": match.skills_match,
        "experienceMatch": match.experience_match,
        "mode": match.mode,
        "confidence": match.confidence,
    }
