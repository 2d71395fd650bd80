"""
AI-backed job posting analysis.

Turns free-text job descriptions (or job URLs handed to the AI collaborator) into
a structured JobRequirement. Every failure path (no provider, provider error,
unparseable response, blocked URL) degrades to the all-empty requirement set
with experience level "mid" so downstream scoring still runs.
"""

import json
from typing import Any, Optional
from urllib.parse import urlparse

from scribe.contexts.intake.job_data_structure import (
    JobRequirement,
    collapse_text,
    normalize_experience_level,
)
from scribe.contexts.intake.logger import (
    _log_debug,
    _log_warning,
    log_job_analysis_fallback,
    log_job_analysis_result,
)
from scribe.utils.llm import LLMProvider, coerce_string_list, parse_json_response

# Job text beyond this many characters is not sent to the AI collaborator
MAX_JOB_TEXT_CHARS = 3000

# Hostname fragments never analyzed
BLOCKED_HOST_FRAGMENTS = ("localhost", "127.0.0.1", "internal", "admin")
ALLOWED_URL_SCHEMES = ("http", "https")

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_SYSTEM_PROMPT = """\
You are a job posting analyst. Extract structured hiring requirements for resume optimization.
Return ONLY a JSON object, with no markdown formatting or explanations."""

_USER_PROMPT_TEMPLATE = """\
Analyze this job posting and extract key information for resume optimization.

JOB TITLE: {job_title}

JOB DESCRIPTION:
{content}

Extract and return the following information in JSON format:
{{
  "requiredSkills": ["skill1", "skill2"],
  "preferredSkills": ["skill1", "skill2"],
  "experienceLevel": "entry|mid|senior|executive",
  "industries": ["industry1", "industry2"],
  "responsibilities": ["responsibility1", "responsibility2"],
  "qualifications": ["qualification1", "qualification2"],
  "keywords": ["keyword1", "keyword2"]
}}

Focus on:
- Technical skills and technologies mentioned
- Years of experience required
- Industry-specific terms
- Key responsibilities and requirements
- Educational qualifications
- Certifications mentioned

Return only valid JSON:"""

_URL_PROMPT_TEMPLATE = """\
Visit this job posting URL and extract accurate, specific information from the posting.

JOB POSTING URL:
{url}

Return a JSON object with exactly these fields:
{{
  "jobTitle": "exact job title from the posting",
  "companyName": "full company name",
  "jobDescription": "3-4 paragraph description of the role, its responsibilities and its impact",
  "requiredSkills": ["skill1", "skill2"],
  "preferredSkills": ["skill1", "skill2"],
  "experienceLevel": "entry|mid|senior|executive",
  "industries": ["industry1"],
  "responsibilities": ["responsibility1", "responsibility2"],
  "qualifications": ["qualification1", "qualification2"],
  "keywords": ["keyword1", "keyword2"]
}}

Use empty strings or empty arrays for information the posting does not contain.
Return only valid JSON:"""


def build_analysis_prompt(job_description: str, job_title: Optional[str] = None) -> str:
    """
    Build the user prompt for text job analysis.

    Args:
        job_description: Raw job posting text (truncated to MAX_JOB_TEXT_CHARS)
        job_title: Optional title shown to the model

    Returns:
        User prompt string for the LLM
    """
    return _USER_PROMPT_TEMPLATE.format(
        job_title=job_title or "Not specified",
        content=job_description[:MAX_JOB_TEXT_CHARS],
    )


# =============================================================================
# VALIDATION
# =============================================================================


def validate_job_url(url: str) -> bool:
    """
    Check that a job URL is safe to hand to the AI collaborator.

    Only http/https URLs are accepted; hostnames containing localhost, 127.0.0.1,
    internal, or admin are rejected.

    Example:
        >>> validate_job_url("https://jobs.example.com/123")
        True
        >>> validate_job_url("http://localhost:8080/admin")
        False
    """
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False

    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES:
        return False
    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return False
    return not any(fragment in hostname for fragment in BLOCKED_HOST_FRAGMENTS)


def _requirement_from_response(data: dict[str, Any], include_posting: bool = False) -> JobRequirement:
    """Validate a parsed analysis object field by field; never trusts its shape."""
    required = coerce_string_list(data.get("requiredSkills"))
    if not required:
        # URL analysis answers sometimes use a flat "skills" list
        required = coerce_string_list(data.get("skills"))

    industries = coerce_string_list(data.get("industries"))
    company_info = data.get("companyInfo")
    if not industries and isinstance(company_info, dict):
        industries = coerce_string_list(company_info.get("industry"))

    qualifications = coerce_string_list(data.get("qualifications"))
    if not qualifications:
        qualifications = coerce_string_list(data.get("requirements"))

    requirement = JobRequirement(
        required_skills=required,
        preferred_skills=coerce_string_list(data.get("preferredSkills")),
        experience_level=normalize_experience_level(data.get("experienceLevel")),
        industries=industries,
        responsibilities=coerce_string_list(data.get("responsibilities")),
        qualifications=qualifications,
        keywords=coerce_string_list(data.get("keywords")),
    )
    if include_posting:
        requirement.job_title = collapse_text(data.get("jobTitle"))
        requirement.company_name = collapse_text(data.get("companyName"))
        requirement.job_description = collapse_text(data.get("jobDescription"))
    return requirement


async def _run_analysis(
    provider: LLMProvider,
    user_prompt: str,
    source: str,
    include_posting: bool = False,
) -> JobRequirement:
    try:
        response = await provider.generate(system_prompt=_SYSTEM_PROMPT, user_prompt=user_prompt)
    except Exception as e:
        log_job_analysis_fallback(source, f"{provider.name} call failed: {e}")
        return JobRequirement.empty()

    parsed = parse_json_response(response.content)
    if not parsed.ok:
        _log_debug(f"Unparseable job analysis response: {response.content[:200]!r}")
        log_job_analysis_fallback(source, parsed.error)
        return JobRequirement.empty()

    requirement = _requirement_from_response(parsed.data, include_posting=include_posting)
    log_job_analysis_result(source, requirement, repaired=parsed.repaired)
    return requirement


# =============================================================================
# PUBLIC API
# =============================================================================


async def analyze_job_posting(
    job_description: str,
    job_title: Optional[str] = None,
    provider: Optional[LLMProvider] = None,
) -> JobRequirement:
    """
    Extract a JobRequirement from free-text job description.

    Args:
        job_description: Raw job posting text
        job_title: Optional job title for prompt context
        provider: AI collaborator; None means AI is unavailable

    Returns:
        JobRequirement (all-empty with experience_level="mid" on any failure)
    """
    if provider is None:
        log_job_analysis_fallback("text", "no AI provider configured")
        return JobRequirement.empty()
    if not job_description or not job_description.strip():
        log_job_analysis_fallback("text", "empty job description")
        return JobRequirement.empty()

    prompt = build_analysis_prompt(job_description, job_title)
    return await _run_analysis(provider, prompt, source="text")


async def analyze_job_from_url(url: str, provider: Optional[LLMProvider] = None) -> JobRequirement:
    """
    Ask the AI collaborator to read and analyze a job posting URL.

    The returned requirement also carries job_title, company_name and
    job_description when the collaborator supplies them.

    Args:
        url: Job posting URL (must pass validate_job_url)
        provider: AI collaborator; None means AI is unavailable

    Returns:
        JobRequirement (all-empty with experience_level="mid" on any failure)
    """
    if not validate_job_url(url):
        _log_warning(f"Rejected job URL: {url!r}")
        return JobRequirement.empty()
    if provider is None:
        log_job_analysis_fallback(url, "no AI provider configured")
        return JobRequirement.empty()

    prompt = _URL_PROMPT_TEMPLATE.format(url=json.dumps(url)[1:-1])
    return await _run_analysis(provider, prompt, source=url, include_posting=True)
