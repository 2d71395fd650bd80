"""Unit tests for AI-backed job analysis."""

import asyncio
import json

import pytest

from scribe.contexts.intake.job_analysis import (
    MAX_JOB_TEXT_CHARS,
    analyze_job_from_url,
    analyze_job_posting,
    build_analysis_prompt,
    normalize_experience_level,
    validate_job_url,
)
from scribe.contexts.intake.job_data_structure import JobRequirement

ANALYSIS = {
    "requiredSkills": ["Python", "SQL"],
    "preferredSkills": ["Rust"],
    "experienceLevel": "Senior",
    "industries": ["Fintech"],
    "responsibilities": ["Own backend services"],
    "qualifications": ["7+ years"],
    "keywords": ["APIs"],
}


def _assert_empty(requirement: JobRequirement):
    assert requirement.is_empty()
    assert requirement.experience_level == "mid"
    assert requirement.required_skills == []


@pytest.mark.unit
def test_analyze_job_posting(fake_provider, job_posting):
    """Test a well-formed analysis response becomes a JobRequirement."""
    provider = fake_provider(responses=[json.dumps(ANALYSIS)])
    requirement = asyncio.run(analyze_job_posting(job_posting, "Backend Engineer", provider=provider))

    assert requirement.required_skills == ["Python", "SQL"]
    assert requirement.preferred_skills == ["Rust"]
    assert requirement.skills == ["Python", "SQL", "Rust"]
    assert requirement.experience_level == "senior"
    assert requirement.keywords == ["APIs"]
    assert "JOB TITLE: Backend Engineer" in provider.calls[0][1]


@pytest.mark.unit
def test_analyze_job_posting_repairs_truncated_json(fake_provider, job_posting):
    """Test a truncated analysis response is repaired."""
    provider = fake_provider(responses=['```json\n{"requiredSkills": ["Go"], "experienceLevel": "entry",'])
    requirement = asyncio.run(analyze_job_posting(job_posting, provider=provider))

    assert requirement.required_skills == ["Go"]
    assert requirement.experience_level == "entry"


@pytest.mark.unit
def test_analyze_job_posting_validates_field_types(fake_provider, job_posting):
    """Test wrongly-typed fields are coerced or dropped instead of trusted."""
    response = json.dumps({"requiredSkills": "Python", "keywords": [None, "", {"a": 1}, "APIs"]})
    provider = fake_provider(responses=[response])
    requirement = asyncio.run(analyze_job_posting(job_posting, provider=provider))

    assert requirement.required_skills == ["Python"]
    assert requirement.keywords == ["APIs"]
    assert requirement.experience_level == "mid"


@pytest.mark.unit
@pytest.mark.parametrize(
    "provider_kwargs",
    [{"responses": ["not json"]}, {"responses": ['["a list"]']}, {"error": RuntimeError("boom")}],
)
def test_analysis_failures_return_empty_requirement(fake_provider, job_posting, provider_kwargs):
    """Test every failure mode yields the all-empty requirement with level mid."""
    provider = fake_provider(**provider_kwargs)
    _assert_empty(asyncio.run(analyze_job_posting(job_posting, provider=provider)))


@pytest.mark.unit
def test_analysis_without_provider(job_posting):
    """Test a missing provider yields the empty requirement."""
    _assert_empty(asyncio.run(analyze_job_posting(job_posting, provider=None)))


@pytest.mark.unit
def test_analysis_of_empty_text_skips_provider(fake_provider):
    """Test empty job text is not sent to the AI collaborator."""
    provider = fake_provider(responses=[json.dumps(ANALYSIS)])
    _assert_empty(asyncio.run(analyze_job_posting("   ", provider=provider)))
    assert provider.calls == []


@pytest.mark.unit
def test_prompt_truncates_job_text():
    """Test long job text is truncated in the prompt."""
    prompt = build_analysis_prompt("x" * (MAX_JOB_TEXT_CHARS + 500))
    assert "x" * MAX_JOB_TEXT_CHARS in prompt
    assert "x" * (MAX_JOB_TEXT_CHARS + 1) not in prompt


@pytest.mark.unit
@pytest.mark.parametrize(
    "url, valid",
    [
        ("https://jobs.example.com/123", True),
        ("http://careers.example.org/posting?id=7", True),
        ("ftp://jobs.example.com/123", False),
        ("http://localhost:8080/job", False),
        ("http://127.0.0.1/job", False),
        ("https://internal.example.com/job", False),
        ("https://admin.example.com/job", False),
        ("not a url", False),
        ("", False),
    ],
)
def test_validate_job_url(url, valid):
    """Test only public http(s) URLs are accepted."""
    assert validate_job_url(url) is valid


@pytest.mark.unit
def test_analyze_job_from_url(fake_provider):
    """Test URL analysis also carries title, company and description."""
    response = dict(
        ANALYSIS,
        jobTitle="Backend Engineer",
        companyName="Difference Corp",
        jobDescription="Build   payment\nservices.",
    )
    provider = fake_provider(responses=[json.dumps(response)])
    requirement = asyncio.run(analyze_job_from_url("https://jobs.example.com/1", provider=provider))

    assert requirement.job_title == "Backend Engineer"
    assert requirement.company_name == "Difference Corp"
    assert requirement.job_description == "Build payment services."
    assert requirement.to_dict()["companyName"] == "Difference Corp"


@pytest.mark.unit
def test_analyze_blocked_url_skips_provider(fake_provider):
    """Test a blocked URL never reaches the AI collaborator."""
    provider = fake_provider(responses=[json.dumps(ANALYSIS)])
    _assert_empty(asyncio.run(analyze_job_from_url("http://localhost/admin", provider=provider)))
    assert provider.calls == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("senior", "senior"),
        ("Entry-Level", "entry"),
        ("Lead", "senior"),
        ("director", "executive"),
        ("senior|executive", "senior"),
        ("astronaut", "mid"),
        (None, "mid"),
        (7, "mid"),
    ],
)
def test_normalize_experience_level(value, expected):
    """Test free-form levels map onto the four tiers."""
    assert normalize_experience_level(value) == expected


@pytest.mark.unit
def test_requirement_from_dict_validates_fields():
    """Test hand-written requirement mappings get the same field validation as AI answers."""
    requirement = JobRequirement.from_dict(
        {
            "requiredSkills": "Kubernetes",
            "preferredSkills": ["Go", None, "", ["nested"]],
            "experienceLevel": "Senior",
            "keywords": None,
            "companyName": "  Difference   Corp ",
            "jobTitle": "   ",
        }
    )

    assert requirement.required_skills == ["Kubernetes"]
    assert requirement.preferred_skills == ["Go"]
    assert requirement.experience_level == "senior"
    assert requirement.keywords == []
    assert requirement.company_name == "Difference Corp"
    assert requirement.job_title is None


@pytest.mark.unit
def test_requirement_from_dict_unknown_level():
    """Test an unrecognized level in a requirement mapping becomes mid."""
    assert JobRequirement.from_dict({"experienceLevel": "wizard"}).experience_level == "mid"
